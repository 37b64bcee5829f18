"""
test_prioritize_actions.py — Remediation ranking, tiers and 'why' text.
"""

from crm_health_audit.m00_utils.audit_models import SignalResult
from crm_health_audit.m01_signals.signal_registry import SIGNAL_REGISTRY, Criticality, Severity
from crm_health_audit.m02_scoring.health_scoring import build_signal_result
from crm_health_audit.m03_insights.action_catalog import ACTION_CATALOG
from crm_health_audit.m03_insights.prioritize_actions import normalize_label, prioritize_actions


def _signals(**values):
    return [build_signal_result(key, values.get(key, 0.0)) for key in SIGNAL_REGISTRY]


def test_catalog_covers_every_signal_with_unique_weights():
    """Each registered signal has exactly one template and weights never tie."""
    assert set(ACTION_CATALOG) == set(SIGNAL_REGISTRY)
    weights = [t.order_weight for t in ACTION_CATALOG.values()]
    assert len(set(weights)) == len(weights)


def test_low_severity_signals_are_not_actionable():
    """Clean data produces no actions."""
    assert prioritize_actions(_signals()) == []


def test_ordering_by_weight_and_high_boost():
    """High severity adds 10 to the order weight; medium leaves it unchanged."""
    signals = _signals(
        contacts_missing_email_pct=40.0,
        contacts_missing_lifecycle_pct=5.0,
        companies_missing_industry_pct=20.0,
        deals_missing_close_date_pct=50.0,
        deals_missing_amount_pct=20.0,
    )
    actions = prioritize_actions(signals)
    assert [a.signal_key for a in actions] == [
        "deals_missing_close_date_pct",
        "deals_missing_amount_pct",
        "contacts_missing_email_pct",
        "companies_missing_industry_pct",
    ]
    assert [a.priority for a in actions] == [1, 2, 3, 4]
    assert all(a.tier == "primary" for a in actions)


def test_equal_scores_keep_signal_order():
    """A high email signal and a medium domain signal both score 60; input order wins."""
    signals = _signals(contacts_missing_email_pct=40.0, companies_missing_domain_pct=20.0)
    actions = prioritize_actions(signals)
    assert [a.signal_key for a in actions] == [
        "contacts_missing_email_pct",
        "companies_missing_domain_pct",
    ]


def test_dense_priorities_and_secondary_tier():
    """Seven actionable signals rank 1..7 and the last two are secondary."""
    signals = _signals(**{key: 50.0 for key in SIGNAL_REGISTRY})
    actions = prioritize_actions(signals)
    assert [a.priority for a in actions] == list(range(1, 8))
    assert [a.tier for a in actions] == ["primary"] * 5 + ["secondary"] * 2
    assert actions[0].action == "Enforce required Close Date on all deals"
    assert actions[-1].signal_key == "companies_missing_industry_pct"


def test_action_fields():
    """The why sentence, impacts cap and template fields are filled in."""
    actions = prioritize_actions(_signals(deals_missing_close_date_pct=50.0))
    assert len(actions) == 1
    action = actions[0]
    assert action.why == "50% of deals close date affected. Forecast accuracy is fundamentally unreliable."
    assert action.impacts == (
        "Forecast accuracy is fundamentally unreliable",
        "Revenue projections cannot be trusted",
    )
    assert action.owner_role == "Sales Ops"
    assert action.effort == "low"
    assert action.time_to_value_days == 7
    assert action.criticality == Criticality.CRITICAL
    assert action.severity == Severity.HIGH


def test_signal_without_template_is_skipped():
    """A signal with no catalog entry never crashes the prioritizer."""
    orphan = SignalResult(
        key="deals_missing_owner_pct",
        label="Deals Missing Owner",
        value=90.0,
        severity=Severity.HIGH,
        criticality=Criticality.HIGH,
        impacts=("Nobody follows up",),
    )
    actions = prioritize_actions([orphan, build_signal_result("deals_missing_amount_pct", 40.0)])
    assert [a.signal_key for a in actions] == ["deals_missing_amount_pct"]
    assert actions[0].priority == 1


def test_normalize_label():
    """Only the first 'missing ' is dropped and text is lowercased."""
    assert normalize_label("Contacts Missing Lifecycle Stage") == "contacts lifecycle stage"
    assert normalize_label("Deals Missing Pipeline/Stage") == "deals pipeline/stage"
