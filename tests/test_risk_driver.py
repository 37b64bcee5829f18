"""
test_risk_driver.py — Primary risk driver rule chain.
"""

from crm_health_audit.m01_signals.signal_registry import SIGNAL_REGISTRY
from crm_health_audit.m02_scoring.health_scoring import build_signal_result
from crm_health_audit.m03_insights.risk_driver import (
    ACCEPTABLE_DRIVER,
    RISK_DRIVER_RULES,
    derive_primary_risk_driver,
    match_risk_driver_rule,
)


def _signals(**values):
    return [build_signal_result(key, values.get(key, 0.0)) for key in SIGNAL_REGISTRY]


def test_rule_chain_order():
    """Rules are evaluated from compounding failure down to the fallback."""
    assert [r.name for r in RISK_DRIVER_RULES] == [
        "compounding_forecast_failure",
        "single_forecast_failure",
        "worst_high_severity",
        "acceptable",
    ]


def test_compounding_forecast_failure_reports_average():
    """Two failing critical deal signals report their rounded average."""
    signals = _signals(deals_missing_close_date_pct=50.0, deals_missing_amount_pct=40.0)
    assert match_risk_driver_rule(signals).name == "compounding_forecast_failure"
    assert derive_primary_risk_driver(signals) == (
        "Forecast integrity is compromised: 45% of deals lack critical forecasting fields "
        "(close date, amount), making revenue projections unreliable."
    )


def test_compounding_outranks_worse_non_critical_signal():
    """Compounding deal failures win even when another signal is larger."""
    signals = _signals(
        contacts_missing_email_pct=95.0,
        deals_missing_close_date_pct=35.0,
        deals_missing_pipeline_or_stage_pct=36.0,
    )
    assert match_risk_driver_rule(signals).name == "compounding_forecast_failure"


def test_single_forecast_failure():
    """One failing critical deal signal reports its value and first impact."""
    signals = _signals(deals_missing_close_date_pct=50.0, contacts_missing_email_pct=90.0)
    assert derive_primary_risk_driver(signals) == (
        "Deals Missing Close Date: 50% of deals affected. Forecast accuracy is fundamentally unreliable."
    )


def test_worst_high_severity_tie_keeps_registry_order():
    """Equal values resolve to the signal that comes first."""
    signals = _signals(contacts_missing_email_pct=40.0, companies_missing_domain_pct=40.0)
    assert derive_primary_risk_driver(signals) == (
        "Contacts Missing Email: 40% missing. Cannot identify returning visitors."
    )


def test_worst_high_severity_picks_largest_value():
    """The largest high-severity value is reported, rounded half up."""
    signals = _signals(contacts_missing_email_pct=40.0, companies_missing_industry_pct=62.5)
    assert derive_primary_risk_driver(signals) == (
        "Companies Missing Industry: 63% missing. ICP (Ideal Customer Profile) analysis unavailable."
    )


def test_acceptable_when_nothing_is_high():
    """Medium and low signals fall through to the fallback sentence."""
    signals = _signals(contacts_missing_email_pct=20.0)
    assert derive_primary_risk_driver(signals) == ACCEPTABLE_DRIVER
    assert derive_primary_risk_driver([]) == ACCEPTABLE_DRIVER
