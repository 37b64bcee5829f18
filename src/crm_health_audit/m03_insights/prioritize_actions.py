"""
📋 Module: prioritize_actions.py

Turns triggered signals into a ranked remediation plan.

Steps:
- Drop low-severity signals (not actionable).
- Score each remaining signal that has a catalog template:
  order_weight, plus 10 when severity is high. Medium never changes order.
- Sort by score descending. Python's sort is stable, so equal scores keep
  signal order.
- Assign dense 1-based priorities; the top five are the "primary" tier.

Signals without a catalog template are skipped.
"""

from collections.abc import Sequence

from crm_health_audit.m00_utils.audit_models import ActionRecommendation, SignalResult
from crm_health_audit.m01_signals.signal_registry import Severity
from crm_health_audit.m02_scoring.severity import round_half_up
from crm_health_audit.m03_insights.action_catalog import ActionTemplate, get_action_template

HIGH_SEVERITY_BOOST = 10
PRIMARY_TIER_SIZE = 5


def normalize_label(label: str) -> str:
    """'Deals Missing Close Date' -> 'deals close date'."""
    return label.lower().replace("missing ", "", 1).replace(" pct", "", 1)


def build_why(signal: SignalResult) -> str:
    return (
        f"{round_half_up(signal.value)}% of {normalize_label(signal.label)} affected. "
        f"{signal.impacts[0]}."
    )


def action_score(signal: SignalResult, template: ActionTemplate) -> int:
    boost = HIGH_SEVERITY_BOOST if signal.severity == Severity.HIGH else 0
    return template.order_weight + boost


def tier_for_priority(priority: int) -> str:
    return "primary" if priority <= PRIMARY_TIER_SIZE else "secondary"


def prioritize_actions(signals: Sequence[SignalResult]) -> list[ActionRecommendation]:
    """
    Builds the ordered list of remediation actions for a signal set.

    Args:
        signals: Finished SignalResults, in registry order.

    Returns:
        list[ActionRecommendation]: Ranked actions with priorities 1..N.
    """
    scored = []
    for signal in signals:
        if signal.severity == Severity.LOW:
            continue
        template = get_action_template(signal.key)
        if template is None:
            continue
        scored.append((action_score(signal, template), signal, template))

    scored.sort(key=lambda item: item[0], reverse=True)

    actions = []
    for priority, (_, signal, template) in enumerate(scored, start=1):
        actions.append(
            ActionRecommendation(
                priority=priority,
                action=template.action,
                signal_key=signal.key,
                why=build_why(signal),
                effort=template.effort,
                time_to_value_days=template.time_to_value_days,
                owner_role=template.owner_role,
                impacts=signal.impacts[:2],
                criticality=signal.criticality,
                severity=signal.severity,
                tier=tier_for_priority(priority),
            )
        )
    return actions
