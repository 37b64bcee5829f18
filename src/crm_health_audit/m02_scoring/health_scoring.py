"""
🩺 Module: health_scoring.py

Scoring aggregator for the CRM health audit.

Runs the missingness calculator and severity classifier across the fixed
signal rule table, then turns the resulting signal set into:
- a criticality-weighted total penalty,
- an overall 0-100 health score with the "truly broken" override and floor,
- an overall severity tier.

Pure functions only: no I/O, no logging, no shared state.
"""

from collections.abc import Iterable, Sequence

from crm_health_audit.m00_utils.audit_models import SignalResult
from crm_health_audit.m01_signals.missingness import calculate_missing_any_pct
from crm_health_audit.m01_signals.signal_registry import (
    Criticality,
    ObjectType,
    Severity,
    get_signal_definition,
)
from crm_health_audit.m01_signals.signal_rules import SIGNAL_RULES, SignalRule
from crm_health_audit.m02_scoring.severity import classify_severity, severity_penalty

SCORE_FLOOR = 10


def build_signal_result(key: str, value: float) -> SignalResult | None:
    """Package a computed percentage as a SignalResult; None if the key is unregistered."""
    definition = get_signal_definition(key)
    if definition is None:
        return None
    return SignalResult(
        key=key,
        label=definition.label,
        value=value,
        severity=classify_severity(value, definition.criticality),
        criticality=definition.criticality,
        impacts=definition.impacts,
    )


def compute_signals(
    contacts: Iterable | None,
    companies: Iterable | None,
    deals: Iterable | None,
    rules: Sequence[SignalRule] = SIGNAL_RULES,
) -> list[SignalResult]:
    """
    Evaluates every signal rule against its record collection.

    Args:
        contacts, companies, deals: Record collections (None is treated as empty).
        rules: Signal rules to execute, in output order.

    Returns:
        list[SignalResult]: One result per registered rule key, in rule order.
    """
    collections = {
        ObjectType.CONTACTS: list(contacts or []),
        ObjectType.COMPANIES: list(companies or []),
        ObjectType.DEALS: list(deals or []),
    }
    results = []
    for rule in rules:
        value = calculate_missing_any_pct(collections[rule.object_type], rule.properties)
        result = build_signal_result(rule.key, value)
        if result is not None:
            results.append(result)
    return results


def total_penalty(signals: Iterable[SignalResult]) -> int:
    return sum(severity_penalty(s.severity, s.criticality) for s in signals)


def compute_overall_score(signals: Sequence[SignalResult], deals_count: int) -> int:
    """
    Derives the 0-100 health score from the penalty total.

    Zero deals, or every signal at high severity, forces 0. Otherwise the
    score never drops below SCORE_FLOOR.
    """
    score = 100 - total_penalty(signals)
    truly_broken = deals_count == 0 or all(s.severity == Severity.HIGH for s in signals)
    if truly_broken:
        return 0
    if score < SCORE_FLOOR:
        return SCORE_FLOOR
    return round(score)


def compute_overall_severity(signals: Sequence[SignalResult]) -> Severity:
    """Two-signal vote for medium/high; any failing critical signal forces high."""
    high_count = sum(1 for s in signals if s.severity == Severity.HIGH)
    medium_count = sum(1 for s in signals if s.severity == Severity.MEDIUM)

    overall = Severity.LOW
    if medium_count >= 2:
        overall = Severity.MEDIUM
    if high_count >= 2:
        overall = Severity.HIGH
    if any(s.criticality == Criticality.CRITICAL and s.severity == Severity.HIGH for s in signals):
        overall = Severity.HIGH
    return overall
