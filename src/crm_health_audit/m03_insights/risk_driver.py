"""
🎯 Module: risk_driver.py

Derives the single "primary risk driver" sentence for an audit.

The driver is chosen by an ordered chain of rules. Each rule pairs a
predicate over the finished signal set with a formatter; the first rule
whose predicate matches produces the sentence:

1. compounding_forecast_failure — two or more deal signals that are both
   critical and high severity. Reports their rounded average.
2. single_forecast_failure — exactly one such deal signal.
3. worst_high_severity — any high-severity signal; the largest value wins,
   ties go to the earlier signal.
4. acceptable — fallback when nothing is high.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from crm_health_audit.m00_utils.audit_models import SignalResult
from crm_health_audit.m01_signals.signal_registry import (
    Criticality,
    ObjectType,
    Severity,
    object_type_for_key,
)
from crm_health_audit.m02_scoring.severity import round_half_up

ACCEPTABLE_DRIVER = "Data quality is acceptable. Minor improvements recommended."


@dataclass(frozen=True)
class RiskDriverRule:
    name: str
    predicate: Callable[[Sequence[SignalResult]], bool]
    formatter: Callable[[Sequence[SignalResult]], str]


def _critical_deal_failures(signals: Sequence[SignalResult]) -> list[SignalResult]:
    return [
        s
        for s in signals
        if s.criticality == Criticality.CRITICAL
        and s.severity == Severity.HIGH
        and object_type_for_key(s.key) == ObjectType.DEALS
    ]


def _high_severity(signals: Sequence[SignalResult]) -> list[SignalResult]:
    return [s for s in signals if s.severity == Severity.HIGH]


def _format_compounding(signals: Sequence[SignalResult]) -> str:
    failures = _critical_deal_failures(signals)
    avg_value = round_half_up(sum(s.value for s in failures) / len(failures))
    return (
        f"Forecast integrity is compromised: {avg_value}% of deals lack critical "
        "forecasting fields (close date, amount), making revenue projections unreliable."
    )


def _format_single(signals: Sequence[SignalResult]) -> str:
    failure = _critical_deal_failures(signals)[0]
    return (
        f"{failure.label}: {round_half_up(failure.value)}% of deals affected. "
        f"{failure.impacts[0]}."
    )


def _format_worst(signals: Sequence[SignalResult]) -> str:
    # sorted() is stable, so equal values keep signal order
    worst = sorted(_high_severity(signals), key=lambda s: s.value, reverse=True)[0]
    return f"{worst.label}: {round_half_up(worst.value)}% missing. {worst.impacts[0]}."


RISK_DRIVER_RULES: tuple[RiskDriverRule, ...] = (
    RiskDriverRule(
        "compounding_forecast_failure",
        lambda signals: len(_critical_deal_failures(signals)) >= 2,
        _format_compounding,
    ),
    RiskDriverRule(
        "single_forecast_failure",
        lambda signals: len(_critical_deal_failures(signals)) == 1,
        _format_single,
    ),
    RiskDriverRule(
        "worst_high_severity",
        lambda signals: bool(_high_severity(signals)),
        _format_worst,
    ),
    RiskDriverRule("acceptable", lambda signals: True, lambda signals: ACCEPTABLE_DRIVER),
)


def match_risk_driver_rule(
    signals: Sequence[SignalResult],
    rules: Sequence[RiskDriverRule] = RISK_DRIVER_RULES,
) -> RiskDriverRule:
    """Return the first rule whose predicate holds for the signal set."""
    for rule in rules:
        if rule.predicate(signals):
            return rule
    return RISK_DRIVER_RULES[-1]


def derive_primary_risk_driver(signals: Sequence[SignalResult]) -> str:
    """Select and format the primary risk driver sentence."""
    return match_risk_driver_rule(signals).formatter(signals)
