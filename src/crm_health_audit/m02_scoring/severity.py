"""
⚖️ Module: severity.py

Maps a missingness percentage and a criticality tier to a severity tier,
and converts severities into score penalties.

Thresholds:
- above 30% -> high
- above 10% -> medium
- otherwise -> low

A critical signal above 30% is always high. Criticality can only raise a
signal to high at the same 30% boundary; it never lowers severity and
never moves the medium/low boundary.
"""

import math

from crm_health_audit.m01_signals.signal_registry import Criticality, Severity

HIGH_THRESHOLD_PCT = 30
MEDIUM_THRESHOLD_PCT = 10

SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.HIGH: 30,
    Severity.MEDIUM: 15,
    Severity.LOW: 5,
}
CRITICAL_PENALTY_WEIGHT = 2


def classify_severity(pct: float, criticality: Criticality) -> Severity:
    """Return the severity tier for a missing percentage at a given criticality."""
    if criticality == Criticality.CRITICAL and pct > HIGH_THRESHOLD_PCT:
        return Severity.HIGH
    if pct > HIGH_THRESHOLD_PCT:
        return Severity.HIGH
    if pct > MEDIUM_THRESHOLD_PCT:
        return Severity.MEDIUM
    return Severity.LOW


def severity_penalty(severity: Severity, criticality: Criticality) -> int:
    """Penalty points for one signal; critical signals count double."""
    weight = CRITICAL_PENALTY_WEIGHT if criticality == Criticality.CRITICAL else 1
    return SEVERITY_PENALTIES[severity] * weight


def round_half_up(value: float) -> int:
    # 12.5 -> 13, matching how reports have always shown percentages
    return int(math.floor(value + 0.5))
