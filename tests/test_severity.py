"""
test_severity.py — Severity thresholds, escalation and penalties.
"""

import pytest

from crm_health_audit.m01_signals.signal_registry import Criticality, Severity
from crm_health_audit.m02_scoring.severity import (
    classify_severity,
    round_half_up,
    severity_penalty,
)


@pytest.mark.parametrize(
    "pct,criticality,expected",
    [
        (0, Criticality.MEDIUM, Severity.LOW),
        (10, Criticality.HIGH, Severity.LOW),
        (10.01, Criticality.HIGH, Severity.MEDIUM),
        (30, Criticality.MEDIUM, Severity.MEDIUM),
        (30, Criticality.CRITICAL, Severity.MEDIUM),
        (30.5, Criticality.MEDIUM, Severity.HIGH),
        (50, Criticality.CRITICAL, Severity.HIGH),
        (5, Criticality.CRITICAL, Severity.LOW),
    ],
)
def test_classify_severity_boundaries(pct, criticality, expected):
    """Thresholds are strict: exactly 10% is low and exactly 30% is medium."""
    assert classify_severity(pct, criticality) == expected


def test_critical_penalty_is_doubled():
    """Critical signals weigh twice as much in the score."""
    assert severity_penalty(Severity.HIGH, Criticality.CRITICAL) == 60
    assert severity_penalty(Severity.HIGH, Criticality.HIGH) == 30
    assert severity_penalty(Severity.MEDIUM, Criticality.MEDIUM) == 15
    assert severity_penalty(Severity.LOW, Criticality.CRITICAL) == 10


def test_round_half_up():
    """Halves round away from zero for positive percentages."""
    assert round_half_up(12.5) == 13
    assert round_half_up(2.5) == 3
    assert round_half_up(33.333) == 33
