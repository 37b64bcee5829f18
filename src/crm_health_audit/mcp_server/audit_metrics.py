"""Running tallies of tool calls and audit outcomes, reported on /health."""

import threading
import time
from collections import Counter

from crm_health_audit.mcp_server.audit_tools import ToolOutcome


class AuditMetrics:
    """
    Thread-safe counters kept in memory for the life of the server.

    Only the audit outcome (score and overall severity) is kept. Record
    payloads are never stored.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._started_at = time.monotonic()
        self._calls: Counter[str] = Counter()
        self._failures: Counter[str] = Counter()
        self._severities: Counter[str] = Counter()
        self._score_total = 0
        self._last_score: int | None = None
        self._call_ms_total = 0.0

    def observe(self, outcome: ToolOutcome, elapsed_ms: float) -> None:
        with self._lock:
            self._calls[outcome.tool] += 1
            self._call_ms_total += max(elapsed_ms, 0.0)
            if outcome.failed:
                self._failures[outcome.tool] += 1
            elif outcome.health_score is not None:
                self._severities[outcome.severity] += 1
                self._score_total += outcome.health_score
                self._last_score = outcome.health_score

    def snapshot(self) -> dict:
        with self._lock:
            calls = sum(self._calls.values())
            audits = sum(self._severities.values())
            return {
                "uptime_sec": int(time.monotonic() - self._started_at),
                "tool_calls": dict(self._calls),
                "tool_failures": dict(self._failures),
                "mean_call_ms": round(self._call_ms_total / calls, 2) if calls else 0.0,
                "audits": {
                    "total": audits,
                    "by_severity": dict(self._severities),
                    "mean_health_score": round(self._score_total / audits, 1) if audits else None,
                    "last_health_score": self._last_score,
                },
            }
