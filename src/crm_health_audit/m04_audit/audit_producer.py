"""
✅ Module: audit_producer.py

Core producer for the CRM health audit.

Responsibilities:
- Computes the seven missingness signals from the three record collections
- Aggregates them into the overall health score and severity
- Derives the primary risk driver and the prioritized action plan
- Groups signals by object type for presentation

Outputs:
- A frozen AuditResult, rebuilt from scratch on every call

This module performs no I/O and does not log; the pipeline runner and the
MCP tool handle loading, exporting, and display. Identical inputs always
produce identical results apart from ``metadata.generated_at``.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from crm_health_audit.m00_utils.audit_models import (
    AuditMetadata,
    AuditResult,
    OverallHealth,
    SignalResult,
    SignalsByObject,
)
from crm_health_audit.m01_signals.signal_registry import ObjectType, object_type_for_key
from crm_health_audit.m02_scoring.health_scoring import (
    compute_overall_score,
    compute_overall_severity,
    compute_signals,
)
from crm_health_audit.m03_insights.prioritize_actions import prioritize_actions
from crm_health_audit.m03_insights.risk_driver import derive_primary_risk_driver


def group_signals_by_object(signals: Sequence[SignalResult]) -> SignalsByObject:
    """Partition signals into deals/companies/contacts buckets by key prefix."""
    buckets: dict[str, list[SignalResult]] = {t.value: [] for t in ObjectType}
    for signal in signals:
        object_type = object_type_for_key(signal.key)
        if object_type is not None:
            buckets[object_type.value].append(signal)
    return SignalsByObject(**{name: tuple(items) for name, items in buckets.items()})


def format_generated_at(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing 'Z'."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def run_audit(
    contacts: Iterable | None,
    companies: Iterable | None,
    deals: Iterable | None,
    generated_at: datetime | None = None,
) -> AuditResult:
    """
    Runs the full deterministic audit over three record collections.

    Args:
        contacts, companies, deals: Record collections; None counts as empty.
        generated_at (datetime, optional): Timestamp to stamp on the metadata.
            Defaults to the current UTC time.

    Returns:
        AuditResult: Overall health, signals, grouped signals, ranked actions,
        and run metadata.
    """
    contacts = list(contacts or [])
    companies = list(companies or [])
    deals = list(deals or [])

    signals = compute_signals(contacts, companies, deals)

    overall_health = OverallHealth(
        score=compute_overall_score(signals, deals_count=len(deals)),
        severity=compute_overall_severity(signals),
        primary_risk_driver=derive_primary_risk_driver(signals),
    )

    return AuditResult(
        overall_health=overall_health,
        signals=tuple(signals),
        signals_by_object=group_signals_by_object(signals),
        prioritized_actions=tuple(prioritize_actions(signals)),
        metadata=AuditMetadata(
            contacts_count=len(contacts),
            companies_count=len(companies),
            deals_count=len(deals),
            generated_at=format_generated_at(generated_at or datetime.now(timezone.utc)),
        ),
    )
