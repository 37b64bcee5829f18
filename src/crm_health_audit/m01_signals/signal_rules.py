"""
Fixed execution table for the seven audit signals.

Each SignalRule names the record collection it reads and the properties it
checks. Rules with any_of=True count a record as missing when ANY of the
listed properties is missing (the pipeline-or-stage signal).
"""

from dataclasses import dataclass

from crm_health_audit.m01_signals.signal_registry import ObjectType


@dataclass(frozen=True)
class SignalRule:
    key: str
    object_type: ObjectType
    properties: tuple[str, ...]
    any_of: bool = False


SIGNAL_RULES: tuple[SignalRule, ...] = (
    SignalRule("contacts_missing_email_pct", ObjectType.CONTACTS, ("email",)),
    SignalRule("contacts_missing_lifecycle_pct", ObjectType.CONTACTS, ("lifecyclestage",)),
    SignalRule("companies_missing_domain_pct", ObjectType.COMPANIES, ("domain",)),
    SignalRule("companies_missing_industry_pct", ObjectType.COMPANIES, ("industry",)),
    SignalRule("deals_missing_close_date_pct", ObjectType.DEALS, ("closedate",)),
    SignalRule("deals_missing_amount_pct", ObjectType.DEALS, ("amount",)),
    SignalRule(
        "deals_missing_pipeline_or_stage_pct",
        ObjectType.DEALS,
        ("dealstage", "pipeline"),
        any_of=True,
    ),
)

# Properties each collection must expose for a complete audit.
REQUIRED_PROPERTIES: dict[ObjectType, list[str]] = {
    object_type: [p for rule in SIGNAL_RULES if rule.object_type == object_type for p in rule.properties]
    for object_type in ObjectType
}
