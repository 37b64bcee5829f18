"""
📚 Module: signal_registry.py

Single source of truth for every CRM audit signal.

Each signal key maps to exactly one SignalDefinition carrying its display
label, criticality tier, business domain, and ordered impact statements.
Nothing downstream may invent a signal or an impact: any key that is not
registered here is dropped by the scoring and insight stages.

The registry is read-only for the lifetime of the process.
"""

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType


class Criticality(StrEnum):
    """Static importance tier assigned to a signal by the registry."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class Severity(StrEnum):
    """Computed risk tier for a signal's measured value."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ObjectType(StrEnum):
    """The three CRM record collections an audit consumes."""

    CONTACTS = "contacts"
    COMPANIES = "companies"
    DEALS = "deals"


@dataclass(frozen=True)
class SignalDefinition:
    key: str
    label: str
    criticality: Criticality
    domain: str
    impacts: tuple[str, ...]


_DEFINITIONS = (
    # --- Contacts ---
    SignalDefinition(
        key="contacts_missing_email_pct",
        label="Contacts Missing Email",
        criticality=Criticality.HIGH,
        domain="marketing_attribution",
        impacts=(
            "Cannot identify returning visitors",
            "Attribution reporting will be incomplete",
            "Marketing automation emails will fail",
        ),
    ),
    SignalDefinition(
        key="contacts_missing_lifecycle_pct",
        label="Contacts Missing Lifecycle Stage",
        criticality=Criticality.HIGH,
        domain="funnel_visibility",
        impacts=(
            "Funnel conversion rates cannot be calculated",
            "Leads may get stuck in limbo without clear ownership",
            "Marketing cannot segment by buying stage",
        ),
    ),
    # --- Companies ---
    SignalDefinition(
        key="companies_missing_domain_pct",
        label="Companies Missing Domain Name",
        criticality=Criticality.HIGH,
        domain="data_enrichment",
        impacts=(
            "Automatic association of contacts to companies will fail",
            "De-duplication logic is compromised",
            "Third-party enrichment tools cannot function",
        ),
    ),
    SignalDefinition(
        key="companies_missing_industry_pct",
        label="Companies Missing Industry",
        criticality=Criticality.MEDIUM,
        domain="segmentation",
        impacts=(
            "ICP (Ideal Customer Profile) analysis unavailable",
            "Account segmentation for ABM is impossible",
            "Strategic reporting by vertical is compromised",
        ),
    ),
    # --- Deals ---
    SignalDefinition(
        key="deals_missing_close_date_pct",
        label="Deals Missing Close Date",
        criticality=Criticality.CRITICAL,
        domain="revenue_forecasting",
        impacts=(
            "Forecast accuracy is fundamentally unreliable",
            "Revenue projections cannot be trusted",
            "Sales velocity metrics will be incorrect",
        ),
    ),
    SignalDefinition(
        key="deals_missing_amount_pct",
        label="Deals Missing Amount",
        criticality=Criticality.CRITICAL,
        domain="revenue_forecasting",
        impacts=(
            "Total pipeline value is underreported",
            "Win rates by value cannot be calculated",
            "Rep quota attainment tracking is broken",
        ),
    ),
    SignalDefinition(
        key="deals_missing_pipeline_or_stage_pct",
        label="Deals Missing Pipeline/Stage",
        criticality=Criticality.CRITICAL,
        domain="sales_process",
        impacts=(
            "Deals are invisible in the board view",
            "Sales process adherence cannot be verified",
            "Conversion rates between stages are calculable",
        ),
    ),
)

# Registry order is the canonical signal order used for stable tie-breaks.
SIGNAL_REGISTRY: MappingProxyType = MappingProxyType({d.key: d for d in _DEFINITIONS})


def get_signal_definition(key: str) -> SignalDefinition | None:
    """Return the registered definition for a key, or None if unregistered."""
    return SIGNAL_REGISTRY.get(key)


def object_type_for_key(key: str) -> ObjectType | None:
    """Resolve the record collection a signal key belongs to from its prefix."""
    for object_type in ObjectType:
        if key.startswith(f"{object_type.value}_"):
            return object_type
    return None
