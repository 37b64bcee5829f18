"""
Remediation templates for every audit signal.

order_weight encodes domain priority: revenue forecasting fields first,
then sales process, funnel visibility, enrichment, attribution, and
segmentation last. Weights are unique so ordering never depends on ties.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

Effort = Literal["low", "medium", "high"]


@dataclass(frozen=True)
class ActionTemplate:
    action: str
    effort: Effort
    time_to_value_days: int
    domain: str
    owner_role: str
    order_weight: int


ACTION_CATALOG: MappingProxyType = MappingProxyType(
    {
        "deals_missing_close_date_pct": ActionTemplate(
            action="Enforce required Close Date on all deals",
            effort="low",
            time_to_value_days=7,
            domain="revenue_forecasting",
            owner_role="Sales Ops",
            order_weight=100,
        ),
        "deals_missing_amount_pct": ActionTemplate(
            action="Enforce required Amount field on all deals",
            effort="low",
            time_to_value_days=7,
            domain="revenue_forecasting",
            owner_role="Sales Ops",
            order_weight=99,
        ),
        # Pipeline discipline comes before lifecycle stages
        "deals_missing_pipeline_or_stage_pct": ActionTemplate(
            action="Standardize deal pipeline and stage enforcement",
            effort="low",
            time_to_value_days=7,
            domain="sales_process",
            owner_role="Sales Ops",
            order_weight=98,
        ),
        "contacts_missing_lifecycle_pct": ActionTemplate(
            action="Mandate lifecycle stage assignment on contacts",
            effort="medium",
            time_to_value_days=21,
            domain="funnel_visibility",
            owner_role="RevOps",
            order_weight=80,
        ),
        "companies_missing_domain_pct": ActionTemplate(
            action="Enable automatic company domain enrichment",
            effort="low",
            time_to_value_days=7,
            domain="data_enrichment",
            owner_role="RevOps",
            order_weight=60,
        ),
        "contacts_missing_email_pct": ActionTemplate(
            action="Implement email validation workflow for new contacts",
            effort="medium",
            time_to_value_days=14,
            domain="marketing_attribution",
            owner_role="Marketing Ops",
            order_weight=50,
        ),
        "companies_missing_industry_pct": ActionTemplate(
            action="Add industry classification via enrichment or manual process",
            effort="medium",
            time_to_value_days=30,
            domain="segmentation",
            owner_role="Marketing Ops",
            order_weight=40,
        ),
    }
)


def get_action_template(signal_key: str) -> ActionTemplate | None:
    return ACTION_CATALOG.get(signal_key)
