"""
audit_models.py — Pydantic models for the audit output contract.

Every model is frozen: results are built once per audit run and never
mutated afterwards. ``AuditResult.to_json_dict()`` produces the plain
JSON-compatible tree consumed by reports, the MCP server, and the
narrative briefing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from crm_health_audit.m01_signals.signal_registry import Criticality, Severity


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class SignalResult(_FrozenModel):
    key: str
    label: str
    value: float = Field(ge=0.0, le=100.0, description="Missing percentage.")
    severity: Severity
    criticality: Criticality
    impacts: tuple[str, ...]


class OverallHealth(_FrozenModel):
    score: int = Field(ge=0, le=100)
    severity: Severity
    primary_risk_driver: str


class ActionRecommendation(_FrozenModel):
    priority: int = Field(ge=1)
    action: str
    signal_key: str
    why: str
    effort: Literal["low", "medium", "high"]
    time_to_value_days: int
    owner_role: str
    impacts: tuple[str, ...] = Field(max_length=2)
    criticality: Criticality
    severity: Severity
    tier: Literal["primary", "secondary"]


class SignalsByObject(_FrozenModel):
    deals: tuple[SignalResult, ...] = ()
    companies: tuple[SignalResult, ...] = ()
    contacts: tuple[SignalResult, ...] = ()


class AuditMetadata(_FrozenModel):
    contacts_count: int
    companies_count: int
    deals_count: int
    generated_at: str = Field(description="ISO-8601 UTC timestamp.")


class AuditResult(_FrozenModel):
    overall_health: OverallHealth
    signals: tuple[SignalResult, ...]
    signals_by_object: SignalsByObject
    prioritized_actions: tuple[ActionRecommendation, ...]
    metadata: AuditMetadata

    def to_json_dict(self) -> dict:
        """Plain dict/list/str/number tree with snake_case keys."""
        return self.model_dump(mode="json")
