"""
audit_tools.py — The two tools the CRM audit server exposes.

- crm_audit:    run the deterministic audit over inline records or input files
- list_signals: describe the audited signals and the remediation each triggers

Transports call ``call_tool``; it always returns a ToolOutcome and turns a
failed run into an ``{"status": "error", ...}`` payload with a short hint.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable

from pydantic import ValidationError

from crm_health_audit.m01_signals.signal_registry import SIGNAL_REGISTRY, object_type_for_key
from crm_health_audit.m03_insights.action_catalog import get_action_template
from crm_health_audit.m04_audit.run_audit_pipeline import DEFAULT_PATHS, run_audit_pipeline
from crm_health_audit.m05_briefing.narrative_brief import build_narrative_input
from crm_health_audit.mcp_server.config_models import AuditRunConfig
from crm_health_audit.mcp_server.schemas import AuditResponse, SignalCatalogResponse, audit_input_schema

logger = logging.getLogger("crm_health_audit.mcp_server")

STATUS_BY_SEVERITY = {"low": "pass", "medium": "warn", "high": "fail"}
DEFAULT_RUN_ID = "mcp_run"


@dataclass(frozen=True)
class AuditTool:
    name: str
    description: str
    input_schema: dict
    handler: Callable[..., dict]


@dataclass(frozen=True)
class ToolOutcome:
    """A tool payload plus the audit fields the server keeps tallies of."""

    tool: str
    payload: dict

    @property
    def failed(self) -> bool:
        return self.payload.get("status") == "error"

    @property
    def health_score(self) -> int | None:
        return self.payload.get("summary", {}).get("health_score")

    @property
    def severity(self) -> str | None:
        return self.payload.get("summary", {}).get("overall_severity")


def _artifacts(module_cfg: dict, run_id: str) -> dict:
    """Paths of the files this run actually wrote."""
    settings = module_cfg.get("settings", {})
    if not settings.get("export_report", False):
        return {}
    templates = {**DEFAULT_PATHS, **settings.get("paths", {})}
    found = {
        name: str(Path(template.format(run_id=run_id)))
        for name, template in templates.items()
        if Path(template.format(run_id=run_id)).exists()
    }
    plotting = module_cfg.get("plotting", {})
    if plotting.get("run", False):
        plot = Path(plotting.get("save_dir", "exports/plots/crm_audit/")) / run_id / f"{run_id}_signal_missingness.png"
        if plot.exists():
            found["signal_missingness"] = str(plot)
    return found


def crm_audit(
    contacts: list | None = None,
    companies: list | None = None,
    deals: list | None = None,
    config: dict | None = None,
    run_id: str | None = None,
) -> AuditResponse:
    """Audit inline records, or the files named in config.input_paths when none are given."""
    run_id = run_id or DEFAULT_RUN_ID
    config = config or {}
    module_cfg = AuditRunConfig.model_validate(config.get("crm_audit", config)).model_dump(exclude_none=True)

    records = None
    if contacts is not None or companies is not None or deals is not None:
        records = {"contacts": contacts, "companies": companies, "deals": deals}

    result = run_audit_pipeline(
        config={"crm_audit": module_cfg},
        notebook=False,
        records=records,
        run_id=run_id,
        manage_logging=False,
    )
    if result is None:
        return {
            "status": "pass",
            "module": "crm_audit",
            "run_id": run_id,
            "summary": {"skipped": True},
            "audit": {},
            "narrative_input": {},
            "artifacts": {},
        }

    health = result.overall_health
    meta = result.metadata
    return {
        "status": STATUS_BY_SEVERITY[health.severity.value],
        "module": "crm_audit",
        "run_id": run_id,
        "summary": {
            "health_score": health.score,
            "overall_severity": health.severity.value,
            "primary_risk_driver": health.primary_risk_driver,
            "action_count": len(result.prioritized_actions),
            "primary_action_count": sum(1 for a in result.prioritized_actions if a.tier == "primary"),
            "contacts_count": meta.contacts_count,
            "companies_count": meta.companies_count,
            "deals_count": meta.deals_count,
        },
        "audit": result.to_json_dict(),
        "narrative_input": build_narrative_input(result),
        "artifacts": _artifacts(module_cfg, run_id),
    }


def list_signals() -> SignalCatalogResponse:
    """Every audited signal with its criticality, impacts and remediation action."""
    signals = []
    for key, definition in SIGNAL_REGISTRY.items():
        template = get_action_template(key)
        object_type = object_type_for_key(key)
        action = None
        if template is not None:
            action = {
                "action": template.action,
                "owner_role": template.owner_role,
                "effort": template.effort,
                "time_to_value_days": template.time_to_value_days,
                "order_weight": template.order_weight,
            }
        signals.append(
            {
                "key": key,
                "label": definition.label,
                "object_type": object_type.value if object_type else None,
                "criticality": definition.criticality.value,
                "domain": definition.domain,
                "impacts": list(definition.impacts),
                "action": action,
            }
        )
    return {"status": "pass", "module": "list_signals", "signals": signals}


AUDIT_TOOLS = MappingProxyType(
    {
        "crm_audit": AuditTool(
            name="crm_audit",
            description=(
                "Run the deterministic CRM health audit over contact, company and deal records. "
                "Returns the health score, overall severity, primary risk driver and ranked actions."
            ),
            input_schema=audit_input_schema(),
            handler=crm_audit,
        ),
        "list_signals": AuditTool(
            name="list_signals",
            description="List the audited CRM signals with criticality, impacts and the remediation each one triggers.",
            input_schema={"type": "object", "properties": {}},
            handler=list_signals,
        ),
    }
)

# first match wins; ValidationError subclasses ValueError
_ERROR_HINTS = (
    (ValidationError, "Check the config block against the crm_audit input schema."),
    (KeyError, "Pass contacts/companies/deals records inline or set config.input_paths."),
    (FileNotFoundError, "Check that every config.input_paths entry points at an existing file."),
    (ValueError, "Input files must be .csv or .json record collections."),
    (TypeError, "Remove arguments the tool does not accept."),
)


def _hint_for(exc: Exception) -> str:
    for exc_type, hint in _ERROR_HINTS:
        if isinstance(exc, exc_type):
            return hint
    return "See the server log for the full traceback."


def call_tool(name: str, arguments: dict[str, Any] | None = None) -> ToolOutcome:
    """Run one tool by name. Failures come back as an error payload."""
    tool = AUDIT_TOOLS[name]
    try:
        payload = tool.handler(**(arguments or {}))
    except Exception as exc:
        logger.exception(f"Tool {name} failed")
        payload = {
            "status": "error",
            "module": name,
            "error": {"type": type(exc).__name__, "message": str(exc), "hint": _hint_for(exc)},
        }
    return ToolOutcome(tool=name, payload=payload)
