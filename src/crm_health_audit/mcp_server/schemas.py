"""
schemas.py — TypedDicts and JSON Schema definitions for MCP tool I/O.

crm_audit returns an AuditResponse and list_signals a SignalCatalogResponse.
The crm_audit input schema here is published through tools/list so clients
can validate and document tool inputs.
"""

from typing import TypedDict

from crm_health_audit.mcp_server.config_models import AuditRunConfig


class ToolResponse(TypedDict):
    status: str  # "pass" | "warn" | "fail" | "error"
    module: str
    run_id: str
    summary: dict


class AuditResponse(ToolResponse):
    audit: dict
    narrative_input: dict
    artifacts: dict


class SignalCatalogResponse(TypedDict):
    status: str
    module: str
    signals: list[dict]


# ------------------------------------------------------------------
# Reusable input schema fragments
# ------------------------------------------------------------------

_RECORDS_ITEM = {
    "type": "object",
    "description": "A CRM record: either {'properties': {...}} or a flat property mapping.",
}


def _records_prop(object_type: str, fields: str) -> dict:
    return {
        "type": "array",
        "items": _RECORDS_ITEM,
        "description": f"Inline {object_type} records exposing {fields}.",
    }


_RUN_ID_PROP = {
    "run_id": {
        "type": "string",
        "description": "Run identifier used for output paths and artifact naming.",
        "default": "mcp_run",
    }
}


def audit_input_schema() -> dict:
    """Return the JSON Schema for crm_audit tool inputs."""
    config_schema = AuditRunConfig.model_json_schema()
    # nested model refs resolve against the root document
    defs = config_schema.pop("$defs", {})
    return {
        "type": "object",
        "$defs": defs,
        "properties": {
            "contacts": _records_prop("contact", "email and lifecyclestage"),
            "companies": _records_prop("company", "domain and industry"),
            "deals": _records_prop("deal", "closedate, amount, dealstage and pipeline"),
            "config": {
                **config_schema,
                "description": "crm_audit config block; input_paths is used when records are not inline.",
            },
            **_RUN_ID_PROP,
        },
    }
