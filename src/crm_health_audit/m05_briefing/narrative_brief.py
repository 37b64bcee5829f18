"""
🗞️ Module: narrative_brief.py

Prepares audit facts for an external narrative writer and checks what
comes back.

The narrative writer only ever sees a reduced view of the audit: the score,
the overall severity, the primary risk driver, and the top three primary
actions. It may not invent metrics or actions, so its output is validated
against a fixed contract before anyone displays it.

No model is called from here.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, Field

from crm_health_audit.m00_utils.audit_models import AuditResult

NARRATIVE_CONTEXT = "HubSpot CRM audit for executive audience (CRO level)"
MAX_TOP_ACTIONS = 3
MAX_LIST_ITEMS = 3
REQUIRED_OUTPUT_KEYS = ("executive_summary", "top_risks", "focus_areas", "confidence_level")

SYSTEM_PROMPT = """You are a RevOps analyst writing for a Chief Revenue Officer.

STRICT RULES:
- You may ONLY reference data explicitly provided in the input
- You must NOT invent metrics, percentages, or issues
- You must NOT suggest actions beyond those provided
- You must NOT change severity levels or re-rank priorities
- Write in direct, professional language
- Maximum 100 words for executive summary
- Focus on business impact, not technical details"""

USER_PROMPT_TEMPLATE = """Generate an executive briefing from this HubSpot CRM audit:

{audit_data}

Provide:
1. Executive summary (max 100 words) — what's wrong and why it matters
2. Top 3 risks (from the data provided)
3. Top 3 focus areas (from the actions provided — do not invent new ones)
4. Your confidence level in this analysis"""


class NarrativeContractError(ValueError):
    """Narrative output does not satisfy the briefing contract."""


class NarrativeOutput(BaseModel):
    executive_summary: str = Field(description="Executive summary, max 100 words.")
    top_risks: list[str] = Field(description="Up to three risks, ordered by severity.")
    focus_areas: list[str] = Field(description="Up to three focus areas from provided actions.")
    confidence_level: Literal["high", "medium", "low"]


def build_narrative_input(result: AuditResult) -> dict:
    """Reduce an AuditResult to the minimal facts a narrative writer receives."""
    top_actions = [
        {
            "priority": a.priority,
            "action": a.action,
            "why": a.why,
            "owner": a.owner_role,
        }
        for a in result.prioritized_actions
        if a.tier == "primary"
    ][:MAX_TOP_ACTIONS]

    return {
        "overall_health": {
            "score": result.overall_health.score,
            "severity": result.overall_health.severity.value,
        },
        "primary_risk_driver": result.overall_health.primary_risk_driver,
        "top_actions": top_actions,
        "context": NARRATIVE_CONTEXT,
    }


def build_prompt_preview(result: AuditResult) -> dict:
    """Return the exact prompts a narrative writer would be given, for review."""
    agent_input = build_narrative_input(result)
    return {
        "system_prompt": SYSTEM_PROMPT,
        "user_prompt": USER_PROMPT_TEMPLATE.format(audit_data=json.dumps(agent_input, indent=2)),
        "agent_input": agent_input,
    }


def validate_narrative_output(payload: dict[str, Any]) -> NarrativeOutput:
    """
    Checks a narrative writer's output against the briefing contract.

    Missing or empty required keys and empty risk/focus lists are rejected.
    Lists longer than three entries are truncated.

    Raises:
        NarrativeContractError: If the payload violates the contract.
    """
    missing = [k for k in REQUIRED_OUTPUT_KEYS if not payload.get(k)]
    if missing:
        raise NarrativeContractError(f"Narrative contract violation: missing keys [{', '.join(missing)}]")

    for key in ("top_risks", "focus_areas"):
        value = payload[key]
        if not isinstance(value, list) or not value:
            raise NarrativeContractError(f"Narrative contract violation: {key} must be a non-empty list")

    trimmed = {
        **payload,
        "top_risks": payload["top_risks"][:MAX_LIST_ITEMS],
        "focus_areas": payload["focus_areas"][:MAX_LIST_ITEMS],
    }
    try:
        return NarrativeOutput.model_validate(trimmed)
    except ValueError as exc:
        raise NarrativeContractError(f"Narrative contract violation: {exc}") from exc
