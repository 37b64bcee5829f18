"""Tabular report payload builders for the CRM health audit."""

import pandas as pd

from crm_health_audit.m00_utils.audit_models import AuditResult


def build_audit_report_tables(result: AuditResult) -> dict[str, pd.DataFrame]:
    """
    Flattens an AuditResult into named DataFrames for export and display.

    Returns:
        dict: overall_health, signals, primary_actions, secondary_actions, metadata.
    """
    health = result.overall_health
    overall_df = pd.DataFrame(
        [
            {"Metric": "Health Score", "Value": health.score},
            {"Metric": "Overall Severity", "Value": health.severity.value},
            {"Metric": "Primary Risk Driver", "Value": health.primary_risk_driver},
        ]
    )

    signals_df = pd.DataFrame(
        [
            {
                "Signal": s.key,
                "Label": s.label,
                "Missing %": round(s.value, 2),
                "Severity": s.severity.value,
                "Criticality": s.criticality.value,
                "Top Impact": s.impacts[0] if s.impacts else "",
            }
            for s in result.signals
        ],
        columns=["Signal", "Label", "Missing %", "Severity", "Criticality", "Top Impact"],
    )

    action_columns = ["Priority", "Action", "Owner", "Why", "Effort", "Days To Value", "Severity"]
    action_rows = {"primary": [], "secondary": []}
    for a in result.prioritized_actions:
        action_rows[a.tier].append(
            {
                "Priority": a.priority,
                "Action": a.action,
                "Owner": a.owner_role,
                "Why": a.why,
                "Effort": a.effort,
                "Days To Value": a.time_to_value_days,
                "Severity": a.severity.value,
            }
        )

    meta = result.metadata
    metadata_df = pd.DataFrame(
        {
            "Metric": ["Contacts", "Companies", "Deals", "Generated At"],
            "Value": [meta.contacts_count, meta.companies_count, meta.deals_count, meta.generated_at],
        }
    )

    return {
        "overall_health": overall_df,
        "signals": signals_df,
        "primary_actions": pd.DataFrame(action_rows["primary"], columns=action_columns),
        "secondary_actions": pd.DataFrame(action_rows["secondary"], columns=action_columns),
        "metadata": metadata_df,
    }
