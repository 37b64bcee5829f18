"""
config_models.py — Pydantic models for the crm_audit configuration block.

Used to validate tool-supplied configs before they reach the pipeline runner
and to publish JSON Schemas through the MCP server.
"""

from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field


class AuditInputPaths(BaseModel):
    contacts: Optional[str] = Field(None, description="CSV or JSON file of contact records.")
    companies: Optional[str] = Field(None, description="CSV or JSON file of company records.")
    deals: Optional[str] = Field(None, description="CSV or JSON file of deal records.")


class AuditSettings(BaseModel):
    show_inline: bool = Field(False, description="Render the inline notebook summary.")
    export_report: bool = Field(False, description="Write report artifacts to disk.")
    as_csv: bool = Field(False, description="Export tables as CSV files instead of one workbook.")
    export_json: bool = Field(True, description="Write the audit result tree as JSON.")
    export_html: bool = Field(False, description="Write a self-contained HTML report.")
    checkpoint: bool = Field(False, description="Save a joblib checkpoint of the result tree.")
    paths: Dict[str, str] = Field(
        default_factory=dict,
        description="Artifact path overrides (report_excel, report_json, report_html, report_joblib). "
        "May contain '{run_id}'.",
    )


class AuditPlottingConfig(BaseModel):
    run: bool = Field(False, description="Draw the missingness-by-signal plot.")
    save_dir: str = Field("exports/plots/crm_audit/", description="Base directory for plots.")


class AuditRunConfig(BaseModel):
    run: bool = Field(True, description="Master crm_audit toggle.")
    logging: Literal["auto", "on", "off"] = Field("auto", description="Pipeline logging mode.")
    input_paths: Optional[AuditInputPaths] = Field(
        None, description="Where to load records from when they are not passed inline."
    )
    settings: AuditSettings = Field(default_factory=AuditSettings)
    plotting: AuditPlottingConfig = Field(default_factory=AuditPlottingConfig)
