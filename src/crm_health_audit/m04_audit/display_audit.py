"""
📑 Module: display_audit.py

Notebook-facing display logic for the CRM health audit.

Renders a banner with the health score and primary risk driver, followed
by the signal table and the primary/secondary action plans. Does nothing
outside an IPython environment.
"""

import pandas as pd

_SEVERITY_COLORS = {"low": "#2e7d32", "medium": "#ef6c00", "high": "#c62828"}


def display_audit_summary(report_tables: dict, plot_paths: dict | None = None):
    """Render the audit report tables inline in a notebook."""
    try:
        from IPython.display import HTML, Image, display
    except ImportError:
        return

    if not report_tables:
        display(HTML("<h4>CRM Health Audit</h4><p><em>The audit did not run or returned no results.</em></p>"))
        return

    overall = report_tables.get("overall_health", pd.DataFrame())
    values = dict(zip(overall.get("Metric", []), overall.get("Value", [])))
    severity = str(values.get("Overall Severity", "low"))
    color = _SEVERITY_COLORS.get(severity, "#24292e")

    banner_html = f"""
    <div style="border: 1px solid #d0d7de; background-color: #eef2f7; color: #24292e; padding: 12px; border-radius: 6px; margin-bottom: 20px;">
        <strong>Stage:</strong> CRM Health Audit ✅ |
        <strong>Score:</strong> {values.get("Health Score", "n/a")}/100 |
        <strong>Severity:</strong> <span style="color: {color}; font-weight: 600;">{severity.upper()}</span>
        <div style="margin-top: 8px;">🎯 {values.get("Primary Risk Driver", "")}</div>
    </div>
    """
    display(HTML(banner_html))

    for key, heading in (
        ("signals", "Signals"),
        ("primary_actions", "Primary Actions"),
        ("secondary_actions", "Secondary Actions"),
    ):
        table = report_tables.get(key)
        if isinstance(table, pd.DataFrame) and not table.empty:
            display(HTML(f"<h4>{heading}</h4>" + table.to_html(index=False)))

    for path in (plot_paths or {}).values():
        if path:
            display(Image(filename=str(path)))
