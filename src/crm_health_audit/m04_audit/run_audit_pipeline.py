"""
🚀 Module: run_audit_pipeline.py

Runner script for the CRM health audit.

Resolves configuration, loads the contacts/companies/deals collections
(unless they are passed in), runs the deterministic audit, and optionally
exports Excel/CSV, JSON, HTML and joblib artifacts, draws the missingness
plot, and renders an inline notebook summary.

Example:
    >>> from crm_health_audit.m00_utils.config_loader import load_config
    >>> from crm_health_audit.m04_audit.run_audit_pipeline import run_audit_pipeline
    >>> config = load_config("config/run_audit_config.yaml")
    >>> result = run_audit_pipeline(config=config, notebook=True, run_id="q3_hygiene")
"""

import logging
from pathlib import Path

from crm_health_audit.m00_utils.audit_models import AuditResult
from crm_health_audit.m00_utils.config_loader import resolve_module_config
from crm_health_audit.m00_utils.export_utils import (
    export_dataframes,
    export_html_report,
    export_json,
    save_joblib,
)
from crm_health_audit.m00_utils.load_data import load_record_collections
from crm_health_audit.m04_audit.audit_producer import run_audit
from crm_health_audit.m04_audit.audit_report_html import render_audit_report
from crm_health_audit.m04_audit.report_tables import build_audit_report_tables

DEFAULT_PATHS = {
    "report_excel": "exports/reports/crm_audit/{run_id}_crm_audit_report.xlsx",
    "report_json": "exports/reports/crm_audit/{run_id}_crm_audit_report.json",
    "report_html": "exports/reports/crm_audit/{run_id}_crm_audit_report.html",
    "report_joblib": "exports/reports/crm_audit/{run_id}_crm_audit_report.joblib",
}


def configure_logging(notebook: bool = True, logging_mode: str = "auto"):
    """Configures logging based on execution mode."""
    if logging_mode == "off":
        logging.disable(logging.CRITICAL)
        return

    # WARNING in notebooks unless 'on', INFO in scripts.
    if logging_mode == "auto":
        level = logging.WARNING if notebook else logging.INFO
    else:  # 'on'
        level = logging.INFO

    logging.disable(logging.NOTSET)
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s", force=True)


def run_audit_pipeline(
    config: dict,
    notebook: bool = False,
    records: dict | None = None,
    run_id: str = None,
    manage_logging: bool = True,
) -> AuditResult | None:
    """
    Executes the CRM health audit with config-driven loading and export.

    Args:
        config (dict): Full config (with a 'crm_audit' block) or the block itself.
        notebook (bool): Whether to render the inline summary.
        records (dict, optional): Pre-loaded {'contacts', 'companies', 'deals'} collections.
            When omitted, collections are loaded from 'input_paths'.
        run_id (str): Run identifier used for output paths.
        manage_logging (bool): Apply the block's logging mode to the root logger.
            Embedding hosts such as the MCP server pass False and keep their own setup.

    Returns:
        AuditResult | None: The audit result, or None when the module is disabled.
    """
    module_cfg = resolve_module_config(config, "crm_audit")
    if not module_cfg:
        raise ValueError("Configuration for 'crm_audit' module not found or is empty.")

    if manage_logging:
        configure_logging(notebook=notebook, logging_mode=module_cfg.get("logging", "auto"))

    if not module_cfg.get("run", True):
        logging.info("CRM audit skipped by config.")
        return None

    if not run_id:
        raise ValueError("A 'run_id' must be provided.")

    if records is None:
        input_paths = module_cfg.get("input_paths")
        if not input_paths:
            raise KeyError("Missing 'input_paths' in crm_audit config and no records were provided.")
        records = load_record_collections(input_paths)
    else:
        logging.info("Using passed-in record collections (no reload).")

    result = run_audit(
        records.get("contacts"),
        records.get("companies"),
        records.get("deals"),
    )
    health = result.overall_health
    logging.info(
        f"🩺 Health score {health.score}/100 ({health.severity.value}); "
        f"{len(result.prioritized_actions)} action(s) recommended."
    )

    report_tables = build_audit_report_tables(result)
    settings = module_cfg.get("settings", {})
    paths = {**DEFAULT_PATHS, **settings.get("paths", {})}

    plot_paths = {}
    plotting_cfg = module_cfg.get("plotting", {})
    if plotting_cfg.get("run", False):
        from crm_health_audit.m08_visuals.summary_plots import plot_signal_missingness

        save_dir = Path(plotting_cfg.get("save_dir", "exports/plots/crm_audit/")) / run_id
        plot_path = plot_signal_missingness(report_tables["signals"], save_dir, run_id)
        if plot_path is not None:
            plot_paths["signal_missingness"] = plot_path

    if settings.get("export_report", False):
        logging.info("Exporting CRM audit artifacts...")
        export_dataframes(
            report_tables,
            paths["report_excel"].format(run_id=run_id),
            file_format="csv" if settings.get("as_csv", False) else "excel",
        )
        if settings.get("export_json", True):
            export_json(result.to_json_dict(), paths["report_json"].format(run_id=run_id))
        if settings.get("export_html", False):
            export_html_report(
                render_audit_report(result, run_id, plot_paths=plot_paths),
                paths["report_html"].format(run_id=run_id),
            )
        if settings.get("checkpoint", False):
            save_joblib(result.to_json_dict(), paths["report_joblib"].format(run_id=run_id))
        logging.info("✅ CRM audit artifacts exported successfully.")

    if settings.get("show_inline", False) and notebook:
        from crm_health_audit.m04_audit.display_audit import display_audit_summary

        display_audit_summary(report_tables, plot_paths=plot_paths)

    return result
