"""
📦 export_utils.py

Standardized export utilities for the CRM health audit.

Includes:
- Dictionary-to-Excel/CSV export (multi-sheet)
- JSON export of the audit result tree
- Self-contained HTML report export
- Joblib-based checkpoint serialization

All exports are configuration-driven and respect run-specific paths.
"""
import json
import logging
from pathlib import Path

import pandas as pd
from joblib import dump


def export_dataframes(data_dict: dict[str, pd.DataFrame], export_path: str, file_format: str = "excel", encoding: str = "utf-8", run_id: str = None, logging_mode: str = "on"):
    """
    Export a dictionary of DataFrames as Excel sheets or one CSV per table.

    Empty DataFrames are skipped. Accepts 'excel' or 'xlsx' for Excel output.

    Raises:
        ValueError: If ``file_format`` is not supported.
    """
    export_path = Path(export_path)
    normalized_format = file_format.lower()

    export_path.parent.mkdir(parents=True, exist_ok=True)

    if normalized_format == "csv":
        # export_path is a base name; one file per table lands beside it
        base_dir = export_path.parent
        base_stem = export_path.stem
        for name, df in data_dict.items():
            if isinstance(df, pd.DataFrame) and not df.empty:
                filename = f"{run_id}_{base_stem}_{name}.csv" if run_id else f"{base_stem}_{name}.csv"
                df.to_csv(base_dir / filename, index=False, encoding=encoding)
        if logging_mode != "off":
            logging.info(f"📊 Exported {len(data_dict)} CSV files to directory {base_dir}")

    elif normalized_format in ["excel", "xlsx"]:
        with pd.ExcelWriter(export_path, engine="xlsxwriter") as writer:
            for name, df in data_dict.items():
                if isinstance(df, pd.DataFrame) and not df.empty:
                    df.to_excel(writer, sheet_name=name[:31], index=False)
        if logging_mode != "off":
            logging.info(f"📊 Exported {len(data_dict)} sheets to {export_path}")
    else:
        raise ValueError(f"Unsupported file format: {file_format}")


def export_json(payload: dict, path: str) -> Path:
    """Write a JSON-compatible dict to disk with stable key order."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logging.info(f"🧾 JSON report written to {path}")
    return path


def export_html_report(document: str, path: str) -> Path:
    """Write a rendered HTML document to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document, encoding="utf-8")
    logging.info(f"🌐 HTML report written to {path}")
    return path


def save_joblib(obj, path: str):
    """
    Save a Python object to disk using joblib serialization.

    Args:
        obj: Python object to serialize.
        path (str): Destination file path (relative to project root).

    Raises:
        ValueError: If the path is not provided.
    """
    if not path:
        raise ValueError("An explicit 'path' is required to save a joblib checkpoint.")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    dump(obj, path)
    logging.info(f"💾 Checkpoint saved to {path}")
