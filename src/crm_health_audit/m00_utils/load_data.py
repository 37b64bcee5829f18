"""
📦 Module: load_data.py

Utility functions for loading CRM record collections from disk.

Records are returned as plain lists of property dicts so the audit engine
can treat file-backed and API-backed collections the same way. Loading is
intentionally non-transformative: values are kept as strings and empty
cells stay missing.

Functions:
- load_csv(path): Loads a CSV file into a pandas DataFrame (all columns as str).
- frame_to_records(df): Converts a DataFrame into a list of property dicts.
- load_records(path): Loads a .csv or .json file into a list of records.
- load_record_collections(input_paths): Loads contacts/companies/deals together.
"""
import json
import logging
from pathlib import Path

import pandas as pd

from crm_health_audit.m01_signals.signal_registry import ObjectType
from crm_health_audit.m01_signals.signal_rules import REQUIRED_PROPERTIES


def load_csv(path: str) -> pd.DataFrame:
    """
    Loads a CSV file from a given path, keeping every column as text.

    Only blank cells are read as missing. Literal values such as "NA",
    "None" or "null" are kept as text.

    Args:
        path (str): Path to the CSV file.

    Returns:
        pd.DataFrame: Loaded data as a pandas DataFrame.
    """
    return pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])


def frame_to_records(df: pd.DataFrame) -> list[dict]:
    """Convert a DataFrame into flat property dicts, mapping NaN to None."""
    cleaned = df.astype(object).where(df.notna(), None)
    return cleaned.to_dict(orient="records")


def load_records(path: str) -> list:
    """
    Loads a record collection from a CSV or JSON file.

    JSON files may hold a list of records or a HubSpot-style page
    ``{"results": [...]}``.

    Raises:
        ValueError: If the file suffix is not supported or the JSON shape is unknown.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return frame_to_records(load_csv(str(path)))
    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        if isinstance(payload, dict) and isinstance(payload.get("results"), list):
            return payload["results"]
        if isinstance(payload, list):
            return payload
        raise ValueError(f"Unsupported JSON layout in {path}: expected a list or a 'results' list.")
    raise ValueError(f"Unsupported record file format: {suffix or path.name}")


def load_record_collections(input_paths: dict) -> dict[str, list]:
    """
    Loads the contacts, companies, and deals collections named in ``input_paths``.

    A collection without a path is treated as empty and logged as a warning.
    """
    collections = {}
    for object_type in ObjectType:
        path = input_paths.get(object_type.value)
        if not path:
            logging.warning(f"No input path for '{object_type.value}'; auditing it as empty.")
            collections[object_type.value] = []
            continue
        records = load_records(path)
        logging.info(f"🚚 Loaded {len(records)} {object_type.value} from {path}")
        _warn_missing_columns(object_type, records, path)
        collections[object_type.value] = records
    return collections


def _warn_missing_columns(object_type: ObjectType, records: list, path: str) -> None:
    if not records or not isinstance(records[0], dict):
        return
    first = records[0].get("properties", records[0])
    if not isinstance(first, dict):
        return
    absent = [p for p in REQUIRED_PROPERTIES[object_type] if p not in first]
    if absent:
        logging.warning(
            f"⚠️ {path} has no {absent} field(s); every {object_type.value} record will count as missing them."
        )
