"""
🕳️ Module: missingness.py

Missing-value rates for CRM record collections.

A record is any of:
- a HubSpot-style mapping with a nested ``properties`` mapping,
- an object exposing a ``properties`` attribute,
- a flat mapping of property name to value.

A property counts as missing when it is absent, None, NaN, or the empty
string. Whitespace-only strings are treated as present. Records are read,
never mutated.
"""

from collections.abc import Iterable, Mapping

import pandas as pd


def record_properties(record) -> Mapping:
    """Return the flat property mapping exposed by a single record."""
    if isinstance(record, Mapping):
        nested = record.get("properties")
        if isinstance(nested, Mapping):
            return nested
        return record
    nested = getattr(record, "properties", None)
    if isinstance(nested, Mapping):
        return nested
    return {}


def records_to_frame(records: Iterable | None, properties: Iterable[str]) -> pd.DataFrame:
    """
    Builds a DataFrame with one row per record and one column per property.

    Properties absent from every record still get a column (all missing),
    so callers can rely on the column set.
    """
    columns = list(properties)
    rows = [{p: record_properties(r).get(p) for p in columns} for r in (records or [])]
    return pd.DataFrame(rows, columns=columns, dtype=object)


def missing_mask(frame: pd.DataFrame) -> pd.DataFrame:
    """Boolean frame that is True wherever a value is null or the empty string."""
    return frame.isna() | frame.eq("")


def calculate_missing_pct(records: Iterable | None, property_name: str) -> float:
    """
    Percentage (0-100) of records whose ``property_name`` is missing.

    Args:
        records: Record collection (may be None or empty).
        property_name (str): Property to inspect.

    Returns:
        float: Missing percentage; 0.0 for an empty or None collection.
    """
    return calculate_missing_any_pct(records, [property_name])


def calculate_missing_any_pct(records: Iterable | None, properties: Iterable[str]) -> float:
    """
    Percentage (0-100) of records missing at least one of ``properties``.

    With a single property this is the plain per-property missing rate.
    """
    frame = records_to_frame(records, properties)
    if frame.empty:
        return 0.0
    missing_rows = int(missing_mask(frame).any(axis=1).sum())
    return (missing_rows / len(frame)) * 100
