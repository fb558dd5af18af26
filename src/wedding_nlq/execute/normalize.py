"""Row normalization for report results.

PostgreSQL drivers hand back ``decimal.Decimal`` for ``SUM``/``AVG`` and for
numeric aggregates over 64-bit counts. JSON encoders and spreadsheet cells do
not accept that type, so every such value is narrowed to a builtin number.
All other values pass through unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any


def normalize_value(val: object) -> object:
    """Narrow wide numeric types to ``int``/``float`` with equal magnitude."""
    if isinstance(val, bool):
        return val
    if isinstance(val, Decimal):
        if val.is_finite() and val == val.to_integral_value():
            return int(val)
        return float(val)
    # NumPy-style scalars (int64, float64) expose .item() returning a builtin
    if not isinstance(val, int | float) and hasattr(val, "item") and hasattr(val, "dtype"):
        return val.item()
    return val


def serialize_row(row: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a row mapping, preserving key order and narrowing numbers."""
    return {key: normalize_value(val) for key, val in row.items()}


def columns_for(rows: Sequence[Mapping[str, Any]]) -> list[str]:
    """Column names from the first row's key order; empty when no rows."""
    if not rows:
        return []
    return list(rows[0].keys())
