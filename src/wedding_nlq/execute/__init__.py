"""Execution package for validated report SQL.

Exports the runner, its parameter binding helper and row normalization.
"""

from __future__ import annotations

from .normalize import columns_for, normalize_value, serialize_row
from .runner import bind_positional_parameters, run_validated_query

__all__ = [
    "bind_positional_parameters",
    "columns_for",
    "normalize_value",
    "run_validated_query",
    "serialize_row",
]
