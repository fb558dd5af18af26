"""LLM-backed SQL generation for report questions."""

from __future__ import annotations

from .generator import build_sql_agent, generate_sql
from .prompts import SCHEMA_DESCRIPTION

__all__ = [
    "SCHEMA_DESCRIPTION",
    "build_sql_agent",
    "generate_sql",
]
