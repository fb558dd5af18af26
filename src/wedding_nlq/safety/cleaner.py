"""Cleanup of raw model output before validation."""

from __future__ import annotations

import re
from typing import Final

_OPENING_FENCE: Final[re.Pattern[str]] = re.compile(r"^```(?:sql)?", re.IGNORECASE)
_CLOSING_FENCE: Final[str] = "```"


def clean_sql(raw_sql: str) -> str:
    """Strip surrounding whitespace and markdown code fences.

    Only the fence markers are removed; the SQL between them is untouched.
    """
    sql = raw_sql.strip()
    sql = _OPENING_FENCE.sub("", sql, count=1)
    sql = sql.removesuffix(_CLOSING_FENCE)
    return sql.strip()


def strip_trailing_semicolon(sql: str) -> str:
    s = sql.strip()
    return s.removesuffix(";")
