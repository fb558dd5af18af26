"""SQL safety layer: cleaning, policy constants and validation.

The validator is independent of how SQL was produced and can be called on
any string, without an LLM or a database.
"""

from __future__ import annotations

from .cleaner import clean_sql, strip_trailing_semicolon
from .policy import ALLOWED_TABLES, DANGEROUS_KEYWORDS, MAX_ROWS
from .validator import (
    RegexTableCheck,
    SqlValidator,
    StructuralParseError,
    StructuralTableCheck,
    require_valid_sql,
    validate_sql,
)

__all__ = [
    "ALLOWED_TABLES",
    "DANGEROUS_KEYWORDS",
    "MAX_ROWS",
    "RegexTableCheck",
    "SqlValidator",
    "StructuralParseError",
    "StructuralTableCheck",
    "clean_sql",
    "require_valid_sql",
    "strip_trailing_semicolon",
    "validate_sql",
]
