"""Execution flow for validated report SQL.

This module provides a small, dependency-injected runner that:
- Re-validates the SQL on every call, even when the caller says it is trusted
- Binds the wedding id to $1 and the admin id to $2 (never interpolated)
- Executes via SQLAlchemy with a row cap and truncation sentinel
- Returns normalized, JSON-safe rows
"""

from __future__ import annotations

import re
from typing import Final

from fastmcp.utilities.logging import get_logger
import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from wedding_nlq.exceptions import QueryExecutionError
from wedding_nlq.execute.normalize import columns_for, serialize_row
from wedding_nlq.models import NLQueryResult
from wedding_nlq.safety.cleaner import strip_trailing_semicolon
from wedding_nlq.safety.policy import MAX_ROWS
from wedding_nlq.safety.validator import SqlValidator, require_valid_sql

_logger = get_logger(__name__)

# Single-quoted literals are matched first so markers inside them are left alone.
_LITERAL_OR_MARKER: Final[re.Pattern[str]] = re.compile(r"'(?:[^']|'')*'|\$(\d+)")


def bind_positional_parameters(sql: str) -> str:
    """Rewrite ``$N`` markers into SQLAlchemy named binds ``(:pN)``.

    The parentheses keep casts such as ``$1::text`` from merging into the
    bind name. Colons inside string literals are escaped so ``text()`` keeps
    them as data.
    """

    def _swap(match: re.Match[str]) -> str:
        index = match.group(1)
        if index is None:
            return match.group(0).replace(":", "\\:")
        return f"(:p{index})"

    return _LITERAL_OR_MARKER.sub(_swap, sql)


def bound_parameters(wedding_id: str, admin_id: str) -> dict[str, str]:
    # Both are always passed; SQLAlchemy ignores binds the text does not use.
    return {"p1": wedding_id, "p2": admin_id}


def run_validated_query(
    *,
    sql: str,
    wedding_id: str,
    admin_id: str,
    engine: sa.Engine,
    row_limit: int = MAX_ROWS,
    validator: SqlValidator | None = None,
) -> NLQueryResult:
    """Validate and execute report SQL scoped to one wedding.

    Raises:
        QueryValidationError: the SQL breaks a safety rule
        QueryExecutionError: the database failed to run the query
    """
    cleaned_sql = require_valid_sql(sql, validator)
    statement = sa.text(bind_positional_parameters(strip_trailing_semicolon(cleaned_sql)))

    _logger.info("Executing validated query (row_limit=%d): %s", row_limit, cleaned_sql)
    try:
        with engine.connect() as conn:
            result = conn.execute(statement, bound_parameters(wedding_id, admin_id))
            raw_rows = result.mappings().fetchmany(row_limit + 1)  # sentinel to detect truncation
    except SQLAlchemyError as exc:
        _logger.warning("Execution error: %s | sql=%s", exc, cleaned_sql)
        msg = "Query execution failed"
        raise QueryExecutionError(msg) from exc

    truncated = len(raw_rows) > row_limit
    data = [serialize_row(row) for row in raw_rows[:row_limit]]
    if truncated:
        _logger.info("Result truncated at %d rows", row_limit)

    return NLQueryResult(
        data=data,
        sql=cleaned_sql,
        columns=columns_for(data),
        row_limit=row_limit,
        truncated=truncated,
    )
