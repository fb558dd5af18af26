"""Safety validation for report SQL.

Every SQL string is validated here before it is executed, whether it was
just produced by the LLM or sent back by a client for an export. Rules are
applied in order and the first failure wins:

1. The statement must start with SELECT
2. No mutating/DDL/DCL keyword may appear anywhere
3. The wedding parameter ``$1`` must be used
4. The ``wedding_id`` column must be referenced
5. Exactly one SELECT statement, over allowlisted tables only

Rule 5 is a two-tier check. The structural check parses the SQL with
sqlglot; when the parser cannot handle the input, the regex check takes
over and still enforces the table allowlist.
"""

from __future__ import annotations

import logging
from typing import Protocol

from fastmcp.utilities.logging import get_logger
import sqlglot
from sqlglot import expressions as sgl_exp

from wedding_nlq.exceptions import QueryValidationError
from wedding_nlq.models import ValidationResult
from wedding_nlq.safety.cleaner import clean_sql
from wedding_nlq.safety.policy import (
    ALLOWED_SCHEMAS,
    ALLOWED_TABLES,
    DANGEROUS_KEYWORDS,
    FROM_JOIN_TABLE,
    PARAM_MARKER,
    PARSER_PARAM_LITERAL,
    SELECT_PREFIX,
    SQL_DIALECT,
    STRING_LITERAL,
    TENANT_COLUMN,
    TENANT_PARAM,
)

_logger = get_logger(__name__)

ONLY_SELECT_QUERIES = "Only SELECT queries are allowed"
DISALLOWED_OPERATIONS = "Query contains disallowed SQL operations"
MISSING_TENANT_PARAM = "Query must use $1 to filter by wedding"
MISSING_TENANT_COLUMN = "Query must filter by wedding_id"
ONLY_SELECT_STATEMENTS = "Only SELECT statements are allowed"
SINGLE_STATEMENT = "Only one SQL statement is allowed"


def table_not_allowed(name: str) -> str:
    return f'Table "{name}" is not allowed'


class StructuralParseError(Exception):
    """Raised by a table check when it cannot parse the SQL."""


class TableAccessCheck(Protocol):
    """A check over statement kinds and referenced tables.

    Returns an error message, or None when the SQL passes. Raises
    StructuralParseError when the SQL cannot be analysed.
    """

    def check(self, sql: str) -> str | None: ...


class StructuralTableCheck:
    """Primary check: parse with sqlglot and inspect the statement trees."""

    def __init__(self, dialect: str = SQL_DIALECT) -> None:
        self.dialect = dialect

    def parse(self, sql: str) -> list[sgl_exp.Expression]:
        # Positional placeholders are replaced so the parser sees plain literals.
        sql_for_parsing = PARAM_MARKER.sub(PARSER_PARAM_LITERAL, sql)
        try:
            statements = sqlglot.parse(sql_for_parsing, dialect=self.dialect)
        except Exception as exc:  # noqa: BLE001 - degrade to the regex check
            raise StructuralParseError(str(exc)) from exc
        return [stmt for stmt in statements if stmt is not None]

    def check(self, sql: str) -> str | None:
        statements = self.parse(sql)
        if not statements:
            return ONLY_SELECT_STATEMENTS
        if len(statements) > 1:
            return SINGLE_STATEMENT

        stmt = statements[0]
        if not _is_plain_select(stmt):
            return ONLY_SELECT_STATEMENTS

        offending = _first_disallowed_table(stmt)
        if offending is not None:
            return table_not_allowed(offending)
        return None


class RegexTableCheck:
    """Fallback check: table names following FROM / JOIN keywords."""

    def check(self, sql: str) -> str | None:
        without_literals = STRING_LITERAL.sub("''", sql).rstrip().removesuffix(";")
        if ";" in without_literals:
            return SINGLE_STATEMENT
        for match in FROM_JOIN_TABLE.finditer(sql):
            table_name = match.group(1).lower()
            if table_name not in ALLOWED_TABLES:
                return table_not_allowed(table_name)
        return None


def _is_plain_select(stmt: sgl_exp.Expression) -> bool:
    """True for a SELECT (or set operation of SELECTs) that writes nowhere."""
    if isinstance(stmt, sgl_exp.Subquery):
        return _is_plain_select(stmt.this)
    if isinstance(stmt, sgl_exp.Select):
        # SELECT ... INTO creates a table
        return stmt.args.get("into") is None
    if isinstance(stmt, (sgl_exp.Union, sgl_exp.Intersect, sgl_exp.Except)):
        return _is_plain_select(stmt.this) and _is_plain_select(stmt.expression)
    return False


def _first_disallowed_table(stmt: sgl_exp.Expression) -> str | None:
    # CTE references are checked like any table; a CTE name does not shadow the allowlist.
    for table in stmt.find_all(sgl_exp.Table):
        name = (table.name or table.sql(dialect=SQL_DIALECT)).lower()
        schema = table.db.lower()
        qualified = ".".join(part for part in (table.catalog.lower(), schema, name) if part)
        if table.catalog or schema not in ALLOWED_SCHEMAS:
            return qualified
        if name not in ALLOWED_TABLES:
            return qualified
    return None


class SqlValidator:
    """Run SQL through every safety rule and report the first violation.

    Instances hold no per-request state; ``validate`` is a pure function of
    its input and may be called concurrently.
    """

    def __init__(
        self,
        structural_check: TableAccessCheck | None = None,
        fallback_check: TableAccessCheck | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.structural_check = structural_check or StructuralTableCheck()
        self.fallback_check = fallback_check or RegexTableCheck()
        self._logger = logger or _logger

    def validate(self, raw_sql: str) -> ValidationResult:
        sql = clean_sql(raw_sql)

        if not SELECT_PREFIX.match(sql):
            return self._reject(ONLY_SELECT_QUERIES)

        if DANGEROUS_KEYWORDS.search(sql):
            return self._reject(DISALLOWED_OPERATIONS)

        if TENANT_PARAM not in sql:
            return self._reject(MISSING_TENANT_PARAM)

        if TENANT_COLUMN not in sql.lower():
            return self._reject(MISSING_TENANT_COLUMN)

        error = self._check_tables(sql)
        if error is not None:
            return self._reject(error)

        return ValidationResult.ok(sql)

    def _check_tables(self, sql: str) -> str | None:
        try:
            return self.structural_check.check(sql)
        except StructuralParseError as exc:
            self._logger.warning(
                "SQL parser failed (%s); falling back to regex table check", exc
            )
        return self.fallback_check.check(sql)

    def _reject(self, error: str) -> ValidationResult:
        self._logger.info("SQL rejected: %s", error)
        return ValidationResult.rejected(error)


_default_validator = SqlValidator()


def validate_sql(raw_sql: str) -> ValidationResult:
    """Validate that a SQL string is a safe, wedding-scoped SELECT query."""
    return _default_validator.validate(raw_sql)


def require_valid_sql(raw_sql: str, validator: SqlValidator | None = None) -> str:
    """Return the cleaned SQL, or raise QueryValidationError with the failed rule."""
    result = (validator or _default_validator).validate(raw_sql)
    if not result.valid or result.cleaned_sql is None:
        raise QueryValidationError(result.error or "SQL failed validation")
    return result.cleaned_sql
