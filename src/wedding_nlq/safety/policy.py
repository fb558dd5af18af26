"""Safety policy constants for generated report SQL.

Table names are the PostgreSQL names of the wedding schema. The keyword
pattern matches whole words only, so columns such as ``created_at`` or
``updated_at`` do not trip it.
"""

from __future__ import annotations

import re
from typing import Final

MAX_ROWS: Final[int] = 1000

ALLOWED_TABLES: Final[frozenset[str]] = frozenset(
    {
        "families",
        "family_members",
        "tables",
        "wedding_admins",
        "gifts",
    }
)

# Schema qualifiers accepted in front of an allowlisted table name
ALLOWED_SCHEMAS: Final[frozenset[str]] = frozenset({"", "public"})

DANGEROUS_KEYWORDS: Final[re.Pattern[str]] = re.compile(
    r"\b(INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|TRUNCATE|GRANT|REVOKE"
    r"|EXECUTE|EXEC|CALL|MERGE|REPLACE|LOAD|COPY)\b",
    re.IGNORECASE,
)

SELECT_PREFIX: Final[re.Pattern[str]] = re.compile(r"^\s*SELECT\b", re.IGNORECASE)
PARAM_MARKER: Final[re.Pattern[str]] = re.compile(r"\$\d+")
STRING_LITERAL: Final[re.Pattern[str]] = re.compile(r"'(?:[^']|'')*'")
FROM_JOIN_TABLE: Final[re.Pattern[str]] = re.compile(
    r"\b(?:FROM|JOIN)\s+([a-zA-Z_][a-zA-Z0-9_]*)", re.IGNORECASE
)

TENANT_PARAM: Final[str] = "$1"
TENANT_COLUMN: Final[str] = "wedding_id"

# Literal substituted for $N so the parser accepts positional placeholders
PARSER_PARAM_LITERAL: Final[str] = "'__PARAM__'"
SQL_DIALECT: Final[str] = "postgres"
