"""wedding-nlq package for natural-language wedding reports.

Turns a wedding admin's free-text question into validated, read-only,
wedding-scoped SQL, executes it and returns JSON-safe rows.
"""

from wedding_nlq.exceptions import (
    AIServiceUnavailableError,
    NLQueryError,
    QueryExecutionError,
    QueryValidationError,
)
from wedding_nlq.models import NLQueryResult, QueryRequest, ReportExport, ValidationResult
from wedding_nlq.safety import clean_sql, validate_sql
from wedding_nlq.service import (
    ReportQueryService,
    execute_natural_language_query,
    execute_validated_sql,
)
from wedding_nlq.services import ConfigService, LLMConfig

__all__ = [  # noqa: RUF022
    # Models
    "NLQueryResult",
    "QueryRequest",
    "ReportExport",
    "ValidationResult",
    # Errors
    "AIServiceUnavailableError",
    "NLQueryError",
    "QueryExecutionError",
    "QueryValidationError",
    # Safety
    "clean_sql",
    "validate_sql",
    # Services
    "ConfigService",
    "LLMConfig",
    "ReportQueryService",
    "execute_natural_language_query",
    "execute_validated_sql",
]
