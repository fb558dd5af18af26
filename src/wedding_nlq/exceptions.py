"""Exception hierarchy for the report query service.

Every failure that reaches a caller is one of three kinds, each carrying a
human-readable message that can be shown to the wedding admin:

- AIServiceUnavailableError: no LLM credential, or the provider returned no text
- QueryValidationError: the SQL broke one of the safety rules
- QueryExecutionError: the database rejected an already-validated query
"""

from __future__ import annotations


class NLQueryError(Exception):
    """Base exception for natural-language report queries."""


class AIServiceUnavailableError(NLQueryError):
    """Raised when no SQL could be obtained from an LLM provider."""


class QueryValidationError(NLQueryError):
    """Raised when SQL fails the safety policy.

    The message names the rule that was violated (for example
    ``Table "x" is not allowed``). Rejection is terminal for the request.
    """

    def __init__(self, rule: str) -> None:
        super().__init__(rule)
        self.rule = rule


class QueryExecutionError(NLQueryError):
    """Raised when the database fails to run a validated query.

    The original driver error is chained as ``__cause__``; no partial
    results are returned.
    """
