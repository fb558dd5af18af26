"""Pydantic models for report query I/O.

Small, task-focused models shared by the validator, the executor, the
public service API and the tool server.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# -----------------------
# Request Models
# -----------------------


class QueryRequest(BaseModel):
    """A single natural-language question scoped to one wedding."""

    question: str = Field(
        min_length=1,
        description=(
            "Free-text question about the wedding's guests, tables or gifts. Example: "
            "'How many adults from my side have confirmed?'"
        ),
    )
    wedding_id: str = Field(
        min_length=1, description="Tenant scope; bound to $1 in every generated query"
    )
    admin_id: str = Field(
        min_length=1,
        description="Wedding admin asking the question; bound to $2 for 'my guests' phrasing",
    )


# -----------------------
# Response Models
# -----------------------


class ValidationResult(BaseModel):
    """Outcome of running SQL through the safety policy."""

    valid: bool = Field(description="True when the SQL passed every rule")
    error: str | None = Field(default=None, description="Message of the rule that failed")
    cleaned_sql: str | None = Field(
        default=None, description="Fence-stripped SQL text, present only when valid"
    )

    @classmethod
    def ok(cls, cleaned_sql: str) -> ValidationResult:
        return cls(valid=True, cleaned_sql=cleaned_sql)

    @classmethod
    def rejected(cls, error: str) -> ValidationResult:
        return cls(valid=False, error=error)


class NLQueryResult(BaseModel):
    """Rows returned by a validated report query."""

    data: list[dict[str, Any]] = Field(
        default_factory=list, description="Result rows in column order, JSON-safe numbers"
    )
    sql: str = Field(description="The validated SQL that was executed")
    columns: list[str] = Field(
        default_factory=list, description="Column names taken from the first row"
    )
    row_limit: int | None = Field(
        default=None, description="Maximum number of rows the executor returns"
    )
    truncated: bool = Field(
        default=False, description="True when the database had more rows than row_limit"
    )


class ReportExport(BaseModel):
    """Serialized report file ready to be downloaded."""

    content: bytes = Field(description="File body")
    filename: str = Field(description="Suggested download name, dated")
    mime_type: str = Field(description="Content type of the file body")
