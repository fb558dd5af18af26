"""MCP tool registration for wedding report queries.

Exposes `register_report_tools`, which attaches the report tools to a
FastMCP instance while delegating the work to `ReportQueryService`. The
wedding id and admin id are always explicit tool arguments; they are never
taken from the question text.
"""

from __future__ import annotations

from typing import Annotated

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.utilities.logging import get_logger
from pydantic import Field

from wedding_nlq.exceptions import NLQueryError
from wedding_nlq.models import NLQueryResult, ValidationResult
from wedding_nlq.service import ReportQueryService

_logger = get_logger(__name__)
MAX_QUERY_DISPLAY = 100

WeddingId = Annotated[str, Field(min_length=1, description="Wedding the report is scoped to")]
AdminId = Annotated[
    str, Field(min_length=1, description="Wedding admin asking; used for 'my guests' phrasing")
]


def _preview(text: str) -> str:
    return text[:MAX_QUERY_DISPLAY] + ("..." if len(text) > MAX_QUERY_DISPLAY else "")


def register_report_tools(mcp: FastMCP, service: ReportQueryService | None = None) -> None:
    """Register the natural-language report tools on the given server."""

    def _service() -> ReportQueryService:
        return service or ReportQueryService.get_instance()

    @mcp.tool
    async def ask_wedding_data(
        ctx: Context,
        question: Annotated[
            str,
            Field(
                min_length=1,
                description=(
                    "Question about guests, RSVPs, tables or gifts. Example: "
                    "'Which families from my side have not answered yet?'"
                ),
            ),
        ],
        wedding_id: WeddingId,
        admin_id: AdminId,
    ) -> NLQueryResult:  # pyright: ignore[reportUnusedFunction]
        """Answer a question about one wedding with rows and the SQL used.

        The returned `sql` can be passed to `run_report_sql` to refresh or
        export the same report.
        """
        _logger.info("ask_wedding_data: %s", _preview(question))
        try:
            return await _service().execute_natural_language_query(question, wedding_id, admin_id)
        except NLQueryError as exc:
            await ctx.error(str(exc))
            raise ToolError(str(exc)) from exc

    @mcp.tool
    async def run_report_sql(
        ctx: Context,
        sql: Annotated[str, Field(description="SQL returned by an earlier ask_wedding_data call")],
        wedding_id: WeddingId,
        admin_id: AdminId,
    ) -> NLQueryResult:  # pyright: ignore[reportUnusedFunction]
        """Re-validate and execute SQL from an earlier report."""
        _logger.info("run_report_sql: %s", _preview(sql))
        try:
            return await _service().execute_validated_sql(sql, wedding_id, admin_id)
        except NLQueryError as exc:
            await ctx.error(str(exc))
            raise ToolError(str(exc)) from exc

    @mcp.tool
    async def validate_report_sql(
        sql: Annotated[str, Field(description="SQL to check against the safety policy")],
    ) -> ValidationResult:  # pyright: ignore[reportUnusedFunction]
        """Check SQL against the report safety policy without executing it."""
        return _service().validator.validate(sql)

    # Hint to static analyzers that nested functions are intentionally used
    _ = (ask_wedding_data, run_report_sql, validate_report_sql)
