"""Public API for natural-language wedding reports.

Two entry points, both asynchronous and both scoped by a wedding id and an
admin id supplied by the caller:

- ``execute_natural_language_query``: generate SQL with the LLM, validate,
  execute, normalize
- ``execute_validated_sql``: re-run SQL a client received earlier; the SQL
  is validated again before execution

Blocking database work runs in a worker thread. The service holds no
per-request state, so concurrent calls do not interact.
"""

from __future__ import annotations

import asyncio
import threading
from typing import ClassVar

from fastmcp.utilities.logging import get_logger
from pydantic_ai.exceptions import AgentRunError
import sqlalchemy as sa

from wedding_nlq.exceptions import AIServiceUnavailableError
from wedding_nlq.execute.runner import run_validated_query
from wedding_nlq.export import ExportFormat, build_export
from wedding_nlq.generation.generator import SqlAgent, generate_sql
from wedding_nlq.models import NLQueryResult, QueryRequest, ReportExport
from wedding_nlq.safety.validator import SqlValidator, require_valid_sql
from wedding_nlq.services.config_service import ConfigService, LLMConfig

_logger = get_logger(__name__)

AI_UNAVAILABLE = "AI service is unavailable or did not return a query"


class ReportQueryService:
    """Natural-language report queries against one database.

    Args:
        engine: SQLAlchemy engine; resolved from configuration on first use
            when omitted
        validator: Safety validator; the default policy when omitted
        llm: Provider settings; read from the environment per call when omitted
        agent: Pre-built SQL agent, mainly for tests
        row_limit: Maximum rows returned per query
    """

    _instance: ClassVar[ReportQueryService | None] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        engine: sa.Engine | None = None,
        *,
        validator: SqlValidator | None = None,
        llm: LLMConfig | None = None,
        agent: SqlAgent | None = None,
        row_limit: int | None = None,
    ) -> None:
        self._engine = engine
        self._engine_lock = threading.Lock()
        self.validator = validator or SqlValidator()
        self.llm = llm
        self.agent = agent
        self.row_limit = row_limit if row_limit is not None else ConfigService.result_row_limit()

    @classmethod
    def get_instance(cls) -> ReportQueryService:
        """Get the process-wide service configured from the environment."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        with cls._lock:
            cls._instance = None

    @property
    def engine(self) -> sa.Engine:
        if self._engine is None:
            with self._engine_lock:
                if self._engine is None:
                    url = ConfigService.get_database_url()
                    self._engine = ConfigService.create_database_engine(url)
        return self._engine

    # ---- entry points ----------------------------------------------------
    async def execute_natural_language_query(
        self, question: str, wedding_id: str, admin_id: str
    ) -> NLQueryResult:
        """Answer ``question`` with rows from the given wedding only.

        Raises:
            AIServiceUnavailableError: no provider configured or no SQL returned
            QueryValidationError: the generated SQL broke a safety rule
            QueryExecutionError: the database failed to run the query
        """
        request = QueryRequest(question=question, wedding_id=wedding_id, admin_id=admin_id)

        try:
            raw_sql = await generate_sql(request.question, self.llm, agent=self.agent)
        except AgentRunError as exc:
            _logger.warning("SQL generation failed: %s", exc)
            raise AIServiceUnavailableError(AI_UNAVAILABLE) from exc
        if not raw_sql:
            raise AIServiceUnavailableError(AI_UNAVAILABLE)

        sql = require_valid_sql(raw_sql, self.validator)
        return await self._run(sql, request.wedding_id, request.admin_id)

    async def execute_validated_sql(
        self, sql: str, wedding_id: str, admin_id: str
    ) -> NLQueryResult:
        """Execute SQL from an earlier response; it is never trusted blindly."""
        return await self._run(sql, wedding_id, admin_id)

    async def export_query(
        self,
        sql: str,
        wedding_id: str,
        admin_id: str,
        fmt: ExportFormat = "xlsx",
        *,
        file_prefix: str = "report",
    ) -> ReportExport:
        """Re-run earlier SQL and serialize the rows as a spreadsheet."""
        result = await self.execute_validated_sql(sql, wedding_id, admin_id)
        return build_export(result, fmt, file_prefix=file_prefix)

    async def _run(self, sql: str, wedding_id: str, admin_id: str) -> NLQueryResult:
        # The runner validates again; no execution path skips the validator.
        return await asyncio.to_thread(
            run_validated_query,
            sql=sql,
            wedding_id=wedding_id,
            admin_id=admin_id,
            engine=self.engine,
            row_limit=self.row_limit,
            validator=self.validator,
        )


async def execute_natural_language_query(
    question: str, wedding_id: str, admin_id: str
) -> NLQueryResult:
    """Generate, validate and execute SQL for ``question`` using the shared service."""
    service = ReportQueryService.get_instance()
    return await service.execute_natural_language_query(question, wedding_id, admin_id)


async def execute_validated_sql(sql: str, wedding_id: str, admin_id: str) -> NLQueryResult:
    """Re-validate and execute previously generated SQL using the shared service."""
    service = ReportQueryService.get_instance()
    return await service.execute_validated_sql(sql, wedding_id, admin_id)
