"""End-to-end tests for the report query entry points."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

from _pytest.monkeypatch import MonkeyPatch
from pydantic_ai.exceptions import UnexpectedModelBehavior
import pytest
import sqlalchemy as sa

from wedding_nlq import service as service_mod
from wedding_nlq.exceptions import AIServiceUnavailableError, QueryValidationError
from wedding_nlq.models import ValidationResult
from wedding_nlq.safety.validator import SqlValidator
from wedding_nlq.service import ReportQueryService
from wedding_nlq.services.config_service import LLMConfig

WEDDING_ID = "wed-1"
ADMIN_ID = "admin-1"
ATTENDING_SQL = (
    "SELECT fm.name AS guest_name, f.name AS family_name FROM family_members fm "
    "JOIN families f ON fm.family_id = f.id "
    "WHERE f.wedding_id = $1 AND fm.attending = true ORDER BY fm.name LIMIT 1000"
)
UNCONFIGURED = LLMConfig(provider="openai", model="gpt-4o-mini", api_key=None)


class _StaticAgent:
    def __init__(self, output: str | None) -> None:
        self.output = output

    async def run(self, user_prompt: str) -> SimpleNamespace:
        _ = user_prompt
        return SimpleNamespace(output=self.output)


class _FailingAgent:
    async def run(self, user_prompt: str) -> SimpleNamespace:
        msg = f"model refused: {user_prompt}"
        raise UnexpectedModelBehavior(msg)


class _CountingValidator(SqlValidator):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def validate(self, raw_sql: str) -> ValidationResult:
        self.calls += 1
        return super().validate(raw_sql)


def test_question_is_answered_with_wedding_rows(engine: sa.Engine) -> None:
    svc = ReportQueryService(engine, agent=_StaticAgent(f"```sql\n{ATTENDING_SQL}\n```"))

    result = asyncio.run(svc.execute_natural_language_query("Who is coming?", WEDDING_ID, ADMIN_ID))

    assert result.sql == ATTENDING_SQL
    assert result.columns == ["guest_name", "family_name"]
    assert result.data == [{"guest_name": "Ana", "family_name": "Garcia"}]


def test_generated_sql_is_validated_before_and_at_execution(engine: sa.Engine) -> None:
    validator = _CountingValidator()
    svc = ReportQueryService(engine, validator=validator, agent=_StaticAgent(ATTENDING_SQL))
    asyncio.run(svc.execute_natural_language_query("Who is coming?", WEDDING_ID, ADMIN_ID))
    assert validator.calls == 2


def test_unsafe_generated_sql_is_rejected(engine: sa.Engine) -> None:
    svc = ReportQueryService(
        engine, agent=_StaticAgent("SELECT * FROM families; DROP TABLE families;")
    )
    with pytest.raises(QueryValidationError, match="disallowed SQL operations"):
        asyncio.run(svc.execute_natural_language_query("Drop it", WEDDING_ID, ADMIN_ID))

    with engine.connect() as conn:
        assert conn.execute(sa.text("SELECT COUNT(*) FROM families")).scalar_one() == 4


def test_no_provider_is_service_unavailable_before_validation() -> None:
    validator = _CountingValidator()
    # No engine: the database must not be touched either.
    svc = ReportQueryService(validator=validator, llm=UNCONFIGURED, row_limit=10)

    with pytest.raises(AIServiceUnavailableError, match="AI service is unavailable"):
        asyncio.run(svc.execute_natural_language_query("How many guests?", WEDDING_ID, ADMIN_ID))
    assert validator.calls == 0


def test_empty_generation_is_service_unavailable(engine: sa.Engine) -> None:
    svc = ReportQueryService(engine, agent=_StaticAgent(""))
    with pytest.raises(AIServiceUnavailableError):
        asyncio.run(svc.execute_natural_language_query("How many guests?", WEDDING_ID, ADMIN_ID))


def test_provider_failure_is_service_unavailable(engine: sa.Engine) -> None:
    svc = ReportQueryService(engine, agent=_FailingAgent())
    with pytest.raises(AIServiceUnavailableError) as excinfo:
        asyncio.run(svc.execute_natural_language_query("How many guests?", WEDDING_ID, ADMIN_ID))
    assert isinstance(excinfo.value.__cause__, UnexpectedModelBehavior)


def test_replayed_sql_is_revalidated(engine: sa.Engine) -> None:
    svc = ReportQueryService(engine, llm=UNCONFIGURED)

    tampered = "SELECT f.name FROM families f JOIN secret_table s ON f.id = s.family_id WHERE f.wedding_id = $1"
    with pytest.raises(QueryValidationError, match='Table "secret_table" is not allowed'):
        asyncio.run(svc.execute_validated_sql(tampered, WEDDING_ID, ADMIN_ID))

    result = asyncio.run(svc.execute_validated_sql(ATTENDING_SQL, WEDDING_ID, ADMIN_ID))
    assert [row["guest_name"] for row in result.data] == ["Ana"]


def test_export_query_as_csv(engine: sa.Engine) -> None:
    svc = ReportQueryService(engine, llm=UNCONFIGURED)
    export = asyncio.run(
        svc.export_query(ATTENDING_SQL, WEDDING_ID, ADMIN_ID, "csv", file_prefix="attending")
    )
    assert export.mime_type == "text/csv"
    assert export.filename.startswith("attending-")
    assert export.content.decode("utf-8").splitlines() == ["guest_name,family_name", "Ana,Garcia"]


def test_module_level_entry_point_uses_shared_service(
    engine: sa.Engine, monkeypatch: MonkeyPatch
) -> None:
    svc = ReportQueryService(engine, llm=UNCONFIGURED)
    monkeypatch.setattr(ReportQueryService, "_instance", svc)

    result = asyncio.run(
        service_mod.execute_validated_sql(
            "SELECT name FROM families WHERE wedding_id = $1 ORDER BY name", WEDDING_ID, ADMIN_ID
        )
    )
    assert [row["name"] for row in result.data] == ["Garcia", "Lopez", "Martin"]
    assert ReportQueryService.get_instance() is svc


def test_engine_is_built_from_configuration(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv("WEDDING_NLQ_DATABASE_URL", "sqlite+pysqlite:///:memory:")
    svc = ReportQueryService(llm=UNCONFIGURED)
    assert svc.engine.dialect.name == "sqlite"
    assert svc.engine is svc.engine
