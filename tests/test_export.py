from __future__ import annotations

from datetime import date, datetime, timezone
import io

from openpyxl import load_workbook
import pytest

from wedding_nlq.export import (
    CSV_MIME_TYPE,
    SHEET_NAME,
    XLSX_MIME_TYPE,
    build_export,
    column_widths,
)
from wedding_nlq.models import NLQueryResult

EXPORT_DAY = date(2026, 10, 16)


def _result() -> NLQueryResult:
    return NLQueryResult(
        sql="SELECT name, guests FROM families WHERE wedding_id = $1",
        columns=["name", "guests"],
        data=[
            {"name": "Garcia", "guests": 2},
            {"name": "Fernandez de la Torre y Mendoza Villanueva Santisteban", "guests": 11},
        ],
        row_limit=1000,
    )


def test_column_widths_are_padded_and_clamped() -> None:
    widths = column_widths(
        ["id", "notes"], [{"id": 1, "notes": "x" * 80}, {"id": None, "notes": "short"}]
    )
    assert widths == [10, 50]


def test_column_width_uses_header_length() -> None:
    assert column_widths(["attending_children_count"], []) == [26]


def test_csv_export() -> None:
    export = build_export(_result(), "csv", file_prefix="families", today=EXPORT_DAY)

    assert export.filename == "families-2026-10-16.csv"
    assert export.mime_type == CSV_MIME_TYPE
    lines = export.content.decode("utf-8").splitlines()
    assert lines[0] == "name,guests"
    assert lines[1] == "Garcia,2"


def test_xlsx_export_sets_sheet_and_widths() -> None:
    export = build_export(_result(), today=EXPORT_DAY)

    assert export.filename == "report-2026-10-16.xlsx"
    assert export.mime_type == XLSX_MIME_TYPE

    workbook = load_workbook(io.BytesIO(export.content))
    sheet = workbook[SHEET_NAME]
    assert [cell.value for cell in sheet[1]] == ["name", "guests"]
    assert sheet["A2"].value == "Garcia"
    assert sheet["B3"].value == 11
    assert sheet.column_dimensions["A"].width == 50
    assert sheet.column_dimensions["B"].width == 10


def test_xlsx_export_accepts_timezone_aware_values() -> None:
    result = NLQueryResult(
        sql="SELECT responded_at FROM families WHERE wedding_id = $1",
        columns=["responded_at"],
        data=[{"responded_at": datetime(2026, 5, 1, 12, 30, tzinfo=timezone.utc)}],
    )
    export = build_export(result, "xlsx", today=EXPORT_DAY)
    sheet = load_workbook(io.BytesIO(export.content))[SHEET_NAME]
    assert sheet["A2"].value == datetime(2026, 5, 1, 12, 30)


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported export format"):
        build_export(_result(), "pdf", today=EXPORT_DAY)  # type: ignore[arg-type]
