"""Spreadsheet export of report query results.

Builds CSV or XLSX downloads from an ``NLQueryResult`` with pandas. File
names carry the export date, e.g. ``report-2026-10-16.xlsx``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
import io
from typing import Any, Final, Literal

from openpyxl.utils import get_column_letter
import pandas as pd

from wedding_nlq.models import NLQueryResult, ReportExport

ExportFormat = Literal["xlsx", "csv"]

SHEET_NAME: Final[str] = "Report"
CSV_MIME_TYPE: Final[str] = "text/csv"
XLSX_MIME_TYPE: Final[str] = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MIN_COLUMN_WIDTH: Final[int] = 10
MAX_COLUMN_WIDTH: Final[int] = 50


def _cell_text(val: object) -> str:
    return "" if val is None else str(val)


def column_widths(columns: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> list[int]:
    """Character widths per column: longest cell plus padding, clamped to 10..50."""
    widths: list[int] = []
    for col in columns:
        longest = max([len(col)] + [len(_cell_text(row.get(col))) for row in rows])
        widths.append(min(max(longest + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH))
    return widths


def _to_frame(result: NLQueryResult) -> pd.DataFrame:
    frame = pd.DataFrame(result.data, columns=result.columns)
    # Excel cannot store timezone-aware datetimes
    for col in frame.select_dtypes(include=["datetimetz"]).columns:
        frame[col] = frame[col].dt.tz_localize(None)
    return frame


def build_export(
    result: NLQueryResult,
    fmt: ExportFormat = "xlsx",
    *,
    file_prefix: str = "report",
    today: date | None = None,
) -> ReportExport:
    """Serialize query rows as a CSV or XLSX file.

    Raises:
        ValueError: If ``fmt`` is not a supported export format
    """
    stamp = (today or date.today()).isoformat()
    frame = _to_frame(result)

    if fmt == "csv":
        return ReportExport(
            content=frame.to_csv(index=False).encode("utf-8"),
            filename=f"{file_prefix}-{stamp}.csv",
            mime_type=CSV_MIME_TYPE,
        )

    if fmt == "xlsx":
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            sheet = writer.sheets[SHEET_NAME]
            for idx, width in enumerate(column_widths(result.columns, result.data), start=1):
                sheet.column_dimensions[get_column_letter(idx)].width = width
        return ReportExport(
            content=buffer.getvalue(),
            filename=f"{file_prefix}-{stamp}.xlsx",
            mime_type=XLSX_MIME_TYPE,
        )

    msg = f"Unsupported export format: {fmt}"
    raise ValueError(msg)
