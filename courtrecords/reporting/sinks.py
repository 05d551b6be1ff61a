"""Export sinks for the rows currently shown by a table browser."""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence

from courtrecords.browser.table import TableView
from courtrecords.core.models import ColumnDescriptor, Record

_SCALARS = (str, int, float, bool)


def ensure_output_dir(output_path: Path) -> None:
    """Create parent folders for sink outputs when missing."""

    output_path.parent.mkdir(parents=True, exist_ok=True)


def _export_value(column: ColumnDescriptor, record: Record) -> Any:
    value = column.display(record)
    if value is None:
        return ""
    if isinstance(value, _SCALARS):
        return value
    raw = record.get(column.key)
    return raw if isinstance(raw, _SCALARS) else str(value)


def rows_for_export(
    columns: Sequence[ColumnDescriptor], records: Iterable[Record]
) -> List[Dict[str, Any]]:
    """Convert records to label-keyed rows using each column's formatting."""

    return [{column.label: _export_value(column, record) for column in columns} for record in records]


def table_rows_for_export(view: TableView) -> List[Dict[str, Any]]:
    """Export every filtered and sorted row, not only the current page."""

    return rows_for_export(view.columns, view.filtered)


def write_csv(rows: Iterable[Dict[str, Any]], output_path: Path) -> None:
    """Write rows to a CSV file using the first row's keys as headers."""

    rows = list(rows)
    ensure_output_dir(output_path)
    if not rows:
        return

    with output_path.open("w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)


def write_excel(rows: Iterable[Dict[str, Any]], output_path: Path, sheet_title: str = "records") -> None:
    """Write rows to an Excel workbook using openpyxl."""

    rows = list(rows)
    if not rows:
        return

    try:
        from openpyxl import Workbook
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("openpyxl is required for Excel sinks") from exc

    ensure_output_dir(output_path)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title[:31]
    headers: List[str] = list(rows[0].keys())
    sheet.append(headers)
    for row in rows:
        sheet.append([row.get(header, "") for header in headers])
    workbook.save(output_path)


def push_to_google_sheets(
    rows: Iterable[Dict[str, Any]],
    spreadsheet_id: str,
    worksheet_title: str = "Sheet1",
    service_account_path: Path | None = None,
) -> None:
    """Upload rows to a Google Sheets worksheet using a service account."""

    rows = list(rows)
    if not rows:
        return

    try:
        import gspread
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise ImportError("gspread is required for Google Sheets sinks") from exc

    client = (
        gspread.service_account(filename=str(service_account_path))
        if service_account_path
        else gspread.service_account()
    )
    worksheet = client.open_by_key(spreadsheet_id).worksheet(worksheet_title)
    worksheet.clear()
    headers: List[str] = list(rows[0].keys())
    worksheet.append_rows([headers] + [[row.get(h, "") for h in headers] for row in rows])
