"""Tests for exporting browsed rows."""
import csv
import sys
import types
from pathlib import Path

from openpyxl import load_workbook

from courtrecords.browser.table import TableState, browse
from courtrecords.reporting.sinks import (
    push_to_google_sheets,
    table_rows_for_export,
    write_csv,
    write_excel,
)
from courtrecords.review.presentation import probate_columns


def _view(records, **state):
    return browse(probate_columns(), records, TableState(**state), page_size=5)


def test_export_includes_every_filtered_row_not_just_the_page(probate_records):
    rows = table_rows_for_export(_view(probate_records, search="kofi"))
    assert len(rows) == 12
    assert rows[0]["App ID"] == "PRB-2"
    assert rows[0]["Next of Kin"] == "Kofi Mensah"


def test_write_csv_round_trip(tmp_path: Path, probate_records):
    output = tmp_path / "nested" / "queue.csv"
    write_csv(table_rows_for_export(_view(probate_records)), output)
    with output.open(encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 25
    assert rows[0]["Status"] == "🟡 CR pending"


def test_write_csv_with_no_rows_only_creates_folder(tmp_path: Path):
    output = tmp_path / "out" / "empty.csv"
    write_csv([], output)
    assert output.parent.exists()
    assert not output.exists()


def test_write_excel(tmp_path: Path, probate_records):
    output = tmp_path / "queue.xlsx"
    write_excel(table_rows_for_export(_view(probate_records)), output, sheet_title="probate-cr")
    sheet = load_workbook(output).active
    assert sheet.title == "probate-cr"
    assert sheet.max_row - 1 == 25


def test_push_to_google_sheets_writes_header_and_rows(monkeypatch, tmp_path: Path):
    appended = {}

    class FakeWorksheet:
        def clear(self):
            appended["cleared"] = True

        def append_rows(self, rows):
            appended["rows"] = rows

    class FakeSpreadsheet:
        def worksheet(self, title):
            appended["title"] = title
            return FakeWorksheet()

    class FakeGspreadClient:
        def open_by_key(self, key):
            appended["key"] = key
            return FakeSpreadsheet()

    fake_module = types.SimpleNamespace(service_account=lambda filename=None: FakeGspreadClient())
    monkeypatch.setitem(sys.modules, "gspread", fake_module)

    push_to_google_sheets(
        [{"App ID": "PRB-1", "Status": "approved"}],
        spreadsheet_id="sheet-123",
        worksheet_title="Queue",
        service_account_path=tmp_path / "sa.json",
    )

    assert appended["key"] == "sheet-123"
    assert appended["title"] == "Queue"
    assert appended["rows"] == [["App ID", "Status"], ["PRB-1", "approved"]]
