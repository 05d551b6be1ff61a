"""Client-side search, date filter, sort, and pagination over record snapshots.

Every function here is pure: the browser takes the latest snapshot of
records plus the local UI state and recomputes the visible page from
scratch. Nothing in this module performs I/O.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from courtrecords.browser.dates import parse_date, record_date
from courtrecords.core.models import ColumnDescriptor, LayoutMode, Record

DEFAULT_PAGE_SIZE = 10
SKELETON_ROW_COUNT = 5
ASCENDING = "asc"
DESCENDING = "desc"

CELL_STYLES = {
    LayoutMode.NORMAL: {"padding": "1rem", "font_size": "14px"},
    LayoutMode.COMPACT: {"padding": "0.75rem", "font_size": "12px"},
}


@dataclass
class TableState:
    """Local UI state of one table: search term, date range, sort, and page."""

    search: str = ""
    date_start: Optional[str] = None
    date_end: Optional[str] = None
    sort_key: Optional[str] = None
    sort_direction: str = ASCENDING
    page: int = 1

    def toggle_sort(
        self, key: str, columns: Optional[Sequence[ColumnDescriptor]] = None
    ) -> "TableState":
        """Sort by ``key``, flipping to descending when it is already ascending."""

        if columns is not None:
            column = next((col for col in columns if col.key == key), None)
            if column is None or not column.sortable:
                return self
        direction = ASCENDING
        if self.sort_key == key and self.sort_direction == ASCENDING:
            direction = DESCENDING
        return replace(self, sort_key=key, sort_direction=direction)

    def with_search(self, term: str) -> "TableState":
        return replace(self, search=term, page=1)

    def with_date_range(self, start: Optional[str], end: Optional[str]) -> "TableState":
        return replace(self, date_start=start or None, date_end=end or None, page=1)

    def next_page(self, page_count: int) -> "TableState":
        return replace(self, page=min(self.page + 1, max(page_count, 1)))

    def previous_page(self) -> "TableState":
        return replace(self, page=max(self.page - 1, 1))


@dataclass
class TableRow:
    record: Record
    cells: Dict[str, Any]


@dataclass
class TableView:
    """Everything a renderer needs to draw the current page of a table."""

    columns: List[ColumnDescriptor]
    rows: List[TableRow]
    filtered: List[Record]
    page: int
    page_size: int
    page_count: int
    total: int
    loading: bool = False
    skeleton_rows: int = 0
    cell_style: Dict[str, str] = field(default_factory=dict)

    @property
    def has_prev(self) -> bool:
        return not self.loading and self.page > 1

    @property
    def has_next(self) -> bool:
        return not self.loading and self.page < self.page_count

    @property
    def is_empty(self) -> bool:
        return not self.loading and self.total == 0

    @property
    def show_pagination(self) -> bool:
        return not self.loading and self.total > self.page_size

    @property
    def summary(self) -> str:
        if self.total == 0:
            return "No records found."
        first = (self.page - 1) * self.page_size + 1
        last = min(self.page * self.page_size, self.total)
        return f"Showing {first} to {last} of {self.total} records"


def _search_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).lower()


def filter_by_search(records: Iterable[Record], term: str) -> List[Record]:
    """Keep records where any field value contains ``term`` (case-insensitive)."""

    records = list(records)
    if not term:
        return records
    needle = term.lower()
    return [
        record
        for record in records
        if any(needle in _search_text(value) for value in record.values())
    ]


def filter_by_date_range(
    records: Iterable[Record], start: Any = None, end: Any = None
) -> List[Record]:
    """Keep records whose ``created_at``/``date`` falls within ``[start, end]``.

    With no active bound every record is kept, including undated ones. An
    unparseable bound is treated as unset.
    """

    records = list(records)
    start_date = parse_date(start) if start else None
    end_date = parse_date(end) if end else None
    if start_date is None and end_date is None:
        return records

    def _in_range(value: Optional[date]) -> bool:
        if value is None:
            return False
        if start_date and value < start_date:
            return False
        if end_date and value > end_date:
            return False
        return True

    return [record for record in records if _in_range(record_date(record))]


_NUMERIC = (int, float, Decimal)


def _sort_key(value: Any) -> tuple:
    # Values of one kind compare natively; kinds never compare with each other.
    if isinstance(value, _NUMERIC):
        return (0, "", value)
    if isinstance(value, str):
        return (1, "", value)
    if isinstance(value, date):
        return (2, type(value).__name__, value)
    return (3, type(value).__name__, repr(value))


def sort_records(
    records: Iterable[Record], key: Optional[str], direction: str = ASCENDING
) -> List[Record]:
    """Stable sort on the raw field value; ties keep their input order.

    Records missing the field (or holding ``None``) go last in both
    directions. Values of different kinds are grouped by kind (numbers,
    then text, then dates when ascending) so the order is total and a
    direction toggle exactly reverses every non-tied pair.
    """

    records = list(records)
    if not key:
        return records
    present = [record for record in records if record.get(key) is not None]
    missing = [record for record in records if record.get(key) is None]
    ordered = sorted(
        present,
        key=lambda record: _sort_key(record.get(key)),
        reverse=direction == DESCENDING,
    )
    return ordered + missing


def page_count(total: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return math.ceil(total / page_size)


def paginate(
    records: Sequence[Record], page: int, page_size: int = DEFAULT_PAGE_SIZE
) -> tuple[List[Record], int, int]:
    """Return ``(page_records, clamped_page, page_count)``."""

    pages = page_count(len(records), page_size)
    current = max(1, min(page, max(pages, 1)))
    start = (current - 1) * page_size
    return list(records[start : start + page_size]), current, pages


def visible_columns(
    columns: Sequence[ColumnDescriptor], layout: LayoutMode = LayoutMode.NORMAL
) -> List[ColumnDescriptor]:
    """Drop low-priority columns in compact layout."""

    if layout == LayoutMode.COMPACT:
        return [column for column in columns if not column.hidden_on_narrow]
    return list(columns)


def apply_pipeline(records: Iterable[Record], state: TableState) -> List[Record]:
    """Search, date-filter, and sort ``records`` according to ``state``."""

    result = filter_by_search(records, state.search)
    result = filter_by_date_range(result, state.date_start, state.date_end)
    return sort_records(result, state.sort_key, state.sort_direction)


def browse(
    columns: Sequence[ColumnDescriptor],
    records: Iterable[Record],
    state: Optional[TableState] = None,
    loading: bool = False,
    layout: LayoutMode = LayoutMode.NORMAL,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> TableView:
    """Compute the visible page of a table from the records and UI state."""

    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    state = state or TableState()
    shown = visible_columns(columns, layout)
    style = dict(CELL_STYLES[layout])

    if loading:
        return TableView(
            columns=shown,
            rows=[],
            filtered=[],
            page=1,
            page_size=page_size,
            page_count=0,
            total=0,
            loading=True,
            skeleton_rows=SKELETON_ROW_COUNT,
            cell_style=style,
        )

    filtered = apply_pipeline(records, state)
    page_records, current, pages = paginate(filtered, state.page, page_size)
    rows = [
        TableRow(record=record, cells={col.key: col.display(record) for col in shown})
        for record in page_records
    ]
    return TableView(
        columns=shown,
        rows=rows,
        filtered=filtered,
        page=current,
        page_size=page_size,
        page_count=pages,
        total=len(filtered),
        cell_style=style,
    )
