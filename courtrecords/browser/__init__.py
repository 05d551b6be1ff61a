"""Tabular data browser: search, date filter, sort, and paginate records."""
from courtrecords.browser.dates import format_date, parse_date, record_date
from courtrecords.browser.table import (
    ASCENDING,
    DESCENDING,
    TableRow,
    TableState,
    TableView,
    browse,
    filter_by_date_range,
    filter_by_search,
    page_count,
    paginate,
    sort_records,
    visible_columns,
)

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "TableRow",
    "TableState",
    "TableView",
    "browse",
    "filter_by_date_range",
    "filter_by_search",
    "format_date",
    "page_count",
    "paginate",
    "parse_date",
    "record_date",
    "sort_records",
    "visible_columns",
]
