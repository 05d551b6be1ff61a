"""Export helpers for table views."""
from courtrecords.reporting.sinks import (
    push_to_google_sheets,
    rows_for_export,
    table_rows_for_export,
    write_csv,
    write_excel,
)

__all__ = [
    "push_to_google_sheets",
    "rows_for_export",
    "table_rows_for_export",
    "write_csv",
    "write_excel",
]
