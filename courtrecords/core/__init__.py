"""Core building blocks for the courtrecords package."""
from courtrecords.core.errors import (
    ActionNotAllowedError,
    ApiError,
    CourtRecordsError,
    NoSelectionError,
    RemarksRequiredError,
    WorkflowError,
)
from courtrecords.core.logging import configure_logging
from courtrecords.core.models import CASE_STATUSES, ColumnDescriptor, LayoutMode, Record, record_id
from courtrecords.core.settings import Settings

__all__ = [
    "ActionNotAllowedError",
    "ApiError",
    "CASE_STATUSES",
    "ColumnDescriptor",
    "CourtRecordsError",
    "LayoutMode",
    "NoSelectionError",
    "Record",
    "RemarksRequiredError",
    "Settings",
    "WorkflowError",
    "configure_logging",
    "record_id",
]
