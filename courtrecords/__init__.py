"""Court records review toolkit: table browsing and approval workflows."""
from courtrecords.api import CourtRecordsClient
from courtrecords.browser import TableState, TableView, browse
from courtrecords.core import (
    ApiError,
    ColumnDescriptor,
    LayoutMode,
    RemarksRequiredError,
    Settings,
    configure_logging,
)
from courtrecords.review import (
    DEFAULT_STAGES,
    ReviewStage,
    ReviewWorkflow,
    gazette_maturity,
    load_stages,
    status_badge,
)

__all__ = [
    "ApiError",
    "ColumnDescriptor",
    "CourtRecordsClient",
    "DEFAULT_STAGES",
    "LayoutMode",
    "RemarksRequiredError",
    "ReviewStage",
    "ReviewWorkflow",
    "Settings",
    "TableState",
    "TableView",
    "browse",
    "configure_logging",
    "gazette_maturity",
    "load_stages",
    "status_badge",
]
