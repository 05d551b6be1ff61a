"""Exception types raised by the API client and the review workflow."""
from __future__ import annotations

from typing import Optional


class CourtRecordsError(Exception):
    """Base class for every error raised by this package."""


class ApiError(CourtRecordsError):
    """A request to the court records API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class WorkflowError(CourtRecordsError):
    """A review action was refused before reaching the API."""


class RemarksRequiredError(WorkflowError):
    """Remarks were blank for an action that requires them."""


class ActionNotAllowedError(WorkflowError):
    """The selected record's status does not permit the requested action."""


class NoSelectionError(WorkflowError):
    """An action was requested while no record is selected."""
