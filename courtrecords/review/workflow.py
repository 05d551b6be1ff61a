"""Listing/detail state machine for staff review of applications.

A :class:`ReviewWorkflow` owns one review queue. It fetches the actionable
records, loads the detail of a selected record, and submits approve or
reject transitions. The record list is never patched locally: after every
successful action the list is fetched again from the API.
"""
from __future__ import annotations

import logging
import threading
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from courtrecords.api.client import CourtRecordsClient
from courtrecords.core.errors import (
    ActionNotAllowedError,
    ApiError,
    NoSelectionError,
    RemarksRequiredError,
)
from courtrecords.core.models import Record, record_id
from courtrecords.review.maturity import GAZETTE_THRESHOLD_DAYS, Maturity, gazette_maturity
from courtrecords.review.modal import AutoConfirmModal, ConfirmOptions, ModalService
from courtrecords.review.presentation import status_label
from courtrecords.review.stages import ReviewStage

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"

LIST_ERROR_MESSAGE = "Failed to load applications."
DETAIL_ERROR_MESSAGE = "Application not found or unavailable."
ACTION_ERROR_MESSAGE = "Failed to update application status."


class WorkflowState(str, Enum):
    LISTING = "listing"
    DETAIL = "detail"


def _blank(text: Optional[str]) -> bool:
    return not (text or "").strip()


class ReviewWorkflow:
    """Drive one review queue against the court records API."""

    def __init__(
        self,
        client: CourtRecordsClient,
        stage: ReviewStage,
        modal: Optional[ModalService] = None,
        clock: Optional[Callable[[], date]] = None,
    ) -> None:
        self.client = client
        self.stage = stage
        self.modal = modal or AutoConfirmModal()
        self.clock = clock or date.today
        self.state = WorkflowState.LISTING
        self.records: List[Record] = []
        self.loading = False
        self.error: Optional[str] = None
        self.selected: Optional[Record] = None
        self.selected_id: Any = None
        self.detail_error: Optional[str] = None
        self.action_error: Optional[str] = None
        self.submitting = False
        self._lock = threading.Lock()
        self._list_token = 0
        self._detail_token = 0

    # -- listing -----------------------------------------------------------

    def refresh(self) -> bool:
        """Fetch the queue. Failures leave an empty list and an error banner."""

        with self._lock:
            self._list_token += 1
            token = self._list_token
            self.loading = True
            self.detail_error = None

        try:
            records = self.client.list_records(self.stage.list_path)
        except ApiError as exc:
            logger.warning("Failed to load %s queue: %s", self.stage.name, exc)
            with self._lock:
                if token == self._list_token:
                    self.records = []
                    self.error = f"{LIST_ERROR_MESSAGE} {exc}"
                    self.loading = False
            return False

        with self._lock:
            if token != self._list_token:
                logger.debug("Discarding superseded %s list response", self.stage.name)
                return False
            self.records = list(records)
            self.error = None
            self.loading = False
        logger.info("Loaded %d record(s) for %s", len(records), self.stage.name)
        return True

    def find(self, rid: Any) -> Optional[Record]:
        for record in self.records:
            if str(record_id(record)) == str(rid):
                return record
        return None

    # -- detail ------------------------------------------------------------

    def select(self, rid: Any) -> bool:
        """Load the full record for ``rid`` and switch to the detail view."""

        with self._lock:
            self._detail_token += 1
            token = self._detail_token
            self.selected_id = rid
            self.detail_error = None
            self.action_error = None

        try:
            record = self._load_detail(rid)
        except ApiError as exc:
            logger.warning("Failed to load %s record %s: %s", self.stage.name, rid, exc)
            with self._lock:
                if token == self._detail_token:
                    self.selected = None
                    self.selected_id = None
                    self.state = WorkflowState.LISTING
                    self.detail_error = DETAIL_ERROR_MESSAGE
            return False

        with self._lock:
            if token != self._detail_token:
                logger.debug("Discarding superseded detail response for %s", rid)
                return False
            self.selected = record
            self.state = WorkflowState.DETAIL
        return True

    def _load_detail(self, rid: Any) -> Record:
        url = self.stage.detail_url(rid)
        if url:
            return self.client.get_record(url)
        record = self.find(rid)
        if record is None:
            raise ApiError(f"Record {rid} is not in the current {self.stage.name} list", 404)
        return dict(record)

    def back(self) -> None:
        with self._lock:
            self._detail_token += 1
            self.state = WorkflowState.LISTING
            self.selected = None
            self.selected_id = None
            self.detail_error = None
            self.action_error = None

    def today(self) -> date:
        return self.clock()

    def maturity(self, threshold_days: int = GAZETTE_THRESHOLD_DAYS) -> Optional[Maturity]:
        """Gazette maturity of the selected record as of the workflow clock."""

        if self.selected is None:
            return None
        return gazette_maturity(self.selected, today=self.today(), threshold_days=threshold_days)

    # -- actions -----------------------------------------------------------

    @property
    def available_actions(self) -> Tuple[str, ...]:
        if self.state != WorkflowState.DETAIL or self.selected is None:
            return ()
        if not self.stage.is_actionable(self.selected.get("status")):
            return ()
        if self.stage.reject_path:
            return (APPROVE, REJECT)
        return (APPROVE,)

    @property
    def can_act(self) -> bool:
        return bool(self.available_actions)

    def approve(self, remarks: Optional[str] = None) -> bool:
        if self.stage.approve_requires_remarks and _blank(remarks):
            raise RemarksRequiredError("Please add review remarks before approving.")
        return self._transition(APPROVE, remarks)

    def reject(self, remarks: Optional[str]) -> bool:
        if _blank(remarks):
            raise RemarksRequiredError("Please provide a reason for rejection in the remarks field.")
        return self._transition(REJECT, remarks)

    def _transition(self, action: str, remarks: Optional[str]) -> bool:
        record = self.selected
        if self.state != WorkflowState.DETAIL or record is None:
            raise NoSelectionError("Select an application before approving or rejecting it.")
        if action not in self.available_actions:
            raise ActionNotAllowedError(
                f"Application is {status_label(record.get('status'))}; {action} is not available."
            )

        rid = record_id(record)
        if not self._confirmed(action):
            logger.info("%s of %s record %s cancelled", action, self.stage.name, rid)
            return False

        remarks = remarks.strip() if remarks else None
        next_status = self.stage.approve_status if action == APPROVE else self.stage.reject_status
        url = self.stage.approve_url(rid) if action == APPROVE else self.stage.reject_url(rid)
        payload: Dict[str, Any] = {"remarks": remarks}
        if self.stage.send_next_status:
            payload["nextStatus"] = next_status

        self.submitting = True
        try:
            self.client.put_action(url, payload)
        except ApiError as exc:
            logger.exception("Failed to %s %s record %s", action, self.stage.name, rid)
            self.action_error = f"{ACTION_ERROR_MESSAGE} {exc}"
            self.modal.notify("error", "Error", self.action_error)
            return False
        finally:
            self.submitting = False

        verb = "approved" if action == APPROVE else "rejected"
        logger.info("Record %s %s in %s (next status %s)", rid, verb, self.stage.name, next_status)
        self.modal.notify("success", "Success", f"Application {verb} successfully.")
        self.back()
        self.refresh()
        return True

    def _confirmed(self, action: str) -> bool:
        if action == APPROVE:
            if not self.stage.confirm_approve:
                return True
            options = ConfirmOptions(
                title="Confirm Approval",
                message="Are you sure you want to approve this application?",
                confirm_text="Yes, Approve",
            )
        else:
            options = ConfirmOptions(
                title="Reject Application?",
                message="The applicant will be notified with your remarks.",
                confirm_text="Reject & Notify",
                kind="error",
            )
        return self.modal.confirm(options).confirmed
