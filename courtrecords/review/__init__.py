"""Review/approval workflow for staff queues."""
from courtrecords.review.maturity import GAZETTE_THRESHOLD_DAYS, Maturity, gazette_maturity
from courtrecords.review.modal import (
    AutoConfirmModal,
    ConfirmOptions,
    ConfirmResult,
    ConsoleModal,
    ModalService,
)
from courtrecords.review.presentation import columns_for_stage, status_badge, status_label
from courtrecords.review.stages import DEFAULT_STAGES, ReviewStage, load_stages
from courtrecords.review.workflow import APPROVE, REJECT, ReviewWorkflow, WorkflowState

__all__ = [
    "APPROVE",
    "AutoConfirmModal",
    "ConfirmOptions",
    "ConfirmResult",
    "ConsoleModal",
    "DEFAULT_STAGES",
    "GAZETTE_THRESHOLD_DAYS",
    "Maturity",
    "ModalService",
    "REJECT",
    "ReviewStage",
    "ReviewWorkflow",
    "WorkflowState",
    "columns_for_stage",
    "gazette_maturity",
    "load_stages",
    "status_badge",
    "status_label",
]
