"""Review stage definitions: which endpoints and statuses each queue uses."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, FrozenSet, Optional

from courtrecords.core.models import CASE_STATUSES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewStage:
    """Endpoint and status configuration for one review queue.

    ``detail_path`` and the action paths are templates formatted with the
    record id. A ``detail_path`` of ``None`` means the list row already holds
    the full record; a ``reject_path`` of ``None`` means the stage offers no
    reject action.
    """

    name: str
    title: str
    list_path: str
    approve_path: str
    detail_path: Optional[str] = None
    reject_path: Optional[str] = None
    actionable_statuses: FrozenSet[str] = frozenset()
    approve_status: str = "approved"
    reject_status: str = "rejected"
    send_next_status: bool = False
    approve_requires_remarks: bool = False
    confirm_approve: bool = True

    def detail_url(self, record_id) -> Optional[str]:
        return self.detail_path.format(id=record_id) if self.detail_path else None

    def approve_url(self, record_id) -> str:
        return self.approve_path.format(id=record_id)

    def reject_url(self, record_id) -> Optional[str]:
        return self.reject_path.format(id=record_id) if self.reject_path else None

    def is_actionable(self, status: Optional[str]) -> bool:
        return (status or "pending") in self.actionable_statuses


_CR_ACTIONABLE = frozenset({"cr_pending", "pending", "pending_registrar"})
# The registrar may (re)review anything not yet past Chief Registrar approval.
_REGISTRAR_ACTIONABLE = frozenset(CASE_STATUSES) - {"under_processing", "approved", "completed"}

DEFAULT_STAGES: Dict[str, ReviewStage] = {
    stage.name: stage
    for stage in (
        ReviewStage(
            name="affidavit-registry",
            title="Affidavits pending registry review",
            list_path="/staff/affidavits/pending-review",
            approve_path="/affidavits/{id}/approve",
            reject_path="/affidavits/{id}/approve",
            actionable_statuses=frozenset({"submitted"}),
            approve_status="pending_cfo",
            reject_status="rejected",
            send_next_status=True,
        ),
        ReviewStage(
            name="probate-registrar",
            title="Probate applications pending registrar review",
            list_path="/staff/probate/pending-review",
            detail_path="/staff/probate/{id}",
            approve_path="/staff/probate/{id}/review",
            actionable_statuses=_REGISTRAR_ACTIONABLE,
            approve_status="cr_pending",
            approve_requires_remarks=True,
        ),
        ReviewStage(
            name="probate-cr",
            title="Probate applications pending Chief Registrar approval",
            list_path="/staff/probate/cr-pending",
            detail_path="/staff/probate/{id}",
            approve_path="/staff/probate/{id}/approve",
            reject_path="/staff/probate/{id}/reject",
            actionable_statuses=_CR_ACTIONABLE,
            approve_status="under_processing",
        ),
        ReviewStage(
            name="probate-all",
            title="All probate applications",
            list_path="/staff/probate/all",
            detail_path="/staff/probate/{id}",
            approve_path="/staff/probate/{id}/approve",
            reject_path="/staff/probate/{id}/reject",
            actionable_statuses=_CR_ACTIONABLE,
            approve_status="under_processing",
        ),
        ReviewStage(
            name="probate-letters",
            title="Issued letters of administration",
            list_path="/staff/probate/letters",
            detail_path="/staff/probate/{id}",
            approve_path="/staff/probate/{id}/approve",
            reject_path="/staff/probate/{id}/reject",
            approve_status="under_processing",
        ),
    )
}


def _stage_from_dict(name: str, raw: dict) -> ReviewStage:
    allowed = {f.name for f in fields(ReviewStage)}
    unknown = set(raw) - allowed
    if unknown:
        raise ValueError(f"Stage {name!r} has unknown keys: {', '.join(sorted(unknown))}")
    data = dict(raw)
    data["name"] = name
    data.setdefault("title", name)
    data["actionable_statuses"] = frozenset(data.get("actionable_statuses", ()))
    for required in ("list_path", "approve_path"):
        if not data.get(required):
            raise ValueError(f"Stage {name!r} is missing {required}")
    return ReviewStage(**data)


def load_stages(path: Optional[Path] = None) -> Dict[str, ReviewStage]:
    """Return the built-in stages, overridden by a JSON file when given.

    The file maps stage names to objects with ``ReviewStage`` field names.
    """

    stages = dict(DEFAULT_STAGES)
    if path is None:
        return stages

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a JSON object of stages")
    for name, body in raw.items():
        if not isinstance(body, dict):
            raise ValueError(f"Stage {name!r} in {path} must be an object")
        stages[name] = _stage_from_dict(name, body)
    logger.info("Loaded %d stage definition(s) from %s", len(raw), path)
    return stages
