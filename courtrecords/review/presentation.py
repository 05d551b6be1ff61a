"""Display helpers for statuses and the standard probate columns."""
from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional

from courtrecords.browser.dates import format_date
from courtrecords.core.models import ColumnDescriptor
from courtrecords.review.maturity import GAZETTE_THRESHOLD_DAYS, gazette_maturity

_BADGES = {
    "approved": "🟢 Approved",
    "completed": "🟢 Completed",
    "under_processing": "🔵 Under processing",
    "pending_cfo": "🔵 Pending CFO",
    "cr_pending": "🟡 CR pending",
    "pending_registrar": "🟡 Pending registrar",
    "submitted": "🟡 Submitted",
    "pending": "🟡 Pending",
    "rejected": "🔴 Rejected",
}
_DEFAULT_BADGE = "⚪ {label}"

_APPROVED_LIKE = {"approved", "completed", "under_processing"}


def status_label(status: Optional[str]) -> str:
    """``under_processing`` -> ``UNDER PROCESSING``; missing -> ``PENDING``."""

    return (status or "pending").replace("_", " ").upper()


def status_badge(status: Optional[str]) -> str:
    """Return a color-coded label; unknown statuses get a neutral badge."""

    key = status or "pending"
    return _BADGES.get(key, _DEFAULT_BADGE.format(label=status_label(key).capitalize()))


def approval_label(value: Optional[str], status: Optional[str]) -> str:
    if value:
        return value[:1].upper() + value[1:]
    return "Approved" if status in _APPROVED_LIKE else "Pending"


def _applicant_name(value, record) -> str:
    first = value or record.get("first_name") or ""
    last = record.get("applicant_surname") or record.get("surname") or ""
    return " ".join(part for part in (first, last) if part).title()


def _gazette_renderer(today: Optional[date], threshold_days: int) -> Callable:
    def _render(_value, record) -> str:
        maturity = gazette_maturity(record, today=today, threshold_days=threshold_days)
        if maturity is None:
            return "N/A"
        return f"{maturity.label} ({maturity.days_label})"

    return _render


def probate_columns(
    today: Optional[date] = None, threshold_days: int = GAZETTE_THRESHOLD_DAYS
) -> List[ColumnDescriptor]:
    """Columns used by the probate review queues."""

    return [
        ColumnDescriptor("id", "App ID", sortable=True, render=lambda v, _r: f"PRB-{v}"),
        ColumnDescriptor(
            "deceased_name",
            "Deceased Name",
            sortable=True,
            render=lambda v, _r: (v or "").title(),
        ),
        ColumnDescriptor("applicant_first_name", "Next of Kin", sortable=True, render=_applicant_name),
        ColumnDescriptor(
            "filed_by_name",
            "Filed By",
            sortable=True,
            hidden_on_narrow=True,
            render=lambda v, _r: "Registry" if v else "Self (Online)",
        ),
        ColumnDescriptor(
            "gazette",
            "Gazette",
            hidden_on_narrow=True,
            render=_gazette_renderer(today, threshold_days),
        ),
        ColumnDescriptor("status", "Status", sortable=True, render=lambda v, _r: status_badge(v)),
        ColumnDescriptor(
            "approval",
            "Approval",
            sortable=True,
            hidden_on_narrow=True,
            render=lambda v, r: approval_label(v, r.get("status")),
        ),
        ColumnDescriptor(
            "approval_date",
            "Approval Date",
            sortable=True,
            hidden_on_narrow=True,
            render=lambda v, r: format_date(
                v or (r.get("updated_at") if r.get("status") == "approved" else None)
            ),
        ),
    ]


def affidavit_columns() -> List[ColumnDescriptor]:
    """Columns used by the affidavit registry queue."""

    return [
        ColumnDescriptor("id", "ID", sortable=True, render=lambda v, _r: f"AFF-{v}"),
        ColumnDescriptor("type", "Type", sortable=True, render=lambda v, _r: (v or "").title()),
        ColumnDescriptor(
            "first_name",
            "Deponent",
            sortable=True,
            render=lambda v, r: f"{v or ''} {r.get('surname') or ''}".strip(),
        ),
        ColumnDescriptor("source", "Source", sortable=True, hidden_on_narrow=True),
        ColumnDescriptor(
            "created_at",
            "Submitted",
            sortable=True,
            hidden_on_narrow=True,
            render=lambda v, _r: format_date(v),
        ),
        ColumnDescriptor("status", "Status", sortable=True, render=lambda v, _r: status_badge(v)),
    ]


def columns_for_stage(
    stage_name: str, today: Optional[date] = None, threshold_days: int = GAZETTE_THRESHOLD_DAYS
) -> List[ColumnDescriptor]:
    if stage_name.startswith("affidavit"):
        return affidavit_columns()
    return probate_columns(today=today, threshold_days=threshold_days)
