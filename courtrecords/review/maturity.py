"""Gazette maturity: days elapsed since approval against a fixed threshold."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from courtrecords.browser.dates import parse_date
from courtrecords.core.models import Record

GAZETTE_THRESHOLD_DAYS = 21


@dataclass(frozen=True)
class Maturity:
    approved_on: date
    days: int
    matured: bool

    @property
    def label(self) -> str:
        return "Matured" if self.matured else "Process"

    @property
    def days_label(self) -> str:
        return f"{self.days} Day{'s' if self.days != 1 else ''}"


def approval_date(record: Record) -> Optional[date]:
    """Return ``approval_date``, falling back to ``updated_at`` for approved records."""

    raw = record.get("approval_date")
    if not raw and record.get("status") == "approved":
        raw = record.get("updated_at")
    return parse_date(raw) if raw else None


def gazette_maturity(
    record: Record,
    today: Optional[date] = None,
    threshold_days: int = GAZETTE_THRESHOLD_DAYS,
) -> Optional[Maturity]:
    """Compute the read-only gazette indicator, or ``None`` without an approval date."""

    approved_on = approval_date(record)
    if approved_on is None:
        return None
    today = today or date.today()
    days = (today - approved_on).days
    return Maturity(approved_on=approved_on, days=days, matured=days >= threshold_days)
