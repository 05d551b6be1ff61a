"""Lenient date parsing for API timestamps and filter bounds."""
from __future__ import annotations

from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

_FORMATS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
]


def parse_date(raw: Any) -> Optional[date]:
    """Return the calendar date of ``raw`` or ``None`` when it cannot be parsed.

    Aware datetimes are converted to UTC first, which matches how the API
    serializes MySQL ``DATETIME`` columns (``2024-03-01T09:30:00.000Z``).
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        return _to_utc(raw).date()
    if isinstance(raw, date):
        return raw

    text = str(raw).strip()
    if not text:
        return None

    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return _to_utc(datetime.fromisoformat(iso_text)).date()
    except ValueError:
        pass

    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
    return _to_utc(parsed).date() if parsed else None


def _to_utc(value: datetime) -> datetime:
    return value.astimezone(timezone.utc) if value.tzinfo else value


def record_date(record: dict) -> Optional[date]:
    """Return the date used for range filtering: ``created_at`` else ``date``."""

    return parse_date(record.get("created_at") or record.get("date"))


def format_date(raw: Any, fallback: str = "---") -> str:
    """Render a date the way the staff screens show it (``01 Mar 2024``)."""

    parsed = parse_date(raw)
    if parsed is None:
        return fallback
    return parsed.strftime("%d %b %Y")
