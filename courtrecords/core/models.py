"""Data models shared by the table browser and the review workflow."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

Record = Dict[str, Any]

CASE_STATUSES = (
    "pending",
    "submitted",
    "pending_registrar",
    "cr_pending",
    "pending_cfo",
    "under_processing",
    "approved",
    "rejected",
    "completed",
)


class LayoutMode(str, Enum):
    """Layout hint passed in by the host instead of reading the viewport."""

    NORMAL = "normal"
    COMPACT = "compact"


@dataclass(frozen=True)
class ColumnDescriptor:
    """Describes how one record field is displayed and whether it sorts."""

    key: str
    label: str
    sortable: bool = False
    hidden_on_narrow: bool = False
    render: Optional[Callable[[Any, Record], Any]] = None

    def display(self, record: Record) -> Any:
        """Return the cell value for ``record``, formatted by ``render`` when set."""

        value = record.get(self.key)
        if self.render is None:
            return value
        return self.render(value, record)


def record_id(record: Record) -> Any:
    """Return the identity of a record (``id`` by convention)."""

    return record.get("id")
