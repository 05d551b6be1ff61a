"""Pytest configuration and shared fakes for the courtrecords tests."""
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

# Ensure repository root is on sys.path for module resolution
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from courtrecords.core.errors import ApiError

_ACTION_STATUS = {"approve": "under_processing", "reject": "rejected", "review": "cr_pending"}


def make_probate_records(count: int = 25, status: str = "cr_pending") -> List[Dict[str, Any]]:
    """Build probate rows shaped like the staff list endpoints return them."""

    return [
        {
            "id": index,
            "deceased_name": f"deceased {index}",
            "applicant_first_name": "Ada" if index % 2 else "Kofi",
            "applicant_surname": "Mensah",
            "filed_by_name": None,
            "status": status,
            "approval_date": None,
            "created_at": f"2024-01-{index:02d}T10:00:00.000Z",
        }
        for index in range(1, count + 1)
    ]


class FakeClient:
    """In-memory stand-in for ``CourtRecordsClient`` that records every call."""

    def __init__(self, records: Optional[List[Dict[str, Any]]] = None) -> None:
        self.records = [dict(record) for record in (records or [])]
        self.calls: List[tuple] = []
        self.fail_list = False
        self.fail_detail = False
        self.fail_action = False
        self.before_detail: Optional[Callable[[str], None]] = None

    def _find(self, rid: str) -> Optional[Dict[str, Any]]:
        return next((r for r in self.records if str(r["id"]) == str(rid)), None)

    def list_records(self, path: str) -> List[Dict[str, Any]]:
        self.calls.append(("GET", path, None))
        if self.fail_list:
            raise ApiError("Service unavailable", 503)
        return [dict(record) for record in self.records]

    def get_record(self, path: str) -> Dict[str, Any]:
        self.calls.append(("GET", path, None))
        rid = path.rstrip("/").split("/")[-1]
        if self.before_detail:
            hook, self.before_detail = self.before_detail, None
            hook(rid)
        record = self._find(rid)
        if self.fail_detail or record is None:
            raise ApiError("Application not found", 404)
        detail = dict(record)
        detail["beneficiaries"] = [{"name": "Heir", "relationship": "child"}]
        return detail

    def put_action(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(("PUT", path, payload))
        if self.fail_action:
            raise ApiError("Rejection remarks are required", 400)
        parts = path.rstrip("/").split("/")
        record = self._find(parts[-2])
        if record is not None:
            record["status"] = payload.get("nextStatus") or _ACTION_STATUS.get(parts[-1], record["status"])
        return {"message": "ok"}

    @property
    def puts(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == "PUT"]

    @property
    def gets(self) -> List[tuple]:
        return [call for call in self.calls if call[0] == "GET"]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep local secrets files and CRMS_* variables out of the tests."""

    monkeypatch.setenv("CRMS_ENV_FILE", str(tmp_path / "missing.env"))
    for key in (
        "CRMS_API_URL",
        "CRMS_API_TOKEN",
        "CRMS_API_TIMEOUT",
        "CRMS_PAGE_SIZE",
        "CRMS_MATURITY_DAYS",
        "CRMS_STAGES_FILE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def probate_records() -> List[Dict[str, Any]]:
    return make_probate_records()


@pytest.fixture
def fake_client(probate_records) -> FakeClient:
    return FakeClient(probate_records)
