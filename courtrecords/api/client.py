"""Thin ``requests`` client for the court records REST API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from courtrecords.core.errors import ApiError
from courtrecords.core.settings import Settings

logger = logging.getLogger(__name__)


class CourtRecordsClient:
    """Issue list, detail, and action requests against the staff API.

    Paths are relative to ``base_url`` (``/staff/probate/cr-pending``); the
    backend owns their meaning. Every failure surfaces as :class:`ApiError`.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "CourtRecordsClient":
        return cls(settings.api_url, token=settings.api_token, timeout=settings.api_timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if response.status_code >= 400:
            raise ApiError(_error_message(response, method, path), response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                f"{method} {path} returned invalid JSON", response.status_code
            ) from exc

    def list_records(self, path: str) -> List[Dict[str, Any]]:
        """Fetch a list endpoint; a non-list body is treated as no records."""

        data = self._request("GET", path)
        if not isinstance(data, list):
            logger.warning("Expected a JSON array from %s, got %s", path, type(data).__name__)
            return []
        return [row for row in data if isinstance(row, dict)]

    def get_record(self, path: str) -> Dict[str, Any]:
        data = self._request("GET", path)
        if not isinstance(data, dict):
            raise ApiError(f"GET {path} did not return a record")
        return data

    def put_action(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = self._request("PUT", path, payload)
        return data if isinstance(data, dict) else {}


def _error_message(response: requests.Response, method: str, path: str) -> str:
    """Prefer the backend's ``{"error": ...}`` text over a bare status line."""

    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("error") or body.get("message")
        if detail:
            return str(detail)
    return f"{method} {path} failed with HTTP {response.status_code}"
