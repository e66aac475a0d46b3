"""HTTP client for the PECC-TIME CRUD server.

One method per entity verb, one round trip per call, no retries. Transport
failures and non-success statuses both surface as ``RemoteUnavailable``; the
gateway decides what to do about them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

import requests

from ..core.constants import DEFAULT_REMOTE_TIMEOUT_SECONDS
from ..core.exceptions import NotFound, RemoteUnavailable
from ..storage.mapping import SUBMISSION_CODEC, TIME_ENTRY_CODEC, USER_CODEC
from ..submissions.model import ContractorSubmission
from ..time_entries.model import TimeEntry
from ..users.model import User

logger = logging.getLogger(__name__)

T = TypeVar("T")

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class RemoteServiceClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_REMOTE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(_JSON_HEADERS)

    # -------- Auth --------
    def login(self, name: str, password: str) -> Optional[User]:
        """Return the matching user, or None when the server rejects the credentials."""
        data = self._request("POST", "/auth/login", json={"name": name, "password": password}, unauthorized_ok=True)
        if data is None:
            return None
        return self._decode(USER_CODEC.from_wire, data)

    # -------- Users --------
    def list_users(self) -> list[User]:
        return self._decode_list(USER_CODEC.from_wire, self._request("GET", "/users"))

    def create_user(self, user: User) -> User:
        data = self._request("POST", "/users", json=USER_CODEC.to_wire(user, include_id=False))
        return self._decode(USER_CODEC.from_wire, data)

    def update_user(self, user: User) -> User:
        data = self._request("PUT", f"/users/{int(user.id)}", json=USER_CODEC.to_wire(user))
        return self._decode(USER_CODEC.from_wire, data)

    def delete_user(self, user_id: int) -> None:
        self._request("DELETE", f"/users/{int(user_id)}")

    # -------- Time entries --------
    def list_time_entries(self) -> list[TimeEntry]:
        return self._decode_list(TIME_ENTRY_CODEC.from_wire, self._request("GET", "/time-entries"))

    def create_time_entry(self, entry: TimeEntry) -> TimeEntry:
        data = self._request("POST", "/time-entries", json=TIME_ENTRY_CODEC.to_wire(entry, include_id=False))
        return self._decode(TIME_ENTRY_CODEC.from_wire, data)

    def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        data = self._request("PUT", f"/time-entries/{int(entry.id)}", json=TIME_ENTRY_CODEC.to_wire(entry))
        return self._decode(TIME_ENTRY_CODEC.from_wire, data)

    # -------- Contractor submissions (append-only) --------
    def list_submissions(self) -> list[ContractorSubmission]:
        return self._decode_list(SUBMISSION_CODEC.from_wire, self._request("GET", "/contractor-submissions"))

    def create_submission(self, submission: ContractorSubmission) -> ContractorSubmission:
        data = self._request(
            "POST",
            "/contractor-submissions",
            json=SUBMISSION_CODEC.to_wire(submission, include_id=False),
        )
        return self._decode(SUBMISSION_CODEC.from_wire, data)

    def _request(self, method: str, endpoint: str, *, json: Any = None, unauthorized_ok: bool = False) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(method=method, url=url, json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("Remote transport failure on %s %s: %s", method, endpoint, e)
            raise RemoteUnavailable(f"{method} {endpoint} failed: {e}", reason="transport") from e

        status = response.status_code
        if unauthorized_ok and status == 401:
            return None
        if status == 404:
            raise NotFound(self._error_message(response) or f"{endpoint} not found")
        if not response.ok:
            logger.warning("Remote returned HTTP %s on %s %s", status, method, endpoint)
            raise RemoteUnavailable(
                self._error_message(response) or f"HTTP error! status: {status}",
                reason="status",
                status_code=status,
            )

        if status == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("Remote sent a non-JSON body on %s %s", method, endpoint)
            raise RemoteUnavailable(f"Malformed response from {endpoint}", reason="payload", status_code=status) from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return str(body.get("message") or "")
        return ""

    @staticmethod
    def _decode(decode: Callable[[Any], T], data: Any) -> T:
        try:
            return decode(data)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Remote payload did not match the expected shape: %s", e)
            raise RemoteUnavailable(f"Unexpected payload: {e}", reason="payload") from e

    @classmethod
    def _decode_list(cls, decode: Callable[[Any], T], data: Optional[Iterable[Any]]) -> list[T]:
        if not isinstance(data, list):
            raise RemoteUnavailable("Expected a JSON list", reason="payload")
        return [cls._decode(decode, item) for item in data]
