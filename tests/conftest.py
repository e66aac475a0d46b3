from __future__ import annotations

import dataclasses
from collections import Counter
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from pecc_time.container import Container
from pecc_time.core.exceptions import NotFound, RemoteUnavailable
from pecc_time.gateway.gateway import ResilientDataGateway
from pecc_time.gateway.ids import IdSequence
from pecc_time.main import create_app
from pecc_time.remote.client import RemoteServiceClient
from pecc_time.storage.defaults import DEFAULT_USERS, default_submissions, default_time_entries
from pecc_time.storage.local_cache import LocalCacheAdapter

BASE_URL = "http://testserver/api"


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 31, 9, 0, tzinfo=timezone.utc)


# -------- Server-side in-memory repositories --------
class InMemoryUserRepository:
    def __init__(self, users=()):
        self._rows = {u.id: u for u in users}

    def list_all(self):
        return list(self._rows.values())

    def get_by_id(self, user_id):
        return self._rows.get(user_id)

    def find_by_credentials(self, name, password):
        for u in self._rows.values():
            if u.name == name and u.password == password:
                return u
        return None

    def create(self, user):
        created = dataclasses.replace(user, id=max(self._rows, default=0) + 1)
        self._rows[created.id] = created
        return created

    def save(self, user):
        self._rows[user.id] = user
        return user

    def delete_by_id(self, user_id):
        return self._rows.pop(user_id, None) is not None


class InMemoryTimeEntryRepository:
    def __init__(self, entries=()):
        self._rows = {e.id: e for e in entries}

    def list_all(self):
        return list(self._rows.values())

    def get_by_id(self, entry_id):
        return self._rows.get(entry_id)

    def create(self, entry):
        created = dataclasses.replace(entry, id=max(self._rows, default=0) + 1)
        self._rows[created.id] = created
        return created

    def save(self, entry):
        self._rows[entry.id] = entry
        return entry


class InMemorySubmissionRepository:
    def __init__(self, submissions=()):
        self._rows = {s.id: s for s in submissions}

    def list_all(self):
        return list(self._rows.values())

    def create(self, submission):
        created = dataclasses.replace(submission, id=max(self._rows, default=0) + 1)
        self._rows[created.id] = created
        return created


@pytest.fixture
def server_container(fixed_now) -> Container:
    return Container(
        users_repo=InMemoryUserRepository(DEFAULT_USERS),
        time_entries_repo=InMemoryTimeEntryRepository(default_time_entries(fixed_now)),
        submissions_repo=InMemorySubmissionRepository(default_submissions(fixed_now)),
    )


@pytest.fixture
def app(server_container):
    return create_app(server_container)


# -------- requests transport that talks to the Flask test client --------
class FlaskTestAdapter(BaseAdapter):
    def __init__(self, flask_app):
        super().__init__()
        self._client = flask_app.test_client()
        self.requests: list[tuple[str, str]] = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        parts = urlsplit(request.url)
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        headers = {k: v for k, v in request.headers.items() if k.lower() not in ("content-length", "host")}
        self.requests.append((request.method, path))

        resp = self._client.open(path, method=request.method, data=request.body, headers=headers)

        response = requests.Response()
        response.status_code = resp.status_code
        response._content = resp.get_data()
        response.headers = CaseInsensitiveDict(resp.headers)
        response.encoding = "utf-8"
        response.reason = resp.status
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class StaticAdapter(BaseAdapter):
    """Answers every request with the same status and body."""

    def __init__(self, status: int, body: bytes):
        super().__init__()
        self._status = status
        self._body = body
        self.attempts = 0

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.attempts += 1
        response = requests.Response()
        response.status_code = self._status
        response._content = self._body
        response.encoding = "utf-8"
        response.reason = "static"
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class UnreachableAdapter(BaseAdapter):
    """Every request fails the way a refused connection does."""

    def __init__(self):
        super().__init__()
        self.attempts = 0

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.attempts += 1
        raise requests.exceptions.ConnectionError(f"connection refused: {request.url}")

    def close(self):
        pass


def client_with_adapter(adapter: BaseAdapter) -> RemoteServiceClient:
    session = requests.Session()
    session.mount("http://testserver/", adapter)
    return RemoteServiceClient(BASE_URL, timeout=1.0, session=session)


@pytest.fixture
def flask_adapter(app) -> FlaskTestAdapter:
    return FlaskTestAdapter(app)


@pytest.fixture
def remote_client(flask_adapter) -> RemoteServiceClient:
    return client_with_adapter(flask_adapter)


# -------- Client-side fakes --------
class FakeRemote:
    """Scriptable RemoteService: raises ``failure`` when set, counts every call."""

    def __init__(self, users=(), entries=(), submissions=()):
        self.users = list(users)
        self.entries = list(entries)
        self.submissions = list(submissions)
        self.failure: Optional[Exception] = None
        self.calls: Counter = Counter()
        self._next_id = 1000

    def _enter(self, name):
        self.calls[name] += 1
        if self.failure is not None:
            raise self.failure

    def _assign_id(self, record):
        self._next_id += 1
        return dataclasses.replace(record, id=self._next_id)

    @staticmethod
    def _replace(items, record, kind):
        for i, item in enumerate(items):
            if item.id == record.id:
                items[i] = record
                return record
        raise NotFound(f"{kind} not found")

    def login(self, name, password):
        self._enter("login")
        for u in self.users:
            if u.name == name and u.password == password:
                return u
        return None

    def list_users(self):
        self._enter("list_users")
        return list(self.users)

    def create_user(self, user):
        self._enter("create_user")
        created = dataclasses.replace(self._assign_id(user), force_password_change=True)
        self.users.append(created)
        return created

    def update_user(self, user):
        self._enter("update_user")
        return self._replace(self.users, user, "User")

    def delete_user(self, user_id):
        self._enter("delete_user")
        before = len(self.users)
        self.users = [u for u in self.users if u.id != user_id]
        if len(self.users) == before:
            raise NotFound("User not found")

    def list_time_entries(self):
        self._enter("list_time_entries")
        return list(self.entries)

    def create_time_entry(self, entry):
        self._enter("create_time_entry")
        created = self._assign_id(entry)
        self.entries.append(created)
        return created

    def update_time_entry(self, entry):
        self._enter("update_time_entry")
        return self._replace(self.entries, entry, "Time entry")

    def list_submissions(self):
        self._enter("list_submissions")
        return list(self.submissions)

    def create_submission(self, submission):
        self._enter("create_submission")
        created = self._assign_id(submission)
        self.submissions.append(created)
        return created


def transport_failure() -> RemoteUnavailable:
    return RemoteUnavailable("connection refused", reason="transport")


@pytest.fixture
def cache(tmp_path, fixed_now, monkeypatch) -> LocalCacheAdapter:
    monkeypatch.setattr("pecc_time.storage.defaults.now_utc", lambda: fixed_now)
    adapter = LocalCacheAdapter(tmp_path / "cache")
    adapter.init()
    return adapter


@pytest.fixture
def fake_remote(fixed_now) -> FakeRemote:
    return FakeRemote(DEFAULT_USERS, default_time_entries(fixed_now), default_submissions(fixed_now))


@pytest.fixture
def gateway(fake_remote, cache) -> ResilientDataGateway:
    ticks = iter(range(1_700_000_000, 1_800_000_000))
    return ResilientDataGateway(fake_remote, cache, ids=IdSequence(clock=lambda: float(next(ticks))))
