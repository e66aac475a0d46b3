"""Resilient data gateway: remote first, local cache after the first failure.

The gateway owns a single ``remote_available`` flag. It starts out True and only
ever goes to False; once the remote has failed, every later call in the session
is served by the local cache without touching the network. A fresh session (a
new gateway) probes the remote again.

Usage:
    gateway = ResilientDataGateway(RemoteServiceClient(url), LocalCacheAdapter(path))
    gateway.subscribe(lambda mode: print(mode))
    entry = gateway.create_time_entry(draft)
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from ..core.enums import ConnectionMode
from ..core.exceptions import NotFound, RemoteUnavailable
from ..storage.local_cache import LocalCacheAdapter
from ..submissions.model import ContractorSubmission
from ..time_entries.model import TimeEntry
from ..users.model import User
from .ids import IdSequence

logger = logging.getLogger(__name__)

T = TypeVar("T")

ConnectionListener = Callable[[ConnectionMode], None]


class RemoteService(Protocol):
    def login(self, name: str, password: str) -> Optional[User]: ...

    def list_users(self) -> list[User]: ...

    def create_user(self, user: User) -> User: ...

    def update_user(self, user: User) -> User: ...

    def delete_user(self, user_id: int) -> None: ...

    def list_time_entries(self) -> list[TimeEntry]: ...

    def create_time_entry(self, entry: TimeEntry) -> TimeEntry: ...

    def update_time_entry(self, entry: TimeEntry) -> TimeEntry: ...

    def list_submissions(self) -> list[ContractorSubmission]: ...

    def create_submission(self, submission: ContractorSubmission) -> ContractorSubmission: ...


class ResilientDataGateway:
    def __init__(self, remote: RemoteService, cache: LocalCacheAdapter, *, ids: Optional[IdSequence] = None):
        self._remote = remote
        self._cache = cache
        self._ids = ids or IdSequence()
        self._remote_available = True
        self._lock = threading.RLock()
        self._listeners: List[ConnectionListener] = []

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def remote_available(self) -> bool:
        """Passive display only; callers must not branch on it."""
        return self._remote_available

    @property
    def mode(self) -> ConnectionMode:
        return ConnectionMode.REMOTE if self._remote_available else ConnectionMode.LOCAL

    def subscribe(self, listener: ConnectionListener) -> Callable[[], None]:
        """Register for connectivity transitions; returns an unsubscribe callable."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _downgrade(self, operation: str, error: RemoteUnavailable) -> None:
        with self._lock:
            if not self._remote_available:
                return
            self._remote_available = False
            listeners = list(self._listeners)

        if error.reason == "transport":
            logger.warning("Remote unreachable during %s (%s); switching to local cache", operation, error)
        else:
            logger.warning(
                "Remote rejected %s (reason=%s, status=%s); switching to local cache",
                operation,
                error.reason,
                error.status_code,
            )

        for listener in listeners:
            try:
                listener(ConnectionMode.LOCAL)
            except Exception as e:
                logger.error("Error in connection listener: %s", e)

    def _call(self, operation: str, remote_call: Callable[[], T], local_call: Callable[[], T]) -> T:
        if self._remote_available:
            try:
                return remote_call()
            except RemoteUnavailable as e:
                self._downgrade(operation, e)
        return local_call()

    # =========================================================================
    # AUTH
    # =========================================================================

    def login(self, name: str, password: str) -> Optional[User]:
        return self._call(
            "login",
            lambda: self._remote.login(name, password),
            lambda: self._local_login(name, password),
        )

    def _local_login(self, name: str, password: str) -> Optional[User]:
        for user in self._cache.get_users():
            if user.name == name and user.password == password:
                return user
        return None

    # =========================================================================
    # USERS
    # =========================================================================

    def list_users(self) -> list[User]:
        return self._call("list_users", self._remote.list_users, self._cache.get_users)

    def create_user(self, user: User) -> User:
        return self._call("create_user", lambda: self._remote.create_user(user), lambda: self._local_create_user(user))

    def update_user(self, user: User) -> User:
        return self._call(
            "update_user",
            lambda: self._remote_or_unchanged(lambda: self._remote.update_user(user), user),
            lambda: self._local_replace(self._cache.get_users, self._cache.set_users, user),
        )

    def delete_user(self, user_id: int) -> None:
        self._call(
            "delete_user",
            lambda: self._remote_or_unchanged(lambda: self._remote.delete_user(user_id), None),
            lambda: self._local_remove(self._cache.get_users, self._cache.set_users, user_id),
        )

    def _local_create_user(self, user: User) -> User:
        users = self._cache.get_users()
        created = dataclasses.replace(user, id=self._ids.next_id(u.id for u in users), force_password_change=True)
        users.append(created)
        self._cache.set_users(users)
        return created

    # =========================================================================
    # TIME ENTRIES
    # =========================================================================

    def list_time_entries(self) -> list[TimeEntry]:
        return self._call("list_time_entries", self._remote.list_time_entries, self._cache.get_entries)

    def create_time_entry(self, entry: TimeEntry) -> TimeEntry:
        return self._call(
            "create_time_entry",
            lambda: self._remote.create_time_entry(entry),
            lambda: self._local_insert(self._cache.get_entries, self._cache.set_entries, entry),
        )

    def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        return self._call(
            "update_time_entry",
            lambda: self._remote_or_unchanged(lambda: self._remote.update_time_entry(entry), entry),
            lambda: self._local_replace(self._cache.get_entries, self._cache.set_entries, entry),
        )

    # =========================================================================
    # CONTRACTOR SUBMISSIONS
    # =========================================================================

    def list_submissions(self) -> list[ContractorSubmission]:
        return self._call("list_submissions", self._remote.list_submissions, self._cache.get_submissions)

    def create_submission(self, submission: ContractorSubmission) -> ContractorSubmission:
        return self._call(
            "create_submission",
            lambda: self._remote.create_submission(submission),
            lambda: self._local_insert(self._cache.get_submissions, self._cache.set_submissions, submission),
        )

    # =========================================================================
    # LOCAL MUTATIONS (read whole collection, apply one change, write back)
    # =========================================================================

    @staticmethod
    def _remote_or_unchanged(remote_call: Callable[[], T], unchanged: T) -> T:
        # A missing id is not a connectivity problem: same no-op as the local path.
        try:
            return remote_call()
        except NotFound as e:
            logger.info("Remote has no such record (%s); nothing to change", e)
            return unchanged

    def _local_insert(self, read: Callable[[], list], write: Callable[[Sequence], None], record: T) -> T:
        items = read()
        created = dataclasses.replace(record, id=self._ids.next_id(i.id for i in items))
        items.append(created)
        write(items)
        return created

    @staticmethod
    def _local_replace(read: Callable[[], list], write: Callable[[Sequence], None], record: T) -> T:
        items = read()
        for index, item in enumerate(items):
            if item.id == record.id:
                items[index] = record
                write(items)
                break
        return record

    @staticmethod
    def _local_remove(read: Callable[[], list], write: Callable[[Sequence], None], record_id: int) -> None:
        items = read()
        remaining = [i for i in items if i.id != record_id]
        if len(remaining) != len(items):
            write(remaining)
