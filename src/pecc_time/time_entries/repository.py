from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def list_all(self) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def create(self, entry: TimeEntry) -> TimeEntry:
        raise NotImplementedError

    def save(self, entry: TimeEntry) -> TimeEntry:
        raise NotImplementedError
