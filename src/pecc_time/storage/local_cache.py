"""Offline cache for the three entity collections.

Each collection lives in its own slot, a JSON file under the cache directory.
Reads and writes always cover the whole collection; a write goes to a temporary
file first and is moved into place so a crash never leaves half a slot behind.

No validation happens here and storage errors are not caught: callers pass
well-formed collections and treat an I/O failure as fatal for that operation.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

from ..core.constants import ENTRIES_SLOT, SUBMISSIONS_SLOT, USERS_SLOT
from ..submissions.model import ContractorSubmission
from ..time_entries.model import TimeEntry
from ..users.model import User
from .defaults import DEFAULT_USERS, default_submissions, default_time_entries
from .mapping import SUBMISSION_CODEC, TIME_ENTRY_CODEC, USER_CODEC, EntityCodec

logger = logging.getLogger(__name__)


class LocalCacheAdapter:
    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)

    def init(self) -> None:
        """Seed every absent slot with the built-in defaults; existing slots are left alone."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        seeds: dict[str, Callable[[], list[dict[str, Any]]]] = {
            USERS_SLOT: lambda: [USER_CODEC.to_cache(u) for u in DEFAULT_USERS],
            ENTRIES_SLOT: lambda: [TIME_ENTRY_CODEC.to_cache(e) for e in default_time_entries()],
            SUBMISSIONS_SLOT: lambda: [SUBMISSION_CODEC.to_cache(s) for s in default_submissions()],
        }
        for slot, build in seeds.items():
            if not self._slot_path(slot).exists():
                logger.info("Seeding local cache slot %s", slot)
                self._write_slot(slot, build())

    def get_users(self) -> list[User]:
        return self._read(USERS_SLOT, USER_CODEC)

    def set_users(self, users: Sequence[User]) -> None:
        self._write(USERS_SLOT, USER_CODEC, users)

    def get_entries(self) -> list[TimeEntry]:
        return self._read(ENTRIES_SLOT, TIME_ENTRY_CODEC)

    def set_entries(self, entries: Sequence[TimeEntry]) -> None:
        self._write(ENTRIES_SLOT, TIME_ENTRY_CODEC, entries)

    def get_submissions(self) -> list[ContractorSubmission]:
        return self._read(SUBMISSIONS_SLOT, SUBMISSION_CODEC)

    def set_submissions(self, submissions: Sequence[ContractorSubmission]) -> None:
        self._write(SUBMISSIONS_SLOT, SUBMISSION_CODEC, submissions)

    def _slot_path(self, slot: str) -> Path:
        return self.cache_dir / f"{slot}.json"

    def _read(self, slot: str, codec: EntityCodec[Any]) -> list[Any]:
        raw = self._read_slot(slot)
        if raw is None:
            return []
        return [codec.from_cache(item) for item in raw]

    def _write(self, slot: str, codec: EntityCodec[Any], items: Sequence[Any]) -> None:
        self._write_slot(slot, [codec.to_cache(item) for item in items])

    def _read_slot(self, slot: str) -> Optional[list[dict[str, Any]]]:
        path = self._slot_path(slot)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)

    def _write_slot(self, slot: str, payload: list[dict[str, Any]]) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{slot}.", suffix=".tmp", dir=self.cache_dir)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._slot_path(slot))
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
