from __future__ import annotations

import threading
import time
from typing import Callable, Iterable, Optional


class IdSequence:
    """Session-scoped id source for records created while offline.

    Ids are clock-derived (milliseconds) so they stay clear of small server ids,
    but every id is strictly greater than the last one handed out and than any id
    already present in the collection, so rapid calls never collide.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self, existing: Iterable[Optional[int]] = ()) -> int:
        with self._lock:
            highest = max((i for i in existing if i is not None), default=0)
            value = max(int(self._clock() * 1000), self._last + 1, highest + 1)
            self._last = value
            return value
