from __future__ import annotations

from typing import Iterable, Optional

from ..common.validators import require_non_empty, require_non_negative
from ..core.exceptions import ValidationError
from .model import TimeEntry


def is_open(entry: TimeEntry) -> bool:
    return entry.clock_out is None


def duration_hours(entry: TimeEntry) -> Optional[float]:
    """Hours between clock-in and clock-out; None while the entry is open."""
    if entry.clock_out is None:
        return None
    return (entry.clock_out - entry.clock_in).total_seconds() / 3600


def total_hours(entries: Iterable[TimeEntry]) -> float:
    return sum(duration_hours(e) or 0.0 for e in entries)


def total_overtime(entries: Iterable[TimeEntry]) -> float:
    return sum(e.overtime_hours or 0.0 for e in entries)


def entries_for_user(entries: Iterable[TimeEntry], user_id: int) -> list[TimeEntry]:
    """A user's entries, newest clock-in first."""
    mine = [e for e in entries if e.user_id == user_id]
    mine.sort(key=lambda e: e.clock_in, reverse=True)
    return mine


def open_entry_for(entries: Iterable[TimeEntry], user_id: int) -> Optional[TimeEntry]:
    for entry in entries_for_user(entries, user_id):
        if is_open(entry):
            return entry
    return None


def validate_time_entry(entry: TimeEntry) -> TimeEntry:
    require_non_empty(entry.user_name, "User name")
    if entry.overtime_hours is not None:
        require_non_negative(entry.overtime_hours, "Overtime hours")
    if entry.clock_out is not None:
        if entry.clock_out < entry.clock_in:
            raise ValidationError("Clock-out cannot be earlier than clock-in")
        if entry.clock_out_location is None:
            raise ValidationError("Clock-out location is required")
    return entry
