from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class LocationInfo:
    """Where a clock-in or clock-out happened, as described by the geocoder."""

    latitude: float
    longitude: float
    description: str
    map_uri: Optional[str] = None


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: one clock-in/clock-out cycle.

    An entry with ``clock_out`` unset is "open".
    """

    id: Optional[int]
    user_id: int
    user_name: str
    clock_in: datetime
    clock_in_location: LocationInfo
    clock_out: Optional[datetime] = None
    clock_out_location: Optional[LocationInfo] = None
    overtime_hours: Optional[float] = None
