from __future__ import annotations

from datetime import datetime, timezone
from typing import Union


def now_utc() -> datetime:
    """Current time, timezone-aware.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive values are taken to already be UTC (that is how the server stores them)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return as_utc(value).isoformat()


def parse_iso_datetime(value: Union[str, datetime]) -> datetime:
    """Re-hydrate an ISO-8601 timestamp into an aware UTC datetime.

    Accepts the trailing ``Z`` that browsers and JavaScript clients emit.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def to_utc_naive(value: datetime) -> datetime:
    """Shape used for MySQL DATETIME columns."""
    return as_utc(value).replace(tzinfo=None)
