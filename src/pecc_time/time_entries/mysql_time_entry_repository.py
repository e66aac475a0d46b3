from __future__ import annotations

import dataclasses
from typing import Any, Optional, Sequence

from ..common.datetime_utils import to_utc_naive
from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    dump_mysql_json,
    fetchall,
    fetchone,
    normalize_mysql_datetime,
    normalize_mysql_decimal,
    normalize_mysql_json,
)
from ..storage.mapping import LOCATION_CODEC
from .model import LocationInfo, TimeEntry
from .repository import TimeEntryRepository

_COLUMNS = (
    "id, user_id, user_name, clock_in, clock_out, clock_in_location, clock_out_location, overtime_hours"
)


def _location_from_column(value: Any) -> Optional[LocationInfo]:
    data = normalize_mysql_json(value)
    return LOCATION_CODEC.from_wire(data) if data else None


def _location_to_column(location: Optional[LocationInfo]) -> Optional[str]:
    return dump_mysql_json(LOCATION_CODEC.to_wire(location)) if location else None


def _row_to_entry(row: dict[str, Any]) -> TimeEntry:
    return TimeEntry(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        user_name=row["user_name"],
        clock_in=normalize_mysql_datetime(row["clock_in"]),
        clock_out=normalize_mysql_datetime(row.get("clock_out")),
        clock_in_location=_location_from_column(row["clock_in_location"]),
        clock_out_location=_location_from_column(row.get("clock_out_location")),
        overtime_hours=normalize_mysql_decimal(row.get("overtime_hours")),
    )


def _params(entry: TimeEntry) -> tuple:
    return (
        int(entry.user_id),
        entry.user_name,
        to_utc_naive(entry.clock_in),
        to_utc_naive(entry.clock_out) if entry.clock_out else None,
        _location_to_column(entry.clock_in_location),
        _location_to_column(entry.clock_out_location),
        float(entry.overtime_hours or 0),
    )


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_entries ORDER BY clock_in, id")
            return [_row_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_entries WHERE id=%s", (int(entry_id),))
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def create(self, entry: TimeEntry) -> TimeEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_entries(
                    user_id, user_name, clock_in, clock_out,
                    clock_in_location, clock_out_location, overtime_hours
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                _params(entry),
            )
            return dataclasses.replace(entry, id=int(cur.lastrowid))

    def save(self, entry: TimeEntry) -> TimeEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_entries
                SET user_id=%s, user_name=%s, clock_in=%s, clock_out=%s,
                    clock_in_location=%s, clock_out_location=%s, overtime_hours=%s
                WHERE id=%s
                """,
                _params(entry) + (int(entry.id),),
            )
        return entry
