"""Declared field mapping between the in-memory entities and their serialized forms.

Every entity field is listed once with its attribute name, its wire name
(snake_case, as the relational service stores it) and its cache name (camelCase,
as the offline cache has always stored it). Both codecs are driven from the same
table so a field can never be renamed on one side only.

Timestamps are re-hydrated here, for both sides, so callers always receive aware
UTC datetimes whichever backend served the data.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

from ..common.datetime_utils import parse_iso_datetime, to_iso
from ..core.enums import Role
from ..submissions.model import ContractorSubmission
from ..time_entries.model import LocationInfo, TimeEntry
from ..users.model import User

T = TypeVar("T")

WIRE = "wire"
CACHE = "cache"


class FieldKind(str, Enum):
    VALUE = "value"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    ROLE = "role"
    LOCATION = "location"


@dataclass(frozen=True)
class Field:
    attr: str
    wire: str
    cache: str
    kind: FieldKind = FieldKind.VALUE
    optional: bool = False

    def key(self, side: str) -> str:
        return self.wire if side == WIRE else self.cache


class EntityCodec(Generic[T]):
    def __init__(self, factory: Callable[..., T], fields: Sequence[Field]):
        self._factory = factory
        self.fields = tuple(fields)

    def to_wire(self, obj: T, *, include_id: bool = True) -> dict[str, Any]:
        data = self._encode(obj, WIRE)
        if not include_id:
            data.pop("id", None)
        return data

    def from_wire(self, data: Mapping[str, Any]) -> T:
        return self._decode(data, WIRE)

    def to_cache(self, obj: T) -> dict[str, Any]:
        return self._encode(obj, CACHE)

    def from_cache(self, data: Mapping[str, Any]) -> T:
        return self._decode(data, CACHE)

    def _encode(self, obj: T, side: str) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in self.fields:
            out[f.key(side)] = _encode_value(f, getattr(obj, f.attr), side)
        return out

    def _decode(self, data: Mapping[str, Any], side: str) -> T:
        kwargs: dict[str, Any] = {}
        for f in self.fields:
            key = f.key(side)
            raw = data.get(key) if f.optional else data[key]
            kwargs[f.attr] = _decode_value(f, raw, side)
        return self._factory(**kwargs)


def _encode_value(f: Field, value: Any, side: str) -> Any:
    if value is None:
        return None
    if f.kind is FieldKind.TIMESTAMP:
        return to_iso(value)
    if f.kind is FieldKind.ROLE:
        return Role(value).value
    if f.kind is FieldKind.LOCATION:
        return LOCATION_CODEC._encode(value, side)
    if f.kind is FieldKind.NUMBER:
        return float(value)
    if f.kind is FieldKind.INTEGER:
        return int(value)
    if f.kind is FieldKind.BOOLEAN:
        return bool(value)
    return value


def _decode_value(f: Field, raw: Any, side: str) -> Any:
    if raw is None:
        if f.kind is FieldKind.BOOLEAN:
            return False
        return None
    if f.kind is FieldKind.TIMESTAMP:
        return parse_iso_datetime(raw)
    if f.kind is FieldKind.ROLE:
        return Role(raw)
    if f.kind is FieldKind.LOCATION:
        if isinstance(raw, LocationInfo):
            return raw
        return LOCATION_CODEC._decode(raw, side)
    if f.kind is FieldKind.NUMBER:
        return float(raw)
    if f.kind is FieldKind.INTEGER:
        return int(raw)
    if f.kind is FieldKind.BOOLEAN:
        return bool(raw)
    return raw


LOCATION_FIELDS = (
    Field("latitude", "latitude", "latitude", FieldKind.NUMBER),
    Field("longitude", "longitude", "longitude", FieldKind.NUMBER),
    Field("description", "description", "description"),
    Field("map_uri", "map_uri", "mapUri", optional=True),
)

USER_FIELDS = (
    Field("id", "id", "id", FieldKind.INTEGER, optional=True),
    Field("name", "name", "name"),
    Field("role", "role", "role", FieldKind.ROLE),
    Field("password", "password", "password", optional=True),
    Field("force_password_change", "force_password_change", "forcePasswordChange", FieldKind.BOOLEAN, optional=True),
)

TIME_ENTRY_FIELDS = (
    Field("id", "id", "id", FieldKind.INTEGER, optional=True),
    Field("user_id", "user_id", "userId", FieldKind.INTEGER),
    Field("user_name", "user_name", "userName"),
    Field("clock_in", "clock_in", "clockIn", FieldKind.TIMESTAMP),
    Field("clock_out", "clock_out", "clockOut", FieldKind.TIMESTAMP, optional=True),
    Field("clock_in_location", "clock_in_location", "clockInLocation", FieldKind.LOCATION),
    Field("clock_out_location", "clock_out_location", "clockOutLocation", FieldKind.LOCATION, optional=True),
    Field("overtime_hours", "overtime_hours", "overtimeHours", FieldKind.NUMBER, optional=True),
)

SUBMISSION_FIELDS = (
    Field("id", "id", "id", FieldKind.INTEGER, optional=True),
    Field("contractor_id", "contractor_id", "contractorId", FieldKind.INTEGER),
    Field("employee_name", "employee_name", "employeeName"),
    Field("cedula", "cedula", "cedula"),
    Field("obra", "obra", "obra"),
    Field("hours_worked", "hours_worked", "hoursWorked", FieldKind.NUMBER),
    Field("daily_rate", "daily_rate", "dailyRate", FieldKind.NUMBER),
    Field("submission_date", "submission_date", "submissionDate", FieldKind.TIMESTAMP),
)

LOCATION_CODEC: EntityCodec[LocationInfo] = EntityCodec(LocationInfo, LOCATION_FIELDS)
USER_CODEC: EntityCodec[User] = EntityCodec(User, USER_FIELDS)
TIME_ENTRY_CODEC: EntityCodec[TimeEntry] = EntityCodec(TimeEntry, TIME_ENTRY_FIELDS)
SUBMISSION_CODEC: EntityCodec[ContractorSubmission] = EntityCodec(ContractorSubmission, SUBMISSION_FIELDS)
