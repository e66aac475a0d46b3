"""Built-in data the offline cache starts from on a fresh host."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_utc
from ..core.enums import Role
from ..submissions.model import ContractorSubmission
from ..time_entries.model import LocationInfo, TimeEntry
from ..users.model import User

DEFAULT_USERS: tuple[User, ...] = (
    User(id=1, name="Alice", role=Role.EMPLOYEE, password="password123", force_password_change=True),
    User(id=2, name="Bob", role=Role.EMPLOYEE, password="password456"),
    User(id=3, name="Charlie", role=Role.CONTRACTOR, password="password789"),
    User(id=4, name="Admin User", role=Role.ADMIN, password="adminpassword"),
    User(id=5, name="Creator User", role=Role.CREATOR, password="creatorpassword"),
)

_UNION_STATION = LocationInfo(latitude=34.0522, longitude=-118.2437, description="Union Station, Los Angeles")
_CITY_HALL = LocationInfo(latitude=40.7128, longitude=-74.0060, description="City Hall, New York")


def default_time_entries(now: Optional[datetime] = None) -> list[TimeEntry]:
    now = now or now_utc()
    day1 = now - timedelta(days=1)
    day2 = now - timedelta(days=2)
    return [
        TimeEntry(
            id=1,
            user_id=1,
            user_name="Alice",
            clock_in=day1.replace(hour=8, minute=0, second=0, microsecond=0),
            clock_out=day1.replace(hour=17, minute=0, second=0, microsecond=0),
            clock_in_location=_UNION_STATION,
            clock_out_location=_UNION_STATION,
            overtime_hours=1.5,
        ),
        TimeEntry(
            id=2,
            user_id=2,
            user_name="Bob",
            clock_in=day2.replace(hour=9, minute=0, second=0, microsecond=0),
            clock_out=day2.replace(hour=18, minute=0, second=0, microsecond=0),
            clock_in_location=_CITY_HALL,
            clock_out_location=_CITY_HALL,
        ),
    ]


def default_submissions(now: Optional[datetime] = None) -> list[ContractorSubmission]:
    now = now or now_utc()
    return [
        ContractorSubmission(
            id=1,
            contractor_id=3,
            employee_name="Dave",
            cedula="123456789",
            obra="Proyecto Edificio Central",
            hours_worked=40,
            daily_rate=500,
            submission_date=now - timedelta(days=5),
        ),
        ContractorSubmission(
            id=2,
            contractor_id=3,
            employee_name="Eve",
            cedula="987654321",
            obra="Remodelación Ala Oeste",
            hours_worked=35,
            daily_rate=450,
            submission_date=now - timedelta(days=3),
        ),
    ]
