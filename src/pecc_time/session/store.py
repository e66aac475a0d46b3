"""Session state: the authenticated identity and the three entity collections.

The store is the only owner of the in-memory collections. Every mutation goes
through the gateway first and only the record the gateway hands back is applied;
collections are then replaced wholesale and subscribers get a fresh snapshot.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional, TypeVar

from ..assistant.service import AssistantService, LocationResolver
from ..common.datetime_utils import now_utc
from ..common.validators import require_min_length, require_non_empty, require_non_negative
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import ConnectionMode, Role, Screen
from ..core.exceptions import AuthorizationError, ValidationError
from ..gateway.gateway import ResilientDataGateway
from ..reports.service import DashboardSummary, SummaryService
from ..submissions.model import ContractorSubmission
from ..submissions.rules import submissions_for_contractor, validate_submission
from ..time_entries.model import TimeEntry
from ..time_entries.rules import entries_for_user, open_entry_for, validate_time_entry
from ..users.model import User
from ..users.permissions import can_manage, manageable_roles, manageable_users, validate_user

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DASHBOARDS = {
    Role.EMPLOYEE: Screen.EMPLOYEE_DASHBOARD,
    Role.CONTRACTOR: Screen.CONTRACTOR_DASHBOARD,
    Role.ADMIN: Screen.ADMIN_DASHBOARD,
    Role.CREATOR: Screen.ADMIN_DASHBOARD,
}

_ADMIN_ROLES = frozenset({Role.ADMIN, Role.CREATOR})


@dataclass(frozen=True)
class SessionSnapshot:
    current_user: Optional[User]
    screen: Screen
    connection_mode: ConnectionMode
    users: tuple[User, ...]
    time_entries: tuple[TimeEntry, ...]
    submissions: tuple[ContractorSubmission, ...]


SnapshotListener = Callable[[SessionSnapshot], None]


def _replace_by_id(items: Iterable[T], record: T) -> tuple[T, ...]:
    return tuple(record if i.id == record.id else i for i in items)


class SessionStore:
    def __init__(
        self,
        gateway: ResilientDataGateway,
        *,
        locations: Optional[LocationResolver] = None,
        assistant: Optional[AssistantService] = None,
        summaries: Optional[SummaryService] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._gateway = gateway
        self._locations = locations or LocationResolver()
        self._assistant = assistant
        self._summaries = summaries or SummaryService()
        self._clock = clock

        self._current_user: Optional[User] = None
        self._users: tuple[User, ...] = ()
        self._time_entries: tuple[TimeEntry, ...] = ()
        self._submissions: tuple[ContractorSubmission, ...] = ()
        self._listeners: List[SnapshotListener] = []

        self._gateway.subscribe(lambda _mode: self._notify())

    # -------- Read-only state --------
    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    @property
    def users(self) -> tuple[User, ...]:
        return self._users

    @property
    def time_entries(self) -> tuple[TimeEntry, ...]:
        return self._time_entries

    @property
    def submissions(self) -> tuple[ContractorSubmission, ...]:
        return self._submissions

    @property
    def connection_mode(self) -> ConnectionMode:
        return self._gateway.mode

    @property
    def screen(self) -> Screen:
        user = self._current_user
        if user is None:
            return Screen.LOGIN
        if user.force_password_change:
            return Screen.CHANGE_PASSWORD
        return _DASHBOARDS.get(user.role, Screen.LOGIN)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_user=self._current_user,
            screen=self.screen,
            connection_mode=self.connection_mode,
            users=self._users,
            time_entries=self._time_entries,
            submissions=self._submissions,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception as e:
                logger.error("Error in session listener: %s", e)

    # -------- Auth --------
    def login(self, name: str, password: str) -> bool:
        user = self._gateway.login(name, password)
        if user is None:
            logger.info("Login rejected for %r", name)
            return False

        self._current_user = user
        self._load()
        self._notify()
        return True

    def logout(self) -> None:
        self._current_user = None
        self._users = ()
        self._time_entries = ()
        self._submissions = ()
        self._notify()

    def change_password(self, new_password: str, confirm_password: Optional[str] = None) -> User:
        user = self._require_login()
        if confirm_password is not None and confirm_password != new_password:
            raise ValidationError("Passwords do not match")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        saved = self._gateway.update_user(
            dataclasses.replace(user, password=new_password, force_password_change=False)
        )
        self._current_user = saved
        self._users = _replace_by_id(self._users, saved)
        self._notify()
        return saved

    def refresh(self) -> None:
        self._require_login()
        self._load()
        self._notify()

    def _load(self) -> None:
        self._users = tuple(self._gateway.list_users())
        self._time_entries = tuple(self._gateway.list_time_entries())
        self._submissions = tuple(self._gateway.list_submissions())

    # -------- Capability gates --------
    def _require_login(self) -> User:
        if self._current_user is None:
            raise AuthorizationError("Please log in to continue")
        return self._current_user

    def _require_dashboard(self, *roles: Role) -> User:
        user = self._require_login()
        if user.force_password_change:
            raise AuthorizationError("You must change your temporary password first")
        if roles and user.role not in roles:
            raise AuthorizationError("You do not have permission for this action")
        return user

    # -------- Employee: clock in/out, overtime --------
    def open_entry(self) -> Optional[TimeEntry]:
        user = self._current_user
        if user is None:
            return None
        return open_entry_for(self._time_entries, user.id)

    def my_time_entries(self) -> list[TimeEntry]:
        user = self._require_login()
        return entries_for_user(self._time_entries, user.id)

    def clock_in(self, latitude: float, longitude: float) -> TimeEntry:
        user = self._require_dashboard(Role.EMPLOYEE)
        if open_entry_for(self._time_entries, user.id) is not None:
            raise ValidationError("You are already clocked in")

        draft = TimeEntry(
            id=None,
            user_id=user.id,
            user_name=user.name,
            clock_in=self._clock(),
            clock_in_location=self._locations.resolve(latitude, longitude),
        )
        saved = self._gateway.create_time_entry(validate_time_entry(draft))
        self._time_entries = self._time_entries + (saved,)
        self._notify()
        return saved

    def clock_out(self, latitude: float, longitude: float) -> TimeEntry:
        user = self._require_dashboard(Role.EMPLOYEE)
        current = open_entry_for(self._time_entries, user.id)
        if current is None:
            raise ValidationError("You are not clocked in")

        closed = dataclasses.replace(
            current,
            clock_out=self._clock(),
            clock_out_location=self._locations.resolve(latitude, longitude),
        )
        return self._apply_entry_update(validate_time_entry(closed))

    def toggle_clock(self, latitude: float, longitude: float) -> TimeEntry:
        """Clock out when an entry is open, otherwise clock in."""
        if self.open_entry() is not None:
            return self.clock_out(latitude, longitude)
        return self.clock_in(latitude, longitude)

    def add_overtime(self, hours: float) -> TimeEntry:
        user = self._require_dashboard(Role.EMPLOYEE)
        hours = require_non_negative(hours, "Overtime hours")
        current = open_entry_for(self._time_entries, user.id)
        if current is None:
            raise ValidationError("You must be clocked in to add overtime")
        if hours == 0:
            return current

        updated = dataclasses.replace(current, overtime_hours=(current.overtime_hours or 0.0) + hours)
        return self._apply_entry_update(validate_time_entry(updated))

    def _apply_entry_update(self, entry: TimeEntry) -> TimeEntry:
        saved = self._gateway.update_time_entry(entry)
        self._time_entries = _replace_by_id(self._time_entries, saved)
        self._notify()
        return saved

    # -------- Contractor: submissions --------
    def my_submissions(self) -> list[ContractorSubmission]:
        user = self._require_login()
        return submissions_for_contractor(self._submissions, user.id)

    def submit_contractor_work(
        self,
        *,
        employee_name: str,
        cedula: str,
        obra: str,
        hours_worked: float,
        daily_rate: float,
    ) -> ContractorSubmission:
        user = self._require_dashboard(Role.CONTRACTOR)
        draft = ContractorSubmission(
            id=None,
            contractor_id=user.id,
            employee_name=(employee_name or "").strip(),
            cedula=(cedula or "").strip(),
            obra=(obra or "").strip(),
            hours_worked=require_non_negative(hours_worked, "Hours worked"),
            daily_rate=require_non_negative(daily_rate, "Daily rate"),
            submission_date=self._clock(),
        )
        saved = self._gateway.create_submission(validate_submission(draft))
        self._submissions = self._submissions + (saved,)
        self._notify()
        return saved

    # -------- Admin / creator: user management --------
    def manageable_roles(self) -> tuple[Role, ...]:
        return manageable_roles(self._current_user)

    def manageable_users(self) -> list[User]:
        return manageable_users(self._current_user, self._users)

    def create_user(self, *, name: str, role: Role, password: Optional[str] = None) -> User:
        actor = self._require_dashboard(*_ADMIN_ROLES)
        role = self._parse_role(role)
        if role not in manageable_roles(actor):
            raise AuthorizationError("You cannot create accounts with this role")

        draft = User(
            id=None,
            name=require_non_empty(name, "Name"),
            role=role,
            password=password or f"temp{int(self._clock().timestamp() * 1000)}",
            force_password_change=True,
        )
        saved = self._gateway.create_user(validate_user(draft))
        self._users = self._users + (saved,)
        self._notify()
        return saved

    def update_user(self, user: User) -> User:
        actor = self._require_dashboard(*_ADMIN_ROLES)
        user = dataclasses.replace(user, role=self._parse_role(user.role))
        existing = self._find_user(user.id)
        if existing is None or not can_manage(actor, existing):
            raise AuthorizationError("You cannot edit this account")
        if user.role not in manageable_roles(actor):
            raise AuthorizationError("You cannot assign this role")

        # An empty password in the edit form keeps the current one.
        if not user.password:
            user = dataclasses.replace(user, password=existing.password)
        user = dataclasses.replace(user, name=require_non_empty(user.name, "Name"))

        saved = self._gateway.update_user(validate_user(user))
        self._users = _replace_by_id(self._users, saved)
        self._notify()
        return saved

    def delete_user(self, user_id: int) -> None:
        actor = self._require_dashboard(*_ADMIN_ROLES)
        existing = self._find_user(user_id)
        if existing is None or not can_manage(actor, existing):
            raise AuthorizationError("You cannot delete this account")

        self._gateway.delete_user(int(user_id))
        self._users = tuple(u for u in self._users if u.id != int(user_id))
        self._notify()

    def _find_user(self, user_id: Optional[int]) -> Optional[User]:
        for u in self._users:
            if u.id == user_id:
                return u
        return None

    @staticmethod
    def _parse_role(role: Role | str) -> Role:
        try:
            return Role(role)
        except ValueError:
            raise ValidationError("Invalid account type")

    # -------- Admin: reporting and assistant --------
    def summary(self) -> DashboardSummary:
        self._require_dashboard(*_ADMIN_ROLES)
        return self._summaries.build_summary(time_entries=self._time_entries, submissions=self._submissions)

    def ask_assistant(self, question: str) -> str:
        self._require_dashboard(*_ADMIN_ROLES)
        if self._assistant is None:
            raise ValidationError("The assistant is not configured")
        return self._assistant.ask(question, time_entries=self._time_entries, submissions=self._submissions)
