from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import transport_failure
from pecc_time.assistant.fake import FakeAssistant
from pecc_time.assistant.service import AssistantService, LocationResolver
from pecc_time.core.enums import ConnectionMode, Role, Screen
from pecc_time.core.exceptions import AuthorizationError, ValidationError
from pecc_time.session.store import SessionStore
from pecc_time.users.model import User


class SteppingClock:
    def __init__(self, start, step=timedelta(hours=1)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def store(gateway, fixed_now):
    assistant = FakeAssistant()
    return SessionStore(
        gateway,
        locations=LocationResolver(assistant),
        assistant=AssistantService(assistant),
        clock=SteppingClock(fixed_now),
    )


def test_starts_logged_out(store):
    snap = store.snapshot()

    assert snap.current_user is None
    assert snap.screen is Screen.LOGIN
    assert snap.users == ()


def test_failed_login_keeps_the_login_screen(store):
    assert store.login("Alice", "nope") is False
    assert store.screen is Screen.LOGIN


def test_forced_password_change_gates_the_dashboard(store, fake_remote):
    assert store.login("Alice", "password123") is True
    assert store.screen is Screen.CHANGE_PASSWORD
    assert len(store.users) == 5

    with pytest.raises(AuthorizationError):
        store.clock_in(18.48, -69.93)
    with pytest.raises(ValidationError):
        store.change_password("short")
    with pytest.raises(ValidationError):
        store.change_password("longenough1", "different1")

    saved = store.change_password("longenough1", "longenough1")

    assert saved.force_password_change is False
    assert store.screen is Screen.EMPLOYEE_DASHBOARD
    assert fake_remote.users[0].password == "longenough1"
    assert store.users[0] == saved


def test_dashboard_follows_role(store):
    store.login("Charlie", "password789")
    assert store.screen is Screen.CONTRACTOR_DASHBOARD

    store.logout()
    store.login("Creator User", "creatorpassword")
    assert store.screen is Screen.ADMIN_DASHBOARD


def test_at_most_one_open_entry(store):
    store.login("Bob", "password456")

    opened = store.clock_in(18.48, -69.93)
    assert store.open_entry() == opened
    assert opened.clock_in_location.description.startswith("Near 18.48")
    with pytest.raises(ValidationError):
        store.clock_in(18.48, -69.93)

    closed = store.clock_out(18.49, -69.94)
    assert closed.id == opened.id
    assert closed.clock_out > closed.clock_in
    assert store.open_entry() is None
    with pytest.raises(ValidationError):
        store.clock_out(18.49, -69.94)

    assert len([e for e in store.time_entries if e.user_id == 2]) == 2


def test_toggle_clock_alternates(store):
    store.login("Bob", "password456")

    assert store.toggle_clock(1.0, 2.0).clock_out is None
    assert store.toggle_clock(1.0, 2.0).clock_out is not None
    assert store.my_time_entries()[0].clock_out is not None


def test_geocoder_failure_does_not_block_clock_in(gateway, fixed_now):
    class BrokenGeocoder:
        def describe(self, latitude, longitude):
            raise TimeoutError("geocoder down")

    store = SessionStore(gateway, locations=LocationResolver(BrokenGeocoder()), clock=lambda: fixed_now)
    store.login("Bob", "password456")

    entry = store.clock_in(18.48, -69.93)

    assert entry.id is not None
    assert entry.clock_in_location.latitude == 18.48


def test_zero_overtime_is_a_no_op(store, fake_remote):
    store.login("Bob", "password456")
    opened = store.clock_in(1.0, 2.0)

    assert store.add_overtime(0) == opened
    assert fake_remote.calls["update_time_entry"] == 0

    store.add_overtime(1.5)
    updated = store.add_overtime(1.5)
    assert updated.overtime_hours == 3.0
    assert store.open_entry().overtime_hours == 3.0


def test_overtime_needs_an_open_entry_and_a_positive_amount(store):
    store.login("Bob", "password456")

    with pytest.raises(ValidationError):
        store.add_overtime(1)

    store.clock_in(1.0, 2.0)
    with pytest.raises(ValidationError):
        store.add_overtime(-1)


def test_failed_mutation_leaves_collections_untouched(store, fake_remote, cache, monkeypatch):
    store.login("Bob", "password456")
    before = store.time_entries
    fake_remote.failure = transport_failure()

    def disk_full(_entries):
        raise OSError("No space left on device")

    monkeypatch.setattr(cache, "set_entries", disk_full)

    with pytest.raises(OSError):
        store.clock_in(1.0, 2.0)

    assert store.time_entries == before


def test_roles_are_gated(store):
    store.login("Bob", "password456")

    with pytest.raises(AuthorizationError):
        store.submit_contractor_work(employee_name="X", cedula="1", obra="O", hours_worked=1, daily_rate=1)
    with pytest.raises(AuthorizationError):
        store.summary()
    with pytest.raises(AuthorizationError):
        store.create_user(name="Zed", role=Role.EMPLOYEE)


def test_contractor_submission(store, fixed_now):
    store.login("Charlie", "password789")

    saved = store.submit_contractor_work(
        employee_name=" Frank ",
        cedula="555",
        obra="Puente Norte",
        hours_worked=16,
        daily_rate=400,
    )

    assert saved.id is not None
    assert saved.employee_name == "Frank"
    assert saved.submission_date == fixed_now
    assert store.my_submissions()[0] == saved
    assert len(store.submissions) == 3

    with pytest.raises(ValidationError):
        store.submit_contractor_work(employee_name="G", cedula="1", obra="O", hours_worked=-2, daily_rate=400)


def test_admin_manages_only_contractors_and_employees(store):
    store.login("Admin User", "adminpassword")

    assert [u.name for u in store.manageable_users()] == ["Alice", "Bob", "Charlie"]
    assert store.manageable_roles() == (Role.CONTRACTOR, Role.EMPLOYEE)
    with pytest.raises(AuthorizationError):
        store.create_user(name="Zed", role=Role.ADMIN)
    with pytest.raises(AuthorizationError):
        store.delete_user(5)
    with pytest.raises(AuthorizationError):
        store.delete_user(4)


def test_creator_can_manage_admins(store):
    store.login("Creator User", "creatorpassword")

    assert "Admin User" in [u.name for u in store.manageable_users()]
    assert "Creator User" not in [u.name for u in store.manageable_users()]


def test_admin_creates_updates_and_deletes_users(store):
    store.login("Admin User", "adminpassword")

    created = store.create_user(name="Dana", role="contractor")
    assert created.force_password_change is True
    assert created.password.startswith("temp")
    assert created in store.users

    renamed = store.update_user(User(id=created.id, name="Dana R.", role=Role.EMPLOYEE, password=""))
    assert renamed.name == "Dana R."
    assert renamed.password == created.password

    store.delete_user(created.id)
    assert created.id not in {u.id for u in store.users}


def test_subscribers_see_the_downgrade(store, fake_remote):
    store.login("Bob", "password456")
    snapshots = []
    store.subscribe(snapshots.append)

    fake_remote.failure = transport_failure()
    store.refresh()

    assert snapshots[0].connection_mode is ConnectionMode.LOCAL
    assert snapshots[-1].connection_mode is ConnectionMode.LOCAL
    assert store.connection_mode is ConnectionMode.LOCAL
    assert len(store.users) == 5


def test_session_continues_offline(store, fake_remote, cache):
    store.login("Bob", "password456")
    fake_remote.failure = transport_failure()

    opened = store.clock_in(1.0, 2.0)
    closed = store.clock_out(1.0, 2.0)

    assert cache.get_entries()[-1] == closed
    assert closed.id == opened.id
    assert fake_remote.calls["update_time_entry"] == 0


def test_admin_summary_and_assistant(store):
    store.login("Admin User", "adminpassword")

    summary = store.summary()
    assert summary.total_contractor_cost == pytest.approx(2500 + 35 * 450 / 8)

    assert store.ask_assistant("Who worked overtime?").startswith("Simulated answer")
    assert store.ask_assistant("   ") == ""


def test_update_user_accepts_a_plain_role_name(store):
    store.login("Admin User", "adminpassword")
    bob = next(u for u in store.users if u.name == "Bob")

    updated = store.update_user(User(id=bob.id, name=bob.name, role="contractor", password=""))

    assert updated.role is Role.CONTRACTOR
    assert updated.password == bob.password
    with pytest.raises(AuthorizationError):
        store.update_user(User(id=bob.id, name=bob.name, role="creator", password=""))
