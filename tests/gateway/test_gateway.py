from __future__ import annotations

import dataclasses
from datetime import timedelta

from conftest import StaticAdapter, UnreachableAdapter, client_with_adapter, transport_failure
from pecc_time.core.enums import ConnectionMode, Role
from pecc_time.core.exceptions import RemoteUnavailable
from pecc_time.gateway.gateway import ResilientDataGateway
from pecc_time.gateway.ids import IdSequence
from pecc_time.time_entries.model import LocationInfo, TimeEntry
from pecc_time.users.model import User

HERE = LocationInfo(18.4861, -69.9312, "Zona Colonial")


def _draft(now, user_id=2, name="Bob"):
    return TimeEntry(id=None, user_id=user_id, user_name=name, clock_in=now, clock_in_location=HERE)


def test_remote_serves_while_available(gateway, fake_remote):
    users = gateway.list_users()

    assert len(users) == 5
    assert fake_remote.calls["list_users"] == 1
    assert gateway.remote_available is True
    assert gateway.mode is ConnectionMode.REMOTE


def test_first_failure_switches_to_cache_for_good(gateway, fake_remote, cache):
    fake_remote.failure = transport_failure()
    cache.set_users(cache.get_users()[:2])

    assert [u.name for u in gateway.list_users()] == ["Alice", "Bob"]
    assert gateway.remote_available is False

    # The remote recovers but the session never goes back to it.
    fake_remote.failure = None
    gateway.list_users()
    gateway.list_time_entries()
    gateway.login("Bob", "password456")

    assert fake_remote.calls["list_users"] == 1
    assert fake_remote.calls["list_time_entries"] == 0
    assert fake_remote.calls["login"] == 0
    assert gateway.mode is ConnectionMode.LOCAL


def test_any_remote_unavailable_reason_trips_the_breaker(gateway, fake_remote):
    fake_remote.failure = RemoteUnavailable("HTTP error! status: 503", reason="status", status_code=503)

    gateway.list_submissions()

    assert gateway.remote_available is False


def test_create_user_against_unreachable_server(cache):
    adapter = UnreachableAdapter()
    gateway = ResilientDataGateway(client_with_adapter(adapter), cache)

    created = gateway.create_user(User(id=None, name="Dana", role=Role.EMPLOYEE, password="temp1234"))

    assert created.id is not None
    assert created.force_password_change is True
    assert created in cache.get_users()
    assert gateway.remote_available is False

    assert gateway.login("Dana", "temp1234") == created
    assert adapter.attempts == 1


def test_local_creates_keep_order_and_get_increasing_ids(gateway, fake_remote, cache, fixed_now):
    fake_remote.failure = transport_failure()

    first = gateway.create_time_entry(_draft(fixed_now))
    second = gateway.create_time_entry(_draft(fixed_now + timedelta(minutes=1), user_id=1, name="Alice"))

    ids = [e.id for e in cache.get_entries()]
    assert ids == [1, 2, first.id, second.id]
    assert ids == sorted(set(ids))


def test_local_update_replaces_by_id(gateway, fake_remote, cache, fixed_now):
    fake_remote.failure = transport_failure()
    opened = gateway.create_time_entry(_draft(fixed_now))

    closed = TimeEntry(
        id=opened.id,
        user_id=2,
        user_name="Bob",
        clock_in=fixed_now,
        clock_in_location=HERE,
        clock_out=fixed_now + timedelta(hours=8),
        clock_out_location=HERE,
    )
    assert gateway.update_time_entry(closed) == closed
    assert cache.get_entries()[-1] == closed
    assert len(cache.get_entries()) == 3


def test_local_update_and_delete_of_missing_id_are_no_ops(gateway, fake_remote, cache, fixed_now):
    fake_remote.failure = transport_failure()
    ghost = User(id=424242, name="Ghost", role=Role.EMPLOYEE, password="x")
    before = cache.get_users()

    assert gateway.update_user(ghost) == ghost
    gateway.delete_user(424242)

    assert cache.get_users() == before


def test_local_create_user_always_forces_a_password_change(gateway, fake_remote):
    fake_remote.failure = transport_failure()

    created = gateway.create_user(User(id=None, name="Eli", role=Role.CONTRACTOR, password="temp9999"))

    assert created.force_password_change is True


def test_not_found_from_remote_does_not_trip_the_breaker(gateway, fake_remote, fixed_now):
    ghost = TimeEntry(id=999, user_id=2, user_name="Bob", clock_in=fixed_now, clock_in_location=HERE)

    assert gateway.update_time_entry(ghost) == ghost
    gateway.delete_user(999)

    assert gateway.remote_available is True


def test_rejecting_server_falls_back_like_an_outage(cache, fixed_now):
    adapter = StaticAdapter(400, b'{"message": "rejected by proxy"}')
    gateway = ResilientDataGateway(client_with_adapter(adapter), cache)

    created = gateway.create_time_entry(_draft(fixed_now))

    assert created.id is not None
    assert cache.get_entries()[-1] == created
    assert gateway.remote_available is False

    gateway.list_users()
    assert adapter.attempts == 1


def test_cache_after_midway_downgrade_matches_mutations_on_its_snapshot(gateway, fake_remote, cache, fixed_now):
    gateway.create_user(User(id=None, name="Dana", role=Role.EMPLOYEE, password="temp1234"))
    gateway.create_time_entry(_draft(fixed_now))
    assert gateway.remote_available is True

    users_before = cache.get_users()
    entries_before = cache.get_entries()
    fake_remote.failure = transport_failure()

    eli = gateway.create_user(User(id=None, name="Eli", role=Role.CONTRACTOR, password="temp9999"))
    robert = dataclasses.replace(users_before[1], name="Robert")
    gateway.update_user(robert)
    gateway.delete_user(users_before[2].id)
    opened = gateway.create_time_entry(_draft(fixed_now + timedelta(hours=1), user_id=1, name="Alice"))
    closed = dataclasses.replace(opened, clock_out=fixed_now + timedelta(hours=9), clock_out_location=HERE)
    gateway.update_time_entry(closed)

    assert cache.get_users() == [users_before[0], robert, *users_before[3:], eli]
    assert cache.get_entries() == [*entries_before, closed]
    assert fake_remote.calls["create_user"] == 2
    assert fake_remote.calls["update_user"] == 0
    assert fake_remote.calls["delete_user"] == 0
    assert fake_remote.calls["update_time_entry"] == 0


def test_downgrade_emits_one_event_and_survives_bad_listeners(gateway, fake_remote):
    events = []

    def broken(_mode):
        raise RuntimeError("listener bug")

    gateway.subscribe(broken)
    gateway.subscribe(events.append)
    fake_remote.failure = transport_failure()

    gateway.list_users()
    gateway.list_time_entries()

    assert events == [ConnectionMode.LOCAL]


def test_unsubscribe_stops_events(gateway, fake_remote):
    events = []
    unsubscribe = gateway.subscribe(events.append)
    unsubscribe()

    fake_remote.failure = transport_failure()
    gateway.list_users()

    assert events == []


def test_id_sequence_is_strictly_increasing_with_a_stuck_clock():
    ids = IdSequence(clock=lambda: 1_700_000_000.0)

    first = ids.next_id()
    second = ids.next_id()
    third = ids.next_id([second + 50])

    assert first == 1_700_000_000_000
    assert second == first + 1
    assert third == second + 51
