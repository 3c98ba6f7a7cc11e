"""Tests for the event bus, reversible mutations and the notice feed."""

from __future__ import annotations

from zenspace.domain.bus import EventBus
from zenspace.domain.commands import InsertRecord, RemoveRecord, ReplaceRecord
from zenspace.domain.events import (
    BookingDeleted,
    DomainEvent,
    LoadFailed,
    MutationRolledBack,
)
from zenspace.domain.handlers import HandlerRegistry
from zenspace.domain.models import Space


def _spaces() -> list[Space]:
    return [
        Space(id="a", name="Sauna", capacity=4),
        Space(id="b", name="Hammam", capacity=2),
    ]


# ---------------------------------------------------------------------------
# Bus
# ---------------------------------------------------------------------------


def test_base_class_subscribers_receive_subclass_events():
    bus = EventBus()
    received = []
    bus.subscribe(DomainEvent, received.append)
    bus.subscribe(BookingDeleted, received.append)

    bus.publish(BookingDeleted(booking_id="x"))

    assert len(received) == 2


def test_unsubscribe():
    bus = EventBus()
    received = []
    bus.subscribe(BookingDeleted, received.append)
    bus.unsubscribe(BookingDeleted, received.append)
    bus.publish(BookingDeleted(booking_id="x"))
    assert received == []


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


def test_insert_and_revert():
    records = _spaces()
    new = Space(id="c", name="Piscine", capacity=10)
    mutation = InsertRecord(records, new)

    mutation.apply()
    assert [s.id for s in records] == ["a", "b", "c"]
    mutation.revert()
    assert [s.id for s in records] == ["a", "b"]


def test_replace_and_revert_keeps_position():
    records = _spaces()
    original = records[0]
    mutation = ReplaceRecord(records, Space(id="a", name="Grand sauna", capacity=8))

    mutation.apply()
    assert records[0].name == "Grand sauna"
    mutation.revert()
    assert records[0] is original


def test_remove_and_revert_restores_index():
    records = _spaces()
    mutation = RemoveRecord(records, "a")

    mutation.apply()
    assert [s.id for s in records] == ["b"]
    mutation.revert()
    assert [s.id for s in records] == ["a", "b"]


def test_removing_an_absent_record_is_a_no_op():
    records = _spaces()
    mutation = RemoveRecord(records, "zzz")
    mutation.apply()
    mutation.revert()
    assert [s.id for s in records] == ["a", "b"]


# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------


def test_failures_become_notices():
    bus = EventBus()
    registry = HandlerRegistry(bus)

    bus.publish(LoadFailed(date="2026-06-01", error="timeout"))
    bus.publish(
        MutationRolledBack(description="booking creation", error="500", booking_id="t")
    )
    bus.publish(BookingDeleted(booking_id="x"))

    notices = registry.drain()
    assert [n.level for n in notices] == ["error", "error"]
    assert notices[1].booking_id == "t"
    assert registry.drain() == []


def test_notice_feed_is_bounded():
    bus = EventBus()
    registry = HandlerRegistry(bus, max_notices=3)
    for i in range(5):
        bus.publish(LoadFailed(date=f"2026-06-0{i + 1}", error="x"))
    notices = registry.drain()
    assert len(notices) == 3
    assert "2026-06-05" in notices[-1].message
