"""Tests for booking drafts and start/duration/end derivation."""

import pytest
from pydantic import ValidationError

from zenspace.domain.errors import MalformedInputError, MalformedTimeError, OutOfRangeError
from zenspace.domain.models import Booking, BookingStatus, CandidateBooking
from zenspace.services.candidates import (
    candidate_from_booking,
    derive_duration,
    derive_end_time,
    new_candidate,
    normalize_pax,
    reschedule,
)

DAY = "2025-03-14"


def _candidate(**overrides) -> CandidateBooking:
    defaults = dict(
        space_id="massage-1",
        customer_name="Jean Dupont",
        service_name="Massage",
        date=DAY,
        start_time="09:00",
        duration_minutes=60,
    )
    defaults.update(overrides)
    return CandidateBooking(**defaults)


def test_duration_floor_when_deriving_from_end():
    assert derive_duration("09:00", "09:05") == 15
    assert derive_duration("09:00", "08:00") == 15
    assert derive_duration("09:00", "10:30") == 90


def test_derive_end_time():
    assert derive_end_time("09:00", 45) == "09:45"
    with pytest.raises(OutOfRangeError):
        derive_end_time("23:30", 60)


def test_start_edit_keeps_duration():
    moved = reschedule(_candidate(duration_minutes=45), start_time="10:15")
    assert moved.start_time == "10:15"
    assert moved.duration_minutes == 45
    assert moved.end_time == "11:00"


def test_duration_edit_keeps_start_and_clamps():
    longer = reschedule(_candidate(), duration_minutes=90)
    assert (longer.start_time, longer.end_time) == ("09:00", "10:30")

    clamped = reschedule(_candidate(), duration_minutes=5)
    assert clamped.duration_minutes == 15
    assert clamped.end_time == "09:15"


def test_end_edit_derives_duration_and_floor_wins():
    edited = reschedule(_candidate(), end_time="09:05")
    assert edited.duration_minutes == 15
    assert edited.end_time == "09:15"

    edited = reschedule(_candidate(), end_time="11:00")
    assert edited.duration_minutes == 120


def test_reschedule_rejects_bad_input():
    with pytest.raises(MalformedTimeError):
        reschedule(_candidate(), start_time="9h")
    with pytest.raises(MalformedInputError):
        reschedule(_candidate(), duration_minutes="long")
    with pytest.raises(MalformedInputError):
        reschedule(_candidate(), start_time="10:00", end_time="11:00")


def test_reschedule_does_not_touch_the_original():
    original = _candidate()
    reschedule(original, start_time="14:00")
    assert original.start_time == "09:00"


@pytest.mark.parametrize(
    "raw, expected",
    [
        (3, 3),
        ("2", 2),
        (None, 1),
        (0, 1),
        (-4, 1),
        ("x", 1),
        (2.5, 1),
        (float("inf"), 1),
        (float("nan"), 1),
    ],
)
def test_normalize_pax(raw, expected):
    assert normalize_pax(raw) == expected


def test_candidate_pax_defaults_to_one():
    assert _candidate(pax=None).pax == 1
    assert _candidate(pax=0).pax == 1


def test_candidate_duration_floor_is_enforced():
    with pytest.raises(ValidationError):
        _candidate(duration_minutes=10)


def test_new_candidate_defaults():
    draft = new_candidate(DAY, "sauna")
    assert draft.start_time == "09:00"
    assert draft.duration_minutes == 60
    assert draft.break_minutes == 0
    assert draft.pax == 1
    assert draft.status == BookingStatus.CONFIRMED
    assert draft.customer_name == ""


def test_to_booking_requires_names():
    with pytest.raises(MalformedInputError, match="customer_name"):
        _candidate(customer_name="  ").to_booking()


def test_unchanged_edit_rebuilds_the_same_record():
    original = Booking(
        id="b-1",
        space_id="sauna",
        customer_name="Famille Martin",
        service_name="Accès sauna",
        date=DAY,
        start_time="10:30",
        duration_minutes=90,
        break_minutes=15,
        pax=4,
        status=BookingStatus.PENDING,
    )
    assert candidate_from_booking(original).to_booking("b-1") == original
