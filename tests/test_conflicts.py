"""Tests for the overlap and load computation."""

from zenspace.domain.models import Booking, BookingStatus, CandidateBooking, Space
from zenspace.services.conflicts import (
    Interval,
    assess_candidate,
    compute_load,
    find_overlapping,
    intervals_overlap,
    occupied_interval,
)

DAY = "2025-01-01"


def _make_booking(
    start: str, duration: int = 60, break_minutes: int = 0, **overrides
) -> Booking:
    defaults = dict(
        space_id="sauna",
        customer_name="Client",
        service_name="Sauna",
        date=DAY,
        start_time=start,
        duration_minutes=duration,
        break_minutes=break_minutes,
    )
    defaults.update(overrides)
    return Booking(**defaults)


def _candidate(start: str, duration: int = 60, **overrides) -> CandidateBooking:
    defaults = dict(space_id="sauna", date=DAY, start_time=start, duration_minutes=duration)
    defaults.update(overrides)
    return CandidateBooking(**defaults)


# ---------------------------------------------------------------------------
# Interval rules
# ---------------------------------------------------------------------------


def test_no_overlap():
    """Bookings that don't overlap should not be returned."""
    existing = [_make_booking("08:00")]
    assert find_overlapping(occupied_interval("10:00", 60), existing) == []


def test_partial_overlap():
    existing = [_make_booking("09:00", 90)]
    overlapping = find_overlapping(occupied_interval("10:00", 60), existing)
    assert [b.start_time for b in overlapping] == ["09:00"]


def test_exact_boundary_no_conflict():
    """[10:00, 11:00) and a candidate at 11:00 only touch."""
    existing = [_make_booking("10:00", 60)]
    report = compute_load(1, occupied_interval("11:00", 30), 1, existing)
    assert report.overlapping == []
    assert report.current_load == 0


def test_overlap_is_symmetric():
    intervals = [Interval(0, 60), Interval(30, 90), Interval(60, 120), Interval(10, 20)]
    for a in intervals:
        for b in intervals:
            assert intervals_overlap(a, b) == intervals_overlap(b, a)


def test_break_counts_as_occupied():
    """09:00 + 30 min + 15 min break occupies [09:00, 09:45)."""
    existing = [_make_booking("09:00", 30, break_minutes=15)]
    assert occupied_interval("09:00", 30, 15) == Interval(540, 585)
    assert len(find_overlapping(occupied_interval("09:40", 30), existing)) == 1
    assert find_overlapping(occupied_interval("09:45", 30), existing) == []


def test_candidate_break_extends_its_own_interval():
    existing = [_make_booking("10:00", 60)]
    assert find_overlapping(occupied_interval("09:00", 60, 0), existing) == []
    assert len(find_overlapping(occupied_interval("09:00", 60, 15), existing)) == 1


# ---------------------------------------------------------------------------
# Exclusions
# ---------------------------------------------------------------------------


def test_canceled_bookings_are_ignored():
    canceled = _make_booking("09:00", pax=5, status=BookingStatus.CANCELED)
    report = compute_load(3, occupied_interval("09:00", 60), 1, [canceled])
    assert report.overlapping == []
    assert report.current_load == 0
    assert report.is_over_capacity is False


def test_edited_booking_does_not_conflict_with_itself():
    own = _make_booking("09:00", pax=3)
    report = compute_load(
        3, occupied_interval("09:00", 60), 3, [own], exclude_id=own.id
    )
    assert report.overlapping == []
    assert report.total_load == 3
    assert report.is_over_capacity is False


def test_assess_ignores_other_spaces_and_dates():
    space = Space(id="sauna", name="Sauna", capacity=2)
    bookings = [
        _make_booking("09:00", space_id="hammam", pax=5),
        _make_booking("09:00", date="2025-01-02", pax=5),
        _make_booking("09:30", pax=1),
    ]
    report = assess_candidate(space, _candidate("09:00"), bookings)
    assert report.current_load == 1
    assert report.total_load == 2
    assert report.is_over_capacity is False


# ---------------------------------------------------------------------------
# Load arithmetic
# ---------------------------------------------------------------------------


def test_capacity_arithmetic():
    space = Space(id="sauna", name="Sauna", capacity=3)
    bookings = [_make_booking("09:00", pax=1), _make_booking("09:15", pax=2)]
    report = assess_candidate(space, _candidate("09:30", pax=1), bookings)
    assert report.current_load == 3
    assert report.total_load == 4
    assert report.remaining_capacity == 0
    assert report.is_over_capacity is True


def test_missing_pax_counts_as_one():
    booking = Booking.model_validate(
        {
            "id": "b1",
            "space_id": "sauna",
            "customer_name": "A",
            "service_name": "S",
            "date": DAY,
            "start_time": "09:00",
            "duration_minutes": 60,
            "pax": None,
        }
    )
    report = compute_load(4, occupied_interval("09:00", 60), 1, [booking])
    assert report.current_load == 1


def test_empty_day_baseline():
    space = Space(id="sauna", name="Sauna", capacity=2)
    within = assess_candidate(space, _candidate("09:00", pax=2), [])
    assert within.current_load == 0
    assert within.remaining_capacity == 2
    assert within.is_over_capacity is False

    over = assess_candidate(space, _candidate("09:00", pax=3), [])
    assert over.current_load == 0
    assert over.is_over_capacity is True


def test_inputs_are_not_mutated():
    bookings = [_make_booking("09:00"), _make_booking("13:00")]
    snapshot = [b.model_copy() for b in bookings]
    compute_load(1, occupied_interval("09:00", 60), 1, bookings)
    assert bookings == snapshot
