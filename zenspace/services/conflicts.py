"""Service for detecting overlapping bookings and computing space load."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from zenspace.domain.models import Booking, CandidateBooking, LoadReport, Space
from zenspace.services.clock import time_to_minutes


@dataclass(frozen=True)
class Interval:
    """Half-open minute interval ``[start, end)`` within one day."""

    start: int
    end: int


def occupied_interval(
    start_time: str, duration_minutes: int, break_minutes: int = 0
) -> Interval:
    """Return the interval a booking occupies, trailing break included."""
    start = time_to_minutes(start_time)
    return Interval(start, start + duration_minutes + (break_minutes or 0))


def booking_interval(booking: Booking | CandidateBooking) -> Interval:
    return occupied_interval(
        booking.start_time, booking.duration_minutes, booking.break_minutes
    )


def intervals_overlap(a: Interval, b: Interval) -> bool:
    """Overlap rule: ``a.start < b.end`` AND ``a.end > b.start``.

    Exact boundary touches (end == start) are NOT considered overlaps.
    """
    return a.start < b.end and a.end > b.start


def find_overlapping(
    interval: Interval,
    existing: Iterable[Booking],
    exclude_id: str | None = None,
) -> list[Booking]:
    """Return existing bookings whose occupied interval intersects *interval*.

    Canceled bookings and the booking identified by *exclude_id* are skipped.
    """
    return [
        booking
        for booking in existing
        if not booking.is_canceled
        and (exclude_id is None or booking.id != exclude_id)
        and intervals_overlap(interval, booking_interval(booking))
    ]


def compute_load(
    capacity: int,
    interval: Interval,
    pax: int,
    existing: Iterable[Booking],
    exclude_id: str | None = None,
) -> LoadReport:
    """Sum the headcount overlapping *interval* and compare it to *capacity*.

    *existing* must already be restricted to one space and one date.
    """
    overlapping = find_overlapping(interval, existing, exclude_id)
    current_load = sum(booking.pax or 1 for booking in overlapping)
    total_load = current_load + pax
    return LoadReport(
        capacity=capacity,
        overlapping=overlapping,
        current_load=current_load,
        total_load=total_load,
        remaining_capacity=max(0, capacity - current_load),
        is_over_capacity=total_load > capacity,
    )


def assess_candidate(
    space: Space,
    candidate: CandidateBooking,
    bookings: Iterable[Booking],
    exclude_id: str | None = None,
) -> LoadReport:
    """Compute the load report for *candidate* against a day's bookings.

    Only bookings for the candidate's space and date are considered.
    """
    same_slot = [
        b for b in bookings if b.space_id == space.id and b.date == candidate.date
    ]
    return compute_load(
        space.capacity,
        booking_interval(candidate),
        candidate.pax,
        same_slot,
        exclude_id,
    )
