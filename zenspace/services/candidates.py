"""Building booking-form drafts and keeping start/duration/end consistent."""

from __future__ import annotations

from zenspace.domain.errors import MalformedInputError
from zenspace.domain.models import (
    DEFAULT_DURATION_MINUTES,
    DEFAULT_START_TIME,
    MINIMUM_DURATION_MINUTES,
    Booking,
    CandidateBooking,
    normalize_pax,
)
from zenspace.services.clock import minutes_to_time, time_to_minutes

__all__ = [
    "candidate_from_booking",
    "derive_duration",
    "derive_end_time",
    "new_candidate",
    "normalize_pax",
    "reschedule",
]


def derive_end_time(start_time: str, duration_minutes: int) -> str:
    """Return the end of the active service (break excluded)."""
    return minutes_to_time(time_to_minutes(start_time) + duration_minutes)


def derive_duration(start_time: str, end_time: str) -> int:
    """Duration between two clock times, never below the 15 minute floor."""
    span = time_to_minutes(end_time) - time_to_minutes(start_time)
    return max(MINIMUM_DURATION_MINUTES, span)


def reschedule(
    candidate: CandidateBooking,
    *,
    start_time: str | None = None,
    duration_minutes: int | None = None,
    end_time: str | None = None,
) -> CandidateBooking:
    """Apply one edit to start, duration or end and recompute the others.

    A start edit keeps the duration, a duration edit keeps the start, and an
    end edit derives the duration. The floor always beats the chosen end.
    """
    edits = [v for v in (start_time, duration_minutes, end_time) if v is not None]
    if len(edits) > 1:
        raise MalformedInputError(
            "reschedule() takes exactly one of start, duration or end"
        )

    start = start_time if start_time is not None else candidate.start_time
    duration = candidate.duration_minutes
    if duration_minutes is not None:
        try:
            duration = max(MINIMUM_DURATION_MINUTES, int(duration_minutes))
        except (TypeError, ValueError):
            raise MalformedInputError(
                f"Invalid duration {duration_minutes!r}"
            ) from None
    elif end_time is not None:
        duration = derive_duration(start, end_time)

    # validates the start and checks the new end still fits in the day
    derive_end_time(start, duration)
    return candidate.model_copy(
        update={"start_time": start, "duration_minutes": duration}
    )


def new_candidate(
    day: str,
    space_id: str = "",
    start_time: str | None = None,
    duration_minutes: int = DEFAULT_DURATION_MINUTES,
) -> CandidateBooking:
    return CandidateBooking(
        date=day,
        space_id=space_id,
        start_time=start_time or DEFAULT_START_TIME,
        duration_minutes=duration_minutes,
        pax=1,
    )


def candidate_from_booking(booking: Booking) -> CandidateBooking:
    data = booking.model_dump(exclude={"id"})
    data["duration_minutes"] = max(MINIMUM_DURATION_MINUTES, booking.duration_minutes)
    return CandidateBooking(**data)
