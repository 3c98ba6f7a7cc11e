"""Aggregate figures for the dashboard view."""

from __future__ import annotations

from collections import Counter

from zenspace.domain.models import Booking, BookingStatus, DailyStats
from zenspace.services.clock import time_to_minutes

RATE_PER_MINUTE = 1.5  # estimated revenue, euros per booked minute


def compute_daily_stats(
    bookings: list[Booking],
    space_count: int,
    opening_hour: int = 8,
    closing_hour: int = 21,
    day: str | None = None,
) -> DailyStats:
    """Summarise one day of bookings.

    Occupancy is booked minutes over the open minutes of every space. Hourly
    buckets count booking starts in ``[opening_hour, closing_hour)``.
    """
    booked_minutes = sum(b.duration_minutes for b in bookings)
    open_minutes = max(1, closing_hour - opening_hour) * 60 * max(1, space_count)

    by_hour = {f"{hour}h": 0 for hour in range(opening_hour, closing_hour)}
    for booking in bookings:
        hour = time_to_minutes(booking.start_time) // 60
        if opening_hour <= hour < closing_hour:
            by_hour[f"{hour}h"] += 1

    return DailyStats(
        date=day,
        total_bookings=len(bookings),
        confirmed_bookings=sum(
            1 for b in bookings if b.status == BookingStatus.CONFIRMED
        ),
        revenue=booked_minutes * RATE_PER_MINUTE,
        occupancy_rate=round(booked_minutes / open_minutes * 100),
        by_status=dict(Counter(b.status.value for b in bookings)),
        by_hour=by_hour,
    )
