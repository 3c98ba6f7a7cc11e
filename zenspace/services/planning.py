"""Layout of the space-by-space planning grid."""

from __future__ import annotations

from zenspace.domain.models import Booking, Planning, PlanningBlock, PlanningRow, Space
from zenspace.services.clock import minutes_to_time, snap_minutes, time_to_minutes


def build_planning(
    day: str,
    spaces: list[Space],
    bookings: list[Booking],
    opening_hour: int,
    closing_hour: int,
) -> Planning:
    """Place each booking on its space row.

    Offsets are minutes from opening time. Bookings of a shared space are
    spread over ``capacity`` lanes in list order.
    """
    opening = opening_hour * 60
    rows: list[PlanningRow] = []
    for space in spaces:
        space_bookings = [b for b in bookings if b.space_id == space.id]
        blocks = [
            PlanningBlock(
                booking=booking,
                offset_minutes=time_to_minutes(booking.start_time) - opening,
                active_minutes=booking.duration_minutes,
                break_minutes=booking.break_minutes,
                lane=index % max(1, space.capacity),
            )
            for index, booking in enumerate(space_bookings)
        ]
        rows.append(PlanningRow(space=space, blocks=blocks))
    return Planning(
        date=day, opening_hour=opening_hour, closing_hour=closing_hour, rows=rows
    )


def slot_time(offset_minutes: float, opening_hour: int) -> str:
    """Start time for a click *offset_minutes* after opening, snapped to 15 min."""
    return minutes_to_time(opening_hour * 60 + snap_minutes(offset_minutes))
