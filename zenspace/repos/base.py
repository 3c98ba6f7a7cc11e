"""Persistence interface the controller depends on."""

from __future__ import annotations

from typing import Protocol

from zenspace.domain.models import Booking, Space


class BookingRepository(Protocol):
    """CRUD over spaces and bookings.

    Implementations raise ``RepositoryError`` (or a subclass) for every
    failure and own the mapping to their storage schema.
    """

    async def list_spaces(self) -> list[Space]: ...

    async def list_bookings(self, day: str) -> list[Booking]: ...

    async def insert_booking(self, booking: Booking) -> str:
        """Store *booking* ignoring its id; return the assigned id."""
        ...

    async def update_booking(self, booking_id: str, booking: Booking) -> None: ...

    async def delete_booking(self, booking_id: str) -> None: ...

    async def count_bookings_for_space(self, space_id: str) -> int: ...

    async def insert_space(self, name: str, type: str, capacity: int) -> str: ...

    async def update_space(self, space: Space) -> None: ...

    async def delete_space(self, space_id: str) -> None: ...
