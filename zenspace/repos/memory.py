"""In-memory repository for spaces and bookings."""

from __future__ import annotations

import uuid
from datetime import date

from zenspace.domain.errors import NotFoundError
from zenspace.domain.models import Booking, BookingStatus, Space, SpaceType


class InMemoryRepository:
    """Dict-backed store keyed by id. Records are copied in and out."""

    def __init__(self) -> None:
        self._spaces: dict[str, Space] = {}
        self._bookings: dict[str, Booking] = {}

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # -- spaces -------------------------------------------------------------

    async def list_spaces(self) -> list[Space]:
        return sorted(
            (s.model_copy() for s in self._spaces.values()), key=lambda s: s.name
        )

    async def insert_space(self, name: str, type: str, capacity: int) -> str:
        space = Space(id=self._new_id(), name=name, type=type, capacity=capacity)
        self._spaces[space.id] = space
        return space.id

    async def update_space(self, space: Space) -> None:
        if space.id not in self._spaces:
            raise NotFoundError(f"Space {space.id} not found")
        self._spaces[space.id] = space.model_copy()

    async def delete_space(self, space_id: str) -> None:
        self._spaces.pop(space_id, None)

    # -- bookings -----------------------------------------------------------

    async def list_bookings(self, day: str) -> list[Booking]:
        return [b.model_copy() for b in self._bookings.values() if b.date == day]

    async def insert_booking(self, booking: Booking) -> str:
        stored = booking.model_copy(update={"id": self._new_id()})
        self._bookings[stored.id] = stored
        return stored.id

    async def update_booking(self, booking_id: str, booking: Booking) -> None:
        if booking_id not in self._bookings:
            raise NotFoundError(f"Booking {booking_id} not found")
        self._bookings[booking_id] = booking.model_copy(update={"id": booking_id})

    async def delete_booking(self, booking_id: str) -> None:
        self._bookings.pop(booking_id, None)

    async def count_bookings_for_space(self, space_id: str) -> int:
        return sum(1 for b in self._bookings.values() if b.space_id == space_id)


# ---------------------------------------------------------------------------
# Seed data – a small spa with a few bookings today, handy for local runs
# ---------------------------------------------------------------------------


def _seed(repo: InMemoryRepository, day: str) -> None:
    spaces = [
        Space(
            id="sauna", name="Sauna Finlandais", type=SpaceType.SAUNA.value, capacity=6
        ),
        Space(id="massage-1", name="Cabine Massage 1", type=SpaceType.MASSAGE.value),
        Space(id="hammam", name="Hammam", type=SpaceType.HAMMAM.value, capacity=4),
        Space(id="pool", name="Piscine", type=SpaceType.POOL.value, capacity=10),
    ]
    for space in spaces:
        repo._spaces[space.id] = space

    bookings = [
        Booking(
            space_id="massage-1",
            customer_name="Jean Dupont",
            service_name="Massage relaxant",
            date=day,
            start_time="09:00",
            duration_minutes=60,
            break_minutes=15,
        ),
        Booking(
            space_id="sauna",
            customer_name="Famille Martin",
            service_name="Accès sauna",
            date=day,
            start_time="10:30",
            duration_minutes=90,
            pax=4,
        ),
        Booking(
            space_id="hammam",
            customer_name="Maintenance",
            service_name="Détartrage",
            date=day,
            start_time="08:00",
            duration_minutes=60,
            status=BookingStatus.MAINTENANCE,
        ),
    ]
    for booking in bookings:
        repo._bookings[booking.id] = booking


def create_memory_repository(seed: bool = False) -> InMemoryRepository:
    """Return an InMemoryRepository, optionally pre-loaded with sample data."""
    repo = InMemoryRepository()
    if seed:
        _seed(repo, date.today().isoformat())
    return repo
