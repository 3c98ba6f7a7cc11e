"""Domain events emitted by the planner controller."""

from __future__ import annotations

from pydantic import BaseModel


class DomainEvent(BaseModel):
    """Base class; subscribe to it to receive every event."""


class BookingsLoaded(DomainEvent):
    """Fired when the working set for a date has been (re)loaded."""

    date: str
    space_count: int
    booking_count: int


class LoadFailed(DomainEvent):
    """Fired when the working set could not be fetched."""

    date: str
    error: str


class BookingSaved(DomainEvent):
    """Fired after a booking insert or update has been persisted."""

    booking_id: str
    temporary_id: str | None = None
    created: bool = False


class OverbookingAccepted(DomainEvent):
    """Fired when a booking was saved although it exceeds the space capacity."""

    booking_id: str
    space_id: str
    total_load: int
    capacity: int


class BookingDeleted(DomainEvent):
    booking_id: str


class SpaceSaved(DomainEvent):
    space_id: str
    created: bool = False


class SpaceDeleted(DomainEvent):
    space_id: str


class MutationRolledBack(DomainEvent):
    """Fired when a failed write forced the local state to be restored."""

    description: str
    error: str
    booking_id: str | None = None
