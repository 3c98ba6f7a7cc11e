"""Domain event handlers: wired up at application startup."""

from __future__ import annotations

import logging
from collections import deque

from zenspace.domain.bus import EventBus
from zenspace.domain.events import (
    BookingDeleted,
    BookingSaved,
    BookingsLoaded,
    LoadFailed,
    MutationRolledBack,
    OverbookingAccepted,
    SpaceDeleted,
    SpaceSaved,
)
from zenspace.domain.models import Notice

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Logs domain events and keeps the user-facing notices.

    Notices are what the UI shows for failed writes, failed loads and
    accepted overbookings; only the most recent ``max_notices`` are kept.
    """

    def __init__(self, bus: EventBus, max_notices: int = 50) -> None:
        self.bus = bus
        self.notices: deque[Notice] = deque(maxlen=max_notices)
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(BookingsLoaded, self.on_bookings_loaded)
        self.bus.subscribe(LoadFailed, self.on_load_failed)
        self.bus.subscribe(BookingSaved, self.on_booking_saved)
        self.bus.subscribe(OverbookingAccepted, self.on_overbooking_accepted)
        self.bus.subscribe(BookingDeleted, self.on_booking_deleted)
        self.bus.subscribe(SpaceSaved, self.on_space_saved)
        self.bus.subscribe(SpaceDeleted, self.on_space_deleted)
        self.bus.subscribe(MutationRolledBack, self.on_mutation_rolled_back)

    def drain(self) -> list[Notice]:
        """Return and clear the pending notices."""
        notices = list(self.notices)
        self.notices.clear()
        return notices

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_bookings_loaded(self, event: BookingsLoaded) -> None:
        logger.info(
            "Loaded %d spaces and %d bookings for %s",
            event.space_count,
            event.booking_count,
            event.date,
        )

    def on_load_failed(self, event: LoadFailed) -> None:
        logger.error("Loading %s failed: %s", event.date, event.error)
        self.notices.append(
            Notice(
                level="error",
                message=f"Impossible de charger le planning du {event.date}.",
            )
        )

    def on_booking_saved(self, event: BookingSaved) -> None:
        if event.temporary_id:
            logger.info(
                "Booking %s persisted as %s", event.temporary_id, event.booking_id
            )
        else:
            logger.info("Booking %s persisted", event.booking_id)

    def on_overbooking_accepted(self, event: OverbookingAccepted) -> None:
        logger.warning(
            "Space %s overbooked by %s: %d/%d",
            event.space_id,
            event.booking_id,
            event.total_load,
            event.capacity,
        )
        self.notices.append(
            Notice(
                level="warning",
                message=(
                    f"Surbooking : {event.total_load} pers. pour "
                    f"{event.capacity} places."
                ),
                booking_id=event.booking_id,
            )
        )

    def on_booking_deleted(self, event: BookingDeleted) -> None:
        logger.info("Booking %s deleted", event.booking_id)

    def on_space_saved(self, event: SpaceSaved) -> None:
        logger.info(
            "Space %s %s", event.space_id, "created" if event.created else "updated"
        )

    def on_space_deleted(self, event: SpaceDeleted) -> None:
        logger.info("Space %s deleted", event.space_id)

    def on_mutation_rolled_back(self, event: MutationRolledBack) -> None:
        logger.error("Rolled back %s: %s", event.description, event.error)
        self.notices.append(
            Notice(
                level="error",
                message=f"Échec de l'enregistrement ({event.description}).",
                booking_id=event.booking_id,
            )
        )
