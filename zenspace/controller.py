"""Application state controller.

Owns the local working set (all spaces, the selected day's bookings) and
routes every mutation through the repository with optimistic local updates
that are rolled back when the write fails.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta

from zenspace.domain.bus import EventBus
from zenspace.domain.commands import InsertRecord, Mutation, RemoveRecord, ReplaceRecord
from zenspace.domain.errors import NotFoundError, RepositoryError, SpaceInUseError
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
from zenspace.domain.models import (
    Booking,
    CandidateBooking,
    DailyStats,
    LoadReport,
    Planning,
    Space,
    SpaceCreate,
    validate_day,
)
from zenspace.repos.base import BookingRepository
from zenspace.services.assistant import SchedulingAssistant, wants_summary
from zenspace.services.candidates import (
    candidate_from_booking,
    new_candidate,
    reschedule,
)
from zenspace.services.conflicts import assess_candidate
from zenspace.services.planning import build_planning
from zenspace.services.stats import compute_daily_stats

logger = logging.getLogger(__name__)

TEMPORARY_ID_PREFIX = "tmp-"


def _temporary_id() -> str:
    return f"{TEMPORARY_ID_PREFIX}{uuid.uuid4().hex[:9]}"


class PlannerController:
    """In-memory working set plus the intents the UI can emit."""

    def __init__(
        self,
        repository: BookingRepository,
        assistant: SchedulingAssistant,
        bus: EventBus | None = None,
        selected_date: str | None = None,
        opening_hour: int = 8,
        closing_hour: int = 21,
    ) -> None:
        self.repository = repository
        self.assistant = assistant
        self.bus = bus or EventBus()
        self.selected_date = validate_day(selected_date or date.today().isoformat())
        self.opening_hour = opening_hour
        self.closing_hour = closing_hour

        self.spaces: list[Space] = []
        self.bookings: list[Booking] = []
        self.load_error: str | None = None
        self._fetch_token = 0

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Fetch spaces and the selected day's bookings.

        Returns False when the fetch failed or was superseded by a newer one.
        """
        self._fetch_token += 1
        token = self._fetch_token
        day = self.selected_date
        try:
            spaces = await self.repository.list_spaces()
            bookings = await self.repository.list_bookings(day)
        except RepositoryError as exc:
            if token != self._fetch_token:
                return False
            self.spaces = []
            self.bookings = []
            self.load_error = str(exc)
            self.bus.publish(LoadFailed(date=day, error=str(exc)))
            return False

        if token != self._fetch_token:
            logger.debug("Discarding stale fetch for %s", day)
            return False

        self.spaces = spaces
        self.bookings = bookings
        self.load_error = None
        self.bus.publish(
            BookingsLoaded(
                date=day, space_count=len(spaces), booking_count=len(bookings)
            )
        )
        return True

    async def select_date(self, day: str) -> bool:
        self.selected_date = validate_day(day)
        return await self.load()

    async def shift_date(self, days: int) -> bool:
        target = date.fromisoformat(self.selected_date) + timedelta(days=days)
        return await self.select_date(target.isoformat())

    # ------------------------------------------------------------------
    # Lookups and views
    # ------------------------------------------------------------------

    def find_space(self, space_id: str) -> Space | None:
        return next((s for s in self.spaces if s.id == space_id), None)

    def find_booking(self, booking_id: str) -> Booking | None:
        return next((b for b in self.bookings if b.id == booking_id), None)

    def planning(self) -> Planning:
        view = build_planning(
            self.selected_date,
            self.spaces,
            self.bookings,
            self.opening_hour,
            self.closing_hour,
        )
        view.load_error = self.load_error
        return view

    def stats(self) -> DailyStats:
        return compute_daily_stats(
            self.bookings,
            len(self.spaces),
            self.opening_hour,
            self.closing_hour,
            day=self.selected_date,
        )

    # ------------------------------------------------------------------
    # Booking form
    # ------------------------------------------------------------------

    def new_booking_draft(
        self, space_id: str | None = None, start_time: str | None = None
    ) -> CandidateBooking:
        if not space_id and self.spaces:
            space_id = self.spaces[0].id
        return new_candidate(self.selected_date, space_id or "", start_time)

    def edit_booking_draft(self, booking_id: str) -> CandidateBooking:
        booking = self.find_booking(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return candidate_from_booking(booking)

    def reschedule_draft(
        self,
        candidate: CandidateBooking,
        *,
        start_time: str | None = None,
        duration_minutes: int | None = None,
        end_time: str | None = None,
    ) -> CandidateBooking:
        """Apply a start, duration or end edit from the form."""
        return reschedule(
            candidate,
            start_time=start_time,
            duration_minutes=duration_minutes,
            end_time=end_time,
        )

    def assess(
        self, candidate: CandidateBooking, exclude_id: str | None = None
    ) -> LoadReport | None:
        """Load report against the local working set; None for unknown spaces."""
        space = self.find_space(candidate.space_id)
        if space is None:
            return None
        return assess_candidate(space, candidate, self.bookings, exclude_id)

    async def check_capacity(
        self, candidate: CandidateBooking, exclude_id: str | None = None
    ) -> LoadReport | None:
        """Like ``assess`` but fetches the bookings when the date is not loaded."""
        if candidate.date == self.selected_date:
            return self.assess(candidate, exclude_id)
        space = self.find_space(candidate.space_id)
        if space is None:
            return None
        bookings = await self.repository.list_bookings(candidate.date)
        return assess_candidate(space, candidate, bookings, exclude_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def _commit(self, mutation: Mutation | None, persist, booking_id=None):
        if mutation is not None:
            mutation.apply()
        try:
            return await persist()
        except RepositoryError as exc:
            if mutation is not None:
                mutation.revert()
            self.bus.publish(
                MutationRolledBack(
                    description=mutation.description if mutation else "write",
                    error=str(exc),
                    booking_id=booking_id,
                )
            )
            raise

    async def submit_booking(
        self, candidate: CandidateBooking, booking_id: str | None = None
    ) -> tuple[Booking, LoadReport | None]:
        """Save a new booking or fully replace an existing one.

        Over-capacity never prevents the save; the load report is returned
        alongside the stored booking.
        """
        booking = candidate.to_booking(booking_id or _temporary_id())
        try:
            report = await self.check_capacity(candidate, exclude_id=booking_id)
        except RepositoryError as exc:
            logger.warning("Capacity check skipped: %s", exc)
            report = None

        same_day = booking.date == self.selected_date
        mutation: Mutation | None = None

        if booking_id is not None:
            if not same_day:
                mutation = RemoveRecord(self.bookings, booking_id, "booking update")
            elif self.find_booking(booking_id) is not None:
                mutation = ReplaceRecord(self.bookings, booking, "booking update")
            else:
                mutation = InsertRecord(self.bookings, booking, "booking update")
            await self._commit(
                mutation,
                lambda: self.repository.update_booking(booking_id, booking),
                booking_id,
            )
            saved = booking
            self.bus.publish(BookingSaved(booking_id=booking_id))
        else:
            if same_day:
                mutation = InsertRecord(self.bookings, booking, "booking creation")
            new_id = await self._commit(
                mutation, lambda: self.repository.insert_booking(booking), booking.id
            )
            saved = booking.model_copy(update={"id": new_id})
            if same_day:
                # swap the temporary record for the one carrying the real id
                for index, local in enumerate(self.bookings):
                    if local.id == booking.id:
                        self.bookings[index] = saved
                        break
            self.bus.publish(
                BookingSaved(booking_id=new_id, temporary_id=booking.id, created=True)
            )

        if report is not None and report.is_over_capacity:
            self.bus.publish(
                OverbookingAccepted(
                    booking_id=saved.id,
                    space_id=saved.space_id,
                    total_load=report.total_load,
                    capacity=report.capacity,
                )
            )
        return saved, report

    async def delete_booking(self, booking_id: str) -> None:
        await self._commit(
            RemoveRecord(self.bookings, booking_id, "booking deletion"),
            lambda: self.repository.delete_booking(booking_id),
            booking_id,
        )
        self.bus.publish(BookingDeleted(booking_id=booking_id))

    async def add_space(self, name: str, type: str, capacity: int) -> Space:
        """Create a space; it only appears locally once the backend assigned an id."""
        data = SpaceCreate(name=name, type=type, capacity=capacity)
        space_id = await self.repository.insert_space(
            data.name, data.type, data.capacity
        )
        space = Space(id=space_id, **data.model_dump())
        self.spaces.append(space)
        self.bus.publish(SpaceSaved(space_id=space_id, created=True))
        return space

    async def update_space(self, space: Space) -> Space:
        if self.find_space(space.id) is None:
            raise NotFoundError(f"Space {space.id} not found")
        await self._commit(
            ReplaceRecord(self.spaces, space, "space update"),
            lambda: self.repository.update_space(space),
        )
        self.bus.publish(SpaceSaved(space_id=space.id))
        return space

    async def delete_space(self, space_id: str) -> None:
        """Delete a space that no booking references.

        Bookings are never cascaded: a space with bookings on any date is
        refused with ``SpaceInUseError``.
        """
        remaining = await self.repository.count_bookings_for_space(space_id)
        if remaining:
            raise SpaceInUseError(
                f"Space {space_id} still has {remaining} booking(s)"
            )
        await self._commit(
            RemoveRecord(self.spaces, space_id, "space deletion"),
            lambda: self.repository.delete_space(space_id),
        )
        self.bus.publish(SpaceDeleted(space_id=space_id))

    # ------------------------------------------------------------------
    # Assistant
    # ------------------------------------------------------------------

    async def ask_assistant(self, prompt: str) -> str:
        if not prompt.strip():
            return ""
        if wants_summary(prompt):
            return await self.assistant.summarize_load(self.bookings)
        return await self.assistant.suggest_slot(prompt, self.spaces, self.bookings)
