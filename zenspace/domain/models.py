"""Domain models for the wellness-center planner."""

from __future__ import annotations

import re
import uuid
from datetime import date as _date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from zenspace.domain.errors import MalformedInputError, OutOfRangeError
from zenspace.services.clock import minutes_to_time, time_to_minutes

MINIMUM_DURATION_MINUTES = 15
DEFAULT_DURATION_MINUTES = 60
DEFAULT_START_TIME = "09:00"

_STORED_TIME_RE = re.compile(r"(\d{2}:\d{2}):00(\.0+)?")


class BookingStatus(StrEnum):
    CONFIRMED = "CONFIRMED"
    PENDING = "PENDING"
    CANCELED = "CANCELED"
    MAINTENANCE = "MAINTENANCE"
    BLOCKED = "BLOCKED"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            upper = value.strip().upper()
            if upper == "CANCELLED":
                return cls.CANCELED
            for member in cls:
                if member.value == upper:
                    return member
        return None


class SpaceType(StrEnum):
    """Space categories offered by the UI. ``Space.type`` also accepts others."""

    MASSAGE = "MASSAGE"
    SAUNA = "SAUNA"
    HAMMAM = "HAMMAM"
    POOL = "POOL"
    RELAX = "RELAX"
    SPA = "SPA"


def _new_id() -> str:
    return str(uuid.uuid4())


def normalize_pax(value: object) -> int:
    """Return *value* as a positive headcount, falling back to 1."""
    if isinstance(value, bool):
        return 1
    try:
        pax = int(value)
    except (TypeError, ValueError, OverflowError):
        return 1
    if pax != value and not isinstance(value, str):
        # 2.5 people is not a headcount
        return 1
    return pax if pax >= 1 else 1


def validate_day(value: str) -> str:
    if isinstance(value, _date):
        return value.isoformat()
    try:
        parsed = _date.fromisoformat(value)
    except (TypeError, ValueError):
        raise MalformedInputError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None
    if parsed.isoformat() != value:
        raise MalformedInputError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    return value


def _space_name(value: str) -> str:
    if not value.strip():
        raise MalformedInputError("Space name must not be blank")
    return value


def _check_clock(value: str) -> str:
    # Postgres ``time`` columns come back as HH:MM:SS
    if isinstance(value, str):
        match = _STORED_TIME_RE.fullmatch(value)
        if match:
            value = match.group(1)
    time_to_minutes(value)
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Space(_CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1)
    type: str = SpaceType.MASSAGE.value
    capacity: int = Field(default=1, ge=1)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _space_name(value)


class Booking(_CamelModel):
    id: str = Field(default_factory=_new_id)
    space_id: str
    customer_name: str
    service_name: str
    date: str
    start_time: str
    duration_minutes: int = Field(gt=0)
    break_minutes: int = Field(default=0, ge=0)
    pax: int = 1
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: str | None = None

    @field_validator("id", "space_id", mode="before")
    @classmethod
    def _id_as_text(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("date", mode="before")
    @classmethod
    def _valid_date(cls, value: object) -> str:
        return validate_day(value)

    @field_validator("start_time", mode="before")
    @classmethod
    def _valid_start(cls, value: object) -> str:
        return _check_clock(value)

    @field_validator("break_minutes", mode="before")
    @classmethod
    def _break_defaults_to_zero(cls, value: object) -> object:
        return 0 if value is None else value

    @field_validator("pax", mode="before")
    @classmethod
    def _pax_defaults_to_one(cls, value: object) -> int:
        return normalize_pax(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status_any_case(cls, value: object) -> object:
        return BookingStatus(value) if isinstance(value, str) else value

    @property
    def is_canceled(self) -> bool:
        return self.status == BookingStatus.CANCELED


class CandidateBooking(_CamelModel):
    """Booking form state before submission. Carries no persisted identity."""

    space_id: str = ""
    customer_name: str = ""
    service_name: str = ""
    date: str
    start_time: str = DEFAULT_START_TIME
    duration_minutes: int = Field(
        default=DEFAULT_DURATION_MINUTES, ge=MINIMUM_DURATION_MINUTES
    )
    break_minutes: int = Field(default=0, ge=0)
    pax: int = 1
    status: BookingStatus = BookingStatus.CONFIRMED
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _valid_date(cls, value: object) -> str:
        return validate_day(value)

    @field_validator("start_time", mode="before")
    @classmethod
    def _valid_start(cls, value: object) -> str:
        return _check_clock(value)

    @field_validator("break_minutes", mode="before")
    @classmethod
    def _break_defaults_to_zero(cls, value: object) -> object:
        return 0 if value in (None, "") else value

    @field_validator("pax", mode="before")
    @classmethod
    def _pax_defaults_to_one(cls, value: object) -> int:
        return normalize_pax(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status_any_case(cls, value: object) -> object:
        return BookingStatus(value) if isinstance(value, str) else value

    @computed_field
    @property
    def end_time(self) -> str | None:
        """End of the active service, or None when it runs past midnight."""
        try:
            return minutes_to_time(
                time_to_minutes(self.start_time) + self.duration_minutes
            )
        except OutOfRangeError:
            return None

    def to_booking(self, booking_id: str | None = None) -> Booking:
        """Validate the submission-only rules and build a Booking."""
        missing = [
            label
            for label, value in (
                ("space_id", self.space_id),
                ("customer_name", self.customer_name),
                ("service_name", self.service_name),
            )
            if not value.strip()
        ]
        if missing:
            raise MalformedInputError(f"Missing required fields: {', '.join(missing)}")
        data = self.model_dump(exclude={"end_time"})
        if booking_id is not None:
            data["id"] = booking_id
        return Booking(**data)


class LoadReport(_CamelModel):
    """Capacity check result for a candidate. Over-capacity is advisory only."""

    capacity: int
    overlapping: list[Booking] = Field(default_factory=list)
    current_load: int = 0
    total_load: int = 0
    remaining_capacity: int = 0
    is_over_capacity: bool = False


# ---------------------------------------------------------------------------
# View models
# ---------------------------------------------------------------------------


class DailyStats(_CamelModel):
    date: str | None = None
    total_bookings: int = 0
    confirmed_bookings: int = 0
    revenue: float = 0.0
    occupancy_rate: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    by_hour: dict[str, int] = Field(default_factory=dict)


class PlanningBlock(_CamelModel):
    booking: Booking
    offset_minutes: int
    active_minutes: int
    break_minutes: int
    lane: int


class PlanningRow(_CamelModel):
    space: Space
    blocks: list[PlanningBlock] = Field(default_factory=list)


class Planning(_CamelModel):
    date: str
    opening_hour: int
    closing_hour: int
    rows: list[PlanningRow] = Field(default_factory=list)
    load_error: str | None = None


class Notice(_CamelModel):
    level: str
    message: str
    booking_id: str | None = None


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class SpaceCreate(_CamelModel):
    name: str = Field(min_length=1)
    type: str = SpaceType.MASSAGE.value
    capacity: int = Field(default=1, ge=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        return _space_name(value)


class DraftRequest(_CamelModel):
    space_id: str | None = None
    start_time: str | None = None
    offset_minutes: int | None = None


class CheckRequest(_CamelModel):
    candidate: CandidateBooking
    exclude_id: str | None = None


class RescheduleRequest(_CamelModel):
    """One edit to start, duration or end of a draft."""

    candidate: CandidateBooking
    start_time: str | None = None
    duration_minutes: int | None = None
    end_time: str | None = None


class SubmitResponse(_CamelModel):
    booking: Booking
    load: LoadReport | None = None


class AssistantRequest(_CamelModel):
    prompt: str


class AssistantResponse(_CamelModel):
    text: str
