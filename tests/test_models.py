"""Tests for model parsing and serialization rules."""

import pytest
from pydantic import ValidationError

from zenspace.domain.models import Booking, BookingStatus, CandidateBooking, Space

ROW = {
    "id": 42,
    "space_id": 7,
    "customer_name": "Jean",
    "service_name": "Massage",
    "date": "2025-05-01",
    "start_time": "09:30:00",
    "duration_minutes": 60,
    "break_minutes": None,
    "pax": None,
    "status": "CONFIRMED",
    "created_at": "2025-04-30T10:00:00Z",
}


def test_storage_row_is_normalized():
    booking = Booking.model_validate(ROW)
    assert booking.id == "42"
    assert booking.space_id == "7"
    assert booking.start_time == "09:30"
    assert booking.break_minutes == 0
    assert booking.pax == 1


def test_json_uses_camel_case():
    data = Booking.model_validate(ROW).model_dump(by_alias=True)
    assert data["spaceId"] == "7"
    assert data["durationMinutes"] == 60
    assert "space_id" not in data


def test_camel_case_input_is_accepted():
    booking = Booking.model_validate(
        {
            "spaceId": "s",
            "customerName": "A",
            "serviceName": "B",
            "date": "2025-05-01",
            "startTime": "10:00",
            "durationMinutes": 30,
        }
    )
    assert booking.space_id == "s"


@pytest.mark.parametrize("status", ["canceled", "CANCELED", "cancelled"])
def test_status_is_case_insensitive(status):
    booking = Booking.model_validate({**ROW, "status": status})
    assert booking.status == BookingStatus.CANCELED
    assert booking.is_canceled


@pytest.mark.parametrize("day", ["2025-5-1", "01/05/2025", "2025-02-30", ""])
def test_bad_dates_are_rejected(day):
    with pytest.raises(ValidationError):
        Booking.model_validate({**ROW, "date": day})


def test_bad_start_time_is_rejected():
    with pytest.raises(ValidationError):
        Booking.model_validate({**ROW, "start_time": "9h30"})


def test_unknown_space_type_round_trips():
    space = Space(id="x", name="Salle de yoga", type="YOGA", capacity=12)
    assert Space.model_validate(space.model_dump()).type == "YOGA"


def test_space_rules():
    with pytest.raises(ValidationError):
        Space(name="   ", capacity=1)
    with pytest.raises(ValidationError):
        Space(name="Sauna", capacity=0)


def test_candidate_end_time_past_midnight_is_none():
    candidate = CandidateBooking(date="2025-05-01", start_time="23:30", duration_minutes=60)
    assert candidate.end_time is None
    assert candidate.model_dump(by_alias=True)["endTime"] is None
