"""Tests for the booking request model."""

import json
import uuid
from datetime import date, time

import pytest
from pydantic import ValidationError

from app.core.booking.schemas import BookingRequest, BookingResponse, NotificationSummary


class TestBookingRequest:
    """Test BookingRequest parsing."""

    def test_parses_form_payload(self):
        therapist_id = uuid.uuid4()
        request = BookingRequest.model_validate({
            "name": "Ana",
            "email": "ana@x.com",
            "phone": "11987654321",
            "date": "2024-05-01",
            "time": "10:00",
            "therapistId": str(therapist_id),
            "queixaPrincipal": "Ansiedade",
        })

        assert request.date == date(2024, 5, 1)
        assert request.time == time(10, 0)
        assert request.therapist_id == therapist_id
        assert request.missing_fields() == []

    def test_missing_fields(self):
        request = BookingRequest.model_validate({"name": "Ana", "email": "ana@x.com"})

        assert request.missing_fields() == ["date", "time"]

    def test_empty_strings_count_as_missing(self):
        request = BookingRequest.model_validate({
            "name": "",
            "email": "ana@x.com",
            "date": "",
            "time": "10:00",
            "therapistId": "",
        })

        assert request.missing_fields() == ["name", "date"]
        assert request.therapist_id is None

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            BookingRequest.model_validate({"date": "01/05/2024"})

    def test_numeric_phone(self):
        request = BookingRequest.model_validate({"phone": 11987654321})

        assert request.phone == "11987654321"

    def test_anamnesis_excludes_booking_fields(self):
        request = BookingRequest.model_validate({
            "name": "Ana",
            "email": "ana@x.com",
            "date": "2024-05-01",
            "time": "10:00",
            "therapistId": str(uuid.uuid4()),
            "queixaPrincipal": "Insônia",
            "jaFezTerapia": True,
        })

        assert request.anamnesis == {"queixaPrincipal": "Insônia", "jaFezTerapia": True}
        assert json.loads(request.anamnesis_text) == request.anamnesis
        assert "Insônia" in request.anamnesis_text
        assert request.main_complaint == "Insônia"

    def test_main_complaint_non_text_values(self):
        assert BookingRequest.model_validate({"queixaPrincipal": 7}).main_complaint == "7"
        request = BookingRequest.model_validate({"queixaPrincipal": ["Ansiedade", "Insônia"]})

        assert request.main_complaint == "Ansiedade, Insônia"

    def test_main_complaint_default(self):
        request = BookingRequest.model_validate({"queixaPrincipal": ""})

        assert request.main_complaint == "Não informado"

    def test_text_formats(self):
        request = BookingRequest.model_validate({"date": "2024-05-01", "time": "09:30:00"})

        assert request.date_text == "2024-05-01"
        assert request.time_text == "09:30"


class TestBookingResponse:

    def test_serializes_with_camel_case_keys(self):
        response = BookingResponse(
            patient_id="abc",
            email_debug=NotificationSummary(status="sent"),
        )

        assert response.model_dump(by_alias=True) == {
            "message": "Booking confirmed",
            "patientId": "abc",
            "emailDebug": {"status": "sent", "error": None, "info": None},
        }
