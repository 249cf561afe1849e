"""
Booking request and response models.

The booking form posts the patient's contact data, the chosen slot and the
anamnesis answers in one flat JSON object. Known keys are typed fields; every
other key is kept as anamnesis data.
"""

import datetime as dt
import json
import uuid
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ("name", "email", "date", "time")

DEFAULT_MAIN_COMPLAINT = "Não informado"


class BookingRequest(BaseModel):
    """Booking form submission."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: Optional[str] = Field(default=None, examples=["Ana Souza"])
    email: Optional[str] = Field(default=None, examples=["ana@example.com"])
    phone: Optional[str] = Field(default=None, examples=["(11) 98765-4321"])
    date: Optional[dt.date] = Field(default=None, examples=["2024-05-01"])
    time: Optional[dt.time] = Field(default=None, examples=["10:00"])
    therapist_id: Optional[uuid.UUID] = Field(
        default=None,
        alias="therapistId",
        description="Therapist chosen on the booking page",
    )

    @field_validator("date", "time", "therapist_id", mode="before")
    @classmethod
    def empty_as_missing(cls, value: Any) -> Any:
        """Blank form inputs arrive as empty strings."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("phone", mode="before")
    @classmethod
    def phone_as_text(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    def missing_fields(self) -> list[str]:
        """Required fields that are absent or empty."""
        return [field for field in REQUIRED_FIELDS if not getattr(self, field)]

    @property
    def anamnesis(self) -> dict[str, Any]:
        """Intake answers: every key that is not a known booking field."""
        return dict(self.model_extra or {})

    @property
    def anamnesis_text(self) -> str:
        """Anamnesis serialized for the appointment notes column."""
        return json.dumps(self.anamnesis, indent=2, ensure_ascii=False)

    @property
    def main_complaint(self) -> str:
        value = self.anamnesis.get("queixaPrincipal")
        if not value:
            return DEFAULT_MAIN_COMPLAINT
        # Multi-select answers arrive as lists
        if isinstance(value, list):
            return ", ".join(str(item) for item in value)
        return str(value)

    @property
    def date_text(self) -> str:
        return self.date.isoformat() if self.date else ""

    @property
    def time_text(self) -> str:
        return self.time.strftime("%H:%M") if self.time else ""


@dataclass
class BookingDetails:
    """Everything the notifications need to describe a booking."""

    name: str
    email: str
    phone: Optional[str]
    date: str
    time: str
    therapist_name: Optional[str] = None
    therapist_email: Optional[str] = None
    main_complaint: Optional[str] = None


class NotificationSummary(BaseModel):
    """Outcome of the patient confirmation email."""

    status: str
    error: Optional[str] = None
    info: Optional[dict[str, Any]] = None


class BookingResponse(BaseModel):
    """Successful booking."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Booking confirmed"
    patient_id: str = Field(..., alias="patientId")
    email_debug: NotificationSummary = Field(..., alias="emailDebug")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: Optional[Any] = None
