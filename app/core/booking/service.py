"""
Booking Service

Writes a booking as one database transaction:
1. Upsert the patient by email
2. Insert the appointment
3. Insert a dashboard notification for the therapist (if one was chosen)
4. Commit

Any failure rolls the whole transaction back.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.booking.schemas import BookingDetails, BookingRequest
from app.models.database import (
    Appointment,
    AppointmentStatus,
    AppointmentType,
    Notification,
    NotificationType,
    Patient,
    PatientStatus,
    RecipientRole,
    Therapist,
)

logger = logging.getLogger(__name__)

DEFAULT_THERAPIST_NAME = "Terapeuta TRG"
NOTIFICATION_TITLE = "Novo Agendamento"


class BookingTransactionError(Exception):
    """Raised when the booking transaction fails and was rolled back."""
    pass


@dataclass
class TherapistContact:
    """Therapist display data used in notifications."""

    name: str = DEFAULT_THERAPIST_NAME
    email: Optional[str] = None


@dataclass
class BookingOutcome:
    """Result of a committed booking."""

    patient_id: uuid.UUID
    appointment_id: uuid.UUID
    patient_created: bool
    notification_id: Optional[uuid.UUID]
    details: BookingDetails


class BookingService:
    """Persists bookings."""

    async def resolve_therapist(
        self,
        session: AsyncSession,
        therapist_id: Optional[uuid.UUID],
    ) -> TherapistContact:
        """Look up the therapist's name and email.

        Falls back to a generic name when no id is given or the id is unknown.
        """
        if therapist_id is None:
            return TherapistContact()

        result = await session.execute(
            select(Therapist.name, Therapist.email).where(Therapist.id == therapist_id)
        )
        row = result.first()
        if row is None:
            logger.warning(f"Therapist {therapist_id} not found, using default contact")
            return TherapistContact()

        return TherapistContact(name=row.name, email=row.email)

    async def upsert_patient(
        self,
        session: AsyncSession,
        request: BookingRequest,
        therapist_id: Optional[uuid.UUID],
        main_complaint: str,
    ) -> tuple[Patient, bool]:
        """Find the patient by email and refresh name/phone, or create one.

        Returns:
            (patient, created)
        """
        result = await session.execute(
            select(Patient).where(Patient.email == request.email).limit(1)
        )
        patient = result.scalars().first()

        if patient is not None:
            patient.name = request.name
            patient.phone = request.phone
            await session.flush()
            logger.info(f"Reusing existing patient {patient.id}")
            return patient, False

        patient = Patient(
            name=request.name,
            email=request.email,
            phone=request.phone,
            status=PatientStatus.ACTIVE.value,
            notes=f"Queixa Principal: {main_complaint}",
            therapist_id=therapist_id,
        )
        session.add(patient)
        await session.flush()
        logger.info(f"Created patient {patient.id}")
        return patient, True

    async def create_appointment(
        self,
        session: AsyncSession,
        patient: Patient,
        request: BookingRequest,
        therapist_id: Optional[uuid.UUID],
    ) -> Appointment:
        appointment = Appointment(
            patient_id=patient.id,
            date=request.date,
            time=request.time,
            status=AppointmentStatus.SCHEDULED.value,
            type=AppointmentType.FIRST_SESSION.value,
            notes=request.anamnesis_text,
            therapist_id=therapist_id,
        )
        session.add(appointment)
        await session.flush()
        return appointment

    async def create_therapist_notification(
        self,
        session: AsyncSession,
        therapist_id: Optional[uuid.UUID],
        request: BookingRequest,
    ) -> Optional[Notification]:
        """Dashboard notification for the therapist. Skipped without a therapist."""
        if therapist_id is None:
            return None

        notification = Notification(
            recipient_id=therapist_id,
            recipient_role=RecipientRole.THERAPIST.value,
            title=NOTIFICATION_TITLE,
            message=(
                f"{request.name} agendou uma sessão para "
                f"{request.date_text} às {request.time_text}."
            ),
            type=NotificationType.INFO.value,
        )
        session.add(notification)
        await session.flush()
        return notification

    async def book(self, session: AsyncSession, request: BookingRequest) -> BookingOutcome:
        """Run the booking transaction and commit it.

        Args:
            session: Open session; its transaction is committed or rolled back here
            request: Validated booking request

        Returns:
            BookingOutcome with the ids and the notification details

        Raises:
            BookingTransactionError: If any statement fails (after rollback)
        """
        therapist_id = request.therapist_id
        main_complaint = request.main_complaint

        try:
            therapist = await self.resolve_therapist(session, therapist_id)
            patient, created = await self.upsert_patient(
                session, request, therapist_id, main_complaint
            )
            appointment = await self.create_appointment(
                session, patient, request, therapist_id
            )
            notification = await self.create_therapist_notification(
                session, therapist_id, request
            )
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Transaction Error: {e}")
            raise BookingTransactionError(str(e)) from e

        logger.info(f"Booking committed: appointment {appointment.id} for patient {patient.id}")

        return BookingOutcome(
            patient_id=patient.id,
            appointment_id=appointment.id,
            patient_created=created,
            notification_id=notification.id if notification else None,
            details=BookingDetails(
                name=request.name,
                email=request.email,
                phone=request.phone,
                date=request.date_text,
                time=request.time_text,
                therapist_name=therapist.name,
                therapist_email=therapist.email,
                main_complaint=main_complaint,
            ),
        )


_booking_service: Optional[BookingService] = None


def get_booking_service() -> BookingService:
    """Get the booking service (FastAPI dependency)."""
    global _booking_service
    if _booking_service is None:
        _booking_service = BookingService()
    return _booking_service
