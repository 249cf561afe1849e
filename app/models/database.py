"""
Database Models

SQLAlchemy ORM models for the TRG Nexus booking tables.
"""

import datetime as dt
import uuid
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    Date, DateTime, ForeignKey, Index, String, Text, Time, Uuid, text
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamp columns."""

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=func.now(),
        nullable=False
    )


class PatientStatus(str, Enum):
    """Patient status values as stored by the dashboard."""
    ACTIVE = "Ativo"


class AppointmentStatus(str, Enum):
    """Appointment status values as stored by the dashboard."""
    SCHEDULED = "Agendado"


class AppointmentType(str, Enum):
    """Appointment type values."""
    FIRST_SESSION = "Primeira Consulta"


class RecipientRole(str, Enum):
    """Who a notification is addressed to."""
    THERAPIST = "therapist"


class NotificationType(str, Enum):
    """Notification severity shown in the dashboard."""
    INFO = "info"


class Therapist(Base, TimestampMixin):
    """
    Therapist model.

    Therapists own patients and appointments. The booking form refers to
    them by id.
    """

    __tablename__ = "therapists"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Relationships
    patients: Mapped[List["Patient"]] = relationship(
        "Patient",
        back_populates="therapist"
    )
    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment",
        back_populates="therapist"
    )

    def __repr__(self) -> str:
        return f"<Therapist(id={self.id}, name='{self.name}')>"


class Patient(Base, TimestampMixin):
    """
    Patient model.

    The email address is the natural key used when a booking arrives for a
    patient that already exists.
    """

    __tablename__ = "patients"
    __table_args__ = (
        Index("idx_patient_email", "email"),
        Index("idx_patient_therapist", "therapist_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(
        String(50),
        default=PatientStatus.ACTIVE.value
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    therapist_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("therapists.id", ondelete="SET NULL"),
        nullable=True
    )

    # Relationships
    therapist: Mapped[Optional["Therapist"]] = relationship(
        "Therapist",
        back_populates="patients"
    )
    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment",
        back_populates="patient"
    )

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, name='{self.name}', email='{self.email}')>"


class Appointment(Base, TimestampMixin):
    """
    Appointment model.

    ``notes`` holds the anamnesis form serialized as JSON text.
    """

    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointment_patient", "patient_id"),
        Index("idx_appointment_therapist_date", "therapist_id", "date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        default=AppointmentStatus.SCHEDULED.value
    )
    type: Mapped[str] = mapped_column(
        String(100),
        default=AppointmentType.FIRST_SESSION.value
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    therapist_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("therapists.id", ondelete="SET NULL"),
        nullable=True
    )

    # Relationships
    patient: Mapped["Patient"] = relationship("Patient", back_populates="appointments")
    therapist: Mapped[Optional["Therapist"]] = relationship(
        "Therapist",
        back_populates="appointments"
    )

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, patient_id={self.patient_id}, "
            f"date={self.date}, time={self.time}, status='{self.status}')>"
        )


class Notification(Base):
    """
    Notification model.

    In-app notifications shown on the recipient's dashboard.
    """

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notification_recipient", "recipient_id", "recipient_role"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    recipient_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    recipient_role: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(
        String(50),
        default=NotificationType.INFO.value
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime,
        server_default=text("CURRENT_TIMESTAMP"),
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<Notification(id={self.id}, recipient_id={self.recipient_id}, "
            f"role='{self.recipient_role}', title='{self.title}')>"
        )
