"""
Booking Module

Validates booking form submissions and persists them as one transaction.

Usage:
    from app.core.booking import BookingRequest, get_booking_service

    async with database_session(settings) as session:
        outcome = await get_booking_service().book(session, request)
    print(outcome.patient_id)
"""

from app.core.booking.schemas import (
    BookingDetails,
    BookingRequest,
    BookingResponse,
    NotificationSummary,
)

from app.core.booking.service import (
    BookingOutcome,
    BookingService,
    BookingTransactionError,
    TherapistContact,
    get_booking_service,
)

__all__ = [
    # Schemas
    "BookingDetails",
    "BookingRequest",
    "BookingResponse",
    "NotificationSummary",
    # Service
    "BookingOutcome",
    "BookingService",
    "BookingTransactionError",
    "TherapistContact",
    "get_booking_service",
]
