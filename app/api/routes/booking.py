"""
Booking API Endpoint.

Public endpoint behind the booking page. Persists the booking in one
transaction, then sends notifications outside of it. A committed booking is
reported as confirmed even if every notification fails.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.core.booking import (
    BookingRequest,
    BookingResponse,
    BookingService,
    BookingTransactionError,
    NotificationSummary,
    get_booking_service,
)
from app.core.booking.schemas import ErrorResponse
from app.infra.database import (
    DatabaseConfigurationError,
    DatabaseUnavailableError,
    database_session,
    ensure_connection,
)
from app.infra.notifications import NotificationService, NotificationStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/booking", tags=["Booking"])


def get_notification_service(
    settings: Settings = Depends(get_settings),
) -> NotificationService:
    """Notification dispatcher built from the request's settings."""
    return NotificationService(settings)


def _configuration_error(settings: Settings, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "error",
            "message": message,
            "env": {
                "hasUrl": bool(settings.database_url),
                "appEnv": settings.app_env,
            },
        },
    )


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_200_OK,
    summary="Book a first session",
    description="Create or update the patient, schedule the appointment and notify everyone.",
    responses={
        200: {"description": "Booking confirmed"},
        400: {"model": ErrorResponse, "description": "Missing or invalid fields"},
        405: {"model": ErrorResponse, "description": "Method not allowed"},
        500: {"description": "Database or configuration error"},
    },
)
async def create_booking(
    payload: Optional[BookingRequest] = Body(default=None),
    settings: Settings = Depends(get_settings),
    service: BookingService = Depends(get_booking_service),
    notifier: NotificationService = Depends(get_notification_service),
):
    """
    Book a session from the public booking form.

    Flow:
    - Validate required fields (name, email, date, time)
    - Upsert patient, insert appointment and therapist notification, commit
    - Send patient email, therapist email and WhatsApp (best-effort)

    ``emailDebug`` in the response reports the patient email outcome.
    """
    payload = payload or BookingRequest()

    missing = payload.missing_fields()
    if missing:
        logger.warning(f"Missing fields: {missing}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing required fields", "missing": missing},
        )

    if not settings.database_url:
        logger.error("Missing Database URL")
        return _configuration_error(settings, "Missing Database URL")

    try:
        async with database_session(settings) as session:
            await ensure_connection(session)
            outcome = await service.book(session, payload)
    except DatabaseConfigurationError as e:
        logger.error(f"Database configuration error: {e}")
        return _configuration_error(settings, str(e))
    except DatabaseUnavailableError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": str(e)},
        )
    except BookingTransactionError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )

    try:
        result = await notifier.notify_booking(outcome.details)
        email_debug = NotificationSummary(**result.to_dict())
    except Exception as e:
        logger.exception(f"Notification Error: {e}")
        email_debug = NotificationSummary(
            status=NotificationStatus.FAILED.value,
            error=str(e),
        )

    return BookingResponse(
        patient_id=str(outcome.patient_id),
        email_debug=email_debug,
    )
