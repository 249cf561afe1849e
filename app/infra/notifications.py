"""
Notification Service

Best-effort delivery of booking notifications:
- confirmation email to the patient
- new-appointment alert email to the therapist
- WhatsApp confirmation to the patient

Each channel is attempted independently. Failures are logged and never
propagate to the caller. Only the patient email outcome is reported back.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from app.config import Settings
from app.core.booking import messages
from app.core.booking.schemas import BookingDetails
from app.infra.mailer import Mailer
from app.infra.whatsapp import WhatsAppClient

logger = logging.getLogger(__name__)


class NotificationStatus(str, Enum):
    """Patient email outcome."""
    PENDING = "pending"
    SENT = "sent"
    SKIPPED_NO_CREDENTIALS = "skipped_no_credentials"
    ERROR = "error"
    # Set by the booking endpoint when the dispatcher itself raised
    FAILED = "failed"


@dataclass
class NotificationResult:
    """Outcome of the patient confirmation email."""

    status: str = NotificationStatus.PENDING.value
    error: Optional[str] = None
    info: Optional[dict] = None

    def to_dict(self) -> dict:
        return asdict(self)


def _mask_email(email: str) -> str:
    local, _, domain = email.partition("@")
    return f"{local[:2]}***@{domain}" if domain else "***"


class NotificationService:
    """Sends booking notifications over email and WhatsApp."""

    def __init__(
        self,
        settings: Settings,
        mailer: Optional[Mailer] = None,
        whatsapp: Optional[WhatsAppClient] = None,
    ):
        """Initialize notification service.

        Args:
            settings: Application settings
            mailer: SMTP mailer (defaults to one built from settings)
            whatsapp: WhatsApp client (defaults to one built from settings)
        """
        self.settings = settings
        self.mailer = mailer or Mailer(settings)
        self.whatsapp = whatsapp or WhatsAppClient(settings)

    async def notify_booking(self, details: BookingDetails) -> NotificationResult:
        """Send all booking notifications.

        Returns:
            NotificationResult describing the patient email only
        """
        logger.info(f"Preparing to send notifications for: {_mask_email(details.email)}")

        result = await self.send_patient_email(details)
        await self.send_therapist_email(details)
        await self.send_whatsapp(details)

        return result

    async def send_patient_email(self, details: BookingDetails) -> NotificationResult:
        """Confirmation email to the patient."""
        result = NotificationResult()

        if not self.mailer.is_configured:
            logger.warning(
                "SMTP credentials not found. Skipping email sending. "
                "(Check SMTP_HOST, SMTP_USER, SMTP_PASS)"
            )
            result.status = NotificationStatus.SKIPPED_NO_CREDENTIALS.value
            return result

        try:
            result.info = await self.mailer.send(
                to=details.email,
                subject=messages.PATIENT_SUBJECT,
                html=messages.patient_confirmation_html(
                    details.name, details.date, details.time, details.therapist_name
                ),
                text=messages.patient_confirmation_text(
                    details.name, details.date, details.time, details.therapist_name
                ),
                sender=self.settings.mail_from,
            )
            result.status = NotificationStatus.SENT.value
        except Exception as e:
            logger.error(f"Error sending email: {e}")
            result.status = NotificationStatus.ERROR.value
            result.error = str(e)

        return result

    async def send_therapist_email(self, details: BookingDetails) -> bool:
        """New-appointment alert to the therapist. Failures are only logged."""
        if not details.therapist_email:
            return False
        if not self.mailer.is_configured:
            logger.debug("SMTP not configured. Skipping therapist email.")
            return False

        alert = dict(
            therapist_name=details.therapist_name,
            patient_name=details.name,
            date=details.date,
            time=details.time,
            phone=details.phone,
            main_complaint=details.main_complaint,
            dashboard_url=self.settings.dashboard_url,
        )

        try:
            await self.mailer.send(
                to=details.therapist_email,
                subject=messages.therapist_alert_subject(details.name),
                html=messages.therapist_alert_html(**alert),
                text=messages.therapist_alert_text(**alert),
                sender=self.settings.therapist_mail_from,
            )
            logger.info("Therapist email sent.")
            return True
        except Exception as e:
            logger.error(f"Error sending therapist email: {e}")
            return False

    async def send_whatsapp(self, details: BookingDetails) -> bool:
        """WhatsApp confirmation to the patient. Failures are only logged."""
        if not self.whatsapp.is_configured:
            logger.info("WHATSAPP_API_URL not configured. Skipping automatic sending.")
            return False
        if not details.phone:
            logger.info("No phone number on booking. Skipping WhatsApp.")
            return False

        text = messages.whatsapp_confirmation(
            details.name, details.date, details.time, details.therapist_name
        )
        try:
            return await self.whatsapp.send_text(details.phone, text)
        except Exception as e:
            logger.error(f"Error sending WhatsApp: {e}")
            return False
