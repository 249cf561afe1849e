"""
HTTP client for the WhatsApp sending API.

Messages go through a hosted WhatsApp gateway. The payload keys differ per
provider, so the schema is selected with WHATSAPP_PROVIDER:
- zapi: POST {"phone", "message"} with a Client-Token header
- evolution: POST {"number", "text"} with an apikey header
"""

import logging
import re
from typing import Optional

import httpx

from app.config import Settings

logger = logging.getLogger(__name__)

BRAZIL_COUNTRY_CODE = "55"

# Longest national number (DDD + 9-digit mobile)
MAX_LOCAL_DIGITS = 11

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: str) -> str:
    """Digits only, with the Brazilian country code added to local numbers.

    Example:
        >>> normalize_phone("(11) 98765-4321")
        '5511987654321'
        >>> normalize_phone("+1 415 555 0100 22")
        '1415555010022'
    """
    digits = _NON_DIGITS.sub("", phone or "")
    if len(digits) <= MAX_LOCAL_DIGITS:
        digits = BRAZIL_COUNTRY_CODE + digits
    return digits


class WhatsAppClient:
    """Sends text messages through the configured WhatsApp API."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize client.

        Args:
            settings: Application settings (URL, token, provider)
            transport: Optional httpx transport, used by tests
        """
        self.settings = settings
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return self.settings.whatsapp_configured

    def build_payload(self, phone: str, message: str) -> dict:
        if self.settings.whatsapp_provider == "evolution":
            return {"number": phone, "text": message}
        return {"phone": phone, "message": message}

    def build_headers(self) -> dict:
        token = self.settings.whatsapp_api_token or ""
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
            if self.settings.whatsapp_provider == "evolution":
                headers["apikey"] = token
            else:
                headers["Client-Token"] = token
        return headers

    async def send_text(self, phone: str, message: str) -> bool:
        """Send a text message.

        Args:
            phone: Recipient phone in any format
            message: Message body

        Returns:
            True if the API accepted the message, False otherwise
        """
        if not self.is_configured:
            logger.info("WHATSAPP_API_URL not configured. Skipping automatic sending.")
            return False

        number = normalize_phone(phone)
        logger.info(f"Sending WhatsApp message to ***{number[-4:]}")

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.whatsapp_timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    self.settings.whatsapp_api_url,
                    json=self.build_payload(number, message),
                    headers=self.build_headers(),
                )
        except httpx.HTTPError as e:
            logger.error(f"Error sending WhatsApp: {e}")
            return False

        if response.is_success:
            logger.info("WhatsApp message sent successfully")
            return True

        logger.error(
            f"Failed to send WhatsApp: {response.status_code} {response.text[:200]}"
        )
        return False
