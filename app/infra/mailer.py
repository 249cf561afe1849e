"""
SMTP Mail Transport

One sending path for every outbound email. The SMTP connection is opened,
used for a single message and closed again by ``smtp_transport``.
"""

import asyncio
import logging
import smtplib
from contextlib import contextmanager
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import make_msgid, parseaddr
from typing import Iterator, Optional

from app.config import Settings

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465


class MailerNotConfiguredError(Exception):
    """Raised when sending is attempted without SMTP credentials."""
    pass


@contextmanager
def smtp_transport(settings: Settings) -> Iterator[smtplib.SMTP]:
    """
    Open an authenticated SMTP connection and close it on exit.

    Port 465 uses implicit TLS. Other ports start in plain text and upgrade
    with STARTTLS when the server advertises it.

    Raises:
        MailerNotConfiguredError: If host, user or password is missing
    """
    if not settings.smtp_configured:
        raise MailerNotConfiguredError(
            "SMTP credentials not found (check SMTP_HOST, SMTP_USER, SMTP_PASS)"
        )

    if settings.smtp_port == SMTP_SSL_PORT:
        server = smtplib.SMTP_SSL(
            settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout
        )
    else:
        server = smtplib.SMTP(
            settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout
        )

    try:
        server.ehlo()
        if settings.smtp_port != SMTP_SSL_PORT and server.has_extn("starttls"):
            server.starttls()
            server.ehlo()
        server.login(settings.smtp_user, settings.smtp_pass)
        yield server
    finally:
        try:
            server.quit()
        except smtplib.SMTPException as e:
            logger.debug(f"SMTP quit failed: {e}")


class Mailer:
    """Sends HTML email through the configured SMTP server."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def is_configured(self) -> bool:
        return self.settings.smtp_configured

    def build_message(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
        sender: Optional[str] = None,
    ) -> MIMEMultipart:
        """Build a multipart/alternative message (plain text first)."""
        sender = sender or self.settings.mail_from
        _, sender_address = parseaddr(sender)
        domain = sender_address.split("@")[-1] if "@" in sender_address else None

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = sender
        msg["To"] = to
        msg["Message-ID"] = make_msgid(domain=domain)

        if text:
            msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def send_sync(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
        sender: Optional[str] = None,
    ) -> dict:
        """
        Send one email, blocking.

        Returns:
            dict: message_id and accepted recipients

        Raises:
            MailerNotConfiguredError: If SMTP is not configured
            smtplib.SMTPException, OSError: On transport failures
        """
        msg = self.build_message(to, subject, html, text=text, sender=sender)

        # send_message raises SMTPRecipientsRefused when the only recipient is refused
        with smtp_transport(self.settings) as server:
            server.send_message(msg)

        logger.info(f"Email sent: {msg['Message-ID']}")
        return {"message_id": msg["Message-ID"], "recipients": [to]}

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
        sender: Optional[str] = None,
    ) -> dict:
        """Send one email without blocking the event loop."""
        return await asyncio.to_thread(
            self.send_sync, to, subject, html, text, sender
        )
