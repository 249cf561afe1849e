"""Tests for the SMTP mail transport."""

import smtplib
from unittest.mock import patch

import pytest

from app.config import Settings
from app.infra.mailer import Mailer, MailerNotConfiguredError, smtp_transport


@pytest.fixture
def smtp_settings():
    return Settings(
        _env_file=None,
        smtp_host="smtp.test",
        smtp_user="user",
        smtp_pass="secret",
    )


class TestSmtpTransport:
    """Test the scoped SMTP connection."""

    def test_starttls_login_and_quit(self, smtp_settings):
        with patch("app.infra.mailer.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value
            server.has_extn.return_value = True

            with smtp_transport(smtp_settings) as conn:
                assert conn is server

        smtp_cls.assert_called_once_with("smtp.test", 587, timeout=10.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("user", "secret")
        server.quit.assert_called_once()

    def test_no_starttls_when_not_offered(self, smtp_settings):
        with patch("app.infra.mailer.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value
            server.has_extn.return_value = False

            with smtp_transport(smtp_settings):
                pass

        server.starttls.assert_not_called()
        server.login.assert_called_once()

    def test_port_465_uses_implicit_tls(self, smtp_settings):
        smtp_settings.smtp_port = 465

        with patch("app.infra.mailer.smtplib.SMTP_SSL") as ssl_cls, \
                patch("app.infra.mailer.smtplib.SMTP") as smtp_cls:
            with smtp_transport(smtp_settings):
                pass

        ssl_cls.assert_called_once_with("smtp.test", 465, timeout=10.0)
        smtp_cls.assert_not_called()
        ssl_cls.return_value.starttls.assert_not_called()

    def test_quit_runs_when_send_fails(self, smtp_settings):
        with patch("app.infra.mailer.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value

            with pytest.raises(smtplib.SMTPDataError):
                with smtp_transport(smtp_settings):
                    raise smtplib.SMTPDataError(554, b"rejected")

        server.quit.assert_called_once()

    def test_missing_credentials(self):
        settings = Settings(_env_file=None, smtp_host="smtp.test", smtp_user=None, smtp_pass=None)

        with pytest.raises(MailerNotConfiguredError):
            with smtp_transport(settings):
                pass


class TestMailer:
    """Test Mailer."""

    def test_is_configured(self, smtp_settings):
        assert Mailer(smtp_settings).is_configured is True
        assert Mailer(Settings(_env_file=None, smtp_host=None)).is_configured is False

    def test_build_message(self, smtp_settings):
        mailer = Mailer(smtp_settings)

        msg = mailer.build_message(
            to="ana@x.com",
            subject="Confirmação",
            html="<p>Olá</p>",
            text="Olá",
        )

        assert msg["To"] == "ana@x.com"
        assert msg["From"] == smtp_settings.mail_from
        assert msg["Message-ID"].endswith("@trgnexus.com>")
        parts = msg.get_payload()
        assert [p.get_content_type() for p in parts] == ["text/plain", "text/html"]

    def test_build_message_html_only(self, smtp_settings):
        msg = Mailer(smtp_settings).build_message("ana@x.com", "Oi", "<p>Oi</p>")

        assert [p.get_content_type() for p in msg.get_payload()] == ["text/html"]

    @pytest.mark.asyncio
    async def test_send(self, smtp_settings):
        mailer = Mailer(smtp_settings)

        with patch("app.infra.mailer.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value
            info = await mailer.send(
                to="ana@x.com",
                subject="Confirmação",
                html="<p>Olá</p>",
                sender='"TRG Nexus System" <noreply@trgnexus.com>',
            )

        server.send_message.assert_called_once()
        sent = server.send_message.call_args.args[0]
        assert sent["To"] == "ana@x.com"
        assert sent["From"] == '"TRG Nexus System" <noreply@trgnexus.com>'
        assert info["recipients"] == ["ana@x.com"]
        assert info["message_id"] == sent["Message-ID"]
        server.quit.assert_called_once()

    @pytest.mark.asyncio
    async def test_send_propagates_transport_errors(self, smtp_settings):
        mailer = Mailer(smtp_settings)

        with patch("app.infra.mailer.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.login.side_effect = smtplib.SMTPAuthenticationError(
                535, b"bad credentials"
            )
            with pytest.raises(smtplib.SMTPAuthenticationError):
                await mailer.send("ana@x.com", "Oi", "<p>Oi</p>")
