"""
Configuration Management

Uses Pydantic BaseSettings to load configuration from environment variables.
All settings can be overridden via .env file or environment variables.

Environment Variables:
    trgnexus_POSTGRES_URL / POSTGRES_URL / DATABASE_URL: PostgreSQL connection string
    DATABASE_SSL: Connect to PostgreSQL over TLS (default: True)
    SMTP_HOST, SMTP_USER, SMTP_PASS, SMTP_PORT: Outbound mail server
    WHATSAPP_API_URL, WHATSAPP_API_TOKEN: WhatsApp sending API
    WHATSAPP_PROVIDER: Payload schema of the WhatsApp API (zapi/evolution)
    APP_ENV: Environment name (development/staging/production)
    DEBUG: Enable debug mode (default: False)
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "trgnexus_POSTGRES_URL",
            "POSTGRES_URL",
            "DATABASE_URL",
        ),
    )
    """PostgreSQL connection URL.

    Read from trgnexus_POSTGRES_URL first (Vercel integration name), then
    POSTGRES_URL, then DATABASE_URL.

    Plain postgres:// URLs are rewritten to the asyncpg driver, and a
    ?sslmode= query parameter is stripped (see app.infra.database).
    """

    database_ssl: bool = True
    """Open the database connection over TLS without certificate verification.

    Managed Postgres providers terminate TLS with certificates that are not
    in the local trust store, so verification is disabled.
    """

    database_connect_timeout: float = 5.0
    """Seconds to wait for a database connection before giving up."""

    # Outbound Email (SMTP)
    smtp_host: Optional[str] = None
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_port: int = 587
    """SMTP port. 465 uses implicit TLS, anything else upgrades with STARTTLS."""

    smtp_timeout: float = 10.0

    mail_from: str = '"TRG Nexus" <noreply@trgnexus.com>'
    """Sender used for patient confirmations."""

    therapist_mail_from: str = '"TRG Nexus System" <noreply@trgnexus.com>'
    """Sender used for therapist alerts."""

    dashboard_url: str = "https://trg-nexus.vercel.app/dashboard"
    """Link shown in the therapist alert email."""

    # WhatsApp
    whatsapp_api_url: Optional[str] = None
    """Full URL of the provider's send-text endpoint.

    When unset, WhatsApp messages are skipped.
    """

    whatsapp_api_token: Optional[str] = None
    whatsapp_provider: Literal["zapi", "evolution"] = "zapi"
    """Payload schema of the WhatsApp API.

    Options:
    - zapi: {"phone", "message"} with a Client-Token header
    - evolution: {"number", "text"} with an apikey header
    """

    whatsapp_timeout: float = 10.0

    # Application Environment
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # Application Configuration
    app_name: str = "trg-nexus-booking"
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Configuration
    cors_origins: str = "http://localhost:3000,https://trg-nexus.vercel.app"
    """Comma-separated list of allowed CORS origins."""

    # Pydantic configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @property
    def cors_origins_list(self) -> list[str]:
        """Split cors_origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def smtp_configured(self) -> bool:
        """True when host, user and password are all present."""
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)

    @property
    def whatsapp_configured(self) -> bool:
        return bool(self.whatsapp_api_url)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Routes receive settings through ``Depends(get_settings)`` so tests can
    swap them with ``app.dependency_overrides``.

    Returns:
        Settings: Cached settings instance
    """
    return Settings()


# Module-level settings instance for easy imports
settings = get_settings()
