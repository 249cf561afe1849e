"""Shared fixtures: settings bound to a temporary SQLite database."""

import pytest
from sqlalchemy import create_engine

from app.config import Settings
from app.models.database import Base

# Environment variables that would leak real credentials into tests
_ENV_VARS = (
    "trgnexus_POSTGRES_URL",
    "POSTGRES_URL",
    "DATABASE_URL",
    "SMTP_HOST",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_PORT",
    "WHATSAPP_API_URL",
    "WHATSAPP_API_TOKEN",
    "WHATSAPP_PROVIDER",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove database, SMTP and WhatsApp variables from the environment."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "booking.db"


@pytest.fixture
def sync_engine(db_path):
    """Synchronous engine on the test database, with all tables created."""
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def settings(clean_env, sync_engine, db_path):
    """Settings pointing at the test database, with no SMTP or WhatsApp."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        app_env="development",
    )
