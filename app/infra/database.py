"""
Database Connection and Session Management

Provides the async SQLAlchemy 2.0 engine and session scope used by the
booking endpoint.

The engine is created per request and disposed when the request ends, so no
connection outlives the invocation that opened it.
"""

import asyncio
import logging
import ssl
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from app.config import Settings
from app.models.database import Base

logger = logging.getLogger(__name__)

# Drivers that are rewritten to the async PostgreSQL driver
_SYNC_POSTGRES_DRIVERS = {"postgres", "postgresql", "postgresql+psycopg2"}

# sslmode values that mean "do not use TLS"
_SSL_DISABLED_MODES = {"disable", "allow"}

# libpq-only parameters that asyncpg.connect does not accept as keywords
_LIBPQ_ONLY_PARAMS = (
    "channel_binding",
    "gssencmode",
    "sslcompression",
    "sslcrl",
    "sslrootcert",
    "sslcert",
    "sslkey",
)


class DatabaseConfigurationError(Exception):
    """Raised when no database URL is configured."""
    pass


class DatabaseUnavailableError(Exception):
    """Raised when a connection to the database cannot be established."""
    pass


@dataclass
class DatabaseTarget:
    """Normalized connection URL plus the TLS decision for asyncpg."""

    url: URL
    use_ssl: bool

    @property
    def is_postgres(self) -> bool:
        return self.url.get_backend_name() == "postgresql"


def normalize_database_url(raw_url: str, ssl_enabled: bool = True) -> DatabaseTarget:
    """
    Normalize a connection string for the async driver.

    - postgres:// and postgresql:// are rewritten to postgresql+asyncpg://
    - the sslmode query parameter is removed, since asyncpg rejects it in the
      URL; sslmode=disable turns TLS off, any other value leaves it on
    - other libpq-only parameters (channel_binding and friends) are dropped

    Args:
        raw_url: Connection string from the environment
        ssl_enabled: Default TLS decision when the URL has no sslmode

    Returns:
        DatabaseTarget: URL ready for create_async_engine and the TLS flag
    """
    url = make_url(raw_url)

    if url.drivername in _SYNC_POSTGRES_DRIVERS:
        url = url.set(drivername="postgresql+asyncpg")

    use_ssl = ssl_enabled
    sslmode = url.query.get("sslmode")
    if sslmode is not None:
        if isinstance(sslmode, tuple):
            sslmode = sslmode[-1]
        use_ssl = sslmode not in _SSL_DISABLED_MODES
        url = url.difference_update_query(["sslmode"])

    if url.get_backend_name() == "postgresql":
        dropped = [name for name in _LIBPQ_ONLY_PARAMS if name in url.query]
        if dropped:
            logger.debug(f"Ignoring libpq-only URL parameters: {dropped}")
            url = url.difference_update_query(dropped)

    return DatabaseTarget(url=url, use_ssl=use_ssl)


def _unverified_ssl_context() -> ssl.SSLContext:
    """TLS without certificate verification (managed Postgres providers)."""
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def create_engine_for(settings: Settings) -> AsyncEngine:
    """
    Create an engine for one request.

    Uses NullPool so disposing the engine closes every connection.

    Raises:
        DatabaseConfigurationError: If the database URL is missing or malformed
    """
    if not settings.database_url:
        raise DatabaseConfigurationError("Missing Database URL")

    try:
        target = normalize_database_url(settings.database_url, settings.database_ssl)
    except ArgumentError as e:
        raise DatabaseConfigurationError(f"Invalid Database URL: {e}") from e

    connect_args: dict = {"timeout": settings.database_connect_timeout}
    if target.is_postgres and target.use_ssl:
        connect_args["ssl"] = _unverified_ssl_context()

    return create_async_engine(
        target.url,
        echo=settings.debug,
        poolclass=NullPool,
        connect_args=connect_args,
    )


@asynccontextmanager
async def database_session(
    settings: Settings,
    engine: Optional[AsyncEngine] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Scoped database session.

    Opens an engine (unless one is given), yields a session, and on exit
    closes the session and disposes the engine it created. Transaction
    control is left to the caller.

    Usage:
        async with database_session(settings) as session:
            result = await session.execute(select(Patient))

    Yields:
        AsyncSession: Database session
    """
    owns_engine = engine is None
    if engine is None:
        engine = create_engine_for(settings)

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    session = session_factory()
    try:
        yield session
    finally:
        await session.close()
        if owns_engine:
            await engine.dispose()
            logger.debug("Database engine disposed")


async def ensure_connection(session: AsyncSession) -> None:
    """
    Acquire the session's connection up front.

    Separates "database unreachable" from failures of individual statements.

    Raises:
        DatabaseUnavailableError: If the connection cannot be opened
    """
    try:
        await session.connection()
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
        logger.error(f"Database connection failed: {e}")
        raise DatabaseUnavailableError(str(e)) from e
    logger.debug("Connected to database")


async def init_db(settings: Settings) -> None:
    """
    Create all database tables.

    WARNING: This is for development only. The production schema is managed
    by the dashboard application.
    """
    engine = create_engine_for(settings)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


async def check_db_health(settings: Settings) -> bool:
    """
    Check database connectivity for health checks.

    Returns:
        bool: True if database is accessible, False otherwise
    """
    try:
        async with database_session(settings) as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False
