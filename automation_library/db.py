"""
Database configuration with SQLAlchemy 2.0 async support.
"""

import asyncio
import logging
import ssl
from urllib.parse import urlparse

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from automation_library.settings import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def _get_connect_args(db_url: str) -> dict:
    """Get connection arguments, including SSL for hosted databases."""
    connect_args = {}

    if not db_url.startswith("postgresql"):
        return connect_args

    # Skip SSL for local development (localhost, 127.0.0.1, or Docker service names)
    local_hosts = ["localhost", "127.0.0.1", "@db:", "@db/", "@postgres:", "@postgres/"]
    is_local = any(host in db_url for host in local_hosts)

    if not is_local:
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE  # Hosted Postgres often uses self-signed certs
        connect_args["ssl"] = ssl_context
        logger.info("SSL enabled for database connection")

    return connect_args


def create_engine(db_url: str, settings: Settings | None = None) -> AsyncEngine:
    """Create an async engine for the given URL.

    SQLite (used by the test suite) does not take pool sizing arguments.
    """
    echo = settings.debug if settings else False
    if db_url.startswith("sqlite"):
        return create_async_engine(db_url, echo=echo)

    return create_async_engine(
        db_url,
        pool_size=settings.database_pool_size if settings else 5,
        max_overflow=settings.database_max_overflow if settings else 10,
        echo=echo,
        connect_args=_get_connect_args(db_url),
        pool_pre_ping=True,  # Verify connections before using
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to ``engine``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _masked_url(db_url: str) -> str:
    parsed = urlparse(db_url)
    if not parsed.hostname:
        return f"{parsed.scheme}://{parsed.path}"
    return f"{parsed.scheme}://{parsed.username}:***@{parsed.hostname}:{parsed.port}{parsed.path}"


async def init_db(engine: AsyncEngine, max_retries: int = 5, retry_delay: float = 2) -> None:
    """Initialize database (create tables if needed) with retry logic."""
    # Import models so they're registered on Base.metadata
    from automation_library.models import automation  # noqa: F401

    logger.info(f"Connecting to database: {_masked_url(str(engine.url))}")

    for attempt in range(max_retries):
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables initialized")
            return
        except (OSError, OperationalError) as e:
            if attempt < max_retries - 1:
                logger.warning(f"Database connection attempt {attempt + 1}/{max_retries} failed: {e}")
                await asyncio.sleep(retry_delay)
            else:
                logger.error(f"Database connection failed after {max_retries} attempts")
                raise


async def close_db(engine: AsyncEngine) -> None:
    """Close database connections."""
    await engine.dispose()
