"""Database session factory bootstrap (SQLAlchemy async).

Environment Variables:
- DATABASE_URL: Connection string. PostgreSQL URLs are rewritten to the
  asyncpg driver; ``sqlite+aiosqlite://`` URLs are used as given.
- SQLALCHEMY_ECHO: Echo SQL statements when 1/true/yes.

Usage:
    from grantflow.bootstrap.database import get_session_factory

    session_factory = get_session_factory()
    async with session_factory() as session:
        ...
"""

from __future__ import annotations

import os

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from structlog import get_logger

from grantflow.infrastructure.adapters.persistence.tables import metadata

logger = get_logger()

_session_factory: async_sessionmaker[AsyncSession] | None = None
_engine: AsyncEngine | None = None


def normalize_database_url(url: str) -> str:
    """Rewrite PostgreSQL URLs to the asyncpg driver.

    Args:
        url: Raw connection string.

    Returns:
        An async-driver URL.
    """
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if "://" not in url:
        return f"postgresql+asyncpg://{url}"
    return url


def get_database_url() -> str:
    """Get the async connection URL from the environment.

    Raises:
        ValueError: If DATABASE_URL is not set.
    """
    url = os.environ.get("DATABASE_URL")
    if not url:
        raise ValueError(
            "DATABASE_URL environment variable not set. "
            "Required when GRANTFLOW_PERSISTENCE=database."
        )
    return normalize_database_url(url)


def mask_database_url(url: str) -> str:
    """Hide the password part of a URL for logging."""
    if "@" not in url:
        return url
    before_at, after_at = url.rsplit("@", 1)
    scheme, sep, credentials = before_at.partition("://")
    if ":" not in credentials:
        return url
    user = credentials.split(":", 1)[0]
    return f"{scheme}{sep}{user}:***@{after_at}"


def get_session_factory(url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Get the singleton async session factory.

    Args:
        url: Connection URL; DATABASE_URL when omitted.

    Returns:
        async_sessionmaker producing AsyncSession instances.

    Raises:
        ValueError: If no URL is configured.
    """
    global _session_factory, _engine

    if _session_factory is None:
        log = logger.bind(component="database_bootstrap")
        resolved = normalize_database_url(url) if url else get_database_url()
        log.info("creating_database_engine", url=mask_database_url(resolved))

        _engine = create_async_engine(
            resolved,
            echo=os.environ.get("SQLALCHEMY_ECHO", "").lower() in ("1", "true", "yes"),
            pool_pre_ping=True,
        )
        _session_factory = async_sessionmaker(
            bind=_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        log.info("database_session_factory_created")

    return _session_factory


async def create_schema() -> None:
    """Create missing tables on the configured engine."""
    if _engine is None:
        get_session_factory()
    assert _engine is not None
    async with _engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("database_schema_ensured", component="database_bootstrap")


def reset_database_bootstrap() -> None:
    """Reset database singletons for testing."""
    global _session_factory, _engine
    _session_factory = None
    _engine = None


async def close_database_engine() -> None:
    """Dispose the engine (graceful shutdown)."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
