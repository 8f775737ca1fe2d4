"""Async SQLAlchemy engine for the directory store (asyncpg driver)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "build_async_url",
    "create_engine",
    "pool_bounds",
]

# Connections idle longer than this are replaced before reuse
POOL_RECYCLE_SECONDS = 1800


def pool_bounds(settings: DatabaseSettings) -> tuple[int, int]:
    """Translate min/max connection settings into (pool_size, max_overflow).

    The pool keeps ``pool_min_connections`` open and may grow up to
    ``pool_max_connections`` under load.
    """
    pool_size = settings.pool_min_connections
    return pool_size, settings.pool_max_connections - pool_size


def create_engine(settings: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    """Create the async engine used by the record store.

    Args:
        settings: Database connection settings
        echo: Log emitted SQL (debug only)
    """
    pool_size, max_overflow = pool_bounds(settings)

    return create_async_engine(
        build_async_url(settings),
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=POOL_RECYCLE_SECONDS,
        echo=echo,
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Render the asyncpg URL with percent-encoded credentials."""
    return URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    ).render_as_string(hide_password=False)
