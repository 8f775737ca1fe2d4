"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from directory.presentation import router as directory_router
from infrastructure.database.dependencies import (
    close_database_connections,
    session_scope,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultConnectionProbe, DefaultStartupProbe
from infrastructure.settings import get_directory_settings, get_settings
from infrastructure.version import __version__


@asynccontextmanager
async def botnorrea_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - structlog configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)

    probe = DefaultStartupProbe()
    probe.application_started(
        app_name=settings.app_name,
        store_backend=get_directory_settings().store_backend,
    )

    yield

    await close_database_connections()
    probe.application_stopped(app_name=settings.app_name)


app = FastAPI(
    title="Botnorrea API",
    description="User directory and API key issuance for the Botnorrea Telegram bot",
    version=__version__,
    lifespan=botnorrea_lifespan,
)

# Include User Directory bounded context routes
app.include_router(directory_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db() -> dict:
    """Check database connection health.

    Reports the configured backend; the in-memory backend has nothing to
    connect to and is always healthy.
    """
    directory_settings = get_directory_settings()
    if directory_settings.store_backend == "memory":
        return {"status": "ok", "backend": "memory"}

    try:
        async with session_scope() as session:
            await session.execute(text("SELECT 1"))

        return {
            "status": "ok",
            "backend": "postgres",
            "table_name": directory_settings.table_name,
        }
    except Exception as e:
        DefaultConnectionProbe().health_check_failed(error=e)
        return {
            "status": "error",
            "backend": "postgres",
            "error": str(e),
        }
