"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance.
Use docker-compose for testing.
"""

from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from directory.infrastructure.tables import build_directory_table
from infrastructure.database.engines import create_engine
from infrastructure.database.models import new_metadata
from infrastructure.settings import DatabaseSettings

TEST_TABLE_NAME = "users_integration"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        BOTNORREA_DB_HOST, BOTNORREA_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("BOTNORREA_DB_HOST", "localhost"),
        port=int(os.getenv("BOTNORREA_DB_PORT", "5432")),
        database=os.getenv("BOTNORREA_DB_DATABASE", "botnorrea"),
        username=os.getenv("BOTNORREA_DB_USERNAME", "botnorrea"),
        password=SecretStr(
            os.getenv("BOTNORREA_DB_PASSWORD", "botnorrea_dev_password")
        ),
    )


@pytest_asyncio.fixture
async def async_engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine with a freshly created directory table, dropped afterwards."""
    engine = create_engine(integration_db_settings)
    metadata = new_metadata()
    build_directory_table(TEST_TABLE_NAME, metadata)

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session(
    async_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession, None]:
    sessionmaker = async_sessionmaker(async_engine, expire_on_commit=False)
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def directory_table_name() -> str:
    return TEST_TABLE_NAME
