"""Unit test fixtures with mocked dependencies."""

from unittest.mock import create_autospec

import pytest


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def record_store():
    """Provide an empty in-memory record store."""
    from directory.infrastructure.in_memory_record_store import InMemoryRecordStore

    return InMemoryRecordStore(table_name="users")


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed epoch-millisecond timestamp, advanced by tests."""

    class FixedClock:
        def __init__(self) -> None:
            self.now = 1_700_000_000_000

        def __call__(self) -> int:
            return self.now

        def advance(self, millis: int) -> None:
            self.now += millis

    return FixedClock()


@pytest.fixture
def mock_directory_probe():
    """Create mock user directory service probe."""
    from directory.application.observability import UserDirectoryServiceProbe

    return create_autospec(UserDirectoryServiceProbe, instance=True)


@pytest.fixture
def user_directory_service(record_store, mock_directory_probe, fixed_clock):
    """Create UserDirectoryService over the in-memory store."""
    from directory.application.services import UserDirectoryService

    return UserDirectoryService(
        store=record_store,
        probe=mock_directory_probe,
        clock=fixed_clock,
    )
