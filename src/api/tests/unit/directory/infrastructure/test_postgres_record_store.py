"""Unit tests for PostgresRecordStore.

The session is mocked; statements are checked by compiling them with the
PostgreSQL dialect. See tests/integration for tests against a database.
"""

from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError

from directory.infrastructure.observability import RecordStoreProbe
from directory.infrastructure.postgres_record_store import PostgresRecordStore
from directory.ports.exceptions import RecordStoreError
from shared_kernel.update_expression import compile_update_expression


@pytest.fixture
def mock_session():
    """Create mock AsyncSession whose begin() works as an async context manager."""
    session = MagicMock()
    session.begin.return_value.__aexit__.return_value = False
    session.execute = AsyncMock()
    return session


@pytest.fixture
def mock_probe():
    return create_autospec(RecordStoreProbe, instance=True)


@pytest.fixture
def store(mock_session, mock_probe):
    return PostgresRecordStore(
        session=mock_session, table_name="directory_users", probe=mock_probe
    )


def executed_sql(session) -> str:
    statement = session.execute.call_args.args[0]
    return str(statement.compile(dialect=postgresql.dialect()))


class TestPostgresRecordStore:
    def test_uses_configured_table_name(self, store):
        assert store.table_name == "directory_users"

    @pytest.mark.asyncio
    async def test_get_selects_item_by_key(self, store, mock_session, mock_probe):
        result = MagicMock()
        result.scalar_one_or_none.return_value = {"uuid": "a", "id": 1}
        mock_session.execute.return_value = result

        item = await store.get("a")

        assert item == {"uuid": "a", "id": 1}
        sql = executed_sql(mock_session)
        assert "FROM directory_users" in sql
        assert "directory_users.uuid = " in sql
        mock_probe.item_retrieved.assert_called_once_with(
            "directory_users", "a", found=True
        )

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, store, mock_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_session.execute.return_value = result

        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_put_upserts(self, store, mock_session):
        await store.put({"uuid": "a", "id": 1})

        sql = executed_sql(mock_session)
        assert "INSERT INTO directory_users" in sql
        assert "ON CONFLICT (uuid) DO UPDATE" in sql

    @pytest.mark.asyncio
    async def test_put_requires_uuid(self, store, mock_session):
        with pytest.raises(ValueError):
            await store.put({"id": 1})

        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_merges_and_removes_keys(self, store, mock_session, mock_probe):
        update = compile_update_expression({"username": "alice", "apiKey": ""})

        await store.update("a", update)

        sql = executed_sql(mock_session)
        assert sql.startswith("UPDATE directory_users SET item=")
        assert "||" in sql
        assert "AS JSONB" in sql
        assert "AS TEXT[]" in sql
        mock_probe.item_updated.assert_called_once_with(
            "directory_users", "a", "SET #username = :username REMOVE #apiKey"
        )

    @pytest.mark.asyncio
    async def test_update_with_only_set_fields_has_no_removal(self, store, mock_session):
        await store.update("a", compile_update_expression({"username": "alice"}))

        sql = executed_sql(mock_session)
        assert "||" in sql
        assert "TEXT[]" not in sql

    @pytest.mark.asyncio
    async def test_empty_update_is_skipped(self, store, mock_session):
        await store.update("a", compile_update_expression({}))

        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete(self, store, mock_session, mock_probe):
        await store.delete("a")

        assert executed_sql(mock_session).startswith("DELETE FROM directory_users")
        mock_probe.item_deleted.assert_called_once_with("directory_users", "a")

    @pytest.mark.asyncio
    async def test_scan_uses_containment_and_projection(
        self, store, mock_session, mock_probe
    ):
        row = MagicMock()
        row._mapping = {"uuid": "a", "id": None}
        result = MagicMock()
        result.all.return_value = [row]
        mock_session.execute.return_value = result

        items = await store.scan(filter={"id": 42}, projection=("uuid", "id"))

        assert items == [{"uuid": "a"}]
        sql = executed_sql(mock_session)
        assert "@>" in sql
        assert "AS uuid" in sql
        assert "AS id" in sql
        mock_probe.scan_completed.assert_called_once_with("directory_users", ["id"], 1)

    @pytest.mark.asyncio
    async def test_driver_errors_become_record_store_errors(
        self, store, mock_session, mock_probe
    ):
        mock_session.execute.side_effect = SQLAlchemyError("connection reset")

        with pytest.raises(RecordStoreError) as exc_info:
            await store.get("a")

        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)
        mock_probe.operation_failed.assert_called_once()
        assert mock_probe.operation_failed.call_args.args[:2] == (
            "directory_users",
            "get",
        )
