"""PostgreSQL implementation of IRecordStore.

Directory items live in a two-column table (uuid key, JSONB item). Update
expressions are applied in a single UPDATE statement: SET attributes are
merged with the JSONB ``||`` operator and REMOVE attributes dropped with
the ``-`` operator, so each call stays atomic per key.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import Text, cast, delete, literal, select, update
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from directory.infrastructure.observability import (
    DefaultRecordStoreProbe,
    RecordStoreProbe,
)
from directory.infrastructure.tables import (
    ITEM_COLUMN,
    KEY_COLUMN,
    build_directory_table,
)
from directory.ports.exceptions import RecordStoreError
from directory.ports.store import IRecordStore, Item
from shared_kernel.update_expression import CompiledUpdate


class PostgresRecordStore(IRecordStore):
    """PostgreSQL-backed key-value store for directory items.

    Every operation runs in its own short transaction. Driver errors are
    wrapped in RecordStoreError.
    """

    def __init__(
        self,
        session: AsyncSession,
        table_name: str,
        probe: RecordStoreProbe | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            session: AsyncSession from FastAPI dependency injection
            table_name: Name of the directory table (from configuration)
            probe: Optional domain probe for observability
        """
        self._session = session
        self._table = build_directory_table(table_name)
        self._probe = probe or DefaultRecordStoreProbe()

    @property
    def table_name(self) -> str:
        return self._table.name

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[None]:
        try:
            async with self._session.begin():
                yield
        except SQLAlchemyError as e:
            self._probe.operation_failed(self.table_name, operation, str(e))
            raise RecordStoreError(f"Record store {operation} failed: {e}") from e

    async def get(self, key: str) -> Item | None:
        """Read the item stored under key."""
        stmt = select(self._table.c[ITEM_COLUMN]).where(self._table.c[KEY_COLUMN] == key)
        async with self._transaction("get"):
            result = await self._session.execute(stmt)
            item = result.scalar_one_or_none()

        self._probe.item_retrieved(self.table_name, key, found=item is not None)
        return dict(item) if item is not None else None

    async def put(self, item: Item) -> None:
        """Insert or replace a full item.

        Raises:
            ValueError: If the item carries no uuid
        """
        key = item.get(KEY_COLUMN)
        if not key:
            raise ValueError("Item has no uuid key")

        stmt = insert(self._table).values({KEY_COLUMN: key, ITEM_COLUMN: item})
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._table.c[KEY_COLUMN]],
            set_={ITEM_COLUMN: stmt.excluded[ITEM_COLUMN]},
        )
        async with self._transaction("put"):
            await self._session.execute(stmt)

        self._probe.item_written(self.table_name, str(key))

    async def update(self, key: str, update_expression: CompiledUpdate) -> None:
        """Apply a compiled update to the item stored under key.

        Updating a missing key changes nothing.
        """
        if update_expression.is_empty:
            return

        item_column = self._table.c[ITEM_COLUMN]
        new_item: Any = item_column
        assignments = update_expression.assignments()
        if assignments:
            new_item = new_item.op("||", return_type=JSONB)(
                cast(literal(assignments, JSONB), JSONB)
            )
        if update_expression.remove_fields:
            new_item = new_item.op("-", return_type=JSONB)(
                cast(literal(list(update_expression.remove_fields), ARRAY(Text)), ARRAY(Text))
            )

        stmt = (
            update(self._table)
            .where(self._table.c[KEY_COLUMN] == key)
            .values({ITEM_COLUMN: new_item})
        )
        async with self._transaction("update"):
            await self._session.execute(stmt)

        self._probe.item_updated(self.table_name, key, update_expression.expression)

    async def delete(self, key: str) -> None:
        """Delete the item stored under key, if any."""
        stmt = delete(self._table).where(self._table.c[KEY_COLUMN] == key)
        async with self._transaction("delete"):
            await self._session.execute(stmt)

        self._probe.item_deleted(self.table_name, key)

    async def scan(
        self,
        filter: Mapping[str, Any],
        projection: Sequence[str],
    ) -> list[Item]:
        """Scan items matching filter, reading only the projected attributes.

        The filter is evaluated with JSONB containment, so values match by
        JSON type as well as value (``1`` does not match ``"1"``).
        """
        item_column = self._table.c[ITEM_COLUMN]
        if projection:
            stmt = select(*(item_column[name].label(name) for name in projection))
        else:
            stmt = select(item_column)
        if filter:
            stmt = stmt.where(item_column.contains(dict(filter)))

        async with self._transaction("scan"):
            result = await self._session.execute(stmt)
            rows = result.all()

        items: list[Item] = []
        for row in rows:
            if projection:
                mapping = row._mapping
                items.append(
                    {name: mapping[name] for name in projection if mapping[name] is not None}
                )
            else:
                items.append(dict(row[0]))

        self._probe.scan_completed(self.table_name, sorted(filter), len(items))
        return items
