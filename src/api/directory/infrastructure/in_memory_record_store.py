"""In-process implementation of IRecordStore.

Keeps items in a dictionary and applies update expressions with
``apply_update_expression``. Used for local development and tests; the
data lives as long as the process.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any

from directory.infrastructure.observability import (
    DefaultRecordStoreProbe,
    RecordStoreProbe,
)
from directory.infrastructure.tables import KEY_COLUMN
from directory.ports.store import IRecordStore, Item
from shared_kernel.update_expression import CompiledUpdate, apply_update_expression


class InMemoryRecordStore(IRecordStore):
    """Dictionary-backed key-value store for directory items.

    Items are copied on the way in and out, so callers never share state
    with the store.
    """

    def __init__(
        self,
        table_name: str = "users",
        items: Mapping[str, Item] | None = None,
        probe: RecordStoreProbe | None = None,
    ) -> None:
        self._table_name = table_name
        self._items: dict[str, Item] = copy.deepcopy(dict(items or {}))
        self._probe = probe or DefaultRecordStoreProbe()

    @property
    def table_name(self) -> str:
        return self._table_name

    def __len__(self) -> int:
        return len(self._items)

    async def get(self, key: str) -> Item | None:
        item = self._items.get(key)
        self._probe.item_retrieved(self._table_name, key, found=item is not None)
        return copy.deepcopy(item) if item is not None else None

    async def put(self, item: Item) -> None:
        key = item.get(KEY_COLUMN)
        if not key:
            raise ValueError("Item has no uuid key")
        self._items[str(key)] = copy.deepcopy(item)
        self._probe.item_written(self._table_name, str(key))

    async def update(self, key: str, update_expression: CompiledUpdate) -> None:
        if update_expression.is_empty or key not in self._items:
            return
        self._items[key] = copy.deepcopy(
            apply_update_expression(self._items[key], update_expression)
        )
        self._probe.item_updated(self._table_name, key, update_expression.expression)

    async def delete(self, key: str) -> None:
        self._items.pop(key, None)
        self._probe.item_deleted(self._table_name, key)

    async def scan(
        self,
        filter: Mapping[str, Any],
        projection: Sequence[str],
    ) -> list[Item]:
        matches: list[Item] = []
        for item in self._items.values():
            if not all(
                name in item and _same_value(item[name], value)
                for name, value in filter.items()
            ):
                continue
            if projection:
                matches.append({name: item[name] for name in projection if name in item})
            else:
                matches.append(copy.deepcopy(item))

        self._probe.scan_completed(self._table_name, sorted(filter), len(matches))
        return matches


def _same_value(stored: Any, wanted: Any) -> bool:
    # Match by type as well as value, like a JSON document store: 1 != "1" and 1 != True
    return type(stored) is type(wanted) and stored == wanted
