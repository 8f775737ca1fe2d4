"""Record store protocol (port) for the user directory.

The directory persists flat items in a key-value store offering single-key
get/put/update/delete plus a filtered scan. Single-key operations are
atomic; nothing else is guaranteed (no uniqueness constraints on non-key
attributes, no conditional writes).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from shared_kernel.update_expression import CompiledUpdate

Item = dict[str, Any]


@runtime_checkable
class IRecordStore(Protocol):
    """Key-value store holding directory items keyed by uuid.

    Implementations raise RecordStoreError when the backing store cannot
    be reached or rejects a request. Callers do not retry.
    """

    async def get(self, key: str) -> Item | None:
        """Read the item stored under key.

        Returns:
            The full item, or None if no item exists for key
        """
        ...

    async def put(self, item: Item) -> None:
        """Write a full item, replacing any item with the same key."""
        ...

    async def update(self, key: str, update: CompiledUpdate) -> None:
        """Apply a compiled update expression to the item stored under key.

        An update without clauses is a no-op.
        """
        ...

    async def delete(self, key: str) -> None:
        """Delete the item stored under key. Deleting a missing key is not an error."""
        ...

    async def scan(
        self,
        filter: Mapping[str, Any],
        projection: Sequence[str],
    ) -> list[Item]:
        """Scan all items whose attributes equal every value in filter.

        Args:
            filter: Attribute name -> required value (all must match)
            projection: Attributes to return; items come back without the
                attributes they do not carry

        Returns:
            Projected items in store order
        """
        ...
