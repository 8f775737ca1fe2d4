"""Domain probe for record store operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the key-value record store adapters.
Item values are never logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RecordStoreProbe(Protocol):
    """Domain probe for record store operations."""

    def item_retrieved(self, table: str, key: str, found: bool) -> None:
        """Record that an item was read."""
        ...

    def item_written(self, table: str, key: str) -> None:
        """Record that a full item was written."""
        ...

    def item_updated(self, table: str, key: str, expression: str) -> None:
        """Record that an update expression was applied."""
        ...

    def item_deleted(self, table: str, key: str) -> None:
        """Record that an item was deleted."""
        ...

    def scan_completed(self, table: str, filter_attributes: list[str], count: int) -> None:
        """Record that a filtered scan finished."""
        ...

    def operation_failed(self, table: str, operation: str, error: str) -> None:
        """Record that a store operation failed."""
        ...

    def with_context(self, context: ObservationContext) -> RecordStoreProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRecordStoreProbe:
    """Default implementation of RecordStoreProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultRecordStoreProbe:
        """Create a new probe with observation context bound."""
        return DefaultRecordStoreProbe(logger=self._logger, context=context)

    def item_retrieved(self, table: str, key: str, found: bool) -> None:
        self._logger.debug(
            "record_store_item_retrieved",
            table=table,
            key=key,
            found=found,
            **self._get_context_kwargs(),
        )

    def item_written(self, table: str, key: str) -> None:
        self._logger.debug(
            "record_store_item_written",
            table=table,
            key=key,
            **self._get_context_kwargs(),
        )

    def item_updated(self, table: str, key: str, expression: str) -> None:
        # The expression only carries placeholders, never values
        self._logger.debug(
            "record_store_item_updated",
            table=table,
            key=key,
            expression=expression,
            **self._get_context_kwargs(),
        )

    def item_deleted(self, table: str, key: str) -> None:
        self._logger.debug(
            "record_store_item_deleted",
            table=table,
            key=key,
            **self._get_context_kwargs(),
        )

    def scan_completed(self, table: str, filter_attributes: list[str], count: int) -> None:
        self._logger.debug(
            "record_store_scan_completed",
            table=table,
            filter_attributes=filter_attributes,
            count=count,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, table: str, operation: str, error: str) -> None:
        self._logger.error(
            "record_store_operation_failed",
            table=table,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
