"""Protocol for user directory service observability.

Defines the interface for domain probes that capture application-level
domain events for directory record operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserDirectoryServiceProbe(Protocol):
    """Domain probe for user directory service operations."""

    def user_created(self, uuid: str, role: str, as_admin: bool) -> None:
        """Record that a directory user was created."""
        ...

    def user_creation_failed(self, error: str) -> None:
        """Record that creating a directory user failed."""
        ...

    def user_updated(
        self,
        uuid: str,
        as_admin: bool,
        set_fields: tuple[str, ...],
        removed_fields: tuple[str, ...],
    ) -> None:
        """Record that a directory user was updated."""
        ...

    def user_update_failed(self, uuid: str | None, error: str) -> None:
        """Record that updating a directory user failed."""
        ...

    def user_removed(self, uuid: str) -> None:
        """Record that a directory user was removed."""
        ...

    def external_id_not_found(self, external_id: str) -> None:
        """Record that no user carries an external id."""
        ...

    def duplicate_external_id(self, external_id: str, count: int) -> None:
        """Record that several users share one external id."""
        ...

    def with_context(self, context: ObservationContext) -> UserDirectoryServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserDirectoryServiceProbe:
    """Default implementation of UserDirectoryServiceProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultUserDirectoryServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserDirectoryServiceProbe(logger=self._logger, context=context)

    def user_created(self, uuid: str, role: str, as_admin: bool) -> None:
        """Record that a directory user was created."""
        self._logger.info(
            "directory_user_created",
            uuid=uuid,
            role=role,
            as_admin=as_admin,
            **self._get_context_kwargs(),
        )

    def user_creation_failed(self, error: str) -> None:
        """Record that creating a directory user failed."""
        self._logger.error(
            "directory_user_creation_failed",
            error=error,
            **self._get_context_kwargs(),
        )

    def user_updated(
        self,
        uuid: str,
        as_admin: bool,
        set_fields: tuple[str, ...],
        removed_fields: tuple[str, ...],
    ) -> None:
        """Record that a directory user was updated.

        Only attribute names are logged, never values.
        """
        self._logger.info(
            "directory_user_updated",
            uuid=uuid,
            as_admin=as_admin,
            set_fields=list(set_fields),
            removed_fields=list(removed_fields),
            **self._get_context_kwargs(),
        )

    def user_update_failed(self, uuid: str | None, error: str) -> None:
        """Record that updating a directory user failed."""
        self._logger.error(
            "directory_user_update_failed",
            uuid=uuid,
            error=error,
            **self._get_context_kwargs(),
        )

    def user_removed(self, uuid: str) -> None:
        """Record that a directory user was removed."""
        self._logger.info(
            "directory_user_removed",
            uuid=uuid,
            **self._get_context_kwargs(),
        )

    def external_id_not_found(self, external_id: str) -> None:
        """Record that no user carries an external id."""
        self._logger.debug(
            "directory_external_id_not_found",
            external_id=external_id,
            **self._get_context_kwargs(),
        )

    def duplicate_external_id(self, external_id: str, count: int) -> None:
        """Record that several users share one external id."""
        self._logger.error(
            "directory_duplicate_external_id",
            external_id=external_id,
            count=count,
            **self._get_context_kwargs(),
        )
