"""Domain probes for infrastructure observability.

Infrastructure events (engine lifecycle, health checks, application
startup) are recorded through probes so that the code emitting them never
touches the logger directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for the database engine backing the directory store."""

    def engine_created(
        self, database: str, pool_size: int, max_overflow: int
    ) -> None: ...

    def engine_disposed(self) -> None: ...

    def health_check_failed(self, error: Exception) -> None: ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe: ...


class StartupProbe(Protocol):
    """Domain probe for application lifecycle events."""

    def application_started(self, app_name: str, store_backend: str) -> None: ...

    def application_stopped(self, app_name: str) -> None: ...

    def with_context(self, context: ObservationContext) -> StartupProbe: ...


class _StructlogProbe:
    """Shared structlog plumbing for the infrastructure probes."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext):
        """Create a new probe of the same type with observation context bound."""
        return type(self)(logger=self._logger, context=context)


class DefaultConnectionProbe(_StructlogProbe):
    """structlog implementation of ConnectionProbe."""

    def engine_created(self, database: str, pool_size: int, max_overflow: int) -> None:
        self._logger.info(
            "database_engine_created",
            database=database,
            pool_size=pool_size,
            max_overflow=max_overflow,
            **self._get_context_kwargs(),
        )

    def engine_disposed(self) -> None:
        self._logger.info("database_engine_disposed", **self._get_context_kwargs())

    def health_check_failed(self, error: Exception) -> None:
        self._logger.error(
            "database_health_check_failed",
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )


class DefaultStartupProbe(_StructlogProbe):
    """structlog implementation of StartupProbe."""

    def application_started(self, app_name: str, store_backend: str) -> None:
        self._logger.info(
            "application_started",
            app_name=app_name,
            store_backend=store_backend,
            **self._get_context_kwargs(),
        )

    def application_stopped(self, app_name: str) -> None:
        self._logger.info(
            "application_stopped",
            app_name=app_name,
            **self._get_context_kwargs(),
        )
