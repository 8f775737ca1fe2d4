"""Protocol for API key issuance observability.

Defines the interface for domain probes that capture the outcomes of the
chat-driven API key issuance workflow.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class APIKeyIssuanceProbe(Protocol):
    """Domain probe for API key issuance operations."""

    def api_key_issued(self, uuid: str, sender_id: str) -> None:
        """Record that an API key was issued to a user."""
        ...

    def issuance_rejected(self, sender_id: str, reason: str) -> None:
        """Record that an issuance request was rejected."""
        ...

    def issuance_failed(self, sender_id: str, error: str) -> None:
        """Record that an issuance request failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> APIKeyIssuanceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAPIKeyIssuanceProbe:
    """Default implementation of APIKeyIssuanceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultAPIKeyIssuanceProbe:
        """Create a new probe with observation context bound."""
        return DefaultAPIKeyIssuanceProbe(logger=self._logger, context=context)

    def api_key_issued(self, uuid: str, sender_id: str) -> None:
        """Record that an API key was issued to a user."""
        self._logger.info(
            "api_key_issued",
            uuid=uuid,
            sender_id=sender_id,
            **self._get_context_kwargs(),
        )

    def issuance_rejected(self, sender_id: str, reason: str) -> None:
        """Record that an issuance request was rejected."""
        self._logger.warning(
            "api_key_issuance_rejected",
            sender_id=sender_id,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def issuance_failed(self, sender_id: str, error: str) -> None:
        """Record that an issuance request failed unexpectedly."""
        self._logger.error(
            "api_key_issuance_failed",
            sender_id=sender_id,
            error=error,
            **self._get_context_kwargs(),
        )
