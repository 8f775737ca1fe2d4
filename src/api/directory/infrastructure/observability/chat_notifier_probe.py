"""Domain probe for outbound chat notices."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ChatNotifierProbe(Protocol):
    """Domain probe for chat notifier operations."""

    def notice_sent(self, chat_id: str, protected: bool) -> None:
        """Record that a notice was delivered."""
        ...

    def notice_delivery_failed(self, chat_id: str, error: str) -> None:
        """Record that a notice could not be delivered."""
        ...

    def with_context(self, context: ObservationContext) -> ChatNotifierProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultChatNotifierProbe:
    """Default implementation of ChatNotifierProbe using structlog.

    Notice text is never logged since it may carry a secret.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultChatNotifierProbe:
        """Create a new probe with observation context bound."""
        return DefaultChatNotifierProbe(logger=self._logger, context=context)

    def notice_sent(self, chat_id: str, protected: bool) -> None:
        self._logger.info(
            "chat_notice_sent",
            chat_id=chat_id,
            protected=protected,
            **self._get_context_kwargs(),
        )

    def notice_delivery_failed(self, chat_id: str, error: str) -> None:
        self._logger.error(
            "chat_notice_delivery_failed",
            chat_id=chat_id,
            error=error,
            **self._get_context_kwargs(),
        )
