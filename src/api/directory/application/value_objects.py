"""Application-level value objects for the user directory context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from directory.domain.value_objects import ExternalId
from directory.ports.notifier import ChatNotice


class ChatType(StrEnum):
    """Kind of chat an inbound command was sent from."""

    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"
    CHANNEL = "channel"


@dataclass(frozen=True)
class ChatCommand:
    """An inbound chat command addressed to the bot.

    chat_type is kept as the raw string so unknown kinds are still
    treated as non-private.
    """

    sender_id: ExternalId
    chat_id: int | str
    chat_type: str
    message_id: int | str

    @property
    def is_private(self) -> bool:
        return self.chat_type == ChatType.PRIVATE


class IssuanceStatus(StrEnum):
    """Outcome of an API key issuance request."""

    OK = "ok"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class IssuanceResult:
    """Result of the issuance workflow.

    notice is the chat notice that was sent, if any.
    """

    status: IssuanceStatus
    notice: ChatNotice | None = None
