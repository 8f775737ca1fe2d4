"""Outbound chat notification port."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol, runtime_checkable


class ParseMode(StrEnum):
    """Rich formatting modes understood by the chat transport."""

    HTML = "HTML"
    MARKDOWN_V2 = "MarkdownV2"


@dataclass(frozen=True)
class ChatNotice:
    """A message sent back to a chat.

    protect_content asks the transport to block forwarding and saving of
    the message.
    """

    chat_id: int | str
    text: str
    reply_to_message_id: int | str | None = None
    protect_content: bool | None = None
    parse_mode: ParseMode | None = None


@runtime_checkable
class IChatNotifier(Protocol):
    """Sends notices to chats.

    Implementations raise ChatDeliveryError when the notice cannot be sent.
    """

    async def send_message(self, notice: ChatNotice) -> None:
        """Deliver a notice to its chat."""
        ...
