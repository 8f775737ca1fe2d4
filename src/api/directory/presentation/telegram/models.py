"""Pydantic models for the Telegram webhook boundary.

Only the fields the issuance workflow reads are modeled. Everything else
in a Telegram Update is accepted and ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from directory.application.value_objects import ChatCommand


class TelegramUser(BaseModel):
    """Sender of a Telegram message."""

    model_config = ConfigDict(extra="ignore")

    id: int | str = Field(..., description="Telegram user id")
    username: str | None = Field(default=None, description="Telegram username")


class TelegramChat(BaseModel):
    """Chat a Telegram message was posted in."""

    model_config = ConfigDict(extra="ignore")

    id: int | str = Field(..., description="Telegram chat id")
    type: str = Field(..., description="private, group, supergroup or channel")


class TelegramMessage(BaseModel):
    """A Telegram message carrying a bot command."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    message_id: int | str = Field(..., description="Message id within the chat")
    sender: TelegramUser = Field(..., alias="from", description="Message sender")
    chat: TelegramChat = Field(..., description="Chat of the message")
    text: str | None = Field(default=None, description="Message text")

    def to_command(self) -> ChatCommand:
        """Convert to the application-level chat command."""
        return ChatCommand(
            sender_id=self.sender.id,
            chat_id=self.chat.id,
            chat_type=self.chat.type,
            message_id=self.message_id,
        )


class TelegramUpdate(BaseModel):
    """Incoming Telegram Update delivered to the webhook."""

    model_config = ConfigDict(extra="ignore")

    update_id: int | None = Field(default=None, description="Update id")
    message: TelegramMessage | None = Field(
        default=None, description="New incoming message"
    )


class IssuanceResponse(BaseModel):
    """Response for the API key issuance webhook."""

    status_code: int = Field(..., description="HTTP status of the outcome")
