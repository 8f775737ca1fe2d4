"""Telegram Bot API implementation of IChatNotifier."""

from __future__ import annotations

from typing import Any

import httpx

from directory.infrastructure.observability import (
    ChatNotifierProbe,
    DefaultChatNotifierProbe,
)
from directory.ports.exceptions import ChatDeliveryError
from directory.ports.notifier import ChatNotice, IChatNotifier
from infrastructure.settings import TelegramSettings


class TelegramNotifier(IChatNotifier):
    """Sends notices through the Bot API ``sendMessage`` method.

    A new AsyncClient is opened per notice; the transport can be replaced
    for testing.
    """

    def __init__(
        self,
        settings: TelegramSettings,
        probe: ChatNotifierProbe | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._probe = probe or DefaultChatNotifierProbe()
        self._transport = transport

    @property
    def _send_message_url(self) -> str:
        token = self._settings.bot_token.get_secret_value()
        return f"{self._settings.api_base_url}/bot{token}/sendMessage"

    @staticmethod
    def build_payload(notice: ChatNotice) -> dict[str, Any]:
        """Build the sendMessage body, leaving out unset optional fields."""
        payload: dict[str, Any] = {"chat_id": notice.chat_id, "text": notice.text}
        if notice.reply_to_message_id is not None:
            payload["reply_to_message_id"] = notice.reply_to_message_id
        if notice.protect_content is not None:
            payload["protect_content"] = notice.protect_content
        if notice.parse_mode is not None:
            payload["parse_mode"] = notice.parse_mode.value
        return payload

    async def send_message(self, notice: ChatNotice) -> None:
        """Deliver a notice.

        Raises:
            ChatDeliveryError: If the Bot API cannot be reached or rejects
                the message
        """
        chat_id = str(notice.chat_id)
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._settings.request_timeout_seconds,
            ) as client:
                response = await client.post(
                    self._send_message_url,
                    json=self.build_payload(notice),
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            # The URL embeds the bot token; neither it nor the httpx error is kept
            error = f"Bot API answered {e.response.status_code}"
            self._probe.notice_delivery_failed(chat_id=chat_id, error=error)
            raise ChatDeliveryError(error) from None
        except httpx.HTTPError as e:
            error = f"Bot API request failed: {type(e).__name__}"
            self._probe.notice_delivery_failed(chat_id=chat_id, error=error)
            raise ChatDeliveryError(error) from None
        except ValueError as e:
            error = "Bot API answered with a non-JSON body"
            self._probe.notice_delivery_failed(chat_id=chat_id, error=error)
            raise ChatDeliveryError(error) from e

        if not body.get("ok", False):
            error = f"Bot API rejected message: {body.get('description', 'unknown error')}"
            self._probe.notice_delivery_failed(chat_id=chat_id, error=error)
            raise ChatDeliveryError(error)

        self._probe.notice_sent(chat_id=chat_id, protected=bool(notice.protect_content))
