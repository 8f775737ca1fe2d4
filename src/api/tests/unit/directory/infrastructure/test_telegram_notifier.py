"""Unit tests for TelegramNotifier.

The Bot API is replaced with an httpx.MockTransport.
"""

import json
from unittest.mock import create_autospec

import httpx
import pytest

from directory.infrastructure.observability import ChatNotifierProbe
from directory.infrastructure.telegram_notifier import TelegramNotifier
from directory.ports.exceptions import ChatDeliveryError
from directory.ports.notifier import ChatNotice, ParseMode
from infrastructure.settings import TelegramSettings

BOT_TOKEN = "123456:test-token"


@pytest.fixture
def telegram_settings() -> TelegramSettings:
    return TelegramSettings(bot_token=BOT_TOKEN)


@pytest.fixture
def mock_probe():
    return create_autospec(ChatNotifierProbe, instance=True)


def make_notifier(settings, probe, handler) -> TelegramNotifier:
    return TelegramNotifier(
        settings=settings,
        probe=probe,
        transport=httpx.MockTransport(handler),
    )


class TestBuildPayload:
    def test_leaves_out_unset_fields(self):
        payload = TelegramNotifier.build_payload(ChatNotice(chat_id=1, text="hi"))

        assert payload == {"chat_id": 1, "text": "hi"}

    def test_includes_formatting_options(self):
        payload = TelegramNotifier.build_payload(
            ChatNotice(
                chat_id=1,
                text="<b>hi</b>",
                reply_to_message_id=7,
                protect_content=True,
                parse_mode=ParseMode.HTML,
            )
        )

        assert payload == {
            "chat_id": 1,
            "text": "<b>hi</b>",
            "reply_to_message_id": 7,
            "protect_content": True,
            "parse_mode": "HTML",
        }


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_posts_to_send_message(self, telegram_settings, mock_probe):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True, "result": {"message_id": 9}})

        notifier = make_notifier(telegram_settings, mock_probe, handler)

        await notifier.send_message(
            ChatNotice(chat_id=42, text="hello", protect_content=True)
        )

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == (
            f"https://api.telegram.org/bot{BOT_TOKEN}/sendMessage"
        )
        assert json.loads(request.content) == {
            "chat_id": 42,
            "text": "hello",
            "protect_content": True,
        }
        mock_probe.notice_sent.assert_called_once_with(chat_id="42", protected=True)

    @pytest.mark.asyncio
    async def test_http_error_status_raises(self, telegram_settings, mock_probe):
        notifier = make_notifier(
            telegram_settings,
            mock_probe,
            lambda request: httpx.Response(502, json={"ok": False}),
        )

        with pytest.raises(ChatDeliveryError) as exc_info:
            await notifier.send_message(ChatNotice(chat_id=42, text="hello"))

        assert BOT_TOKEN not in str(exc_info.value)
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True
        mock_probe.notice_delivery_failed.assert_called_once_with(
            chat_id="42", error="Bot API answered 502"
        )

    @pytest.mark.asyncio
    async def test_rejected_message_raises(self, telegram_settings, mock_probe):
        notifier = make_notifier(
            telegram_settings,
            mock_probe,
            lambda request: httpx.Response(
                200, json={"ok": False, "description": "chat not found"}
            ),
        )

        with pytest.raises(ChatDeliveryError, match="chat not found"):
            await notifier.send_message(ChatNotice(chat_id=42, text="hello"))

        mock_probe.notice_sent.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, telegram_settings, mock_probe):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        notifier = make_notifier(telegram_settings, mock_probe, handler)

        with pytest.raises(ChatDeliveryError) as exc_info:
            await notifier.send_message(ChatNotice(chat_id=42, text="hello"))

        assert exc_info.value.__cause__ is None
        assert exc_info.value.__suppress_context__ is True
        assert BOT_TOKEN not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self, telegram_settings, mock_probe):
        notifier = make_notifier(
            telegram_settings,
            mock_probe,
            lambda request: httpx.Response(200, text="<html>gateway</html>"),
        )

        with pytest.raises(ChatDeliveryError):
            await notifier.send_message(ChatNotice(chat_id=42, text="hello"))
