"""Unit tests for the Telegram webhook routes."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from directory.application.services import APIKeyIssuanceService
from directory.application.value_objects import (
    ChatCommand,
    IssuanceResult,
    IssuanceStatus,
)
from directory.ports.exceptions import (
    ChatDeliveryError,
    DirectoryIntegrityError,
    InvalidUserArgumentError,
    RecordStoreError,
    UserNotFoundError,
)


@pytest.fixture
def mock_issuance_service() -> AsyncMock:
    """Mock APIKeyIssuanceService for testing."""
    return AsyncMock(spec=APIKeyIssuanceService)


@pytest.fixture
def test_client(mock_issuance_service: AsyncMock) -> TestClient:
    """Create TestClient with mocked dependencies."""
    from directory.dependencies import get_api_key_issuance_service
    from directory.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_api_key_issuance_service] = (
        lambda: mock_issuance_service
    )
    app.include_router(router)

    return TestClient(app)


def telegram_update(chat_type: str = "private") -> dict:
    return {
        "update_id": 10000,
        "message": {
            "message_id": 1365,
            "from": {"id": 1111111, "is_bot": False, "first_name": "Alice"},
            "chat": {"id": 1111111, "type": chat_type, "first_name": "Alice"},
            "date": 1441645532,
            "text": "/apikey",
        },
    }


class TestCreateApiKeyRoute:
    """Tests for POST /telegram/api-key."""

    @pytest.mark.parametrize(
        ("issuance_status", "expected"),
        [
            (IssuanceStatus.OK, status.HTTP_200_OK),
            (IssuanceStatus.FORBIDDEN, status.HTTP_403_FORBIDDEN),
            (IssuanceStatus.NOT_FOUND, status.HTTP_404_NOT_FOUND),
        ],
    )
    def test_maps_outcome_to_status(
        self, test_client, mock_issuance_service, issuance_status, expected
    ):
        mock_issuance_service.issue.return_value = IssuanceResult(
            status=issuance_status
        )

        response = test_client.post("/telegram/api-key", json=telegram_update())

        assert response.status_code == expected
        assert response.json() == {"status_code": expected}

    def test_passes_chat_command(self, test_client, mock_issuance_service):
        mock_issuance_service.issue.return_value = IssuanceResult(
            status=IssuanceStatus.OK
        )

        test_client.post("/telegram/api-key", json=telegram_update("group"))

        mock_issuance_service.issue.assert_called_once_with(
            ChatCommand(
                sender_id=1111111,
                chat_id=1111111,
                chat_type="group",
                message_id=1365,
            )
        )

    def test_update_without_message_is_bad_request(
        self, test_client, mock_issuance_service
    ):
        response = test_client.post("/telegram/api-key", json={"update_id": 1})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_issuance_service.issue.assert_not_called()

    def test_message_without_sender_is_rejected(self, test_client):
        update = telegram_update()
        del update["message"]["from"]

        response = test_client.post("/telegram/api-key", json=update)

        assert response.status_code == 422

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (InvalidUserArgumentError("no uuid"), status.HTTP_400_BAD_REQUEST),
            (UserNotFoundError("gone"), status.HTTP_404_NOT_FOUND),
            (DirectoryIntegrityError("duplicate"), status.HTTP_502_BAD_GATEWAY),
            (RecordStoreError("down"), status.HTTP_500_INTERNAL_SERVER_ERROR),
            (ChatDeliveryError("bot api"), status.HTTP_500_INTERNAL_SERVER_ERROR),
            (RuntimeError("unexpected"), status.HTTP_500_INTERNAL_SERVER_ERROR),
        ],
    )
    def test_maps_errors_to_status(
        self, test_client, mock_issuance_service, error, expected
    ):
        mock_issuance_service.issue.side_effect = error

        response = test_client.post("/telegram/api-key", json=telegram_update())

        assert response.status_code == expected
        # Internal error messages are not echoed back
        assert str(error) not in response.text
