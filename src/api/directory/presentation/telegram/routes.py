"""HTTP routes for the Telegram bot commands."""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from directory.application.services import APIKeyIssuanceService
from directory.application.value_objects import IssuanceStatus
from directory.dependencies import get_api_key_issuance_service
from directory.ports.exceptions import DirectoryError
from directory.presentation.telegram.models import IssuanceResponse, TelegramUpdate

router = APIRouter(
    prefix="/telegram",
    tags=["telegram"],
)

_STATUS_CODES: dict[IssuanceStatus, int] = {
    IssuanceStatus.OK: status.HTTP_200_OK,
    IssuanceStatus.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    IssuanceStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


@router.post(
    "/api-key",
    responses={
        200: {"description": "API key issued and sent to the chat"},
        400: {"description": "Update carries no message"},
        403: {"description": "Not a private chat, or a key was already issued"},
        404: {"description": "Sender is not in the directory"},
        502: {"description": "Directory data is inconsistent"},
        500: {"description": "Internal server error"},
    },
)
async def create_api_key(
    update: TelegramUpdate,
    response: Response,
    service: Annotated[APIKeyIssuanceService, Depends(get_api_key_issuance_service)],
) -> IssuanceResponse:
    """Issue an API key to the sender of a Telegram command.

    The outcome is answered both as the HTTP status and in the body.

    Args:
        update: Telegram Update delivered by the webhook
        response: Response used to set the outcome status
        service: API key issuance service

    Returns:
        IssuanceResponse with the outcome status code

    Raises:
        HTTPException: 400 if the update has no message
        HTTPException: with the error's status for directory errors
        HTTPException: 500 for unexpected errors
    """
    if update.message is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Update carries no message",
        )

    try:
        result = await service.issue(update.message.to_command())
    except DirectoryError as e:
        raise HTTPException(
            status_code=int(e.status_code),
            detail=HTTPStatus(int(e.status_code)).phrase,
        ) from e
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to issue API key",
        ) from e

    status_code = _STATUS_CODES[result.status]
    response.status_code = status_code
    return IssuanceResponse(status_code=status_code)
