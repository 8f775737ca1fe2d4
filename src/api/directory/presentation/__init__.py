"""User directory presentation layer."""

from __future__ import annotations

from fastapi import APIRouter

from directory.presentation import telegram

router = APIRouter()

router.include_router(telegram.router)

__all__ = ["router"]
