"""Telegram webhook routes and models."""

from directory.presentation.telegram.routes import router

__all__ = ["router"]
