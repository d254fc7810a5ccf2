"""Shared fixtures for the botcontext test suite.

Updates are built from raw Bot API payloads and validated into real aiogram
``Update`` objects, so the context sees exactly what the webhook produces.
"""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.types import Update, User

# Set up test environment variables before any imports
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:TEST_TOKEN_FOR_TESTING")

from botcontext.context import Context  # noqa: E402
from botcontext.telegram import Telegram  # noqa: E402


@pytest.fixture
def make_update():
    """Factory validating raw update fields into an aiogram ``Update``."""

    def _make_update(update_id: int = 1, **fields: Any) -> Update:
        return Update.model_validate({"update_id": update_id, **fields})

    return _make_update


@pytest.fixture
def bot_info() -> User:
    return User(id=123456, is_bot=True, first_name="Bot", username="ContextTestBot")


@pytest.fixture
def telegram():
    """Transport stub recording every Bot API call."""
    transport = MagicMock(spec=Telegram)
    transport.call_api = AsyncMock(return_value=True)
    return transport


@pytest.fixture
def make_context(make_update, telegram, bot_info):
    """Factory for contexts over freshly built updates."""

    def _make_context(**fields: Any) -> Context:
        return Context(make_update(**fields), telegram, bot_info)

    return _make_context
