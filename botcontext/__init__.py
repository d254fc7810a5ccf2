"""Update classification, per-update context and webhook ingestion."""

from botcontext.context import Context, State, StateKey, WebAppPayload, with_context
from botcontext.errors import (
    BotContextError,
    ContextUsageError,
    TelegramError,
    UpdateClassificationError,
    URLStreamError,
)
from botcontext.telegram import Telegram, TelegramTransport
from botcontext.updates import UpdateType, classify_update, parse_update
from botcontext.webhook import create_app, generate_webhook, webhook_filter

__all__ = [
    "BotContextError",
    "Context",
    "ContextUsageError",
    "State",
    "StateKey",
    "Telegram",
    "TelegramError",
    "TelegramTransport",
    "URLStreamError",
    "UpdateClassificationError",
    "UpdateType",
    "WebAppPayload",
    "classify_update",
    "create_app",
    "generate_webhook",
    "parse_update",
    "webhook_filter",
    "with_context",
]
