"""Exceptions raised by the update context layer.

Three failure families exist:
- usage errors (an operation called for an update kind that cannot serve it),
- remote API failures returned by the Bot API,
- transport failures while streaming files from a URL.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from aiogram.types import ResponseParameters


class BotContextError(Exception):
    """Base class for all errors raised by botcontext."""


class TelegramError(BotContextError):
    """The Bot API answered with ``ok: false``.

    Built once from the error payload and never mutated afterwards.
    """

    def __init__(
        self, response: Mapping[str, Any], on: Mapping[str, Any] | None = None
    ) -> None:
        self.response = dict(response)
        self.on = dict(on or {})
        super().__init__(f"{self.code}: {self.description}")

    @property
    def code(self) -> int:
        return self.response.get("error_code", 0)

    @property
    def description(self) -> str:
        return self.response.get("description", "")

    @property
    def parameters(self) -> ResponseParameters | None:
        params = self.response.get("parameters")
        if params is None:
            return None
        return ResponseParameters.model_validate(params)

    @property
    def retry_after(self) -> int | None:
        params = self.parameters
        return params.retry_after if params else None

    @property
    def migrate_to_chat_id(self) -> int | None:
        params = self.parameters
        return params.migrate_to_chat_id if params else None


class URLStreamError(BotContextError):
    """Streaming a file from a URL returned a non-success status."""

    def __init__(self, status_code: int, url: str, message: str | None = None):
        self.status_code = status_code
        self.url = url
        super().__init__(
            message or f"Error {status_code} while streaming file from URL: {url}"
        )


class ContextUsageError(BotContextError, TypeError):
    """A context operation was called for an update kind that cannot serve it."""

    def __init__(self, method: str, update_type: str):
        self.method = method
        self.update_type = update_type
        super().__init__(f'"{method}" isn\'t available for "{update_type}"')


class UpdateClassificationError(BotContextError, ValueError):
    """The update carries no payload, so its kind cannot be determined."""

    def __init__(self, update: Any):
        self.update = update
        super().__init__(f"Cannot determine update type of {update!r}")
