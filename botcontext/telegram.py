"""Outbound Bot API transport.

The context layer only needs something that maps a Bot API method name and a
payload to an awaitable result (see ``TelegramTransport``). ``Telegram`` is
the httpx-backed implementation used in production.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Mapping
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, Self

import httpx
import logfire
from aiogram.client.default import Default
from aiogram.types import (
    BufferedInputFile,
    FSInputFile,
    InputFile,
    TelegramObject,
    URLInputFile,
    User,
)

from botcontext.config import Settings
from botcontext.errors import TelegramError, URLStreamError

DEFAULT_API_ROOT = "https://api.telegram.org"
DEFAULT_TIMEOUT = 30.0


class TelegramTransport(Protocol):
    """Anything able to invoke a Bot API method by name."""

    def call_api(
        self, method: str, payload: Mapping[str, Any] | None = None
    ) -> Awaitable[Any]: ...


class _Multipart:
    """Collects files found while serializing a payload."""

    def __init__(self) -> None:
        self.files: dict[str, InputFile] = {}

    def attach(self, file: InputFile) -> str:
        name = f"file{len(self.files)}"
        self.files[name] = file
        return f"attach://{name}"


def _serialize(value: Any, multipart: _Multipart) -> Any:
    if isinstance(value, InputFile):
        return multipart.attach(value)
    if isinstance(value, TelegramObject):
        value = value.model_dump(exclude_none=True, by_alias=True)
    if isinstance(value, Mapping):
        return {
            key: _serialize(item, multipart)
            for key, item in value.items()
            if item is not None and not isinstance(item, Default)
        }
    if isinstance(value, (list, tuple)):
        return [_serialize(item, multipart) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return int(value.timestamp())
    return value


def _form_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class Telegram:
    """Async Bot API client over ``httpx.AsyncClient``.

    Failed calls raise ``TelegramError`` with the API's error payload. Nothing
    is retried here; retry policy belongs to the caller.
    """

    def __init__(
        self,
        token: str,
        *,
        api_root: str = DEFAULT_API_ROOT,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.token = token
        self.api_root = api_root.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> Telegram:
        return cls(
            settings.telegram_bot_token,
            api_root=settings.api_root,
            timeout=settings.api_timeout,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def method_url(self, method: str) -> str:
        return f"{self.api_root}/bot{self.token}/{method}"

    async def call_api(
        self, method: str, payload: Mapping[str, Any] | None = None
    ) -> Any:
        """Invoke ``method`` with ``payload`` and return the ``result`` field."""
        payload = dict(payload or {})
        multipart = _Multipart()
        data: dict[str, Any] = {}
        for key, value in payload.items():
            if value is None or isinstance(value, Default):
                continue
            # Top-level files travel as their own form field
            if isinstance(value, InputFile):
                multipart.files[key] = value
                continue
            data[key] = _serialize(value, multipart)

        with logfire.span("telegram_api_call {method}", method=method):
            if multipart.files:
                files = {
                    name: (file.filename or name, await self._read_file(file))
                    for name, file in multipart.files.items()
                }
                form = {key: _form_value(value) for key, value in data.items()}
                response = await self._client.post(
                    self.method_url(method), data=form, files=files
                )
            else:
                response = await self._client.post(self.method_url(method), json=data)

        return self._unwrap(method, payload, response)

    async def get_me(self) -> User:
        return User.model_validate(await self.call_api("getMe"))

    def _unwrap(
        self, method: str, payload: dict[str, Any], response: httpx.Response
    ) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, Mapping):
            body = {
                "ok": False,
                "error_code": response.status_code,
                "description": response.text or response.reason_phrase,
            }

        if not body.get("ok"):
            logfire.warning(
                "telegram_api_error",
                method=method,
                error_code=body.get("error_code"),
                description=body.get("description"),
            )
            raise TelegramError(body, on={"method": method, "payload": payload})

        return body.get("result")

    async def _read_file(self, file: InputFile) -> bytes:
        if isinstance(file, BufferedInputFile):
            return file.data
        if isinstance(file, FSInputFile):
            return await asyncio.to_thread(Path(file.path).read_bytes)
        if isinstance(file, URLInputFile):
            return await self._stream_url(file)
        raise TypeError(f"Unsupported input file: {type(file).__name__}")

    async def _stream_url(self, file: URLInputFile) -> bytes:
        async with self._client.stream(
            "GET", file.url, headers=file.headers, timeout=file.timeout
        ) as response:
            if not response.is_success:
                logfire.warning(
                    "url_stream_failed", url=file.url, status_code=response.status_code
                )
                raise URLStreamError(response.status_code, str(response.url))
            chunks = [chunk async for chunk in response.aiter_bytes()]
        return b"".join(chunks)
