"""Webhook ingestion on top of aiohttp.

Turns an incoming HTTP request into a raw update mapping and hands it to an
update handler. Every request gets exactly one response: 403 when the filter
rejects it, 415 when the body cannot be parsed, otherwise whatever the
handler left in the response (200 by default).
"""

from __future__ import annotations

import hmac
import json
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import logfire
from aiohttp import web

from botcontext.config import Settings

SECRET_TOKEN_HEADER = "X-Telegram-Bot-Api-Secret-Token"

# Middlewares that already consumed the body store it under this key
REQUEST_BODY_KEY = "body"

SETTINGS_KEY = web.AppKey("settings", Settings)

UpdateHandler = Callable[[Any], Awaitable[None]]
RequestFilter = Callable[[web.Request], bool]
Reject = Callable[[web.Request], Awaitable[web.StreamResponse]]
Webhook = Callable[..., Awaitable[web.StreamResponse]]


async def forbidden(request: web.Request) -> web.StreamResponse:
    logfire.debug("webhook_reply", status=403, path=request.path)
    return web.Response(status=403)


async def read_update(request: web.Request) -> Any:
    """Extract the update from ``request``.

    A pre-parsed body attached to the request is returned untouched. Raw
    bytes or text, attached or read from the request stream, are decoded as
    UTF-8 JSON.

    Raises:
        ValueError: the body is not valid UTF-8 or not a JSON object.
    """
    body = request.get(REQUEST_BODY_KEY)
    if body is None:
        body = await request.read()

    if isinstance(body, (bytes, bytearray)):
        body = bytes(body).decode("utf-8")
    if isinstance(body, str):
        body = json.loads(body)
        if not isinstance(body, Mapping):
            raise ValueError(f"Expected a JSON object, got {type(body).__name__}")

    return body


def generate_webhook(filter_: RequestFilter, update_handler: UpdateHandler) -> Webhook:
    """Build an aiohttp handler feeding parsed updates to ``update_handler``.

    The returned coroutine also accepts a ``response`` the update handler may
    write to (e.g. to answer the update in the webhook reply) and a custom
    ``reject`` continuation for requests refused by ``filter_``.
    """

    async def webhook(
        request: web.Request,
        response: web.StreamResponse | None = None,
        reject: Reject | None = None,
    ) -> web.StreamResponse:
        logfire.debug("webhook_request", method=request.method, path=request.path)

        if not filter_(request):
            logfire.debug(
                "webhook_filter_rejected", method=request.method, path=request.path
            )
            return await (reject or forbidden)(request)

        try:
            update = await read_update(request)
        except ValueError:
            # Bad payloads end here, they never reach the caller
            logfire.warning("webhook_body_unparsable", path=request.path, _exc_info=True)
            return web.Response(status=415)

        if response is None:
            response = web.StreamResponse()

        try:
            await update_handler(update)
        finally:
            if not response.prepared:
                await response.prepare(request)
            # No-op when the handler already finished the response
            await response.write_eof()

        return response

    return webhook


def webhook_filter(path: str, secret_token: str | None = None) -> RequestFilter:
    """Accept POST requests to ``path`` carrying the expected secret token."""
    expected = secret_token.encode() if secret_token is not None else None

    def check(request: web.Request) -> bool:
        if request.method != "POST" or request.path != path:
            return False
        if expected is None:
            return True
        received = request.headers.get(SECRET_TOKEN_HEADER, "").encode()
        return hmac.compare_digest(received, expected)

    return check


def create_app(update_handler: UpdateHandler, settings: Settings) -> web.Application:
    webhook = generate_webhook(
        webhook_filter(settings.webhook_path, settings.webhook_secret_token),
        update_handler,
    )
    app = web.Application()
    app[SETTINGS_KEY] = settings
    app.router.add_post(settings.webhook_path, webhook)
    return app
