"""Logging setup shared by every entry point."""

from __future__ import annotations

import logging

import logfire

from botcontext.config import Settings


def configure_logging(settings: Settings, level: int = logging.WARNING) -> None:
    """Configure logfire and route stdlib logging through it."""
    logfire.configure(
        token=settings.logfire_token,
        service_name=settings.app_name,
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    if settings.environment == "dev":
        logfire.instrument_httpx()

    logging.basicConfig(
        level=level,
        format="[%(asctime)s][%(name)s][%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logfire.LogfireLoggingHandler(),
        ],
    )
