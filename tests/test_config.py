"""Tests for settings and logging setup."""

import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from botcontext.config import Settings, get_settings
from botcontext.log import configure_logging


def test_defaults(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "42:abc")
    monkeypatch.delenv("ENVIRONMENT", raising=False)

    settings = Settings(_env_file=None)

    assert settings.environment == "dev"
    assert settings.api_root == "https://api.telegram.org"
    assert settings.webhook_path == "/telegram/webhook"
    assert settings.webhook_secret_token is None
    assert settings.bot_id == 42


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "42:abc")
    monkeypatch.setenv("ENVIRONMENT", "prod")
    monkeypatch.setenv("WEBHOOK_PORT", "9000")
    monkeypatch.setenv("WEBHOOK_SECRET_TOKEN", "s3cret")

    settings = Settings(_env_file=None)

    assert settings.environment == "prod"
    assert settings.webhook_port == 9000
    assert settings.webhook_secret_token == "s3cret"


def test_token_required(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_unknown_environment(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    with pytest.raises(ValidationError):
        Settings(telegram_bot_token="42:abc", _env_file=None)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()


class TestConfigureLogging:
    def test_dev(self):
        settings = Settings(
            telegram_bot_token="42:abc", environment="dev", _env_file=None
        )
        with (
            patch("botcontext.log.logfire") as logfire,
            patch("botcontext.log.logging.basicConfig") as basic_config,
        ):
            configure_logging(settings, level=logging.INFO)

        logfire.configure.assert_called_once_with(
            token=None,
            service_name="botcontext",
            environment="dev",
            send_to_logfire="if-token-present",
        )
        logfire.instrument_httpx.assert_called_once_with()
        assert basic_config.call_args.kwargs["level"] == logging.INFO
        assert basic_config.call_args.kwargs["handlers"] == [
            logfire.LogfireLoggingHandler.return_value
        ]

    def test_prod_skips_httpx_instrumentation(self):
        settings = Settings(
            telegram_bot_token="42:abc",
            environment="prod",
            logfire_token="lf-token",
            _env_file=None,
        )
        with (
            patch("botcontext.log.logfire") as logfire,
            patch("botcontext.log.logging.basicConfig"),
        ):
            configure_logging(settings)

        assert logfire.configure.call_args.kwargs["token"] == "lf-token"
        logfire.instrument_httpx.assert_not_called()
