"""Configuration settings using Pydantic."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Docs: https://docs.pydantic.dev/2.8/concepts/pydantic_settings/


class Settings(BaseSettings):
    # App name used in logs
    app_name: str = "botcontext"

    # Allows to detect type of deployment
    environment: Literal["dev", "prod"] = "dev"

    # Token got from https://t.me/BotFather
    telegram_bot_token: str

    # Bot API server, override for a self-hosted one
    api_root: str = "https://api.telegram.org"
    api_timeout: float = 30.0

    # --- Webhook ---

    webhook_host: str = "127.0.0.1"
    webhook_port: int = 8080
    webhook_path: str = "/telegram/webhook"

    # Echoed back by Telegram in X-Telegram-Bot-Api-Secret-Token
    webhook_secret_token: str | None = None

    # Logfire token, logs stay local without it
    logfire_token: str | None = None

    model_config = SettingsConfigDict(
        # `.env.prod` takes priority over `.env`
        env_file=(".env", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra fields from .env
    )

    @property
    def bot_id(self) -> int:
        return int(self.telegram_bot_token.split(":")[0])


@lru_cache
def get_settings() -> Settings:
    return Settings()
