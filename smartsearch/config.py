"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiSettings(BaseModel):
    api_key: SecretStr | None = None
    model: str = Field(default="gemini-3-flash-preview", min_length=1)
    base_url: HttpUrl = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Root of the Gemini REST API, without the /models suffix.",
    )
    request_timeout_seconds: int = Field(default=60, ge=5, le=600)

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    default_language: str = "en"
    admin_telegram_id: int | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    gemini: GeminiSettings = Field(default_factory=GeminiSettings)

    enable_markdown_v2: bool = True

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> BotSettings:
    """Return cached settings instance."""

    return BotSettings()  # type: ignore[call-arg]


__all__ = ["BotSettings", "GeminiSettings", "get_settings"]
