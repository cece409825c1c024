from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Literal

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fiveby_client.core.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_SPEECH_LANG,
    DEFAULT_TTS_START_TIMEOUT_SECONDS,
)

DEFAULT_API_BASE_URL = "http://localhost:8000"

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_base_url: str = Field(default=DEFAULT_API_BASE_URL, alias="FIVEBY_API_BASE_URL")
    request_timeout_seconds: float = Field(default=10.0, alias="FIVEBY_REQUEST_TIMEOUT_SECONDS")
    poll_interval_seconds: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, alias="FIVEBY_POLL_INTERVAL_SECONDS")
    tts_start_timeout_seconds: float = Field(
        default=DEFAULT_TTS_START_TIMEOUT_SECONDS,
        alias="FIVEBY_TTS_START_TIMEOUT_SECONDS",
    )
    speech_lang: str = Field(default=DEFAULT_SPEECH_LANG, alias="FIVEBY_SPEECH_LANG")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="console", alias="FIVEBY_LOG_FORMAT")

    @field_validator("api_base_url", mode="before")
    @classmethod
    def normalize_api_base_url(cls, value: Any) -> str:
        if value is None:
            return DEFAULT_API_BASE_URL

        normalized = str(value).strip()
        if not normalized:
            logger.warning("api_base_url_missing", fallback=DEFAULT_API_BASE_URL)
            return DEFAULT_API_BASE_URL

        return normalized.rstrip("/")

    @field_validator(
        "request_timeout_seconds",
        "poll_interval_seconds",
        "tts_start_timeout_seconds",
    )
    @classmethod
    def validate_positive_durations(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Durations must be > 0")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError("LOG_LEVEL must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["DEFAULT_API_BASE_URL", "Settings", "get_settings"]
