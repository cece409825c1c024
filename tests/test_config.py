from __future__ import annotations

import logging

import pytest
import structlog
from pydantic import ValidationError

from fiveby_client.core.config import DEFAULT_API_BASE_URL, Settings, get_settings
from fiveby_client.core.logging import configure_logging

ENV_VARS = (
    "FIVEBY_API_BASE_URL",
    "FIVEBY_REQUEST_TIMEOUT_SECONDS",
    "FIVEBY_POLL_INTERVAL_SECONDS",
    "FIVEBY_TTS_START_TIMEOUT_SECONDS",
    "FIVEBY_SPEECH_LANG",
    "LOG_LEVEL",
    "FIVEBY_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.api_base_url == DEFAULT_API_BASE_URL
    assert settings.request_timeout_seconds == 10.0
    assert settings.poll_interval_seconds == 5.0
    assert settings.tts_start_timeout_seconds == 1.5
    assert settings.speech_lang == "en-US"
    assert settings.log_level == "INFO"
    assert settings.log_format == "console"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIVEBY_API_BASE_URL", "https://api.fiveby.example/")
    monkeypatch.setenv("FIVEBY_POLL_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("FIVEBY_LOG_FORMAT", "json")

    settings = Settings(_env_file=None)

    assert settings.api_base_url == "https://api.fiveby.example"
    assert settings.poll_interval_seconds == 2.5
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"


def test_blank_base_url_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIVEBY_API_BASE_URL", "   ")

    assert Settings(_env_file=None).api_base_url == DEFAULT_API_BASE_URL


@pytest.mark.parametrize("name", ["FIVEBY_REQUEST_TIMEOUT_SECONDS", "FIVEBY_TTS_START_TIMEOUT_SECONDS"])
def test_durations_must_be_positive(monkeypatch: pytest.MonkeyPatch, name: str) -> None:
    monkeypatch.setenv(name, "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_unknown_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_configure_logging_routes_structlog_through_stdlib(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("INFO", "json")
    try:
        structlog.get_logger("fiveby_client.test").info("config_test_event", answer=42)
        logging.getLogger("fiveby_client.test").debug("hidden")
        captured = capsys.readouterr()
    finally:
        structlog.reset_defaults()
        for name in (None, "httpx", "httpcore"):
            logging.getLogger(name).handlers.clear()

    assert '"event": "config_test_event"' in captured.err
    assert '"answer": 42' in captured.err
    assert "hidden" not in captured.err
    assert captured.out == ""
