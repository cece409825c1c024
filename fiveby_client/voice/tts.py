from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

import structlog

from fiveby_client.core.constants import DEFAULT_SPEECH_LANG, DEFAULT_TTS_START_TIMEOUT_SECONDS

logger = structlog.get_logger(__name__)


class SynthesisEngine(Protocol):
    def is_available(self) -> bool: ...

    def speak(
        self,
        text: str,
        *,
        lang: str,
        on_start: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None: ...

    def cancel(self) -> None: ...


class SpeechSynthesisError(Exception):
    pass


class SpeechSynthesisService:
    def __init__(
        self,
        engine: SynthesisEngine | None,
        *,
        lang: str = DEFAULT_SPEECH_LANG,
        start_timeout_seconds: float = DEFAULT_TTS_START_TIMEOUT_SECONDS,
    ) -> None:
        self._engine = engine
        self._lang = lang
        self._start_timeout_seconds = start_timeout_seconds
        self._pending: asyncio.Future[None] | None = None

    @property
    def is_supported(self) -> bool:
        return self._engine is not None and self._engine.is_available()

    async def speak(self, text: str) -> None:
        """Start speaking ``text``; returns once the engine reports the utterance started."""
        if not self.is_supported:
            raise SpeechSynthesisError("Text-to-speech is unavailable on this device.")
        if not text.strip():
            raise SpeechSynthesisError("Question text is empty.")

        self.stop()

        assert self._engine is not None
        loop = asyncio.get_running_loop()
        started: asyncio.Future[None] = loop.create_future()
        self._pending = started

        def on_start() -> None:
            loop.call_soon_threadsafe(_settle, started, None)

        def on_error(reason: str) -> None:
            logger.info("tts_error", reason=reason)
            loop.call_soon_threadsafe(
                _settle,
                started,
                SpeechSynthesisError("Speech synthesis failed to start."),
            )

        try:
            self._engine.speak(text, lang=self._lang, on_start=on_start, on_error=on_error)
        except (RuntimeError, OSError) as exc:
            self._release(started)
            raise SpeechSynthesisError("Speech synthesis could not be started.") from exc

        try:
            await asyncio.wait_for(started, timeout=self._start_timeout_seconds)
        except asyncio.CancelledError:
            # stop() or a newer utterance interrupted this one.
            if self._pending is not started:
                return
            raise
        except asyncio.TimeoutError:
            self._engine.cancel()
            logger.warning("tts_start_timeout", timeout_seconds=self._start_timeout_seconds)
            raise SpeechSynthesisError(
                "Speech synthesis did not start. Try again from a button tap.",
            ) from None
        finally:
            self._release(started)

    def stop(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None and not pending.done():
            pending.cancel()
        if self._engine is not None:
            self._engine.cancel()

    def _release(self, future: asyncio.Future[None]) -> None:
        if self._pending is future:
            self._pending = None


def _settle(future: asyncio.Future[None], error: BaseException | None) -> None:
    if future.done():
        return
    if error is None:
        future.set_result(None)
    else:
        future.set_exception(error)


__all__ = ["SpeechSynthesisError", "SpeechSynthesisService", "SynthesisEngine"]
