"""Speech-to-text session handling on top of a pluggable recognition engine.

The engine reports lifecycle callbacks to the listener it was started with.
The service keeps at most one session listening at a time; starting a new
one stops the previous one first.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

import structlog

from fiveby_client.core.constants import DEFAULT_SPEECH_LANG

logger = structlog.get_logger(__name__)


class SttStatus(str, enum.Enum):
    IDLE = "idle"
    LISTENING = "listening"
    STOPPED = "stopped"
    ERROR = "error"


class SttErrorCode(str, enum.Enum):
    ABORTED = "aborted"
    AUDIO_CAPTURE = "audio_capture"
    NETWORK = "network"
    NO_SPEECH = "no_speech"
    NOT_ALLOWED = "not_allowed"
    SERVICE_NOT_ALLOWED = "service_not_allowed"
    STT_ERROR = "stt_error"
    UNSUPPORTED = "unsupported"


ENGINE_ERROR_CODES: dict[str, SttErrorCode] = {
    "aborted": SttErrorCode.ABORTED,
    "audio-capture": SttErrorCode.AUDIO_CAPTURE,
    "network": SttErrorCode.NETWORK,
    "no-speech": SttErrorCode.NO_SPEECH,
    "not-allowed": SttErrorCode.NOT_ALLOWED,
    "service-not-allowed": SttErrorCode.SERVICE_NOT_ALLOWED,
}

STT_ERROR_MESSAGES: dict[SttErrorCode, str] = {
    SttErrorCode.ABORTED: "Speech recognition stopped.",
    SttErrorCode.AUDIO_CAPTURE: "No microphone available for speech recognition.",
    SttErrorCode.NETWORK: "Speech recognition network error.",
    SttErrorCode.NO_SPEECH: "No speech detected. Try again.",
    SttErrorCode.NOT_ALLOWED: "Microphone permission denied.",
    SttErrorCode.SERVICE_NOT_ALLOWED: "Microphone permission denied.",
    SttErrorCode.STT_ERROR: "Speech recognition failed.",
    SttErrorCode.UNSUPPORTED: "Speech-to-text is unavailable on this device.",
}


def stt_error_code(engine_error: str) -> SttErrorCode:
    return ENGINE_ERROR_CODES.get(engine_error, SttErrorCode.STT_ERROR)


@dataclass(frozen=True)
class SttError:
    code: SttErrorCode
    message: str

    @classmethod
    def from_code(cls, code: SttErrorCode, message: str | None = None) -> "SttError":
        return cls(code=code, message=message or STT_ERROR_MESSAGES[code])


@dataclass(frozen=True)
class RecognitionResult:
    transcript: str
    is_final: bool


class RecognitionListener(Protocol):
    def on_start(self) -> None: ...

    def on_result(self, results: Sequence[RecognitionResult]) -> None: ...

    def on_error(self, engine_error: str) -> None: ...

    def on_end(self) -> None: ...


class RecognitionEngine(Protocol):
    def is_available(self) -> bool: ...

    def start(self, listener: RecognitionListener, *, lang: str, interim_results: bool) -> None: ...

    def stop(self) -> None: ...


StatusCallback = Callable[[SttStatus], None]
TranscriptCallback = Callable[[str], None]
ErrorCallback = Callable[[SttError], None]


def _noop(_: object) -> None:
    return None


def split_transcripts(results: Sequence[RecognitionResult]) -> tuple[str, str]:
    """Return (interim, final) transcripts joined from the engine results."""
    interim_parts: list[str] = []
    final_parts: list[str] = []
    for result in results:
        transcript = result.transcript.strip()
        if not transcript:
            continue
        if result.is_final:
            final_parts.append(transcript)
        else:
            interim_parts.append(transcript)
    return " ".join(interim_parts).strip(), " ".join(final_parts).strip()


class ListeningHandle:
    def __init__(
        self,
        engine: RecognitionEngine | None,
        *,
        on_status: StatusCallback | None = None,
        on_interim_transcript: TranscriptCallback | None = None,
        on_final_transcript: TranscriptCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_finished: Callable[["ListeningHandle"], None] | None = None,
    ) -> None:
        self._engine = engine
        self._on_status = on_status or _noop
        self._on_interim_transcript = on_interim_transcript or _noop
        self._on_final_transcript = on_final_transcript or _noop
        self._on_error = on_error or _noop
        self._on_finished = on_finished
        self._stop_requested = False
        self.status = SttStatus.IDLE
        self.interim_transcript = ""
        self.final_transcript = ""
        self.error: SttError | None = None

    @property
    def is_active(self) -> bool:
        return self.status in (SttStatus.IDLE, SttStatus.LISTENING) and not self._stop_requested

    @property
    def transcript(self) -> str:
        return self.final_transcript or self.interim_transcript

    def stop(self) -> None:
        if self._stop_requested:
            return
        self._stop_requested = True
        if self._engine is None or self.status in (SttStatus.STOPPED, SttStatus.ERROR):
            return
        try:
            self._engine.stop()
        except RuntimeError:
            # Engines may refuse to stop a session that already ended.
            logger.debug("stt_stop_ignored")

    def on_start(self) -> None:
        self._set_status(SttStatus.LISTENING)

    def on_result(self, results: Sequence[RecognitionResult]) -> None:
        interim, final = split_transcripts(results)
        self.interim_transcript = interim
        self._on_interim_transcript(interim)
        if final:
            self.final_transcript = final
            self._on_final_transcript(final)

    def on_error(self, engine_error: str) -> None:
        code = stt_error_code(engine_error)
        if code == SttErrorCode.ABORTED and self._stop_requested:
            return
        self.fail(SttError.from_code(code))

    def on_end(self) -> None:
        if self.status != SttStatus.ERROR:
            self._set_status(SttStatus.STOPPED)
        self._finish()

    def fail(self, error: SttError) -> None:
        logger.info("stt_error", code=error.code.value)
        self.error = error
        self._set_status(SttStatus.ERROR)
        self._on_error(error)

    def _set_status(self, status: SttStatus) -> None:
        self.status = status
        self._on_status(status)

    def _finish(self) -> None:
        if self._on_finished is not None:
            self._on_finished(self)


class SpeechRecognitionService:
    def __init__(self, engine: RecognitionEngine | None, *, lang: str = DEFAULT_SPEECH_LANG) -> None:
        self._engine = engine
        self._lang = lang
        self._active: ListeningHandle | None = None

    @property
    def is_supported(self) -> bool:
        return self._engine is not None and self._engine.is_available()

    @property
    def active_handle(self) -> ListeningHandle | None:
        return self._active

    def start(
        self,
        *,
        interim_results: bool = True,
        lang: str | None = None,
        on_status: StatusCallback | None = None,
        on_interim_transcript: TranscriptCallback | None = None,
        on_final_transcript: TranscriptCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> ListeningHandle:
        if not self.is_supported:
            handle = ListeningHandle(None, on_status=on_status, on_error=on_error)
            handle.fail(SttError.from_code(SttErrorCode.UNSUPPORTED))
            return handle

        self.stop()

        assert self._engine is not None
        handle = ListeningHandle(
            self._engine,
            on_status=on_status,
            on_interim_transcript=on_interim_transcript,
            on_final_transcript=on_final_transcript,
            on_error=on_error,
            on_finished=self._release,
        )
        self._active = handle

        try:
            self._engine.start(handle, lang=lang or self._lang, interim_results=interim_results)
        except (RuntimeError, OSError):
            logger.warning("stt_start_failed", exc_info=True)
            self._release(handle)
            handle.fail(SttError.from_code(SttErrorCode.STT_ERROR, "Could not start speech recognition."))
        return handle

    def stop(self) -> None:
        handle = self._active
        if handle is None:
            return
        handle.stop()

    def _release(self, handle: ListeningHandle) -> None:
        if self._active is handle:
            self._active = None


__all__ = [
    "ENGINE_ERROR_CODES",
    "ListeningHandle",
    "RecognitionEngine",
    "RecognitionListener",
    "RecognitionResult",
    "STT_ERROR_MESSAGES",
    "SpeechRecognitionService",
    "SttError",
    "SttErrorCode",
    "SttStatus",
    "split_transcripts",
    "stt_error_code",
]
