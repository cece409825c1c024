from __future__ import annotations

import structlog

from fiveby_client.game.events import DecodedEvent, EventTracker
from fiveby_client.schemas.ask_question import QuestionAskedEventData
from fiveby_client.schemas.snapshot import SessionSnapshot
from fiveby_client.voice.tts import SpeechSynthesisError, SpeechSynthesisService

logger = structlog.get_logger(__name__)


class QuestionAnnouncer:
    """Reads each newly asked question aloud exactly once."""

    def __init__(self, synthesis: SpeechSynthesisService, tracker: EventTracker | None = None) -> None:
        self._synthesis = synthesis
        self._tracker = tracker or EventTracker()

    def prime(self, snapshot: SessionSnapshot | None) -> None:
        self._tracker.prime(snapshot)

    async def announce(self, snapshot: SessionSnapshot) -> bool:
        decoded = self._tracker.observe(snapshot)
        if not isinstance(decoded, DecodedEvent) or not isinstance(decoded.data, QuestionAskedEventData):
            return False
        if not self._synthesis.is_supported:
            return False

        try:
            await self._synthesis.speak(decoded.data.question_text)
        except SpeechSynthesisError as exc:
            logger.warning("question_announce_failed", created_at=decoded.created_at, error=str(exc))
            return False
        return True


__all__ = ["QuestionAnnouncer"]
