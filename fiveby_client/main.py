from __future__ import annotations

from functools import partial
from types import TracebackType
from uuid import UUID

import httpx
import structlog

from fiveby_client.api.client import ApiClient
from fiveby_client.api.errors import ApiClientError, ApiErrorCode
from fiveby_client.api.health import get_health
from fiveby_client.api.sessions import get_session_snapshot
from fiveby_client.core.config import Settings, get_settings
from fiveby_client.core.routing import parse_session_id_input
from fiveby_client.game.events import EventTracker, latest_question
from fiveby_client.game.scope import TurnScope
from fiveby_client.schemas.enums import GuessDirection, Topic
from fiveby_client.schemas.health import HealthResponse
from fiveby_client.services import session_answer, session_ask, session_create, session_guess
from fiveby_client.services.session_snapshot import ActionResult
from fiveby_client.state.poller import SnapshotPoller
from fiveby_client.state.session_store import SessionStore, SessionStoreState
from fiveby_client.voice.announcer import QuestionAnnouncer
from fiveby_client.voice.stt import RecognitionEngine, SpeechRecognitionService
from fiveby_client.voice.tts import SpeechSynthesisService, SynthesisEngine

logger = structlog.get_logger(__name__)


class FiveByApp:
    """Application root: owns the client, the store and every long-lived service."""

    def __init__(
        self,
        client: ApiClient,
        *,
        poll_interval_seconds: float,
        speech_lang: str,
        tts_start_timeout_seconds: float,
        recognition_engine: RecognitionEngine | None = None,
        synthesis_engine: SynthesisEngine | None = None,
    ) -> None:
        self.client = client
        self.store = SessionStore(partial(get_session_snapshot, client))
        self.poller = SnapshotPoller(self.store, poll_interval_seconds)
        self.tracker = EventTracker()
        self.scope = TurnScope()
        self.recognition = SpeechRecognitionService(recognition_engine, lang=speech_lang)
        self.synthesis = SpeechSynthesisService(
            synthesis_engine,
            lang=speech_lang,
            start_timeout_seconds=tts_start_timeout_seconds,
        )
        self.announcer = QuestionAnnouncer(self.synthesis)
        self._unsubscribe = self.store.subscribe(self._on_store_change)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        recognition_engine: RecognitionEngine | None = None,
        synthesis_engine: SynthesisEngine | None = None,
    ) -> "FiveByApp":
        settings = settings or get_settings()
        return cls(
            ApiClient.from_settings(settings, transport=transport),
            poll_interval_seconds=settings.poll_interval_seconds,
            speech_lang=settings.speech_lang,
            tts_start_timeout_seconds=settings.tts_start_timeout_seconds,
            recognition_engine=recognition_engine,
            synthesis_engine=synthesis_engine,
        )

    async def __aenter__(self) -> "FiveByApp":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    @property
    def state(self) -> SessionStoreState:
        return self.store.state

    @property
    def session_id(self) -> UUID | None:
        return self.store.state.session_id

    async def check_health(self) -> HealthResponse:
        return await get_health(self.client)

    async def open_session(self, session_id_or_link: UUID | str, *, poll: bool = True) -> SessionStoreState:
        session_id = (
            session_id_or_link
            if isinstance(session_id_or_link, UUID)
            else parse_session_id_input(session_id_or_link)
        )
        if session_id is None:
            raise ApiClientError(
                status_code=0,
                code=ApiErrorCode.INVALID_REQUEST,
                message="Enter a valid session id or link.",
            )

        if session_id != self.session_id:
            self._reset_session_scope()

        state = await self.store.load_session(session_id)
        self.tracker.prime(state.snapshot)
        self.announcer.prime(state.snapshot)
        if poll:
            self.poller.start()
        return state

    async def create_game(
        self,
        *,
        player_1_name: str | None = None,
        player_2_name: str | None = None,
        poll: bool = True,
    ) -> ActionResult:
        self._reset_session_scope()
        result = await session_create.create_and_hydrate(
            self.client,
            self.store,
            player_1_name=player_1_name,
            player_2_name=player_2_name,
        )
        self.tracker.prime(result.snapshot)
        self.announcer.prime(result.snapshot)
        if poll:
            self.poller.start()
        return result

    async def ask(self, *, player_number: int, cell_index: int, topic: Topic | str) -> ActionResult:
        result = await session_ask.ask_question(
            self.client,
            self.store,
            self._require_session_id(),
            player_number=player_number,
            cell_index=cell_index,
            topic=topic,
        )
        await self.announcer.announce(result.snapshot)
        return result

    async def repeat_question(self) -> bool:
        """Read the pending question aloud again; returns False when there is none."""
        snapshot = self.store.snapshot
        question = latest_question(snapshot) if snapshot is not None else None
        if question is None:
            return False
        await self.synthesis.speak(question.question_text)
        return True

    async def answer(self, *, player_number: int, answer: str) -> ActionResult:
        return await session_answer.submit_answer(
            self.client,
            self.store,
            self._require_session_id(),
            player_number=player_number,
            answer=answer,
        )

    async def guess_letter(self, *, player_number: int, cell_index: int, letter: str) -> ActionResult:
        return await session_guess.guess_letter(
            self.client,
            self.store,
            self._require_session_id(),
            player_number=player_number,
            cell_index=cell_index,
            letter=letter,
        )

    async def guess_word(
        self,
        *,
        player_number: int,
        direction: GuessDirection | str,
        index: int,
        word: str,
    ) -> ActionResult:
        return await session_guess.guess_word(
            self.client,
            self.store,
            self._require_session_id(),
            player_number=player_number,
            direction=direction,
            index=index,
            word=word,
        )

    async def close_session(self) -> None:
        await self.poller.stop()
        self.recognition.stop()
        self.synthesis.stop()
        self.store.clear()
        self._reset_session_scope()

    async def aclose(self) -> None:
        await self.close_session()
        self._unsubscribe()
        await self.client.aclose()

    def _require_session_id(self) -> UUID:
        session_id = self.session_id
        if session_id is None:
            raise ApiClientError(
                status_code=0,
                code=ApiErrorCode.INVALID_REQUEST,
                message="No session is open.",
            )
        return session_id

    def _reset_session_scope(self) -> None:
        self.tracker.reset()
        self.announcer.prime(None)
        self.scope.clear()

    def _on_store_change(self, state: SessionStoreState) -> None:
        if state.snapshot is None:
            return
        if self.scope.sync(state.snapshot):
            # Any in-progress capture belongs to the previous turn.
            self.recognition.stop()
            logger.debug(
                "turn_scope_reset",
                session_id=str(state.snapshot.session_id),
                created_at=self.scope.key[1] if self.scope.key else None,
            )


__all__ = ["FiveByApp"]
