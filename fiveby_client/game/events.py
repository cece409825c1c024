from __future__ import annotations

from dataclasses import dataclass
from typing import Union
from uuid import UUID

import structlog
from pydantic import BaseModel

from fiveby_client.game.grid import cell_label, format_cell_list, line_label
from fiveby_client.schemas.answer_question import QuestionAnsweredEventData
from fiveby_client.schemas.ask_question import QuestionAskedEventData
from fiveby_client.schemas.enums import EventType
from fiveby_client.schemas.guess_letter import LetterGuessedEventData
from fiveby_client.schemas.guess_word import WordGuessedEventData
from fiveby_client.schemas.snapshot import LastEvent, SessionSnapshot
from fiveby_client.schemas.validation import ValidationIssue, validate_payload

logger = structlog.get_logger(__name__)

EventData = Union[
    QuestionAskedEventData,
    QuestionAnsweredEventData,
    LetterGuessedEventData,
    WordGuessedEventData,
]

EVENT_DATA_SCHEMAS: dict[EventType, type[BaseModel]] = {
    EventType.QUESTION_ASKED: QuestionAskedEventData,
    EventType.QUESTION_ANSWERED: QuestionAnsweredEventData,
    EventType.LETTER_GUESSED: LetterGuessedEventData,
    EventType.WORD_GUESSED: WordGuessedEventData,
}


@dataclass(frozen=True)
class DecodedEvent:
    type: EventType
    created_at: str
    data: EventData


@dataclass(frozen=True)
class InvalidEventPayload:
    type: EventType
    created_at: str
    issues: tuple[ValidationIssue, ...]

    @property
    def paths(self) -> list[str]:
        return [issue.path for issue in self.issues]

    @property
    def message(self) -> str:
        return f"Received an incompatible {self.type.value} payload."


EventDecodeResult = Union[DecodedEvent, InvalidEventPayload]


@dataclass(frozen=True)
class EventKey:
    session_id: UUID
    created_at: str


def decode_last_event(last_event: LastEvent | None) -> EventDecodeResult | None:
    if last_event is None:
        return None

    schema = EVENT_DATA_SCHEMAS[last_event.type]
    result = validate_payload(schema, last_event.event_data)
    if result.error is not None:
        logger.warning(
            "event_payload_invalid",
            event_type=last_event.type.value,
            created_at=last_event.created_at,
            paths=result.error.paths,
        )
        return InvalidEventPayload(
            type=last_event.type,
            created_at=last_event.created_at,
            issues=tuple(result.error.issues),
        )

    return DecodedEvent(
        type=last_event.type,
        created_at=last_event.created_at,
        data=result.value,  # type: ignore[arg-type]
    )


def decode_snapshot_event(snapshot: SessionSnapshot) -> EventDecodeResult | None:
    return decode_last_event(snapshot.last_event)


def latest_question(snapshot: SessionSnapshot) -> QuestionAskedEventData | None:
    decoded = decode_snapshot_event(snapshot)
    if isinstance(decoded, DecodedEvent) and isinstance(decoded.data, QuestionAskedEventData):
        return decoded.data
    return None


def event_key(snapshot: SessionSnapshot | None) -> EventKey | None:
    if snapshot is None or snapshot.last_event is None:
        return None
    return EventKey(session_id=snapshot.session_id, created_at=snapshot.last_event.created_at)


class EventTracker:
    """Remembers the last event seen so side effects fire once per event."""

    def __init__(self) -> None:
        self._last_key: EventKey | None = None

    @property
    def last_key(self) -> EventKey | None:
        return self._last_key

    def is_new(self, snapshot: SessionSnapshot) -> bool:
        key = event_key(snapshot)
        return key is not None and key != self._last_key

    def observe(self, snapshot: SessionSnapshot) -> EventDecodeResult | None:
        if not self.is_new(snapshot):
            return None
        self._last_key = event_key(snapshot)
        return decode_snapshot_event(snapshot)

    def prime(self, snapshot: SessionSnapshot | None) -> None:
        self._last_key = event_key(snapshot)

    def reset(self) -> None:
        self._last_key = None


def _describe_question_asked(data: QuestionAskedEventData) -> list[str]:
    return [
        f"Asked {data.topic.value} for {cell_label(data.cell_index)}.",
        f"Question: {data.question_text}",
    ]


def _describe_question_answered(data: QuestionAnsweredEventData) -> list[str]:
    lines = [f"Correct - revealed {data.revealed_letter}." if data.correct else "Incorrect."]
    if data.lock_cleared_cell_index is not None:
        lines.append(f"Cleared a lock on {cell_label(data.lock_cleared_cell_index)}.")
    return lines


def _describe_letter_guessed(data: LetterGuessedEventData) -> list[str]:
    if data.correct:
        return [f"Correct! Revealed {data.revealed_letter}."]
    return [
        f"Wrong letter. {data.score_delta:+d} to you, {data.opponent_score_delta:+d} to opponent.",
        f"Locked: {format_cell_list(data.locks_enqueued)}.",
    ]


def _describe_word_guessed(data: WordGuessedEventData) -> list[str]:
    target = line_label(data.direction, data.index)
    if data.correct:
        lines = [f"Correct! {target} revealed as {data.guess}."]
        if data.auto_reveals:
            lines.append(f"Auto-revealed {len(data.auto_reveals)}.")
        return lines
    return [
        f"Wrong word for {target}. {data.score_delta:+d}/{data.opponent_score_delta:+d}"
        f" and locked {len(data.locks_enqueued)} cells.",
    ]


def describe_outcome(result: EventDecodeResult) -> list[str]:
    if isinstance(result, InvalidEventPayload):
        return [result.message]

    data = result.data
    if isinstance(data, QuestionAskedEventData):
        return _describe_question_asked(data)
    if isinstance(data, QuestionAnsweredEventData):
        return _describe_question_answered(data)
    if isinstance(data, LetterGuessedEventData):
        return _describe_letter_guessed(data)
    return _describe_word_guessed(data)


__all__ = [
    "DecodedEvent",
    "EVENT_DATA_SCHEMAS",
    "EventData",
    "EventDecodeResult",
    "EventKey",
    "EventTracker",
    "InvalidEventPayload",
    "decode_last_event",
    "decode_snapshot_event",
    "describe_outcome",
    "event_key",
    "latest_question",
]
