from fiveby_client.schemas.answer_question import AnswerQuestionRequest, QuestionAnsweredEventData
from fiveby_client.schemas.ask_question import AskQuestionRequest, QuestionAskedEventData
from fiveby_client.schemas.enums import (
    EventType,
    GuessDirection,
    QuestionGenerator,
    RevealedBy,
    SessionStatus,
    Topic,
)
from fiveby_client.schemas.guess_letter import GuessLetterRequest, LetterGuessedEventData
from fiveby_client.schemas.guess_word import GuessWordRequest, RevealedCell, WordGuessedEventData
from fiveby_client.schemas.health import HealthDb, HealthResponse
from fiveby_client.schemas.sessions import CreateSessionRequest
from fiveby_client.schemas.snapshot import CellSnapshot, LastEvent, PlayerSnapshot, SessionSnapshot
from fiveby_client.schemas.validation import (
    PayloadValidationError,
    ValidationIssue,
    ValidationResult,
    parse_payload,
    validate_payload,
)

__all__ = [
    "AnswerQuestionRequest",
    "AskQuestionRequest",
    "CellSnapshot",
    "CreateSessionRequest",
    "EventType",
    "GuessDirection",
    "GuessLetterRequest",
    "GuessWordRequest",
    "HealthDb",
    "HealthResponse",
    "LastEvent",
    "LetterGuessedEventData",
    "PayloadValidationError",
    "PlayerSnapshot",
    "QuestionAnsweredEventData",
    "QuestionAskedEventData",
    "QuestionGenerator",
    "RevealedBy",
    "RevealedCell",
    "SessionSnapshot",
    "SessionStatus",
    "Topic",
    "ValidationIssue",
    "ValidationResult",
    "WordGuessedEventData",
    "parse_payload",
    "validate_payload",
]
