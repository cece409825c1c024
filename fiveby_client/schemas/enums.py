from __future__ import annotations

import enum


class Topic(str, enum.Enum):
    POLITICS = "Politics"
    SCIENCE = "Science"
    HISTORY = "History"
    ART = "Art"
    CURRENT_AFFAIRS = "Current Affairs"


class SessionStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class RevealedBy(str, enum.Enum):
    QUESTION = "question"
    GUESS = "guess"
    AUTO = "auto"


class EventType(str, enum.Enum):
    QUESTION_ASKED = "question_asked"
    QUESTION_ANSWERED = "question_answered"
    LETTER_GUESSED = "letter_guessed"
    WORD_GUESSED = "word_guessed"


class GuessDirection(str, enum.Enum):
    ACROSS = "across"
    DOWN = "down"


class QuestionGenerator(str, enum.Enum):
    STUB_V1 = "stub_v1"
    OPENAI_RESPONSES_V1 = "openai_responses_v1"


TOPIC_VALUES = {member.value for member in Topic}


__all__ = [
    "EventType",
    "GuessDirection",
    "QuestionGenerator",
    "RevealedBy",
    "SessionStatus",
    "TOPIC_VALUES",
    "Topic",
]
