"""Client-side legality checks for the four turn actions.

Everything here is a pure function of a validated snapshot. The backend stays
authoritative; these checks only let callers skip requests that are certain
to be rejected, and feed the view with eligibility data.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from fiveby_client.core.constants import GRID_CELL_COUNT, GRID_SIDE_LENGTH
from fiveby_client.game.grid import line_cell_indexes, line_label
from fiveby_client.schemas.enums import EventType, GuessDirection, Topic
from fiveby_client.schemas.snapshot import CellSnapshot, PlayerSnapshot, SessionSnapshot

DEFAULT_PLACEHOLDER = "_"
_NON_LETTER_RE = re.compile(r"[^A-Za-z]")
_DIRECTIONS = frozenset(direction.value for direction in GuessDirection)


class IneligibleReason(str, enum.Enum):
    SESSION_NOT_IN_PROGRESS = "session_not_in_progress"
    OUT_OF_TURN = "out_of_turn"
    NO_PENDING_QUESTION = "no_pending_question"
    CELL_ALREADY_REVEALED = "cell_already_revealed"
    CELL_LOCKED = "cell_locked"
    TOPIC_ALREADY_USED = "topic_already_used"
    TOPICS_EXHAUSTED = "topics_exhausted"
    WORD_ALREADY_REVEALED = "word_already_revealed"
    WORD_LOCKED = "word_locked"
    INVALID_TARGET = "invalid_target"


@dataclass(frozen=True)
class Eligibility:
    eligible: bool
    reason: IneligibleReason | None = None

    @classmethod
    def blocked(cls, reason: IneligibleReason) -> "Eligibility":
        return cls(eligible=False, reason=reason)


ELIGIBLE = Eligibility(eligible=True)


@dataclass(frozen=True)
class WordTarget:
    direction: GuessDirection
    index: int
    cell_indexes: tuple[int, ...]
    eligibility: Eligibility

    @property
    def label(self) -> str:
        return line_label(self.direction, self.index)


class TranscriptField(str, enum.Enum):
    ANSWER = "answer"
    LETTER = "letter"
    WORD = "word"


def turn_eligibility(snapshot: SessionSnapshot, player_number: int) -> Eligibility:
    if not snapshot.is_in_progress:
        return Eligibility.blocked(IneligibleReason.SESSION_NOT_IN_PROGRESS)
    if player_number != snapshot.current_turn:
        return Eligibility.blocked(IneligibleReason.OUT_OF_TURN)
    return ELIGIBLE


def has_pending_question(snapshot: SessionSnapshot) -> bool:
    return snapshot.last_event is not None and snapshot.last_event.type == EventType.QUESTION_ASKED


def ask_eligibility(cell: CellSnapshot, topic: Topic) -> Eligibility:
    # Locks only block guesses; a locked cell can still be asked about.
    if cell.revealed:
        return Eligibility.blocked(IneligibleReason.CELL_ALREADY_REVEALED)
    if cell.topics_exhausted:
        return Eligibility.blocked(IneligibleReason.TOPICS_EXHAUSTED)
    if topic in cell.topics_used:
        return Eligibility.blocked(IneligibleReason.TOPIC_ALREADY_USED)
    return ELIGIBLE


def is_cell_askable(cell: CellSnapshot) -> bool:
    return not cell.revealed and not cell.topics_exhausted


def askable_topics(cell: CellSnapshot) -> list[Topic]:
    if cell.revealed:
        return []
    return [topic for topic in Topic if topic not in cell.topics_used]


def letter_guess_eligibility(cell: CellSnapshot) -> Eligibility:
    if cell.revealed:
        return Eligibility.blocked(IneligibleReason.CELL_ALREADY_REVEALED)
    if cell.locked:
        return Eligibility.blocked(IneligibleReason.CELL_LOCKED)
    return ELIGIBLE


def is_valid_cell_index(cell_index: int) -> bool:
    return 0 <= cell_index < GRID_CELL_COUNT


def is_valid_word_target(direction: GuessDirection | str, index: int) -> bool:
    return direction in _DIRECTIONS and 0 <= index < GRID_SIDE_LENGTH


def word_cell_indexes(direction: GuessDirection | str, index: int) -> list[int]:
    """Cells covered by a word target; empty when the target is off the grid."""
    if not is_valid_word_target(direction, index):
        return []
    return line_cell_indexes(direction, index)


def word_guess_eligibility(player: PlayerSnapshot, direction: GuessDirection | str, index: int) -> Eligibility:
    if not is_valid_word_target(direction, index):
        return Eligibility.blocked(IneligibleReason.INVALID_TARGET)

    cells = [player.cell(cell_index) for cell_index in word_cell_indexes(direction, index)]

    if all(cell.revealed for cell in cells):
        return Eligibility.blocked(IneligibleReason.WORD_ALREADY_REVEALED)

    # A lock placed on a cell that has since been revealed no longer matters.
    if any(cell.locked and not cell.revealed for cell in cells):
        return Eligibility.blocked(IneligibleReason.WORD_LOCKED)

    return ELIGIBLE


def word_target_options(player: PlayerSnapshot, direction: GuessDirection) -> list[WordTarget]:
    return [
        WordTarget(
            direction=direction,
            index=index,
            cell_indexes=tuple(word_cell_indexes(direction, index)),
            eligibility=word_guess_eligibility(player, direction, index),
        )
        for index in range(GRID_SIDE_LENGTH)
    ]


def first_eligible_word_index(
    player: PlayerSnapshot,
    direction: GuessDirection,
    preferred_index: int | None = None,
) -> int | None:
    options = word_target_options(player, direction)

    if (
        preferred_index is not None
        and 0 <= preferred_index < len(options)
        and options[preferred_index].eligibility.eligible
    ):
        return preferred_index

    for option in options:
        if option.eligibility.eligible:
            return option.index
    return None


def word_pattern(
    player: PlayerSnapshot,
    direction: GuessDirection | str,
    index: int,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> str:
    parts: list[str] = []
    for cell_index in word_cell_indexes(direction, index):
        cell = player.cell(cell_index)
        parts.append(cell.letter if cell.revealed and cell.letter else placeholder)
    return "".join(parts)


def locked_cell_indexes(player: PlayerSnapshot) -> list[int]:
    return [cell.index for cell in player.cells if cell.locked and not cell.revealed]


def check_ask(snapshot: SessionSnapshot, player_number: int, cell_index: int, topic: Topic) -> Eligibility:
    turn = turn_eligibility(snapshot, player_number)
    if not turn.eligible:
        return turn
    if not is_valid_cell_index(cell_index):
        return Eligibility.blocked(IneligibleReason.INVALID_TARGET)
    return ask_eligibility(snapshot.player(player_number).cell(cell_index), topic)


def check_answer(snapshot: SessionSnapshot, player_number: int) -> Eligibility:
    turn = turn_eligibility(snapshot, player_number)
    if not turn.eligible:
        return turn
    if not has_pending_question(snapshot):
        return Eligibility.blocked(IneligibleReason.NO_PENDING_QUESTION)
    return ELIGIBLE


def check_guess_letter(snapshot: SessionSnapshot, player_number: int, cell_index: int) -> Eligibility:
    turn = turn_eligibility(snapshot, player_number)
    if not turn.eligible:
        return turn
    if not is_valid_cell_index(cell_index):
        return Eligibility.blocked(IneligibleReason.INVALID_TARGET)
    return letter_guess_eligibility(snapshot.player(player_number).cell(cell_index))


def check_guess_word(
    snapshot: SessionSnapshot,
    player_number: int,
    direction: GuessDirection | str,
    index: int,
) -> Eligibility:
    turn = turn_eligibility(snapshot, player_number)
    if not turn.eligible:
        return turn
    return word_guess_eligibility(snapshot.player(player_number), direction, index)


def transcript_to_field(field: TranscriptField, transcript: str) -> str:
    if field == TranscriptField.WORD:
        return _NON_LETTER_RE.sub("", transcript)
    return transcript.strip()


__all__ = [
    "DEFAULT_PLACEHOLDER",
    "ELIGIBLE",
    "Eligibility",
    "IneligibleReason",
    "TranscriptField",
    "WordTarget",
    "ask_eligibility",
    "askable_topics",
    "check_answer",
    "check_ask",
    "check_guess_letter",
    "check_guess_word",
    "first_eligible_word_index",
    "has_pending_question",
    "is_cell_askable",
    "is_valid_cell_index",
    "is_valid_word_target",
    "letter_guess_eligibility",
    "locked_cell_indexes",
    "transcript_to_field",
    "turn_eligibility",
    "word_cell_indexes",
    "word_guess_eligibility",
    "word_pattern",
    "word_target_options",
]
