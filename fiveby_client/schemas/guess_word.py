from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator, model_validator

from fiveby_client.game.grid import line_cell_indexes
from fiveby_client.schemas.common import (
    CellIndex,
    GridCoordinate,
    LineIndex,
    PlayerNumber,
    UpperFiveLetterWord,
    UpperSingleLetter,
    ensure_coordinates_match,
    ensure_five_ascii_letters,
    normalize_upper_trimmed,
)
from fiveby_client.schemas.enums import GuessDirection


class GuessWordRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player_number: PlayerNumber
    direction: GuessDirection
    index: LineIndex
    word: str

    @field_validator("word", mode="before")
    @classmethod
    def normalize_word(cls, value: object) -> str:
        if not isinstance(value, str):
            raise ValueError("word must be a string")
        return normalize_upper_trimmed(value)

    @field_validator("word")
    @classmethod
    def validate_word(cls, value: str) -> str:
        return ensure_five_ascii_letters(value)


class RevealedCell(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    cell_index: CellIndex
    row: GridCoordinate
    col: GridCoordinate
    letter: UpperSingleLetter

    @model_validator(mode="after")
    def validate_coordinates(self) -> "RevealedCell":
        ensure_coordinates_match(self.cell_index, self.row, self.col)
        return self


class WordGuessedEventData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    direction: GuessDirection
    index: LineIndex
    guess: UpperFiveLetterWord
    correct: StrictBool
    score_delta: StrictInt
    opponent_score_delta: StrictInt
    revealed_cells: list[RevealedCell] = Field(default_factory=list)
    auto_reveals: list[RevealedCell] = Field(default_factory=list)
    locks_enqueued: list[CellIndex] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_payload(self) -> "WordGuessedEventData":
        target_indexes = set(line_cell_indexes(self.direction, self.index))
        if any(cell.cell_index not in target_indexes for cell in self.revealed_cells):
            raise ValueError("revealed_cells must belong to the guessed word")

        if not self.correct and (self.revealed_cells or self.auto_reveals):
            raise ValueError("an incorrect guess must not reveal any cells")

        return self


__all__ = ["GuessWordRequest", "RevealedCell", "WordGuessedEventData"]
