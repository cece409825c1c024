from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_validator, model_validator

from fiveby_client.schemas.common import (
    CellIndex,
    GridCoordinate,
    PlayerNumber,
    UpperSingleLetter,
    ensure_coordinates_match,
    ensure_single_ascii_letter,
    normalize_upper_trimmed,
)


class GuessLetterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player_number: PlayerNumber
    cell_index: CellIndex
    letter: str

    @field_validator("letter", mode="before")
    @classmethod
    def normalize_letter(cls, value: object) -> str:
        if not isinstance(value, str):
            raise ValueError("letter must be a string")
        return normalize_upper_trimmed(value)

    @field_validator("letter")
    @classmethod
    def validate_letter(cls, value: str) -> str:
        return ensure_single_ascii_letter(value)


class LetterGuessedEventData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    cell_index: CellIndex
    row: GridCoordinate
    col: GridCoordinate
    guess: UpperSingleLetter
    correct: StrictBool
    revealed_letter: UpperSingleLetter | None
    score_delta: StrictInt
    opponent_score_delta: StrictInt
    locks_enqueued: list[CellIndex] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_payload(self) -> "LetterGuessedEventData":
        ensure_coordinates_match(self.cell_index, self.row, self.col)

        if self.correct and self.revealed_letter is None:
            raise ValueError("revealed_letter must be present when correct is true")

        if not self.correct and self.revealed_letter is not None:
            raise ValueError("revealed_letter must be null when correct is false")

        return self


__all__ = ["GuessLetterRequest", "LetterGuessedEventData"]
