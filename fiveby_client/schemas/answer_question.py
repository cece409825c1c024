from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StrictBool, StringConstraints, model_validator

from fiveby_client.core.constants import ANSWER_MAX_LENGTH
from fiveby_client.schemas.common import (
    CellIndex,
    GridCoordinate,
    NonEmptyString,
    PlayerNumber,
    UpperSingleLetter,
    ensure_coordinates_match,
)
from fiveby_client.schemas.enums import Topic


class AnswerQuestionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player_number: PlayerNumber
    answer: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=ANSWER_MAX_LENGTH)]


class QuestionAnsweredEventData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    cell_index: CellIndex
    row: GridCoordinate
    col: GridCoordinate
    topic: Topic
    answer: NonEmptyString
    correct: StrictBool
    revealed_letter: UpperSingleLetter | None
    lock_cleared_cell_index: CellIndex | None

    @model_validator(mode="after")
    def validate_correctness_fields(self) -> "QuestionAnsweredEventData":
        ensure_coordinates_match(self.cell_index, self.row, self.col)

        if self.correct and self.revealed_letter is None:
            raise ValueError("revealed_letter must be provided when correct is true")

        if not self.correct and self.revealed_letter is not None:
            raise ValueError("revealed_letter must be null when correct is false")

        return self


__all__ = ["AnswerQuestionRequest", "QuestionAnsweredEventData"]
