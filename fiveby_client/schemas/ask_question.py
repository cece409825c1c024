from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr, model_validator

from fiveby_client.schemas.common import (
    CellIndex,
    GridCoordinate,
    NonEmptyString,
    PlayerNumber,
    ensure_coordinates_match,
)
from fiveby_client.schemas.enums import QuestionGenerator, Topic


class AskQuestionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    player_number: PlayerNumber
    cell_index: CellIndex
    topic: Topic


class QuestionAskedEventData(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    cell_index: CellIndex
    row: GridCoordinate
    col: GridCoordinate
    topic: Topic
    question_text: StrictStr = Field(min_length=1, max_length=500)
    answer: NonEmptyString
    acceptable_variants: list[NonEmptyString] = Field(min_length=1)
    generator: QuestionGenerator

    @model_validator(mode="after")
    def validate_coordinates(self) -> "QuestionAskedEventData":
        ensure_coordinates_match(self.cell_index, self.row, self.col)
        return self


__all__ = ["AskQuestionRequest", "QuestionAskedEventData"]
