from __future__ import annotations

import uuid
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)

from fiveby_client.core.constants import (
    CANONICAL_TOPICS,
    GRID_CELL_COUNT,
    MAX_TOPICS_PER_CELL,
    PLAYER_NUMBERS,
)
from fiveby_client.schemas.common import (
    CellIndex,
    GridCoordinate,
    PlayerNumber,
    UpperSingleLetter,
    ensure_coordinates_match,
)
from fiveby_client.schemas.enums import EventType, RevealedBy, SessionStatus, Topic


class CellSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: CellIndex
    row: GridCoordinate
    col: GridCoordinate
    revealed: StrictBool
    locked: StrictBool
    letter: UpperSingleLetter | None = None
    revealed_by: RevealedBy | None = None
    topics_used: list[Topic] = Field(default_factory=list)

    @field_validator("topics_used")
    @classmethod
    def validate_topics_used(cls, value: list[Topic]) -> list[Topic]:
        if len(value) > MAX_TOPICS_PER_CELL:
            raise ValueError("topics_used must have length <= 5")
        if len(set(value)) != len(value):
            raise ValueError("topics_used must not contain duplicates")
        return value

    @model_validator(mode="after")
    def validate_revealed_consistency(self) -> "CellSnapshot":
        ensure_coordinates_match(self.index, self.row, self.col)

        if not self.revealed:
            if self.letter is not None:
                raise ValueError("letter must be null when revealed is false")
            if self.revealed_by is not None:
                raise ValueError("revealed_by must be null when revealed is false")
            return self

        if self.letter is None:
            raise ValueError("letter must be set when revealed is true")
        return self

    @property
    def topics_exhausted(self) -> bool:
        return len(self.topics_used) >= MAX_TOPICS_PER_CELL


class PlayerSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_number: PlayerNumber
    name: StrictStr | None = None
    score: StrictInt
    grid_id: uuid.UUID
    completed: StrictBool
    cells: list[CellSnapshot] = Field(min_length=GRID_CELL_COUNT, max_length=GRID_CELL_COUNT)

    @field_validator("cells")
    @classmethod
    def validate_cells_cover_grid(cls, value: list[CellSnapshot]) -> list[CellSnapshot]:
        indexes = sorted(cell.index for cell in value)
        if indexes != list(range(GRID_CELL_COUNT)):
            raise ValueError("cells must contain each grid index exactly once (0..24)")
        return sorted(value, key=lambda cell: cell.index)

    def cell(self, cell_index: int) -> CellSnapshot:
        if not (0 <= cell_index < GRID_CELL_COUNT):
            raise IndexError(f"cell_index {cell_index} is outside the grid (0..24)")
        return self.cells[cell_index]

    @property
    def display_name(self) -> str:
        if self.name and self.name.strip():
            return self.name.strip()
        return f"Player {self.player_number}"


class LastEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: EventType
    created_at: StrictStr = Field(min_length=1)
    event_data: dict[str, Any]


class SessionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: uuid.UUID
    status: SessionStatus
    current_turn: PlayerNumber
    topics: list[Topic]
    players: list[PlayerSnapshot] = Field(min_length=2, max_length=2)
    last_event: LastEvent | None

    @field_validator("topics")
    @classmethod
    def validate_topics(cls, value: list[Topic]) -> list[Topic]:
        expected = [Topic(topic) for topic in CANONICAL_TOPICS]
        if value != expected:
            raise ValueError("topics must match CANONICAL_TOPICS in canonical order")
        return value

    @model_validator(mode="after")
    def validate_players(self) -> "SessionSnapshot":
        player_numbers = sorted(player.player_number for player in self.players)
        if player_numbers != list(PLAYER_NUMBERS):
            raise ValueError("players must contain exactly player 1 and player 2")
        if self.current_turn not in player_numbers:
            raise ValueError("current_turn must point to an existing player_number")
        return self

    def player(self, player_number: int) -> PlayerSnapshot:
        for player in self.players:
            if player.player_number == player_number:
                return player
        raise KeyError(player_number)

    @property
    def active_player(self) -> PlayerSnapshot:
        return self.player(self.current_turn)

    @property
    def is_in_progress(self) -> bool:
        return self.status == SessionStatus.IN_PROGRESS


__all__ = [
    "CellSnapshot",
    "LastEvent",
    "PlayerSnapshot",
    "SessionSnapshot",
]
