from __future__ import annotations

import re
from typing import Annotated

from pydantic import Field, StrictInt, StrictStr, StringConstraints

from fiveby_client.core.constants import GRID_CELL_COUNT, GRID_SIDE_LENGTH

_SINGLE_LETTER_RE = re.compile(r"^[A-Z]$")
_FIVE_LETTER_RE = re.compile(r"^[A-Z]{5}$")

CellIndex = Annotated[StrictInt, Field(ge=0, le=GRID_CELL_COUNT - 1)]
GridCoordinate = Annotated[StrictInt, Field(ge=0, le=GRID_SIDE_LENGTH - 1)]
LineIndex = Annotated[StrictInt, Field(ge=0, le=GRID_SIDE_LENGTH - 1)]
PlayerNumber = Annotated[StrictInt, Field(ge=1, le=2)]
NonEmptyString = Annotated[StrictStr, StringConstraints(min_length=1)]
UpperSingleLetter = Annotated[StrictStr, StringConstraints(pattern=r"^[A-Z]$")]
UpperFiveLetterWord = Annotated[StrictStr, StringConstraints(pattern=r"^[A-Z]{5}$")]


def normalize_trimmed(value: str) -> str:
    return value.strip()


def normalize_upper_trimmed(value: str) -> str:
    return normalize_trimmed(value).upper()


def ensure_single_ascii_letter(value: str) -> str:
    if not _SINGLE_LETTER_RE.fullmatch(value):
        raise ValueError("must be exactly one letter A-Z")
    return value


def ensure_five_ascii_letters(value: str) -> str:
    if not _FIVE_LETTER_RE.fullmatch(value):
        raise ValueError("must be exactly five letters A-Z")
    return value


def ensure_coordinates_match(cell_index: int, row: int, col: int) -> None:
    if row != cell_index // GRID_SIDE_LENGTH:
        raise ValueError("row must equal cell_index // 5")
    if col != cell_index % GRID_SIDE_LENGTH:
        raise ValueError("col must equal cell_index % 5")


__all__ = [
    "CellIndex",
    "GridCoordinate",
    "LineIndex",
    "NonEmptyString",
    "PlayerNumber",
    "UpperFiveLetterWord",
    "UpperSingleLetter",
    "ensure_coordinates_match",
    "ensure_five_ascii_letters",
    "ensure_single_ascii_letter",
    "normalize_trimmed",
    "normalize_upper_trimmed",
]
