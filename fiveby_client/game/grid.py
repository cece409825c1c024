from __future__ import annotations

from fiveby_client.core.constants import GRID_CELL_COUNT, GRID_SIDE_LENGTH


def cell_index_from_row_col(row: int, col: int) -> int:
    if not (0 <= row < GRID_SIDE_LENGTH):
        raise ValueError("row must be between 0 and 4")
    if not (0 <= col < GRID_SIDE_LENGTH):
        raise ValueError("col must be between 0 and 4")
    return (row * GRID_SIDE_LENGTH) + col


def row_col_from_cell_index(cell_index: int) -> tuple[int, int]:
    if not (0 <= cell_index < GRID_CELL_COUNT):
        raise ValueError("cell_index must be between 0 and 24")
    return divmod(cell_index, GRID_SIDE_LENGTH)


def line_cell_indexes(direction: str, index: int) -> list[int]:
    if not (0 <= index < GRID_SIDE_LENGTH):
        raise ValueError("index must be between 0 and 4")

    if direction == "across":
        return [cell_index_from_row_col(index, col) for col in range(GRID_SIDE_LENGTH)]
    if direction == "down":
        return [cell_index_from_row_col(row, index) for row in range(GRID_SIDE_LENGTH)]
    raise ValueError("direction must be either 'across' or 'down'")


def display_position(cell_index: int) -> tuple[int, int]:
    row, col = row_col_from_cell_index(cell_index)
    return row + 1, col + 1


def cell_label(cell_index: int) -> str:
    row, col = display_position(cell_index)
    return f"row {row}, col {col}"


def short_cell_label(cell_index: int) -> str:
    row, col = display_position(cell_index)
    return f"r{row}c{col}"


def line_label(direction: str, index: int) -> str:
    if direction == "across":
        return f"Row {index + 1}"
    return f"Col {index + 1}"


def format_cell_list(cell_indexes: list[int]) -> str:
    if not cell_indexes:
        return "None"
    return ", ".join(short_cell_label(cell_index) for cell_index in cell_indexes)


__all__ = [
    "cell_index_from_row_col",
    "cell_label",
    "display_position",
    "format_cell_list",
    "line_cell_indexes",
    "line_label",
    "row_col_from_cell_index",
    "short_cell_label",
]
