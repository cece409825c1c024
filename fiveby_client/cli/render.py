from __future__ import annotations

from fiveby_client.core.constants import GRID_SIDE_LENGTH
from fiveby_client.core.routing import session_over_route, session_route
from fiveby_client.game.events import EventDecodeResult, describe_outcome
from fiveby_client.game.grid import cell_index_from_row_col
from fiveby_client.game.turn_actions import locked_cell_indexes
from fiveby_client.schemas.enums import SessionStatus
from fiveby_client.schemas.health import HealthResponse
from fiveby_client.schemas.snapshot import CellSnapshot, PlayerSnapshot, SessionSnapshot

HIDDEN_MARK = "."
LOCKED_MARK = "#"


def render_cell(cell: CellSnapshot) -> str:
    if cell.revealed and cell.letter:
        return cell.letter
    if cell.locked:
        return LOCKED_MARK
    return HIDDEN_MARK


def render_grid(player: PlayerSnapshot) -> list[str]:
    header = "    " + " ".join(str(col + 1) for col in range(GRID_SIDE_LENGTH))
    lines = [header]
    for row in range(GRID_SIDE_LENGTH):
        cells = [
            render_cell(player.cell(cell_index_from_row_col(row, col)))
            for col in range(GRID_SIDE_LENGTH)
        ]
        lines.append(f" {row + 1}  " + " ".join(cells))
    return lines


def render_player(player: PlayerSnapshot, *, is_turn: bool) -> list[str]:
    marker = " <- turn" if is_turn else ""
    lines = [f"{player.display_name} (Player {player.player_number}) score {player.score}{marker}"]
    lines.extend(render_grid(player))
    locked = locked_cell_indexes(player)
    if locked:
        lines.append(f"    locked cells: {len(locked)}")
    return lines


def render_snapshot(snapshot: SessionSnapshot) -> str:
    lines = [f"Session {snapshot.session_id} [{snapshot.status.value}]"]
    if snapshot.status == SessionStatus.COMPLETE:
        lines.append(f"Game over: {session_over_route(snapshot.session_id)}")
    else:
        lines.append(f"Link: {session_route(snapshot.session_id)}")
        lines.append(f"Turn: {snapshot.active_player.display_name}")

    for player in snapshot.players:
        lines.append("")
        is_turn = snapshot.is_in_progress and player.player_number == snapshot.current_turn
        lines.extend(render_player(player, is_turn=is_turn))

    return "\n".join(lines)


def render_outcome(result: EventDecodeResult | None) -> str:
    if result is None:
        return "No events yet."
    return "\n".join(describe_outcome(result))


def render_health(health: HealthResponse) -> str:
    return f"{health.service}: {health.status} (db {health.db.status})"


__all__ = [
    "render_cell",
    "render_grid",
    "render_health",
    "render_outcome",
    "render_player",
    "render_snapshot",
]
