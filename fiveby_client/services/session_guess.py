from __future__ import annotations

from uuid import UUID

from fiveby_client.api import sessions as sessions_api
from fiveby_client.api.client import ApiClient
from fiveby_client.game.turn_actions import check_guess_letter, check_guess_word
from fiveby_client.schemas.enums import GuessDirection
from fiveby_client.schemas.guess_letter import GuessLetterRequest
from fiveby_client.schemas.guess_word import GuessWordRequest
from fiveby_client.services.session_snapshot import (
    ActionResult,
    commit_action_snapshot,
    current_snapshot,
    ensure_eligible,
)
from fiveby_client.state.session_store import SessionStore


async def guess_letter(
    client: ApiClient,
    store: SessionStore,
    session_id: UUID,
    *,
    player_number: int,
    cell_index: int,
    letter: str,
) -> ActionResult:
    request = sessions_api.ensure_request(
        GuessLetterRequest,
        {"player_number": player_number, "cell_index": cell_index, "letter": letter},
    )
    assert isinstance(request, GuessLetterRequest)

    snapshot = current_snapshot(store, session_id)
    if snapshot is not None:
        ensure_eligible(
            check_guess_letter(snapshot, request.player_number, request.cell_index),
            action="guess_letter",
            session_id=session_id,
            cell_index=request.cell_index,
        )

    updated = await sessions_api.guess_letter(client, session_id, request)
    return commit_action_snapshot(store, updated, action="guess_letter")


async def guess_word(
    client: ApiClient,
    store: SessionStore,
    session_id: UUID,
    *,
    player_number: int,
    direction: GuessDirection | str,
    index: int,
    word: str,
) -> ActionResult:
    request = sessions_api.ensure_request(
        GuessWordRequest,
        {"player_number": player_number, "direction": direction, "index": index, "word": word},
    )
    assert isinstance(request, GuessWordRequest)

    snapshot = current_snapshot(store, session_id)
    if snapshot is not None:
        ensure_eligible(
            check_guess_word(snapshot, request.player_number, request.direction.value, request.index),
            action="guess_word",
            session_id=session_id,
            direction=request.direction.value,
            index=request.index,
        )

    updated = await sessions_api.guess_word(client, session_id, request)
    return commit_action_snapshot(store, updated, action="guess_word")


__all__ = ["guess_letter", "guess_word"]
