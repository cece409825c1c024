from __future__ import annotations

from uuid import UUID

from fiveby_client.api import sessions as sessions_api
from fiveby_client.api.client import ApiClient
from fiveby_client.game.turn_actions import check_ask
from fiveby_client.schemas.ask_question import AskQuestionRequest
from fiveby_client.schemas.enums import Topic
from fiveby_client.services.session_snapshot import (
    ActionResult,
    commit_action_snapshot,
    current_snapshot,
    ensure_eligible,
)
from fiveby_client.state.session_store import SessionStore


async def ask_question(
    client: ApiClient,
    store: SessionStore,
    session_id: UUID,
    *,
    player_number: int,
    cell_index: int,
    topic: Topic | str,
) -> ActionResult:
    request = sessions_api.ensure_request(
        AskQuestionRequest,
        {"player_number": player_number, "cell_index": cell_index, "topic": topic},
    )
    assert isinstance(request, AskQuestionRequest)

    snapshot = current_snapshot(store, session_id)
    if snapshot is not None:
        ensure_eligible(
            check_ask(snapshot, request.player_number, request.cell_index, request.topic),
            action="ask",
            session_id=session_id,
            cell_index=request.cell_index,
            topic=request.topic.value,
        )

    updated = await sessions_api.ask_question(client, session_id, request)
    return commit_action_snapshot(store, updated, action="ask")


__all__ = ["ask_question"]
