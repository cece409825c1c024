from __future__ import annotations

from uuid import UUID

from fiveby_client.api import sessions as sessions_api
from fiveby_client.api.client import ApiClient
from fiveby_client.game.turn_actions import check_answer
from fiveby_client.schemas.answer_question import AnswerQuestionRequest
from fiveby_client.services.session_snapshot import (
    ActionResult,
    commit_action_snapshot,
    current_snapshot,
    ensure_eligible,
)
from fiveby_client.state.session_store import SessionStore


async def submit_answer(
    client: ApiClient,
    store: SessionStore,
    session_id: UUID,
    *,
    player_number: int,
    answer: str,
) -> ActionResult:
    request = sessions_api.ensure_request(
        AnswerQuestionRequest,
        {"player_number": player_number, "answer": answer},
    )
    assert isinstance(request, AnswerQuestionRequest)

    snapshot = current_snapshot(store, session_id)
    if snapshot is not None:
        ensure_eligible(
            check_answer(snapshot, request.player_number),
            action="answer",
            session_id=session_id,
        )

    updated = await sessions_api.answer_question(client, session_id, request)
    return commit_action_snapshot(store, updated, action="answer")


__all__ = ["submit_answer"]
