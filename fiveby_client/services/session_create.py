from __future__ import annotations

import structlog

from fiveby_client.api import sessions as sessions_api
from fiveby_client.api.client import ApiClient
from fiveby_client.schemas.sessions import CreateSessionRequest
from fiveby_client.services.session_snapshot import ActionResult, commit_action_snapshot
from fiveby_client.state.session_store import SessionStore

logger = structlog.get_logger(__name__)


async def create_and_hydrate(
    client: ApiClient,
    store: SessionStore,
    *,
    player_1_name: str | None = None,
    player_2_name: str | None = None,
) -> ActionResult:
    request = sessions_api.ensure_request(
        CreateSessionRequest,
        {"player_1_name": player_1_name, "player_2_name": player_2_name},
    )
    snapshot = await sessions_api.create_session(client, request)
    logger.info("session_created", session_id=str(snapshot.session_id))
    return commit_action_snapshot(store, snapshot, action="create")


__all__ = ["create_and_hydrate"]
