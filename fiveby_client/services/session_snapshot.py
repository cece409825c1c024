from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID

import structlog

from fiveby_client.api.errors import ActionRejectedError
from fiveby_client.game.events import EventDecodeResult, decode_snapshot_event
from fiveby_client.game.turn_actions import Eligibility
from fiveby_client.schemas.snapshot import SessionSnapshot
from fiveby_client.state.session_store import SessionStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ActionResult:
    snapshot: SessionSnapshot
    event: EventDecodeResult | None


def current_snapshot(store: SessionStore, session_id: UUID) -> SessionSnapshot | None:
    snapshot = store.snapshot
    if snapshot is None or snapshot.session_id != session_id:
        return None
    return snapshot


def ensure_eligible(eligibility: Eligibility, *, action: str, session_id: UUID, **context: Any) -> None:
    if eligibility.eligible or eligibility.reason is None:
        return

    logger.info(
        "action_rejected_locally",
        action=action,
        session_id=str(session_id),
        reason=eligibility.reason.value,
        **context,
    )
    raise ActionRejectedError(eligibility.reason.value, details=context or None)


def commit_action_snapshot(store: SessionStore, snapshot: SessionSnapshot, *, action: str) -> ActionResult:
    store.apply_snapshot(snapshot)
    event = decode_snapshot_event(snapshot)
    logger.info(
        "action_applied",
        action=action,
        session_id=str(snapshot.session_id),
        event_type=snapshot.last_event.type.value if snapshot.last_event is not None else None,
        current_turn=snapshot.current_turn,
        status=snapshot.status.value,
    )
    return ActionResult(snapshot=snapshot, event=event)


__all__ = ["ActionResult", "commit_action_snapshot", "current_snapshot", "ensure_eligible"]
