from __future__ import annotations

from dataclasses import dataclass, field, replace
from uuid import UUID

from fiveby_client.schemas.enums import GuessDirection, Topic
from fiveby_client.schemas.snapshot import SessionSnapshot

ScopeKey = tuple[UUID, str | None]


def scope_key(snapshot: SessionSnapshot) -> ScopeKey:
    created_at = snapshot.last_event.created_at if snapshot.last_event is not None else None
    return (snapshot.session_id, created_at)


def should_reset_scope(previous: ScopeKey | None, current: ScopeKey) -> bool:
    return previous != current


@dataclass(frozen=True)
class TurnDraft:
    selected_cell_index: int | None = None
    selected_topic: Topic | None = None
    direction: GuessDirection = GuessDirection.ACROSS
    word_index: int = 0
    interim_transcript: str = ""
    final_transcript: str = ""

    @property
    def captured_transcript(self) -> str:
        return (self.final_transcript or self.interim_transcript).strip()


@dataclass
class TurnScope:
    """Ephemeral per-turn state, discarded whenever a new event arrives."""

    key: ScopeKey | None = None
    draft: TurnDraft = field(default_factory=TurnDraft)

    def sync(self, snapshot: SessionSnapshot) -> bool:
        current = scope_key(snapshot)
        if not should_reset_scope(self.key, current):
            return False
        self.key = current
        self.draft = TurnDraft()
        return True

    def update(self, **changes: object) -> TurnDraft:
        self.draft = replace(self.draft, **changes)
        return self.draft

    def clear(self) -> None:
        self.key = None
        self.draft = TurnDraft()


__all__ = ["ScopeKey", "TurnDraft", "TurnScope", "scope_key", "should_reset_scope"]
