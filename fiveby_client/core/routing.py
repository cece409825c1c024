from __future__ import annotations

import re
from uuid import UUID

from fiveby_client.core.constants import SESSION_ROUTE_PREFIX

_UUID_PATTERN_TEXT = r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"
UUID_RE = re.compile(rf"^{_UUID_PATTERN_TEXT}$", re.IGNORECASE)
SESSION_URL_RE = re.compile(rf"/s/({_UUID_PATTERN_TEXT})(?:/|$|\?|#)", re.IGNORECASE)


def session_route(session_id: UUID | str) -> str:
    return f"{SESSION_ROUTE_PREFIX}/{session_id}"


def session_over_route(session_id: UUID | str) -> str:
    return f"{session_route(session_id)}/over"


def is_uuid_like(value: str) -> bool:
    return UUID_RE.match(value.strip()) is not None


def parse_session_id_input(value: str) -> UUID | None:
    """Accept a raw session id or any link containing ``/s/<id>``."""
    trimmed = value.strip()
    if not trimmed:
        return None

    if is_uuid_like(trimmed):
        return UUID(trimmed)

    match = SESSION_URL_RE.search(trimmed)
    if match is None:
        return None
    return UUID(match.group(1))


__all__ = [
    "is_uuid_like",
    "parse_session_id_input",
    "session_over_route",
    "session_route",
]
