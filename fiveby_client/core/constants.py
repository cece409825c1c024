from __future__ import annotations

SERVICE_NAME = "five-by-client"

CANONICAL_TOPICS: tuple[str, ...] = (
    "Politics",
    "Science",
    "History",
    "Art",
    "Current Affairs",
)

GRID_SIDE_LENGTH = 5
GRID_CELL_COUNT = GRID_SIDE_LENGTH * GRID_SIDE_LENGTH
MAX_TOPICS_PER_CELL = len(CANONICAL_TOPICS)
PLAYER_NUMBERS: tuple[int, int] = (1, 2)
PLAYER_NAME_MAX_LENGTH = 30
ANSWER_MAX_LENGTH = 100

SESSION_ROUTE_PREFIX = "/s"
DEFAULT_SPEECH_LANG = "en-US"
DEFAULT_TTS_START_TIMEOUT_SECONDS = 1.5
DEFAULT_POLL_INTERVAL_SECONDS = 5.0
DEFAULT_LOG_LEVEL = "INFO"


__all__ = [
    "ANSWER_MAX_LENGTH",
    "CANONICAL_TOPICS",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "DEFAULT_SPEECH_LANG",
    "DEFAULT_TTS_START_TIMEOUT_SECONDS",
    "GRID_CELL_COUNT",
    "GRID_SIDE_LENGTH",
    "MAX_TOPICS_PER_CELL",
    "PLAYER_NAME_MAX_LENGTH",
    "PLAYER_NUMBERS",
    "SERVICE_NAME",
    "SESSION_ROUTE_PREFIX",
]
