from fiveby_client.state.poller import SnapshotPoller
from fiveby_client.state.session_store import (
    INITIAL_STATE,
    LoadStatus,
    SessionStore,
    SessionStoreState,
)

__all__ = [
    "INITIAL_STATE",
    "LoadStatus",
    "SessionStore",
    "SessionStoreState",
    "SnapshotPoller",
]
