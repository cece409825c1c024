from __future__ import annotations

import asyncio
import enum
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from uuid import UUID

import structlog

from fiveby_client.api.errors import ApiClientError, user_message
from fiveby_client.schemas.snapshot import SessionSnapshot

logger = structlog.get_logger(__name__)

SnapshotFetcher = Callable[[UUID], Awaitable[SessionSnapshot]]
StoreListener = Callable[["SessionStoreState"], None]


class LoadStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SessionStoreState:
    session_id: UUID | None = None
    snapshot: SessionSnapshot | None = None
    status: LoadStatus = LoadStatus.IDLE
    error: ApiClientError | None = None
    error_status_code: int | None = None
    last_loaded_at: float | None = None

    @property
    def is_loading(self) -> bool:
        return self.status == LoadStatus.LOADING

    @property
    def is_refreshing(self) -> bool:
        return self.status == LoadStatus.LOADING and self.snapshot is not None

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        return user_message(self.error)


INITIAL_STATE = SessionStoreState()


class _LoadRequest:
    """Identity token for one load; only the active token may write state."""

    __slots__ = ("session_id", "silent", "task")

    def __init__(self, session_id: UUID, *, silent: bool) -> None:
        self.session_id = session_id
        self.silent = silent
        self.task: asyncio.Task[SessionSnapshot] | None = None

    def cancel(self) -> None:
        if self.task is not None and not self.task.done():
            self.task.cancel()


class SessionStore:
    def __init__(
        self,
        fetch_snapshot: SnapshotFetcher,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._fetch_snapshot = fetch_snapshot
        self._clock = clock
        self._state = INITIAL_STATE
        self._active_request: _LoadRequest | None = None
        self._listeners: list[StoreListener] = []

    @property
    def state(self) -> SessionStoreState:
        return self._state

    @property
    def snapshot(self) -> SessionSnapshot | None:
        return self._state.snapshot

    @property
    def has_active_request(self) -> bool:
        return self._active_request is not None

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def load_session(self, session_id: UUID, *, silent: bool = False) -> SessionStoreState:
        active = self._active_request
        if silent and active is not None and not active.silent:
            # The foreground load already fetches a fresh snapshot and owns the loading state.
            logger.debug("snapshot_refresh_skipped", session_id=str(session_id))
            return self._state

        self._abort_active_request(reason="superseded")

        request = _LoadRequest(session_id, silent=silent)
        self._active_request = request

        if not silent:
            keep_snapshot = self._state.session_id == session_id
            self._set_state(
                SessionStoreState(
                    session_id=session_id,
                    snapshot=self._state.snapshot if keep_snapshot else None,
                    status=LoadStatus.LOADING,
                    last_loaded_at=self._state.last_loaded_at if keep_snapshot else None,
                )
            )

        request.task = asyncio.create_task(self._fetch_snapshot(session_id))

        try:
            snapshot = await request.task
        except asyncio.CancelledError:
            if self._active_request is not request:
                logger.debug("snapshot_load_superseded", session_id=str(session_id))
                return self._state
            # The caller itself was cancelled; leave the loading state behind.
            self._active_request = None
            if not silent:
                self._set_state(
                    replace(
                        self._state,
                        status=LoadStatus.SUCCESS if self._state.snapshot is not None else LoadStatus.IDLE,
                    )
                )
            raise
        except ApiClientError as exc:
            if self._active_request is not request:
                logger.debug("snapshot_load_superseded", session_id=str(session_id))
                return self._state

            self._active_request = None
            if silent:
                logger.warning(
                    "snapshot_refresh_failed",
                    session_id=str(session_id),
                    code=exc.code,
                    status_code=exc.status_code,
                )
                return self._state

            logger.warning(
                "snapshot_load_failed",
                session_id=str(session_id),
                code=exc.code,
                status_code=exc.status_code,
            )
            self._set_state(
                replace(
                    self._state,
                    session_id=session_id,
                    status=LoadStatus.ERROR,
                    error=exc,
                    error_status_code=exc.status_code,
                )
            )
            return self._state
        except BaseException:
            if self._active_request is request:
                self._active_request = None
            raise

        if self._active_request is not request:
            logger.debug("snapshot_load_superseded", session_id=str(session_id))
            return self._state

        self._active_request = None
        self._set_state(
            SessionStoreState(
                session_id=session_id,
                snapshot=snapshot,
                status=LoadStatus.SUCCESS,
                last_loaded_at=self._clock(),
            )
        )
        return self._state

    async def refresh(self, *, silent: bool = False) -> SessionStoreState:
        session_id = self._state.session_id
        if session_id is None:
            return self._state
        return await self.load_session(session_id, silent=silent)

    def hydrate(self, session_id: UUID, snapshot: SessionSnapshot) -> SessionStoreState:
        if snapshot.session_id != session_id:
            raise ValueError("snapshot.session_id does not match the hydrated session id")
        return self.apply_snapshot(snapshot)

    def apply_snapshot(self, snapshot: SessionSnapshot) -> SessionStoreState:
        self._abort_active_request(reason="replaced")
        self._set_state(
            SessionStoreState(
                session_id=snapshot.session_id,
                snapshot=snapshot,
                status=LoadStatus.SUCCESS,
                last_loaded_at=self._clock(),
            )
        )
        return self._state

    def clear(self) -> None:
        self._abort_active_request(reason="cleared")
        self._set_state(INITIAL_STATE)

    def _abort_active_request(self, *, reason: str) -> None:
        request = self._active_request
        if request is None:
            return
        self._active_request = None
        request.cancel()
        logger.debug("snapshot_load_aborted", session_id=str(request.session_id), reason=reason)

    def _set_state(self, state: SessionStoreState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)


__all__ = [
    "INITIAL_STATE",
    "LoadStatus",
    "SessionStore",
    "SessionStoreState",
    "SnapshotFetcher",
]
