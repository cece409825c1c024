from __future__ import annotations

import asyncio
import contextlib

import structlog

from fiveby_client.state.session_store import SessionStore

logger = structlog.get_logger(__name__)


class SnapshotPoller:
    """Background refresh loop that keeps the store close to the server."""

    def __init__(self, store: SessionStore, interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None
        self._paused = False

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_paused(self) -> bool:
        return self._paused

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.debug("snapshot_poller_started", interval_seconds=self._interval_seconds)

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("snapshot_poller_stopped")

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    async def poll_once(self) -> None:
        if self._paused or self._store.state.session_id is None:
            return
        # Leave foreground loads alone; they already fetch a fresh snapshot.
        if self._store.state.is_loading:
            return
        await self._store.refresh(silent=True)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            try:
                await self.poll_once()
            except Exception:
                logger.exception("snapshot_poll_crashed", session_id=str(self._store.state.session_id))


__all__ = ["SnapshotPoller"]
