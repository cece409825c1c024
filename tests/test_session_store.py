from __future__ import annotations

import asyncio
import uuid

import pytest

from fiveby_client.api.errors import ApiErrorCode, DomainError, TransportError
from fiveby_client.schemas.snapshot import SessionSnapshot
from fiveby_client.state.session_store import INITIAL_STATE, LoadStatus, SessionStore, SessionStoreState
from tests.factories import OTHER_SESSION_ID, SESSION_ID, build_snapshot, last_event_payload, question_asked_data


class _GatedFetcher:
    """Fetcher whose responses are released explicitly by the test."""

    def __init__(self) -> None:
        self.calls: list[uuid.UUID] = []
        self.cancelled: list[uuid.UUID] = []
        self._gates: dict[int, asyncio.Future[SessionSnapshot]] = {}

    async def __call__(self, session_id: uuid.UUID) -> SessionSnapshot:
        call_number = len(self.calls)
        self.calls.append(session_id)
        gate: asyncio.Future[SessionSnapshot] = asyncio.get_running_loop().create_future()
        self._gates[call_number] = gate
        try:
            return await gate
        except asyncio.CancelledError:
            self.cancelled.append(session_id)
            raise

    def resolve(self, call_number: int, snapshot: SessionSnapshot) -> None:
        self._gates[call_number].set_result(snapshot)

    def fail(self, call_number: int, error: Exception) -> None:
        self._gates[call_number].set_exception(error)


async def _until_called(fetcher: _GatedFetcher, count: int) -> None:
    while len(fetcher.calls) < count:
        await asyncio.sleep(0)


def _not_found() -> DomainError:
    return DomainError(status_code=404, code="session_not_found", message="Session not found")


@pytest.mark.asyncio
async def test_successful_load_records_snapshot_and_time() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher, clock=lambda: 1234.5)

    task = asyncio.create_task(store.load_session(SESSION_ID))
    await _until_called(fetcher, 1)
    assert store.state.status == LoadStatus.LOADING
    assert store.state.is_refreshing is False

    fetcher.resolve(0, build_snapshot())
    state = await task

    assert state.status == LoadStatus.SUCCESS
    assert state.snapshot is not None
    assert state.snapshot.session_id == SESSION_ID
    assert state.last_loaded_at == 1234.5
    assert state.error is None
    assert store.has_active_request is False


@pytest.mark.asyncio
async def test_later_load_wins_when_earlier_resolves_last() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)

    load_a = asyncio.create_task(store.load_session(SESSION_ID))
    await _until_called(fetcher, 1)
    load_b = asyncio.create_task(store.load_session(OTHER_SESSION_ID))
    await _until_called(fetcher, 2)

    fetcher.resolve(1, build_snapshot(session_id=OTHER_SESSION_ID))
    await load_b
    await load_a

    assert fetcher.cancelled == [SESSION_ID]
    assert store.state.session_id == OTHER_SESSION_ID
    assert store.state.snapshot is not None
    assert store.state.snapshot.session_id == OTHER_SESSION_ID


@pytest.mark.asyncio
async def test_superseded_failure_never_writes_state() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)

    load_a = asyncio.create_task(store.load_session(SESSION_ID))
    await _until_called(fetcher, 1)
    fetcher.fail(0, _not_found())
    await asyncio.sleep(0)

    # A newer snapshot lands before the failed load resumes.
    store.apply_snapshot(build_snapshot(session_id=OTHER_SESSION_ID))
    await load_a

    assert store.state.status == LoadStatus.SUCCESS
    assert store.state.session_id == OTHER_SESSION_ID
    assert store.state.error is None


@pytest.mark.asyncio
async def test_failure_keeps_last_good_snapshot() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)
    store.hydrate(SESSION_ID, build_snapshot())

    task = asyncio.create_task(store.refresh())
    await _until_called(fetcher, 1)
    assert store.state.is_refreshing is True

    fetcher.fail(0, _not_found())
    state = await task

    assert state.status == LoadStatus.ERROR
    assert state.snapshot is not None
    assert state.error_status_code == 404
    assert state.error is not None
    assert state.error.code == "session_not_found"
    assert state.error_message == "Session not found."


@pytest.mark.asyncio
async def test_loading_a_different_session_drops_previous_snapshot() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)
    store.hydrate(SESSION_ID, build_snapshot())

    task = asyncio.create_task(store.load_session(OTHER_SESSION_ID))
    await _until_called(fetcher, 1)
    assert store.state.snapshot is None

    fetcher.fail(0, TransportError(status_code=0, code=ApiErrorCode.NETWORK_ERROR))
    state = await task

    assert state.status == LoadStatus.ERROR
    assert state.session_id == OTHER_SESSION_ID
    assert state.snapshot is None
    assert state.error_status_code == 0


@pytest.mark.asyncio
async def test_silent_refresh_hides_loading_and_errors() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)
    store.hydrate(SESSION_ID, build_snapshot())
    before = store.state

    task = asyncio.create_task(store.refresh(silent=True))
    await _until_called(fetcher, 1)
    assert store.state is before

    fetcher.fail(0, TransportError(status_code=0, code=ApiErrorCode.REQUEST_TIMEOUT))
    state = await task

    assert state is before
    assert state.status == LoadStatus.SUCCESS


@pytest.mark.asyncio
async def test_silent_refresh_does_not_supersede_foreground_load() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)

    foreground = asyncio.create_task(store.load_session(SESSION_ID))
    await _until_called(fetcher, 1)

    state = await store.refresh(silent=True)
    assert state.status == LoadStatus.LOADING
    assert len(fetcher.calls) == 1
    assert store.has_active_request is True

    fetcher.fail(0, TransportError(status_code=0, code=ApiErrorCode.NETWORK_ERROR))
    state = await foreground

    assert state.status == LoadStatus.ERROR
    assert store.has_active_request is False
    assert fetcher.cancelled == []


@pytest.mark.asyncio
async def test_silent_refresh_writes_new_snapshot() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)
    store.hydrate(SESSION_ID, build_snapshot())
    updated = build_snapshot(last_event=last_event_payload("question_asked", question_asked_data()))

    task = asyncio.create_task(store.refresh(silent=True))
    await _until_called(fetcher, 1)
    fetcher.resolve(0, updated)
    await task

    assert store.snapshot == updated


@pytest.mark.asyncio
async def test_refresh_without_session_is_a_noop() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)

    state = await store.refresh()

    assert state is INITIAL_STATE
    assert fetcher.calls == []


@pytest.mark.asyncio
async def test_clear_aborts_in_flight_load_silently() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)

    task = asyncio.create_task(store.load_session(SESSION_ID))
    await _until_called(fetcher, 1)
    store.clear()
    state = await task

    assert fetcher.cancelled == [SESSION_ID]
    assert state is INITIAL_STATE
    assert store.state.status == LoadStatus.IDLE


@pytest.mark.asyncio
async def test_applied_action_snapshot_supersedes_pending_poll() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)
    store.hydrate(SESSION_ID, build_snapshot())

    poll = asyncio.create_task(store.refresh(silent=True))
    await _until_called(fetcher, 1)
    action_snapshot = build_snapshot(current_turn=2)
    store.apply_snapshot(action_snapshot)
    await poll

    assert fetcher.cancelled == [SESSION_ID]
    assert store.snapshot == action_snapshot


@pytest.mark.asyncio
async def test_cancelling_the_caller_restores_status() -> None:
    fetcher = _GatedFetcher()
    store = SessionStore(fetcher)
    store.hydrate(SESSION_ID, build_snapshot())

    task = asyncio.create_task(store.refresh())
    await _until_called(fetcher, 1)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert store.state.status == LoadStatus.SUCCESS
    assert store.has_active_request is False


def test_hydrate_rejects_mismatched_session() -> None:
    store = SessionStore(_GatedFetcher())

    with pytest.raises(ValueError):
        store.hydrate(OTHER_SESSION_ID, build_snapshot())


def test_subscribers_receive_each_state_until_unsubscribed() -> None:
    store = SessionStore(_GatedFetcher())
    received: list[SessionStoreState] = []
    unsubscribe = store.subscribe(received.append)

    store.hydrate(SESSION_ID, build_snapshot())
    store.clear()
    unsubscribe()
    store.hydrate(SESSION_ID, build_snapshot())

    assert [state.status for state in received] == [LoadStatus.SUCCESS, LoadStatus.IDLE]
