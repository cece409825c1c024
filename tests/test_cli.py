from __future__ import annotations

import logging
from collections.abc import Iterator

import httpx
import pytest
import structlog

from fiveby_client.cli import __main__ as cli
from fiveby_client.cli.render import render_cell, render_grid, render_snapshot
from fiveby_client.core.config import Settings
from fiveby_client.main import FiveByApp
from tests.factories import build_snapshot, cell_payload, revealed_cell_payload, snapshot_payload
from tests.fake_backend import FakeBackend


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    for name in (None, "httpx", "httpcore"):
        logging.getLogger(name).handlers.clear()


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    fake = FakeBackend()
    real_from_settings = FiveByApp.from_settings

    def from_settings(cls, settings=None, **kwargs):  # noqa: ANN001, ANN202
        return real_from_settings(settings, transport=httpx.ASGITransport(app=fake.app))

    monkeypatch.setattr(FiveByApp, "from_settings", classmethod(from_settings))
    return fake


def test_parser_converts_positions_to_zero_based() -> None:
    args = cli.build_parser().parse_args(
        ["ask", "some-id", "--player", "1", "--row", "2", "--col", "5", "--topic", "Art"]
    )

    assert args.row == 1
    assert args.col == 4
    assert args.topic == "Art"


def test_parser_rejects_positions_off_the_grid() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["guess-letter", "some-id", "--player", "1", "--row", "6", "--col", "1", "A"])


def test_render_grid_marks_hidden_locked_and_revealed_cells() -> None:
    snapshot = build_snapshot(player_1_cells={0: revealed_cell_payload(0), 1: cell_payload(1, locked=True)})
    player = snapshot.player(1)

    assert render_cell(player.cell(0)) == "A"
    assert render_cell(player.cell(1)) == "#"
    assert render_cell(player.cell(2)) == "."
    assert render_grid(player)[:2] == ["    1 2 3 4 5", " 1  A # . . ."]


def test_render_snapshot_shows_turn_and_link() -> None:
    text = render_snapshot(build_snapshot(current_turn=2))

    assert "Turn: Player 2 name" in text
    assert "/s/" in text
    assert "<- turn" in text


def test_render_completed_snapshot_links_game_over() -> None:
    text = render_snapshot(build_snapshot(status="complete"))

    assert "Game over:" in text
    assert "<- turn" not in text


def test_show_command_prints_snapshot(backend: FakeBackend, capsys: pytest.CaptureFixture[str]) -> None:
    session_id = backend.seed(snapshot_payload())

    exit_code = cli.main(["show", session_id])

    assert exit_code == 0
    assert f"Session {session_id} [in_progress]" in capsys.readouterr().out


def test_guess_letter_command_prints_outcome(backend: FakeBackend, capsys: pytest.CaptureFixture[str]) -> None:
    session_id = backend.seed(snapshot_payload())

    exit_code = cli.main(["guess-letter", session_id, "--player", "1", "--row", "3", "--col", "3", "m"])

    assert exit_code == 0
    assert "Correct! Revealed M." in capsys.readouterr().out


def test_rejected_action_prints_user_message(backend: FakeBackend, capsys: pytest.CaptureFixture[str]) -> None:
    session_id = backend.seed(snapshot_payload(current_turn=2))

    exit_code = cli.main(["answer", session_id, "--player", "1", "Mars"])

    assert exit_code == 1
    assert "error: It's not your turn." in capsys.readouterr().err


def test_unknown_session_fails(backend: FakeBackend, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = cli.main(["show", "3f0c6f8e-8a4b-4c1d-9e2f-000000000000"])

    assert exit_code == 1
    assert "error: Session not found." in capsys.readouterr().err


def test_logging_is_configured_before_settings_load(backend: FakeBackend, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, str | None]] = []

    def fake_get_settings() -> Settings:
        calls.append(("settings", None))
        return Settings(_env_file=None, api_base_url="http://fiveby.test", log_level="WARNING")

    def fake_configure_logging(log_level: str = "INFO", log_format: str = "console") -> None:
        calls.append(("logging", log_level))

    monkeypatch.setattr(cli, "get_settings", fake_get_settings)
    monkeypatch.setattr(cli, "configure_logging", fake_configure_logging)

    exit_code = cli.main(["health"])

    assert exit_code == 0
    assert calls == [("logging", "INFO"), ("settings", None), ("logging", "WARNING")]
