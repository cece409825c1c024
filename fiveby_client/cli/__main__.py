from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

import structlog

from fiveby_client.api.errors import ApiClientError, user_message
from fiveby_client.cli.render import render_health, render_outcome, render_snapshot
from fiveby_client.core.config import get_settings
from fiveby_client.core.constants import DEFAULT_LOG_LEVEL, GRID_SIDE_LENGTH
from fiveby_client.core.logging import configure_logging
from fiveby_client.game.grid import cell_index_from_row_col
from fiveby_client.main import FiveByApp
from fiveby_client.schemas.enums import GuessDirection, SessionStatus, Topic
from fiveby_client.schemas.snapshot import SessionSnapshot
from fiveby_client.state.session_store import LoadStatus, SessionStoreState

logger = structlog.get_logger(__name__)


def _grid_position(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("must be an integer") from None
    if not (1 <= parsed <= GRID_SIDE_LENGTH):
        raise argparse.ArgumentTypeError(f"must be between 1 and {GRID_SIDE_LENGTH}")
    return parsed - 1


def _add_session_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("session", help="Session id or session link")


def _add_player_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--player", type=int, choices=[1, 2], required=True, help="Acting player number")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fiveby", description="Five-By terminal client")
    parser.add_argument("--base-url", default=None, help="Backend base URL (overrides FIVEBY_API_BASE_URL)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (overrides LOG_LEVEL)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check backend health")

    new_parser = subparsers.add_parser("new", help="Start a new game")
    new_parser.add_argument("--player-1-name", default=None)
    new_parser.add_argument("--player-2-name", default=None)

    show_parser = subparsers.add_parser("show", help="Print the current session snapshot")
    _add_session_argument(show_parser)

    ask_parser = subparsers.add_parser("ask", help="Ask a trivia question for a cell")
    _add_session_argument(ask_parser)
    _add_player_argument(ask_parser)
    ask_parser.add_argument("--row", type=_grid_position, required=True, help="Row (1-5)")
    ask_parser.add_argument("--col", type=_grid_position, required=True, help="Column (1-5)")
    ask_parser.add_argument("--topic", choices=[topic.value for topic in Topic], required=True)

    answer_parser = subparsers.add_parser("answer", help="Answer the pending question")
    _add_session_argument(answer_parser)
    _add_player_argument(answer_parser)
    answer_parser.add_argument("answer", help="Answer text")

    letter_parser = subparsers.add_parser("guess-letter", help="Guess the letter of a cell")
    _add_session_argument(letter_parser)
    _add_player_argument(letter_parser)
    letter_parser.add_argument("--row", type=_grid_position, required=True, help="Row (1-5)")
    letter_parser.add_argument("--col", type=_grid_position, required=True, help="Column (1-5)")
    letter_parser.add_argument("letter", help="Single letter A-Z")

    word_parser = subparsers.add_parser("guess-word", help="Guess a whole row or column")
    _add_session_argument(word_parser)
    _add_player_argument(word_parser)
    word_parser.add_argument("--direction", choices=[direction.value for direction in GuessDirection], required=True)
    word_parser.add_argument("--index", type=_grid_position, required=True, help="Row or column number (1-5)")
    word_parser.add_argument("word", help="Five-letter word")

    watch_parser = subparsers.add_parser("watch", help="Poll a session and print each new event")
    _add_session_argument(watch_parser)

    return parser


def _print_error(error: ApiClientError) -> None:
    print(f"error: {user_message(error)}", file=sys.stderr)


def _loaded_snapshot(state: SessionStoreState) -> SessionSnapshot | None:
    if state.status == LoadStatus.ERROR and state.error is not None:
        _print_error(state.error)
        return None
    return state.snapshot


async def _watch(app: FiveByApp) -> int:
    queue: asyncio.Queue[SessionStoreState] = asyncio.Queue()
    unsubscribe = app.store.subscribe(queue.put_nowait)
    try:
        while True:
            state = await queue.get()
            snapshot = state.snapshot
            if snapshot is None:
                continue
            decoded = app.tracker.observe(snapshot)
            if decoded is not None:
                print(render_outcome(decoded))
                print(render_snapshot(snapshot))
            if snapshot.status == SessionStatus.COMPLETE:
                return 0
    finally:
        unsubscribe()


async def run(args: argparse.Namespace) -> int:
    # Loading settings can log warnings, so handlers must exist before it.
    configure_logging(args.log_level or DEFAULT_LOG_LEVEL)
    settings = get_settings()
    if args.base_url:
        settings = settings.model_copy(update={"api_base_url": args.base_url.strip().rstrip("/")})
    configure_logging(args.log_level or settings.log_level, settings.log_format)

    async with FiveByApp.from_settings(settings) as app:
        try:
            if args.command == "health":
                health = await app.check_health()
                print(render_health(health))
                return 0 if health.is_healthy else 1

            if args.command == "new":
                result = await app.create_game(
                    player_1_name=args.player_1_name,
                    player_2_name=args.player_2_name,
                    poll=False,
                )
                print(render_snapshot(result.snapshot))
                return 0

            snapshot = _loaded_snapshot(await app.open_session(args.session, poll=args.command == "watch"))
            if snapshot is None:
                return 1

            if args.command == "show":
                print(render_snapshot(snapshot))
                return 0

            if args.command == "watch":
                print(render_snapshot(snapshot))
                if snapshot.status == SessionStatus.COMPLETE:
                    return 0
                return await _watch(app)

            if args.command == "ask":
                result = await app.ask(
                    player_number=args.player,
                    cell_index=cell_index_from_row_col(args.row, args.col),
                    topic=args.topic,
                )
            elif args.command == "answer":
                result = await app.answer(player_number=args.player, answer=args.answer)
            elif args.command == "guess-letter":
                result = await app.guess_letter(
                    player_number=args.player,
                    cell_index=cell_index_from_row_col(args.row, args.col),
                    letter=args.letter,
                )
            elif args.command == "guess-word":
                result = await app.guess_word(
                    player_number=args.player,
                    direction=args.direction,
                    index=args.index,
                    word=args.word,
                )
            else:
                return 2

            print(render_outcome(result.event))
            print(render_snapshot(result.snapshot))
            return 0
        except ApiClientError as exc:
            logger.info("cli_command_failed", command=args.command, code=exc.code, status_code=exc.status_code)
            _print_error(exc)
            return 1


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
