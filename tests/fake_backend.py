from __future__ import annotations

import copy
import itertools
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tests.factories import GRID_LETTERS, snapshot_payload

QUESTION_ANSWER = "Mars"


class FakeBackend:
    """In-memory stand-in for the Five-By HTTP API."""

    def __init__(self) -> None:
        self.sessions: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, str]] = []
        self._clock = itertools.count(1)
        self.app = self._build_app()

    def seed(self, payload: dict[str, Any]) -> str:
        session_id = payload["session_id"]
        self.sessions[session_id] = copy.deepcopy(payload)
        return session_id

    def _build_app(self) -> FastAPI:
        app = FastAPI()

        @app.middleware("http")
        async def record_requests(request: Request, call_next):  # noqa: ANN001, ANN202
            self.requests.append((request.method, request.url.path))
            return await call_next(request)

        @app.get("/health")
        async def health() -> dict[str, Any]:
            return {"status": "ok", "service": "five-by-backend", "db": {"status": "ok"}}

        @app.post("/sessions", status_code=201)
        async def create(request: Request) -> dict[str, Any]:
            body = await request.json()
            payload = snapshot_payload(session_id=uuid.uuid4())
            payload["players"][0]["name"] = body.get("player_1_name")
            payload["players"][1]["name"] = body.get("player_2_name")
            self.seed(payload)
            return payload

        @app.get("/sessions/{session_id}")
        async def get_session(session_id: str) -> Any:
            session = self.sessions.get(session_id)
            if session is None:
                return _error(404, "session_not_found", "Session not found")
            return session

        @app.post("/sessions/{session_id}/ask")
        async def ask(session_id: str, request: Request) -> Any:
            body = await request.json()
            session, error = self._turn_guard(session_id, body)
            if error is not None:
                return error
            cell = self._cell(session, body["player_number"], body["cell_index"])
            if cell["revealed"]:
                return _error(409, "cell_already_revealed", "Cell is already revealed")
            cell["topics_used"].append(body["topic"])
            index = body["cell_index"]
            self._record_event(
                session,
                "question_asked",
                {
                    "cell_index": index,
                    "row": index // 5,
                    "col": index % 5,
                    "topic": body["topic"],
                    "question_text": "Which planet is known as the Red Planet?",
                    "answer": QUESTION_ANSWER,
                    "acceptable_variants": [QUESTION_ANSWER],
                    "generator": "stub_v1",
                },
            )
            return session

        @app.post("/sessions/{session_id}/answer")
        async def answer(session_id: str, request: Request) -> Any:
            body = await request.json()
            session, error = self._turn_guard(session_id, body)
            if error is not None:
                return error
            last_event = session["last_event"]
            if last_event is None or last_event["type"] != "question_asked":
                return _error(409, "no_pending_question", "No pending question")
            asked = last_event["event_data"]
            index = asked["cell_index"]
            correct = body["answer"].strip().lower() == QUESTION_ANSWER.lower()
            if correct:
                self._reveal(self._cell(session, body["player_number"], index), "question")
            self._record_event(
                session,
                "question_answered",
                {
                    "cell_index": index,
                    "row": index // 5,
                    "col": index % 5,
                    "topic": asked["topic"],
                    "answer": body["answer"],
                    "correct": correct,
                    "revealed_letter": GRID_LETTERS[index] if correct else None,
                    "lock_cleared_cell_index": None,
                },
            )
            self._swap_turn(session)
            return session

        @app.post("/sessions/{session_id}/guess-letter")
        async def guess_letter(session_id: str, request: Request) -> Any:
            body = await request.json()
            session, error = self._turn_guard(session_id, body)
            if error is not None:
                return error
            player_number = body["player_number"]
            index = body["cell_index"]
            cell = self._cell(session, player_number, index)
            if cell["revealed"]:
                return _error(409, "cell_already_revealed", "Cell is already revealed")
            if cell["locked"]:
                return _error(409, "cell_locked", "Cell is locked")

            correct = body["letter"] == GRID_LETTERS[index]
            locks: list[int] = []
            if correct:
                self._reveal(cell, "guess")
                score_delta, opponent_delta = 3, 0
            else:
                score_delta, opponent_delta = -5, 1
                for candidate in range(25):
                    other = self._cell(session, player_number, candidate)
                    if not other["revealed"] and not other["locked"] and candidate != index:
                        other["locked"] = True
                        locks.append(candidate)
                        break
            self._apply_scores(session, player_number, score_delta, opponent_delta)
            self._record_event(
                session,
                "letter_guessed",
                {
                    "cell_index": index,
                    "row": index // 5,
                    "col": index % 5,
                    "guess": body["letter"],
                    "correct": correct,
                    "revealed_letter": GRID_LETTERS[index] if correct else None,
                    "score_delta": score_delta,
                    "opponent_score_delta": opponent_delta,
                    "locks_enqueued": locks,
                },
            )
            self._swap_turn(session)
            return session

        @app.post("/sessions/{session_id}/guess-word")
        async def guess_word(session_id: str, request: Request) -> Any:
            body = await request.json()
            session, error = self._turn_guard(session_id, body)
            if error is not None:
                return error
            player_number = body["player_number"]
            direction, index = body["direction"], body["index"]
            if direction == "across":
                cell_indexes = [index * 5 + offset for offset in range(5)]
            else:
                cell_indexes = [index + offset * 5 for offset in range(5)]
            cells = [self._cell(session, player_number, cell_index) for cell_index in cell_indexes]
            if all(cell["revealed"] for cell in cells):
                return _error(409, "word_already_revealed", "Word is already revealed")
            if any(cell["locked"] and not cell["revealed"] for cell in cells):
                return _error(409, "word_locked", "Word contains locked cells")

            answer = "".join(GRID_LETTERS[cell_index] for cell_index in cell_indexes)
            correct = body["word"] == answer
            revealed: list[dict[str, Any]] = []
            if correct:
                for cell_index, cell in zip(cell_indexes, cells):
                    if not cell["revealed"]:
                        self._reveal(cell, "guess")
                        revealed.append(
                            {
                                "cell_index": cell_index,
                                "row": cell_index // 5,
                                "col": cell_index % 5,
                                "letter": GRID_LETTERS[cell_index],
                            }
                        )
            score_delta, opponent_delta = (10, 0) if correct else (-5, 1)
            self._apply_scores(session, player_number, score_delta, opponent_delta)
            self._record_event(
                session,
                "word_guessed",
                {
                    "direction": direction,
                    "index": index,
                    "guess": body["word"],
                    "correct": correct,
                    "score_delta": score_delta,
                    "opponent_score_delta": opponent_delta,
                    "revealed_cells": revealed,
                    "auto_reveals": [],
                    "locks_enqueued": [],
                },
            )
            self._swap_turn(session)
            return session

        return app

    def _turn_guard(self, session_id: str, body: dict[str, Any]) -> tuple[dict[str, Any], JSONResponse | None]:
        session = self.sessions.get(session_id)
        if session is None:
            return {}, _error(404, "session_not_found", "Session not found")
        if session["status"] != "in_progress":
            return session, _error(409, "session_not_in_progress", "Session is not in progress")
        if body.get("player_number") != session["current_turn"]:
            return session, _error(409, "out_of_turn", "It is not this player's turn")
        return session, None

    @staticmethod
    def _cell(session: dict[str, Any], player_number: int, cell_index: int) -> dict[str, Any]:
        return session["players"][player_number - 1]["cells"][cell_index]

    @staticmethod
    def _reveal(cell: dict[str, Any], revealed_by: str) -> None:
        cell["revealed"] = True
        cell["letter"] = GRID_LETTERS[cell["index"]]
        cell["revealed_by"] = revealed_by

    @staticmethod
    def _swap_turn(session: dict[str, Any]) -> None:
        session["current_turn"] = 2 if session["current_turn"] == 1 else 1

    @staticmethod
    def _apply_scores(session: dict[str, Any], player_number: int, delta: int, opponent_delta: int) -> None:
        session["players"][player_number - 1]["score"] += delta
        session["players"][2 - player_number]["score"] += opponent_delta

    def _record_event(self, session: dict[str, Any], event_type: str, event_data: dict[str, Any]) -> None:
        session["last_event"] = {
            "type": event_type,
            "created_at": f"2026-01-05T12:00:{next(self._clock):02d}Z",
            "event_data": event_data,
        }


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": {"code": code, "message": message}})
