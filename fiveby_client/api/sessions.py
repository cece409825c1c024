from __future__ import annotations

from urllib.parse import quote
from uuid import UUID

from pydantic import BaseModel, ValidationError

from fiveby_client.api.client import ApiClient
from fiveby_client.api.errors import ApiClientError, ApiErrorCode
from fiveby_client.schemas.answer_question import AnswerQuestionRequest
from fiveby_client.schemas.ask_question import AskQuestionRequest
from fiveby_client.schemas.guess_letter import GuessLetterRequest
from fiveby_client.schemas.guess_word import GuessWordRequest
from fiveby_client.schemas.sessions import CreateSessionRequest
from fiveby_client.schemas.snapshot import SessionSnapshot
from fiveby_client.schemas.validation import issues_from_validation_error


def session_path(session_id: UUID | str, action: str | None = None) -> str:
    path = f"/sessions/{quote(str(session_id), safe='')}"
    if action is None:
        return path
    return f"{path}/{action}"


def ensure_request(model: type[BaseModel], payload: BaseModel | dict[str, object]) -> BaseModel:
    if isinstance(payload, model):
        return payload

    raw = payload.model_dump() if isinstance(payload, BaseModel) else payload
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise ApiClientError(
            status_code=0,
            code=ApiErrorCode.INVALID_REQUEST,
            details=[
                {"path": issue.path, "message": issue.message}
                for issue in issues_from_validation_error(exc)
            ],
        ) from exc


async def create_session(
    client: ApiClient,
    payload: CreateSessionRequest | dict[str, object] | None = None,
) -> SessionSnapshot:
    request = ensure_request(CreateSessionRequest, payload or {})
    return await client.request("/sessions", SessionSnapshot, method="POST", body=request)


async def get_session_snapshot(client: ApiClient, session_id: UUID | str) -> SessionSnapshot:
    return await client.get(session_path(session_id), SessionSnapshot)


async def ask_question(
    client: ApiClient,
    session_id: UUID | str,
    payload: AskQuestionRequest | dict[str, object],
) -> SessionSnapshot:
    request = ensure_request(AskQuestionRequest, payload)
    return await client.request(session_path(session_id, "ask"), SessionSnapshot, method="POST", body=request)


async def answer_question(
    client: ApiClient,
    session_id: UUID | str,
    payload: AnswerQuestionRequest | dict[str, object],
) -> SessionSnapshot:
    request = ensure_request(AnswerQuestionRequest, payload)
    return await client.request(session_path(session_id, "answer"), SessionSnapshot, method="POST", body=request)


async def guess_letter(
    client: ApiClient,
    session_id: UUID | str,
    payload: GuessLetterRequest | dict[str, object],
) -> SessionSnapshot:
    request = ensure_request(GuessLetterRequest, payload)
    return await client.request(
        session_path(session_id, "guess-letter"),
        SessionSnapshot,
        method="POST",
        body=request,
    )


async def guess_word(
    client: ApiClient,
    session_id: UUID | str,
    payload: GuessWordRequest | dict[str, object],
) -> SessionSnapshot:
    request = ensure_request(GuessWordRequest, payload)
    return await client.request(
        session_path(session_id, "guess-word"),
        SessionSnapshot,
        method="POST",
        body=request,
    )


__all__ = [
    "answer_question",
    "ask_question",
    "create_session",
    "ensure_request",
    "get_session_snapshot",
    "guess_letter",
    "guess_word",
    "session_path",
]
