from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError


class ApiErrorCode(str, Enum):
    # Codes reported by the backend error envelope.
    OUT_OF_TURN = "out_of_turn"
    NO_PENDING_QUESTION = "no_pending_question"
    SESSION_NOT_IN_PROGRESS = "session_not_in_progress"
    SESSION_NOT_FOUND = "session_not_found"
    TOPICS_EXHAUSTED = "topics_exhausted"
    CELL_LOCKED = "cell_locked"
    CELL_ALREADY_REVEALED = "cell_already_revealed"
    WORD_LOCKED = "word_locked"
    WORD_ALREADY_REVEALED = "word_already_revealed"
    VALIDATION_ERROR = "validation_error"
    GRIDS_UNAVAILABLE = "grids_unavailable"
    # Codes synthesized by the client.
    TOPIC_ALREADY_USED = "topic_already_used"
    INVALID_TARGET = "invalid_target"
    MISSING_API_BASE_URL = "missing_api_base_url"
    NETWORK_ERROR = "network_error"
    REQUEST_TIMEOUT = "request_timeout"
    INVALID_JSON = "invalid_json"
    INVALID_ERROR_SHAPE = "invalid_error_shape"
    INVALID_RESPONSE_SHAPE = "invalid_response_shape"
    INVALID_REQUEST = "invalid_request"


class ApiErrorDetail(BaseModel):
    code: str
    message: str
    details: Any | None = Field(default=None)


class ApiErrorResponse(BaseModel):
    error: ApiErrorDetail


DEFAULT_MESSAGES: dict[str, str] = {
    ApiErrorCode.MISSING_API_BASE_URL.value: "Missing API base URL configuration.",
    ApiErrorCode.NETWORK_ERROR.value: "Could not reach the server.",
    ApiErrorCode.REQUEST_TIMEOUT.value: "The server took too long to respond.",
    ApiErrorCode.INVALID_JSON.value: "Received invalid JSON from the server.",
    ApiErrorCode.INVALID_ERROR_SHAPE.value: "Error payload does not match the expected schema.",
    ApiErrorCode.INVALID_RESPONSE_SHAPE.value: "Response payload does not match the expected schema.",
    ApiErrorCode.INVALID_REQUEST.value: "Request payload is invalid.",
}

USER_MESSAGES: dict[str, str] = {
    ApiErrorCode.OUT_OF_TURN.value: "It's not your turn.",
    ApiErrorCode.NO_PENDING_QUESTION.value: "No pending question to answer.",
    ApiErrorCode.SESSION_NOT_IN_PROGRESS.value: "Session is not in progress.",
    ApiErrorCode.SESSION_NOT_FOUND.value: "Session not found.",
    ApiErrorCode.TOPICS_EXHAUSTED.value: "No topics remaining for this cell.",
    ApiErrorCode.TOPIC_ALREADY_USED.value: "That topic was already asked for this cell.",
    ApiErrorCode.CELL_LOCKED.value: "That cell is locked.",
    ApiErrorCode.CELL_ALREADY_REVEALED.value: "That cell is already revealed.",
    ApiErrorCode.WORD_LOCKED.value: "That word contains locked cells.",
    ApiErrorCode.WORD_ALREADY_REVEALED.value: "That word is already fully revealed.",
    ApiErrorCode.INVALID_TARGET.value: "That position is not on the grid.",
    ApiErrorCode.VALIDATION_ERROR.value: "The server rejected the request as invalid.",
    ApiErrorCode.GRIDS_UNAVAILABLE.value: "No grids are available to start a game right now.",
    ApiErrorCode.INVALID_RESPONSE_SHAPE.value: (
        "Incompatible API response. Check backend and client versions."
    ),
}

GENERIC_USER_MESSAGE = "Something went wrong. Please try again."


class ApiClientError(Exception):
    def __init__(
        self,
        *,
        status_code: int,
        code: ApiErrorCode | str,
        message: str | None = None,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code.value if isinstance(code, ApiErrorCode) else code
        self.message = message or DEFAULT_MESSAGES.get(self.code, "Request failed")
        self.details = details
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, code={self.code!r})"


class TransportError(ApiClientError):
    pass


class ResponseShapeError(ApiClientError):
    def __init__(self, status_code: int, details: Any | None = None) -> None:
        super().__init__(
            status_code=status_code,
            code=ApiErrorCode.INVALID_RESPONSE_SHAPE,
            details=details,
        )


class DomainError(ApiClientError):
    pass


class ActionRejectedError(ApiClientError):
    def __init__(self, code: ApiErrorCode | str, details: Any | None = None) -> None:
        code_value = code.value if isinstance(code, ApiErrorCode) else code
        super().__init__(
            status_code=0,
            code=code_value,
            message=USER_MESSAGES.get(code_value, "Action is not allowed right now."),
            details=details,
        )


def parse_error_envelope(payload: object) -> ApiErrorResponse | None:
    try:
        return ApiErrorResponse.model_validate(payload)
    except ValidationError:
        return None


def user_message(error: BaseException) -> str:
    if isinstance(error, ApiClientError):
        return USER_MESSAGES.get(error.code, error.message)
    return GENERIC_USER_MESSAGE


__all__ = [
    "ActionRejectedError",
    "ApiClientError",
    "ApiErrorCode",
    "ApiErrorDetail",
    "ApiErrorResponse",
    "DomainError",
    "GENERIC_USER_MESSAGE",
    "ResponseShapeError",
    "TransportError",
    "USER_MESSAGES",
    "parse_error_envelope",
    "user_message",
]
