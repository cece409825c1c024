from __future__ import annotations

import json
import time
from types import TracebackType
from typing import Any, Literal, TypeVar
from uuid import uuid4

import httpx
import structlog
from pydantic import BaseModel

from fiveby_client.api.errors import (
    ApiErrorCode,
    DomainError,
    ResponseShapeError,
    TransportError,
    parse_error_envelope,
)
from fiveby_client.core.config import Settings
from fiveby_client.schemas.validation import validate_payload

ModelT = TypeVar("ModelT", bound=BaseModel)
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

logger = structlog.get_logger(__name__)


def normalize_path(path: str) -> str:
    if path.startswith("/"):
        return path
    return f"/{path}"


def _serialize_body(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json")
    return body


def _parse_json(response: httpx.Response) -> object:
    text = response.text
    if not text:
        return None

    try:
        return json.loads(text)
    except ValueError:
        raise TransportError(
            status_code=response.status_code,
            code=ApiErrorCode.INVALID_JSON,
        ) from None


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.strip().rstrip("/")
        self._http = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ApiClient":
        return cls(
            settings.api_base_url,
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get(self, path: str, schema: type[ModelT]) -> ModelT:
        return await self.request(path, schema, method="GET")

    async def request(
        self,
        path: str,
        schema: type[ModelT],
        *,
        method: HttpMethod = "GET",
        body: Any = None,
    ) -> ModelT:
        if not self.base_url:
            raise TransportError(status_code=0, code=ApiErrorCode.MISSING_API_BASE_URL)

        request_path = normalize_path(path)
        request_id = str(uuid4())
        headers = {"Accept": "application/json", "X-Request-ID": request_id}
        content: bytes | None = None
        if body is not None:
            headers["Content-Type"] = "application/json"
            content = json.dumps(_serialize_body(body)).encode("utf-8")

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            started_at = time.perf_counter()
            try:
                response = await self._http.request(
                    method,
                    f"{self.base_url}{request_path}",
                    headers=headers,
                    content=content,
                )
            except httpx.TimeoutException as exc:
                logger.warning("api_request_failed", method=method, path=request_path, error="timeout")
                raise TransportError(status_code=0, code=ApiErrorCode.REQUEST_TIMEOUT) from exc
            except httpx.HTTPError as exc:
                logger.warning(
                    "api_request_failed",
                    method=method,
                    path=request_path,
                    error=type(exc).__name__,
                )
                raise TransportError(status_code=0, code=ApiErrorCode.NETWORK_ERROR, details=str(exc)) from exc

            duration_ms = round((time.perf_counter() - started_at) * 1000, 2)
            logger.info(
                "api_request",
                method=method,
                path=request_path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            return self._handle_response(response, schema)

    def _handle_response(self, response: httpx.Response, schema: type[ModelT]) -> ModelT:
        payload = _parse_json(response)

        if response.is_success:
            result = validate_payload(schema, payload)
            if result.error is not None:
                logger.warning(
                    "api_response_invalid_shape",
                    schema=result.error.schema_name,
                    paths=result.error.paths,
                )
                raise ResponseShapeError(response.status_code, details=result.error.to_details())
            assert result.value is not None
            return result.value

        envelope = parse_error_envelope(payload)
        if envelope is None:
            raise TransportError(
                status_code=response.status_code,
                code=ApiErrorCode.INVALID_ERROR_SHAPE,
                details=payload,
            )

        logger.info(
            "api_error_response",
            status_code=response.status_code,
            code=envelope.error.code,
        )
        raise DomainError(
            status_code=response.status_code,
            code=envelope.error.code,
            message=envelope.error.message,
            details=envelope.error.details,
        )


__all__ = ["ApiClient", "HttpMethod", "normalize_path"]
