from fiveby_client.api.client import ApiClient
from fiveby_client.api.errors import (
    ActionRejectedError,
    ApiClientError,
    ApiErrorCode,
    DomainError,
    ResponseShapeError,
    TransportError,
    user_message,
)

__all__ = [
    "ActionRejectedError",
    "ApiClient",
    "ApiClientError",
    "ApiErrorCode",
    "DomainError",
    "ResponseShapeError",
    "TransportError",
    "user_message",
]
