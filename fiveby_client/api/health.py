from __future__ import annotations

from fiveby_client.api.client import ApiClient
from fiveby_client.schemas.health import HealthResponse


async def get_health(client: ApiClient) -> HealthResponse:
    return await client.get("/health", HealthResponse)


__all__ = ["get_health"]
