from __future__ import annotations

from pydantic import BaseModel


class HealthDb(BaseModel):
    status: str


class HealthResponse(BaseModel):
    status: str
    service: str
    db: HealthDb

    @property
    def is_healthy(self) -> bool:
        return self.status == "ok" and self.db.status == "ok"


__all__ = ["HealthDb", "HealthResponse"]
