from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

HEALTHY = "healthy"


class InfoResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: str
    deployed_at: str  # RFC 3339, UTC


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["healthy"] = HEALTHY
