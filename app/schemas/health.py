"""Liveness and readiness payloads."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """database is "unavailable" when a trivial query fails; the endpoint then returns 503."""

    status: Literal["ready", "not_ready"]
    database: Literal["ok", "unavailable"]
