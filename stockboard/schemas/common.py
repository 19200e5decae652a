"""Error, health and service-info schemas shared by the API and the root app."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str = Field(..., description="Machine-readable code", examples=["NOT_FOUND", "STORAGE_ERROR"])
    message: str
    status: int
    details: dict[str, Any] | None = Field(
        default=None,
        description="symbol for unknown instruments, path/method for unknown routes, reason for storage failures",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "STORAGE_ERROR",
                "message": "Failed to fetch quotes",
                "status": 500,
                "details": {"reason": "connection refused"},
            }
        }
    }


class HealthResponse(BaseModel):
    """Service health; the database check is the only dependency."""

    status: Literal["healthy", "unhealthy"]
    version: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    checks: dict[str, bool] = Field(default_factory=dict)


class ProbeResponse(BaseModel):
    """Liveness / readiness probe answer."""

    status: Literal["alive", "ready"]


class ServiceInfo(BaseModel):
    """Root ``/status`` document."""

    name: str
    version: str
    docs: str | None = None
    health: str
