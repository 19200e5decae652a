"""Health check endpoints."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, status

from stockboard.core.config import settings
from stockboard.core.exceptions import AppException
from stockboard.core.logging import get_logger
from stockboard.database.connection import db_healthcheck
from stockboard.schemas.common import HealthResponse, ProbeResponse


router = APIRouter(prefix="/health")

logger = get_logger("health")


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health status of the API and its database.",
)
async def health_check() -> HealthResponse:
    """
    Perform health check on API and dependencies.

    Always answers 200; the body says whether the database is reachable.
    """
    checks = {"database": await db_healthcheck()}
    return HealthResponse(
        status="healthy" if all(checks.values()) else "unhealthy",
        version=settings.app_version,
        timestamp=datetime.now(UTC),
        checks=checks,
    )


@router.get(
    "/ready",
    response_model=ProbeResponse,
    summary="Readiness check",
    description="Check if the API is ready to accept traffic.",
)
async def readiness_check() -> ProbeResponse:
    """Readiness probe: 503 until the database answers."""
    if not await db_healthcheck():
        raise AppException(
            "Database not ready",
            error_code="NOT_READY",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return ProbeResponse(status="ready")


@router.get(
    "/live",
    response_model=ProbeResponse,
    summary="Liveness check",
    description="Check if the API process is alive.",
)
async def liveness_check() -> ProbeResponse:
    """Liveness probe: the process is running."""
    return ProbeResponse(status="alive")
