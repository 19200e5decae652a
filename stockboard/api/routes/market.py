"""Market-wide snapshot endpoints: sector performance and returns."""

from __future__ import annotations

from fastapi import APIRouter

from stockboard.core.exceptions import storage_errors
from stockboard.core.logging import get_logger
from stockboard.database.session import DbSession
from stockboard.schemas.market import ReturnsResponse, SectorPerformanceResponse
from stockboard.services import market


logger = get_logger("api.routes.market")

router = APIRouter()


@router.get(
    "/sectors",
    response_model=list[SectorPerformanceResponse],
    summary="Sector performance",
    description="One row per sector at the latest calculation date, best average change first.",
)
async def get_sectors(db: DbSession) -> list[SectorPerformanceResponse]:
    with storage_errors("Failed to fetch sectors"):
        return await market.get_sector_performance(db)


@router.get(
    "/returns",
    response_model=list[ReturnsResponse],
    summary="Returns",
    description="One row per symbol at the latest calculation date, best 1-year return first.",
)
async def get_returns(db: DbSession) -> list[ReturnsResponse]:
    with storage_errors("Failed to fetch returns"):
        return await market.get_returns(db)
