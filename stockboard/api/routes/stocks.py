"""Instrument endpoints: list, last refresh and detail."""

from __future__ import annotations

from fastapi import APIRouter

from stockboard.api.dependencies import Symbol
from stockboard.core.exceptions import storage_errors
from stockboard.core.logging import get_logger
from stockboard.database.session import DbSession
from stockboard.schemas.stocks import (
    LastUpdatedResponse,
    StockDetailResponse,
    StockSummary,
)
from stockboard.services import market


logger = get_logger("api.routes.stocks")

router = APIRouter(prefix="/stocks")


@router.get(
    "",
    response_model=list[StockSummary],
    summary="List instruments",
    description="All instruments in the reference table, sorted by symbol.",
)
async def list_stocks(db: DbSession) -> list[StockSummary]:
    with storage_errors("Failed to fetch stocks"):
        return await market.list_stocks(db)


# Declared before /{symbol} so "last-updated" is not taken for a ticker
@router.get(
    "/last-updated",
    response_model=LastUpdatedResponse,
    summary="Last reference-data refresh",
    description="Newest dim_stocks refresh as an ISO-8601 UTC timestamp, or null.",
)
async def get_last_updated(db: DbSession) -> LastUpdatedResponse:
    with storage_errors("Failed to fetch last updated date"):
        return await market.get_last_updated(db)


@router.get(
    "/{symbol}",
    response_model=StockDetailResponse,
    summary="Instrument detail",
    description="Instrument with its latest quote and fundamentals; 404 for unknown symbols.",
)
async def get_stock_detail(symbol: Symbol, db: DbSession) -> StockDetailResponse:
    with storage_errors("Failed to fetch stock details"):
        return await market.get_stock_detail(db, symbol)
