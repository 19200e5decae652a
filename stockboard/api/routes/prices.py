"""Historical price and indicator endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from stockboard.api.dependencies import Symbol
from stockboard.core.exceptions import storage_errors
from stockboard.core.logging import get_logger
from stockboard.core.periods import DEFAULT_PERIOD, resolve_period
from stockboard.database.session import DbSession
from stockboard.schemas.prices import IndicatorRow, PriceBar
from stockboard.services import market


logger = get_logger("api.routes.prices")

router = APIRouter()


@router.get(
    "/prices/{symbol}",
    response_model=list[PriceBar],
    summary="Historical prices",
    description="Daily bars inside the window, oldest first. Unknown periods fall back to 1y.",
)
async def get_prices(
    symbol: Symbol,
    db: DbSession,
    period: str = Query(
        DEFAULT_PERIOD.value,
        description="One of 1w, 1m, 3m, 6m, 1y, 5y, all",
    ),
) -> list[PriceBar]:
    resolved = resolve_period(period)
    with storage_errors("Failed to fetch prices"):
        return await market.get_price_history(db, symbol, resolved)


@router.get(
    "/indicators/{symbol}",
    response_model=list[IndicatorRow],
    summary="Technical indicators",
    description="Precomputed indicators of the 100 most recent bars, newest first.",
)
async def get_indicators(symbol: Symbol, db: DbSession) -> list[IndicatorRow]:
    with storage_errors("Failed to fetch indicators"):
        return await market.get_indicators(db, symbol)
