"""Financial statement and trading signal endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from stockboard.api.dependencies import Symbol
from stockboard.core.exceptions import storage_errors
from stockboard.core.logging import get_logger
from stockboard.database.session import DbSession
from stockboard.schemas.financials import FinancialsResponse, TradingSignalResponse
from stockboard.services import market


logger = get_logger("api.routes.financials")

router = APIRouter()


@router.get(
    "/financials/{symbol}",
    response_model=FinancialsResponse,
    summary="Financial statements",
    description="Last 8 quarters of income, balance sheet and cash flow, newest first.",
)
async def get_financials(symbol: Symbol, db: DbSession) -> FinancialsResponse:
    with storage_errors("Failed to fetch financials"):
        return await market.get_financials(db, symbol)


@router.get(
    "/signals/{symbol}",
    response_model=list[TradingSignalResponse],
    summary="Trading signals",
    description="Last 20 BUY/SELL signals, newest first.",
)
async def get_signals(symbol: Symbol, db: DbSession) -> list[TradingSignalResponse]:
    with storage_errors("Failed to fetch signals"):
        return await market.get_signals(db, symbol)
