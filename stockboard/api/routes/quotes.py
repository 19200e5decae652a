"""Latest quote endpoints: the quote board and the market summary."""

from __future__ import annotations

from fastapi import APIRouter

from stockboard.core.exceptions import storage_errors
from stockboard.core.logging import get_logger
from stockboard.database.session import DbSession
from stockboard.schemas.market import MarketSummaryResponse
from stockboard.schemas.quotes import QuoteResponse
from stockboard.services import market


logger = get_logger("api.routes.quotes")

router = APIRouter()


@router.get(
    "/quotes",
    response_model=list[QuoteResponse],
    summary="Latest quotes",
    description=(
        "Newest quote of every symbol with at least one quote, joined to the "
        "instrument, sorted by market cap descending (nulls last)."
    ),
)
async def list_quotes(db: DbSession) -> list[QuoteResponse]:
    with storage_errors("Failed to fetch quotes"):
        quotes = await market.list_latest_quotes(db)
    logger.info(f"Fetched {len(quotes)} stock quotes")
    return quotes


@router.get(
    "/summary",
    response_model=MarketSummaryResponse,
    summary="Market summary",
    description="Counts, total market cap, average change and the top 5 gainers and losers.",
)
async def get_summary(db: DbSession) -> MarketSummaryResponse:
    with storage_errors("Failed to fetch summary"):
        return await market.get_market_summary(db)
