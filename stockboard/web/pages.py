"""Server-rendered dashboard pages.

The pages read through the same service functions as the JSON API and
render every monetary, percentage and volume figure through the template
filters from ``stockboard.core.formatters``. They refresh themselves every
``refresh_interval_seconds``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from stockboard.api.dependencies import Symbol
from stockboard.core.config import settings
from stockboard.core.exceptions import AppException, storage_errors
from stockboard.core.formatters import TEMPLATE_FILTERS
from stockboard.core.logging import get_logger
from stockboard.core.periods import DEFAULT_PERIOD, HistoryPeriod, resolve_period
from stockboard.database.session import DbSession
from stockboard.services import market


logger = get_logger("web.pages")

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters.update(TEMPLATE_FILTERS)

router = APIRouter()

# Rows of the indicator table on the detail page
INDICATOR_ROWS = 10


def _render(request: Request, name: str, status_code: int = 200, **context: Any) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        name,
        {
            "app_name": settings.app_name,
            "refresh_interval": settings.refresh_interval_seconds,
            **context,
        },
        status_code=status_code,
    )


def _render_error(request: Request, exc: AppException) -> HTMLResponse:
    logger.warning(f"Page {request.url.path} failed: {exc.message}")
    return _render(
        request,
        "error.html",
        status_code=exc.status_code,
        error=exc,
        refresh_interval=None,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def overview_page(request: Request, db: DbSession) -> HTMLResponse:
    """Market overview: summary stats, movers, quote board and sectors."""
    try:
        with storage_errors("Failed to load market data"):
            quotes = await market.list_latest_quotes(db)
            sectors = await market.get_sector_performance(db)
            last_updated = await market.get_last_updated(db)
    except AppException as e:
        return _render_error(request, e)

    return _render(
        request,
        "overview.html",
        summary=market.summarize_quotes(quotes),
        quotes=quotes,
        sectors=sectors,
        last_updated=last_updated.last_updated_date,
    )


@router.get("/stocks/{symbol}", response_class=HTMLResponse, include_in_schema=False)
async def stock_page(
    request: Request,
    symbol: Symbol,
    db: DbSession,
    period: str = Query(DEFAULT_PERIOD.value),
) -> HTMLResponse:
    """Instrument detail with price history, indicators, financials and signals."""
    resolved = resolve_period(period)
    try:
        with storage_errors("Failed to load stock details"):
            detail = await market.get_stock_detail(db, symbol)
            prices = await market.get_price_history(db, symbol, resolved)
            indicators = await market.get_indicators(db, symbol)
            financials = await market.get_financials(db, symbol)
            signals = await market.get_signals(db, symbol)
    except AppException as e:
        return _render_error(request, e)

    return _render(
        request,
        "stock.html",
        detail=detail,
        period=resolved,
        periods=list(HistoryPeriod),
        prices=prices,
        indicators=indicators[:INDICATOR_ROWS],
        financials=financials,
        signals=signals,
    )


@router.get("/sectors", response_class=HTMLResponse, include_in_schema=False)
async def sectors_page(request: Request, db: DbSession) -> HTMLResponse:
    """Sector performance table."""
    try:
        with storage_errors("Failed to load sectors"):
            sectors = await market.get_sector_performance(db)
    except AppException as e:
        return _render_error(request, e)

    return _render(request, "sectors.html", sectors=sectors)


@router.get("/performance", response_class=HTMLResponse, include_in_schema=False)
async def performance_page(
    request: Request,
    db: DbSession,
    period: str = Query(market.DEFAULT_RETURN_PERIOD),
) -> HTMLResponse:
    """Portfolio averages for one horizon plus the multi-horizon returns table."""
    period_key = market.resolve_return_period(period)
    try:
        with storage_errors("Failed to load returns"):
            returns = await market.get_returns(db)
    except AppException as e:
        return _render_error(request, e)

    return _render(
        request,
        "performance.html",
        returns=returns,
        summary=market.summarize_returns(returns, period_key),
        periods=market.RETURN_PERIODS,
    )
