"""Market data service: repository reads composed into API payloads.

Every function takes the request's session, issues one or more SELECTs and
returns response schemas. Nothing here catches storage errors; the routes
translate them once at the request boundary.
"""

from __future__ import annotations

from datetime import date
from operator import attrgetter

from sqlalchemy.ext.asyncio import AsyncSession

from stockboard.core.data_helpers import safe_float, to_iso_timestamp
from stockboard.core.exceptions import NotFoundError
from stockboard.core.logging import get_logger
from stockboard.core.periods import HistoryPeriod, period_start
from stockboard.core.snapshots import (
    join_to_reference,
    latest_per_entity,
    rows_at_global_latest,
    sort_nulls_last,
)
from stockboard.database.orm import (
    DimStock,
    FactBalanceSheet,
    FactCashFlow,
    FactIncomeStatement,
    FactRealtimeQuote,
    FactReturns,
)
from stockboard.repositories import analytics_orm as analytics_repo
from stockboard.repositories import financials_orm as financials_repo
from stockboard.repositories import prices_orm as prices_repo
from stockboard.repositories import quotes_orm as quotes_repo
from stockboard.repositories import stocks_orm as stocks_repo
from stockboard.schemas.financials import (
    BalanceSheetRow,
    CashFlowRow,
    FinancialsResponse,
    IncomeStatementRow,
    TradingSignalResponse,
)
from stockboard.schemas.market import (
    MarketMover,
    MarketStats,
    MarketSummaryResponse,
    ReturnsResponse,
    ReturnsPerformer,
    ReturnsSummary,
    SectorPerformanceResponse,
)
from stockboard.schemas.prices import IndicatorRow, PriceBar
from stockboard.schemas.quotes import QuoteResponse, QuoteSnapshot
from stockboard.schemas.stocks import (
    FundamentalsSnapshot,
    LastUpdatedResponse,
    StockDetailResponse,
    StockSummary,
)


logger = get_logger("services.market")

TOP_MOVERS = 5

# Return horizons of the returns snapshot, keyed as in `?period=`
RETURN_PERIODS = {
    "1d": "1 Day",
    "1w": "1 Week",
    "1m": "1 Month",
    "3m": "3 Months",
    "6m": "6 Months",
    "1y": "1 Year",
}
DEFAULT_RETURN_PERIOD = "1y"


# =============================================================================
# INSTRUMENTS
# =============================================================================


async def list_stocks(session: AsyncSession) -> list[StockSummary]:
    """All instruments sorted by symbol."""
    stocks = await stocks_repo.list_stocks(session)
    logger.debug(f"Fetched {len(stocks)} stocks")
    return [StockSummary.model_validate(s) for s in stocks]


async def get_last_updated(session: AsyncSession) -> LastUpdatedResponse:
    """Newest dim_stocks refresh timestamp (null on an empty table)."""
    last_updated = await stocks_repo.get_last_updated(session)
    return LastUpdatedResponse(last_updated_date=to_iso_timestamp(last_updated))


async def get_stock_detail(session: AsyncSession, symbol: str) -> StockDetailResponse:
    """Instrument plus latest quote and fundamentals.

    Raises:
        NotFoundError: the symbol is not in dim_stocks
    """
    stock = await stocks_repo.get_stock(session, symbol)
    if stock is None:
        raise NotFoundError(f"Stock {symbol.upper()} not found", details={"symbol": symbol.upper()})

    quote = await quotes_repo.get_latest_quote(session, symbol)
    fundamentals = await quotes_repo.get_latest_fundamentals(session, symbol)

    return StockDetailResponse(
        stock=StockSummary.model_validate(stock),
        quote=QuoteSnapshot.model_validate(quote) if quote is not None else None,
        fundamentals=(
            FundamentalsSnapshot.model_validate(fundamentals)
            if fundamentals is not None
            else None
        ),
    )


# =============================================================================
# QUOTES & SUMMARY
# =============================================================================


def _merge_quote(quote: FactRealtimeQuote, stock: DimStock | None) -> QuoteResponse:
    return QuoteResponse(
        **QuoteSnapshot.model_validate(quote).model_dump(),
        company_name=stock.company_name if stock else None,
        display_name=stock.display_name if stock else None,
        sector=stock.sector if stock else None,
    )


async def list_latest_quotes(session: AsyncSession) -> list[QuoteResponse]:
    """Latest quote per symbol joined to its instrument, market cap desc, nulls last."""
    candidates = await quotes_repo.get_latest_quote_candidates(session)
    latest = latest_per_entity(
        candidates,
        entity_key=attrgetter("symbol"),
        order_key=attrgetter("fetch_timestamp"),
        tie_key=attrgetter("id"),
    )
    stocks = await stocks_repo.get_stocks_by_symbols(session, latest.keys())
    quotes = join_to_reference(latest, stocks, attrgetter("symbol"), _merge_quote)

    # Symbol order first so equal market caps list deterministically
    quotes.sort(key=attrgetter("symbol"))
    logger.debug(f"Resolved {len(quotes)} latest quotes from {len(candidates)} candidates")
    return sort_nulls_last(quotes, key=attrgetter("market_cap"), descending=True)


def summarize_quotes(quotes: list[QuoteResponse]) -> MarketSummaryResponse:
    """Stats and top movers over one latest-quote resolution.

    Zero and null change count as neither gainer nor loser. Null change is
    left out of the average and of the mover lists.
    """
    changes = [safe_float(q.change_percent) for q in quotes]
    known = [c for c in changes if c is not None]
    caps = [q.market_cap for q in quotes if q.market_cap is not None]

    stats = MarketStats(
        total_stocks=len(quotes),
        total_market_cap=sum(caps) if caps else None,
        avg_change=sum(known) / len(known) if known else None,
        gainers=sum(1 for c in known if c > 0),
        losers=sum(1 for c in known if c < 0),
    )

    movers = sorted(
        (q for q in quotes if q.change_percent is not None),
        key=attrgetter("symbol"),
    )
    by_change = sorted(movers, key=attrgetter("change_percent"), reverse=True)

    def _mover(q: QuoteResponse) -> MarketMover:
        return MarketMover(
            symbol=q.symbol,
            company_name=q.company_name,
            current_price=q.current_price,
            change_percent=q.change_percent,
        )

    return MarketSummaryResponse(
        stats=stats,
        top_gainers=[_mover(q) for q in by_change[:TOP_MOVERS]],
        top_losers=[
            _mover(q)
            for q in sorted(movers, key=attrgetter("change_percent"))[:TOP_MOVERS]
        ],
    )


async def get_market_summary(session: AsyncSession) -> MarketSummaryResponse:
    """Market summary computed from the latest-quote resolution."""
    quotes = await list_latest_quotes(session)
    return summarize_quotes(quotes)


# =============================================================================
# PRICES & INDICATORS
# =============================================================================


async def get_price_history(
    session: AsyncSession,
    symbol: str,
    period: HistoryPeriod,
    today: date | None = None,
) -> list[PriceBar]:
    """Bars inside the period window, oldest first."""
    start = period_start(period, today)
    bars = await prices_repo.get_prices_since(session, symbol, start)
    return [PriceBar.model_validate(b) for b in bars]


async def get_indicators(session: AsyncSession, symbol: str) -> list[IndicatorRow]:
    """Indicator fields of the most recent 100 bars, newest first."""
    bars = await prices_repo.get_recent_bars(session, symbol)
    return [IndicatorRow.model_validate(b) for b in bars]


# =============================================================================
# SECTORS & RETURNS
# =============================================================================


async def get_sector_performance(session: AsyncSession) -> list[SectorPerformanceResponse]:
    """Sectors at the global latest calculation date, average change desc."""
    rows = await analytics_repo.get_latest_sector_performance(session)
    current = rows_at_global_latest(rows, attrgetter("calculation_date"))
    sectors = [SectorPerformanceResponse.model_validate(r) for r in current]
    sectors.sort(key=attrgetter("sector"))
    return sort_nulls_last(sectors, key=attrgetter("avg_price_change"), descending=True)


def _merge_returns(row: FactReturns, stock: DimStock | None) -> ReturnsResponse:
    return ReturnsResponse(
        symbol=row.symbol,
        calculation_date=row.calculation_date,
        display_name=stock.display_name if stock else None,
        sector=stock.sector if stock else None,
        return_1d=row.return_1d,
        return_1w=row.return_1w,
        return_1m=row.return_1m,
        return_3m=row.return_3m,
        return_6m=row.return_6m,
        return_1y=row.return_1y,
        volatility_30d=row.volatility_30d,
        sharpe_ratio=row.sharpe_ratio,
        max_drawdown=row.max_drawdown,
    )


async def get_returns(session: AsyncSession) -> list[ReturnsResponse]:
    """Returns at the global latest calculation date, 1-year return desc, nulls last."""
    rows = await analytics_repo.get_latest_returns(session)
    current = rows_at_global_latest(rows, attrgetter("calculation_date"))
    by_symbol = {row.symbol: row for row in sorted(current, key=attrgetter("symbol"))}
    stocks = await stocks_repo.get_stocks_by_symbols(session, by_symbol.keys())
    returns = join_to_reference(by_symbol, stocks, attrgetter("symbol"), _merge_returns)
    return sort_nulls_last(returns, key=attrgetter("return_1y"), descending=True)


def resolve_return_period(value: str | None) -> str:
    """Map a `?period=` value to a return horizon; unknown values mean 1y."""
    key = (value or "").strip().lower()
    return key if key in RETURN_PERIODS else DEFAULT_RETURN_PERIOD


def _mean(values: list[float]) -> float | None:
    return sum(values) / len(values) if values else None


def summarize_returns(
    returns: list[ReturnsResponse], period_key: str = DEFAULT_RETURN_PERIOD
) -> ReturnsSummary:
    """Portfolio averages and best/worst performer for one return horizon.

    Null metrics are left out of their average instead of counting as zero.
    Symbols without a return for the period cannot be best or worst; equal
    returns go to the alphabetically first symbol.
    """
    period_key = resolve_return_period(period_key)
    field = attrgetter(f"return_{period_key}")

    ranked = [
        (value, r)
        for r in sorted(returns, key=attrgetter("symbol"))
        if (value := safe_float(field(r))) is not None
    ]

    def _performer(entry: tuple[float, ReturnsResponse] | None) -> ReturnsPerformer | None:
        if entry is None:
            return None
        value, r = entry
        return ReturnsPerformer(symbol=r.symbol, display_name=r.display_name, value=value)

    best = max(ranked, key=lambda e: e[0], default=None)
    worst = min(ranked, key=lambda e: e[0], default=None)

    return ReturnsSummary(
        period=period_key,
        total_stocks=len(returns),
        avg_return=_mean([value for value, _ in ranked]),
        avg_volatility=_mean(
            [v for r in returns if (v := safe_float(r.volatility_30d)) is not None]
        ),
        avg_sharpe=_mean(
            [v for r in returns if (v := safe_float(r.sharpe_ratio)) is not None]
        ),
        best_performer=_performer(best),
        worst_performer=_performer(worst),
    )


# =============================================================================
# FINANCIALS & SIGNALS
# =============================================================================


async def get_financials(session: AsyncSession, symbol: str) -> FinancialsResponse:
    """Last eight quarters of income, balance and cash flow statements."""
    income = await financials_repo.get_statements(session, FactIncomeStatement, symbol)
    balance = await financials_repo.get_statements(session, FactBalanceSheet, symbol)
    cashflow = await financials_repo.get_statements(session, FactCashFlow, symbol)
    return FinancialsResponse(
        income=[IncomeStatementRow.model_validate(r) for r in income],
        balance=[BalanceSheetRow.model_validate(r) for r in balance],
        cashflow=[CashFlowRow.model_validate(r) for r in cashflow],
    )


async def get_signals(session: AsyncSession, symbol: str) -> list[TradingSignalResponse]:
    """Last twenty signals, newest first."""
    signals = await financials_repo.get_signals(session, symbol)
    return [TradingSignalResponse.model_validate(s) for s in signals]
