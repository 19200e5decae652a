"""Market-wide schemas: sectors, returns and the summary."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class SectorPerformanceResponse(BaseModel):
    """Sector aggregates at the latest calculation date."""

    sector: str
    calculation_date: date
    avg_price_change: float | None = None
    avg_market_cap: float | None = None
    total_volume: int | None = None
    num_stocks: int | None = None
    best_performer: str | None = None
    worst_performer: str | None = None

    model_config = {"from_attributes": True}


class ReturnsResponse(BaseModel):
    """Per-symbol returns at the latest calculation date, joined to the instrument."""

    symbol: str
    calculation_date: date
    display_name: str | None = None
    sector: str | None = None
    return_1d: float | None = None
    return_1w: float | None = None
    return_1m: float | None = None
    return_3m: float | None = None
    return_6m: float | None = None
    return_1y: float | None = None
    volatility_30d: float | None = None
    sharpe_ratio: float | None = None
    max_drawdown: float | None = None


class MarketStats(BaseModel):
    """Aggregates over the latest quote of every symbol."""

    total_stocks: int = 0
    total_market_cap: int | None = None
    avg_change: float | None = None
    gainers: int = Field(0, description="Symbols with change_percent > 0")
    losers: int = Field(0, description="Symbols with change_percent < 0")


class MarketMover(BaseModel):
    """Top gainer / loser entry."""

    symbol: str
    company_name: str | None = None
    current_price: float | None = None
    change_percent: float | None = None


class MarketSummaryResponse(BaseModel):
    """Stats plus the five best and five worst movers."""

    stats: MarketStats
    top_gainers: list[MarketMover]
    top_losers: list[MarketMover]


class ReturnsPerformer(BaseModel):
    """Best or worst symbol for the selected return period."""

    symbol: str
    display_name: str | None = None
    value: float


class ReturnsSummary(BaseModel):
    """Portfolio averages over the returns snapshot; all figures are fractions."""

    period: str = Field(..., description="Return horizon: 1d, 1w, 1m, 3m, 6m or 1y")
    total_stocks: int = 0
    avg_return: float | None = None
    avg_volatility: float | None = None
    avg_sharpe: float | None = None
    best_performer: ReturnsPerformer | None = None
    worst_performer: ReturnsPerformer | None = None
