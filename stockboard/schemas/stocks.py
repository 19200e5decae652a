"""Instrument and detail schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .quotes import QuoteSnapshot


class StockSummary(BaseModel):
    """One row of dim_stocks."""

    symbol: str = Field(..., description="Stock ticker symbol", examples=["AAPL"])
    company_name: str | None = None
    display_name: str | None = None
    sector: str | None = None
    industry: str | None = None
    market_cap: int | None = None
    logo_base64: str | None = Field(None, description="Base64-encoded logo image")
    updated_date: datetime | None = None

    model_config = {"from_attributes": True}


class LastUpdatedResponse(BaseModel):
    """Newest reference-data refresh, as ``YYYY-MM-DDTHH:MM:SSZ``."""

    last_updated_date: str | None = None


class FundamentalsSnapshot(BaseModel):
    """Latest row of fact_fundamentals for a symbol."""

    symbol: str
    updated_date: datetime
    pe_ratio: float | None = None
    forward_pe: float | None = None
    peg_ratio: float | None = None
    price_to_book: float | None = None
    eps: float | None = None
    dividend_yield: float | None = None
    beta: float | None = None
    profit_margin: float | None = None
    return_on_equity: float | None = None
    debt_to_equity: float | None = None
    fifty_two_week_high: float | None = None
    fifty_two_week_low: float | None = None

    model_config = {"from_attributes": True}


class StockDetailResponse(BaseModel):
    """Instrument with its latest quote and fundamentals (each nullable)."""

    stock: StockSummary
    quote: QuoteSnapshot | None = None
    fundamentals: FundamentalsSnapshot | None = None
