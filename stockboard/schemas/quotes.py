"""Quote snapshot schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class QuoteSnapshot(BaseModel):
    """One row of fact_realtime_quotes."""

    symbol: str
    fetch_timestamp: datetime
    current_price: float | None = None
    change_amount: float | None = None
    change_percent: float | None = Field(None, description="Change in percent units (1.5 = 1.5%)")
    open: float | None = None
    high: float | None = None
    low: float | None = None
    previous_close: float | None = None
    volume: int | None = None
    market_cap: int | None = None

    model_config = {"from_attributes": True}


class QuoteResponse(QuoteSnapshot):
    """Latest quote joined to its instrument; instrument fields are null when missing."""

    company_name: str | None = None
    display_name: str | None = None
    sector: str | None = None
