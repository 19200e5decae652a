"""Daily price and indicator schemas."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class PriceBar(BaseModel):
    """Daily OHLCV bar with the overlay indicators used by the price chart."""

    trading_date: date
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: int | None = None
    ma_20: float | None = None
    ma_50: float | None = None
    ma_200: float | None = None
    rsi_14: float | None = None
    macd: float | None = None
    bollinger_upper: float | None = None
    bollinger_lower: float | None = None

    model_config = {"from_attributes": True}


class IndicatorRow(BaseModel):
    """Full precomputed indicator set for one trading date."""

    trading_date: date
    close: float | None = None
    ma_20: float | None = None
    ma_50: float | None = None
    ma_200: float | None = None
    rsi_14: float | None = None
    macd: float | None = None
    macd_signal: float | None = None
    macd_histogram: float | None = None
    bollinger_upper: float | None = None
    bollinger_middle: float | None = None
    bollinger_lower: float | None = None
    stochastic_k: float | None = None
    stochastic_d: float | None = None
    volume: int | None = None
    avg_volume_20: int | None = None

    model_config = {"from_attributes": True}
