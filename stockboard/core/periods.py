"""History period selection for the price endpoints."""

from __future__ import annotations

from datetime import date, timedelta
from enum import Enum

from .data_helpers import months_ago
from .logging import get_logger


logger = get_logger("periods")


class HistoryPeriod(str, Enum):
    """Look-back windows accepted by ``?period=``."""

    ONE_WEEK = "1w"
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    FIVE_YEARS = "5y"
    ALL = "all"


DEFAULT_PERIOD = HistoryPeriod.ONE_YEAR

# Calendar months per period; "all" is capped at ten years
_PERIOD_MONTHS = {
    HistoryPeriod.ONE_MONTH: 1,
    HistoryPeriod.THREE_MONTHS: 3,
    HistoryPeriod.SIX_MONTHS: 6,
    HistoryPeriod.ONE_YEAR: 12,
    HistoryPeriod.FIVE_YEARS: 60,
    HistoryPeriod.ALL: 120,
}


def resolve_period(raw: str | None) -> HistoryPeriod:
    """Map a raw query value to a period; unknown or missing values mean 1y."""
    if raw is None:
        return DEFAULT_PERIOD
    try:
        return HistoryPeriod(raw.strip().lower())
    except ValueError:
        logger.debug(f"Unknown period {raw!r}, using {DEFAULT_PERIOD.value}")
        return DEFAULT_PERIOD


def period_start(period: HistoryPeriod, today: date | None = None) -> date:
    """First trading date (inclusive) inside the window ending today."""
    today = today or date.today()
    if period is HistoryPeriod.ONE_WEEK:
        return today - timedelta(days=7)
    return months_ago(today, _PERIOD_MONTHS[period])
