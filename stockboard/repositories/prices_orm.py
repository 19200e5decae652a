"""Daily price bar repository using SQLAlchemy ORM.

Indicator columns are computed by the ingestion job; they are selected,
never recomputed.

Usage:
    from stockboard.repositories import prices_orm as prices_repo

    bars = await prices_repo.get_prices_since(session, "AAPL", start_date)
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockboard.core.logging import get_logger
from stockboard.database.orm import FactDailyPrice


logger = get_logger("repositories.prices_orm")

INDICATOR_LIMIT = 100


async def get_prices_since(
    session: AsyncSession,
    symbol: str,
    start_date: date,
) -> Sequence[FactDailyPrice]:
    """Bars on or after ``start_date``, oldest first.

    Args:
        session: Active session
        symbol: Stock ticker symbol
        start_date: First trading date to include

    Returns:
        Sequence of FactDailyPrice ordered by trading_date ascending
    """
    result = await session.execute(
        select(FactDailyPrice)
        .where(
            FactDailyPrice.symbol == symbol.upper(),
            FactDailyPrice.trading_date >= start_date,
        )
        .order_by(FactDailyPrice.trading_date.asc())
    )
    return result.scalars().all()


async def get_recent_bars(
    session: AsyncSession,
    symbol: str,
    limit: int = INDICATOR_LIMIT,
) -> Sequence[FactDailyPrice]:
    """The ``limit`` most recent bars, newest first."""
    result = await session.execute(
        select(FactDailyPrice)
        .where(FactDailyPrice.symbol == symbol.upper())
        .order_by(FactDailyPrice.trading_date.desc())
        .limit(limit)
    )
    return result.scalars().all()
