"""Instrument (dim_stocks) repository using SQLAlchemy ORM.

Usage:
    from stockboard.repositories import stocks_orm as stocks_repo

    stocks = await stocks_repo.list_stocks(session)
    stock = await stocks_repo.get_stock(session, "AAPL")
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockboard.core.logging import get_logger
from stockboard.database.orm import DimStock


logger = get_logger("repositories.stocks_orm")


async def list_stocks(session: AsyncSession) -> Sequence[DimStock]:
    """All instruments ordered by symbol."""
    result = await session.execute(select(DimStock).order_by(DimStock.symbol))
    return result.scalars().all()


async def get_stock(session: AsyncSession, symbol: str) -> DimStock | None:
    """Get an instrument by ticker (case-insensitive input)."""
    result = await session.execute(
        select(DimStock).where(DimStock.symbol == symbol.upper())
    )
    return result.scalar_one_or_none()


async def get_stocks_by_symbols(
    session: AsyncSession,
    symbols: Iterable[str],
) -> Sequence[DimStock]:
    """Instruments for a set of tickers; unknown tickers are skipped."""
    normalized = sorted({s.upper() for s in symbols})
    if not normalized:
        return []
    result = await session.execute(
        select(DimStock).where(DimStock.symbol.in_(normalized))
    )
    return result.scalars().all()


async def get_last_updated(session: AsyncSession) -> datetime | None:
    """Most recent reference-data refresh across all instruments."""
    result = await session.execute(select(func.max(DimStock.updated_date)))
    return result.scalar_one_or_none()
