"""Sector performance and returns repository using SQLAlchemy ORM.

Both tables hold one batch of rows per calculation date. "Current" means
the batch at the newest calculation date in the whole table.
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockboard.core.logging import get_logger
from stockboard.database.orm import FactReturns, FactSectorPerformance


logger = get_logger("repositories.analytics_orm")


async def get_latest_sector_performance(
    session: AsyncSession,
) -> Sequence[FactSectorPerformance]:
    """Sector rows at the newest calculation date (unordered)."""
    newest = select(func.max(FactSectorPerformance.calculation_date)).scalar_subquery()
    result = await session.execute(
        select(FactSectorPerformance).where(
            FactSectorPerformance.calculation_date == newest
        )
    )
    return result.scalars().all()


async def get_latest_returns(session: AsyncSession) -> Sequence[FactReturns]:
    """Returns rows at the newest calculation date (unordered)."""
    newest = select(func.max(FactReturns.calculation_date)).scalar_subquery()
    result = await session.execute(
        select(FactReturns).where(FactReturns.calculation_date == newest)
    )
    return result.scalars().all()
