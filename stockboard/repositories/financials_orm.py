"""Financial statement and trading signal repository using SQLAlchemy ORM."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stockboard.core.logging import get_logger
from stockboard.database.orm import (
    FactBalanceSheet,
    FactCashFlow,
    FactIncomeStatement,
    FactTradingSignal,
)


logger = get_logger("repositories.financials_orm")

QUARTER_LIMIT = 8
SIGNAL_LIMIT = 20

Statement = TypeVar("Statement", FactIncomeStatement, FactBalanceSheet, FactCashFlow)


async def get_statements(
    session: AsyncSession,
    model: type[Statement],
    symbol: str,
    limit: int = QUARTER_LIMIT,
) -> Sequence[Statement]:
    """Last ``limit`` quarters of one statement type, newest first."""
    result = await session.execute(
        select(model)
        .where(model.symbol == symbol.upper())
        .order_by(model.fiscal_date.desc())
        .limit(limit)
    )
    return result.scalars().all()


async def get_signals(
    session: AsyncSession,
    symbol: str,
    limit: int = SIGNAL_LIMIT,
) -> Sequence[FactTradingSignal]:
    """Most recent trading signals, newest first."""
    result = await session.execute(
        select(FactTradingSignal)
        .where(FactTradingSignal.symbol == symbol.upper())
        .order_by(FactTradingSignal.signal_date.desc(), FactTradingSignal.id.desc())
        .limit(limit)
    )
    return result.scalars().all()
