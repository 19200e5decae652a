"""Quote and fundamentals snapshot repository using SQLAlchemy ORM.

Both tables are append-only: every fetch inserts a new row. The current
value for a symbol is the row with the newest timestamp.

Usage:
    from stockboard.repositories import quotes_orm as quotes_repo

    candidates = await quotes_repo.get_latest_quote_candidates(session)
    quote = await quotes_repo.get_latest_quote(session, "AAPL")
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stockboard.core.logging import get_logger
from stockboard.database.orm import FactFundamentals, FactRealtimeQuote


logger = get_logger("repositories.quotes_orm")


async def get_latest_quote_candidates(
    session: AsyncSession,
) -> Sequence[FactRealtimeQuote]:
    """Quote rows sitting at their symbol's newest fetch timestamp.

    The grouped MAX runs in the database. Two rows of one symbol sharing the
    newest timestamp are both returned; the caller resolves the tie.
    """
    newest = (
        select(
            FactRealtimeQuote.symbol.label("symbol"),
            func.max(FactRealtimeQuote.fetch_timestamp).label("max_timestamp"),
        )
        .group_by(FactRealtimeQuote.symbol)
        .subquery("latest_quotes")
    )
    result = await session.execute(
        select(FactRealtimeQuote).join(
            newest,
            and_(
                FactRealtimeQuote.symbol == newest.c.symbol,
                FactRealtimeQuote.fetch_timestamp == newest.c.max_timestamp,
            ),
        )
    )
    return result.scalars().all()


async def get_latest_quote(
    session: AsyncSession,
    symbol: str,
) -> FactRealtimeQuote | None:
    """Newest quote for one symbol (later insert wins on equal timestamps)."""
    result = await session.execute(
        select(FactRealtimeQuote)
        .where(FactRealtimeQuote.symbol == symbol.upper())
        .order_by(
            FactRealtimeQuote.fetch_timestamp.desc(),
            FactRealtimeQuote.id.desc(),
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_latest_fundamentals(
    session: AsyncSession,
    symbol: str,
) -> FactFundamentals | None:
    """Newest fundamentals snapshot for one symbol."""
    result = await session.execute(
        select(FactFundamentals)
        .where(FactFundamentals.symbol == symbol.upper())
        .order_by(
            FactFundamentals.updated_date.desc(),
            FactFundamentals.id.desc(),
        )
        .limit(1)
    )
    return result.scalar_one_or_none()
