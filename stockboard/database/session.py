"""Database session dependency injection for FastAPI routes.

Each request gets its own session. The API never writes, so nothing is
committed; the session is rolled back on error and closed afterwards.

Usage in routes:
    from stockboard.database.session import DbSession

    @router.get("/quotes")
    async def list_quotes(db: DbSession) -> list[QuoteResponse]:
        ...
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stockboard.database.connection import get_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped read-only database session."""
    session_factory = await get_session_factory()

    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


# Type alias for dependency injection - use this in route signatures
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
