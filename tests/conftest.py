"""Pytest configuration and fixtures.

Endpoint tests run against an in-memory SQLite database (aiosqlite) created
from the ORM metadata. The engine and session factory are swapped into
``stockboard.database.connection`` so both the request dependency and the
health check read from it.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

import stockboard.database.connection as db_conn
from stockboard.database.orm import Base


@pytest.fixture(autouse=True)
def reset_engine():
    """No engine leaks between tests."""
    db_conn._engine = None
    db_conn._session_factory = None
    yield
    db_conn._engine = None
    db_conn._session_factory = None


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(
    engine: AsyncEngine, monkeypatch: pytest.MonkeyPatch
) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database, installed as the app's."""
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    monkeypatch.setattr(db_conn, "_engine", engine)
    monkeypatch.setattr(db_conn, "_session_factory", factory)
    return factory


@pytest_asyncio.fixture
async def seed(session_factory: async_sessionmaker[AsyncSession]):
    """Insert ORM rows: ``await seed(row, row, ...)``."""

    async def _seed(*rows) -> None:
        async with session_factory() as session:
            session.add_all(rows)
            await session.commit()

    return _seed


@pytest_asyncio.fixture
async def db_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async client for the JSON API, backed by the test database."""
    from stockboard.api.app import create_api_app

    app = create_api_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def site_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async client for the full site (pages plus /api mount), backed by the test database."""
    from stockboard.main import create_app

    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the API app (no database configured)."""
    from stockboard.api.app import create_api_app

    app = create_api_app()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
