"""Database module: SQLAlchemy async engine, sessions and ORM models."""

from .connection import (
    close_sqlalchemy_engine,
    db_healthcheck,
    get_async_database_url,
    get_session,
    get_session_factory,
    init_sqlalchemy_engine,
)
from .orm import (
    Base,
    DimStock,
    FactBalanceSheet,
    FactCashFlow,
    FactDailyPrice,
    FactFundamentals,
    FactIncomeStatement,
    FactRealtimeQuote,
    FactReturns,
    FactSectorPerformance,
    FactTradingSignal,
)


__all__ = [
    "init_sqlalchemy_engine",
    "close_sqlalchemy_engine",
    "db_healthcheck",
    "get_async_database_url",
    "get_session",
    "get_session_factory",
    "Base",
    "DimStock",
    "FactRealtimeQuote",
    "FactFundamentals",
    "FactDailyPrice",
    "FactSectorPerformance",
    "FactReturns",
    "FactIncomeStatement",
    "FactBalanceSheet",
    "FactCashFlow",
    "FactTradingSignal",
]
