"""SQLAlchemy ORM models for the dashboard's star schema.

One dimension table (``dim_stocks``) and the fact tables populated by the
external ingestion job. This application only reads them; the mappings
exist so queries can be written with the ORM.

Usage:
    from stockboard.database.orm import DimStock, FactRealtimeQuote
    from stockboard.database.connection import get_session

    async with get_session() as session:
        stock = await session.get(DimStock, "AAPL")
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Naming convention for constraints and indexes
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all ORM models with naming convention."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# =============================================================================
# DIMENSION
# =============================================================================


class DimStock(Base):
    """Instrument reference data, one row per symbol."""
    __tablename__ = "dim_stocks"

    symbol: Mapped[str] = mapped_column(String(20), primary_key=True)
    company_name: Mapped[str | None] = mapped_column(String(255))
    display_name: Mapped[str | None] = mapped_column(String(255))
    sector: Mapped[str | None] = mapped_column(String(100))
    industry: Mapped[str | None] = mapped_column(String(150))
    market_cap: Mapped[int | None] = mapped_column(BigInteger)
    logo_base64: Mapped[str | None] = mapped_column(Text)
    # Stored without time zone, in UTC
    updated_date: Mapped[datetime | None] = mapped_column(DateTime)

    __table_args__ = (
        Index("idx_dim_stocks_sector", "sector"),
    )


# =============================================================================
# QUOTES & FUNDAMENTALS (append-only snapshots)
# =============================================================================


class FactRealtimeQuote(Base):
    """Quote snapshot; a new row per fetch, never updated."""
    __tablename__ = "fact_realtime_quotes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    fetch_timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    current_price: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    change_amount: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    change_percent: Mapped[Decimal | None] = mapped_column(Numeric(10, 4))
    open: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    high: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    low: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    previous_close: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    volume: Mapped[int | None] = mapped_column(BigInteger)
    market_cap: Mapped[int | None] = mapped_column(BigInteger)

    __table_args__ = (
        Index("idx_fact_realtime_quotes_symbol_ts", "symbol", "fetch_timestamp"),
    )


class FactFundamentals(Base):
    """Valuation and profitability snapshot per symbol."""
    __tablename__ = "fact_fundamentals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    updated_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    pe_ratio: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    forward_pe: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    peg_ratio: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    price_to_book: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    eps: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    dividend_yield: Mapped[Decimal | None] = mapped_column(Numeric(10, 6))
    beta: Mapped[Decimal | None] = mapped_column(Numeric(10, 4))
    profit_margin: Mapped[Decimal | None] = mapped_column(Numeric(10, 6))
    return_on_equity: Mapped[Decimal | None] = mapped_column(Numeric(10, 6))
    debt_to_equity: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    fifty_two_week_high: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    fifty_two_week_low: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))

    __table_args__ = (
        Index("idx_fact_fundamentals_symbol_date", "symbol", "updated_date"),
    )


# =============================================================================
# DAILY PRICES (indicators precomputed upstream)
# =============================================================================


class FactDailyPrice(Base):
    """Daily OHLCV bar with precomputed technical indicators."""
    __tablename__ = "fact_daily_prices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    trading_date: Mapped[date] = mapped_column(Date, nullable=False)
    open: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    high: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    low: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    close: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    volume: Mapped[int | None] = mapped_column(BigInteger)
    ma_20: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    ma_50: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    ma_200: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    rsi_14: Mapped[Decimal | None] = mapped_column(Numeric(8, 4))
    macd: Mapped[Decimal | None] = mapped_column(Numeric(16, 6))
    macd_signal: Mapped[Decimal | None] = mapped_column(Numeric(16, 6))
    macd_histogram: Mapped[Decimal | None] = mapped_column(Numeric(16, 6))
    bollinger_upper: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    bollinger_middle: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    bollinger_lower: Mapped[Decimal | None] = mapped_column(Numeric(16, 4))
    stochastic_k: Mapped[Decimal | None] = mapped_column(Numeric(8, 4))
    stochastic_d: Mapped[Decimal | None] = mapped_column(Numeric(8, 4))
    avg_volume_20: Mapped[int | None] = mapped_column(BigInteger)

    __table_args__ = (
        UniqueConstraint("symbol", "trading_date", name="uq_fact_daily_prices"),
        Index("idx_fact_daily_prices_symbol_date", "symbol", "trading_date"),
    )


# =============================================================================
# DAILY AGGREGATES
# =============================================================================


class FactSectorPerformance(Base):
    """Per-sector aggregates for one calculation date."""
    __tablename__ = "fact_sector_performance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sector: Mapped[str] = mapped_column(String(100), nullable=False)
    calculation_date: Mapped[date] = mapped_column(Date, nullable=False)
    avg_price_change: Mapped[Decimal | None] = mapped_column(Numeric(10, 4))
    avg_market_cap: Mapped[Decimal | None] = mapped_column(Numeric(24, 2))
    total_volume: Mapped[int | None] = mapped_column(BigInteger)
    num_stocks: Mapped[int | None] = mapped_column(Integer)
    best_performer: Mapped[str | None] = mapped_column(String(20))
    worst_performer: Mapped[str | None] = mapped_column(String(20))

    __table_args__ = (
        UniqueConstraint("sector", "calculation_date", name="uq_fact_sector_performance"),
        Index("idx_fact_sector_performance_date", "calculation_date"),
    )


class FactReturns(Base):
    """Multi-horizon returns and risk metrics per symbol for one calculation date."""
    __tablename__ = "fact_returns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    calculation_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_1d: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    return_1w: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    return_1m: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    return_3m: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    return_6m: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    return_1y: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    volatility_30d: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))
    sharpe_ratio: Mapped[Decimal | None] = mapped_column(Numeric(10, 4))
    max_drawdown: Mapped[Decimal | None] = mapped_column(Numeric(12, 4))

    __table_args__ = (
        UniqueConstraint("symbol", "calculation_date", name="uq_fact_returns"),
        Index("idx_fact_returns_date", "calculation_date"),
    )


# =============================================================================
# FINANCIAL STATEMENTS (quarterly)
# =============================================================================


class FactIncomeStatement(Base):
    """Quarterly income statement; margins are fractions."""
    __tablename__ = "fact_income_statement"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    fiscal_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_revenue: Mapped[int | None] = mapped_column(BigInteger)
    cost_of_revenue: Mapped[int | None] = mapped_column(BigInteger)
    gross_profit: Mapped[int | None] = mapped_column(BigInteger)
    operating_expenses: Mapped[int | None] = mapped_column(BigInteger)
    operating_income: Mapped[int | None] = mapped_column(BigInteger)
    net_income: Mapped[int | None] = mapped_column(BigInteger)
    gross_margin: Mapped[Decimal | None] = mapped_column(Numeric(10, 6))
    operating_margin: Mapped[Decimal | None] = mapped_column(Numeric(10, 6))
    net_margin: Mapped[Decimal | None] = mapped_column(Numeric(10, 6))

    __table_args__ = (
        UniqueConstraint("symbol", "fiscal_date", name="uq_fact_income_statement"),
    )


class FactBalanceSheet(Base):
    """Quarterly balance sheet."""
    __tablename__ = "fact_balance_sheet"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    fiscal_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_assets: Mapped[int | None] = mapped_column(BigInteger)
    total_liabilities: Mapped[int | None] = mapped_column(BigInteger)
    total_equity: Mapped[int | None] = mapped_column(BigInteger)
    cash_and_equivalents: Mapped[int | None] = mapped_column(BigInteger)
    current_ratio: Mapped[Decimal | None] = mapped_column(Numeric(10, 4))
    debt_to_equity: Mapped[Decimal | None] = mapped_column(Numeric(10, 4))
    debt_to_assets: Mapped[Decimal | None] = mapped_column(Numeric(10, 6))

    __table_args__ = (
        UniqueConstraint("symbol", "fiscal_date", name="uq_fact_balance_sheet"),
    )


class FactCashFlow(Base):
    """Quarterly cash flow statement."""
    __tablename__ = "fact_cash_flow"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    fiscal_date: Mapped[date] = mapped_column(Date, nullable=False)
    operating_cashflow: Mapped[int | None] = mapped_column(BigInteger)
    investing_cashflow: Mapped[int | None] = mapped_column(BigInteger)
    financing_cashflow: Mapped[int | None] = mapped_column(BigInteger)
    free_cashflow: Mapped[int | None] = mapped_column(BigInteger)

    __table_args__ = (
        UniqueConstraint("symbol", "fiscal_date", name="uq_fact_cash_flow"),
    )


# =============================================================================
# SIGNALS
# =============================================================================


class FactTradingSignal(Base):
    """BUY/SELL signal emitted by the upstream strategy job."""
    __tablename__ = "fact_trading_signals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    signal_date: Mapped[date] = mapped_column(Date, nullable=False)
    signal_type: Mapped[str] = mapped_column(String(20), nullable=False)
    signal_reason: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        Index("idx_fact_trading_signals_symbol_date", "symbol", "signal_date"),
    )
