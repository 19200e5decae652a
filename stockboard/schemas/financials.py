"""Financial statement and trading signal schemas."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class IncomeStatementRow(BaseModel):
    """Quarterly income statement; margins are fractions."""

    fiscal_date: date
    total_revenue: int | None = None
    cost_of_revenue: int | None = None
    gross_profit: int | None = None
    operating_expenses: int | None = None
    operating_income: int | None = None
    net_income: int | None = None
    gross_margin: float | None = None
    operating_margin: float | None = None
    net_margin: float | None = None

    model_config = {"from_attributes": True}


class BalanceSheetRow(BaseModel):
    """Quarterly balance sheet."""

    fiscal_date: date
    total_assets: int | None = None
    total_liabilities: int | None = None
    total_equity: int | None = None
    cash_and_equivalents: int | None = None
    current_ratio: float | None = None
    debt_to_equity: float | None = None
    debt_to_assets: float | None = None

    model_config = {"from_attributes": True}


class CashFlowRow(BaseModel):
    """Quarterly cash flow statement."""

    fiscal_date: date
    operating_cashflow: int | None = None
    investing_cashflow: int | None = None
    financing_cashflow: int | None = None
    free_cashflow: int | None = None

    model_config = {"from_attributes": True}


class FinancialsResponse(BaseModel):
    """Last eight quarters of each statement, newest first."""

    income: list[IncomeStatementRow]
    balance: list[BalanceSheetRow]
    cashflow: list[CashFlowRow]


class TradingSignalResponse(BaseModel):
    """A BUY/SELL signal with its reason."""

    signal_date: date
    signal_type: str
    signal_reason: str | None = None

    model_config = {"from_attributes": True}
