"""API routes package."""

from . import financials, health, market, prices, quotes, stocks
