"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Path


def normalize_symbol(
    symbol: str = Path(..., min_length=1, max_length=20, description="Stock ticker symbol"),
) -> str:
    """Validate and normalize symbol from path parameter."""
    return symbol.strip().upper()


Symbol = Annotated[str, Depends(normalize_symbol)]
