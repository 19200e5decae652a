"""
Centralized Data Conversion Helpers.

This module provides safe type conversion utilities shared by the
formatters, the services and the API schemas. Values read from the store
arrive as Decimal, int, float, date or datetime (or None); values passed
to the pages may be anything.

Usage:
    from stockboard.core.data_helpers import safe_float, safe_int, safe_date
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any


def safe_float(value: Any, default: float | None = None) -> float | None:
    """
    Safely convert value to float.

    Handles None, NaN, Inf, booleans, blank strings and conversion errors.

    Args:
        value: Any value to convert
        default: Default to return if conversion fails

    Returns:
        Float value or default if conversion fails
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return default
    try:
        f = float(value)
    except (ValueError, TypeError, InvalidOperation, OverflowError):
        return default
    if math.isnan(f) or math.isinf(f):
        return default
    return f


def safe_int(value: Any, default: int | None = None) -> int | None:
    """
    Safely convert value to int, truncating toward zero.

    Handles None and conversion errors gracefully.

    Args:
        value: Any value to convert
        default: Default to return if conversion fails

    Returns:
        Int value or default if conversion fails
    """
    f = safe_float(value)
    if f is None:
        return default
    return int(f)


def safe_datetime(value: Any) -> datetime | None:
    """
    Safely convert value to datetime.

    Handles datetime, date (midnight), ISO strings (with a trailing ``Z``)
    and POSIX timestamps.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (ValueError, TypeError, OSError, OverflowError):
        pass
    return None


def safe_date(value: Any) -> date | None:
    """
    Safely convert value to date.

    Handles datetime, date, ISO strings, and timestamps.

    Args:
        value: Any value to convert

    Returns:
        Date value or None if conversion fails
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    dt = safe_datetime(value)
    return dt.date() if dt is not None else None


def to_iso_timestamp(value: datetime | None) -> str | None:
    """Render a timestamp as ``YYYY-MM-DDTHH:MM:SSZ``.

    The store keeps refresh timestamps without a time zone, in UTC. Naive
    values are therefore tagged as UTC as-is; aware values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S") + "Z"


def months_ago(today: date, months: int) -> date:
    """Subtract calendar months, clamping the day to the target month's end.

    >>> months_ago(date(2025, 3, 31), 1)
    datetime.date(2025, 2, 28)
    """
    total = today.year * 12 + (today.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


__all__ = [
    "safe_float",
    "safe_int",
    "safe_date",
    "safe_datetime",
    "to_iso_timestamp",
    "months_ago",
]
