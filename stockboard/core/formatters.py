"""Display formatting for monetary, percentage, volume and date values.

Every page renders numbers through these functions so the same figure never
shows up with different rounding or suffixes in two places. All functions
accept anything (None, NaN, Decimal, numeric strings, garbage) and fall back
to a fixed zero representation instead of raising.

Percent values are expected in percent units (``1.5`` means 1.5%), except
``format_ratio_percent`` and ``format_ratio_change`` which take a fraction
(``0.015``), the unit of the returns snapshot.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from .data_helpers import safe_datetime, safe_float, safe_int


# Fixed English month abbreviations; output must not depend on the host locale
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Largest unit first
_SCALES = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
    (1e3, "K"),
)


def _scaled(value: float) -> str | None:
    for threshold, suffix in _SCALES:
        if value >= threshold:
            return f"{value / threshold:.2f}{suffix}"
    return None


def format_currency(value: Any) -> str:
    """US dollars with two decimals: ``1234.5`` -> ``"$1,234.50"``."""
    number = safe_float(value)
    if number is None:
        return "$0.00"
    if number < 0:
        return f"-${-number:,.2f}"
    return f"${number:,.2f}"


def format_number(value: Any) -> str:
    """Thousands separators, up to three decimals: ``1234567`` -> ``"1,234,567"``."""
    number = safe_float(value)
    if number is None:
        return "0"
    text = f"{number:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_percent(value: Any) -> str:
    """Two decimals and a trailing ``%``. No sign is added for positive values."""
    number = safe_float(value)
    if number is None:
        return "0.00%"
    return f"{number:.2f}%"


def format_change_percent(value: Any) -> str:
    """Signed sibling of ``format_percent``: ``"+1.25%"`` / ``"-0.40%"``."""
    number = safe_float(value)
    if number is None:
        return "0.00%"
    sign = "+" if number >= 0 else ""
    return f"{sign}{number:.2f}%"


def format_change(value: Any) -> str:
    """Signed absolute change with two decimals: ``"+1.23"``."""
    number = safe_float(value)
    if number is None:
        return "0.00"
    sign = "+" if number >= 0 else ""
    return f"{sign}{number:.2f}"


def format_ratio_percent(value: Any) -> str:
    """Fraction rendered as percent: ``0.4213`` -> ``"42.13%"``."""
    number = safe_float(value)
    if number is None:
        return "0.00%"
    return format_percent(number * 100)


def format_ratio_change(value: Any) -> str:
    """Signed fraction rendered as percent: ``0.2345`` -> ``"+23.45%"``."""
    number = safe_float(value)
    if number is None:
        return "0.00%"
    return format_change_percent(number * 100)


def format_market_cap(value: Any) -> str:
    """Scale to T/B/M/K with a ``$`` prefix; values under 1000 as plain dollars."""
    number = safe_float(value)
    if number is None:
        return "$0"
    scaled = _scaled(number)
    if scaled is not None:
        return f"${scaled}"
    return f"${number:.2f}"


def format_volume(value: Any) -> str:
    """Truncate to an integer, then scale to T/B/M/K without a currency prefix."""
    number = safe_int(value)
    if number is None:
        return "0"
    scaled = _scaled(float(number))
    if scaled is not None:
        return scaled
    return str(number)


def shorten_number(value: Any) -> str:
    """Compact signed figure with one decimal: ``-1_250_000`` -> ``"-1.2M"``."""
    number = safe_float(value)
    if number is None:
        return "0"
    magnitude = abs(number)
    if magnitude >= 1e9:
        return f"{number / 1e9:.1f}B"
    if magnitude >= 1e6:
        return f"{number / 1e6:.1f}M"
    if magnitude >= 1e3:
        return f"{number / 1e3:.1f}K"
    return f"{number:.0f}"


def format_date(value: Any) -> str:
    """``"Nov 18, 2025"``; missing or unparseable input gives ``"N/A"``."""
    dt = safe_datetime(value)
    if dt is None:
        return "N/A"
    return f"{_MONTHS[dt.month - 1]} {dt.day}, {dt.year}"


def format_date_short(value: Any) -> str:
    """``"Nov 18"``."""
    dt = safe_datetime(value)
    if dt is None:
        return "N/A"
    return f"{_MONTHS[dt.month - 1]} {dt.day}"


def format_timestamp(value: Any) -> str:
    """``"Nov 29, 2025 at 9:24 AM"`` in the value's own clock."""
    dt = safe_datetime(value)
    if dt is None:
        return "N/A"
    if isinstance(value, date) and not isinstance(value, datetime):
        return format_date(dt)
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{format_date(dt)} at {hour}:{dt.minute:02d} {meridiem}"


def change_direction(value: Any) -> str:
    """``"positive"``, ``"negative"`` or ``"neutral"`` (used as a CSS class)."""
    number = safe_float(value)
    if number is None or number == 0:
        return "neutral"
    return "positive" if number > 0 else "negative"


# Registered as Jinja2 filters by the page templates
TEMPLATE_FILTERS = {
    "currency": format_currency,
    "number": format_number,
    "percent": format_percent,
    "change_percent": format_change_percent,
    "change": format_change,
    "ratio_percent": format_ratio_percent,
    "ratio_change": format_ratio_change,
    "market_cap": format_market_cap,
    "volume": format_volume,
    "shorten": shorten_number,
    "date": format_date,
    "date_short": format_date_short,
    "timestamp": format_timestamp,
    "direction": change_direction,
}
