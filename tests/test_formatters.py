"""Tests for display formatters and their template filter registration."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from stockboard.core.formatters import (
    TEMPLATE_FILTERS,
    change_direction,
    format_change,
    format_change_percent,
    format_currency,
    format_date,
    format_date_short,
    format_market_cap,
    format_number,
    format_percent,
    format_ratio_change,
    format_ratio_percent,
    format_timestamp,
    format_volume,
    shorten_number,
)


NULLISH = [None, "", "   ", "abc", float("nan"), float("inf"), True, object()]


class TestNullSafety:
    """Every formatter returns its zero representation for unusable input."""

    @pytest.mark.parametrize(
        "formatter,zero",
        [
            (format_currency, "$0.00"),
            (format_number, "0"),
            (format_percent, "0.00%"),
            (format_change_percent, "0.00%"),
            (format_change, "0.00"),
            (format_ratio_percent, "0.00%"),
            (format_ratio_change, "0.00%"),
            (format_market_cap, "$0"),
            (format_volume, "0"),
            (shorten_number, "0"),
            (format_date, "N/A"),
            (format_date_short, "N/A"),
            (format_timestamp, "N/A"),
            (change_direction, "neutral"),
        ],
    )
    def test_unusable_input_gives_zero_representation(self, formatter, zero):
        for value in NULLISH:
            assert formatter(value) == zero, f"{formatter.__name__}({value!r})"


class TestCurrency:
    """Tests for format_currency."""

    def test_thousands_and_two_decimals(self):
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(Decimal("271.4900")) == "$271.49"

    def test_negative(self):
        assert format_currency(-12.5) == "-$12.50"
        assert format_currency(-1000) == "-$1,000.00"

    def test_numeric_string(self):
        assert format_currency("1,234.5") == "$1,234.50"


class TestScaledValues:
    """Tests for market cap, volume and shortened numbers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3_000_000_000_000, "$3.00T"),
            (4_020_000_000_000, "$4.02T"),
            (1_500_000_000, "$1.50B"),
            (2_500_000, "$2.50M"),
            (1_000, "$1.00K"),
            (999, "$999.00"),
            (0, "$0.00"),
        ],
    )
    def test_market_cap(self, value, expected):
        assert format_market_cap(value) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            (45_123_456, "45.12M"),
            (1_200_000_000, "1.20B"),
            (15_300, "15.30K"),
            (999, "999"),
            (0, "0"),
            (1234.9, "1.23K"),
        ],
    )
    def test_volume(self, value, expected):
        assert format_volume(value) == expected

    def test_volume_truncates_fractions(self):
        assert format_volume(999.9) == "999"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (-1_250_000, "-1.2M"),
            (3_400_000_000, "3.4B"),
            (-5_500, "-5.5K"),
            (42, "42"),
        ],
    )
    def test_shorten_number(self, value, expected):
        assert shorten_number(value) == expected


class TestPercentAndChange:
    """Tests for percentage and signed change formatting."""

    def test_percent_has_no_plus_sign(self):
        assert format_percent(1.5) == "1.50%"
        assert format_percent(-0.4) == "-0.40%"

    def test_change_percent_is_signed(self):
        assert format_change_percent(1.254) == "+1.25%"
        assert format_change_percent(-0.4) == "-0.40%"
        assert format_change_percent(0) == "+0.00%"

    def test_change_is_signed(self):
        assert format_change(1.234) == "+1.23"
        assert format_change(-2) == "-2.00"

    def test_ratio_percent_multiplies_by_100(self):
        assert format_ratio_percent(0.4213) == "42.13%"
        assert format_ratio_percent(Decimal("0.005")) == "0.50%"

    def test_ratio_change_is_signed_percent_of_fraction(self):
        assert format_ratio_change(0.2345) == "+23.45%"
        assert format_ratio_change(-0.0312) == "-3.12%"
        assert format_ratio_change("0.1") == "+10.00%"
        assert format_ratio_change(0) == "+0.00%"

    def test_number(self):
        assert format_number(1234567) == "1,234,567"
        assert format_number(28.5) == "28.5"
        assert format_number(0.12345) == "0.123"


class TestDates:
    """Tests for date and timestamp formatting."""

    def test_date_from_date_datetime_and_string(self):
        assert format_date(date(2025, 11, 18)) == "Nov 18, 2025"
        assert format_date(datetime(2025, 11, 18, 23, 59)) == "Nov 18, 2025"
        assert format_date("2025-11-18") == "Nov 18, 2025"

    def test_date_short(self):
        assert format_date_short(date(2025, 1, 5)) == "Jan 5"

    def test_unparseable_date(self):
        assert format_date("not a date") == "N/A"

    def test_timestamp(self):
        assert format_timestamp(datetime(2025, 11, 29, 9, 24)) == "Nov 29, 2025 at 9:24 AM"
        assert format_timestamp(datetime(2025, 11, 29, 0, 5)) == "Nov 29, 2025 at 12:05 AM"
        assert format_timestamp(datetime(2025, 11, 29, 15, 30)) == "Nov 29, 2025 at 3:30 PM"

    def test_timestamp_from_iso_utc_string(self):
        assert format_timestamp("2025-11-29T09:24:00Z") == "Nov 29, 2025 at 9:24 AM"

    def test_timestamp_of_plain_date(self):
        assert format_timestamp(date(2025, 11, 29)) == "Nov 29, 2025"

    def test_aware_datetime_keeps_its_own_clock(self):
        value = datetime(2025, 11, 29, 14, 0, tzinfo=timezone.utc)
        assert format_timestamp(value) == "Nov 29, 2025 at 2:00 PM"


class TestChangeDirection:
    """Tests for change_direction."""

    def test_directions(self):
        assert change_direction(0.01) == "positive"
        assert change_direction(-0.01) == "negative"
        assert change_direction(0) == "neutral"
        assert change_direction(Decimal("-1.5")) == "negative"


class TestTemplateFilters:
    """Tests for the Jinja2 filter table."""

    def test_filters_are_the_formatters(self):
        assert TEMPLATE_FILTERS["currency"] is format_currency
        assert TEMPLATE_FILTERS["market_cap"] is format_market_cap
        assert TEMPLATE_FILTERS["direction"] is change_direction
        assert TEMPLATE_FILTERS["ratio_change"] is format_ratio_change

    def test_every_filter_is_null_safe(self):
        for name, formatter in TEMPLATE_FILTERS.items():
            result = formatter(None)
            assert isinstance(result, str) and result, name
