"""Tests for the portfolio summary computed over the returns snapshot."""

from __future__ import annotations

from datetime import date

import pytest

from stockboard.schemas.market import ReturnsResponse
from stockboard.services.market import resolve_return_period, summarize_returns


def _returns(symbol: str, **fields) -> ReturnsResponse:
    return ReturnsResponse(symbol=symbol, calculation_date=date(2025, 11, 28), **fields)


class TestResolveReturnPeriod:
    """Tests for `?period=` parsing on the performance page."""

    @pytest.mark.parametrize(
        "value,expected",
        [("1d", "1d"), (" 1M ", "1m"), ("6m", "6m"), (None, "1y"), ("", "1y"), ("5y", "1y")],
    )
    def test_known_keys_and_fallback(self, value, expected):
        assert resolve_return_period(value) == expected


class TestSummarizeReturns:
    """Tests for averages and best/worst performer."""

    def test_null_metrics_are_skipped_not_zero(self):
        summary = summarize_returns(
            [
                _returns("AAA", return_1y=0.1, volatility_30d=0.2, sharpe_ratio=1.0),
                _returns("BBB", sharpe_ratio=2.0),
                _returns("CCC", return_1y=-0.3, volatility_30d=0.4),
            ],
            "1y",
        )

        assert summary.total_stocks == 3
        assert summary.avg_return == pytest.approx(-0.1)
        assert summary.avg_volatility == pytest.approx(0.3)
        assert summary.avg_sharpe == pytest.approx(1.5)
        assert summary.best_performer.symbol == "AAA"
        assert summary.worst_performer.symbol == "CCC"
        assert summary.worst_performer.value == pytest.approx(-0.3)

    def test_selected_period_drives_return_and_performers(self):
        rows = [
            _returns("AAA", return_1m=-0.02, return_1y=0.5, display_name="Alpha"),
            _returns("BBB", return_1m=0.04, return_1y=-0.1),
        ]

        summary = summarize_returns(rows, "1m")

        assert summary.period == "1m"
        assert summary.avg_return == pytest.approx(0.01)
        assert summary.best_performer.symbol == "BBB"
        assert summary.worst_performer.symbol == "AAA"
        assert summary.worst_performer.display_name == "Alpha"

    def test_unknown_period_means_one_year(self):
        summary = summarize_returns([_returns("AAA", return_1y=0.2)], "10y")
        assert summary.period == "1y"
        assert summary.avg_return == pytest.approx(0.2)

    def test_equal_returns_go_to_first_symbol(self):
        summary = summarize_returns(
            [_returns("ZZZ", return_1w=0.1), _returns("MMM", return_1w=0.1)], "1w"
        )
        assert summary.best_performer.symbol == "MMM"
        assert summary.worst_performer.symbol == "MMM"

    def test_no_values_for_period(self):
        summary = summarize_returns([_returns("AAA", return_1y=0.2)], "1d")

        assert summary.total_stocks == 1
        assert summary.avg_return is None
        assert summary.best_performer is None
        assert summary.worst_performer is None

    def test_empty_snapshot(self):
        summary = summarize_returns([])

        assert summary.period == "1y"
        assert summary.total_stocks == 0
        assert summary.avg_volatility is None
        assert summary.avg_sharpe is None
