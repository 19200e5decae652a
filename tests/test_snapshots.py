"""Tests for latest-snapshot resolution.

Covers:
1. Newest row per entity (correctness, absence, ties, missing order keys)
2. Left join against the instrument table
3. Table-wide latest period selection
4. Null-last sorting
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import date, datetime
from operator import attrgetter, itemgetter

from stockboard.core.snapshots import (
    filter_to_period,
    join_to_reference,
    latest_per_entity,
    resolve_global_latest_period,
    rows_at_global_latest,
    sort_nulls_last,
)


@dataclass
class Row:
    id: int
    symbol: str
    ts: datetime | None
    price: float = 0.0


T1 = datetime(2025, 11, 28, 15, 30)
T2 = datetime(2025, 11, 29, 9, 24)
T3 = datetime(2025, 11, 29, 16, 0)


def _resolve(rows, tie=True):
    return latest_per_entity(
        rows,
        entity_key=attrgetter("symbol"),
        order_key=attrgetter("ts"),
        tie_key=attrgetter("id") if tie else None,
    )


# ===========================================================================
# LATEST PER ENTITY
# ===========================================================================


class TestLatestPerEntity:
    """Tests for latest_per_entity."""

    def test_picks_newest_row_per_symbol(self):
        """Each symbol resolves to its maximum timestamp."""
        rows = [
            Row(1, "AAPL", T1, 190.0),
            Row(2, "AAPL", T2, 191.0),
            Row(3, "MSFT", T1, 410.0),
        ]
        latest = _resolve(rows)

        assert set(latest) == {"AAPL", "MSFT"}
        assert latest["AAPL"].price == 191.0
        assert latest["MSFT"].price == 410.0

    def test_result_does_not_depend_on_input_order(self):
        """Every permutation of the input resolves to the same rows."""
        rows = [
            Row(1, "AAPL", T1),
            Row(2, "AAPL", T3),
            Row(3, "AAPL", T2),
            Row(4, "MSFT", T2),
            Row(5, "MSFT", T1),
        ]
        results = {
            tuple(sorted((k, v.id) for k, v in _resolve(perm).items()))
            for perm in itertools.permutations(rows)
        }
        assert results == {(("AAPL", 2), ("MSFT", 4))}

    def test_entities_without_rows_are_absent(self):
        """No rows in, nothing out; no placeholder entries."""
        assert _resolve([]) == {}
        latest = _resolve([Row(1, "AAPL", T1)])
        assert "MSFT" not in latest

    def test_ties_resolve_to_greatest_tie_key(self):
        """Equal timestamps pick the highest id regardless of order."""
        rows = [Row(7, "AAPL", T2, 1.0), Row(9, "AAPL", T2, 2.0), Row(8, "AAPL", T2, 3.0)]
        for perm in itertools.permutations(rows):
            assert _resolve(perm)["AAPL"].id == 9

    def test_ties_without_tie_key_keep_first_seen(self):
        """Without a tie key the first row in input order is kept."""
        rows = [Row(7, "AAPL", T2), Row(9, "AAPL", T2)]
        assert _resolve(rows, tie=False)["AAPL"].id == 7
        assert _resolve(list(reversed(rows)), tie=False)["AAPL"].id == 9

    def test_missing_order_key_never_wins(self):
        """A row without a timestamp loses to any timestamped row."""
        rows = [Row(1, "AAPL", None), Row(2, "AAPL", T1), Row(3, "AAPL", None)]
        assert _resolve(rows)["AAPL"].id == 2

    def test_entity_with_only_missing_order_keys_still_resolves(self):
        """The entity is present; its row is one of its own rows."""
        latest = _resolve([Row(1, "AAPL", None)])
        assert latest["AAPL"].id == 1

    def test_works_with_mappings(self):
        """Any key callables work, e.g. itemgetter over dicts."""
        rows = [
            {"symbol": "AAPL", "ts": T1},
            {"symbol": "AAPL", "ts": T2},
        ]
        latest = latest_per_entity(rows, itemgetter("symbol"), itemgetter("ts"))
        assert latest["AAPL"]["ts"] == T2


# ===========================================================================
# JOIN
# ===========================================================================


@dataclass
class Stock:
    symbol: str
    name: str


def _merge(row: Row, stock: Stock | None) -> dict:
    return {"symbol": row.symbol, "name": stock.name if stock else None}


class TestJoinToReference:
    """Tests for join_to_reference."""

    def test_every_fact_row_appears_once(self):
        """Missing dimension rows are filled with defaults, never dropped."""
        latest = _resolve([Row(1, "AAPL", T1), Row(2, "ZZZZ", T1)])
        joined = join_to_reference(latest, [Stock("AAPL", "Apple")], attrgetter("symbol"), _merge)

        assert joined == [
            {"symbol": "AAPL", "name": "Apple"},
            {"symbol": "ZZZZ", "name": None},
        ]

    def test_unreferenced_dimension_rows_are_ignored(self):
        """Instruments without a fact row do not appear."""
        latest = _resolve([Row(1, "AAPL", T1)])
        joined = join_to_reference(
            latest,
            [Stock("AAPL", "Apple"), Stock("MSFT", "Microsoft")],
            attrgetter("symbol"),
            _merge,
        )
        assert [j["symbol"] for j in joined] == ["AAPL"]

    def test_empty_input(self):
        assert join_to_reference({}, [Stock("AAPL", "Apple")], attrgetter("symbol"), _merge) == []


# ===========================================================================
# GLOBAL LATEST PERIOD
# ===========================================================================


@dataclass
class SectorRow:
    sector: str
    calculation_date: date | None


class TestGlobalLatestPeriod:
    """Tests for resolve_global_latest_period / filter_to_period / rows_at_global_latest."""

    ROWS = [
        SectorRow("Technology", date(2025, 11, 27)),
        SectorRow("Technology", date(2025, 11, 28)),
        SectorRow("Energy", date(2025, 11, 27)),
        SectorRow("Health", date(2025, 11, 28)),
    ]

    def test_resolves_table_wide_maximum(self):
        period = resolve_global_latest_period(self.ROWS, attrgetter("calculation_date"))
        assert period == date(2025, 11, 28)

    def test_only_rows_at_latest_period_are_kept(self):
        """Entities missing from the latest batch are excluded, not backfilled."""
        current = rows_at_global_latest(self.ROWS, attrgetter("calculation_date"))
        assert sorted(r.sector for r in current) == ["Health", "Technology"]

    def test_empty_table_has_no_period(self):
        assert resolve_global_latest_period([], attrgetter("calculation_date")) is None
        assert rows_at_global_latest([], attrgetter("calculation_date")) == []

    def test_filter_with_no_period_is_empty(self):
        assert filter_to_period(self.ROWS, attrgetter("calculation_date"), None) == []

    def test_missing_periods_are_ignored(self):
        rows = [SectorRow("Energy", None), SectorRow("Health", date(2025, 1, 2))]
        assert resolve_global_latest_period(rows, attrgetter("calculation_date")) == date(2025, 1, 2)

    def test_accepts_generators(self):
        """Input is consumed once."""
        current = rows_at_global_latest(
            (r for r in self.ROWS), attrgetter("calculation_date")
        )
        assert len(current) == 2


# ===========================================================================
# SORTING
# ===========================================================================


class TestSortNullsLast:
    """Tests for sort_nulls_last."""

    def test_descending_with_nulls_last(self):
        values = [3, None, 10, 1, None]
        assert sort_nulls_last(values, key=lambda v: v) == [10, 3, 1, None, None]

    def test_ascending_with_nulls_last(self):
        values = [3, None, 10, 1]
        assert sort_nulls_last(values, key=lambda v: v, descending=False) == [1, 3, 10, None]

    def test_stable_for_equal_keys(self):
        rows = [("a", 1), ("b", None), ("c", 1), ("d", None)]
        result = sort_nulls_last(rows, key=itemgetter(1))
        assert [r[0] for r in result] == ["a", "c", "b", "d"]
