"""Latest-snapshot resolution over append-only time-series fact rows.

Fact tables (quotes, fundamentals, sector performance, returns) are written
by the ingestion process and never updated in place. "Current" is therefore
always derived: either the newest row per entity, or the rows sharing the
newest period across the whole table.

The functions here are pure and in-memory. Repositories push the grouped
MAX down to SQL to narrow the candidate rows; the resolver is applied to
what comes back so that rows tied on the order key resolve the same way on
every call.

Tie-break rule: among rows of one entity with equal order keys, the row with
the greater ``tie_key`` wins. Without a ``tie_key``, the row seen first in
input order is kept.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from typing import Any, TypeVar


R = TypeVar("R")
F = TypeVar("F")
D = TypeVar("D")
K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


def _beats(candidate: Any, incumbent: Any) -> bool:
    """Order-key comparison where None sorts below every real value."""
    if candidate is None:
        return False
    if incumbent is None:
        return True
    return candidate > incumbent


def latest_per_entity(
    rows: Iterable[R],
    entity_key: Callable[[R], K],
    order_key: Callable[[R], Any],
    tie_key: Callable[[R], Any] | None = None,
) -> dict[K, R]:
    """Select the row with the maximum order key for every entity.

    Single pass over ``rows``. Entities without rows are simply absent from
    the result; callers treat absence as "no data".

    Args:
        rows: Fact rows in any order
        entity_key: Extracts the partition key (e.g. symbol)
        order_key: Extracts the comparable timestamp/date
        tie_key: Optional secondary key deciding equal order keys

    Returns:
        Mapping of entity key to its latest row
    """
    latest: dict[K, R] = {}
    latest_order: dict[K, Any] = {}

    for row in rows:
        key = entity_key(row)
        order = order_key(row)

        if key not in latest:
            latest[key] = row
            latest_order[key] = order
            continue

        current_order = latest_order[key]
        if _beats(order, current_order):
            latest[key] = row
            latest_order[key] = order
        elif (
            tie_key is not None
            and order == current_order
            and _beats(tie_key(row), tie_key(latest[key]))
        ):
            latest[key] = row

    return latest


def join_to_reference(
    latest: Mapping[K, F],
    reference_rows: Iterable[D],
    key: Callable[[D], K],
    merge: Callable[[F, D | None], T],
) -> list[T]:
    """Left-join resolved fact rows to their dimension rows.

    Every fact row yields exactly one combined row. A missing dimension row
    is passed to ``merge`` as None; ``merge`` fills the dimension fields
    with defaults. Output follows the iteration order of ``latest``.
    """
    reference: dict[K, D] = {}
    for row in reference_rows:
        reference.setdefault(key(row), row)

    return [merge(fact, reference.get(entity)) for entity, fact in latest.items()]


def resolve_global_latest_period(
    rows: Iterable[R],
    period_key: Callable[[R], Any],
) -> Any | None:
    """Return the maximum period value across all rows, or None if there is none."""
    latest = None
    for row in rows:
        period = period_key(row)
        if _beats(period, latest):
            latest = period
    return latest


def filter_to_period(
    rows: Iterable[R],
    period_key: Callable[[R], Any],
    period: Any | None,
) -> list[R]:
    """Keep the rows whose period equals ``period`` (empty when period is None)."""
    if period is None:
        return []
    return [row for row in rows if period_key(row) == period]


def rows_at_global_latest(
    rows: Iterable[R],
    period_key: Callable[[R], Any],
) -> list[R]:
    """Rows sharing the table-wide latest period."""
    materialized = list(rows)
    period = resolve_global_latest_period(materialized, period_key)
    return filter_to_period(materialized, period_key, period)


def sort_nulls_last(
    rows: Iterable[R],
    key: Callable[[R], Any],
    descending: bool = True,
) -> list[R]:
    """Stable sort by ``key`` with None values placed after all others."""
    present: list[R] = []
    missing: list[R] = []
    for row in rows:
        (missing if key(row) is None else present).append(row)
    return sorted(present, key=key, reverse=descending) + missing
