"""
aggregation/ordering.py

Deterministic multi-key ordering with SQL NULL placement.

NULLs compare lower than every value: they sort first on ascending keys
and last on descending keys. Sorting is stable, so rows that tie on every
key keep their input order.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from aggregation.record import Accessor, Record, resolve


def null_aware_key(value: Any) -> tuple:
    """Sort key placing ``None`` below every other value."""
    if value is None:
        return (0,)
    return (1, value)


@dataclass(frozen=True)
class OrderBy:
    """One sort key: a field name or accessor plus a direction."""

    value: Accessor
    descending: bool = False


def asc(value: Accessor) -> OrderBy:
    return OrderBy(value, descending=False)


def desc(value: Accessor) -> OrderBy:
    return OrderBy(value, descending=True)


class _CompositeKey:
    """Comparable wrapper applying per-key direction."""

    __slots__ = ("parts",)

    def __init__(self, parts: tuple[tuple[tuple, bool], ...]) -> None:
        self.parts = parts

    # Equal keys let heapq.nsmallest keep input order on ties.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _CompositeKey):
            return NotImplemented
        return self.parts == other.parts

    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: "_CompositeKey") -> bool:
        for (mine, descending), (theirs, _) in zip(self.parts, other.parts):
            if mine == theirs:
                continue
            return mine > theirs if descending else mine < theirs
        return False


def _composite(order: Sequence[OrderBy]):
    accessors = [(resolve(item.value), item.descending) for item in order]

    def build(record: Record) -> _CompositeKey:
        return _CompositeKey(
            tuple((null_aware_key(get(record)), descending) for get, descending in accessors)
        )

    return build


def sort_rows(
    rows: Iterable[Record],
    order: Sequence[OrderBy],
    limit: int | None = None,
) -> list[Record]:
    """
    Return *rows* sorted by *order*, truncated to *limit* when given.

    With a limit, selection uses a bounded heap instead of a full sort.
    """
    key = _composite(order)
    if limit is None:
        return sorted(rows, key=key)
    if limit <= 0:
        return []
    return heapq.nsmallest(limit, rows, key=key)


def top_k(rows: Iterable[Record], order: Sequence[OrderBy], k: int) -> list[Record]:
    """Return the first *k* rows under *order*."""
    return sort_rows(rows, order, limit=k)
