"""
aggregation/aggregates.py

Aggregate functions over a partition's rows.

Semantics follow SQL:
    - NULL values are ignored by every value aggregate.
    - An aggregate whose inputs are all NULL returns ``None``.
    - ``count(rows)`` counts rows; ``count(rows, value)`` counts non-NULL values.
    - ``stddev`` is the sample standard deviation (n - 1) and is ``None``
      for fewer than two values.

``sum_`` and ``avg`` over zero rows raise :class:`EmptyPartitionError`;
the grouping engine never produces empty partitions, so reaching that
branch means a caller skipped the outer-join zero fill.

All functions are pure and never mutate their input.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence

import numpy as np

from aggregation.errors import EmptyPartitionError
from aggregation.record import Accessor, Record, resolve


def _values(rows: Iterable[Record], value: Accessor) -> list[Any]:
    get = resolve(value)
    return [v for v in (get(row) for row in rows) if v is not None]


def _require_rows(rows: Sequence[Record], name: str) -> None:
    if len(rows) == 0:
        raise EmptyPartitionError(f"{name} over an empty partition")


def count(rows: Sequence[Record], value: Accessor | None = None) -> int:
    """COUNT(*) when *value* is None, otherwise COUNT(value)."""
    if value is None:
        return len(rows)
    return len(_values(rows, value))


def count_where(rows: Iterable[Record], predicate: Callable[[Record], bool]) -> int:
    """SUM(CASE WHEN predicate THEN 1 ELSE 0 END)."""
    return sum(1 for row in rows if predicate(row))


def count_distinct(rows: Iterable[Record], value: Accessor) -> int:
    """COUNT(DISTINCT value)."""
    return len(set(_values(rows, value)))


def sum_(rows: Sequence[Record], value: Accessor) -> Any:
    _require_rows(rows, "sum")
    values = _values(rows, value)
    if not values:
        return None
    return sum(values[1:], values[0])


def avg(rows: Sequence[Record], value: Accessor) -> Any:
    """
    Arithmetic mean of the non-NULL values.

    Decimal inputs stay Decimal so ``sum / count == avg`` holds exactly.
    """
    _require_rows(rows, "avg")
    values = _values(rows, value)
    if not values:
        return None
    total = sum(values[1:], values[0])
    if isinstance(total, Decimal):
        return total / Decimal(len(values))
    return total / len(values)


def min_(rows: Iterable[Record], value: Accessor) -> Any:
    values = _values(rows, value)
    return min(values) if values else None


def max_(rows: Iterable[Record], value: Accessor) -> Any:
    values = _values(rows, value)
    return max(values) if values else None


def stddev(rows: Iterable[Record], value: Accessor) -> float | None:
    """Sample standard deviation; ``None`` below two values."""
    values = _values(rows, value)
    if len(values) < 2:
        return None
    return float(np.std(np.asarray(values, dtype=float), ddof=1))
