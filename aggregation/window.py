"""
aggregation/window.py

Window engine: position-dependent values within an ordered partition.

Equivalent to SQL ``fn(...) OVER (PARTITION BY ... ORDER BY ...)`` for the
functions the reports need:

    Lag(value, offset)  value from the offset-th preceding row, else default
    RowNumber()         1-based position, no ties
    Rank(value)         standard RANK(): ties share a rank, gaps follow

A window value at row i depends only on rows of the same partition:
rows 0..i for Lag and RowNumber, the whole partition for Rank.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Union

from aggregation.diagnostics import INVALID_WINDOW_KEY, Diagnostics
from aggregation.errors import MissingFieldError
from aggregation.grouping import KeySpec, Partition, group
from aggregation.ordering import null_aware_key
from aggregation.record import Accessor, Record, resolve

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Window functions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Lag:
    value: Accessor
    offset: int = 1
    default: Any = None

    def compute(self, rows: Sequence[Record]) -> list[Any]:
        if self.offset < 1:
            raise ValueError("Lag offset must be >= 1.")
        get = resolve(self.value)
        values = [get(row) for row in rows]
        return [
            values[i - self.offset] if i >= self.offset else self.default
            for i in range(len(values))
        ]


@dataclass(frozen=True)
class RowNumber:
    def compute(self, rows: Sequence[Record]) -> list[int]:
        return list(range(1, len(rows) + 1))


@dataclass(frozen=True)
class Rank:
    value: Accessor
    descending: bool = True

    def compute(self, rows: Sequence[Record]) -> list[int]:
        get = resolve(self.value)
        return rank_values([get(row) for row in rows], descending=self.descending)


WindowFunction = Union[Lag, RowNumber, Rank]


@dataclass(frozen=True)
class WindowSpec:
    """Ordering applied to a partition before window functions run."""

    order_by: Accessor | None = None
    descending: bool = False


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def rank_values(values: Sequence[Any], descending: bool = True) -> list[int]:
    """
    Standard RANK() of *values*, aligned with the input positions.

    Equal values share a rank; the next distinct value's rank is the
    number of rows ranked before it plus one. Values are compared at full
    precision. NULLs rank last when descending, first when ascending.
    """
    keyed = sorted(
        range(len(values)),
        key=lambda i: null_aware_key(values[i]),
        reverse=descending,
    )
    ranks = [0] * len(values)
    previous: tuple | None = None
    current_rank = 0
    for position, index in enumerate(keyed, start=1):
        key = null_aware_key(values[index])
        if key != previous:
            current_rank = position
            previous = key
        ranks[index] = current_rank
    return ranks


def order_rows(rows: Iterable[Record], spec: WindowSpec) -> list[Record]:
    """Stable sort of *rows* under *spec*; no ordering keeps input order."""
    if spec.order_by is None:
        return list(rows)
    get = resolve(spec.order_by)
    return sorted(rows, key=lambda row: null_aware_key(get(row)), reverse=spec.descending)


def apply_window(
    partition: Partition | Sequence[Record],
    spec: WindowSpec,
    function: WindowFunction,
) -> list[tuple[Record, Any]]:
    """
    Order one partition by *spec* and pair each row with its window value.
    """
    rows = partition.rows if isinstance(partition, Partition) else partition
    ordered = order_rows(rows, spec)
    return list(zip(ordered, function.compute(ordered)))


def over(
    records: Iterable[Record],
    *,
    columns: Mapping[str, WindowFunction],
    partition_by: KeySpec | None = None,
    order_by: Accessor | None = None,
    descending: bool = False,
    diagnostics: Diagnostics | None = None,
) -> list[Record]:
    """
    Extend every record with window *columns*.

    Records are returned partition by partition (first-seen partition
    order), each partition in window order. Records whose partition or
    ordering field is missing are excluded and counted.
    """
    spec = WindowSpec(order_by=order_by, descending=descending)
    if partition_by is None:
        partitions: Iterable[Sequence[Record]] = [list(records)]
    else:
        partitions = [p.rows for p in group(records, partition_by, diagnostics).values()]

    result: list[Record] = []
    for rows in partitions:
        try:
            ordered = order_rows(rows, spec)
        except MissingFieldError as exc:
            ordered = _drop_unorderable(rows, spec, diagnostics, exc.field)
        computed = {name: fn.compute(ordered) for name, fn in columns.items()}
        for i, row in enumerate(ordered):
            result.append(row.extend(**{name: values[i] for name, values in computed.items()}))
    return result


def _drop_unorderable(
    rows: Sequence[Record],
    spec: WindowSpec,
    diagnostics: Diagnostics | None,
    field: str,
) -> list[Record]:
    get = resolve(spec.order_by)
    kept: list[Record] = []
    for row in rows:
        try:
            get(row)
        except MissingFieldError:
            continue
        kept.append(row)
    dropped = len(rows) - len(kept)
    logger.info("over: %d record(s) excluded without ordering field %r", dropped, field)
    if diagnostics is not None:
        diagnostics.record(INVALID_WINDOW_KEY, dropped)
    return order_rows(kept, spec)


def latest(rows: Iterable[Record], ordering_field: str) -> Record | None:
    """
    Record with the greatest *ordering_field*; ties go to the last ingested.

    Rows whose ordering value is NULL never win. Returns ``None`` when no
    row qualifies.
    """
    best: Record | None = None
    best_value: Any = None
    for row in rows:
        value = row.require(ordering_field)
        if value is None:
            continue
        if best is None or value >= best_value:
            best, best_value = row, value
    return best
