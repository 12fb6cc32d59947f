"""
aggregation/grouping.py

Grouping engine: partitions a record sequence by a key.

Rules
-----
- Every record whose key can be extracted lands in exactly one partition.
- Partitions keep the relative input order of their records.
- The returned dict iterates keys in first-seen order.
- A record missing a key field is excluded and counted as
  ``invalid_group_key``; it never aborts the pass.
- Partitions are never empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence, Union

from aggregation.diagnostics import INVALID_GROUP_KEY, Diagnostics
from aggregation.errors import MissingFieldError
from aggregation.ordering import null_aware_key
from aggregation.record import Record

logger = logging.getLogger(__name__)

GroupKey = tuple
KeySpec = Union[str, Sequence[str], Callable[[Record], Any]]


@dataclass(frozen=True)
class Partition:
    """
    Ordered, non-empty run of records sharing one group key.
    """

    key: GroupKey
    rows: tuple[Record, ...]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def ordered_by(self, field: str, descending: bool = False) -> "Partition":
        """
        Return a copy sorted on *field*.

        The sort is stable: equal values keep ingestion order. NULLs sort
        first ascending and last descending.
        """
        ordered = sorted(
            self.rows,
            key=lambda record: null_aware_key(record.require(field)),
            reverse=descending,
        )
        return Partition(key=self.key, rows=tuple(ordered))


def key_function(key: KeySpec) -> Callable[[Record], GroupKey]:
    """
    Build a key extractor that always returns a tuple.

    *key* may be a single field name, a sequence of field names, or a
    callable. A callable returning a non-tuple is wrapped in a 1-tuple.
    """
    if callable(key):
        def extract(record: Record) -> GroupKey:
            value = key(record)
            return value if isinstance(value, tuple) else (value,)
        return extract

    names = (key,) if isinstance(key, str) else tuple(key)
    return lambda record: tuple(record.require(name) for name in names)


def group(
    records: Iterable[Record],
    key: KeySpec,
    diagnostics: Diagnostics | None = None,
) -> dict[GroupKey, Partition]:
    """
    Partition *records* by *key*.

    Args:
        records: Input sequence; not modified.
        key: Field name, field names, or key callable.
        diagnostics: Optional sink for excluded-record counts.

    Returns:
        Mapping of group key to :class:`Partition`, in first-seen key order.
    """
    extract = key_function(key)
    buckets: dict[GroupKey, list[Record]] = {}
    skipped = 0

    for record in records:
        try:
            group_key = extract(record)
        except MissingFieldError as exc:
            skipped += 1
            logger.debug("group: excluding record without %r", exc.field)
            continue
        buckets.setdefault(group_key, []).append(record)

    if skipped:
        logger.info("group: %d record(s) excluded for invalid group key", skipped)
        if diagnostics is not None:
            diagnostics.record(INVALID_GROUP_KEY, skipped)

    return {
        group_key: Partition(key=group_key, rows=tuple(rows))
        for group_key, rows in buckets.items()
    }


def index_by(
    records: Iterable[Record],
    field: str,
    diagnostics: Diagnostics | None = None,
) -> dict[Any, Record]:
    """
    Map each value of a unique *field* (a primary key) to its record.

    Later records win on duplicate values.
    """
    return {
        partition.key[0]: partition.rows[-1]
        for partition in group(records, field, diagnostics).values()
    }
