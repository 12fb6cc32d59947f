"""
reports/base.py

Abstract base class and shared building blocks for all reports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, ClassVar, Iterable, Iterator, Mapping

from aggregation.diagnostics import Diagnostics
from aggregation.grouping import GroupKey, Partition
from aggregation.record import Record
from app.config import ReportSettings

Tables = Mapping[str, tuple[Record, ...]]


@dataclass(frozen=True)
class ReportContext:
    """
    Per-invocation inputs that are not table rows.

    ``as_of`` stands in for the database clock in elapsed-day metrics.
    """

    as_of: date
    settings: ReportSettings = field(default_factory=ReportSettings)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


@dataclass(frozen=True)
class ReportResult:
    """
    Structured result returned for every report invocation.

    ``rows`` are flat records whose keys are exactly ``columns``, in order.
    """

    name: str
    """Registered report name (e.g. ``"monthly_revenue_trend"``)."""

    title: str
    """Human-readable report title."""

    columns: tuple[str, ...]
    """Output column names in display order."""

    rows: tuple[Record, ...]
    """Report rows after ordering and limiting."""

    diagnostics: dict[str, int] = field(default_factory=dict)
    """Counts of records excluded during the pass, keyed by reason."""

    generated_at: datetime = field(
        default_factory=lambda: datetime.now(tz=timezone.utc)
    )
    """UTC timestamp of when the result was produced."""

    def __len__(self) -> int:
        return len(self.rows)

    def column(self, name: str) -> list[Any]:
        """Values of one column, top to bottom."""
        return [row[name] for row in self.rows]


class BaseReport(ABC):
    """
    Contract for report implementations.

    Subclasses declare the entities and fields they read and turn those
    tables into ordered output rows. No I/O is permitted inside
    :meth:`build`; the assembler fetches tables beforehand.
    """

    name: ClassVar[str]
    title: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    requires: ClassVar[Mapping[str, tuple[str, ...]]]

    @abstractmethod
    def build(self, tables: Tables, context: ReportContext) -> list[Record]:
        """
        Compute the report rows from *tables*.

        Parameters
        ----------
        tables:
            Entity name to rows, for every entity in :attr:`requires`.
        context:
            Clock, settings and diagnostics for this invocation.

        Returns
        -------
        list[Record]
            Output rows in final order, holding at least :attr:`columns`.
        """


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def status_is(record: Record, status: str) -> bool:
    """Case-insensitive status comparison (SQL default collation)."""
    value = record.require("status")
    return value is not None and value.casefold() == status.casefold()


def full_name(first: str | None, last: str | None) -> str | None:
    parts = [part for part in (first, last) if part]
    return " ".join(parts) if parts else None


def days_between(start: date | None, end: date | None) -> int | None:
    if start is None or end is None:
        return None
    return (end - start).days


def lookup_join(
    left: Iterable[Record],
    right: Mapping[Any, Record],
    on: str,
) -> list[Record]:
    """
    Inner-join *left* rows to a keyed *right* index on field *on*.

    Right-side fields are added to each matching left row; fields the left
    row already holds are kept. NULL keys never match.
    """
    joined: list[Record] = []
    for row in left:
        key = row.require(on)
        if key is None or key not in right:
            continue
        match = right[key]
        joined.append(row.extend(**{k: v for k, v in match.items() if k not in row}))
    return joined


def outer_union(
    candidate_keys: Iterable[GroupKey],
    grouped: Mapping[GroupKey, Partition],
) -> Iterator[tuple[GroupKey, Partition | None]]:
    """
    Pair every candidate key with its partition, or ``None`` when absent.

    This is the explicit form of a LEFT JOIN followed by GROUP BY: keys with
    no matching rows are still emitted so callers can zero-fill them.
    Grouped keys outside the candidate set are dropped.
    """
    for key in candidate_keys:
        yield key, grouped.get(key)
