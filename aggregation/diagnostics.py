"""
aggregation/diagnostics.py

Counters for records excluded during a computation pass.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

INVALID_GROUP_KEY = "invalid_group_key"
INVALID_WINDOW_KEY = "invalid_window_key"
REJECTED_ROW = "rejected_row"


@dataclass
class Diagnostics:
    """
    Per-invocation tally of isolated record failures.

    Each report invocation owns one instance; it is never shared between
    concurrently running reports.
    """

    counts: Counter = field(default_factory=Counter)

    def record(self, reason: str, amount: int = 1) -> None:
        if amount:
            self.counts[reason] += amount

    def count(self, reason: str) -> int:
        return self.counts.get(reason, 0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def merge(self, other: "Diagnostics") -> None:
        self.counts.update(other.counts)

    def summary(self) -> dict[str, int]:
        return dict(sorted(self.counts.items()))
