"""
aggregation/ladders.py

Threshold ladders for ordinal classification.

A ladder is an ordered list of (operator, threshold, label) rungs evaluated
top to bottom; the first satisfied rung wins. A value that satisfies no
rung, or a NULL value, falls through to the ladder's default label.
Boundary operators are part of each ladder's definition and are not
interchangeable.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}


@dataclass(frozen=True)
class Rung:
    op: str
    threshold: Any
    label: str

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported ladder operator {self.op!r}.")

    def matches(self, value: Any) -> bool:
        return _OPERATORS[self.op](value, self.threshold)


@dataclass(frozen=True)
class ThresholdLadder:
    """
    Declarative first-match classifier.

    Attributes:
        name:    Identifier used in logs and errors.
        rungs:   Rungs in evaluation order.
        default: Label for values matching no rung and for NULL values.
    """

    name: str
    rungs: tuple[Rung, ...]
    default: str

    def classify(self, value: Any) -> str:
        if value is None:
            return self.default
        for rung in self.rungs:
            if rung.matches(value):
                return rung.label
        return self.default

    @property
    def labels(self) -> tuple[str, ...]:
        """Labels in ordinal order: rung order, then the default."""
        return tuple(rung.label for rung in self.rungs) + (self.default,)

    def ordinal(self, label: str) -> int:
        """1-based position of *label*; unknown labels sort after all others."""
        try:
            return self.labels.index(label) + 1
        except ValueError:
            return len(self.labels) + 1


# ------------------------------------------------------------------
# Ladders (single source of truth for report thresholds)
# ------------------------------------------------------------------

CUSTOMER_SEGMENT = ThresholdLadder(
    name="customer_segment",
    rungs=(
        Rung(">=", 10, "VIP"),
        Rung(">=", 5, "Loyal"),
        Rung(">=", 2, "Regular"),
    ),
    default="New",
)

TURNOVER_RISK = ThresholdLadder(
    name="turnover_risk",
    rungs=(
        Rung(">", 20, "High Risk"),
        Rung(">", 10, "Medium Risk"),
    ),
    default="Low Risk",
)

# Elapsed days, evaluated from the shortest bracket up.
TENURE_BRACKET = ThresholdLadder(
    name="tenure_bracket",
    rungs=(
        Rung("<", 365, "< 1 year"),
        Rung("<", 730, "1-2 years"),
        Rung("<", 1825, "2-5 years"),
        Rung("<", 3650, "5-10 years"),
    ),
    default="10+ years",
)

PERFORMANCE_CATEGORY = ThresholdLadder(
    name="performance_category",
    rungs=(
        Rung(">=", Decimal("4.5"), "Star Performer"),
        Rung(">=", Decimal("4.0"), "High Performer"),
        Rung(">=", Decimal("3.5"), "Performer"),
    ),
    default="Needs Training",
)


# ------------------------------------------------------------------
# Trend labels
# ------------------------------------------------------------------

TREND_FIRST = "First Review"
TREND_IMPROVING = "Improving"
TREND_DECLINING = "Declining"
TREND_STABLE = "Stable"


def classify_trend(current: Any, previous: Any) -> str:
    """Compare a score with its predecessor."""
    if previous is None:
        return TREND_FIRST
    if current is not None and current > previous:
        return TREND_IMPROVING
    if current is not None and current < previous:
        return TREND_DECLINING
    return TREND_STABLE
