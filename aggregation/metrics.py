"""
aggregation/metrics.py

Derived ratio and percentage metrics.

Formulas
--------
Growth delta  = current - previous
Growth %      = (current - previous) / previous * 100
Margin %      = (revenue - cost) / revenue * 100
Percentage    = part / whole * 100

Division-by-zero and NULL inputs return None for the affected metric;
nothing here raises on bad denominators.

Rounding is a presentation concern: :func:`round_half_up` and
:func:`format_pct` are applied when rows are shaped for output, never
before ranking or classification.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_SENTINEL = None  # value returned when a metric cannot be computed


def _is_zero(value: Any) -> bool:
    return value == 0


def _num(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def safe_ratio(numerator: Any, denominator: Any) -> Decimal | None:
    """numerator / denominator, or None on a NULL operand or zero denominator."""
    if numerator is None or denominator is None or _is_zero(denominator):
        return _SENTINEL
    return _num(numerator) / _num(denominator)


def growth_delta(current: Any, previous: Any) -> Any:
    """current - previous; None when either side is NULL."""
    if current is None or previous is None:
        return _SENTINEL
    return current - previous


def growth_pct(current: Any, previous: Any) -> Decimal | None:
    """
    Period-over-period growth in percent.

    None when the previous value is NULL or zero.
    """
    delta = growth_delta(current, previous)
    ratio = safe_ratio(delta, previous)
    return None if ratio is None else ratio * 100


def margin_pct(revenue: Any, cost: Any) -> Decimal | None:
    """(revenue - cost) / revenue * 100; None when revenue is NULL or zero."""
    if cost is None:
        return _SENTINEL
    ratio = safe_ratio(growth_delta(revenue, cost), revenue)
    return None if ratio is None else ratio * 100


def percentage(part: Any, whole: Any) -> Decimal | None:
    ratio = safe_ratio(part, whole)
    return None if ratio is None else ratio * 100


# ---------------------------------------------------------------------------
# Presentation helpers
# ---------------------------------------------------------------------------


def round_half_up(value: Any, places: int = 2) -> Decimal | None:
    """
    Round like SQL ROUND: halves move away from zero.

    Floats go through their shortest repr so 2.675 rounds to 2.68.
    """
    if value is None:
        return None
    exponent = Decimal(1).scaleb(-places)
    return _num(value).quantize(exponent, rounding=ROUND_HALF_UP)


def format_pct(value: Any, places: int = 2) -> str | None:
    """Render a percentage as ``"50.00%"``; None stays None."""
    rounded = round_half_up(value, places)
    if rounded is None:
        return None
    return f"{rounded}%"
