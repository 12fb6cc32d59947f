"""
aggregation/errors.py

Engine-level exceptions for grouping, windowing and aggregation.
"""

from __future__ import annotations


class AggregationError(Exception):
    """Base exception for aggregation engine failures."""


class MissingFieldError(AggregationError, KeyError):
    """Raised when a record lacks a field required by a key or accessor."""

    def __init__(self, field: str) -> None:
        super().__init__(field)
        self.field = field

    def __str__(self) -> str:
        return f"record has no field {self.field!r}"


class EmptyPartitionError(AggregationError):
    """Raised when sum or avg is requested over zero rows."""
