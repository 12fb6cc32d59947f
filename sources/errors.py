"""
Row source exceptions.
"""

from __future__ import annotations


class RowSourceError(Exception):
    """Base exception for row source failures."""


class RowSourceUnavailableError(RowSourceError):
    """Raised when the backing store cannot be reached or read."""


class UnknownEntityError(RowSourceError):
    """Raised when an entity has no registered schema or table."""
