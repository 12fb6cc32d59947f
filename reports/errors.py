"""
Report-layer exceptions.

Data problems inside a report are isolated and counted; only structural
problems surface as these errors.
"""

from __future__ import annotations


class ReportError(Exception):
    """Base exception for report assembly failures."""


class UnknownReportError(ReportError):
    """Raised when a report name is not registered."""


class SchemaError(ReportError):
    """Raised when a required field is absent from an entity schema."""
