"""
Report layer exports.
"""

from reports.assembler import ReportAssembler
from reports.base import BaseReport, ReportContext, ReportResult
from reports.errors import ReportError, SchemaError, UnknownReportError
from reports.registry import ReportRegistry, default_registry

__all__ = [
    "ReportAssembler",
    "BaseReport",
    "ReportContext",
    "ReportResult",
    "ReportRegistry",
    "default_registry",
    "ReportError",
    "SchemaError",
    "UnknownReportError",
]
