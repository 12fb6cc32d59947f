"""
reports/registry.py

Name-based lookup of the report battery.
"""

from __future__ import annotations

from typing import Iterable

from reports.base import BaseReport
from reports.ecommerce import ECOMMERCE_REPORTS
from reports.errors import UnknownReportError
from reports.hr import HR_REPORTS


class ReportRegistry:
    """
    Ordered mapping of report name to report instance.

    Registration order is the default execution order.
    """

    def __init__(self, reports: Iterable[BaseReport] = ()) -> None:
        self._reports: dict[str, BaseReport] = {}
        for report in reports:
            self.register(report)

    def register(self, report: BaseReport) -> None:
        if report.name in self._reports:
            raise ValueError(f"Report {report.name!r} is already registered.")
        self._reports[report.name] = report

    def get(self, name: str) -> BaseReport:
        try:
            return self._reports[name]
        except KeyError:
            raise UnknownReportError(
                f"Unknown report {name!r}. Available: {sorted(self._reports)}."
            ) from None

    def names(self) -> list[str]:
        return list(self._reports)

    def __contains__(self, name: object) -> bool:
        return name in self._reports

    def __len__(self) -> int:
        return len(self._reports)


def default_registry() -> ReportRegistry:
    """Registry holding every e-commerce and HR report."""
    return ReportRegistry(ECOMMERCE_REPORTS + HR_REPORTS)
