"""
reports/assembler.py

Report assembler: runs named reports against a row source.

Flow per report
---------------
1. Resolve the report by name.
2. Check that every required field is declared by the entity schema
   (structural error otherwise).
3. Fetch the required entities from the row source.
4. Build rows, project them onto the declared columns and wrap the result.

Per-record problems never fail a report; they are counted in the result's
diagnostics. Reports share no state and may run concurrently.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Iterable

from aggregation.diagnostics import REJECTED_ROW, Diagnostics
from app.config import ReportSettings, get_report_settings
from app.logging_utils import log_event
from reports.base import BaseReport, ReportContext, ReportResult, Tables
from reports.errors import SchemaError
from reports.registry import ReportRegistry, default_registry
from sources.base import RowSource

logger = logging.getLogger(__name__)


class ReportAssembler:
    """
    Runs reports from a :class:`ReportRegistry` over a :class:`RowSource`.

    Parameters
    ----------
    source:
        Supplier of entity rows. Read-only for the whole pass.
    settings:
        Report parameters; defaults to environment-driven settings.
    registry:
        Report lookup; defaults to every built-in report.

    Usage::

        assembler = ReportAssembler(InMemoryRowSource(tables))
        result = assembler.run("monthly_revenue_trend")
        print(result.rows)
    """

    def __init__(
        self,
        source: RowSource,
        settings: ReportSettings | None = None,
        registry: ReportRegistry | None = None,
    ) -> None:
        self._source = source
        self._settings = settings or get_report_settings()
        self._registry = registry or default_registry()

    @property
    def report_names(self) -> list[str]:
        return self._registry.names()

    def run(self, name: str) -> ReportResult:
        """Run one report by name."""
        report = self._registry.get(name)
        self._check_schema(report)

        context = ReportContext(
            as_of=self._settings.as_of or date.today(),
            settings=self._settings,
            diagnostics=Diagnostics(),
        )
        log_event(logger, logging.INFO, "report_started", report=name, as_of=context.as_of)
        started = time.perf_counter()

        tables = self._fetch(report, context.diagnostics)
        rows = tuple(row.project(report.columns) for row in report.build(tables, context))

        log_event(
            logger,
            logging.INFO,
            "report_finished",
            report=name,
            rows=len(rows),
            excluded=context.diagnostics.summary(),
            elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return ReportResult(
            name=report.name,
            title=report.title,
            columns=tuple(report.columns),
            rows=rows,
            diagnostics=context.diagnostics.summary(),
        )

    def run_many(self, names: Iterable[str] | None = None) -> list[ReportResult]:
        """
        Run several reports, all registered ones by default.

        Results come back in request order. With ``max_workers > 1`` the
        reports run on a thread pool.
        """
        selected = list(names) if names is not None else self._registry.names()
        for name in selected:
            self._registry.get(name)

        workers = min(self._settings.max_workers, len(selected)) if selected else 1
        if workers <= 1:
            return [self.run(name) for name in selected]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self.run, selected))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _check_schema(self, report: BaseReport) -> None:
        for entity, required in report.requires.items():
            missing = sorted(set(required) - self._source.fields(entity))
            if missing:
                raise SchemaError(
                    f"Report {report.name!r} needs {entity}.{missing}, "
                    "which the row source does not declare."
                )

    def _fetch(self, report: BaseReport, diagnostics: Diagnostics) -> Tables:
        tables = {}
        for entity in report.requires:
            tables[entity] = self._source.rows(entity)
            diagnostics.record(REJECTED_ROW, self._source.rejected(entity))
        return tables
