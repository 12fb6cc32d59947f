"""
sources/base.py

Row source contract and shared row validation.

A row source supplies, per entity, a finite ordered sequence of typed
:class:`~aggregation.record.Record` objects. Ingestion order is the order
the backing store returns rows in and is what stable sorts fall back on.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from aggregation.record import Record
from app.logging_utils import log_event
from sources.errors import UnknownEntityError
from sources.schemas import ENTITY_SCHEMAS, schema_fields

logger = logging.getLogger(__name__)


class RowSource(ABC):
    """
    Read-only supplier of entity rows.

    Implementations must not mutate returned records and must raise
    :class:`~sources.errors.RowSourceUnavailableError` when the backing
    store cannot be read.
    """

    def __init__(self) -> None:
        self._rejected: Counter = Counter()

    @abstractmethod
    def rows(self, entity: str) -> tuple[Record, ...]:
        """Return every valid row of *entity* in ingestion order."""

    def fields(self, entity: str) -> frozenset[str]:
        """Column names *entity* is declared with."""
        declared = schema_fields(entity)
        if not declared:
            raise UnknownEntityError(f"No schema registered for entity {entity!r}.")
        return declared

    def rejected(self, entity: str) -> int:
        """Number of rows of *entity* dropped by validation so far."""
        return self._rejected.get(entity, 0)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _validate_rows(
        self,
        entity: str,
        raw_rows: Iterable[Mapping[str, Any]],
    ) -> tuple[Record, ...]:
        """
        Validate raw mappings against the entity schema.

        Invalid rows are dropped, counted and logged; they never abort the
        load.
        """
        model = ENTITY_SCHEMAS.get(entity)
        if model is None:
            raise UnknownEntityError(f"No schema registered for entity {entity!r}.")

        records: list[Record] = []
        rejected = 0
        for row_number, raw in enumerate(raw_rows, start=1):
            try:
                parsed = model.model_validate(dict(raw))
            except ValidationError as exc:
                rejected += 1
                log_event(
                    logger,
                    logging.WARNING,
                    "row_rejected",
                    entity=entity,
                    row_number=row_number,
                    errors=exc.error_count(),
                    first_error=exc.errors()[0]["msg"] if exc.errors() else None,
                )
                continue
            records.append(Record(parsed.model_dump()))

        if rejected:
            self._rejected[entity] += rejected
        logger.debug("Loaded %d %s row(s), rejected %d", len(records), entity, rejected)
        return tuple(records)
