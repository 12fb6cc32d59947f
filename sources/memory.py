"""
sources/memory.py

In-memory row source backed by plain Python mappings.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from aggregation.record import Record
from sources.base import RowSource
from sources.errors import UnknownEntityError
from sources.schemas import ENTITY_SCHEMAS


class InMemoryRowSource(RowSource):
    """
    Row source over already-loaded rows.

    Rows are validated once at construction. Entities with a registered
    schema that were not supplied read as empty tables.

    Usage::

        source = InMemoryRowSource({"orders": [{"order_id": 1, ...}]})
        source.rows("orders")
    """

    def __init__(self, tables: Mapping[str, Iterable[Mapping[str, Any]]]) -> None:
        super().__init__()
        unknown = sorted(set(tables) - set(ENTITY_SCHEMAS))
        if unknown:
            raise UnknownEntityError(f"No schema registered for entities {unknown}.")
        self._tables: dict[str, tuple[Record, ...]] = {
            entity: self._validate_rows(entity, rows) for entity, rows in tables.items()
        }

    def rows(self, entity: str) -> tuple[Record, ...]:
        if entity not in ENTITY_SCHEMAS:
            raise UnknownEntityError(f"No schema registered for entity {entity!r}.")
        return self._tables.get(entity, ())
