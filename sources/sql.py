"""
sources/sql.py

Row source reading existing tables through SQLAlchemy.

Tables are reflected, never created. Each entity is fetched with one
``SELECT * FROM <entity> ORDER BY <primary key>`` so ingestion order is
deterministic across runs. Results are cached per source instance; build a
new source to observe new data.
"""

from __future__ import annotations

import logging
from threading import Lock

from sqlalchemy import MetaData, Table, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoSuchTableError, SQLAlchemyError

from aggregation.record import Record
from app.config import get_source_settings
from sources.base import RowSource
from sources.errors import RowSourceUnavailableError, UnknownEntityError
from sources.schemas import ENTITY_SCHEMAS

logger = logging.getLogger(__name__)


class SQLAlchemyRowSource(RowSource):
    """
    Row source over a live database.

    Parameters
    ----------
    engine:
        SQLAlchemy engine or database URL. When omitted,
        ``ANALYTICS_DATABASE_URL`` is used.
    schema:
        Optional database schema holding the tables.
    """

    def __init__(self, engine: Engine | str | None = None, *, schema: str | None = None) -> None:
        super().__init__()
        if engine is None:
            url = get_source_settings().database_url
            if url is None:
                raise RowSourceUnavailableError(
                    "No database configured. Pass an engine or set ANALYTICS_DATABASE_URL."
                )
            engine = url
        self._engine = create_engine(engine) if isinstance(engine, str) else engine
        self._metadata = MetaData(schema=schema)
        self._cache: dict[str, tuple[Record, ...]] = {}
        self._lock = Lock()

    def rows(self, entity: str) -> tuple[Record, ...]:
        if entity not in ENTITY_SCHEMAS:
            raise UnknownEntityError(f"No schema registered for entity {entity!r}.")
        with self._lock:
            if entity not in self._cache:
                self._cache[entity] = self._validate_rows(entity, self._fetch(entity))
            return self._cache[entity]

    def _fetch(self, entity: str) -> list[dict]:
        try:
            table = Table(entity, self._metadata, autoload_with=self._engine)
            stmt = select(table).order_by(*table.primary_key.columns)
            with self._engine.connect() as conn:
                rows = [dict(row._mapping) for row in conn.execute(stmt)]
        except NoSuchTableError as exc:
            raise RowSourceUnavailableError(f"Table {entity!r} does not exist.") from exc
        except SQLAlchemyError as exc:
            raise RowSourceUnavailableError(f"Failed to read table {entity!r}: {exc}") from exc

        logger.debug("_fetch %s → %d rows", entity, len(rows))
        return rows
