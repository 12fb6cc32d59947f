"""
Row source exports.
"""

from sources.base import RowSource
from sources.errors import RowSourceError, RowSourceUnavailableError, UnknownEntityError
from sources.memory import InMemoryRowSource
from sources.schemas import ENTITY_SCHEMAS, schema_fields
from sources.sql import SQLAlchemyRowSource

__all__ = [
    "RowSource",
    "InMemoryRowSource",
    "SQLAlchemyRowSource",
    "ENTITY_SCHEMAS",
    "schema_fields",
    "RowSourceError",
    "RowSourceUnavailableError",
    "UnknownEntityError",
]
