"""
aggregation/record.py

Immutable row type shared by every engine stage.

A :class:`Record` is a read-only mapping of field name to scalar value
(int, Decimal, float, date, str, bool or None). Records are never mutated
after ingestion; every derivation step produces a new record.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Callable, Union

from aggregation.errors import MissingFieldError

# A value accessor is either a field name or a function of the record.
Accessor = Union[str, Callable[["Record"], Any]]


class Record(Mapping[str, Any]):
    """
    Read-only, hashable mapping of field name to scalar value.

    Field order is preserved from construction so that report rows keep
    their declared column order.
    """

    __slots__ = ("_data", "_hash")

    def __init__(self, data: Mapping[str, Any] | None = None, /, **fields: Any) -> None:
        merged: dict[str, Any] = dict(data or {})
        merged.update(fields)
        self._data = merged
        self._hash: int | None = None

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(tuple(self._data.items()))
        return self._hash

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Record):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Record({self._data!r})"

    def require(self, field: str) -> Any:
        """Return *field* or raise :class:`MissingFieldError` when absent."""
        try:
            return self._data[field]
        except KeyError:
            raise MissingFieldError(field) from None

    def extend(self, **fields: Any) -> "Record":
        """Return a new record with *fields* added or overridden."""
        return Record(self._data, **fields)

    def project(self, columns: tuple[str, ...] | list[str]) -> "Record":
        """Return a new record holding only *columns*, in that order."""
        return Record({column: self.require(column) for column in columns})

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)


def resolve(accessor: Accessor) -> Callable[[Record], Any]:
    """
    Turn a field name or callable into a record accessor.

    Field-name accessors raise :class:`MissingFieldError` for absent fields.
    """
    if callable(accessor):
        return accessor
    return lambda record: record.require(accessor)
