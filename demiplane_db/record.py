"""An ordered collection of fields forming one table row."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from demiplane_db.field import Field


class Record:
    """A row of named fields, kept in insertion order."""

    def __init__(self, fields: Iterable[Field] = ()) -> None:
        self._fields: list[Field] = list(fields)

    def append(self, field: Field) -> None:
        """Add a field at the end of the record."""
        self._fields.append(field)

    def pop(self) -> Field:
        """Remove and return the last field."""
        if not self._fields:
            raise IndexError("Record is empty, cannot pop")
        return self._fields.pop()

    def clear(self) -> None:
        self._fields.clear()

    def clone(self) -> Record:
        """Return a deep copy of the record."""
        return Record(field.clone() for field in self._fields)

    def find(self, name: str) -> Field | None:
        """Return the first field with this name, or None."""
        return next((f for f in self._fields if f.name == name), None)

    def get_value(self, name: str, kind: type) -> Any:
        """Return the named field's value, checked against kind."""
        field = self.find(name)
        if field is None:
            raise KeyError(f"Field not found: {name}")
        return field.value_as(kind)

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self._fields)

    def __contains__(self, name: object) -> bool:
        return any(f.name == name for f in self._fields)

    def __getitem__(self, key: int | str) -> Field:
        if isinstance(key, str):
            field = self.find(key)
            if field is None:
                raise KeyError(f"Field not found: {key}")
            return field
        try:
            return self._fields[key]
        except IndexError:
            raise IndexError("Index out of range in Record") from None

    def __setitem__(self, index: int, field: Field) -> None:
        try:
            self._fields[index] = field
        except IndexError:
            raise IndexError("Index out of range in Record") from None

    def __repr__(self) -> str:
        return f"Record({self._fields!r})"