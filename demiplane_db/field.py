"""Typed field values, UUID handling and column descriptions for SQL generation."""

from __future__ import annotations

import copy
import functools
import json
import re
from datetime import datetime
from enum import Enum, auto
from typing import Any

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

_UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


class SqlType(Enum):
    """SQL column types understood by the query engine."""

    INT = auto()
    ARRAY_INT = auto()
    UUID = auto()
    PRIMARY_UUID = auto()
    NULL_UUID = auto()
    ARRAY_UUID = auto()
    BIGINT = auto()
    ARRAY_BIGINT = auto()
    DOUBLE_PRECISION = auto()
    ARRAY_DOUBLE = auto()
    TEXT = auto()
    ARRAY_TEXT = auto()
    BOOLEAN = auto()
    ARRAY_BOOLEAN = auto()
    TIMESTAMP = auto()
    ARRAY_TIMESTAMP = auto()
    JSONB = auto()
    UNSUPPORTED = auto()


def is_valid_uuid(value: str) -> bool:
    """Return True for a canonical UUID string or one of the special markers."""
    if value in (Uuid.use_generated, Uuid.null_value):
        return True
    return _UUID_PATTERN.fullmatch(value) is not None


@functools.total_ordering
class Uuid:
    """A UUID value that may also be database-generated or null."""

    use_generated = "use_generated"
    null_value = "null"

    def __init__(self, value: str | None = None, is_primary: bool = True) -> None:
        self._primary = is_primary
        if value is None:
            self._id = self.use_generated
            self._generated = True
            self._null = False
            return
        self._id = value
        self._null = value == self.null_value
        self._generated = not self._null and value == self.use_generated
        if not is_valid_uuid(value):
            raise ValueError("Uuid is not valid.")

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_null(self) -> bool:
        return self._null

    @property
    def is_generated(self) -> bool:
        return self._generated

    @property
    def is_primary(self) -> bool:
        return self._primary

    def set_generated(self) -> Uuid:
        self._generated = True
        self._null = False
        return self

    def set_null(self) -> Uuid:
        self._id = self.null_value
        self._null = True
        self._generated = False
        self._primary = False
        return self

    def set_primary(self) -> Uuid:
        self._primary = True
        self._null = False
        return self

    def unset_generated(self) -> Uuid:
        self._generated = False
        return self

    def unset_null(self) -> Uuid:
        self._id = self.use_generated
        self._null = False
        self._generated = True
        return self

    def unset_primary(self) -> Uuid:
        self._primary = False
        return self

    def set_id(self, uuid: str) -> None:
        """Replace the identifier, validating it first."""
        if not uuid:
            raise ValueError("Uuid cannot be empty.")
        if not is_valid_uuid(uuid):
            raise ValueError("Uuid is not valid.")
        self._id = uuid
        self._null = uuid == self.null_value
        self._generated = uuid == self.use_generated

    def __str__(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"Uuid({self._id!r}, is_primary={self._primary})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uuid):
            return NotImplemented
        return self._id == other._id

    def __lt__(self, other: Uuid) -> bool:
        if not isinstance(other, Uuid):
            return NotImplemented
        return self._id < other._id


def _convert_json(value: dict) -> str:
    return json.dumps(value, indent=3, separators=(",", " : ")) + "\n"


def _convert_array_element(elem: Any) -> str:
    if isinstance(elem, Uuid):
        if elem.is_primary:
            raise ValueError("Arrays cannot contain primary keys.")
        if elem.is_null:
            raise ValueError("Arrays cannot contain null ids. Null key element could be removed.")
        if elem.is_generated:
            raise ValueError(
                "For array field received uuid without value. "
                "Array does not support db generation elements."
            )
        return elem.id
    return convert_value(elem)


def convert_value(value: Any) -> str:
    """Render a supported value as its SQL string form."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:.6f}"
    if isinstance(value, Uuid):
        return value.id
    if isinstance(value, dict):
        return _convert_json(value)
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, (list, tuple)):
        return "ARRAY[" + ", ".join(_convert_array_element(e) for e in value) + "]"
    raise TypeError(f"Unsupported field type for SQL conversion: {type(value).__name__}")


def _scalar_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int" if _INT32_MIN <= value <= _INT32_MAX else "bigint"
    if isinstance(value, float):
        return "double"
    if isinstance(value, str):
        return "text"
    if isinstance(value, Uuid):
        return "uuid"
    if isinstance(value, datetime):
        return "timestamp"
    raise TypeError(f"Unsupported vector field type: {type(value).__name__}")


_ARRAY_TYPES = {
    "bool": SqlType.ARRAY_BOOLEAN,
    "int": SqlType.ARRAY_INT,
    "bigint": SqlType.ARRAY_BIGINT,
    "double": SqlType.ARRAY_DOUBLE,
    "text": SqlType.ARRAY_TEXT,
    "uuid": SqlType.ARRAY_UUID,
    "timestamp": SqlType.ARRAY_TIMESTAMP,
}


def deduce_sql_type(value: Any) -> SqlType:
    """Map a Python value to the SQL type it is stored as."""
    if isinstance(value, bool):
        return SqlType.BOOLEAN
    if isinstance(value, int):
        return SqlType.INT if _INT32_MIN <= value <= _INT32_MAX else SqlType.BIGINT
    if isinstance(value, Uuid):
        if value.is_primary:
            return SqlType.PRIMARY_UUID
        if value.is_null:
            return SqlType.NULL_UUID
        return SqlType.UUID
    if isinstance(value, float):
        return SqlType.DOUBLE_PRECISION
    if isinstance(value, str):
        return SqlType.TEXT
    if isinstance(value, dict):
        return SqlType.JSONB
    if isinstance(value, datetime):
        return SqlType.TIMESTAMP
    if isinstance(value, (list, tuple)):
        if not value:
            raise TypeError("Cannot deduce the element type of an empty array")
        kinds = {_scalar_kind(e) for e in value}
        if kinds == {"int", "bigint"}:
            kinds = {"bigint"}
        if len(kinds) != 1:
            raise TypeError("Array elements must share one type")
        return _ARRAY_TYPES[kinds.pop()]
    raise TypeError(f"Unsupported field type: {type(value).__name__}")


_INIT_TYPES = {
    SqlType.NULL_UUID: "UUID NULL",
    SqlType.UUID: "UUID NOT NULL",
    SqlType.PRIMARY_UUID: "UUID DEFAULT gen_random_uuid() PRIMARY KEY",
    SqlType.INT: "INT",
    SqlType.BIGINT: "BIGINT",
    SqlType.DOUBLE_PRECISION: "DOUBLE PRECISION",
    SqlType.TEXT: "TEXT",
    SqlType.JSONB: "JSONB",
    SqlType.BOOLEAN: "BOOLEAN",
    SqlType.TIMESTAMP: "TIMESTAMP",
    SqlType.ARRAY_UUID: "UUID[] NULL",
    SqlType.ARRAY_INT: "INT[]",
    SqlType.ARRAY_BIGINT: "BIGINT[]",
    SqlType.ARRAY_DOUBLE: "DOUBLE PRECISION[]",
    SqlType.ARRAY_TEXT: "TEXT[]",
    SqlType.ARRAY_BOOLEAN: "BOOLEAN[]",
    SqlType.ARRAY_TIMESTAMP: "TIMESTAMP[]",
}


def sql_init_type(sql_type: SqlType) -> str:
    """Return the column type clause used in CREATE TABLE."""
    if sql_type is SqlType.UNSUPPORTED:
        raise ValueError("Unsupported field type")
    try:
        return _INIT_TYPES[sql_type]
    except KeyError:
        raise ValueError("Undefined field type.") from None


class Field:
    """A named value with an SQL type fixed at construction."""

    def __init__(self, name: str, value: Any, sql_type: SqlType | None = None) -> None:
        self.name = name
        self.value = value
        self._sql_type = deduce_sql_type(value) if sql_type is None else sql_type

    @property
    def sql_type(self) -> SqlType:
        return self._sql_type

    def to_string(self) -> str:
        return convert_value(self.value)

    def value_as(self, kind: type) -> Any:
        """Return the value if it is of the requested type, else raise TypeError."""
        matches = isinstance(self.value, kind)
        if kind is not bool and isinstance(self.value, bool) and kind in (int, float):
            matches = False
        if not matches:
            raise TypeError(f"Incorrect type requested for field {self.name}")
        return self.value

    def sql_type_initialization(self) -> str:
        return sql_init_type(self._sql_type)

    def clone(self) -> Field:
        return Field(self.name, copy.deepcopy(self.value), self._sql_type)

    def __repr__(self) -> str:
        return f"Field({self.name!r}, {self.value!r}, {self._sql_type.name})"


class Column:
    """A column name paired with its SQL type."""

    def __init__(self, name: str, value_or_type: Any) -> None:
        self.name = name
        if isinstance(value_or_type, SqlType):
            self.sql_type = value_or_type
        else:
            self.sql_type = deduce_sql_type(value_or_type)

    def sql_type_initialization(self) -> str:
        return sql_init_type(self.sql_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return self.name == other.name and self.sql_type == other.sql_type

    def __repr__(self) -> str:
        return f"Column({self.name!r}, {self.sql_type.name})"