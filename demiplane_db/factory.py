"""Shortcut constructors for typed fields and common collection aliases."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from demiplane_db.field import Column, Field, SqlType, Uuid
from demiplane_db.record import Record

FieldCollection = list[Field]
Records = list[Record]
Columns = list[Column]

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_EPOCH = datetime(1970, 1, 1)


def make_field(name: str, value: Any) -> Field:
    """Create a field whose SQL type is deduced from the value."""
    return Field(name, value)


def text_field(name: str, text: str = "") -> Field:
    return Field(name, str(text), SqlType.TEXT)


def uuid_field(name: str, uuid: Uuid | None = None) -> Field:
    return Field(name, Uuid() if uuid is None else uuid)


def bool_field(name: str, value: bool = False) -> Field:
    return Field(name, bool(value), SqlType.BOOLEAN)


def double_field(name: str, value: float = 0.0) -> Field:
    return Field(name, float(value), SqlType.DOUBLE_PRECISION)


def float_field(name: str, value: float = 0.0) -> Field:
    return Field(name, float(value), SqlType.DOUBLE_PRECISION)


def int_field(name: str, value: int = 0) -> Field:
    """Create a 32-bit integer field."""
    value = int(value)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"Value {value} does not fit a 32-bit integer field")
    return Field(name, value, SqlType.INT)


def ll_int_field(name: str, value: int = 0) -> Field:
    """Create a 64-bit integer field."""
    value = int(value)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"Value {value} does not fit a 64-bit integer field")
    return Field(name, value, SqlType.BIGINT)


def json_field(name: str, json_value: dict | None = None) -> Field:
    return Field(name, {} if json_value is None else json_value, SqlType.JSONB)


def time_field(name: str, time: datetime | None = None) -> Field:
    return Field(name, _EPOCH if time is None else time, SqlType.TIMESTAMP)