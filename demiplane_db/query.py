"""Query descriptions built with chainable context mixins."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from demiplane_db.factory import make_field
from demiplane_db.field import Column, Field
from demiplane_db.record import Record


class Operator(Enum):
    """Comparison operators usable in a WHERE clause."""

    EQUAL = "="
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN_OR_EQUAL = "<="
    NOT_EQUAL = "!="


class WhereClause:
    """A single `column <op> value` condition."""

    def __init__(self, name: str | Field, op: Operator, value: Any) -> None:
        if not isinstance(op, Operator):
            raise ValueError("Invalid operator")
        column_name = name.name if isinstance(name, Field) else name
        self._operator = op
        self._field = make_field(column_name, value)

    @property
    def name(self) -> str:
        return self._field.name

    @property
    def operator(self) -> Operator:
        return self._operator

    @property
    def op(self) -> str:
        """The SQL symbol of the operator."""
        return self._operator.value

    def value(self) -> str:
        """The compared value rendered as an SQL string."""
        return self._field.to_string()

    def __repr__(self) -> str:
        return f"WhereClause({self.name!r} {self.op} {self.value()!r})"


@dataclass
class OrderClause:
    """One ORDER BY entry."""

    column: Column
    ascending: bool = True


class TableContext:
    """Holds the name of the table a query targets."""

    def __init__(self, table_name: str = "", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.table_name = table_name

    def table(self, name: str):
        self.table_name = str(name)
        return self


class WhereContext:
    """Collects WHERE conditions, joined with AND."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._where: list[WhereClause] = []

    def where(self, *args: Any):
        """Add a condition: either a WhereClause or (name, operator, value)."""
        if len(args) == 1 and isinstance(args[0], WhereClause):
            self._where.append(args[0])
        else:
            self._where.append(WhereClause(*args))
        return self

    @property
    def has_where(self) -> bool:
        return bool(self._where)

    @property
    def where_conditions(self) -> list[WhereClause]:
        return self._where


class OrderByContext:
    """Collects ORDER BY clauses."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._order_by: list[OrderClause] = []

    def order_by(self, column: Column, ascending: bool = True):
        self._order_by.append(OrderClause(column, ascending))
        return self

    @property
    def has_order_by(self) -> bool:
        return bool(self._order_by)

    @property
    def order_by_clauses(self) -> list[OrderClause]:
        return self._order_by


def _check_size(value: int, what: str) -> int:
    value = int(value)
    if value < 0:
        raise ValueError(f"{what} cannot be negative")
    return value


class LimitOffsetContext:
    """Paging through LIMIT and OFFSET."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.limit_value: int | None = None
        self.offset_value: int | None = None

    def limit(self, value: int):
        self.limit_value = _check_size(value, "Limit")
        return self

    def offset(self, value: int):
        self.offset_value = _check_size(value, "Offset")
        return self

    @property
    def has_limit(self) -> bool:
        return self.limit_value is not None

    @property
    def has_offset(self) -> bool:
        return self.offset_value is not None


class SimilarityContext:
    """A pattern for similarity search (full text, trigram, LIKE)."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.pattern = ""

    def similar(self, pattern: str):
        self.pattern = pattern
        return self

    @property
    def has_pattern(self) -> bool:
        return bool(self.pattern)


class ReturningContext:
    """Columns to return from a data-modifying statement."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._returning: list[Column] = []

    def return_with(self, columns: list[Column]):
        self._returning = list(columns)
        return self

    @property
    def returning_fields(self) -> list[Column]:
        return self._returning

    @property
    def has_returning_fields(self) -> bool:
        return bool(self._returning)


class _ParamsContext:
    """Whether values are sent as bound parameters."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.use_params = True


def _require_columns(columns: list[Any]) -> list[Column]:
    for column in columns:
        if not isinstance(column, Column):
            raise TypeError(f"Expected Column, got {type(column).__name__}")
    return list(columns)


class SelectQuery(
    TableContext, WhereContext, OrderByContext, LimitOffsetContext, SimilarityContext
):
    """A SELECT statement."""

    def __init__(self, table_name: str = "") -> None:
        super().__init__(table_name=table_name)
        self._columns: list[Column] = []

    def select(self, *args: Any) -> SelectQuery:
        """Replace the columns with one list, or append the given columns."""
        if len(args) == 1 and isinstance(args[0], (list, tuple)):
            self._columns = _require_columns(args[0])
        else:
            self._columns.extend(_require_columns(list(args)))
        return self

    @property
    def select_columns(self) -> list[Column]:
        return self._columns


class InsertQuery(TableContext, _ParamsContext, ReturningContext):
    """An INSERT statement."""

    def __init__(self, table_name: str = "") -> None:
        super().__init__(table_name=table_name)
        self._records: list[Record] = []

    def insert(self, records: list[Record]) -> InsertQuery:
        self._records = list(records)
        return self

    def extract_records(self) -> list[Record]:
        """Hand over the records, leaving the query empty."""
        records, self._records = self._records, []
        return records

    @property
    def records(self) -> list[Record]:
        return self._records


class UpdateQuery(TableContext, WhereContext, ReturningContext):
    """An UPDATE statement."""

    def __init__(self, table_name: str = "") -> None:
        super().__init__(table_name=table_name)
        self._fields: list[Field] = []

    def set(self, fields: list[Field]) -> UpdateQuery:
        self._fields = list(fields)
        return self

    def extract_new_values(self) -> list[Field]:
        """Hand over the new values, leaving the query empty."""
        fields, self._fields = self._fields, []
        return fields


class RemoveQuery(TableContext, WhereContext, ReturningContext, _ParamsContext):
    """A DELETE statement."""

    def __init__(self, table_name: str = "") -> None:
        super().__init__(table_name=table_name)


class UpsertQuery(TableContext, WhereContext, _ParamsContext, ReturningContext):
    """An INSERT ... ON CONFLICT statement."""

    def __init__(self, table_name: str = "") -> None:
        super().__init__(table_name=table_name)
        self._conflict: list[Column] = []
        self._update: list[Column] = []
        self._records: list[Record] = []

    def new_values(self, records: list[Record]) -> UpsertQuery:
        self._records = list(records)
        return self

    def when_conflict_in_these_columns(self, columns: list[Column]) -> UpsertQuery:
        self._conflict = _require_columns(list(columns))
        return self

    def replace_these_columns(self, columns: list[Column]) -> UpsertQuery:
        self._update = _require_columns(list(columns))
        return self

    @property
    def conflict_columns(self) -> list[Column]:
        return list(self._conflict)

    @property
    def update_columns(self) -> list[Column]:
        return list(self._update)

    def extract_records(self) -> list[Record]:
        """Hand over the records, leaving the query empty."""
        records, self._records = self._records, []
        return records

    @property
    def records(self) -> list[Record]:
        return self._records


class CountQuery(TableContext, WhereContext, _ParamsContext):
    """A SELECT COUNT(*) statement."""

    def __init__(self, table_name: str = "") -> None:
        super().__init__(table_name=table_name)