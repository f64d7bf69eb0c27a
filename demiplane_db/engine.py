"""Translation of query objects into PostgreSQL statements with numbered parameters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field as dc_field
from typing import Any

from demiplane_db.field import Field, SqlType, Uuid
from demiplane_db.query import (
    CountQuery,
    InsertQuery,
    RemoveQuery,
    SelectQuery,
    UpsertQuery,
    WhereClause,
)
from demiplane_db.record import Record

_CONCAT_SEPARATOR = " || ' ' || "


@dataclass
class PostgresRequest:
    """A generated SQL statement and the values bound to its placeholders."""

    query: str
    params: list[str] = dc_field(default_factory=list)
    param_counter: int = 0


@dataclass
class PostgresConfig:
    """Which search index kinds the database is set up for."""

    use_trgm: bool = True
    use_fts: bool = True


def escape_string(value: str, escape_backslash: bool = False) -> str:
    """Quote a string literal, doubling quotes and hex-escaping control characters."""
    out = ["'"]
    for ch in value:
        if ch == "'":
            out.append("''")
        elif ch == "\\":
            out.append("\\\\" if escape_backslash else "\\")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    out.append("'")
    return "".join(out)


def escape_identifier(value: str) -> str:
    """Quote an identifier, doubling embedded double quotes."""
    return '"' + value.replace('"', '""') + '"'


def fts_index_name(table: str) -> str:
    return f"fts_{table}_idx"


def trgm_index_name(table: str) -> str:
    return f"trgm_{table}_idx"


def constraint_index_name(table: str) -> str:
    return f"constraint_{table}_idx"


def _concatenated_fields(fields: Iterable[Any]) -> str:
    parts = [f"coalesce({escape_identifier(f.name)}::text, '')" for f in fields]
    if not parts:
        raise ValueError("Expected at least one search field.")
    return _CONCAT_SEPARATOR.join(parts)


def fts_index_query(table: str, fields: Iterable[Any]) -> str:
    """Build the full-text search index statement over the given fields."""
    concatenated = _concatenated_fields(fields)
    return (
        f"CREATE INDEX IF NOT EXISTS {fts_index_name(table)} ON {escape_identifier(table)}"
        f" USING gin (to_tsvector('simple', {concatenated}));"
    )


def trgm_index_query(table: str, fields: Iterable[Any]) -> str:
    """Build the trigram index statement over the given fields."""
    concatenated = _concatenated_fields(fields)
    return (
        f"CREATE INDEX IF NOT EXISTS {trgm_index_name(table)} ON {escape_identifier(table)}"
        f" USING gin (({concatenated}) gin_trgm_ops);"
    )


def drop_search_index_requests(table: str) -> list[PostgresRequest]:
    """Statements dropping both search indexes of a table, in execution order."""
    return [
        PostgresRequest(f"DROP INDEX IF EXISTS {fts_index_name(table)};"),
        PostgresRequest(f"DROP INDEX IF EXISTS {trgm_index_name(table)};"),
    ]


def _column_list(columns: Iterable[Any]) -> str:
    return ", ".join(escape_identifier(c.name) for c in columns)


def _where_sql(clauses: Iterable[WhereClause], params: list[str], use_params: bool = True) -> str:
    conditions = []
    for clause in clauses:
        if use_params:
            params.append(clause.value())
            placeholder = f"${len(params)}"
        else:
            placeholder = clause.value()
        conditions.append(f"{escape_identifier(clause.name)} {clause.op} {placeholder}")
    return " WHERE " + " AND ".join(conditions)


def _returning_sql(query: Any) -> str:
    if not query.has_returning_fields:
        return ""
    return " RETURNING " + _column_list(query.returning_fields)


def _is_generated_uuid(field: Field, default_types: tuple[SqlType, ...]) -> bool:
    return field.sql_type in default_types and field.value_as(Uuid).is_generated


def _values_sql(
    records: list[Record],
    use_params: bool,
    default_types: tuple[SqlType, ...],
    params: list[str],
) -> str:
    rows = []
    for record in records:
        values = []
        for field in record:
            if _is_generated_uuid(field, default_types):
                values.append("DEFAULT")
            elif field.sql_type is SqlType.NULL_UUID:
                values.append("NULL")
            elif use_params:
                params.append(field.to_string())
                values.append(f"${len(params)}")
            else:
                values.append(escape_string(field.to_string()))
        rows.append("(" + ", ".join(values) + ")")
    return ", ".join(rows)


def _insert_head(table: str, records: list[Record]) -> str:
    names = ", ".join(escape_identifier(f.name) for f in records[0])
    return f"INSERT INTO {escape_identifier(table)} ({names}) VALUES "


def process_select(query: SelectQuery) -> PostgresRequest:
    """Build a SELECT statement."""
    params: list[str] = []
    columns = _column_list(query.select_columns) if query.select_columns else "*"
    sql = f"SELECT {columns} FROM {escape_identifier(query.table_name)}"
    if query.has_where:
        sql += _where_sql(query.where_conditions, params)
    if query.has_order_by:
        sql += " ORDER BY " + ", ".join(
            escape_identifier(o.column.name) + (" ASC" if o.ascending else " DESC")
            for o in query.order_by_clauses
        )
    if query.has_limit:
        sql += f" LIMIT {query.limit_value}"
    if query.has_offset:
        sql += f" OFFSET {query.offset_value}"
    return PostgresRequest(sql + ";", params, len(params))


def process_insert(query: InsertQuery) -> PostgresRequest:
    """Build an INSERT statement; the query's records are consumed."""
    records = query.extract_records()
    if not records:
        raise ValueError("No records provided for insert")
    params: list[str] = []
    sql = _insert_head(query.table_name, records)
    sql += _values_sql(
        records, query.use_params, (SqlType.UUID, SqlType.PRIMARY_UUID), params
    )
    sql += _returning_sql(query)
    return PostgresRequest(sql + ";", params, len(params))


def process_upsert(query: UpsertQuery) -> PostgresRequest:
    """Build an INSERT ... ON CONFLICT statement; the query's records are consumed."""
    records = query.extract_records()
    if not records:
        raise ValueError("No records provided for upsert")
    params: list[str] = []
    sql = _insert_head(query.table_name, records)
    sql += _values_sql(records, query.use_params, (SqlType.UUID,), params)
    conflict = query.conflict_columns
    if conflict:
        sql += f" ON CONFLICT ({_column_list(conflict)}) "
        update = query.update_columns
        if update:
            sql += "DO UPDATE SET " + ", ".join(
                f"{escape_identifier(c.name)} = EXCLUDED.{escape_identifier(c.name)}"
                for c in update
            )
        else:
            sql += "DO NOTHING"
    sql += _returning_sql(query)
    return PostgresRequest(sql + ";", params, len(params))


def process_remove(query: RemoveQuery) -> PostgresRequest:
    """Build a DELETE statement."""
    params: list[str] = []
    sql = f"DELETE FROM {escape_identifier(query.table_name)}"
    if query.has_where:
        sql += _where_sql(query.where_conditions, params)
    return PostgresRequest(sql + ";", params, len(params))


def process_count(query: CountQuery) -> PostgresRequest:
    """Build a SELECT COUNT(*) statement."""
    params: list[str] = []
    sql = f"SELECT COUNT(*) FROM {escape_identifier(query.table_name)}"
    if query.has_where:
        sql += _where_sql(query.where_conditions, params, query.use_params)
    return PostgresRequest(sql + ";", params, len(params))