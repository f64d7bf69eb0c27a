# demiplane_db

`demiplane_db` is a small toolkit for describing database rows and queries. It turns those queries into PostgreSQL statement text. It also pools client objects between threads. It uses only the standard library.

The package has these modules:

| Module | Contents |
| --- | --- |
| `demiplane_db.field` | `SqlType`, `Uuid`, `Field` and `Column`. It also has the helpers `is_valid_uuid`, `convert_value`, `deduce_sql_type` and `sql_init_type`. |
| `demiplane_db.factory` | Typed field constructors. These are `make_field`, `text_field`, `uuid_field`, `bool_field`, `int_field`, `ll_int_field`, `double_field`, `float_field`, `json_field` and `time_field`. |
| `demiplane_db.record` | `Record`, an ordered row of fields. |
| `demiplane_db.query` | Chainable query objects: `SelectQuery`, `InsertQuery`, `UpsertQuery`, `RemoveQuery`, `CountQuery` and `UpdateQuery`. It also has `Operator`, `WhereClause` and `OrderClause`. |
| `demiplane_db.engine` | The PostgreSQL statement generator, along with `PostgresRequest` and `PostgresConfig`. |
| `demiplane_db.pool` | `DatabasePool`, a bounded and thread-safe pool. It also has `AlertType`. |
| `demiplane_db.manager` | `PoolManager`, which combines a dedicated pool with a shared pool. |
| `demiplane_db.errors` | `ErrorCode`, `decode_error` and the `DatabaseError` exception family. |

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Fields and records

A `Field` is a name paired with a value. The SQL type of a field is worked out from its value when the field is created:

| Value | SQL type |
| --- | --- |
| `bool` | `BOOLEAN` |
| `int` within the 32-bit range | `INT` |
| Any other `int` | `BIGINT` |
| `float` | `DOUBLE_PRECISION` |
| `str` | `TEXT` |
| `dict` | `JSONB` |
| `datetime` | `TIMESTAMP` |
| `Uuid` | `PRIMARY_UUID`, `NULL_UUID` or `UUID`, depending on its flags |
| Non-empty list or tuple of one element kind | The matching `ARRAY_*` type |

Any other value raises `TypeError`.

```python
from demiplane_db.factory import int_field, text_field, uuid_field
from demiplane_db.field import SqlType, Uuid
from demiplane_db.record import Record

record = Record()
record.append(uuid_field("id", Uuid()))   # primary key, generated by the database
record.append(text_field("name", "Alice"))
record.append(int_field("age", 30))

record.get_value("name", str)        # "Alice"
record["age"].to_string()            # "30"
record.find("id").sql_type is SqlType.PRIMARY_UUID   # True
```

### Field constructors

- `int_field` rejects values outside the 32-bit range with `ValueError`.
- `ll_int_field` does the same for the 64-bit range.

### Uuid

A bare `Uuid()` is a generated primary key. `Uuid(value, is_primary=...)` checks the value against the canonical 8-4-4-4-12 hex form. It also accepts the markers `"use_generated"` and `"null"`. Any other value raises `ValueError`. The flags can be changed with these methods, which can be chained:

- `set_null()` and `unset_null()`
- `set_primary()` and `unset_primary()`
- `set_generated()` and `unset_generated()`
- `set_id()`

### Record

A `Record` supports `len()`, iteration, and `in` (which tests by field name). Indexing works both by position and by name. It also provides:

- `append()` and `pop()`
- `clear()`
- `clone()`, which makes a deep copy
- `find()`, which returns `None` when no field has that name
- `get_value(name, kind)`

`get_value` raises `KeyError` for an unknown name and `TypeError` when the value is not of type `kind`.

## Building queries

```python
from demiplane_db.field import Column, SqlType
from demiplane_db.query import InsertQuery, Operator, SelectQuery

select = (
    SelectQuery()
    .table("users")
    .select(Column("name", SqlType.TEXT))
    .where("age", Operator.GREATER_THAN, 18)
    .order_by(Column("name", SqlType.TEXT), False)
    .limit(10)
)

insert = InsertQuery().table("users").insert([record])
```

### Conditions

`where()` takes either a `WhereClause` or the three arguments `(name, operator, value)`. All conditions are joined with `AND`.

### Column lists

`select()` works in two ways:

- Given one list, it replaces the selected columns.
- Given separate `Column` arguments, it appends them.

### Paging

`limit()` and `offset()` reject negative numbers.

### Upserts and returned columns

- `UpsertQuery` takes its rows through `new_values()`. It also takes the conflict columns and the columns to overwrite.
- `return_with()` adds a `RETURNING` list to insert, upsert, delete and update queries.

## Generating PostgreSQL statements

```python
from demiplane_db.engine import process_insert, process_select

request = process_select(select)
request.query   # 'SELECT "name" FROM "users" WHERE "age" > $1 ORDER BY "name" DESC LIMIT 10;'
request.params  # ['18']
```

Each generator function returns a `PostgresRequest`. It holds the statement text in `query`, the parameter strings in `params`, and the parameter count in `param_counter`.

| Function | Statement built |
| --- | --- |
| `process_select` | `SELECT` |
| `process_insert` | `INSERT` |
| `process_upsert` | `INSERT ... ON CONFLICT ... DO UPDATE SET` or `DO NOTHING` |
| `process_remove` | `DELETE` |
| `process_count` | `SELECT COUNT(*)` |

How values are written into the statement:

- When a query's `use_params` is true, values become `$n` placeholders.
- Otherwise, `process_insert` and `process_upsert` write values as quoted literals.
- Otherwise, `process_count` writes values directly into the condition.
- A generated UUID becomes `DEFAULT`. For inserts this covers the `UUID` and `PRIMARY_UUID` types. For upserts it covers only `UUID`.
- A null UUID becomes `NULL`.

Insert and upsert take the records out of the query they are given. They raise `ValueError` when there are no records.

Helpers for names and search indexes:

- `escape_string(value, escape_backslash=False)` quotes a literal.
- `escape_identifier(value)` quotes an identifier.
- `fts_index_name`, `trgm_index_name` and `constraint_index_name` build index names.
- `fts_index_query(table, fields)` and `trgm_index_query(table, fields)` build the `CREATE INDEX` statements for full-text and trigram search.
- `drop_search_index_requests(table)` builds the two `DROP INDEX` requests.

## Client pools

A `DatabasePool` holds any client objects that have a `drop_connect()` method. Timeouts are given in seconds.

```python
from demiplane_db.manager import PoolManager
from demiplane_db.pool import DatabasePool


class Client:
    def drop_connect(self):
        ...


dedicated = DatabasePool()
dedicated.fill(4, Client)
shared = DatabasePool(2, Client)

manager = PoolManager(dedicated, shared, awaiting_duration=0.5)
client = manager.acquire()     # None if no client became free in time
...
manager.release(client)        # returns the client itself if both pools are full
manager.graceful_shutdown()    # drop_connect() on every pooled client
```

### DatabasePool methods

| Method | Behaviour |
| --- | --- |
| `acquire(timeout=None)` | Does not wait unless given a timeout. Returns `None` if no client is free. |
| `safe_acquire()` | Blocks until a client is free. |
| `release(obj)` | Returns `False` when the pool is full. |
| `safe_release(obj)` | Blocks until there is room. |
| `lend()` | Takes the oldest client. It raises `RuntimeError` if that client has not been idle for `idle_period` seconds (default 60). |
| `safe_kill()` | Disconnects and drops every client, and logs failures instead of raising them. |

Leaving a `with DatabasePool(...)` block also calls `safe_kill()`.

### PoolManager

`PoolManager` looks in the dedicated pool first and the shared pool second.

- `acquire()` does not wait on the dedicated pool. It waits up to `awaiting_duration` seconds (default 1.2) on the shared pool.
- `safe_acquire()` waits on both pools. In the end it blocks on the dedicated pool.
- `safe_release()` works the same way for returning clients.

It also reports on the shared pool:

- `check_shared_overflow()` is true when the shared pool holds more than twice its capacity.
- `check_shared_exhaustion()` is true when the shared pool is empty.
- `is_under_pressure()` reflects the `high_load` flag, which you set yourself.

## Errors

Every exception derives from `DatabaseError`, which is a subclass of `RuntimeError` and carries an `ErrorCode` in `code`. The subclasses add a prefix to the message:

- `DatabaseConnectionError`
- `QueryError`
- `TransactionError`
- `InvalidIdentifierError`

```python
from demiplane_db.errors import ErrorCode, QueryError, decode_error

decode_error(ErrorCode.CONNECTION_FAILED)  # "500: Failed to connect to the database."
str(QueryError("bad column", ErrorCode.INVALID_QUERY))  # "QueryException: bad column"
```

`decode_error` returns `"Unrecognized error code."` in two cases:

- numbers that are not codes;
- the codes `INVALID_DATA` and `SYSTEM_ROLLBACK`, which have no description.

## What the package does not do

- It opens no database connections and executes no statements. The engine only produces statement text and parameter lists, and you pass these to a driver of your choice.
- It has no generator for `CREATE TABLE` or `UPDATE` statements. `Column.sql_type_initialization()` gives the column type clause, and `UpdateQuery` only collects its new values.
- Pools never create or reconnect clients on their own beyond `fill()`.
- Nothing moves idle clients between pools in the background.