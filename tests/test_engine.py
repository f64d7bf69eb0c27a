import pytest

from demiplane_db.engine import (
    PostgresRequest,
    drop_search_index_requests,
    escape_identifier,
    escape_string,
    fts_index_name,
    fts_index_query,
    process_count,
    process_insert,
    process_remove,
    process_select,
    process_upsert,
    trgm_index_name,
    trgm_index_query,
    constraint_index_name,
)
from demiplane_db.factory import text_field, uuid_field
from demiplane_db.field import Column, Field, Uuid
from demiplane_db.query import (
    CountQuery,
    InsertQuery,
    Operator,
    RemoveQuery,
    SelectQuery,
    UpsertQuery,
)
from demiplane_db.record import Record


def _record(name):
    return Record([uuid_field("id"), text_field("name", name)])


def test_escape_identifier_doubles_quotes():
    assert escape_identifier('a"b') == '"a""b"'


def test_escape_string_hex_escapes_control_chars():
    assert escape_string("\x01") == "'\\x01'"


def test_escape_string_doubles_single_quote():
    result = escape_string("it's")
    assert result.startswith("'") and result.endswith("'")
    assert "''" in result
    assert result.count("'") == 4


def test_escape_string_backslash_modes():
    assert escape_string("a\\b") == "'" + "a\\b" + "'"
    assert "\\\\" in escape_string("a\\b", True)


def test_index_names():
    for make, prefix in ((fts_index_name, "fts_"), (trgm_index_name, "trgm_"),
                         (constraint_index_name, "constraint_")):
        name = make("users")
        assert name.startswith(prefix)
        assert name.endswith("_idx")
        assert "users" in name


def test_fts_index_query():
    fields = [text_field("a"), text_field("b")]
    q = fts_index_query("docs", fields)
    assert q.startswith("CREATE INDEX IF NOT EXISTS " + fts_index_name("docs"))
    assert "to_tsvector('simple', " in q
    assert q.count("coalesce(") == 2
    assert q.endswith("::text, '')));")


def test_trgm_index_query():
    q = trgm_index_query("docs", [Column("title", "x")])
    assert trgm_index_name("docs") in q
    assert q.endswith(") gin_trgm_ops);")
    assert q.count("|| ' ' ||") == 0


def test_index_query_requires_fields():
    with pytest.raises(ValueError):
        fts_index_query("docs", [])
    with pytest.raises(ValueError):
        trgm_index_query("docs", [])


def test_drop_search_index_requests():
    reqs = drop_search_index_requests("docs")
    assert len(reqs) == 2
    assert all(r.query.startswith("DROP INDEX IF EXISTS ") for r in reqs)
    assert fts_index_name("docs") in reqs[0].query
    assert trgm_index_name("docs") in reqs[1].query
    assert all(r.params == [] for r in reqs)


def test_select_full():
    q = (
        SelectQuery("users")
        .select(Column("name", "x"))
        .where("age", Operator.GREATER_THAN, 18)
        .order_by(Column("age", 1), False)
        .limit(10)
        .offset(5)
    )
    req = process_select(q)
    assert req.query == 'SELECT "name" FROM "users" WHERE "age" > $1 ORDER BY "age" DESC LIMIT 10 OFFSET 5;'
    assert req.params == ["18"]
    assert req.param_counter == 1


def test_select_star_and_multiple_where():
    q = SelectQuery("users").where("a", Operator.EQUAL, 1).where("b", Operator.NOT_EQUAL, "x")
    req = process_select(q)
    assert req.query.startswith("SELECT * FROM " + escape_identifier("users"))
    assert " AND " in req.query
    assert req.params == ["1", "x"]
    assert "$2" in req.query
    assert req.query.endswith(";")


def test_insert_with_params_and_default_uuid():
    q = InsertQuery("users").insert([_record("ann"), _record("bob")])
    req = process_insert(q)
    assert req.query.startswith("INSERT INTO " + escape_identifier("users"))
    assert req.query.count("DEFAULT") == 2
    assert req.params == ["ann", "bob"]
    assert req.param_counter == 2
    assert "$3" not in req.query
    assert q.records == []


def test_insert_without_params_inlines_escaped_values():
    q = InsertQuery("users").insert([Record([text_field("name", "o'neil")])])
    q.use_params = False
    req = process_insert(q)
    assert escape_string("o'neil") in req.query
    assert req.params == []


def test_insert_null_uuid_and_returning():
    rec = Record([Field("ref", Uuid().set_null()), text_field("name", "z")])
    q = InsertQuery("t").insert([rec]).return_with([Column("name", "x")])
    req = process_insert(q)
    assert "(NULL, $1)" in req.query
    assert req.query.endswith(" RETURNING " + escape_identifier("name") + ";")


def test_insert_empty_raises():
    with pytest.raises(ValueError):
        process_insert(InsertQuery("t"))


def test_upsert_update_clause():
    col = Column("name", "x")
    q = (
        UpsertQuery("t")
        .new_values([Record([text_field("name", "a")])])
        .when_conflict_in_these_columns([col])
        .replace_these_columns([col])
    )
    req = process_upsert(q)
    ident = escape_identifier("name")
    assert f" ON CONFLICT ({ident}) " in req.query
    assert f"DO UPDATE SET {ident} = EXCLUDED.{ident}" in req.query
    assert req.params == ["a"]


def test_upsert_do_nothing_and_primary_uuid_bound():
    q = (
        UpsertQuery("t")
        .new_values([_record("a")])
        .when_conflict_in_these_columns([Column("name", "x")])
    )
    req = process_upsert(q)
    assert req.query.endswith("DO NOTHING;")
    assert "DEFAULT" not in req.query
    assert req.params == [Uuid.use_generated, "a"]


def test_upsert_empty_raises():
    with pytest.raises(ValueError):
        process_upsert(UpsertQuery("t"))


def test_remove():
    req = process_remove(RemoveQuery("t").where("id", Operator.LESS_THAN, 5))
    assert req.query.startswith("DELETE FROM " + escape_identifier("t") + " WHERE ")
    assert req.params == ["5"]
    plain = process_remove(RemoveQuery("t"))
    assert plain.query == "DELETE FROM " + escape_identifier("t") + ";"


def test_count_params_and_inline():
    q = CountQuery("t").where("n", Operator.GREATER_THAN_OR_EQUAL, 3)
    req = process_count(q)
    assert req.query.startswith("SELECT COUNT(*) FROM ")
    assert req.params == ["3"] and "$1" in req.query
    q.use_params = False
    inline = process_count(q)
    assert inline.params == []
    assert inline.param_counter == 0
    assert inline.query.endswith(">= 3;")


def test_request_defaults():
    req = PostgresRequest("SELECT 1;")
    assert req.params == [] and req.param_counter == 0
    other = PostgresRequest("SELECT 1;")
    other.params.append("x")
    assert req.params == []