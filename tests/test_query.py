import pytest

from demiplane_db.field import Column, Field, SqlType
from demiplane_db.query import (
    CountQuery,
    InsertQuery,
    Operator,
    OrderClause,
    RemoveQuery,
    SelectQuery,
    UpdateQuery,
    UpsertQuery,
    WhereClause,
)
from demiplane_db.record import Record


@pytest.mark.parametrize(
    "op,symbol",
    [
        (Operator.EQUAL, "="),
        (Operator.GREATER_THAN, ">"),
        (Operator.LESS_THAN, "<"),
        (Operator.GREATER_THAN_OR_EQUAL, ">="),
        (Operator.LESS_THAN_OR_EQUAL, "<="),
        (Operator.NOT_EQUAL, "!="),
    ],
)
def test_operator_symbols(op, symbol):
    assert WhereClause("age", op, 5).op == symbol


def test_where_clause_value_and_name():
    clause = WhereClause("name", Operator.EQUAL, "alice")
    assert clause.name == "name"
    assert clause.value() == "alice"
    assert WhereClause("flag", Operator.EQUAL, True).value() == "TRUE"


def test_where_clause_from_field_uses_field_name():
    clause = WhereClause(Field("score", 1), Operator.LESS_THAN, 9)
    assert clause.name == "score"
    assert clause.value() == "9"


def test_where_clause_rejects_bad_operator():
    with pytest.raises(ValueError):
        WhereClause("a", "=", 1)


def test_select_chaining_and_where():
    q = SelectQuery()
    result = q.table("users").where("age", Operator.GREATER_THAN, 18).limit(10).offset(20)
    assert result is q
    assert q.table_name == "users"
    assert q.has_where
    assert [c.name for c in q.where_conditions] == ["age"]
    assert (q.limit_value, q.offset_value) == (10, 20)
    assert q.has_limit and q.has_offset


def test_where_accepts_clause_object():
    clause = WhereClause("id", Operator.EQUAL, 3)
    q = CountQuery("t").where(clause)
    assert q.where_conditions == [clause]


def test_fresh_select_has_nothing_set():
    q = SelectQuery()
    assert not q.has_where
    assert not q.has_order_by
    assert not q.has_limit
    assert not q.has_offset
    assert not q.has_pattern
    assert q.select_columns == []


def test_select_columns_extend_and_replace():
    a, b, c = Column("a", 1), Column("b", "x"), Column("c", True)
    q = SelectQuery().select(a).select(b)
    assert q.select_columns == [a, b]
    q.select([c])
    assert q.select_columns == [c]


def test_select_rejects_non_columns():
    with pytest.raises(TypeError):
        SelectQuery().select("a")


def test_order_by_default_ascending():
    col = Column("created", SqlType.TIMESTAMP)
    q = SelectQuery().order_by(col).order_by(Column("id", 1), False)
    assert q.has_order_by
    assert q.order_by_clauses[0] == OrderClause(col, True)
    assert q.order_by_clauses[1].ascending is False


def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        SelectQuery().limit(-1)
    with pytest.raises(ValueError):
        SelectQuery().offset(-5)


def test_similarity_pattern():
    q = SelectQuery().similar("needle")
    assert q.pattern == "needle"
    assert q.has_pattern


def test_insert_extract_records_empties_query():
    recs = [Record([Field("a", 1)]), Record([Field("a", 2)])]
    q = InsertQuery("t").insert(recs)
    assert q.use_params
    assert len(q.records) == 2
    taken = q.extract_records()
    assert [r["a"].value for r in taken] == [1, 2]
    assert q.records == []
    assert q.extract_records() == []


def test_insert_returning():
    col = Column("id", 1)
    q = InsertQuery().return_with([col])
    assert q.has_returning_fields
    assert q.returning_fields == [col]
    assert not InsertQuery().has_returning_fields


def test_update_query_new_values():
    fields = [Field("a", 1)]
    q = UpdateQuery("t").set(fields)
    assert q.extract_new_values() == fields
    assert q.extract_new_values() == []


def test_upsert_columns_and_records():
    key, val = Column("key", "k"), Column("val", 1)
    rec = Record([Field("key", "k"), Field("val", 1)])
    q = (
        UpsertQuery("kv")
        .new_values([rec])
        .when_conflict_in_these_columns([key])
        .replace_these_columns([val])
    )
    assert q.conflict_columns == [key]
    assert q.update_columns == [val]
    assert q.extract_records() == [rec]
    assert q.records == []


def test_upsert_conflict_columns_are_copies():
    key = Column("key", "k")
    q = UpsertQuery().when_conflict_in_these_columns([key])
    q.conflict_columns.append(Column("other", 1))
    assert q.conflict_columns == [key]


def test_remove_and_count_queries():
    r = RemoveQuery("t").where("id", Operator.NOT_EQUAL, 1)
    assert r.table_name == "t"
    assert r.use_params
    assert r.where_conditions[0].op == "!="
    c = CountQuery()
    c.use_params = False
    assert not c.use_params
    assert not c.has_where