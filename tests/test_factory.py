from datetime import datetime

import pytest

from demiplane_db.factory import (
    bool_field,
    double_field,
    float_field,
    int_field,
    json_field,
    ll_int_field,
    make_field,
    text_field,
    time_field,
    uuid_field,
)
from demiplane_db.field import SqlType, Uuid


def test_make_field_deduces_type():
    field = make_field("name", "alice")
    assert field.name == "name"
    assert field.value == "alice"
    assert field.sql_type is SqlType.TEXT


def test_text_field():
    field = text_field("title", "hello")
    assert field.to_string() == "hello"
    assert field.sql_type is SqlType.TEXT
    assert text_field("empty").value == ""


def test_uuid_field_default_is_generated_primary():
    field = uuid_field("id")
    assert field.value.is_generated
    assert field.sql_type is SqlType.PRIMARY_UUID
    assert field.sql_type_initialization() == "UUID DEFAULT gen_random_uuid() PRIMARY KEY"


def test_uuid_field_defaults_are_independent():
    first = uuid_field("a")
    second = uuid_field("b")
    first.value.set_null()
    assert not second.value.is_null


def test_uuid_field_null():
    field = uuid_field("ref", Uuid().set_null())
    assert field.sql_type is SqlType.NULL_UUID
    assert field.to_string() == Uuid.null_value


def test_bool_field():
    assert bool_field("flag", True).to_string() == "TRUE"
    assert bool_field("flag").to_string() == "FALSE"
    assert bool_field("flag").sql_type is SqlType.BOOLEAN


def test_double_and_float_fields():
    assert double_field("d", 2).value == 2.0
    assert double_field("d").sql_type is SqlType.DOUBLE_PRECISION
    assert float_field("f", 1.5).value == 1.5
    assert float_field("f").sql_type is SqlType.DOUBLE_PRECISION


def test_int_field():
    field = int_field("n", 42)
    assert field.to_string() == "42"
    assert field.sql_type is SqlType.INT
    assert field.sql_type_initialization() == "INT"


def test_int_field_out_of_range():
    with pytest.raises(ValueError):
        int_field("n", 2**31)


def test_ll_int_field_is_bigint_even_for_small_values():
    field = ll_int_field("n", 5)
    assert field.sql_type is SqlType.BIGINT
    assert field.sql_type_initialization() == "BIGINT"


def test_ll_int_field_out_of_range():
    with pytest.raises(ValueError):
        ll_int_field("n", 2**63)


def test_json_field():
    field = json_field("doc", {"a": 1})
    assert field.sql_type is SqlType.JSONB
    assert field.value == {"a": 1}
    assert json_field("doc").value == {}


def test_time_field():
    moment = datetime(2024, 5, 6, 7, 8, 9)
    field = time_field("at", moment)
    assert field.sql_type is SqlType.TIMESTAMP
    assert field.to_string() == "2024-05-06 07:08:09"
    assert time_field("at").to_string() == "1970-01-01 00:00:00"