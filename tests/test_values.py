import pytest
from pydantic import ValidationError
from callbridge.core.values import (
    INT_MAX,
    INT_MIN,
    BoolValue,
    FloatValue,
    IntValue,
    ListValue,
    NullValue,
    StringValue,
    dynamic_from_json,
    dynamic_from_plain,
    dynamic_to_json,
)


def test_positional_and_keyword_construction_are_equal():
    assert IntValue(5) == IntValue(value=5)
    assert StringValue("a") == StringValue(value="a")
    assert ListValue((IntValue(1),)) == ListValue(value=[IntValue(1)])


def test_values_are_tagged_by_kind():
    assert NullValue().kind == "null"
    assert BoolValue(True).kind == "bool"
    assert IntValue(1).kind == "int"
    assert FloatValue(1.0).kind == "float"
    assert StringValue("x").kind == "string"
    assert ListValue().kind == "list"


def test_int_and_float_are_distinct():
    assert IntValue(1) != FloatValue(1.0)


def test_int_value_rejects_bool_and_out_of_range():
    with pytest.raises(ValidationError):
        IntValue(True)
    with pytest.raises(ValidationError):
        IntValue(INT_MAX + 1)
    with pytest.raises(ValidationError):
        IntValue(INT_MIN - 1)

    assert IntValue(INT_MIN).value == INT_MIN


def test_bool_value_rejects_int():
    with pytest.raises(ValidationError):
        BoolValue(1)


def test_float_value_accepts_int_and_stores_float():
    value = FloatValue(3)
    assert isinstance(value.value, float)
    assert value.value == 3.0

    with pytest.raises(ValidationError):
        FloatValue(True)
    with pytest.raises(ValidationError):
        FloatValue("1.5")


def test_values_are_immutable():
    value = IntValue(1)
    with pytest.raises(ValidationError):
        value.value = 2


def test_list_value_to_plain_is_recursive():
    nested = ListValue((IntValue(1), ListValue((StringValue("a"), NullValue())), BoolValue(False)))
    assert nested.to_plain() == [1, ["a", None], False]
    assert len(nested) == 3
    assert nested[1] == ListValue((StringValue("a"), NullValue()))


def test_dynamic_from_plain():
    assert dynamic_from_plain(None) == NullValue()
    assert dynamic_from_plain(True) == BoolValue(True)
    assert dynamic_from_plain(7) == IntValue(7)
    assert dynamic_from_plain(2.5) == FloatValue(2.5)
    assert dynamic_from_plain("s") == StringValue("s")
    assert dynamic_from_plain((1, [2.0])) == ListValue((IntValue(1), ListValue((FloatValue(2.0),))))

    existing = IntValue(3)
    assert dynamic_from_plain(existing) is existing


def test_dynamic_from_plain_rejects_unsupported_values():
    with pytest.raises(TypeError, match="dict"):
        dynamic_from_plain({"a": 1})
    with pytest.raises(TypeError):
        dynamic_from_plain(b"bytes")
    with pytest.raises(ValueError):
        dynamic_from_plain(2 ** 70)


def test_tagged_json_form():
    value = ListValue((IntValue(5), StringValue("x"), NullValue()))
    payload = dynamic_to_json(value)

    assert '"kind":"int"' in payload
    assert dynamic_from_json(payload) == value


def test_tagged_json_rejects_unknown_kind():
    with pytest.raises(ValidationError):
        dynamic_from_json('{"kind": "dict", "value": {}}')
