import json

import pytest
from dynvar.dynvar_serialize import deserialize, detect_format, serialize, to_builtin
from dynvar.dynvar_map import DynVarMap
from dynvar.dynvar_field import DynVarField
from dynvar.dynvar_vars import (
    DynVarBoolean, DynVarDouble, DynVarInteger, DynVarLong, DynVarString,
)
from dynvar.dynvar_datatypes import Long, Float


def sample_map():
    return DynVarMap().put("a", 1).put("b", "hi").put("c", Float(0.5)).put("d", True)


def test_to_builtin_yields_plain_types():
    built = to_builtin(DynVarMap().put("n", Long(42)).put("f", Float(0.5)).put("x", [Long(1)]))
    assert built == {"n": 42, "f": 0.5, "x": [1]}
    assert type(built["n"]) is int
    assert type(built["f"]) is float
    assert type(built["x"][0]) is int


def test_serialize_json():
    text = serialize(sample_map(), fmt="json")
    assert json.loads(text) == {"a": 1, "b": "hi", "c": 0.5, "d": True}
    assert serialize(sample_map(), fmt="json", pretty=False) == '{"a": 1, "b": "hi", "c": 0.5, "d": true}'


def test_serialize_yaml_keeps_insertion_order():
    assert serialize(sample_map(), fmt="YAML") == "a: 1\nb: hi\nc: 0.5\nd: true\n"


def test_serialize_unknown_format():
    with pytest.raises(ValueError):
        serialize(sample_map(), fmt="toml")


def test_deserialize_json_into_typed_variants():
    m = deserialize('{"a": 1, "b": 2.5, "c": "x", "d": false, "e": [1, 2]}')
    assert type(m.get("a")) is DynVarInteger
    assert type(m.get("b")) is DynVarDouble
    assert type(m.get("c")) is DynVarString
    assert type(m.get("d")) is DynVarBoolean
    assert type(m.get("e")) is DynVarField
    assert m.get_value("e") == [1, 2]


def test_deserialize_yaml_wide_integer_is_long():
    m = deserialize("n: 99999999999\nname: bob\n", fmt="yaml")
    assert type(m.get("n")) is DynVarLong
    assert m.get_string("name") == "bob"


def test_deserialize_merges_into_an_existing_map():
    m = DynVarMap().put("keep", 1).put("a", "old")
    assert deserialize(b'{"a": 2}', dyn_map=m) is m
    assert list(m.key_set()) == ["keep", "a"]
    assert m.get_int("a") == 2


def test_declared_json_falls_back_to_yaml():
    assert deserialize("a: 1", fmt="json").get_int("a") == 1


def test_deserialize_rejects_non_mappings():
    with pytest.raises(ValueError):
        deserialize("[1, 2]")
    with pytest.raises(ValueError):
        deserialize("{}", fmt="ini")


def test_empty_document_is_an_empty_map():
    assert deserialize("").is_empty()
    assert deserialize("", fmt="yaml").is_empty()


@pytest.mark.parametrize(
    "path,hint,fmt",
    [
        ("vars.json", None, "json"),
        ("vars.YAML", None, "yaml"),
        ("vars.yml", None, "yaml"),
        ("vars.txt", None, None),
        (None, '  {"a": 1}', "json"),
        (None, "a: 1", "yaml"),
        (None, "   ", None),
        ("vars.txt", "{}", "json"),
        (None, None, None),
    ],
)
def test_detect_format(path, hint, fmt):
    assert detect_format(path, hint) == fmt
