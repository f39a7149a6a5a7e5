import pytest

from pgtypes.flags import Flag
from pgtypes.hstore import Hstore, append_hstore, parse_hstore

HSTORE_TESTS = [
    ('""=>""', {"": ""}),
    ("\"k''k\"=>\"k''k\"", {"k''k": "k''k"}),
    ('"k\\"k"=>"k\\"k"', {'k"k': 'k"k'}),
    ('"k\\k"=>"k\\k"', {"k\\k": "k\\k"}),
    ('"foo"=>"bar"', {"foo": "bar"}),
    ('"foo"=>"bar","k"=>"v"', {"foo": "bar", "k": "v"}),
]


@pytest.mark.parametrize("literal, wanted", HSTORE_TESTS)
def test_hstore_parser(literal, wanted):
    assert parse_hstore(literal.encode()) == wanted


def test_parse_with_space_after_comma():
    assert parse_hstore(b'"a"=>"1", "b"=>"2"') == {"a": "1", "b": "2"}


def test_parse_empty():
    assert parse_hstore(b"") == {}


def test_parse_null():
    assert parse_hstore(None) is None


def test_parse_truncated():
    with pytest.raises(ValueError):
        parse_hstore(b'"a"=>')


def test_parse_bad_separator():
    with pytest.raises(ValueError):
        parse_hstore(b'"a"->"b"')


def test_append_quoted():
    assert append_hstore({"k": "v"}, Flag.QUOTE) == "'\"k\"=>\"v\"'"


def test_append_null():
    assert append_hstore(None, Flag.QUOTE) == "NULL"


def test_round_trip():
    mapping = {'a"b': "c\\d", "x": "", "hello": "world"}
    assert parse_hstore(append_hstore(mapping, 0)) == mapping


def test_append_unsupported_value():
    assert append_hstore({"a": 1}, 0).startswith("?!(")


def test_wrapper_append_and_scan():
    src = Hstore({"hello": "world"})
    dst = Hstore({})
    dst.scan_value(src.append_value(0).encode())
    assert dst.value == {"hello": "world"}


def test_wrapper_nil():
    with pytest.raises(TypeError):
        Hstore(None)


def test_wrapper_unsupported():
    with pytest.raises(TypeError):
        Hstore([1, 2])