import ipaddress
from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from pgtypes.append import (
    Ident,
    RawValue,
    Safe,
    ValueAppender,
    append,
    append_bytes,
    append_error,
    append_ident,
    append_jsonb,
    append_null,
    append_string,
    appender_for,
    register_appender,
)
from pgtypes.flags import Flag


@pytest.mark.parametrize(
    "field, wanted",
    [
        ("", ""),
        ("id", '"id"'),
        ("table.id", '"table"."id"'),
        ("*", "*"),
        ("table.*", '"table".*'),
        ("id AS pk", '"id AS pk"'),
        ("table.id AS table__id", '"table"."id AS table__id"'),
        ("?shard", '"?shard"'),
        ("?shard.id", '"?shard"."id"'),
        ('"', '""""'),
        ("'", "\"'\""),
    ],
)
def test_append_ident(field, wanted):
    assert append_ident(field, 1) == wanted


@pytest.mark.parametrize(
    "s, wanted",
    [
        (r"\u0000", r"\\u0000"),
        (r"\\u0000", r"\\u0000"),
        (r"\\\u0000", r"\\\\u0000"),
        (r"foo \u0000 bar", r"foo \\u0000 bar"),
        (r"\u0001", r"\u0001"),
        (r"\\u0001", r"\\u0001"),
    ],
)
def test_append_jsonb(s, wanted):
    assert append_jsonb(s.encode(), 0) == wanted


def test_append_jsonb_quoting():
    assert append_jsonb("it's", Flag.QUOTE) == "'it''s'"
    assert append_jsonb('{"a":1}', Flag.ARRAY) == '"{\\"a\\":1}"'
    assert append_jsonb("a\x00b", 0) == "ab"


def test_append_null():
    assert append(None, 1) == "NULL"
    assert append_null(0) == ""


def test_append_scalars():
    assert append(True, 1) == "TRUE"
    assert append(False, 0) == "FALSE"
    assert append(42, 1) == "42"
    assert append(-7) == "-7"


@pytest.mark.parametrize(
    "value, flags, wanted",
    [
        (1.0, 0, "1"),
        (0.5, 0, "0.5"),
        (1e20, 0, "100000000000000000000"),
        (float("nan"), 1, "'NaN'"),
        (float("inf"), 1, "'Infinity'"),
        (float("-inf"), 0, "-Infinity"),
        (float("nan"), Flag.QUOTE | Flag.ARRAY, "NaN"),
    ],
)
def test_append_float(value, flags, wanted):
    assert append(value, flags) == wanted


def test_append_string():
    assert append_string("it's", 1) == "'it''s'"
    assert append_string("a\x00b", 1) == "'ab'"
    assert append_string("plain", 0) == "plain"
    assert append("x", 1) == "'x'"


def test_append_string_array_element():
    assert append_string('a"b\\c', Flag.ARRAY) == '"a\\"b\\\\c"'
    assert append_string("it's", Flag.ARRAY | Flag.QUOTE) == "\"it''s\""
    assert append_string("it's", Flag.ARRAY) == "\"it's\""


def test_append_bytes():
    assert append_bytes(b"\x01\xab", 1) == "'\\x01ab'"
    assert append_bytes(b"\x01\xab", 0) == "\\x01ab"
    assert append_bytes(b"\x01\xab", Flag.ARRAY) == '"\\\\x01ab"'
    assert append_bytes(None, 1) == "NULL"
    assert append(bytearray(b"\xff"), 1) == "'\\xff'"


def test_append_safe_and_ident():
    assert append(Safe("id = 1"), 1) == "id = 1"
    assert append(Ident("table.id"), 1) == '"table"."id"'
    assert isinstance(Ident("id"), ValueAppender)


def test_raw_value():
    raw = RawValue(type=600, value="(1,2)")
    assert raw.append_value(1) == "'(1,2)'"
    assert raw.marshal_json() == b'"(1,2)"'


def test_append_datetime():
    tm = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
    assert append(tm, 1) == "'2006-01-02 15:04:05+00:00:00'"


def test_append_ip():
    assert append(ipaddress.ip_address("192.0.2.1"), 1) == "'192.0.2.1'"
    assert append(ipaddress.ip_network("192.0.2.0/24"), 0) == "192.0.2.0/24"


def test_append_json():
    assert append({"a": "b"}, 1) == "'{\"a\":\"b\"}'"
    assert append([1, 2], 0) == "[1,2]"

    @dataclass
    class Point:
        x: int
        y: int

    assert append(Point(1, 2), 0) == '{"x":1,"y":2}'


def test_append_json_error():
    assert append({"a": float("nan")}, 0).startswith("?!(")


def test_append_error():
    assert append_error(ValueError("boom")) == "?!(boom)"


def test_failing_appender_renders_error():
    class Broken:
        def append_value(self, flags):
            raise RuntimeError("boom")

    assert append(Broken(), 1) == "?!(boom)"


def test_unsupported_type():
    with pytest.raises(TypeError):
        append(object())


def test_register_appender():
    class Money:
        def __init__(self, cents):
            self.cents = cents

    register_appender(Money, lambda v, flags: f"{v.cents}::money")
    assert append(Money(5), 1) == "5::money"
    assert appender_for(Money)(Money(7), 0) == "7::money"
    with pytest.raises(ValueError):
        register_appender(Money, lambda v, flags: "")