"""Rendering of Python values as PostgreSQL literals."""

from __future__ import annotations

import dataclasses
import ipaddress
import json
import math
import re
import threading
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Protocol, runtime_checkable

from .flags import Flag, has_flag
from .timefmt import append_time

AppenderFunc = Callable[[Any, int], str]

# NULL is spelled out only inside a quoted literal; bare, it renders as nothing.
_NULL_LITERALS = {True: "NULL", False: ""}


@runtime_checkable
class ValueAppender(Protocol):
    """A value that knows how to render itself as SQL."""

    def append_value(self, flags: int) -> str:
        """Return the SQL text for the value rendered with ``flags``."""


class Safe(str):
    """SQL text that is inserted into a query unchanged."""

    __slots__ = ()

    def append_value(self, flags: int = 0) -> str:
        return str(self)


class Ident(str):
    """An SQL identifier such as a table or column name."""

    __slots__ = ()

    def append_value(self, flags: int = 0) -> str:
        return append_ident(str(self), flags)


@dataclasses.dataclass(frozen=True)
class RawValue:
    """A column value of a type without a dedicated decoder."""

    type: int
    value: str

    def append_value(self, flags: int = 0) -> str:
        return append_string(self.value, flags)

    def marshal_json(self) -> bytes:
        return json.dumps(self.value, ensure_ascii=False).encode("utf-8")


def append_error(err: BaseException | str) -> str:
    """Render an error in place of a value."""
    return f"?!({err})"


def append_null(flags: int) -> str:
    """Render NULL; without the quote flag this is the empty string."""
    quoted = has_flag(flags, Flag.QUOTE)
    return _NULL_LITERALS[quoted]


def _append_bool(value: bool, flags: int) -> str:
    return str(bool(value)).upper()


def _append_int(value: int, flags: int) -> str:
    return str(int(value))


def _format_float(value: float) -> str:
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _append_float(value: float, flags: int) -> str:
    value = float(value)
    quote = has_flag(flags, Flag.QUOTE) and not has_flag(flags, Flag.ARRAY)
    if math.isnan(value):
        special = "NaN"
    elif math.isinf(value):
        special = "Infinity" if value > 0 else "-Infinity"
    else:
        return _format_float(value)
    return f"'{special}'" if quote else special


def _append_string_array_elem(s: str, flags: int) -> str:
    quote = has_flag(flags, Flag.QUOTE)
    escapes = {
        "\x00": "",
        "'": "''" if quote else "'",
        '"': '\\"',
        "\\": "\\\\",
    }
    return '"' + "".join(escapes.get(c, c) for c in s) + '"'


def append_string(s: str, flags: int = 0) -> str:
    """Render a text value, dropping NUL characters."""
    if has_flag(flags, Flag.ARRAY):
        return _append_string_array_elem(s, flags)
    s = s.replace("\x00", "")
    if has_flag(flags, Flag.QUOTE):
        return "'" + s.replace("'", "''") + "'"
    return s


def append_bytes(data: bytes | bytearray | memoryview | None, flags: int = 0) -> str:
    """Render binary data as a bytea hex literal."""
    if data is None:
        return append_null(flags)
    encoded = "\\x" + bytes(data).hex()
    if has_flag(flags, Flag.ARRAY):
        return '"\\' + encoded + '"'
    if has_flag(flags, Flag.QUOTE):
        return "'" + encoded + "'"
    return encoded


def append_ident(field: str, flags: int = 0) -> str:
    """Render an identifier, quoting each dotted part when asked to."""
    quote = has_flag(flags, Flag.QUOTE)
    out: list[str] = []
    quoted = False
    for c in field:
        if c == "*" and not quoted:
            out.append("*")
            continue
        if c == ".":
            if quoted and quote:
                out.append('"')
                quoted = False
            out.append(".")
            continue
        if not quoted and quote:
            out.append('"')
            quoted = True
        out.append('""' if c == '"' else c)
    if quoted and quote:
        out.append('"')
    return "".join(out)


_JSONB_TOKEN_RE = re.compile(r"\\u0000|\\.|\\\Z|[\"'\x00]", re.DOTALL)


def append_jsonb(jsonb: bytes | str, flags: int = 0) -> str:
    """Render a JSON document, escaping ``\\u0000`` which jsonb rejects."""
    if isinstance(jsonb, (bytes, bytearray, memoryview)):
        jsonb = bytes(jsonb).decode("utf-8")
    array = has_flag(flags, Flag.ARRAY)
    quote = has_flag(flags, Flag.QUOTE)

    def replace(match: re.Match[str]) -> str:
        token = match.group()
        if token == "\\u0000":
            return "\\\\u0000"
        if token == '"':
            return '\\"' if array else '"'
        if token == "'":
            return "''" if quote else "'"
        if token == "\x00":
            return ""
        return token

    body = _JSONB_TOKEN_RE.sub(replace, jsonb)
    if array:
        return f'"{body}"'
    if quote:
        return f"'{body}'"
    return body


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _append_json(value: Any, flags: int) -> str:
    try:
        encoded = json.dumps(
            value,
            default=_json_default,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as err:
        return append_error(err)
    return append_jsonb(encoded, flags)


def _append_datetime(value: datetime, flags: int) -> str:
    return append_time(value, flags)


def _append_ip(value: Any, flags: int) -> str:
    return append_string(str(value), flags)


def _append_str(value: str, flags: int) -> str:
    return append_string(str(value), flags)


def _append_bytes_value(value: Any, flags: int) -> str:
    return append_bytes(value, flags)


def _append_appender(value: Any, flags: int) -> str:
    try:
        return value.append_value(flags)
    except Exception as err:  # any failure is rendered in place of the value
        return append_error(err)


_IP_TYPES = (
    ipaddress.IPv4Address,
    ipaddress.IPv6Address,
    ipaddress.IPv4Network,
    ipaddress.IPv6Network,
)


def _select_appender(typ: type) -> AppenderFunc:
    if issubclass(typ, datetime):
        return _append_datetime
    if issubclass(typ, _IP_TYPES):
        return _append_ip
    if issubclass(typ, ValueAppender):
        return _append_appender
    if issubclass(typ, bool):
        return _append_bool
    if issubclass(typ, int):
        return _append_int
    if issubclass(typ, float):
        return _append_float
    if issubclass(typ, str):
        return _append_str
    if issubclass(typ, (bytes, bytearray, memoryview)):
        return _append_bytes_value
    if issubclass(typ, (dict, list, tuple)) or dataclasses.is_dataclass(typ):
        return _append_json
    raise TypeError(f"pg: unsupported type {typ.__name__}")


_appenders: dict[type, AppenderFunc] = {}
_appenders_lock = threading.Lock()


def register_appender(typ: type, fn: AppenderFunc) -> None:
    """Register ``fn`` as the appender for ``typ``; a type may be set only once."""
    with _appenders_lock:
        if typ in _appenders:
            raise ValueError(
                f"pg: appender for the type={typ.__name__} is already registered"
            )
        _appenders[typ] = fn


def appender_for(typ: type) -> AppenderFunc:
    """Return the appender used for values of ``typ``."""
    fn = _appenders.get(typ)
    if fn is not None:
        return fn
    fn = _select_appender(typ)
    with _appenders_lock:
        return _appenders.setdefault(typ, fn)


def append(value: Any, flags: int = 0) -> str:
    """Render any supported value as SQL text."""
    if value is None:
        return append_null(flags)
    return appender_for(type(value))(value, flags)