"""PostgreSQL array literals: rendering, parsing and decoding."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Optional, Protocol, get_args, get_origin, runtime_checkable

from .append import append, append_null
from .flags import Flag, should_quote_array
from .scan import scan_float, scan_int, scan_string, scan_value

_QUOTE = ord('"')
_BACKSLASH = ord("\\")
_LBRACE = ord("{")
_RBRACE = ord("}")
_COMMA = ord(",")

Element = Optional[bytes]


def _raw(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _unexpected_end() -> ValueError:
    return ValueError("pg: unexpected end of data")


def _read_quoted(data: bytes, pos: int) -> tuple[bytes, int]:
    """Read a double-quoted string that starts after its opening quote.

    Returns the unescaped content and the position after the closing quote.
    Only ``\\\\`` and ``\\"`` are unescaped; other backslashes are kept.
    """
    out = bytearray()
    n = len(data)
    while True:
        if pos >= n:
            raise _unexpected_end()
        c = data[pos]
        if c == _QUOTE:
            return bytes(out), pos + 1
        if c == _BACKSLASH:
            if pos + 1 >= n:
                raise _unexpected_end()
            nxt = data[pos + 1]
            if nxt in (_QUOTE, _BACKSLASH):
                out.append(nxt)
            else:
                out += data[pos:pos + 2]
            pos += 2
            continue
        out.append(c)
        pos += 1


def _read_comma_brace(data: bytes, pos: int) -> int:
    if pos >= len(data):
        raise _unexpected_end()
    c = data[pos]
    if c in (_COMMA, _RBRACE):
        return pos + 1
    raise ValueError(f"pg: got {chr(c)!r}, wanted ',' or '}}'")


def _read_sub_array(data: bytes, pos: int) -> tuple[bytes, int]:
    out = bytearray(b"{")
    n = len(data)
    while True:
        if pos >= n:
            raise _unexpected_end()
        c = data[pos]
        pos += 1
        out.append(c)
        if c == _RBRACE:
            return bytes(out), pos
        if c == _QUOTE:
            while True:
                idx = data.find(b'"', pos)
                if idx < 0:
                    raise _unexpected_end()
                out += data[pos:idx + 1]
                pos = idx + 1
                if out[-2] != _BACKSLASH:
                    break


def _read_simple(data: bytes, pos: int) -> tuple[bytes, int]:
    idx = data.find(b",", pos)
    if idx >= 0:
        return data[pos:idx], idx + 1
    chunk = data[pos:]
    if chunk.endswith(b"}"):
        return chunk[:-1], len(data)
    raise _unexpected_end()


class ArrayParser:
    """Iterates over the elements of an array literal such as ``{1,"a",NULL}``.

    Each element is yielded as raw bytes; an unquoted ``NULL`` gives ``None``
    and a nested array is yielded whole as its literal text.
    """

    def __init__(self, data: bytes | str) -> None:
        self._data = _raw(data)

    def __iter__(self) -> Iterator[Element]:
        data = self._data
        n = len(data)
        if not data:
            raise _unexpected_end()
        if data[0] != _LBRACE:
            raise ValueError(f"pg: got {chr(data[0])!r}, wanted '{{'")
        pos = 1
        while pos < n:
            c = data[pos]
            elem: Element
            if c == _QUOTE:
                elem, pos = _read_quoted(data, pos + 1)
                pos = _read_comma_brace(data, pos)
            elif c == _LBRACE:
                elem, pos = _read_sub_array(data, pos + 1)
                pos = _read_comma_brace(data, pos)
            elif c == _RBRACE:
                return
            else:
                elem, pos = _read_simple(data, pos)
                if elem == b"NULL":
                    elem = None
            yield elem


def parse_array(data: bytes | str) -> list[Element]:
    """Split an array literal into its raw elements."""
    return list(ArrayParser(data))


@runtime_checkable
class ArrayValueScanner(Protocol):
    """A value that consumes the elements of an array one by one."""

    def before_scan_array_value(self, data: bytes) -> None:
        """Called once with the whole array literal before any element."""

    def scan_array_value(self, data: Element) -> None:
        """Called for each element; ``None`` stands for NULL."""

    def after_scan_array_value(self) -> None:
        """Called once after the last element."""


def _scan_into(scanner: ArrayValueScanner, data: bytes | str | None) -> None:
    if data is None:
        return
    raw = _raw(data)
    scanner.before_scan_array_value(raw)
    for elem in ArrayParser(raw):
        scanner.scan_array_value(elem)
    scanner.after_scan_array_value()


def _elements(
    data: bytes | str | None, convert: Callable[[Element], Any]
) -> list[Any] | None:
    if data is None:
        return None
    return [convert(elem) for elem in ArrayParser(data)]


def scan_string_array(data: bytes | str | None) -> list[str] | None:
    """Decode a text array; NULL elements become ``""``."""
    return _elements(data, scan_string)


def scan_int_array(data: bytes | str | None) -> list[int] | None:
    """Decode an integer array; NULL elements become 0."""
    return _elements(data, lambda elem: scan_int(elem, 64))


def scan_float_array(data: bytes | str | None) -> list[float] | None:
    """Decode a float array; NULL elements become 0.0."""
    return _elements(data, lambda elem: scan_float(elem, 64))


def scan_array(data: bytes | str | None, elem_type: Any = str) -> list[Any] | None:
    """Decode an array whose elements are of ``elem_type``.

    ``elem_type`` may be ``list[T]`` for nested arrays. NULL gives ``None``.
    """
    if data is None:
        return None
    if elem_type is list or get_origin(elem_type) is list:
        args = get_args(elem_type)
        inner = args[0] if args else str
        return _elements(data, lambda elem: scan_array(elem, inner))
    return _elements(data, lambda elem: scan_value(elem_type, elem))


def _append_elem(value: Any, flags: int) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, (list, tuple)):
        return append_array(value, flags)
    return append(value, flags)


def append_array(values: Any, flags: int = 0) -> str:
    """Render a list or tuple as an array literal; nested lists become sub-arrays."""
    flags |= Flag.ARRAY
    if values is None:
        return append_null(flags)
    if not isinstance(values, (list, tuple)):
        raise TypeError(f"pg: Array(unsupported {type(values).__name__})")
    quote = should_quote_array(flags)
    flags |= Flag.SUBARRAY
    body = "{" + ",".join(_append_elem(value, flags) for value in values) + "}"
    return f"'{body}'" if quote else body


@dataclass
class Array:
    """Wraps a list so that it is rendered and decoded as a PostgreSQL array."""

    value: Any
    elem_type: Any = str

    def __post_init__(self) -> None:
        if self.value is None:
            raise TypeError("pg: Array(nil)")

    def append_value(self, flags: int = 0) -> str:
        return append_array(self.value, flags)

    def scan_value(self, data: bytes | str | None) -> None:
        if isinstance(self.value, ArrayValueScanner):
            _scan_into(self.value, data)
            return
        if self.value is not None and not isinstance(self.value, (list, tuple)):
            raise TypeError(f"pg: Array(unsupported {type(self.value).__name__})")
        self.value = scan_array(data, self.elem_type)