"""PostgreSQL hstore literals: rendering and parsing."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .append import append_error, append_null, append_string
from .array import _read_quoted
from .flags import Flag, has_flag


def _quoted(s: str, flags: int) -> str:
    return append_string(s, flags | Flag.ARRAY)


def append_hstore(mapping: Mapping[str, str] | None, flags: int = 0) -> str:
    """Render a string-to-string mapping as an hstore literal."""
    if mapping is None:
        return append_null(flags)
    pairs = []
    for key, value in mapping.items():
        if not isinstance(key, str) or not isinstance(value, str):
            return append_error(
                f"pg.Hstore(unsupported {type(mapping).__name__} with "
                f"{type(key).__name__} => {type(value).__name__})"
            )
        pairs.append(f"{_quoted(key, flags)}=>{_quoted(value, flags)}")
    body = ",".join(pairs)
    return f"'{body}'" if has_flag(flags, Flag.QUOTE) else body


def _expect(data: bytes, pos: int, wanted: str) -> int:
    if pos >= len(data):
        raise ValueError("pg: unexpected end of data")
    c = chr(data[pos])
    if c != wanted:
        raise ValueError(f"pg: got {c!r}, wanted {wanted!r}")
    return pos + 1


def parse_hstore(data: bytes | str | None) -> dict[str, str] | None:
    """Parse an hstore literal such as ``"a"=>"1", "b"=>"2"``; NULL gives None."""
    if data is None:
        return None
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    n = len(raw)
    result: dict[str, str] = {}
    pos = 0
    while pos < n:
        pos = _expect(raw, pos, '"')
        key, pos = _read_quoted(raw, pos)
        pos = _expect(raw, pos, "=")
        pos = _expect(raw, pos, ">")
        pos = _expect(raw, pos, '"')
        value, pos = _read_quoted(raw, pos)
        if pos < n and raw[pos] == ord(","):
            pos += 1
            if pos < n and raw[pos] == ord(" "):
                pos += 1
        result[key.decode("utf-8")] = value.decode("utf-8")
    return result


@dataclass
class Hstore:
    """Wraps a mapping so that it is rendered and decoded as hstore."""

    value: Any

    def __post_init__(self) -> None:
        if self.value is None:
            raise TypeError("pg.Hstore(nil)")
        if not isinstance(self.value, Mapping):
            raise TypeError(f"pg.Hstore(unsupported {type(self.value).__name__})")

    def append_value(self, flags: int = 0) -> str:
        return append_hstore(self.value, flags)

    def scan_value(self, data: bytes | str | None) -> None:
        self.value = parse_hstore(data)