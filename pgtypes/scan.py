"""Decoding of PostgreSQL text-format column values into Python values.

A value arrives as ``bytes``; ``None`` stands for SQL NULL and ``b""`` for an
empty value.
"""

from __future__ import annotations

import binascii
import dataclasses
import ipaddress
import json
import math
import re
import struct
import threading
from datetime import datetime
from datetime import time as dtime
from typing import Any, Callable, Protocol, runtime_checkable

from .timefmt import parse_time

ScannerFunc = Callable[[Any], Any]

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_INF_WORDS = ("inf", "infinity")


@runtime_checkable
class ValueScanner(Protocol):
    """A value that knows how to decode itself from column data."""

    def scan_value(self, data: bytes | None) -> None:
        """Load the value from ``data``; ``None`` means SQL NULL."""


def _raw(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _text(data: bytes | bytearray | memoryview | str) -> str:
    if isinstance(data, str):
        return data
    return bytes(data).decode("utf-8")


def scan_string(data: bytes | str | None) -> str:
    """Decode a text value; NULL and empty data give ``""``."""
    if not data:
        return ""
    return _text(data)


def scan_bytes(data: bytes | str | None) -> bytes | None:
    """Decode a bytea value in ``\\x`` hex form; NULL gives ``None``."""
    if data is None:
        return None
    raw = _raw(data)
    if not raw:
        return b""
    if len(raw) < 2 or raw[:2] != b"\\x":
        raise ValueError(f"pg: can't parse bytea: {raw!r}")
    try:
        return binascii.unhexlify(raw[2:])
    except binascii.Error as err:
        raise ValueError(f"pg: can't parse bytea: {raw!r}") from err


def scan_int(data: bytes | str | None, bits: int = 64) -> int:
    """Decode a signed integer that must fit into ``bits`` bits."""
    if not data:
        return 0
    text = _text(data)
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"pg: can't parse int {text!r}: invalid syntax")
    num = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= num < limit:
        raise ValueError(f"pg: can't parse int {text!r}: value out of range")
    return num


def scan_uint64(data: bytes | str | None) -> int:
    """Decode an unsigned 64-bit integer.

    Negative 64-bit values are accepted and wrapped, since the server has no
    unsigned 64-bit type.
    """
    if not data:
        return 0
    text = _text(data)
    if text.startswith("-"):
        return scan_int(text, 64) & ((1 << 64) - 1)
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"pg: can't parse uint {text!r}: invalid syntax")
    num = int(text)
    if num >= 1 << 64:
        raise ValueError(f"pg: can't parse uint {text!r}: value out of range")
    return num


def scan_float(data: bytes | str | None, bits: int = 64) -> float:
    """Decode a floating point value, rounded to single precision for 32 bits."""
    if not data:
        return 0.0
    text = _text(data)
    if text != text.strip() or "_" in text:
        raise ValueError(f"pg: can't parse float {text!r}: invalid syntax")
    try:
        num = float(text)
    except ValueError as err:
        raise ValueError(f"pg: can't parse float {text!r}: invalid syntax") from err
    if math.isinf(num) and text.lstrip("+-").lower() not in _INF_WORDS:
        raise ValueError(f"pg: can't parse float {text!r}: value out of range")
    if bits == 32 and math.isfinite(num):
        try:
            num = struct.unpack("<f", struct.pack("<f", num))[0]
        except OverflowError as err:
            raise ValueError(
                f"pg: can't parse float {text!r}: value out of range"
            ) from err
    return num


def scan_bool(data: bytes | str | None) -> bool:
    """Decode a boolean; only ``t`` and ``1`` are true."""
    if not data:
        return False
    return _raw(data) in (b"t", b"1")


def scan_time(data: bytes | str | None) -> datetime | dtime | None:
    """Decode a date or time value; NULL and empty data give ``None``."""
    if not data:
        return None
    return parse_time(_raw(data))


def _scan_ip(data: bytes | None) -> Any:
    if data is None:
        return None
    text = _text(data)
    try:
        return ipaddress.ip_address(text)
    except ValueError as err:
        raise ValueError(f"pg: invalid ip={text!r}") from err


def _scan_ip_network(data: bytes | None) -> Any:
    if data is None:
        return None
    text = _text(data)
    try:
        return ipaddress.ip_network(text, strict=False)
    except ValueError as err:
        raise ValueError(f"pg: invalid cidr={text!r}") from err


def _scan_json(data: bytes | None) -> Any:
    if data is None:
        return None
    return json.loads(_raw(data))


def _json_scanner(typ: type) -> ScannerFunc:
    def scan(data: bytes | None) -> Any:
        decoded = _scan_json(data)
        if decoded is None:
            return None
        if dataclasses.is_dataclass(typ) and isinstance(decoded, dict):
            return typ(**decoded)
        if typ is tuple and isinstance(decoded, list):
            return tuple(decoded)
        return decoded

    return scan


def _value_scanner(typ: type) -> ScannerFunc:
    def scan(data: bytes | None) -> Any:
        obj = typ()
        obj.scan_value(data)
        return obj

    return scan


def _sql_scanner(typ: type) -> ScannerFunc:
    def scan(data: bytes | None) -> Any:
        obj = typ()
        obj.scan(None if data is None else _raw(data))
        return obj

    return scan


def _coerced(typ: type, base: type, fn: ScannerFunc) -> ScannerFunc:
    if typ is base:
        return fn

    def scan(data: bytes | None) -> Any:
        value = fn(data)
        return None if value is None else typ(value)

    return scan


def _select_scanner(typ: type) -> ScannerFunc:
    if issubclass(typ, datetime):
        return scan_time
    if issubclass(typ, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return _scan_ip
    if issubclass(typ, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return _scan_ip_network
    if issubclass(typ, ValueScanner):
        return _value_scanner(typ)
    if callable(getattr(typ, "scan", None)):
        return _sql_scanner(typ)
    if issubclass(typ, bool):
        return scan_bool
    if issubclass(typ, int):
        return _coerced(typ, int, scan_int)
    if issubclass(typ, float):
        return _coerced(typ, float, scan_float)
    if issubclass(typ, str):
        return _coerced(typ, str, scan_string)
    if issubclass(typ, (bytes, bytearray)):
        return _coerced(typ, bytes, scan_bytes)
    if dataclasses.is_dataclass(typ) or issubclass(typ, (dict, list, tuple)):
        return _json_scanner(typ)
    if typ is object:
        return _scan_json
    raise TypeError(f"pg: Scan(unsupported {typ.__name__})")


_scanners: dict[type, ScannerFunc] = {}
_scanners_lock = threading.Lock()


def register_scanner(typ: type, fn: ScannerFunc) -> None:
    """Register ``fn`` as the scanner for ``typ``; a type may be set only once."""
    with _scanners_lock:
        if typ in _scanners:
            raise ValueError(
                f"pg: scanner for the type={typ.__name__} is already registered"
            )
        _scanners[typ] = fn


def scanner_for(typ: type) -> ScannerFunc:
    """Return the scanner used to decode values of ``typ``."""
    fn = _scanners.get(typ)
    if fn is not None:
        return fn
    fn = _select_scanner(typ)
    with _scanners_lock:
        return _scanners.setdefault(typ, fn)


def scan_value(typ: type, data: bytes | str | None) -> Any:
    """Decode ``data`` into a value of ``typ``."""
    if typ is None:
        raise TypeError("pg: Scan(nil)")
    if not isinstance(typ, type):
        raise TypeError(f"pg: Scan(non-type {type(typ).__name__})")
    return scanner_for(typ)(data)