"""Streaming hex encoding and decoding for bytea values."""

from __future__ import annotations

import binascii
import io

from .append import append_null
from .flags import Flag, has_flag


class HexEncoder:
    """Accumulates written bytes as a bytea hex literal."""

    def __init__(self, flags: int = 0) -> None:
        self._flags = flags
        self._parts: list[str] = []
        self._written = False
        self._closed = False

    def write(self, data: bytes | bytearray | memoryview) -> int:
        if self._closed:
            raise ValueError("pg: write to a closed hex encoder")
        chunk = bytes(data)
        if not self._written:
            if has_flag(self._flags, Flag.ARRAY):
                self._parts.append('"\\')
            elif has_flag(self._flags, Flag.QUOTE):
                self._parts.append("'")
            self._parts.append("\\x")
            self._written = True
        self._parts.append(chunk.hex())
        return len(chunk)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self._written:
            self._parts.append(append_null(self._flags))
        elif has_flag(self._flags, Flag.ARRAY):
            self._parts.append('"')
        elif has_flag(self._flags, Flag.QUOTE):
            self._parts.append("'")

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __enter__(self) -> HexEncoder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _check_prefix_byte(got: bytes, wanted: str) -> None:
    if not got:
        raise ValueError("pg: unexpected end of hex data")
    if got != wanted.encode("ascii"):
        raise ValueError(f"got {chr(got[0])!r}, wanted {wanted!r}")


def hex_decoder(data: bytes | str | None) -> io.BytesIO:
    """Return a reader over the bytes encoded in a ``\\x`` hex literal."""
    if not data:
        return io.BytesIO()
    raw = data.encode("ascii") if isinstance(data, str) else bytes(data)
    _check_prefix_byte(raw[:1], "\\")
    _check_prefix_byte(raw[1:2], "x")
    return io.BytesIO(binascii.unhexlify(raw[2:]))