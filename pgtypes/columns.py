"""Decoding of result columns by their PostgreSQL type OID."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .append import RawValue
from .array import scan_float_array, scan_int_array, scan_string_array
from .scan import scan_bool, scan_bytes, scan_float, scan_int, scan_string, scan_time


class _Oid(IntEnum):
    BOOL = 16
    INT2 = 21
    INT4 = 23
    INT8 = 20
    FLOAT4 = 700
    FLOAT8 = 701
    TEXT = 25
    VARCHAR = 1043
    BYTEA = 17
    JSON = 114
    JSONB = 3802
    TIMESTAMP = 1114
    TIMESTAMPTZ = 1184
    INT4_ARRAY = 1007
    INT8_ARRAY = 1016
    FLOAT8_ARRAY = 1022
    TEXT_ARRAY = 1009
    UUID = 2950


@dataclass(frozen=True)
class ColumnInfo:
    """Name and type OID of a result column."""

    name: str
    data_type: int


def _json(data: bytes | None) -> bytes:
    return scan_string(data).encode("utf-8")


_READERS: dict[int, Callable[[Any], Any]] = {
    _Oid.BOOL: scan_bool,
    _Oid.INT2: lambda data: scan_int(data, 16),
    _Oid.INT4: lambda data: scan_int(data, 32),
    _Oid.INT8: lambda data: scan_int(data, 64),
    _Oid.FLOAT4: lambda data: scan_float(data, 32),
    _Oid.FLOAT8: lambda data: scan_float(data, 64),
    _Oid.BYTEA: scan_bytes,
    _Oid.TEXT: scan_string,
    _Oid.VARCHAR: scan_string,
    _Oid.UUID: scan_string,
    _Oid.JSON: _json,
    _Oid.JSONB: _json,
    _Oid.TIMESTAMP: scan_time,
    _Oid.TIMESTAMPTZ: scan_time,
    _Oid.INT4_ARRAY: scan_int_array,
    _Oid.INT8_ARRAY: scan_int_array,
    _Oid.FLOAT8_ARRAY: scan_float_array,
    _Oid.TEXT_ARRAY: scan_string_array,
}


def read_column_value(col: ColumnInfo, data: bytes | None) -> Any:
    """Decode ``data`` according to the column's type.

    Types without a dedicated decoder come back as a ``RawValue``.
    """
    reader = _READERS.get(col.data_type)
    if reader is None:
        return RawValue(col.data_type, scan_string(data))
    return reader(data)