"""Parsing and rendering of PostgreSQL date and time values."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from datetime import time as dtime

_TIME_LAYOUT_LEN = len("15:04:05.999999999")

_CLOCK_RE = re.compile(r"(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?")
_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_TIMESTAMP_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})([ T])(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
)
_ZONE_RE = re.compile(r"([+-])(\d{2})(?::(\d{2})(?::(\d{2}))?)?")


def _error(s: str) -> ValueError:
    return ValueError(f"pg: can't parse time {s!r}")


def _micros(frac: str | None) -> int:
    if not frac:
        return 0
    return int(frac[:6].ljust(6, "0"))


def _zone(text: str, s: str) -> timezone:
    match = _ZONE_RE.fullmatch(text)
    if match is None:
        raise _error(s)
    sign, hours, minutes, seconds = match.groups()
    offset = timedelta(
        hours=int(hours), minutes=int(minutes or 0), seconds=int(seconds or 0)
    )
    try:
        return timezone(-offset if sign == "-" else offset)
    except ValueError as err:
        raise _error(s) from err


def _timestamp(body: str, sep: str, tz: timezone, s: str) -> datetime:
    match = _TIMESTAMP_RE.fullmatch(body)
    if match is None or match.group(4) != sep:
        raise _error(s)
    year, month, day, _, hour, minute, second, frac = match.groups()
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), _micros(frac),
            tzinfo=tz,
        )
    except ValueError as err:
        raise _error(s) from err


def _parse_rfc3339(s: str) -> datetime:
    if s.endswith("Z"):
        return _timestamp(s[:-1], "T", timezone.utc, s)
    if len(s) < 6:
        raise _error(s)
    return _timestamp(s[:-6], "T", _zone(s[-6:], s), s)


def parse_time(data: bytes | str) -> datetime | dtime:
    """Parse a date/time value received from the server."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        data = bytes(data).decode("utf-8")
    return parse_time_string(data)


def parse_time_string(s: str) -> datetime | dtime:
    """Parse a date, time of day, timestamp or timestamptz string.

    A bare time of day is returned as a ``datetime.time`` in UTC; everything
    else is an aware ``datetime``. Fractions beyond microseconds are dropped.
    """
    n = len(s)
    if n <= _TIME_LAYOUT_LEN:
        if n > 2 and s[2] == ":":
            match = _CLOCK_RE.fullmatch(s)
            if match is None:
                raise _error(s)
            hour, minute, second, frac = match.groups()
            try:
                return dtime(
                    int(hour), int(minute), int(second), _micros(frac),
                    tzinfo=timezone.utc,
                )
            except ValueError as err:
                raise _error(s) from err
        match = _DATE_RE.fullmatch(s)
        if match is None:
            raise _error(s)
        year, month, day = match.groups()
        try:
            return datetime(int(year), int(month), int(day), tzinfo=timezone.utc)
        except ValueError as err:
            raise _error(s) from err

    if s[10] == "T":
        return _parse_rfc3339(s)
    for width in (9, 6, 3):
        if s[n - width] in "+-":
            return _timestamp(s[:-width], " ", _zone(s[-width:], s), s)
    return _timestamp(s, " ", timezone.utc, s)


def _fraction(microsecond: int) -> str:
    if not microsecond:
        return ""
    return "." + f"{microsecond:06d}".rstrip("0")


def _as_utc(tm: datetime) -> datetime:
    if tm.tzinfo is None:
        tm = tm.replace(tzinfo=timezone.utc)
    return tm.astimezone(timezone.utc)


def append_time(tm: datetime, flags: int = 0) -> str:
    """Render ``tm`` in UTC as a timestamptz literal; naive values count as UTC.

    The literal is quoted only when ``flags`` is exactly 1.
    """
    tm = _as_utc(tm)
    text = (
        f"{tm.year:04d}-{tm.month:02d}-{tm.day:02d} "
        f"{tm.hour:02d}:{tm.minute:02d}:{tm.second:02d}"
        f"{_fraction(tm.microsecond)}+00:00:00"
    )
    if flags == 1:
        return f"'{text}'"
    return text


def _rfc3339(tm: datetime) -> str:
    if tm.tzinfo is None:
        tm = tm.replace(tzinfo=timezone.utc)
    offset = tm.utcoffset() or timedelta(0)
    total = int(offset.total_seconds())
    if total == 0:
        zone = "Z"
    else:
        sign = "-" if total < 0 else "+"
        total = abs(total)
        zone = f"{sign}{total // 3600:02d}:{total % 3600 // 60:02d}"
    return (
        f"{tm.year:04d}-{tm.month:02d}-{tm.day:02d}T"
        f"{tm.hour:02d}:{tm.minute:02d}:{tm.second:02d}"
        f"{_fraction(tm.microsecond)}{zone}"
    )


@dataclass
class NullTime:
    """A timestamp where ``None`` is rendered as SQL NULL and JSON null."""

    time: datetime | None = None

    def append_value(self, flags: int = 0) -> str:
        from .append import append_null

        if self.time is None:
            return append_null(flags)
        return append_time(self.time, flags)

    def marshal_json(self) -> bytes:
        if self.time is None:
            return b"null"
        return json.dumps(_rfc3339(self.time)).encode("utf-8")

    def unmarshal_json(self, data: bytes | str) -> None:
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("utf-8")
        if data == "null":
            self.time = None
            return
        value = json.loads(data)
        if not isinstance(value, str):
            raise ValueError("Time.UnmarshalJSON: input is not a JSON string")
        if len(value) <= 10 or value[10] != "T":
            raise _error(value)
        self.time = _parse_rfc3339(value)

    def scan(self, src: bytes | str | None) -> None:
        if src is None:
            self.time = None
            return
        parsed = parse_time(src)
        if isinstance(parsed, dtime):
            raise _error(str(src))
        self.time = parsed