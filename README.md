# pgtypes

Conversion between Python values and the PostgreSQL text format.

`pgtypes` renders Python values as SQL literals that can be spliced into a
query, and parses the text form PostgreSQL sends back (scalars, arrays,
hstore maps, bytea and timestamps) into Python objects.

## Installing

```
pip install pgtypes
```

To run the test suite:

```
pip install "pgtypes[test]"
pytest
```

## Rendering flags

`pgtypes.flags.Flag` has three members, combined with `|`:

- `Flag.QUOTE`: produce a quoted literal (`'text'`, `NULL`).
- `Flag.ARRAY`: render as an element inside an array literal.
- `Flag.SUBARRAY`: the value is nested inside another array.

`has_flag(flags, flag)` and `should_quote_array(flags)` test them.

## Writing values

```python
from pgtypes.append import append, append_ident, Safe, Ident
from pgtypes.flags import Flag

append("it's", Flag.QUOTE)            # "'it''s'"
append(None, Flag.QUOTE)              # "NULL"
append(None, 0)                       # ""
append(True, 0)                       # "TRUE"
append(b"\x01\x02", Flag.QUOTE)       # "'\\x0102'"
append({"a": 1}, Flag.QUOTE)          # '\'{"a":1}\''
append_ident("table.id", Flag.QUOTE)  # '"table"."id"'
```

`append` handles `None`, `bool`, `int`, `float` (including `NaN` and the
infinities), `str`, bytes-like values, `datetime`, `ipaddress` addresses and
networks, and `dict`, `list`, `tuple` and dataclass instances, which are
rendered as JSON. NUL characters are dropped from text, and `\u0000` in JSON
is escaped (`append_jsonb`). Any other type raises `TypeError`.

`Safe` marks text to be inserted unchanged. `Ident` marks an identifier that
is quoted as a table or column name. `RawValue` holds a column value of a type
without its own decoder and renders it as a string. Types of your own are
supported by giving them an `append_value(flags)` method (the
`ValueAppender` protocol) or by registering a function with
`register_appender(typ, fn)`; `appender_for(typ)` returns the function in use.
If an `append_value` method raises, `append` renders the error as `?!(...)`
in place of the value.

### Timestamps

```python
from datetime import datetime, timezone
from pgtypes.timefmt import append_time, NullTime

append_time(datetime(2006, 2, 3, 10, 30, tzinfo=timezone.utc), 1)
# "'2006-02-03 10:30:00+00:00:00'"
```

Timestamps are converted to UTC; naive values are taken as UTC. The literal is
quoted only when `flags` is exactly `1`.

`NullTime` wraps an optional `datetime`: when `time` is `None` it renders as
SQL `NULL` and JSON `null`. It has `append_value`, `marshal_json`,
`unmarshal_json` (RFC 3339) and `scan`.

### Arrays, hstore and IN lists

```python
from pgtypes.array import Array, append_array
from pgtypes.hstore import Hstore, append_hstore
from pgtypes.in_op import in_values, in_multi

append_array(["a", "b"], Flag.QUOTE)       # '\'{"a","b"}\''
append_array([[1, 2], [3]], 0)             # "{{1,2},{3}}"
append_hstore({"k": "v"}, Flag.QUOTE)      # '\'"k"=>"v"\''
in_multi(1, 2, 3).append_value(0)          # "1,2,3"
in_multi([1, 2], [3, 4]).append_value(0)   # "(1,2),(3,4)"
```

`in_values` takes a list or tuple; given anything else, its `append_value`
raises `TypeError`. `Array(value, elem_type)` and `Hstore(value)` wrap a list
or a mapping so that it renders with `append_value` and reloads with
`scan_value`.

### bytea streams

`pgtypes.hexcodec.HexEncoder` accumulates written bytes as a `\x...` literal
(usable as a context manager; `getvalue()` returns the text, and an encoder
closed without writes yields NULL). `hex_decoder(data)` returns an
`io.BytesIO` over the bytes of a `\x...` literal.

## Reading values

Column data is passed as `bytes`; `None` stands for SQL NULL.

```python
from pgtypes.array import parse_array, scan_int_array, scan_array
from pgtypes.hstore import parse_hstore
from pgtypes.scan import scan_bytes, scan_bool, scan_int, scan_value
from pgtypes.timefmt import parse_time_string

scan_int_array(b"{1,2,NULL}")        # [1, 2, 0]
scan_array(b"{{1,2},{3}}", list[int])  # [[1, 2], [3]]
parse_array(b'{"a",NULL}')           # [b"a", None]
parse_hstore(b'"foo"=>"bar"')        # {"foo": "bar"}
scan_bytes(b"\\x0102")               # b"\x01\x02"
scan_bool(b"t")                      # True
scan_int(b"70000", 16)               # raises ValueError (out of range)
scan_value(float, b"1.5")            # 1.5
parse_time_string("2006-01-02 15:04:05-07")
```

`parse_time_string` accepts dates, times of day (returned as a UTC
`datetime.time`), timestamps, timestamps with a `+hh`, `+hh:mm` or
`+hh:mm:ss` offset, and RFC 3339 values. Fractions finer than microseconds
are dropped.

`scan_value(typ, data)` picks a decoder by type, and `register_scanner` /
`scanner_for` manage the decoders per type. Types with a `scan_value(data)`
method (the `ValueScanner` protocol) or a `scan(data)` method are created
empty and then loaded. `ArrayParser` iterates over the raw elements of an
array literal, and an `ArrayValueScanner` wrapped in `Array` receives the
elements one by one.

Given a `ColumnInfo(name, data_type)` with the column's PostgreSQL type OID,
`pgtypes.columns.read_column_value` chooses the decoding for bool, integer,
float, text, varchar, uuid, bytea, json, jsonb, timestamp and the common
array types; other types come back as a `RawValue`.

## What this package does not do

It only converts values. It does not open connections, send queries, format
queries with placeholders, manage transactions or map tables to classes.

## Version

`pgtypes.version.version()` returns the release version string.