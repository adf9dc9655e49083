# natshdr

A small library for working with NATS message headers. It handles the
`NATS/1.0` header block that comes before a message payload.

Everything lives in the `natshdr.headers` module.

`HeaderMap` is a multi-map. Each header name maps to a set of distinct values.
You can build one from key/value pairs, parse one from raw bytes, and write it
back out in wire form.

## Parsing a header block

```python
from natshdr.headers import HeaderMap, HeaderParseError

headers = HeaderMap.from_bytes(b"NATS/1.0 100 Idle Heartbeat\r\nX-Test: one,\r\n two\r\n")

headers.get("Status")       # "100"
headers.get("Description")  # "Idle Heartbeat"
headers["X-Test"]           # frozenset({"one, two"})
```

The version line may carry an inline status code and an optional description
after `NATS/1.0`. These are stored under the `Status` and `Description` keys.

Lines may end in `\r\n` or `\n`. Each header line is split at its first `:`.
The name and the value are both stripped of surrounding whitespace.

A line that starts with a space or a tab continues the previous value. The
parts are joined with single spaces. Blank lines are skipped.

`from_bytes` raises `HeaderParseError`, a subclass of `ValueError`, in these
cases:

- the input is not valid UTF-8
- the first line does not start with `NATS/1.0`, which includes empty input
- a header line has no `:`

Each parse error is also logged at debug level on the `natshdr.headers` logger.

## Building headers

```python
from natshdr.headers import HeaderMap, STATUS

headers = HeaderMap([("Nats-Msg-Id", "abc")])

headers.insert(STATUS, "200")      # replaces any existing values
headers.append("X-Tag", "a")       # adds to the set of values
headers.append("X-Tag", "b")

"X-Tag" in headers                 # True
list(headers.get_all("X-Tag"))     # ["a", "b"]
len(headers)                       # number of distinct header names
```

These methods behave as follows:

- `insert(key, value)` sets the key to that single value. It returns a
  `frozenset` of the values it replaced, or `None` if the key was new.
- `append(key, value)` returns `True` if the value was new for that key, and
  `False` if it was already there.
- `get(key)` returns the first value added under the key, or `None`.
- `get_all(key)` returns an iterator over every value for the key, in the
  order they were added. The iterator is empty if the key is unknown.
- `headers[key]` returns the values as a `frozenset`. It raises `KeyError` if
  the key is unknown.
- `clear()` removes everything.

`HeaderMap` is a read-only `collections.abc.Mapping` from names to frozensets,
so iteration, `keys()`, `items()` and `values()` work as usual. Two maps are
equal when they hold the same names with the same sets of values, whatever the
order. Maps cannot be hashed.

## Header name constants

`natshdr.headers` defines these header names as constants:

- `STATUS`
- `DESCRIPTION`
- `NATS_MSG_ID`
- `NATS_EXPECTED_STREAM`
- `NATS_EXPECTED_LAST_MSG_ID`
- `NATS_EXPECTED_LAST_SEQUENCE`
- `NATS_EXPECTED_LAST_SUBJECT_SEQUENCE`
- `NATS_LAST_CONSUMER`
- `NATS_CONSUMER_STALLED`

## Serialising

```python
HeaderMap([("X-Tag", "a")]).to_bytes()  # b"NATS/1.0\r\nX-Tag:a\r\n\r\n"
```

The output is the bare version line, then one `Name:value\r\n` line for each
value, then a blank line to end the block. Names and values are stripped of
surrounding whitespace when written. `Status` and `Description` are written as
ordinary header lines, not folded back into the version line.

## Not included

This package only deals with header blocks. It does not connect to a NATS
server, and it does not publish, subscribe or frame whole messages.