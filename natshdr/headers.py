"""Multi-valued message headers and their wire format."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

logger = logging.getLogger(__name__)

HEADER_LINE = "NATS/1.0"

STATUS = "Status"
DESCRIPTION = "Description"
NATS_MSG_ID = "Nats-Msg-Id"
NATS_EXPECTED_STREAM = "Nats-Expected-Stream"
NATS_EXPECTED_LAST_MSG_ID = "Nats-Expected-Last-Msg-Id"
NATS_EXPECTED_LAST_SEQUENCE = "Nats-Expected-Last-Sequence"
NATS_EXPECTED_LAST_SUBJECT_SEQUENCE = "Nats-Expected-Last-Subject-Sequence"
NATS_LAST_CONSUMER = "Nats-Last-Consumer"
NATS_CONSUMER_STALLED = "Nats-Consumer-Stalled"

_CONTINUATION = (" ", "\t")


class HeaderParseError(ValueError):
    """Raised when a header block cannot be parsed."""


def _parse_error(message: str) -> HeaderParseError:
    logger.debug("header parse error: %s", message)
    return HeaderParseError(message)


def _split_lines(text: str) -> list[str]:
    """Split on LF or CRLF; a trailing line ending does not yield an empty line."""
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
        return [line.removesuffix("\r") for line in lines]
    return [line.removesuffix("\r") for line in lines[:-1]] + lines[-1:]


class HeaderMap(Mapping):
    """A multi-map from header name to a set of values for that header.

    Values under one name are kept in insertion order, so ``get`` returns
    the first value added.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] | None = None) -> None:
        self._inner: dict[str, dict[str, None]] = {}
        for key, value in pairs or ():
            self.append(key, value)

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> HeaderMap:
        """Parse a header block that starts with the version line."""
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError:
            raise _parse_error("invalid header received") from None

        lines = iter(_split_lines(text))
        headers = cls()

        first = next(lines, None)
        if first is None:
            raise _parse_error("expected header information not present")
        if not first.startswith(HEADER_LINE):
            raise _parse_error("version line does not begin with NATS/1.0")

        rest = first[len(HEADER_LINE):].strip()
        status, sep, description = rest.partition(" ")
        if sep:
            if status:
                headers.append(STATUS, status.strip())
            if description:
                headers.append(DESCRIPTION, description.strip())
        elif rest:
            headers.append(STATUS, rest)

        pending: str | None = None
        while True:
            line = pending if pending is not None else next(lines, None)
            pending = None
            if line is None:
                break
            if not line:
                continue
            key, sep, value = line.partition(":")
            if not sep:
                raise _parse_error("malformed header line")
            parts = [value.strip()]
            for following in lines:
                if following.startswith(_CONTINUATION):
                    parts.append(following.strip())
                else:
                    pending = following
                    break
            headers.append(key.strip(), " ".join(parts))
        return headers

    def insert(self, key: str, value: str) -> frozenset[str] | None:
        """Set ``key`` to the single ``value``; return the previous values, if any."""
        previous = self._inner.get(key)
        self._inner[key] = {value: None}
        return frozenset(previous) if previous is not None else None

    def append(self, key: str, value: str) -> bool:
        """Add ``value`` under ``key``; return True if it was not already present."""
        values = self._inner.setdefault(key, {})
        if value in values:
            return False
        values[value] = None
        return True

    def get(self, key: str) -> str | None:  # type: ignore[override]
        """Return the first value stored under ``key``, or None."""
        values = self._inner.get(key)
        if not values:
            return None
        return next(iter(values))

    def get_all(self, key: str) -> Iterator[str]:
        """Iterate over every value stored under ``key``."""
        return iter(tuple(self._inner.get(key, ())))

    def clear(self) -> None:
        """Remove every header."""
        self._inner.clear()

    def to_bytes(self) -> bytes:
        """Serialize as the version line, one line per value and a blank line."""
        out = [HEADER_LINE.encode(), b"\r\n"]
        for key, values in self._inner.items():
            for value in values:
                out.append(f"{key.strip()}:{value.strip()}\r\n".encode())
        out.append(b"\r\n")
        return b"".join(out)

    def __getitem__(self, key: str) -> frozenset[str]:
        return frozenset(self._inner[key])

    def __contains__(self, key: object) -> bool:
        return key in self._inner

    def __len__(self) -> int:
        return len(self._inner)

    def __iter__(self) -> Iterator[str]:
        return iter(self._inner)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return {k: set(v) for k, v in self._inner.items()} == {
            k: set(v) for k, v in other._inner.items()
        }

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {list(v)!r}" for k, v in self._inner.items())
        return f"HeaderMap({{{body}}})"