"""Literal JSON tokens and string escaping.

Escaping rules:
- ``"`` and ``\\`` are backslash-escaped
- backspace, tab, line feed, form feed, carriage return use short escapes
- every other byte in 0x00-0x1F uses ``\\u00xx`` (lower-case hex)
- everything else, including all non-ASCII UTF-8, passes through raw

There is deliberately no float writer.
"""

import re
from typing import BinaryIO, Optional, Tuple

from canonjson.kernel.errors import InvalidInput


def _build_escape_table() -> Tuple[Optional[bytes], ...]:
    short = {
        0x08: b"\\b",
        0x09: b"\\t",
        0x0A: b"\\n",
        0x0C: b"\\f",
        0x0D: b"\\r",
        0x22: b'\\"',
        0x5C: b"\\\\",
    }
    table = []
    for byte in range(256):
        if byte in short:
            table.append(short[byte])
        elif byte < 0x20:
            table.append(b"\\u%04x" % byte)
        else:
            table.append(None)
    return tuple(table)


# Escape sequence per byte value; None means the byte is written as is.
ESCAPE = _build_escape_table()

_NEEDS_ESCAPE = re.compile(rb'[\x00-\x1f"\\]')


def _escape_match(match: "re.Match[bytes]") -> bytes:
    return ESCAPE[match.group()[0]]


def escape_str(value: str) -> bytes:
    """Return ``value`` as a quoted, escaped JSON string in UTF-8."""
    try:
        raw = value.encode("utf-8")
    except UnicodeEncodeError as err:
        raise InvalidInput(f"string is not valid UTF-8: {err.reason}") from err
    return b'"' + _NEEDS_ESCAPE.sub(_escape_match, raw) + b'"'


def format_escaped_str(writer: BinaryIO, value: str) -> None:
    writer.write(escape_str(value))


# Union of the signed and unsigned 128-bit ranges
INT_MIN = -(1 << 127)
INT_MAX = (1 << 128) - 1


def format_int(value: int) -> bytes:
    if not INT_MIN <= value <= INT_MAX:
        raise InvalidInput(f"integer {value} does not fit in 128 bits")
    # int.__str__ is already minimal: no leading zeros, sign only when negative
    return str(value).encode("ascii")


def write_int(writer: BinaryIO, value: int) -> None:
    writer.write(format_int(value))


def write_bool(writer: BinaryIO, value: bool) -> None:
    writer.write(b"true" if value else b"false")


def write_null(writer: BinaryIO) -> None:
    writer.write(b"null")
