"""Member canonicalizer: sorted output for keyed groups.

Members of a mapping or struct are not streamed. Each ``"key":value``
member is rendered into its own fragment, and when the group closes the
fragments are sorted by raw bytes and written in one go. Since every
fragment starts with a quote followed by the escaped key, sorting whole
fragments is sorting by key bytes.

Duplicate keys keep every fragment; the sort is stable, so duplicates stay
in order of appearance.
"""

from __future__ import annotations

import io
from enum import Enum
from typing import TYPE_CHECKING, Any, List

from canonjson.kernel.errors import CanonicalizationError
from canonjson.kernel.map_key import MapKeySerializer
from canonjson.kernel.visitor import accept

if TYPE_CHECKING:
    from canonjson.kernel.serializer import CanonicalSerializer


class State(Enum):
    """Separator bookkeeping for a compound value."""
    EMPTY = "empty"
    FIRST = "first"
    REST = "rest"


def path_segment(key: Any) -> str:
    """Readable path segment for a member key, used in error locations."""
    if isinstance(key, Enum) and key.name is not None:
        return key.name
    if isinstance(key, (str, int)) and not isinstance(key, bool):
        return str(key)
    return f"<{type(key).__name__}>"


class MemberCanonicalizer:
    """Collects member fragments for one keyed group and writes them sorted."""

    def __init__(self, ser: CanonicalSerializer):
        self.ser = ser
        self.state = State.EMPTY
        self.fragments: List[bytes] = []

    def serialize_entry(self, key: Any, value: Any) -> None:
        buf = io.BytesIO()
        try:
            accept(key, MapKeySerializer(buf))
            buf.write(b":")
            self.ser.fork(buf).serialize(value)
        except CanonicalizationError as err:
            err.within(path_segment(key))
            raise
        self.fragments.append(buf.getvalue())
        self.state = State.FIRST if self.state is State.EMPTY else State.REST

    def end(self) -> None:
        if self.state is State.EMPTY:
            self.ser.writer.write(b"{}")
            return
        self.fragments.sort()
        self.ser.writer.write(b"{" + b",".join(self.fragments) + b"}")
        self.fragments.clear()
