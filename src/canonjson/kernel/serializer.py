"""Canonical serializer: visitor callbacks to canonical JSON bytes.

Primitives go straight to the emitter. Keyed groups (mappings, structs,
struct variant payloads) go through the member canonicalizer, which
re-enters this serializer for each member value. Sequences stream in
input order.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Iterator, Set, Tuple

from canonjson.kernel.emitter import (
    escape_str,
    format_escaped_str,
    write_bool,
    write_int,
    write_null,
)
from canonjson.kernel.errors import CanonicalizationError, InvalidInput, floats_not_allowed
from canonjson.kernel.members import MemberCanonicalizer, State
from canonjson.kernel.visitor import MAX_NESTING_DEPTH, Visitor, accept


class SequenceCompound:
    """Streams the elements of one JSON array."""

    def __init__(self, ser: CanonicalSerializer):
        self.ser = ser
        self.state = State.EMPTY
        self.index = 0

    def serialize_element(self, value: Any) -> None:
        if self.state is State.EMPTY:
            self.ser.writer.write(b"[")
            self.state = State.FIRST
        else:
            self.ser.writer.write(b",")
            self.state = State.REST
        try:
            self.ser.serialize(value)
        except CanonicalizationError as err:
            err.within(f"[{self.index}]")
            raise
        self.index += 1

    def end(self) -> None:
        if self.state is State.EMPTY:
            self.ser.writer.write(b"[]")
        else:
            self.ser.writer.write(b"]")


class CanonicalSerializer(Visitor):
    """Visitor that writes the canonical encoding of each value it is given."""

    def __init__(self, writer: BinaryIO):
        self.writer = writer
        # ids of the values on the path from the root to the current value
        self.active: Set[int] = set()

    def fork(self, writer: BinaryIO) -> CanonicalSerializer:
        """A serializer of the same kind over another writer (member fragments).

        The fork shares the set of values being encoded, so cycles and depth
        are tracked across fragments.
        """
        ser = type(self)(writer)
        ser.active = self.active
        return ser

    def serialize(self, value: Any) -> None:
        if len(self.active) > MAX_NESTING_DEPTH:
            raise InvalidInput(
                f"values nested more than {MAX_NESTING_DEPTH} levels deep are not allowed"
            )
        marker = id(value)
        if marker in self.active:
            raise InvalidInput("value contains a reference cycle")
        self.active.add(marker)
        try:
            accept(value, self)
        finally:
            self.active.discard(marker)

    def visit_none(self) -> None:
        write_null(self.writer)

    def visit_bool(self, value: bool) -> None:
        write_bool(self.writer, value)

    def visit_int(self, value: int) -> None:
        write_int(self.writer, value)

    def visit_float(self, value: Any) -> None:
        raise floats_not_allowed()

    def visit_str(self, value: str) -> None:
        format_escaped_str(self.writer, value)

    def visit_bytes(self, value: bytes) -> None:
        # One array element per byte, never a string
        self.writer.write(b"[" + b",".join(b"%d" % byte for byte in value) + b"]")

    def visit_seq(self, items: Iterator[Any]) -> None:
        seq = SequenceCompound(self)
        for item in items:
            seq.serialize_element(item)
        seq.end()

    def visit_map(self, entries: Iterator[Tuple[Any, Any]]) -> None:
        group = MemberCanonicalizer(self)
        for key, value in entries:
            group.serialize_entry(key, value)
        group.end()

    def visit_struct(self, name: str, fields: Iterator[Tuple[str, Any]]) -> None:
        self.visit_map(fields)

    def visit_unit_variant(self, name: str) -> None:
        format_escaped_str(self.writer, name)

    def visit_newtype_variant(self, name: str, value: Any) -> None:
        # Newtypes serialize without an object wrapper
        try:
            self.serialize(value)
        except CanonicalizationError as err:
            err.within(name)
            raise

    def visit_tuple_variant(self, name: str, items: Iterator[Any]) -> None:
        self.writer.write(b"{" + escape_str(name) + b":")
        try:
            self.visit_seq(items)
        except CanonicalizationError as err:
            err.within(name)
            raise
        self.writer.write(b"}")

    def visit_struct_variant(self, name: str, fields: Iterator[Tuple[Any, Any]]) -> None:
        self.writer.write(b"{" + escape_str(name) + b":")
        try:
            self.visit_map(fields)
        except CanonicalizationError as err:
            err.within(name)
            raise
        self.writer.write(b"}")
