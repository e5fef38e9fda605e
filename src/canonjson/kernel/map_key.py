"""Restricted serialization path for object member keys.

JSON object keys are strings. Strings, unit variant names and integers
are accepted; integers are written as their decimal digits inside quotes.
Every other shape fails with "key must be a string".
"""

from typing import BinaryIO

from canonjson.kernel.emitter import format_escaped_str, format_int
from canonjson.kernel.errors import CanonicalizationError, key_must_be_a_string
from canonjson.kernel.visitor import Shape, Visitor


class MapKeySerializer(Visitor):
    """Visitor that writes a single quoted key."""

    def __init__(self, writer: BinaryIO):
        self.writer = writer

    def reject(self, shape: Shape) -> CanonicalizationError:
        return key_must_be_a_string()

    def visit_str(self, value: str) -> None:
        format_escaped_str(self.writer, value)

    def visit_unit_variant(self, name: str) -> None:
        format_escaped_str(self.writer, name)

    def visit_int(self, value: int) -> None:
        self.writer.write(b'"' + format_int(value) + b'"')
