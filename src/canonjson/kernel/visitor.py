"""Value visitor: classify an arbitrary Python value and dispatch on its shape.

The visitor is the only place that knows about concrete Python types.
Encoders implement ``Visitor`` and receive exactly one callback per value;
composite callbacks get lazy, single-pass iterators over the children.

Classification order matters and is fixed:
- None
- objects with a ``__canonical_json__`` hook (resolved, then re-classified)
- ``Variant`` and ``enum.Enum`` members (before their str/int mixins)
- bool (before int)
- integral numbers, then every other number (rejected downstream as floats)
- str, then bytes-like (both before generic sequences)
- pydantic root models (unwrapped to their root value, then re-classified)
- pydantic models and dataclasses (structs)
- mappings, then sequences
Anything else is unclassifiable.
"""

from __future__ import annotations

import dataclasses
import numbers
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Iterator, Tuple

from pydantic import BaseModel, RootModel

from canonjson.kernel.errors import CanonicalizationError, CustomError, InvalidInput
from canonjson.kernel.variant import Variant, VariantKind


HOOK_NAME = "__canonical_json__"

# Enclosing values allowed above any value, and hook resolutions per value
MAX_NESTING_DEPTH = 128

BYTES_TYPES = (bytes, bytearray, memoryview)


class Shape(str, Enum):
    """Every shape a value can take."""
    NONE = "none"
    HOOK = "hook"
    ROOT = "root"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STR = "str"
    BYTES = "bytes"
    SEQ = "seq"
    MAP = "map"
    STRUCT = "struct"
    UNIT_VARIANT = "unit_variant"
    NEWTYPE_VARIANT = "newtype_variant"
    TUPLE_VARIANT = "tuple_variant"
    STRUCT_VARIANT = "struct_variant"


_VARIANT_SHAPES = {
    VariantKind.UNIT: Shape.UNIT_VARIANT,
    VariantKind.NEWTYPE: Shape.NEWTYPE_VARIANT,
    VariantKind.TUPLE: Shape.TUPLE_VARIANT,
    VariantKind.STRUCT: Shape.STRUCT_VARIANT,
}


class Visitor:
    """Callbacks for each shape.

    Every callback rejects its shape by default, so a restricted visitor
    only overrides the shapes it accepts.
    """

    def reject(self, shape: Shape) -> CanonicalizationError:
        return InvalidInput(f"unsupported value of shape {shape.value}")

    def visit_none(self) -> None:
        raise self.reject(Shape.NONE)

    def visit_bool(self, value: bool) -> None:
        raise self.reject(Shape.BOOL)

    def visit_int(self, value: int) -> None:
        raise self.reject(Shape.INT)

    def visit_float(self, value: Any) -> None:
        raise self.reject(Shape.FLOAT)

    def visit_str(self, value: str) -> None:
        raise self.reject(Shape.STR)

    def visit_bytes(self, value: bytes) -> None:
        raise self.reject(Shape.BYTES)

    def visit_seq(self, items: Iterator[Any]) -> None:
        raise self.reject(Shape.SEQ)

    def visit_map(self, entries: Iterator[Tuple[Any, Any]]) -> None:
        raise self.reject(Shape.MAP)

    def visit_struct(self, name: str, fields: Iterator[Tuple[str, Any]]) -> None:
        raise self.reject(Shape.STRUCT)

    def visit_unit_variant(self, name: str) -> None:
        raise self.reject(Shape.UNIT_VARIANT)

    def visit_newtype_variant(self, name: str, value: Any) -> None:
        raise self.reject(Shape.NEWTYPE_VARIANT)

    def visit_tuple_variant(self, name: str, items: Iterator[Any]) -> None:
        raise self.reject(Shape.TUPLE_VARIANT)

    def visit_struct_variant(self, name: str, fields: Iterator[Tuple[Any, Any]]) -> None:
        raise self.reject(Shape.STRUCT_VARIANT)


def classify(value: Any) -> Shape:
    """Return the shape of ``value``.

    Raises:
        InvalidInput: If the value has no canonical JSON shape (sets,
            arbitrary objects, classes, ...)
    """
    if value is None:
        return Shape.NONE
    if getattr(type(value), HOOK_NAME, None) is not None:
        return Shape.HOOK
    if isinstance(value, Variant):
        return _VARIANT_SHAPES[value.kind]
    if isinstance(value, Enum):
        if value.name is None:
            raise InvalidInput(f"{type(value).__name__} member {value!r} has no name")
        return Shape.UNIT_VARIANT
    if isinstance(value, bool):
        return Shape.BOOL
    if isinstance(value, numbers.Integral):
        return Shape.INT
    if isinstance(value, numbers.Number):
        return Shape.FLOAT
    if isinstance(value, str):
        return Shape.STR
    if isinstance(value, BYTES_TYPES):
        return Shape.BYTES
    if isinstance(value, RootModel):
        return Shape.ROOT
    if isinstance(value, BaseModel):
        return Shape.STRUCT
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return Shape.STRUCT
    if isinstance(value, Mapping):
        return Shape.MAP
    if isinstance(value, Sequence):
        return Shape.SEQ
    if isinstance(value, (set, frozenset)):
        raise InvalidInput(f"{type(value).__name__} has no stable order; use a sorted list")
    raise InvalidInput(f"cannot encode value of type {type(value).__name__}")


def resolve_hook(value: Any) -> Any:
    """Call the value's ``__canonical_json__`` hook and return the substitute value."""
    try:
        substitute = getattr(value, HOOK_NAME)()
    except CanonicalizationError:
        raise
    except Exception as err:
        raise CustomError(
            f"{type(value).__name__}.{HOOK_NAME} failed: {err}"
        ) from err
    if substitute is value:
        raise InvalidInput(f"{type(value).__name__}.{HOOK_NAME} returned the value itself")
    return substitute


def struct_fields(value: Any) -> Iterator[Tuple[str, Any]]:
    """Yield ``(key, value)`` for each field of a pydantic model or dataclass.

    pydantic models yield the members ``model_dump`` would: excluded fields
    are skipped, computed fields and extra fields are included.
    """
    if isinstance(value, BaseModel):
        model = type(value)
        for name, field in model.model_fields.items():
            if field.exclude:
                continue
            key = field.serialization_alias or field.alias or name
            yield key, getattr(value, name)
        for name, computed in model.model_computed_fields.items():
            yield computed.alias or name, getattr(value, name)
        if value.model_extra:
            yield from value.model_extra.items()
        return
    for field in dataclasses.fields(value):
        yield field.name, getattr(value, field.name)


def unwrap(value: Any) -> Tuple[Any, Shape]:
    """Resolve hooks and root models until a value with a concrete shape remains.

    Raises:
        InvalidInput: If resolution does not settle within ``MAX_NESTING_DEPTH`` steps
    """
    shape = classify(value)
    steps = 0
    while shape is Shape.HOOK or shape is Shape.ROOT:
        steps += 1
        if steps > MAX_NESTING_DEPTH:
            raise InvalidInput(
                f"{type(value).__name__} did not resolve to a value "
                f"within {MAX_NESTING_DEPTH} steps"
            )
        value = resolve_hook(value) if shape is Shape.HOOK else value.root
        shape = classify(value)
    return value, shape


def accept(value: Any, visitor: Visitor) -> None:
    """Classify ``value`` and make exactly one callback on ``visitor``."""
    value, shape = unwrap(value)

    if shape is Shape.NONE:
        visitor.visit_none()
    elif shape is Shape.BOOL:
        visitor.visit_bool(value)
    elif shape is Shape.INT:
        visitor.visit_int(int(value))
    elif shape is Shape.FLOAT:
        visitor.visit_float(value)
    elif shape is Shape.STR:
        visitor.visit_str(value)
    elif shape is Shape.BYTES:
        visitor.visit_bytes(bytes(value))
    elif shape is Shape.SEQ:
        visitor.visit_seq(iter(value))
    elif shape is Shape.MAP:
        visitor.visit_map(iter(value.items()))
    elif shape is Shape.STRUCT:
        visitor.visit_struct(type(value).__name__, struct_fields(value))
    elif shape is Shape.UNIT_VARIANT:
        visitor.visit_unit_variant(value.name)
    elif shape is Shape.NEWTYPE_VARIANT:
        visitor.visit_newtype_variant(value.name, value.payload)
    elif shape is Shape.TUPLE_VARIANT:
        visitor.visit_tuple_variant(value.name, iter(value.payload))
    elif shape is Shape.STRUCT_VARIANT:
        visitor.visit_struct_variant(value.name, iter(value.payload.items()))
