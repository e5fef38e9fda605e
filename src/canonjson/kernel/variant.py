"""Tagged variant values.

Python has no native sum type with named payloads, so tagged variants are
built explicitly. ``enum.Enum`` members are also accepted as unit variants
by the visitor and need no wrapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence


class VariantKind(str, Enum):
    """Shape of a variant's payload."""
    UNIT = "unit"
    NEWTYPE = "newtype"
    TUPLE = "tuple"
    STRUCT = "struct"


@dataclass(frozen=True)
class Variant:
    """A variant name plus zero or one payload.

    Encoding:
    - unit: the bare name, ``"Name"``
    - newtype: the payload itself, no wrapper
    - tuple: ``{"Name":[...]}``
    - struct: ``{"Name":{...}}`` with members sorted like any keyed group
    """
    name: str
    kind: VariantKind = VariantKind.UNIT
    payload: Any = None

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Variant name must be a str, got {type(self.name).__name__}")
        if self.kind is VariantKind.UNIT and self.payload is not None:
            raise TypeError("Unit variants carry no payload")
        if self.kind is VariantKind.TUPLE and (
            isinstance(self.payload, (str, bytes)) or not isinstance(self.payload, Sequence)
        ):
            raise TypeError("Tuple variant payload must be a sequence")
        if self.kind is VariantKind.STRUCT and not isinstance(self.payload, Mapping):
            raise TypeError("Struct variant payload must be a mapping of field names to values")

    @classmethod
    def unit(cls, name: str) -> Variant:
        return cls(name)

    @classmethod
    def newtype(cls, name: str, value: Any) -> Variant:
        return cls(name, VariantKind.NEWTYPE, value)

    @classmethod
    def tuple_variant(cls, name: str, items: Sequence[Any]) -> Variant:
        return cls(name, VariantKind.TUPLE, tuple(items))

    @classmethod
    def struct_variant(cls, name: str, fields: Mapping[str, Any]) -> Variant:
        return cls(name, VariantKind.STRUCT, dict(fields))
