"""Tests for value classification, structs, variants and value hooks."""

from collections import OrderedDict, namedtuple
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, Flag
from fractions import Fraction
from typing import Dict, List, Optional

import pytest
from pydantic import BaseModel, ConfigDict, Field, RootModel, computed_field

from canonjson import (
    CanonicalizationError,
    CustomError,
    InvalidInput,
    Variant,
    to_canonical_string,
)
from canonjson.kernel.variant import VariantKind
from canonjson.kernel.visitor import Shape, Visitor, accept, classify


class Status(str, Enum):
    ACTIVE = "active"
    RETIRED = "retired"


class Level(Enum):
    LOW = 1


class Perm(Flag):
    R = 4
    W = 2


@dataclass
class Point:
    y: int
    x: int


@dataclass
class Polygon:
    name: str
    points: List[Point] = field(default_factory=list)
    closed: bool = True


class Event(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_type: str = Field(alias="type")
    sender: str
    depth: Optional[int] = None


class OpenModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    a: int


class Reading(BaseModel):
    ratio: float


class Account(BaseModel):
    owner: str
    secret: str = Field(default="hunter2", exclude=True)

    @computed_field
    @property
    def display(self) -> str:
        return self.owner.title()

    @computed_field(alias="ownerLength")
    @property
    def owner_length(self) -> int:
        return len(self.owner)


class Tags(RootModel[List[str]]):
    pass


class Money:
    def __init__(self, cents: int):
        self.cents = cents

    def __canonical_json__(self):
        if self.cents < 0:
            raise ValueError("negative amount")
        return {"currency": "EUR", "cents": self.cents}


class Recursive:
    def __canonical_json__(self):
        return self


class Strict:
    def __canonical_json__(self):
        raise CanonicalizationError.custom("ledger closed")


class Forever:
    def __canonical_json__(self):
        return Forever()


class TestClassify:
    """Every value gets exactly one shape."""

    @pytest.mark.parametrize(
        "value,shape",
        [
            (None, Shape.NONE),
            (True, Shape.BOOL),
            (0, Shape.INT),
            (1.0, Shape.FLOAT),
            (Decimal("1"), Shape.FLOAT),
            (Fraction(2, 1), Shape.FLOAT),
            ("s", Shape.STR),
            (b"", Shape.BYTES),
            (bytearray(b"x"), Shape.BYTES),
            (memoryview(b"x"), Shape.BYTES),
            ([], Shape.SEQ),
            ((), Shape.SEQ),
            (range(2), Shape.SEQ),
            ({}, Shape.MAP),
            (OrderedDict(), Shape.MAP),
            (Point(1, 2), Shape.STRUCT),
            (OpenModel(a=1), Shape.STRUCT),
            (Tags(["a"]), Shape.ROOT),
            (Level.LOW, Shape.UNIT_VARIANT),
            (Status.ACTIVE, Shape.UNIT_VARIANT),
            (Variant.unit("U"), Shape.UNIT_VARIANT),
            (Variant.newtype("N", 1), Shape.NEWTYPE_VARIANT),
            (Variant.tuple_variant("T", []), Shape.TUPLE_VARIANT),
            (Variant.struct_variant("S", {}), Shape.STRUCT_VARIANT),
            (Money(1), Shape.HOOK),
        ],
    )
    def test_shape(self, value, shape):
        assert classify(value) is shape

    @pytest.mark.parametrize("value", [set(), frozenset({1}), object(), Point, (x for x in [])])
    def test_unclassifiable(self, value):
        with pytest.raises(InvalidInput):
            classify(value)

    def test_set_message_suggests_sorted_list(self):
        with pytest.raises(InvalidInput, match="no stable order"):
            to_canonical_string({"tags": {"b", "a"}})


class RecordingVisitor(Visitor):
    def __init__(self):
        self.calls = []

    def visit_int(self, value):
        self.calls.append(("int", value))

    def visit_struct(self, name, fields):
        self.calls.append(("struct", name, list(fields)))

    def visit_map(self, entries):
        self.calls.append(("map", list(entries)))


class TestAccept:
    """One callback per value, children passed lazily."""

    def test_struct_fields_in_declaration_order(self):
        visitor = RecordingVisitor()
        accept(Point(y=2, x=1), visitor)
        assert visitor.calls == [("struct", "Point", [("y", 2), ("x", 1)])]

    def test_integral_normalized_to_int(self):
        visitor = RecordingVisitor()
        accept(Level.LOW.value, visitor)
        assert visitor.calls == [("int", 1)]

    def test_hook_resolved_before_dispatch(self):
        visitor = RecordingVisitor()
        accept(Money(5), visitor)
        assert visitor.calls == [("map", [("currency", "EUR"), ("cents", 5)])]

    def test_base_visitor_rejects_everything(self):
        with pytest.raises(InvalidInput, match="unsupported value of shape str"):
            accept("x", Visitor())


class TestStructs:
    """Dataclasses and pydantic models are keyed groups."""

    def test_nested_dataclasses(self):
        polygon = Polygon(name="tri", points=[Point(y=0, x=0), Point(y=1, x=2)])
        assert to_canonical_string(polygon) == (
            '{"closed":true,"name":"tri","points":[{"x":0,"y":0},{"x":2,"y":1}]}'
        )

    def test_pydantic_model_uses_alias(self):
        event = Event(type="m.room.message", sender="@alice:example.org")
        assert to_canonical_string(event) == (
            '{"depth":null,"sender":"@alice:example.org","type":"m.room.message"}'
        )

    def test_pydantic_extra_fields_included(self):
        assert to_canonical_string(OpenModel(a=1, b=[2])) == '{"a":1,"b":[2]}'

    def test_pydantic_float_field_rejected_with_path(self):
        with pytest.raises(InvalidInput) as excinfo:
            to_canonical_string({"readings": [Reading(ratio=0.5)]})
        assert excinfo.value.path == "readings[0].ratio"

    def test_pydantic_excluded_and_computed_fields(self):
        assert to_canonical_string(Account(owner="ada")) == (
            '{"display":"Ada","owner":"ada","ownerLength":3}'
        )

    def test_root_model_is_its_root_value(self):
        assert to_canonical_string(RootModel[list]([1, 2])) == "[1,2]"
        assert to_canonical_string({"tags": Tags(["b", "a"])}) == '{"tags":["b","a"]}'

    def test_root_model_mapping_sorted(self):
        value = RootModel[Dict[str, int]]({"b": 1, "a": 2})
        assert to_canonical_string(value) == '{"a":2,"b":1}'

    def test_root_model_float_rejected(self):
        with pytest.raises(InvalidInput, match="floats are not allowed") as excinfo:
            to_canonical_string({"ratios": RootModel[List[float]]([0.5])})
        assert excinfo.value.path == "ratios[0]"

    def test_namedtuple_is_a_sequence(self):
        Pair = namedtuple("Pair", ["right", "left"])
        assert to_canonical_string(Pair(right=1, left=2)) == "[1,2]"


class TestVariants:
    """Tagged variants and enums."""

    def test_unit_variant_is_bare_name(self):
        assert to_canonical_string(Variant.unit("Active")) == '"Active"'

    def test_enum_member_is_unit_variant_by_name(self):
        assert to_canonical_string(Level.LOW) == '"LOW"'
        assert to_canonical_string({"status": Status.RETIRED}) == '{"status":"RETIRED"}'

    def test_newtype_variant_unwrapped(self):
        assert to_canonical_string(Variant.newtype("UserId", 5)) == "5"
        assert to_canonical_string(Variant.newtype("Tags", {"b": 1, "a": 2})) == '{"a":2,"b":1}'

    def test_named_flag_member(self):
        assert to_canonical_string(Perm.R) == '"R"'

    def test_unnamed_flag_member_rejected(self):
        with pytest.raises(InvalidInput, match="has no name") as excinfo:
            to_canonical_string({"perm": Perm(0)})
        assert excinfo.value.path == "perm"

    def test_unnamed_flag_key_rejected(self):
        with pytest.raises(InvalidInput, match="has no name") as excinfo:
            to_canonical_string({Perm(0): 1})
        assert excinfo.value.path == "<Perm>"

    def test_tuple_variant_wrapped_in_single_member_object(self):
        assert to_canonical_string(Variant.tuple_variant("Move", [1, -2])) == '{"Move":[1,-2]}'

    def test_empty_tuple_variant(self):
        assert to_canonical_string(Variant.tuple_variant("Nothing", [])) == '{"Nothing":[]}'

    def test_struct_variant_payload_sorted(self):
        value = Variant.struct_variant("Point", {"y": 2, "x": 1})
        assert to_canonical_string(value) == '{"Point":{"x":1,"y":2}}'

    def test_variant_name_escaped(self):
        assert to_canonical_string(Variant.tuple_variant('a"b', [])) == '{"a\\"b":[]}'

    def test_variant_error_path(self):
        with pytest.raises(InvalidInput) as excinfo:
            to_canonical_string([Variant.struct_variant("Shape", {"r": 1.5})])
        assert excinfo.value.path == "[0].Shape.r"

    def test_constructors(self):
        assert Variant.unit("U").kind is VariantKind.UNIT
        assert Variant.tuple_variant("T", [1, 2]).payload == (1, 2)
        assert Variant.struct_variant("S", OrderedDict(a=1)).payload == {"a": 1}

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"name": 1},
            {"name": "U", "payload": 1},
            {"name": "T", "kind": VariantKind.TUPLE, "payload": "abc"},
            {"name": "S", "kind": VariantKind.STRUCT, "payload": [("a", 1)]},
        ],
    )
    def test_invalid_construction(self, kwargs):
        with pytest.raises(TypeError):
            Variant(**kwargs)


class TestValueHooks:
    """Objects can supply their own encodable form."""

    def test_hook_value_encoded(self):
        assert to_canonical_string({"price": Money(250)}) == (
            '{"price":{"cents":250,"currency":"EUR"}}'
        )

    def test_hook_failure_is_custom_error(self):
        with pytest.raises(CustomError, match="negative amount") as excinfo:
            to_canonical_string({"price": Money(-1)})
        assert isinstance(excinfo.value.__cause__, ValueError)
        assert excinfo.value.path == "price"

    def test_hook_raising_canonical_error_passes_through(self):
        with pytest.raises(CustomError, match="ledger closed"):
            to_canonical_string(Strict())

    def test_hook_chain_that_never_settles(self):
        with pytest.raises(InvalidInput, match="did not resolve to a value within 128 steps"):
            to_canonical_string(Forever())

    def test_hook_returning_itself_rejected(self):
        with pytest.raises(InvalidInput, match="returned the value itself"):
            to_canonical_string(Recursive())
