from typing import ClassVar, List, Sequence, Tuple

import pytest

from record_engine import Int8, Int32, RecordDeclarationError, RecordType, create_record, parse_record_type
from record_engine.schemas import MemberKind, MemberType, RecordSchema
from tests.helpers.records import Complex, Empty, Example, HasArrays, Simple


class Base(RecordType):
    origin: str = "base"


class Derived(Base):
    level: Int32


class WithClassVar(RecordType):
    label: ClassVar[str] = "constant"
    value: str


class WithSequence(RecordType):
    values: Sequence[int]


def test_empty_record_type() -> None:
    schema = parse_record_type(Empty)
    assert isinstance(schema, RecordSchema)
    assert schema.type_name == "Empty"
    assert schema.members == {}
    assert schema.defaults == {}
    assert schema.member_names == ()


def test_simple_record_type() -> None:
    schema = parse_record_type(Simple)
    assert schema.members == {"value": MemberType.scalar(MemberKind.STRING)}
    assert schema.mandatory_members == ("value",)
    assert schema.optional_members == frozenset()


def test_members_keep_declaration_order_and_defaults() -> None:
    schema = parse_record_type(Complex)
    assert schema.member_names == ("name", "count", "simple", "example")
    assert schema.defaults == {"name": "default-name", "count": 2}
    assert schema.mandatory_members == ("simple", "example")
    assert schema.members["simple"] == MemberType.record(Simple)
    assert schema.members["example"] == MemberType.enum(Example)
    assert schema.members["example"].enum_cases == ("SMALL", "MEDIUM", "LARGE", "XXX")


def test_array_members() -> None:
    schema = parse_record_type(HasArrays)
    assert schema.members["numbers"] == MemberType.array(MemberType.scalar(MemberKind.INT32))
    assert schema.members["names"] == MemberType.array(MemberType.scalar(MemberKind.STRING))
    assert schema.defaults["states"] == (True, False)
    assert parse_record_type(WithSequence).members["values"].element.kind == MemberKind.INT64


def test_schema_is_cached_per_declaration() -> None:
    assert parse_record_type(Complex) is parse_record_type(Complex)


def test_defaults_are_moved_off_the_class() -> None:
    assert "name" not in Complex.__dict__
    assert Complex.__record_defaults__["name"] == "default-name"


def test_declarations_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError, match="create_record"):
        Simple()
    assert create_record(Simple, value="x").value == "x"


def test_inherited_members_come_first() -> None:
    schema = parse_record_type(Derived)
    assert schema.member_names == ("origin", "level")
    assert schema.defaults == {"origin": "base"}


def test_class_vars_are_not_members() -> None:
    schema = parse_record_type(WithClassVar)
    assert schema.member_names == ("value",)
    assert WithClassVar.label == "constant"


def test_unsupported_member_type() -> None:
    class Unsupported(RecordType):
        when: dict

    with pytest.raises(RecordDeclarationError, match="unsupported type"):
        parse_record_type(Unsupported)


def test_nested_arrays_are_rejected() -> None:
    class Nested(RecordType):
        grid: List[List[int]]

    with pytest.raises(RecordDeclarationError, match="array of arrays"):
        parse_record_type(Nested)


def test_tuple_members_must_be_homogeneous() -> None:
    class Pair(RecordType):
        pair: Tuple[int, str]

    with pytest.raises(RecordDeclarationError, match=r"Tuple\[X, \.\.\.\]"):
        parse_record_type(Pair)


def test_default_must_fit_member_type() -> None:
    class BadDefault(RecordType):
        count: Int8 = 1000

    with pytest.raises(RecordDeclarationError) as exc:
        parse_record_type(BadDefault)
    assert exc.value.type_name == "BadDefault"
    assert "invalid default value" in str(exc.value)


def test_default_is_coerced_to_member_type() -> None:
    class Coerced(RecordType):
        count: Int32 = 3.0

    assert parse_record_type(Coerced).defaults["count"] == 3
    assert type(parse_record_type(Coerced).defaults["count"]) is int


def test_non_record_types_are_rejected() -> None:
    with pytest.raises(RecordDeclarationError, match="not a RecordType subclass"):
        parse_record_type(int)


def test_describe_schema() -> None:
    description = parse_record_type(Complex).describe()
    assert description["type_name"] == "Complex"
    assert description["members"][0] == {
        "name": "name",
        "type": "String",
        "kind": "string",
        "default": "default-name",
    }
    assert description["members"][3]["cases"] == ["SMALL", "MEDIUM", "LARGE", "XXX"]
    states = parse_record_type(HasArrays).describe()["members"][2]
    assert states["type"] == "Array<Bool>"
    assert states["default"] == [True, False]


def test_member_type_validation() -> None:
    with pytest.raises(ValueError):
        MemberType(kind=MemberKind.ENUM)
    with pytest.raises(ValueError):
        MemberType.array(MemberType.array(MemberType.scalar(MemberKind.INT8)))
    assert MemberType.array(MemberType.record(Simple)).describe() == "Array<Record<Simple>>"


def test_member_named_items_is_rejected() -> None:
    class Order(RecordType):
        items: List[str]

    with pytest.raises(RecordDeclarationError, match="member name 'items' is reserved"):
        create_record(Order, items=["a", "b"])


def test_record_attribute_names_are_rejected() -> None:
    class Versioned(RecordType):
        schema: str

    class Lookup(RecordType):
        get: Int32

    class Tagged(RecordType):
        type_name: str = "tag"

    for declaration in (Versioned, Lookup, Tagged):
        with pytest.raises(RecordDeclarationError, match="is reserved"):
            parse_record_type(declaration)
