import numpy as np
import pytest

from record_engine import (
    RecordValidationError,
    build_record,
    create_record,
    parse_record_type,
    validate,
)
from record_engine.schemas import ErrorTier, RecordErrorCode
from record_engine.validation import render_errors
from tests.helpers.records import (
    Complex,
    Defaults,
    Example,
    HasArrays,
    Hello,
    Letter,
    Name,
    Simple,
    Status,
    Tiny,
)


def _simple(value: str = "the-simple-one"):
    return create_record(Simple, value=value)


class TestCreateRecord:
    def test_simple_record(self) -> None:
        record = create_record(Simple, {"value": "Hi"})
        assert record.value == "Hi"
        assert record.get("value") == "Hi"

    def test_defaults_fill_missing_optional_members(self) -> None:
        record = create_record(Defaults, {})
        assert record.name == "default-name"
        assert record.count == 2

    def test_array_default(self) -> None:
        record = create_record(HasArrays, numbers=[1, 2], names=["a"])
        assert record.states == [True, False]
        assert record.numbers == [1, 2]

    def test_keyword_values_override_mapping(self) -> None:
        record = create_record(Simple, {"value": "a"}, value="b")
        assert record.value == "b"

    def test_accepts_schema(self) -> None:
        record = create_record(parse_record_type(Simple), value="x")
        assert record.record_type is Simple

    def test_supplied_values_replace_defaults(self) -> None:
        record = create_record(Complex, name="hello", count=6, simple=_simple(), example=Example.LARGE)
        assert record.name == "hello"
        assert record.count == 6
        assert record.simple.value == "the-simple-one"
        assert record.example is Example.LARGE


class TestShapeErrors:
    def test_missing_mandatory_members(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Complex, example=Example.LARGE)
        assert str(exc.value) == "Missing values for mandatory members [Complex]: [simple]"
        error = exc.value.errors[0]
        assert error.code == RecordErrorCode.MISSING_MEMBERS
        assert error.tier == ErrorTier.SHAPE
        assert error.details["members"] == ["simple"]

    def test_missing_members_listed_in_schema_order(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Complex, {})
        assert str(exc.value) == "Missing values for mandatory members [Complex]: [simple, example]"

    def test_extraneous_members(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Simple, {"value": "x", "example": 1, "hi": 2})
        assert str(exc.value) == "Values provided for non-existing members [Simple]: example, hi"
        assert exc.value.errors[0].code == RecordErrorCode.EXTRANEOUS_MEMBERS

    def test_missing_members_reported_before_extraneous(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Simple, {"hi": 1})
        assert len(exc.value.errors) == 1
        assert exc.value.errors[0].code == RecordErrorCode.MISSING_MEMBERS


class TestValueErrors:
    def test_type_errors_are_accumulated(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Complex, {"name": 1, "count": 6, "simple": _simple(), "example": 10.01})
        assert str(exc.value) == (
            "Errors:\n"
            "* member 'name' has invalid type. Expected: String. Found: int.\n"
            "* member 'example' has invalid type. Expected: Enum<Example>. Found: float."
        )
        assert [error.path for error in exc.value.errors] == ["name", "example"]
        assert all(error.type_name == "Complex" for error in exc.value.errors)

    def test_null_value(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Simple, value=None)
        assert str(exc.value) == "Errors:\n* member 'value' contains illegal null item."
        assert exc.value.errors[0].code == RecordErrorCode.ILLEGAL_NULL

    def test_null_array_item(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(HasArrays, numbers=[1], names=["hi", None])
        assert str(exc.value) == "Errors:\n* member 'names[1]' contains illegal null item."
        assert exc.value.errors[0].path == "names[1]"

    def test_array_stops_at_first_bad_item(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(HasArrays, numbers=[1], names=["a", None, 3])
        assert len(exc.value.errors) == 1

    def test_array_item_type(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(HasArrays, numbers=[1], names=["a"], states=[2])
        assert str(exc.value) == "Errors:\n* member 'states[0]' has invalid type. Expected: Bool. Found: int."

    def test_scalar_for_array_member(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(HasArrays, numbers=5, names=["a"])
        assert "Expected: Array<Int32>. Found: int." in str(exc.value)

    def test_array_for_scalar_member(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Simple, value=["a"])
        assert "Expected: String. Found: list." in str(exc.value)

    def test_record_of_wrong_type(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Complex, simple=create_record(Name, {}), example=Example.SMALL)
        assert "Expected: Record<Simple>. Found: Record<Name>." in str(exc.value)

    def test_char_must_be_single_character(self) -> None:
        assert create_record(Letter, key="x").key == "x"
        with pytest.raises(RecordValidationError) as exc:
            create_record(Letter, key="ab")
        assert "Expected: Char. Found: str." in str(exc.value)

    def test_enum_value_by_name_is_rejected(self) -> None:
        with pytest.raises(RecordValidationError):
            create_record(Complex, simple=_simple(), example="LARGE")


class TestNumericCoercion:
    def test_whole_float_becomes_integer(self) -> None:
        record = create_record(Defaults, count=42.0)
        assert record.count == 42
        assert type(record.count) is int

    def test_fractional_float_is_rejected(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Defaults, count=4.5)
        assert exc.value.errors[0].code == RecordErrorCode.NUMERIC_COERCION
        assert str(exc.value) == (
            "Errors:\n* member 'count' cannot be converted to Int32 without loss. Found: float 4.5."
        )

    def test_out_of_range_integer_is_rejected(self) -> None:
        with pytest.raises(RecordValidationError):
            create_record(Tiny, by=256)

    def test_exact_integer_within_range(self) -> None:
        assert create_record(Tiny, by=-128).by == -128

    def test_bool_is_not_a_number(self) -> None:
        with pytest.raises(RecordValidationError) as exc:
            create_record(Defaults, count=True)
        assert exc.value.errors[0].code == RecordErrorCode.TYPE_MISMATCH

    def test_float32_member_keeps_precision_class(self) -> None:
        record = create_record(
            Hello,
            hello="Joe", num=4, yes=False, lon=43, pi=0.434, d=0.123, sh=44, by=74,
            key="x", arr=[4, 2, 0], name=create_record(Name, {}), status=Status.ON,
        )
        assert isinstance(record.pi, np.float32)
        assert record.pi == np.float32(0.434)
        assert isinstance(record.d, float)

    def test_numpy_array_values(self) -> None:
        record = create_record(HasArrays, numbers=np.array([1, 2, 3], dtype=np.int32), names=["a"])
        assert record.numbers == [1, 2, 3]
        assert all(type(number) is int for number in record.numbers)

    def test_two_dimensional_numpy_array_is_rejected(self) -> None:
        with pytest.raises(RecordValidationError):
            create_record(HasArrays, numbers=np.zeros((2, 2), dtype=np.int32), names=["a"])


class TestValidate:
    def test_output_follows_schema_order_with_defaults(self) -> None:
        schema = parse_record_type(Complex)
        result = validate(schema, {"example": Example.SMALL, "simple": _simple()})
        assert result.ok
        assert list(result.value) == ["name", "count", "simple", "example"]
        assert result.value["count"] == 2

    def test_fully_specified_values_are_returned_unchanged(self) -> None:
        schema = parse_record_type(Complex)
        values = {"name": "n", "count": 1, "simple": _simple(), "example": Example.XXX}
        assert validate(schema, values).value == values

    def test_build_record_failure_holds_errors(self) -> None:
        result = build_record(parse_record_type(Simple), {"value": 3})
        assert not result.ok
        assert result.error[0].tier == ErrorTier.VALUE
        assert result.error[0].details == {"expected": "String", "found": "int"}


def test_render_single_shape_error_without_header() -> None:
    result = build_record(parse_record_type(Simple), {})
    assert render_errors(result.error) == "Missing values for mandatory members [Simple]: [value]"


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        create_record(Simple, {})
