"""Value validation and coercion against a record schema.

Validation runs in two tiers. Shape problems (missing mandatory members,
values for members that do not exist) are reported in bulk, one error per
category, before any value is looked at. Value problems (wrong types, lossy
numeric conversions, ``None`` items) are then accumulated across all members
and reported together.
"""

from __future__ import annotations

import logging
import numbers
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

import numpy

from record_engine.exceptions import RecordValidationError
from record_engine.numeric import coerce, fits_integral, is_number
from record_engine.record import Record, is_array
from record_engine.result import Result
from record_engine.schemas import (
    ErrorTier,
    MemberKind,
    MemberType,
    RecordError,
    RecordErrorCode,
    RecordSchema,
)

logger = logging.getLogger(__name__)

ERRORS_HEADER = "Errors:"


def render_errors(errors: List[RecordError]) -> str:
    """Render errors for an exception message.

    A lone shape or structural error is rendered as its own message; value
    errors are listed under ``Errors:`` one ``* `` bullet per line.
    """
    if len(errors) == 1 and errors[0].tier != ErrorTier.VALUE:
        return errors[0].message
    return ERRORS_HEADER + "".join(f"\n* {error.message}" for error in errors)


def validate(schema: RecordSchema, values: Mapping[Any, Any]) -> Result:
    """Validate ``values`` against ``schema``.

    Returns a success holding the complete value mapping (defaults filled in,
    schema member order) or a failure holding a list of ``RecordError``.
    """
    supplied = dict(values)

    missing = [name for name in schema.mandatory_members if name not in supplied]
    if missing:
        return Result.failure([
            _shape_error(
                RecordErrorCode.MISSING_MEMBERS,
                f"Missing values for mandatory members [{schema.type_name}]: [{', '.join(missing)}]",
                schema,
                missing,
            )
        ])

    extraneous = [str(name) for name in supplied if name not in schema.members]
    if extraneous:
        return Result.failure([
            _shape_error(
                RecordErrorCode.EXTRANEOUS_MEMBERS,
                f"Values provided for non-existing members [{schema.type_name}]: {', '.join(extraneous)}",
                schema,
                extraneous,
            )
        ])

    errors: List[RecordError] = []
    checked: Dict[str, Any] = {}
    for member, value in supplied.items():
        result = check_value(schema.members[member], value, member)
        if result.ok:
            checked[member] = result.value
        else:
            errors.append(result.error.model_copy(update={"type_name": schema.type_name}))

    if errors:
        logger.debug("Validation of %s failed with %d error(s)", schema.type_name, len(errors))
        return Result.failure(errors)

    return Result.success({
        name: checked[name] if name in checked else schema.defaults[name]
        for name in schema.members
    })


def check_value(member_type: MemberType, value: Any, path: str) -> Result:
    """Check a single value, returning the normalized value or one error."""
    if value is None:
        return Result.failure(_value_error(
            RecordErrorCode.ILLEGAL_NULL,
            f"member '{path}' contains illegal null item.",
            path,
        ))

    if is_array(value):
        if not member_type.is_array or (isinstance(value, numpy.ndarray) and value.ndim != 1):
            return _mismatch(member_type, value, path)
        items = []
        for index, item in enumerate(value):
            result = check_value(member_type.element, item, f"{path}[{index}]")
            if not result.ok:
                return result
            items.append(result.value)
        return Result.success(tuple(items))

    if member_type.is_array:
        return _mismatch(member_type, value, path)

    if _matches(member_type, value):
        return Result.success(_normalize(member_type, value))

    if member_type.kind.is_numeric and is_number(value):
        message = (
            f"member '{path}' cannot be converted to {member_type.describe()} without loss. "
            f"Found: {_describe_found(value)} {value}."
        )
        result = coerce(value, member_type.kind, message)
        if result.ok:
            return result
        return Result.failure(_value_error(
            RecordErrorCode.NUMERIC_COERCION, result.error, path, member_type, value
        ))

    return _mismatch(member_type, value, path)


def build_record(schema: RecordSchema, values: Mapping[Any, Any]) -> Result:
    """Validate ``values`` and wrap them in a ``Record`` on success."""
    result = validate(schema, values)
    if not result.ok:
        return result
    return Result.success(Record(schema, result.value))


def create_record(
    record_type: Union[type, RecordSchema],
    values: Optional[Mapping[Any, Any]] = None,
    **kwargs: Any,
) -> Record:
    """Create a record of ``record_type`` from ``values`` and keyword values.

    Raises:
        RecordValidationError: If the values do not satisfy the schema.
    """
    schema = resolve_schema(record_type)
    supplied: Dict[Any, Any] = dict(values or {})
    supplied.update(kwargs)
    result = build_record(schema, supplied)
    if not result.ok:
        raise RecordValidationError(result.error)
    return result.value


def resolve_schema(record_type: Union[type, RecordSchema]) -> RecordSchema:
    if isinstance(record_type, RecordSchema):
        return record_type
    from record_engine.introspection import parse_record_type

    return parse_record_type(record_type)


def _matches(member_type: MemberType, value: Any) -> bool:
    kind = member_type.kind
    if kind == MemberKind.STRING:
        return isinstance(value, str) and not isinstance(value, Enum)
    if kind == MemberKind.CHAR:
        return isinstance(value, str) and not isinstance(value, Enum) and len(value) == 1
    if kind == MemberKind.BOOL:
        return isinstance(value, (bool, numpy.bool_))
    if kind.is_integral:
        return (
            isinstance(value, numbers.Integral)
            and is_number(value)
            and fits_integral(int(value), kind)
        )
    if kind == MemberKind.FLOAT32:
        return isinstance(value, numpy.float32)
    if kind == MemberKind.FLOAT64:
        return isinstance(value, float)
    if kind == MemberKind.ENUM:
        return isinstance(value, member_type.enum_type)
    if kind == MemberKind.RECORD:
        return isinstance(value, Record) and value.record_type is member_type.record_type
    return False


def _normalize(member_type: MemberType, value: Any) -> Any:
    kind = member_type.kind
    if kind in (MemberKind.STRING, MemberKind.CHAR):
        return str(value)
    if kind == MemberKind.BOOL:
        return bool(value)
    if kind.is_integral:
        return int(value)
    if kind == MemberKind.FLOAT64:
        return float(value)
    return value


def _describe_found(value: Any) -> str:
    if isinstance(value, Record):
        return f"Record<{value.type_name}>"
    return type(value).__name__


def _mismatch(member_type: MemberType, value: Any, path: str) -> Result:
    return Result.failure(_value_error(
        RecordErrorCode.TYPE_MISMATCH,
        f"member '{path}' has invalid type. Expected: {member_type.describe()}. "
        f"Found: {_describe_found(value)}.",
        path,
        member_type,
        value,
    ))


def _value_error(
    code: RecordErrorCode,
    message: str,
    path: str,
    member_type: Optional[MemberType] = None,
    value: Any = None,
) -> RecordError:
    details: Dict[str, Any] = {}
    if member_type is not None:
        details["expected"] = member_type.describe()
        details["found"] = _describe_found(value)
    return RecordError(code=code, tier=ErrorTier.VALUE, message=message, path=path, details=details)


def _shape_error(
    code: RecordErrorCode, message: str, schema: RecordSchema, members: List[str]
) -> RecordError:
    return RecordError(
        code=code,
        tier=ErrorTier.SHAPE,
        message=message,
        type_name=schema.type_name,
        details={"members": members},
    )
