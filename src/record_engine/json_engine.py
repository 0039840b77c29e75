"""Document-level JSON binding.

Whole documents are decoded with the standard ``json`` module and the
resulting tree is bound to the record schema: nested objects become nested
records, and strings for enum members are looked up by case name. The bound
mapping is then handed to the validation engine.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Tuple

from record_engine.introspection import parse_record_type
from record_engine.record import Record, record_values
from record_engine.registry import RECORD_REGISTRY
from record_engine.result import Result
from record_engine.schemas import ErrorTier, MemberKind, MemberType, RecordError, RecordErrorCode, RecordSchema
from record_engine.validation import build_record, render_errors


def _make_error(code: RecordErrorCode, message: str, tier: ErrorTier, details: Optional[Dict[str, Any]] = None) -> RecordError:
    return RecordError(code=code, tier=tier, message=message, details=details or {})


def validate(type_name: str, payload: Any) -> Tuple[Optional[Record], Optional[RecordError]]:
    """Validate a mapping or JSON text against a registered record type.

    Returns (record, None) on success, (None, RecordError) on failure.
    """
    record_type = RECORD_REGISTRY.get(type_name)
    if record_type is None:
        return None, _make_error(
            RecordErrorCode.UNKNOWN_TYPE, f"Unknown record type '{type_name}'", ErrorTier.SHAPE
        )

    document = payload
    if isinstance(payload, str):
        try:
            document = json.loads(payload)
        except json.JSONDecodeError as exc:
            return None, _make_error(
                RecordErrorCode.SYNTAX,
                f"Invalid JSON: {exc.msg}",
                ErrorTier.STRUCTURAL,
                {"line": exc.lineno, "column": exc.colno},
            )
    if not isinstance(document, Mapping):
        return None, _make_error(RecordErrorCode.NOT_AN_OBJECT, "Not a JSON Object", ErrorTier.STRUCTURAL)

    result = bind_document(parse_record_type(record_type), document)
    if not result.ok:
        errors = result.error
        if len(errors) == 1:
            return None, errors[0]
        return None, _make_error(
            errors[0].code,
            render_errors(errors),
            ErrorTier.VALUE,
            {"errors": [error.as_dict() for error in errors]},
        )
    return result.value, None


def bind_document(schema: RecordSchema, document: Mapping[Any, Any]) -> Result:
    """Build a record of ``schema`` from a decoded JSON object.

    Nested objects are bound to their member's record type first; the errors
    of a nested record that fails validation are returned as they are.
    """
    values: Dict[str, Any] = {}
    errors = []
    for key, value in document.items():
        name = str(key)
        member_type = schema.members.get(name)
        if member_type is None:
            values[name] = value
            continue
        result = _bind_value(member_type, value)
        if result.ok:
            values[name] = result.value
        else:
            errors.extend(result.error)
    if errors:
        return Result.failure(errors)
    return build_record(schema, values)


def _bind_value(member_type: MemberType, value: Any) -> Result:
    if member_type.is_array and isinstance(value, list):
        items = []
        for item in value:
            result = _bind_value(member_type.element, item)
            if not result.ok:
                return result
            items.append(result.value)
        return Result.success(items)
    if member_type.kind == MemberKind.RECORD and isinstance(value, Mapping):
        return bind_document(parse_record_type(member_type.record_type), value)
    if member_type.kind == MemberKind.ENUM and isinstance(value, str) and value in member_type.enum_type.__members__:
        return Result.success(member_type.enum_type[value])
    # Anything else is left for validation to accept or report.
    return Result.success(value)


def to_document(record: Record) -> Dict[str, Any]:
    """Return ``record`` as plain nested dicts and lists."""
    return record_values(record, deep=True)
