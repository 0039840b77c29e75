"""Schema introspection for ``RecordType`` declarations."""

from __future__ import annotations

import collections.abc
import functools
import logging
import typing
from enum import Enum
from typing import Any, Dict, get_args, get_origin

from record_engine.exceptions import RecordDeclarationError
from record_engine.record import RESERVED_MEMBER_NAMES
from record_engine.schemas import MemberKind, MemberType, RecordSchema
from record_engine.types import (
    Char,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    RecordType,
    is_class_var,
)
from record_engine.validation import check_value

logger = logging.getLogger(__name__)

_SCALAR_KINDS: Dict[Any, MemberKind] = {
    str: MemberKind.STRING,
    Char: MemberKind.CHAR,
    bool: MemberKind.BOOL,
    Int8: MemberKind.INT8,
    Int16: MemberKind.INT16,
    Int32: MemberKind.INT32,
    Int64: MemberKind.INT64,
    int: MemberKind.INT64,
    Float32: MemberKind.FLOAT32,
    Float64: MemberKind.FLOAT64,
    float: MemberKind.FLOAT64,
}

_ARRAY_ORIGINS = (list, tuple, collections.abc.Sequence)


def is_record_type(candidate: Any) -> bool:
    return (
        isinstance(candidate, type)
        and issubclass(candidate, RecordType)
        and candidate is not RecordType
    )


@functools.lru_cache(maxsize=None)
def parse_record_type(record_type: type) -> RecordSchema:
    """Build the schema of a record type declaration.

    Members come from the class annotations in declaration order (inherited
    members first), defaults from the class attribute values. Each default
    is validated and coerced to its member's type. Results are cached per
    declaration class.

    Raises:
        RecordDeclarationError: If the class is not a ``RecordType`` subclass,
            a member has an unsupported type, or a default does not fit its
            member.
    """
    type_name = getattr(record_type, "__name__", repr(record_type))
    if not is_record_type(record_type):
        raise RecordDeclarationError(type_name, "not a RecordType subclass")

    try:
        hints = typing.get_type_hints(record_type)
    except Exception as exc:
        raise RecordDeclarationError(type_name, f"cannot resolve member annotations: {exc}") from exc

    members: Dict[str, MemberType] = {}
    for name, annotation in hints.items():
        if name.startswith("_") or is_class_var(annotation):
            continue
        if name in RESERVED_MEMBER_NAMES:
            raise RecordDeclarationError(
                type_name,
                f"member name '{name}' is reserved "
                f"(reserved names: {', '.join(sorted(RESERVED_MEMBER_NAMES))})",
            )
        members[name] = member_type_for(annotation, type_name, name)

    defaults: Dict[str, Any] = {}
    for name, default in record_type.__record_defaults__.items():
        if name not in members:
            continue
        result = check_value(members[name], default, name)
        if not result.ok:
            raise RecordDeclarationError(type_name, f"invalid default value: {result.error.message}")
        defaults[name] = result.value

    schema = RecordSchema(
        type_name=type_name,
        record_type=record_type,
        members=members,
        defaults=defaults,
    )
    logger.debug(
        "Parsed record type %s with %d member(s), %d default(s)",
        type_name,
        len(members),
        len(defaults),
    )
    return schema


def member_type_for(annotation: Any, type_name: str, member: str) -> MemberType:
    """Map a member annotation onto a ``MemberType``."""
    try:
        kind = _SCALAR_KINDS.get(annotation)
    except TypeError:
        kind = None
    if kind is not None:
        return MemberType.scalar(kind)

    origin = get_origin(annotation)
    if origin in _ARRAY_ORIGINS:
        args = get_args(annotation)
        if origin is tuple:
            if len(args) != 2 or args[1] is not Ellipsis:
                raise RecordDeclarationError(
                    type_name, f"member '{member}' must be declared as Tuple[X, ...]"
                )
        elif len(args) != 1:
            raise RecordDeclarationError(
                type_name, f"member '{member}' must declare a single element type"
            )
        element = member_type_for(args[0], type_name, member)
        if element.is_array:
            raise RecordDeclarationError(
                type_name, f"member '{member}' is an array of arrays, which is not supported"
            )
        return MemberType.array(element)

    if isinstance(annotation, type):
        if issubclass(annotation, Enum):
            return MemberType.enum(annotation)
        if is_record_type(annotation):
            return MemberType.record(annotation)

    raise RecordDeclarationError(
        type_name, f"member '{member}' has unsupported type {annotation!r}"
    )
