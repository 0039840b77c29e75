"""Member type schemas.

A member type is a closed tag over the value shapes a record member may
declare: strings, single characters, booleans, the four signed integral
widths, the two float precisions, enumerations, nested records and
one-dimensional arrays of any of those.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple, Type

from pydantic import Field, model_validator

from .base import SchemaBase


class MemberKind(str, Enum):
    STRING = "string"
    CHAR = "char"
    BOOL = "bool"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    ENUM = "enum"
    RECORD = "record"
    ARRAY = "array"

    @property
    def is_integral(self) -> bool:
        return self in _INTEGRAL_KINDS

    @property
    def is_floating(self) -> bool:
        return self in (MemberKind.FLOAT32, MemberKind.FLOAT64)

    @property
    def is_numeric(self) -> bool:
        return self.is_integral or self.is_floating


_INTEGRAL_KINDS = frozenset(
    {MemberKind.INT8, MemberKind.INT16, MemberKind.INT32, MemberKind.INT64}
)

_KIND_LABELS = {
    MemberKind.STRING: "String",
    MemberKind.CHAR: "Char",
    MemberKind.BOOL: "Bool",
    MemberKind.INT8: "Int8",
    MemberKind.INT16: "Int16",
    MemberKind.INT32: "Int32",
    MemberKind.INT64: "Int64",
    MemberKind.FLOAT32: "Float32",
    MemberKind.FLOAT64: "Float64",
}


class MemberType(SchemaBase):
    """Declared type of a single record member.

    ``enum_type`` is set for ENUM members, ``record_type`` (the declaration
    class of the nested record) for RECORD members and ``element`` for ARRAY
    members. The nested record's schema is resolved through introspection,
    which caches it by ``record_type``.
    """

    kind: MemberKind
    enum_type: Optional[Type[Enum]] = Field(default=None)
    record_type: Optional[type] = Field(default=None)
    element: Optional[MemberType] = Field(default=None)

    @model_validator(mode="after")
    def _check_payload(self) -> MemberType:
        if (self.kind == MemberKind.ENUM) != (self.enum_type is not None):
            raise ValueError("enum_type must be set exactly for ENUM members")
        if (self.kind == MemberKind.RECORD) != (self.record_type is not None):
            raise ValueError("record_type must be set exactly for RECORD members")
        if (self.kind == MemberKind.ARRAY) != (self.element is not None):
            raise ValueError("element must be set exactly for ARRAY members")
        if self.element is not None and self.element.kind == MemberKind.ARRAY:
            raise ValueError("arrays of arrays are not supported")
        return self

    @classmethod
    def scalar(cls, kind: MemberKind) -> MemberType:
        return cls(kind=kind)

    @classmethod
    def enum(cls, enum_type: Type[Enum]) -> MemberType:
        return cls(kind=MemberKind.ENUM, enum_type=enum_type)

    @classmethod
    def record(cls, record_type: type) -> MemberType:
        return cls(kind=MemberKind.RECORD, record_type=record_type)

    @classmethod
    def array(cls, element: MemberType) -> MemberType:
        return cls(kind=MemberKind.ARRAY, element=element)

    @property
    def is_array(self) -> bool:
        return self.kind == MemberKind.ARRAY

    @property
    def enum_name(self) -> Optional[str]:
        return self.enum_type.__name__ if self.enum_type is not None else None

    @property
    def enum_cases(self) -> Tuple[str, ...]:
        """Case names of an ENUM member, in declaration order."""
        if self.enum_type is None:
            return ()
        return tuple(self.enum_type.__members__)

    def describe(self) -> str:
        """Human readable type name used in error messages."""
        if self.kind == MemberKind.ENUM:
            return f"Enum<{self.enum_name}>"
        if self.kind == MemberKind.RECORD:
            return f"Record<{self.record_type.__name__}>"
        if self.kind == MemberKind.ARRAY:
            return f"Array<{self.element.describe()}>"
        return _KIND_LABELS[self.kind]

    def __str__(self) -> str:
        return self.describe()
