"""Record schema model."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, FrozenSet, Tuple

from pydantic import Field, model_validator

from .base import SchemaBase
from .member import MemberKind, MemberType


class RecordSchema(SchemaBase):
    """Introspected description of a record type.

    ``members`` keeps declaration order. ``defaults`` holds the default value
    of every optional member, already coerced to the member's declared type.
    """

    type_name: str
    record_type: type
    members: Dict[str, MemberType] = Field(default_factory=dict)
    defaults: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_defaults(self) -> RecordSchema:
        unknown = [name for name in self.defaults if name not in self.members]
        if unknown:
            raise ValueError(f"Defaults declared for non-existing members: {unknown}")
        return self

    @property
    def member_names(self) -> Tuple[str, ...]:
        return tuple(self.members)

    @property
    def mandatory_members(self) -> Tuple[str, ...]:
        return tuple(name for name in self.members if name not in self.defaults)

    @property
    def optional_members(self) -> FrozenSet[str]:
        return frozenset(self.defaults)

    def has_member(self, name: str) -> bool:
        return name in self.members

    def member_type(self, name: str) -> MemberType:
        try:
            return self.members[name]
        except KeyError:
            raise KeyError(f"Record type '{self.type_name}' has no member '{name}'") from None

    def describe(self) -> Dict[str, Any]:
        """Return a JSON-friendly description of this schema."""
        return {
            "type_name": self.type_name,
            "members": [
                {
                    "name": name,
                    **_describe_member(member),
                    **({"default": _describe_default(self.defaults[name])} if name in self.defaults else {}),
                }
                for name, member in self.members.items()
            ],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordSchema):
            return NotImplemented
        return self.record_type is other.record_type and self.members == other.members

    def __hash__(self) -> int:
        return hash((self.type_name, self.record_type))


def _describe_member(member: MemberType) -> Dict[str, Any]:
    description: Dict[str, Any] = {"type": member.describe(), "kind": member.kind.value}
    if member.kind == MemberKind.ENUM:
        description["cases"] = list(member.enum_cases)
    elif member.kind == MemberKind.ARRAY:
        description["element"] = _describe_member(member.element)
    return description


def _describe_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, tuple):
        return [_describe_default(item) for item in value]
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        # numpy scalars
        return value.item()
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)
