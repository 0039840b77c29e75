"""Record instances.

A ``Record`` pairs a ``RecordSchema`` with a validated value mapping and
answers every member accessor by looking the member name up in that
mapping. Records are only created by the validation engine
(``create_record`` / ``build_record`` in ``record_engine.validation``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Tuple

import numpy

from record_engine.schemas import RecordSchema

ARRAY_TYPES = (list, tuple, numpy.ndarray)


def is_array(value: Any) -> bool:
    return isinstance(value, ARRAY_TYPES)


def values_equal(first: Any, second: Any) -> bool:
    """Deep equality where an array never equals a non-array value."""
    if is_array(first):
        if not is_array(second) or len(first) != len(second):
            return False
        return all(values_equal(a, b) for a, b in zip(first, second))
    if is_array(second):
        return False
    return bool(first == second)


def value_as_string(value: Any) -> str:
    if is_array(value):
        return "{" + ", ".join(value_as_string(item) for item in value) + "}"
    if isinstance(value, Enum):
        return value.name
    return str(value)


class Record:
    """Immutable record instance.

    Members are read as attributes (``server.port``) or through ``get``.
    Array members are returned as fresh lists, so callers can never mutate
    the record's own values.
    """

    __slots__ = ("_schema", "_values")

    def __init__(self, schema: RecordSchema, values: Mapping[str, Any]):
        object.__setattr__(self, "_schema", schema)
        object.__setattr__(self, "_values", dict(values))

    @property
    def schema(self) -> RecordSchema:
        return self._schema

    @property
    def record_type(self) -> type:
        return self._schema.record_type

    @property
    def type_name(self) -> str:
        return self._schema.type_name

    def get(self, member: str) -> Any:
        """Return the value of ``member``, falling back to its default."""
        if not self._schema.has_member(member):
            raise KeyError(f"Record type '{self._schema.type_name}' has no member '{member}'")
        if member in self._values:
            value = self._values[member]
        else:
            value = self._schema.defaults.get(member)
        if is_array(value):
            return list(value)
        return value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.get(name)
        except KeyError:
            raise AttributeError(
                f"'{self._schema.type_name}' record has no member '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"'{self._schema.type_name}' record is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"'{self._schema.type_name}' record is immutable")

    def __dir__(self) -> Iterator[str]:
        return iter(sorted(set(super().__dir__()) | set(self._schema.members)))

    def items(self) -> Tuple[Tuple[str, Any], ...]:
        return tuple((name, self.get(name)) for name in self._schema.members)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        if self._schema != other._schema:
            return False
        if self._values.keys() != other._values.keys():
            return False
        return all(values_equal(value, other._values[name]) for name, value in self._values.items())

    def __hash__(self) -> int:
        return hash((hash(self._schema), tuple(self._values.items())))

    def __str__(self) -> str:
        members = ", ".join(
            f"{name}={value_as_string(self.get(name))}" for name in self._schema.members
        )
        return f"{self._schema.type_name}({members})"

    __repr__ = __str__

    def __reduce__(self):
        return (Record, (self._schema, self._values))


# Member names that would be shadowed by attributes of Record itself.
RESERVED_MEMBER_NAMES = frozenset(name for name in dir(Record) if not name.startswith("_"))


def record_values(record: Record, deep: bool = False) -> Dict[str, Any]:
    """Return the member values of ``record`` in schema order.

    With ``deep=True`` nested records are converted to dicts and arrays to
    lists, recursively.
    """
    values = {name: record.get(name) for name in record.schema.members}
    if deep:
        return {name: _deep_value(value) for name, value in values.items()}
    return values


def _deep_value(value: Any) -> Any:
    if isinstance(value, Record):
        return record_values(value, deep=True)
    if is_array(value):
        return [_deep_value(item) for item in value]
    return value
