"""Record type registry and schema export."""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

from record_engine.exceptions import RecordDeclarationError
from record_engine.introspection import is_record_type, parse_record_type
from record_engine.schemas import RecordSchema

RECORD_REGISTRY: Dict[str, type] = {}


def register_record_type(
    record_type: Optional[type] = None, *, name: Optional[str] = None
) -> Union[type, Callable[[type], type]]:
    """Register a record type under ``name`` (default: its class name).

    Usable as ``@register_record_type`` or ``@register_record_type(name="server")``.
    The schema is built eagerly so declaration errors surface at import time.
    """

    def register(cls: type) -> type:
        if not is_record_type(cls):
            raise RecordDeclarationError(getattr(cls, "__name__", repr(cls)), "not a RecordType subclass")
        key = name or cls.__name__
        existing = RECORD_REGISTRY.get(key)
        if existing is not None and existing is not cls:
            raise KeyError(f"Record type '{key}' is already registered")
        parse_record_type(cls)
        RECORD_REGISTRY[key] = cls
        return cls

    if record_type is not None:
        return register(record_type)
    return register


def get_record_type(name: str) -> type:
    if name not in RECORD_REGISTRY:
        raise KeyError(f"Record type '{name}' is not registered")
    return RECORD_REGISTRY[name]


def get_schema(name: str) -> RecordSchema:
    return parse_record_type(get_record_type(name))


def describe_schema(name: str) -> Dict[str, Any]:
    """Return a JSON-friendly description of a registered record type."""
    return get_schema(name).describe()
