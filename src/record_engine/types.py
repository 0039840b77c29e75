"""Declaration markers for record types.

A record type is declared as a ``RecordType`` subclass whose annotated class
attributes are its members; a class attribute value is the member's default::

    class Server(RecordType):
        name: str
        port: Int32
        log_file: str = "/var/log/server.log"
        white_lists: WhiteLists

The markers below give members an explicit width or precision. Plain ``int``
declares an Int64 member and plain ``float`` a Float64 member.
"""

from __future__ import annotations

import inspect
from typing import Any, ClassVar, Dict, NewType, get_origin

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)
Char = NewType("Char", str)


def is_class_var(annotation: Any) -> bool:
    """True for ``ClassVar`` annotations, evaluated or still in string form."""
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or get_origin(annotation) is ClassVar


class RecordType:
    """Base class for record type declarations.

    Declaration classes are never instantiated; instances are created with
    ``create_record`` and are generic ``Record`` objects answering each member
    by name. Default values are moved from the class namespace into
    ``__record_defaults__`` when the subclass is created.
    """

    __record_defaults__: ClassVar[Dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        defaults: Dict[str, Any] = {}
        for base in reversed(cls.__mro__[1:]):
            defaults.update(getattr(base, "__record_defaults__", {}))
        for name, annotation in inspect.get_annotations(cls).items():
            if is_class_var(annotation):
                continue
            if name in cls.__dict__:
                defaults[name] = cls.__dict__[name]
                delattr(cls, name)
        cls.__record_defaults__ = defaults

    def __new__(cls, *args: Any, **kwargs: Any) -> Any:
        raise TypeError(
            f"{cls.__name__} is a record type declaration; use create_record({cls.__name__}, ...)"
        )
