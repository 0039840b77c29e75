"""Record Engine package root.

Declare record types as ``RecordType`` subclasses, create validated
immutable records with ``create_record`` and stream them to and from JSON
with ``parse`` and ``to_json``.
"""

__version__ = "0.1.0"

from record_engine.codec import dump, parse, to_json  # noqa: F401
from record_engine.exceptions import (  # noqa: F401
    IncompatibleJsonError,
    JsonSyntaxError,
    RecordDeclarationError,
    RecordEngineError,
    RecordStreamError,
    RecordValidationError,
    UnexpectedEndOfInputError,
    UnknownEnumCaseError,
    UnsupportedValueError,
)
from record_engine.introspection import parse_record_type  # noqa: F401
from record_engine.record import Record, record_values  # noqa: F401
from record_engine.registry import (  # noqa: F401
    describe_schema,
    get_record_type,
    get_schema,
    register_record_type,
)
from record_engine.result import Result  # noqa: F401
from record_engine.schemas import *  # noqa: F401,F403
from record_engine.schemas import __all__ as SCHEMA_EXPORTS
from record_engine.types import (  # noqa: F401
    Char,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    RecordType,
)
from record_engine.validation import build_record, create_record, validate  # noqa: F401

__all__ = [
    "__version__",
    "Char",
    "Float32",
    "Float64",
    "IncompatibleJsonError",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "JsonSyntaxError",
    "Record",
    "RecordDeclarationError",
    "RecordEngineError",
    "RecordStreamError",
    "RecordType",
    "RecordValidationError",
    "Result",
    "UnexpectedEndOfInputError",
    "UnknownEnumCaseError",
    "UnsupportedValueError",
    "build_record",
    "create_record",
    "describe_schema",
    "dump",
    "get_record_type",
    "get_schema",
    "parse",
    "parse_record_type",
    "record_values",
    "register_record_type",
    "to_json",
    "validate",
] + SCHEMA_EXPORTS
