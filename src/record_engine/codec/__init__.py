"""Streaming JSON codec for records.

``parse`` reads a JSON object straight into a record, checking every field
name and value against the record's schema while tokens stream in.
``to_json`` and ``dump`` write a record back out with fields in schema order.
"""

from __future__ import annotations

import io
from typing import Any, Mapping, Optional, TextIO, Union

from record_engine.codec.reader import ReaderState, RecordReader, read_record
from record_engine.codec.tokens import JsonTokenizer, Token, TokenKind
from record_engine.codec.writer import JsonTokenWriter, format_number, write_record, write_value
from record_engine.exceptions import RecordValidationError
from record_engine.record import Record, record_values
from record_engine.schemas import CodecConfig, RecordSchema
from record_engine.validation import build_record, resolve_schema


def parse(
    source: Union[str, TextIO],
    record_type: Union[type, RecordSchema],
    config: Optional[CodecConfig] = None,
) -> Record:
    """Parse JSON text (a string or a text stream) into a record.

    Raises:
        IncompatibleJsonError: The JSON does not fit the record schema.
        JsonSyntaxError: The text is not well-formed JSON.
        UnexpectedEndOfInputError: The input ends inside the object.
        UnknownEnumCaseError: An enum member names an unknown case.
        RecordValidationError: The values read do not satisfy the schema.
    """
    schema = resolve_schema(record_type)
    tokens = JsonTokenizer(source, config)
    mapping = RecordReader(tokens).read_mapping(schema)
    if tokens.config.reject_trailing_content:
        tokens.ensure_exhausted()
    result = build_record(schema, mapping)
    if not result.ok:
        raise RecordValidationError(result.error)
    return result.value


def dump(
    record: Union[Record, Mapping[str, Any]],
    stream: TextIO,
    config: Optional[CodecConfig] = None,
) -> None:
    """Write ``record`` as JSON to ``stream``."""
    values = record_values(record) if isinstance(record, Record) else record
    write_record(values, JsonTokenWriter(stream, config))


def to_json(record: Union[Record, Mapping[str, Any]], config: Optional[CodecConfig] = None) -> str:
    """Return ``record`` as a JSON string."""
    buffer = io.StringIO()
    dump(record, buffer, config)
    return buffer.getvalue()


__all__ = [
    "JsonTokenizer",
    "JsonTokenWriter",
    "ReaderState",
    "RecordReader",
    "Token",
    "TokenKind",
    "dump",
    "format_number",
    "parse",
    "read_record",
    "to_json",
    "write_record",
    "write_value",
]
