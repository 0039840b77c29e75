"""Token writer and record serialization.

Floats keep their precision class: a ``numpy.float32`` value is written with
the shortest text that round-trips through float32 (``0.434``), not the
widened float64 expansion (``0.4339999854564667``).
"""

from __future__ import annotations

import json
import math
import numbers
from enum import Enum
from typing import Any, List, Mapping, Optional, TextIO

import numpy

from record_engine.exceptions import UnsupportedValueError
from record_engine.record import Record, is_array, record_values
from record_engine.schemas import DEFAULT_CODEC_CONFIG, CodecConfig


class JsonTokenWriter:
    """Writes JSON tokens to a text stream, inserting separators."""

    def __init__(self, stream: TextIO, config: Optional[CodecConfig] = None):
        self.stream = stream
        self.config = config or DEFAULT_CODEC_CONFIG
        self._containers: List[str] = []
        self._counts: List[int] = []
        self._after_field = False

    def write_start_object(self) -> None:
        self._before_value()
        self._open("{")

    def write_end_object(self) -> None:
        self._close("{", "}")

    def write_start_array(self) -> None:
        self._before_value()
        self._open("[")

    def write_end_array(self) -> None:
        self._close("[", "]")

    def write_field_name(self, name: str) -> None:
        if not self._containers or self._containers[-1] != "{" or self._after_field:
            raise ValueError("Field names can only be written inside an object")
        self._separator()
        self.stream.write(self._quote(name))
        self.stream.write(":")
        self._after_field = True

    def write_string(self, value: str) -> None:
        self._before_value()
        self.stream.write(self._quote(value))

    def write_bool(self, value: bool) -> None:
        self._before_value()
        self.stream.write("true" if value else "false")

    def write_number(self, value: Any) -> None:
        text = format_number(value)
        self._before_value()
        self.stream.write(text)

    def _quote(self, value: str) -> str:
        return json.dumps(value, ensure_ascii=self.config.ensure_ascii)

    def _open(self, opener: str) -> None:
        self.stream.write(opener)
        self._containers.append(opener)
        self._counts.append(0)

    def _close(self, opener: str, closer: str) -> None:
        if not self._containers or self._containers[-1] != opener or self._after_field:
            raise ValueError(f"Cannot write {closer!r} here")
        self._containers.pop()
        self._counts.pop()
        self.stream.write(closer)

    def _separator(self) -> None:
        if self._counts[-1]:
            self.stream.write(",")
        self._counts[-1] += 1

    def _before_value(self) -> None:
        if self._after_field:
            self._after_field = False
            return
        if not self._containers:
            return
        if self._containers[-1] == "{":
            raise ValueError("Object values must be preceded by a field name")
        self._separator()


def format_number(value: Any) -> str:
    """Render a number in the text form matching its precision class."""
    if isinstance(value, numpy.float32):
        if not numpy.isfinite(value):
            raise UnsupportedValueError(f"Non-finite number cannot be serialized: {value}")
        return str(value)
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, numbers.Real):
        as_float = float(value)
        if not math.isfinite(as_float):
            raise UnsupportedValueError(f"Non-finite number cannot be serialized: {value}")
        return repr(as_float)
    raise UnsupportedValueError(f"Not a number: {value!r}")


def write_record(values: Mapping[str, Any], writer: JsonTokenWriter) -> None:
    """Write ``values`` as one JSON object, fields in mapping order."""
    writer.write_start_object()
    for name, value in values.items():
        writer.write_field_name(name)
        write_value(value, writer)
    writer.write_end_object()


def write_value(value: Any, writer: JsonTokenWriter) -> None:
    if isinstance(value, Enum):
        writer.write_string(value.name)
    elif isinstance(value, (bool, numpy.bool_)):
        writer.write_bool(bool(value))
    elif isinstance(value, numbers.Real):
        writer.write_number(value)
    elif isinstance(value, str):
        writer.write_string(value)
    elif isinstance(value, Record):
        write_record(record_values(value), writer)
    elif isinstance(value, Mapping):
        write_record(value, writer)
    elif is_array(value):
        writer.write_start_array()
        for item in value:
            write_value(item, writer)
        writer.write_end_array()
    elif value is None:
        raise UnsupportedValueError("Null value cannot be serialized")
    else:
        raise UnsupportedValueError(
            f"Value of type which cannot be serialized to JSON: {type(value).__name__}"
        )
