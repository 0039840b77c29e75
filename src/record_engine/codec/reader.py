"""Schema-aware record reader.

The reader pulls tokens from a ``JsonTokenizer`` and interprets every value
according to the declared type of the member it belongs to. Field names are
checked against the schema as they arrive, so the first unknown field or
incompatible value stops the read with its line and column.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy

from record_engine.codec.tokens import JsonTokenizer, Token, TokenKind
from record_engine.exceptions import (
    IncompatibleJsonError,
    JsonSyntaxError,
    RecordValidationError,
    UnexpectedEndOfInputError,
    UnknownEnumCaseError,
)
from record_engine.introspection import parse_record_type
from record_engine.numeric import FLOAT32_MAX, narrow_integral
from record_engine.result import Result
from record_engine.schemas import MemberKind, MemberType, RecordErrorCode, RecordSchema
from record_engine.validation import build_record

logger = logging.getLogger(__name__)


class ReaderState(str, Enum):
    EXPECT_OBJECT_START = "expect_object_start"
    EXPECT_FIELD_OR_END = "expect_field_or_end"
    EXPECT_VALUE = "expect_value"
    EXPECT_ARRAY_ELEMENT_OR_END = "expect_array_element_or_end"


_EXPECTATIONS = {
    ReaderState.EXPECT_OBJECT_START: "JSON Object",
    ReaderState.EXPECT_FIELD_OR_END: "field name",
    ReaderState.EXPECT_VALUE: "value",
    ReaderState.EXPECT_ARRAY_ELEMENT_OR_END: "array element",
}


class RecordReader:
    """Reads one JSON object into a raw value mapping for a schema."""

    def __init__(self, tokens: JsonTokenizer):
        self.tokens = tokens
        self.state = ReaderState.EXPECT_OBJECT_START

    def read_record(self, schema: RecordSchema) -> Result:
        """Read the next JSON object as a value mapping for ``schema``.

        Returns a failure holding a structural ``RecordError`` for malformed
        JSON, unknown fields and values that do not fit their member.

        Raises:
            UnknownEnumCaseError: A string names no case of an enum member.
            UnexpectedEndOfInputError: Input ended inside the object.
            RecordValidationError: A nested object does not satisfy its
                record type.
        """
        try:
            return Result.success(self.read_mapping(schema))
        except (IncompatibleJsonError, JsonSyntaxError) as exc:
            logger.debug("Reading %s failed: %s", schema.type_name, exc.message)
            return Result.failure(exc.to_error().model_copy(update={"type_name": schema.type_name}))

    def read_mapping(self, schema: RecordSchema) -> Dict[str, Any]:
        """Like ``read_record`` but raises ``IncompatibleJsonError`` and
        ``JsonSyntaxError`` instead of returning failures."""
        self.state = ReaderState.EXPECT_OBJECT_START
        token = self.tokens.next_token()
        if token is None or token.kind != TokenKind.START_OBJECT:
            line = token.line if token else self.tokens.line
            column = token.column if token else self.tokens.column
            raise IncompatibleJsonError(
                "Not a JSON Object", line, column, code=RecordErrorCode.NOT_AN_OBJECT
            )
        return self._read_object(schema)

    def _next(self) -> Token:
        token = self.tokens.next_token()
        if token is None:
            raise UnexpectedEndOfInputError(
                f"Unexpected end of input while expecting {_EXPECTATIONS[self.state]}",
                self.tokens.line,
                self.tokens.column,
            )
        return token

    def _read_object(self, schema: RecordSchema) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        while True:
            self.state = ReaderState.EXPECT_FIELD_OR_END
            token = self._next()
            if token.kind == TokenKind.END_OBJECT:
                return result
            if token.kind != TokenKind.FIELD_NAME:
                raise IncompatibleJsonError(
                    f"Expected field name but found {token.describe()} at {_location(token)}",
                    token.line,
                    token.column,
                )
            member = token.value
            if not schema.has_member(member):
                raise IncompatibleJsonError(
                    f"Unexpected field name: '{member}'. Acceptable field names are: "
                    f"[{', '.join(schema.member_names)}]",
                    token.line,
                    token.column,
                    code=RecordErrorCode.UNKNOWN_FIELD,
                )
            self.state = ReaderState.EXPECT_VALUE
            result[member] = self._read_value(self._next(), member, schema.members[member])

    def _read_array(self, member: str, element: MemberType) -> tuple:
        items: List[Any] = []
        while True:
            self.state = ReaderState.EXPECT_ARRAY_ELEMENT_OR_END
            token = self._next()
            if token.kind == TokenKind.END_ARRAY:
                return tuple(items)
            items.append(self._read_value(token, member, element))

    def _read_value(self, token: Token, member: str, member_type: MemberType) -> Any:
        kind = member_type.kind

        if token.kind == TokenKind.START_OBJECT and kind == MemberKind.RECORD:
            nested = parse_record_type(member_type.record_type)
            result = build_record(nested, self._read_object(nested))
            if not result.ok:
                raise RecordValidationError(result.error)
            return result.value

        if token.kind == TokenKind.STRING:
            if kind == MemberKind.STRING:
                return token.value
            if kind == MemberKind.CHAR:
                if len(token.value) == 1:
                    return token.value
                raise _mismatch(member, member_type, token, f"String of length {len(token.value)}")
            if kind == MemberKind.ENUM:
                try:
                    return member_type.enum_type[token.value]
                except KeyError:
                    raise UnknownEnumCaseError(
                        member_type.enum_name, token.value, token.line, token.column
                    ) from None

        if token.kind == TokenKind.NUMBER_INT and kind.is_integral:
            return narrow_integral(token.value, kind)

        if token.kind == TokenKind.NUMBER_FLOAT:
            if kind == MemberKind.FLOAT32:
                if abs(token.value) < FLOAT32_MAX:
                    return numpy.float32(token.text)
                raise _mismatch(member, member_type, token, f"number {token.text} outside the Float32 range")
            if kind == MemberKind.FLOAT64:
                return float(token.text)

        if token.kind in (TokenKind.TRUE, TokenKind.FALSE) and kind == MemberKind.BOOL:
            return token.value

        if token.kind == TokenKind.START_ARRAY and kind == MemberKind.ARRAY:
            return self._read_array(member, member_type.element)

        raise _mismatch(member, member_type, token, token.describe())


def read_record(tokens: JsonTokenizer, schema: RecordSchema) -> Result:
    """Read one JSON object from ``tokens`` as a value mapping for ``schema``."""
    return RecordReader(tokens).read_record(schema)


def _location(token: Token) -> str:
    return f"line {token.line}, column {token.column}"


def _mismatch(
    member: str, member_type: MemberType, token: Token, found: Optional[str]
) -> IncompatibleJsonError:
    return IncompatibleJsonError(
        f"Expected member ({member}) to have value of type {member_type.describe()} "
        f"but found {found} at {_location(token)}",
        token.line,
        token.column,
    )
