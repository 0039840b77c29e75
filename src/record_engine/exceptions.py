"""
Custom exception classes for the record engine.

This module defines structured exception types for record declarations,
value validation, and JSON stream processing.
"""

from typing import List, Optional

from record_engine.schemas import ErrorTier, RecordError, RecordErrorCode


class RecordEngineError(Exception):
    """Base exception for all record engine errors."""
    pass


class RecordDeclarationError(RecordEngineError):
    """A record type declaration cannot be turned into a schema."""

    def __init__(self, type_name: str, message: str):
        self.type_name = type_name
        self.message = message
        super().__init__(f"Invalid record type {type_name}: {message}")


class RecordValidationError(RecordEngineError, ValueError):
    """Supplied values do not satisfy a record schema.

    ``errors`` holds every structured error found; the exception message is
    their rendered form.
    """

    def __init__(self, errors: List[RecordError], message: Optional[str] = None):
        self.errors = list(errors)
        if message is None:
            from record_engine.validation import render_errors

            message = render_errors(self.errors)
        self.message = message
        super().__init__(message)


class RecordStreamError(RecordEngineError):
    """Fatal error while reading a JSON token stream."""

    default_code = RecordErrorCode.UNEXPECTED_TOKEN

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[RecordErrorCode] = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.code = code or self.default_code
        super().__init__(message)

    def to_error(self) -> RecordError:
        return RecordError(
            code=self.code,
            tier=ErrorTier.STRUCTURAL,
            message=self.message,
            line=self.line,
            column=self.column,
        )


class IncompatibleJsonError(RecordStreamError):
    """Well-formed JSON that does not fit the record schema."""
    pass


class JsonSyntaxError(RecordStreamError):
    """Malformed JSON text."""

    default_code = RecordErrorCode.SYNTAX


class UnexpectedEndOfInputError(RecordStreamError):
    """Input ended while a value, field or array element was still expected."""

    default_code = RecordErrorCode.UNEXPECTED_END


class UnknownEnumCaseError(RecordStreamError):
    """A string does not name any case of the member's enumeration."""

    default_code = RecordErrorCode.UNKNOWN_ENUM_CASE

    def __init__(self, enum_name: str, case: str, line: Optional[int] = None, column: Optional[int] = None):
        self.enum_name = enum_name
        self.case = case
        super().__init__(f"No enum constant {enum_name}.{case}", line, column)


class UnsupportedValueError(RecordEngineError, TypeError):
    """The writer was handed a value it cannot serialize."""
    pass
