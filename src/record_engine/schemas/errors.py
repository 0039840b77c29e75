"""Structured record errors."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from .base import SchemaBase


class ErrorTier(str, Enum):
    SHAPE = "shape"
    VALUE = "value"
    STRUCTURAL = "structural"


class RecordErrorCode(str, Enum):
    MISSING_MEMBERS = "missing_members"
    EXTRANEOUS_MEMBERS = "extraneous_members"
    TYPE_MISMATCH = "type_mismatch"
    NUMERIC_COERCION = "numeric_coercion"
    ILLEGAL_NULL = "illegal_null"
    NOT_AN_OBJECT = "not_an_object"
    UNKNOWN_FIELD = "unknown_field"
    UNEXPECTED_TOKEN = "unexpected_token"
    UNEXPECTED_END = "unexpected_end"
    UNKNOWN_ENUM_CASE = "unknown_enum_case"
    SYNTAX = "syntax"
    UNKNOWN_TYPE = "unknown_type"
    CONFIG = "config"


class RecordError(SchemaBase):
    """A single validation or stream failure.

    ``path`` names the member the error refers to, including array indices
    (``names[1]``). ``line`` and ``column`` are only set for stream errors.
    """

    code: RecordErrorCode
    tier: ErrorTier
    message: str
    path: Optional[str] = Field(default=None)
    type_name: Optional[str] = Field(default=None)
    line: Optional[int] = Field(default=None)
    column: Optional[int] = Field(default=None)
    details: Dict[str, Any] = Field(default_factory=dict)

    def __str__(self) -> str:
        return self.message
