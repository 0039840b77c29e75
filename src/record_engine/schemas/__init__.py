"""Schema exports."""

from .base import SchemaBase
from .config import DEFAULT_CODEC_CONFIG, CodecConfig
from .errors import ErrorTier, RecordError, RecordErrorCode
from .member import MemberKind, MemberType
from .record_schema import RecordSchema

__all__ = [
    "SchemaBase",
    "CodecConfig",
    "DEFAULT_CODEC_CONFIG",
    "ErrorTier",
    "RecordError",
    "RecordErrorCode",
    "MemberKind",
    "MemberType",
    "RecordSchema",
]
