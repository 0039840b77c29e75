"""Codec configuration schema."""

from __future__ import annotations

from pydantic import Field

from .base import SchemaBase


class CodecConfig(SchemaBase):
    """Options for the streaming JSON reader and writer."""

    ensure_ascii: bool = Field(default=False, description="Escape non-ASCII characters when writing")
    max_depth: int = Field(default=64, ge=1, description="Maximum object/array nesting accepted by the reader")
    chunk_size: int = Field(default=8192, ge=1, description="Characters pulled per read() from text streams")
    reject_trailing_content: bool = Field(default=True, description="Fail when content follows the root object")


DEFAULT_CODEC_CONFIG = CodecConfig()
