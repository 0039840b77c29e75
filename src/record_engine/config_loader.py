"""Configuration loader for the record codec."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Tuple

import yaml
from pydantic import ValidationError

from record_engine.schemas import (
    DEFAULT_CODEC_CONFIG,
    CodecConfig,
    ErrorTier,
    RecordError,
    RecordErrorCode,
)

logger = logging.getLogger(__name__)

CODEC_SECTION = "codec"


def load_codec_config(path: Optional[Path], *, required: bool = False) -> Tuple[Optional[CodecConfig], Optional[RecordError]]:
    """Load codec options from a YAML or JSON file.

    The options may sit at the top level of the file or under a ``codec``
    key. A missing optional file yields the default configuration.
    """
    payload, err = _load_file(path, required=required)
    if err:
        return None, err
    if payload is None:
        return DEFAULT_CODEC_CONFIG, None
    if not isinstance(payload, dict):
        return None, _error(f"Codec config {path.name} must be a mapping")

    section = payload.get(CODEC_SECTION, payload)
    try:
        return CodecConfig.model_validate(section), None
    except ValidationError as exc:
        return None, _error(f"Invalid codec config {path.name}", {"errors": exc.errors(include_url=False, include_context=False)})


def _load_file(path: Optional[Path], *, required: bool = True) -> Tuple[Any, Optional[RecordError]]:
    if path is None:
        if required:
            return None, _error("Required config path not provided")
        return None, None

    if not path.exists():
        if required:
            return None, _error(f"Config not found: {path}")
        logger.warning("Codec config %s not found; using defaults.", path)
        return None, None

    text = path.read_text()
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(text), None
        return json.loads(text), None
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        return None, _error(f"Failed to parse config {path.name}", {"error": str(exc)})


def _error(message: str, details: Optional[dict] = None) -> RecordError:
    return RecordError(
        code=RecordErrorCode.CONFIG,
        tier=ErrorTier.STRUCTURAL,
        message=message,
        details=details or {},
    )
