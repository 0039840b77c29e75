"""Common schema utilities and base classes."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Base model with common config for record engine schemas.

    All schema models are frozen so they can be cached and shared between
    threads without copying.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    def as_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible dump of this model."""
        return self.model_dump(mode="json")
