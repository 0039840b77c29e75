"""Two-variant outcome type used where validation failures are expected."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Either a success carrying ``value`` or a failure carrying ``error``."""

    ok: bool
    value: Optional[T] = None
    error: Optional[E] = None

    @classmethod
    def success(cls, value: T) -> Result[T, Any]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: E) -> Result[Any, E]:
        if error is None:
            raise ValueError("Error is None")
        return cls(ok=False, error=error)

    @property
    def is_success(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the success value, raising ``ValueError`` for failures."""
        if not self.ok:
            raise ValueError(f"No valid result: {self.error}")
        return self.value

    def unpack(self) -> Tuple[Optional[T], Optional[E]]:
        """Return ``(value, None)`` on success and ``(None, error)`` on failure."""
        return self.value, self.error
