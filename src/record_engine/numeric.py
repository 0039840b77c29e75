"""Numeric coercion between member kinds.

A number is only converted when the conversion preserves its value:
integral targets reject fractional values and values whose magnitude
reaches the target's maximum, Float32 rejects values outside the float32
range, and Float64 accepts every finite source.
"""

from __future__ import annotations

import math
import numbers
from typing import Any, Dict

import numpy

from record_engine.result import Result
from record_engine.schemas import MemberKind

MAX_INTEGRAL_VALUES: Dict[MemberKind, int] = {
    MemberKind.INT8: 2**7 - 1,
    MemberKind.INT16: 2**15 - 1,
    MemberKind.INT32: 2**31 - 1,
    MemberKind.INT64: 2**63 - 1,
}

INTEGRAL_BITS: Dict[MemberKind, int] = {
    MemberKind.INT8: 8,
    MemberKind.INT16: 16,
    MemberKind.INT32: 32,
    MemberKind.INT64: 64,
}

FLOAT32_MAX = float(numpy.finfo(numpy.float32).max)


def is_number(value: Any) -> bool:
    """True for real numbers (including numpy scalars), excluding booleans."""
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, numpy.bool_))


def fits_integral(value: int, kind: MemberKind) -> bool:
    """True if ``value`` lies inside the representable range of ``kind``."""
    maximum = MAX_INTEGRAL_VALUES[kind]
    return -maximum - 1 <= value <= maximum


def narrow_integral(value: int, kind: MemberKind) -> int:
    """Two's complement narrowing of ``value`` to the width of ``kind``."""
    bits = INTEGRAL_BITS[kind]
    half = 1 << (bits - 1)
    return ((int(value) + half) % (1 << bits)) - half


def coerce(value: Any, kind: MemberKind, error_message: str) -> Result:
    """Convert ``value`` to the runtime representation of ``kind``.

    Returns a success holding the converted number, or a failure holding
    ``error_message`` unchanged.
    """
    if not kind.is_numeric or not is_number(value):
        return Result.failure(error_message)

    if kind.is_integral:
        if isinstance(value, numbers.Integral):
            exact = int(value)
        else:
            as_float = float(value)
            if not math.isfinite(as_float) or round(as_float) != as_float:
                return Result.failure(error_message)
            exact = int(as_float)
        if abs(exact) < MAX_INTEGRAL_VALUES[kind]:
            return Result.success(exact)
        return Result.failure(error_message)

    try:
        as_float = float(value)
    except OverflowError:
        return Result.failure(error_message)

    if kind == MemberKind.FLOAT32:
        if abs(as_float) < FLOAT32_MAX:
            return Result.success(numpy.float32(as_float))
        return Result.failure(error_message)

    # 64-bit float accepts every source; large 64-bit integers may lose precision.
    return Result.success(as_float)
