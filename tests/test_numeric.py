import sys

import numpy as np
import pytest

from record_engine.numeric import coerce, fits_integral, is_number, narrow_integral
from record_engine.schemas import MemberKind


@pytest.mark.parametrize(
    "value,kind,expected",
    [
        (0, MemberKind.INT8, 0),
        (1, MemberKind.INT16, 1),
        (2, MemberKind.INT32, 2),
        (3, MemberKind.INT64, 3),
        (4, MemberKind.FLOAT32, np.float32(4)),
        (5, MemberKind.FLOAT64, 5.0),
        (np.int16(100), MemberKind.INT8, 100),
        (4.0, MemberKind.INT32, 4),
        (np.float32(2), MemberKind.INT32, 2),
        (-126.0, MemberKind.INT8, -126),
        (5.0, MemberKind.FLOAT32, np.float32(5)),
        (np.float32(0.5), MemberKind.FLOAT64, 0.5),
    ],
)
def test_lossless_conversions(value, kind, expected) -> None:
    result = coerce(value, kind, "ERROR")
    assert result.ok
    assert result.value == expected
    assert type(result.value) is type(expected)


@pytest.mark.parametrize(
    "value,kind",
    [
        (256, MemberKind.INT8),
        (66000, MemberKind.INT16),
        (256.0, MemberKind.INT8),
        (0.1, MemberKind.INT8),
        (0.2, MemberKind.INT16),
        (0.3, MemberKind.INT32),
        (4.5, MemberKind.INT64),
        (5_000_000_000, MemberKind.INT32),
        (5e9, MemberKind.INT32),
        (sys.float_info.max, MemberKind.INT64),
        (float("nan"), MemberKind.INT32),
        (10e45, MemberKind.FLOAT32),
        (True, MemberKind.INT32),
        ("4", MemberKind.INT32),
        (4, MemberKind.STRING),
    ],
)
def test_lossy_conversions_fail_with_given_message(value, kind) -> None:
    result = coerce(value, kind, "ERROR")
    assert not result.ok
    assert result.error == "ERROR"


def test_integral_limit_is_exclusive() -> None:
    assert not coerce(127.0, MemberKind.INT8, "ERROR").ok
    assert coerce(126.0, MemberKind.INT8, "ERROR").ok


def test_float64_accepts_large_integers_with_precision_loss() -> None:
    result = coerce(2**63 - 1, MemberKind.FLOAT64, "ERROR")
    assert result.ok
    assert result.value == float(2**63)


def test_float64_rejects_integers_beyond_float_range() -> None:
    assert not coerce(10**400, MemberKind.FLOAT64, "ERROR").ok


def test_is_number_excludes_booleans() -> None:
    assert is_number(1)
    assert is_number(np.int8(1))
    assert is_number(np.float32(1.5))
    assert not is_number(True)
    assert not is_number(np.bool_(True))
    assert not is_number("1")


def test_fits_integral_is_inclusive() -> None:
    assert fits_integral(-128, MemberKind.INT8)
    assert fits_integral(127, MemberKind.INT8)
    assert not fits_integral(128, MemberKind.INT8)
    assert fits_integral(2**63 - 1, MemberKind.INT64)


def test_narrow_integral_wraps() -> None:
    assert narrow_integral(300, MemberKind.INT8) == 44
    assert narrow_integral(128, MemberKind.INT8) == -128
    assert narrow_integral(-129, MemberKind.INT8) == 127
    assert narrow_integral(2**31, MemberKind.INT32) == -(2**31)
    assert narrow_integral(42, MemberKind.INT64) == 42
