import pytest

from record_engine import Result


def test_success_carries_value() -> None:
    result = Result.success(42)
    assert result.ok
    assert result.is_success
    assert result.unwrap() == 42
    assert result.unpack() == (42, None)


def test_failure_carries_error() -> None:
    result = Result.failure(["boom"])
    assert not result.ok
    assert result.error == ["boom"]
    assert result.unpack() == (None, ["boom"])
    with pytest.raises(ValueError, match="No valid result"):
        result.unwrap()


def test_failure_requires_error() -> None:
    with pytest.raises(ValueError, match="Error is None"):
        Result.failure(None)


def test_success_may_hold_none() -> None:
    result = Result.success(None)
    assert result.ok
    assert result.unwrap() is None
