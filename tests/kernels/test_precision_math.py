# [TESTER] v1

from __future__ import annotations

import importlib.util
import math

import pytest

from basic_amm.kernels.python.precision_math import integer_sqrt, min_of, mul_div


@pytest.mark.parametrize(
    "x,expected",
    [
        (0, 0),
        (1, 1),
        (2, 1),
        (3, 1),
        (4, 2),
        (15, 3),
        (16, 4),
        (17, 4),
        (99_999_999, 9_999),
        (100_000_000, 10_000),
    ],
)
def test_integer_sqrt_small_values(x: int, expected: int) -> None:
    assert integer_sqrt(x) == expected


def test_integer_sqrt_matches_isqrt_beyond_float_precision() -> None:
    # Float sqrt is wrong at this size; the Babylonian iteration must not be.
    n = (1 << 70) + 12345
    assert integer_sqrt(n * n) == n
    assert integer_sqrt(n * n - 1) == n - 1
    assert integer_sqrt((1 << 255) + 7) == math.isqrt((1 << 255) + 7)


def test_integer_sqrt_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        integer_sqrt(-1)
    with pytest.raises(TypeError):
        integer_sqrt(2.0)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        integer_sqrt(True)  # type: ignore[arg-type]


def test_min_of() -> None:
    assert min_of(3, 5) == 3
    assert min_of(5, 3) == 3
    assert min_of(7, 7) == 7


def test_mul_div_floors() -> None:
    assert mul_div(10, 7, 3) == 23  # 70 / 3 = 23.33
    assert mul_div(0, 7, 3) == 0
    assert mul_div(6, 7, 42) == 1
    # Product far beyond 256 bits keeps full precision.
    big = 1 << 200
    assert mul_div(big, big, big) == big


def test_mul_div_rejects_non_positive_denominator() -> None:
    with pytest.raises(ValueError, match="denominator"):
        mul_div(1, 1, 0)
    with pytest.raises(ValueError):
        mul_div(-1, 1, 1)


if importlib.util.find_spec("hypothesis") is not None:
    import hypothesis.strategies as st
    from hypothesis import given

    @given(st.integers(min_value=0, max_value=1 << 300))
    def test_integer_sqrt_is_floor_sqrt(x: int) -> None:
        y = integer_sqrt(x)
        assert y * y <= x < (y + 1) * (y + 1)

    @given(
        st.integers(min_value=0, max_value=1 << 128),
        st.integers(min_value=0, max_value=1 << 128),
        st.integers(min_value=1, max_value=1 << 128),
    )
    def test_mul_div_never_rounds_up(a: int, b: int, d: int) -> None:
        q = mul_div(a, b, d)
        assert q * d <= a * b < (q + 1) * d
