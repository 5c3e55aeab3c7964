"""
Precision math kernel.

Integer-only primitives shared by the swap and liquidity kernels:
- `integer_sqrt`: floor square root (Babylonian iteration),
- `min_of`: total-order minimum,
- `mul_div`: floor(a * b / denominator).

Python ints are arbitrary precision, so `a * b` never overflows. Every division
here rounds toward zero (inputs are non-negative); callers must treat the
remainder as dust that stays with the pool.
"""

from __future__ import annotations


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def _require_non_negative(name: str, value: int) -> None:
    _require_int(name, value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


def integer_sqrt(x: int) -> int:
    """
    Largest `y` such that `y * y <= x`.

    Babylonian iteration starting from `z0 = (x + 1) // 2`:
        y = x
        while z < y: y = z; z = (x // z + z) // 2

    The sequence decreases strictly until it reaches floor(sqrt(x)), so the loop
    runs O(log x) times. Returns 0 for x == 0.
    """
    _require_non_negative("x", x)

    y = x
    z = (x + 1) // 2
    while z < y:
        y = z
        z = (x // z + z) // 2
    return y


def min_of(a: int, b: int) -> int:
    _require_int("a", a)
    _require_int("b", b)
    return a if a <= b else b


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute `floor(a * b / denominator)` without intermediate truncation.
    """
    _require_non_negative("a", a)
    _require_non_negative("b", b)
    _require_int("denominator", denominator)
    if denominator <= 0:
        raise ValueError(f"denominator must be positive: {denominator}")
    return (a * b) // denominator
