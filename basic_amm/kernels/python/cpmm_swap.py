"""
CPMM swap kernel.

Uniswap-v2 style pricing with the fee expressed as a ratio
`fee_numerator / fee_denominator` of the input that is kept for pricing
(997/1000 means a 0.3% fee):

    amount_in_with_fee = amount_in * fee_numerator
    amount_out = floor(amount_in_with_fee * reserve_out
                       / (reserve_in * fee_denominator + amount_in_with_fee))

The whole gross input is added to `reserve_in`; the fee therefore stays in the
pool and the product `reserve_in * reserve_out` never decreases.

All functions are pure and integer-only.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import (
    InsufficientAmount,
    InsufficientInput,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    InvariantViolation,
)
from .precision_math import _require_int, mul_div


# Slippage is reported in hundredths of a percent (150 == 1.5%).
SLIPPAGE_SCALE = 10_000


def _require_fee(fee_numerator: int, fee_denominator: int) -> None:
    _require_int("fee_numerator", fee_numerator)
    _require_int("fee_denominator", fee_denominator)
    if fee_denominator <= 0:
        raise ValueError(f"fee_denominator must be positive: {fee_denominator}")
    if not (0 <= fee_numerator <= fee_denominator):
        raise ValueError(f"fee_numerator must be in [0, {fee_denominator}]: {fee_numerator}")


def _require_swap_domain(amount_in: int, reserve_in: int, reserve_out: int) -> None:
    _require_int("amount_in", amount_in)
    for name, v in (("reserve_in", reserve_in), ("reserve_out", reserve_out)):
        _require_int(name, v)
        if v < 0:
            raise ValueError(f"{name} must be non-negative: {v}")

    if amount_in <= 0:
        raise InsufficientInput(f"amount_in must be positive: {amount_in}")
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity(f"cannot price against empty reserves: ({reserve_in}, {reserve_out})")


@dataclass(frozen=True)
class SwapExactInResult:
    amount_in: int
    amount_out: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int,
    fee_denominator: int,
) -> int:
    """
    Output amount for an exact input (floor rounding, fee taken on input).

    The result is always strictly less than `reserve_out`: the denominator
    exceeds `amount_in_with_fee * reserve_out / reserve_out` whenever
    `reserve_in > 0`.

    Raises:
        InsufficientInput: amount_in <= 0
        InsufficientLiquidity: a reserve is zero
    """
    _require_swap_domain(amount_in, reserve_in, reserve_out)
    _require_fee(fee_numerator, fee_denominator)

    amount_in_with_fee = amount_in * fee_numerator
    denominator = reserve_in * fee_denominator + amount_in_with_fee
    return mul_div(amount_in_with_fee, reserve_out, denominator)


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_numerator: int,
    fee_denominator: int,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Raises InsufficientOutputAmount if the output rounds to zero, and
    InvariantViolation if the post-state would underflow `reserve_out` or shrink
    the constant product.
    """
    amount_out = get_amount_out(amount_in, reserve_in, reserve_out, fee_numerator, fee_denominator)
    if amount_out <= 0:
        raise InsufficientOutputAmount(
            f"amount_out is zero (trade too small): amount_in={amount_in}, reserves=({reserve_in}, {reserve_out})"
        )

    new_reserve_in = reserve_in + amount_in
    new_reserve_out = reserve_out - amount_out
    if new_reserve_out < 0:
        raise InvariantViolation([f"reserve_out underflow: {reserve_out} - {amount_out}"])

    k_before = reserve_in * reserve_out
    k_after = new_reserve_in * new_reserve_out
    if k_after < k_before:
        raise InvariantViolation([f"constant product decreased: {k_after} < {k_before}"])

    return SwapExactInResult(
        amount_in=amount_in,
        amount_out=amount_out,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """
    Fee-less ratio conversion: `floor(amount_a * reserve_b / reserve_a)`.
    """
    for name, v in (("amount_a", amount_a), ("reserve_a", reserve_a), ("reserve_b", reserve_b)):
        _require_int(name, v)
        if v < 0:
            raise ValueError(f"{name} must be non-negative: {v}")
    if amount_a == 0:
        raise InsufficientAmount("amount_a must be positive")
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientLiquidity(f"cannot quote against empty reserves: ({reserve_a}, {reserve_b})")
    return mul_div(amount_a, reserve_b, reserve_a)


def _rate_shortfall(*, spot_num: int, spot_den: int, exec_num: int, exec_den: int) -> int:
    # (spot - exec) / spot, with both rates kept as exact fractions.
    lhs = spot_num * exec_den
    rhs = exec_num * spot_den
    if rhs >= lhs:
        return 0
    return mul_div(lhs - rhs, SLIPPAGE_SCALE, lhs)


def calculate_slippage_percent(amount_in: int, reserve_in: int, reserve_out: int) -> int:
    """
    Price impact of a trade, in hundredths of a percent.

    Compares the spot rate `reserve_out / reserve_in` with the fee-less
    execution rate `amount_out / amount_in` on the exact (unrounded) curve,
    where `amount_out = reserve_out * amount_in / (reserve_in + amount_in)`.
    The fee is not included; see `calculate_effective_slippage_percent`.

    Never negative. Monotonically non-decreasing in `amount_in`.

    A trade of 100 into reserves (10_000, 10_000) moves the price by 0.99% and
    reports 99, not 0; only trades below 0.01% of impact report 0 (for
    example 1 into the same reserves).
    """
    _require_swap_domain(amount_in, reserve_in, reserve_out)

    return _rate_shortfall(
        spot_num=reserve_out,
        spot_den=reserve_in,
        exec_num=reserve_out,
        exec_den=reserve_in + amount_in,
    )


def calculate_effective_slippage_percent(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_numerator: int,
    fee_denominator: int,
) -> int:
    """
    Price impact plus fee, in hundredths of a percent.

    Same as `calculate_slippage_percent` but the execution rate is taken from
    the fee-inclusive curve:
        amount_out = reserve_out * amount_in * n / (reserve_in * d + amount_in * n)
    """
    _require_swap_domain(amount_in, reserve_in, reserve_out)
    _require_fee(fee_numerator, fee_denominator)

    return _rate_shortfall(
        spot_num=reserve_out,
        spot_den=reserve_in,
        exec_num=reserve_out * fee_numerator,
        exec_den=reserve_in * fee_denominator + amount_in * fee_numerator,
    )
