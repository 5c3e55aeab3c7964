"""
Liquidity math kernel.

Share accounting for a two-asset pool (Uniswap-v2 style):
- ratio-preserving deposit amounts with an explicit asset-A-first tie-break,
- initial mint `integer_sqrt(a * b) - minimum_shares_lock`,
- proportional mint/burn with floor rounding (the pool keeps the dust).

It is written as a small set of pure functions with explicit rounding rules.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import (
    InsufficientAmountA,
    InsufficientAmountB,
    InsufficientLiquidity,
    InsufficientLiquidityMinted,
    InvariantViolation,
)
from .precision_math import _require_int, integer_sqrt, min_of, mul_div


MINIMUM_SHARES_LOCK = 1000


def _require_non_negative_ints(*pairs: tuple[str, int]) -> None:
    for name, v in pairs:
        _require_int(name, v)
        if v < 0:
            raise ValueError(f"{name} must be non-negative: {v}")


@dataclass(frozen=True)
class OptimalLiquidityResult:
    amount_a_used: int
    amount_b_used: int
    amount_a_refund: int
    amount_b_refund: int


@dataclass(frozen=True)
class MintLiquidityResult:
    shares_minted: int
    shares_locked: int
    amount_a_used: int
    amount_b_used: int
    new_reserve_a: int
    new_reserve_b: int
    new_total_shares: int


@dataclass(frozen=True)
class BurnLiquidityResult:
    amount_a_out: int
    amount_b_out: int
    new_reserve_a: int
    new_reserve_b: int
    new_total_shares: int


def optimal_liquidity(
    *,
    reserve_a: int,
    reserve_b: int,
    amount_a_desired: int,
    amount_b_desired: int,
    amount_a_min: int = 0,
    amount_b_min: int = 0,
) -> OptimalLiquidityResult:
    """
    Compute ratio-preserving used amounts and refunds.

    Empty pool: everything is used as-is. Otherwise exactly one branch is taken,
    asset A first:
        1. amount_b_optimal = floor(amount_a_desired * reserve_b / reserve_a);
           if it fits in amount_b_desired, use (amount_a_desired, amount_b_optimal).
        2. else amount_a_optimal = floor(amount_b_desired * reserve_a / reserve_b)
           and use (amount_a_optimal, amount_b_desired).
    """
    _require_non_negative_ints(
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("amount_a_desired", amount_a_desired),
        ("amount_b_desired", amount_b_desired),
        ("amount_a_min", amount_a_min),
        ("amount_b_min", amount_b_min),
    )

    if reserve_a == 0 and reserve_b == 0:
        return OptimalLiquidityResult(
            amount_a_used=amount_a_desired,
            amount_b_used=amount_b_desired,
            amount_a_refund=0,
            amount_b_refund=0,
        )
    if reserve_a == 0 or reserve_b == 0:
        raise InvariantViolation([f"half-funded pool: reserves=({reserve_a}, {reserve_b})"])

    amount_b_optimal = mul_div(amount_a_desired, reserve_b, reserve_a)
    if amount_b_optimal <= amount_b_desired:
        if amount_b_optimal < amount_b_min:
            raise InsufficientAmountB(
                f"amount_b_optimal ({amount_b_optimal}) < amount_b_min ({amount_b_min})"
            )
        amount_a_used, amount_b_used = amount_a_desired, amount_b_optimal
    else:
        amount_a_optimal = mul_div(amount_b_desired, reserve_a, reserve_b)
        if amount_a_optimal > amount_a_desired:
            raise InvariantViolation(
                [f"amount_a_optimal ({amount_a_optimal}) > amount_a_desired ({amount_a_desired})"]
            )
        if amount_a_optimal < amount_a_min:
            raise InsufficientAmountA(
                f"amount_a_optimal ({amount_a_optimal}) < amount_a_min ({amount_a_min})"
            )
        amount_a_used, amount_b_used = amount_a_optimal, amount_b_desired

    return OptimalLiquidityResult(
        amount_a_used=amount_a_used,
        amount_b_used=amount_b_used,
        amount_a_refund=amount_a_desired - amount_a_used,
        amount_b_refund=amount_b_desired - amount_b_used,
    )


def mint_liquidity_initial(
    *, amount_a: int, amount_b: int, minimum_shares_lock: int = MINIMUM_SHARES_LOCK
) -> int:
    """
    Initial share mint: `integer_sqrt(amount_a * amount_b) - minimum_shares_lock`.

    The lock itself is not part of the returned amount; the caller credits it to
    the sink.
    """
    _require_non_negative_ints(
        ("amount_a", amount_a),
        ("amount_b", amount_b),
        ("minimum_shares_lock", minimum_shares_lock),
    )

    shares = integer_sqrt(amount_a * amount_b) - minimum_shares_lock
    if shares <= 0:
        raise InsufficientLiquidityMinted(
            f"initial deposit too small: isqrt({amount_a} * {amount_b}) <= {minimum_shares_lock}"
        )
    return shares


def mint_liquidity(
    *,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
    amount_a: int,
    amount_b: int,
    minimum_shares_lock: int = MINIMUM_SHARES_LOCK,
) -> MintLiquidityResult:
    """
    Mint shares for already ratio-adjusted amounts.

    Empty pool (both reserves zero):
        shares = integer_sqrt(a * b) - lock
        The lock is minted only when the pool has never been funded; a drained
        pool already holds exactly `lock` shares in the sink.
    Funded pool:
        shares = min(floor(a * total / reserve_a), floor(b * total / reserve_b))
    """
    _require_non_negative_ints(
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_shares", total_shares),
        ("amount_a", amount_a),
        ("amount_b", amount_b),
        ("minimum_shares_lock", minimum_shares_lock),
    )

    if reserve_a == 0 and reserve_b == 0:
        if total_shares == 0:
            shares_locked = minimum_shares_lock
        elif total_shares == minimum_shares_lock:
            shares_locked = 0
        else:
            raise InvariantViolation(
                [f"empty pool with total_shares={total_shares} (expected 0 or {minimum_shares_lock})"]
            )
        shares = mint_liquidity_initial(
            amount_a=amount_a, amount_b=amount_b, minimum_shares_lock=minimum_shares_lock
        )
    else:
        if reserve_a == 0 or reserve_b == 0 or total_shares == 0:
            raise InvariantViolation(
                [f"inconsistent pool: reserves=({reserve_a}, {reserve_b}), total_shares={total_shares}"]
            )
        shares_locked = 0
        shares = min_of(
            mul_div(amount_a, total_shares, reserve_a),
            mul_div(amount_b, total_shares, reserve_b),
        )
        if shares <= 0:
            raise InsufficientLiquidityMinted(
                f"deposit ({amount_a}, {amount_b}) mints zero shares against reserves "
                f"({reserve_a}, {reserve_b}) and total_shares={total_shares}"
            )

    return MintLiquidityResult(
        shares_minted=shares,
        shares_locked=shares_locked,
        amount_a_used=amount_a,
        amount_b_used=amount_b,
        new_reserve_a=reserve_a + amount_a,
        new_reserve_b=reserve_b + amount_b,
        new_total_shares=total_shares + shares + shares_locked,
    )


def burn_liquidity(
    *,
    shares: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
    minimum_shares_lock: int = MINIMUM_SHARES_LOCK,
) -> BurnLiquidityResult:
    """
    Burn shares for underlying assets (floor rounding).

        amount_a = floor(shares * reserve_a / total_shares)
        amount_b = floor(shares * reserve_b / total_shares)

    Burning the last withdrawable shares (leaving only the lock) releases the
    full reserves, so the pool drains to exactly (0, 0).
    """
    _require_non_negative_ints(
        ("shares", shares),
        ("reserve_a", reserve_a),
        ("reserve_b", reserve_b),
        ("total_shares", total_shares),
        ("minimum_shares_lock", minimum_shares_lock),
    )

    if shares == 0:
        raise InsufficientLiquidity("shares to burn must be positive")
    withdrawable = total_shares - minimum_shares_lock
    if shares > withdrawable:
        raise InsufficientLiquidity(
            f"cannot burn {shares} shares: withdrawable supply is {max(withdrawable, 0)}"
        )

    if shares == withdrawable:
        amount_a_out, amount_b_out = reserve_a, reserve_b
    else:
        amount_a_out = mul_div(shares, reserve_a, total_shares)
        amount_b_out = mul_div(shares, reserve_b, total_shares)
    if amount_a_out == 0 or amount_b_out == 0:
        raise InsufficientLiquidity(
            f"burning {shares} shares returns ({amount_a_out}, {amount_b_out}); both amounts must be positive"
        )

    return BurnLiquidityResult(
        amount_a_out=amount_a_out,
        amount_b_out=amount_b_out,
        new_reserve_a=reserve_a - amount_a_out,
        new_reserve_b=reserve_b - amount_b_out,
        new_total_shares=total_shares - shares,
    )
