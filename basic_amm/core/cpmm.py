"""
Constant Product Market Maker (CPMM) swap engine.

Binds the pure swap kernel to a `PoolState`:
- `plan_swap` validates a request and computes the post-state without mutating,
- `apply_swap` commits a plan,
- `swap` does both inside the pool's mutation scope.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per swap operation
- Invariant: After each swap, x' * y' >= x * y (the input fee stays in the pool)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from ..errors import InvariantViolation, SlippageExceeded
from ..kernels.python.cpmm_swap import (
    SLIPPAGE_SCALE,
    calculate_effective_slippage_percent,
    calculate_slippage_percent,
    get_amount_out,
    quote,
)
from ..kernels.python.cpmm_swap import swap_exact_in as _kernel_swap_exact_in
from ..kernels.python.precision_math import _require_non_negative
from ..state.balances import Amount, AssetId
from ..state.pools import PoolState

logger = logging.getLogger(__name__)

__all__ = [
    "SLIPPAGE_SCALE",
    "SwapPlan",
    "apply_swap",
    "calculate_effective_slippage_percent",
    "calculate_slippage_percent",
    "get_amount_out",
    "plan_swap",
    "quote",
    "swap",
]


@dataclass(frozen=True)
class SwapPlan:
    asset_in: AssetId
    asset_out: AssetId
    amount_in: Amount
    amount_out: Amount
    new_reserve_a: Amount
    new_reserve_b: Amount
    pre_state: Tuple[Amount, Amount, Amount]


def plan_swap(
    pool: PoolState,
    asset_in: AssetId,
    amount_in: Amount,
    min_amount_out: Amount,
) -> SwapPlan:
    """
    Compute an exact-in swap against the current pool state.

    Steps:
        1. resolve (reserve_in, reserve_out) from asset_in
        2. amount_out = floor(amount_in * n * reserve_out / (reserve_in * d + amount_in * n))
        3. reject if amount_out < min_amount_out

    Raises:
        InvalidAsset, InsufficientInput, InsufficientLiquidity,
        InsufficientOutputAmount, SlippageExceeded
    """
    _require_non_negative("min_amount_out", min_amount_out)
    asset_in = pool.match_asset(asset_in)
    asset_out, reserve_in, reserve_out = pool.resolve_direction(asset_in)

    res = _kernel_swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_numerator=pool.fee_numerator,
        fee_denominator=pool.fee_denominator,
    )
    if res.amount_out < min_amount_out:
        raise SlippageExceeded(f"amount_out ({res.amount_out}) < min_amount_out ({min_amount_out})")

    if asset_in == pool.asset_a:
        new_reserve_a, new_reserve_b = res.new_reserve_in, res.new_reserve_out
    else:
        new_reserve_a, new_reserve_b = res.new_reserve_out, res.new_reserve_in

    logger.debug(
        "swap plan pool=%s in=%s amount_in=%d amount_out=%d k=%d->%d",
        pool.pool_id[:18], asset_in, amount_in, res.amount_out, res.k_before, res.k_after,
    )
    return SwapPlan(
        asset_in=asset_in,
        asset_out=asset_out,
        amount_in=amount_in,
        amount_out=res.amount_out,
        new_reserve_a=new_reserve_a,
        new_reserve_b=new_reserve_b,
        pre_state=pool.snapshot(),
    )


def apply_swap(pool: PoolState, plan: SwapPlan) -> None:
    """Commit a plan computed against the pool's current state."""
    if pool.snapshot() != plan.pre_state:
        raise InvariantViolation([f"stale swap plan: pool moved from {plan.pre_state} to {pool.snapshot()}"])
    k_before = pool.get_constant_product()
    pool.reserve_a = plan.new_reserve_a
    pool.reserve_b = plan.new_reserve_b
    if pool.get_constant_product() < k_before:
        pool.reserve_a, pool.reserve_b = plan.pre_state[0], plan.pre_state[1]
        raise InvariantViolation([f"constant product decreased below {k_before}"])


def swap(
    pool: PoolState,
    asset_in: AssetId,
    amount_in: Amount,
    min_amount_out: Amount = 0,
) -> Amount:
    """
    Exact-in swap applied to `pool` (reserve accounting only, no transfers).

    Returns the output amount.
    """
    with pool.guard():
        plan = plan_swap(pool, asset_in, amount_in, min_amount_out)
        apply_swap(pool, plan)
    return plan.amount_out
