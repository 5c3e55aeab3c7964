"""
Liquidity management operations: create pool, add/remove liquidity.

Like the swap engine, each operation is split into a pure `plan_*` step and an
`apply_*` commit; the un-prefixed functions run both inside the pool's
mutation scope. Share balances per holder are tracked by the caller (see
`basic_amm.core.amm.BasicAMM`); here only `total_shares` moves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import BelowMinimumA, BelowMinimumB, InvariantViolation
from ..kernels.python.lp_math import burn_liquidity, mint_liquidity, optimal_liquidity
from ..kernels.python.precision_math import _require_non_negative
from ..state.balances import Amount, AssetId
from ..state.pools import PoolState
from .config import AmmConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddLiquidityPlan:
    amount_a: Amount
    amount_b: Amount
    shares_minted: Amount
    shares_locked: Amount
    new_reserve_a: Amount
    new_reserve_b: Amount
    new_total_shares: Amount
    pre_state: Tuple[Amount, Amount, Amount]


@dataclass(frozen=True)
class RemoveLiquidityPlan:
    shares_burned: Amount
    amount_a: Amount
    amount_b: Amount
    new_reserve_a: Amount
    new_reserve_b: Amount
    new_total_shares: Amount
    pre_state: Tuple[Amount, Amount, Amount]


def create_pool(asset_a: AssetId, asset_b: AssetId, config: Optional[AmmConfig] = None) -> PoolState:
    """
    Create an empty pool.

    Raises:
        ZeroAddressAsset: If either asset is the zero address
        IdenticalAssets: If both assets are the same
    """
    config = config or AmmConfig()
    return PoolState(
        asset_a=asset_a,
        asset_b=asset_b,
        fee_numerator=config.fee_numerator,
        fee_denominator=config.fee_denominator,
        minimum_shares_lock=config.minimum_shares_lock,
    )


def plan_add_liquidity(
    pool: PoolState,
    amount_a_desired: Amount,
    amount_b_desired: Amount,
    amount_a_min: Amount = 0,
    amount_b_min: Amount = 0,
) -> AddLiquidityPlan:
    """
    Compute a deposit against the current pool state.

    Empty pool: desired amounts are used as-is and
        shares = integer_sqrt(amount_a * amount_b) - minimum_shares_lock
    Funded pool: amounts are ratio-adjusted (asset A's desired amount is tried
    first) and
        shares = min(floor(amount_a * total / reserve_a), floor(amount_b * total / reserve_b))

    Raises:
        InsufficientAmountA, InsufficientAmountB, InsufficientLiquidityMinted
    """
    opt = optimal_liquidity(
        reserve_a=pool.reserve_a,
        reserve_b=pool.reserve_b,
        amount_a_desired=amount_a_desired,
        amount_b_desired=amount_b_desired,
        amount_a_min=amount_a_min,
        amount_b_min=amount_b_min,
    )
    res = mint_liquidity(
        reserve_a=pool.reserve_a,
        reserve_b=pool.reserve_b,
        total_shares=pool.total_shares,
        amount_a=opt.amount_a_used,
        amount_b=opt.amount_b_used,
        minimum_shares_lock=pool.minimum_shares_lock,
    )

    logger.debug(
        "add_liquidity plan pool=%s used=(%d, %d) refund=(%d, %d) shares=%d locked=%d",
        pool.pool_id[:18], res.amount_a_used, res.amount_b_used,
        opt.amount_a_refund, opt.amount_b_refund, res.shares_minted, res.shares_locked,
    )
    return AddLiquidityPlan(
        amount_a=res.amount_a_used,
        amount_b=res.amount_b_used,
        shares_minted=res.shares_minted,
        shares_locked=res.shares_locked,
        new_reserve_a=res.new_reserve_a,
        new_reserve_b=res.new_reserve_b,
        new_total_shares=res.new_total_shares,
        pre_state=pool.snapshot(),
    )


def plan_remove_liquidity(
    pool: PoolState,
    shares: Amount,
    amount_a_min: Amount = 0,
    amount_b_min: Amount = 0,
) -> RemoveLiquidityPlan:
    """
    Compute a withdrawal against the current pool state.

    Outputs (floor rounding; the pool keeps the remainder):
        amount_a = floor(shares * reserve_a / total_shares)
        amount_b = floor(shares * reserve_b / total_shares)

    Raises:
        InsufficientLiquidity, BelowMinimumA, BelowMinimumB
    """
    _require_non_negative("amount_a_min", amount_a_min)
    _require_non_negative("amount_b_min", amount_b_min)
    res = burn_liquidity(
        shares=shares,
        reserve_a=pool.reserve_a,
        reserve_b=pool.reserve_b,
        total_shares=pool.total_shares,
        minimum_shares_lock=pool.minimum_shares_lock,
    )

    if res.amount_a_out < amount_a_min:
        raise BelowMinimumA(f"amount_a_out ({res.amount_a_out}) < amount_a_min ({amount_a_min})")
    if res.amount_b_out < amount_b_min:
        raise BelowMinimumB(f"amount_b_out ({res.amount_b_out}) < amount_b_min ({amount_b_min})")

    logger.debug(
        "remove_liquidity plan pool=%s shares=%d out=(%d, %d)",
        pool.pool_id[:18], shares, res.amount_a_out, res.amount_b_out,
    )
    return RemoveLiquidityPlan(
        shares_burned=shares,
        amount_a=res.amount_a_out,
        amount_b=res.amount_b_out,
        new_reserve_a=res.new_reserve_a,
        new_reserve_b=res.new_reserve_b,
        new_total_shares=res.new_total_shares,
        pre_state=pool.snapshot(),
    )


def _commit(pool: PoolState, pre_state: Tuple[Amount, Amount, Amount], post_state: Tuple[Amount, Amount, Amount]) -> None:
    if pool.snapshot() != pre_state:
        raise InvariantViolation([f"stale liquidity plan: pool moved from {pre_state} to {pool.snapshot()}"])
    pool.reserve_a, pool.reserve_b, pool.total_shares = post_state
    violations = pool.check_invariants()
    if violations:
        pool.reserve_a, pool.reserve_b, pool.total_shares = pre_state
        raise InvariantViolation(violations)


def apply_add_liquidity(pool: PoolState, plan: AddLiquidityPlan) -> None:
    _commit(pool, plan.pre_state, (plan.new_reserve_a, plan.new_reserve_b, plan.new_total_shares))


def apply_remove_liquidity(pool: PoolState, plan: RemoveLiquidityPlan) -> None:
    _commit(pool, plan.pre_state, (plan.new_reserve_a, plan.new_reserve_b, plan.new_total_shares))


def add_liquidity(
    pool: PoolState,
    amount_a_desired: Amount,
    amount_b_desired: Amount,
    amount_a_min: Amount = 0,
    amount_b_min: Amount = 0,
) -> Tuple[Amount, Amount, Amount]:
    """
    Add liquidity to `pool` (reserve/share accounting only, no transfers).

    Returns:
        Tuple of (amount_a_used, amount_b_used, shares_minted)
    """
    with pool.guard():
        plan = plan_add_liquidity(pool, amount_a_desired, amount_b_desired, amount_a_min, amount_b_min)
        apply_add_liquidity(pool, plan)
    return plan.amount_a, plan.amount_b, plan.shares_minted


def remove_liquidity(
    pool: PoolState,
    shares: Amount,
    amount_a_min: Amount = 0,
    amount_b_min: Amount = 0,
) -> Tuple[Amount, Amount]:
    """
    Remove liquidity from `pool` (reserve/share accounting only, no transfers).

    Returns:
        Tuple of (amount_a_out, amount_b_out)
    """
    with pool.guard():
        plan = plan_remove_liquidity(pool, shares, amount_a_min, amount_b_min)
        apply_remove_liquidity(pool, plan)
    return plan.amount_a, plan.amount_b
