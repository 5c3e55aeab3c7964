"""
Pool state for a two-asset constant-product pool.
"""

from __future__ import annotations

import hashlib
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..errors import IdenticalAssets, InvalidAsset, InvariantViolation, ReentrantCall, ZeroAddressAsset
from .balances import Amount, AssetId, is_zero_address


def compute_pool_id(
    asset_a: AssetId,
    asset_b: AssetId,
    fee_numerator: int,
    fee_denominator: int,
) -> str:
    """
    Deterministically compute a pool_id for the given pool parameters.

        pool_id = H("BasicAMMPool" || asset_a || asset_b || fee_numerator || "/" || fee_denominator)
    """
    if is_zero_address(asset_a) or is_zero_address(asset_b):
        raise ZeroAddressAsset(f"pool assets must be non-zero: ({asset_a!r}, {asset_b!r})")
    if asset_a.lower() == asset_b.lower():
        raise IdenticalAssets(f"pool assets must differ: {asset_a}")

    pool_id_data = (
        b"BasicAMMPool"
        + asset_a.lower().encode("utf-8")
        + asset_b.lower().encode("utf-8")
        + str(int(fee_numerator)).encode("utf-8")
        + b"/"
        + str(int(fee_denominator)).encode("utf-8")
    )
    return "0x" + hashlib.sha256(pool_id_data).hexdigest()


@dataclass
class PoolState:
    """
    State of a liquidity pool.

    Attributes:
        asset_a: First asset identifier
        asset_b: Second asset identifier
        fee_numerator: Share of the input kept for pricing (997 of 1000 = 0.3% fee)
        fee_denominator: Fee ratio denominator
        minimum_shares_lock: Shares held forever by the lock sink after the first deposit
        reserve_a: Reserve amount for asset_a
        reserve_b: Reserve amount for asset_b
        total_shares: Outstanding shares, locked shares included
        pool_id: Derived from assets and fee ratio when left empty

    Mutations must happen inside `guard()`.
    """
    asset_a: AssetId
    asset_b: AssetId
    fee_numerator: int = 997
    fee_denominator: int = 1000
    minimum_shares_lock: int = 1000
    reserve_a: Amount = 0
    reserve_b: Amount = 0
    total_shares: Amount = 0
    pool_id: str = ""
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)
    _owner: Optional[int] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate pool state invariants."""
        derived_id = compute_pool_id(self.asset_a, self.asset_b, self.fee_numerator, self.fee_denominator)
        if not self.pool_id:
            self.pool_id = derived_id

        if self.fee_denominator <= 0 or not (0 < self.fee_numerator <= self.fee_denominator):
            raise ValueError(
                f"fee ratio must satisfy 0 < numerator <= denominator: {self.fee_numerator}/{self.fee_denominator}"
            )
        if self.minimum_shares_lock < 0:
            raise ValueError(f"minimum_shares_lock must be non-negative: {self.minimum_shares_lock}")

        violations = self.check_invariants()
        if violations:
            raise InvariantViolation(violations)

    def is_empty(self) -> bool:
        return self.reserve_a == 0 and self.reserve_b == 0

    def get_reserves(self) -> Tuple[Amount, Amount]:
        return self.reserve_a, self.reserve_b

    def match_asset(self, asset: AssetId) -> AssetId:
        """
        Return the pool's own spelling of `asset`.

        Asset ids compare case-insensitively, the same way `compute_pool_id`
        treats them.

        Raises:
            InvalidAsset: If asset is not in this pool
        """
        key = asset.lower() if isinstance(asset, str) else None
        if key == self.asset_a.lower():
            return self.asset_a
        if key == self.asset_b.lower():
            return self.asset_b
        raise InvalidAsset(f"Asset {asset!r} not in pool {self.pool_id}")

    def get_reserve(self, asset: AssetId) -> Amount:
        """
        Get reserve for a specific asset.

        Raises:
            InvalidAsset: If asset is not in this pool
        """
        if self.match_asset(asset) == self.asset_a:
            return self.reserve_a
        return self.reserve_b

    def resolve_direction(self, asset_in: AssetId) -> Tuple[AssetId, Amount, Amount]:
        """
        Map an input asset to (asset_out, reserve_in, reserve_out).

        Raises:
            InvalidAsset: If asset_in is neither pool asset
        """
        if self.match_asset(asset_in) == self.asset_a:
            return self.asset_b, self.reserve_a, self.reserve_b
        return self.asset_a, self.reserve_b, self.reserve_a

    def get_constant_product(self) -> int:
        """k = reserve_a * reserve_b."""
        return self.reserve_a * self.reserve_b

    def snapshot(self) -> Tuple[Amount, Amount, Amount]:
        return self.reserve_a, self.reserve_b, self.total_shares

    def check_invariants(self) -> List[str]:
        """
        Return human-readable violations (empty when the state is valid).

        A pool is either empty (both reserves zero, shares 0 or exactly the lock)
        or fully funded (both reserves and total_shares positive).
        """
        violations = []
        if self.reserve_a < 0 or self.reserve_b < 0:
            violations.append(f"negative reserves: ({self.reserve_a}, {self.reserve_b})")
        if self.total_shares < 0:
            violations.append(f"negative total_shares: {self.total_shares}")
        if (self.reserve_a == 0) != (self.reserve_b == 0):
            violations.append(f"half-funded pool: ({self.reserve_a}, {self.reserve_b})")
        if self.is_empty():
            if self.total_shares not in (0, self.minimum_shares_lock):
                violations.append(
                    f"empty pool must hold 0 or {self.minimum_shares_lock} shares, has {self.total_shares}"
                )
        elif self.total_shares <= self.minimum_shares_lock and self.reserve_a > 0:
            violations.append(
                f"funded pool must have more than {self.minimum_shares_lock} shares, has {self.total_shares}"
            )
        return violations

    def verify_invariants(self) -> None:
        violations = self.check_invariants()
        if violations:
            raise InvariantViolation(violations)

    @contextmanager
    def guard(self) -> Iterator["PoolState"]:
        """
        Per-pool mutual-exclusion scope.

        Other threads block until the scope is released; re-entry from the thread
        that already holds it raises ReentrantCall instead of deadlocking.
        """
        me = threading.get_ident()
        if self._owner == me:
            raise ReentrantCall(f"pool {self.pool_id} is already locked by this thread")
        with self._lock:
            self._owner = me
            try:
                yield self
            finally:
                self._owner = None

    def __repr__(self) -> str:
        return (
            f"PoolState(pool_id={self.pool_id[:18]}..., "
            f"assets=({self.asset_a}, {self.asset_b}), "
            f"reserves=({self.reserve_a}, {self.reserve_b}), "
            f"total_shares={self.total_shares}, "
            f"fee={self.fee_numerator}/{self.fee_denominator})"
        )
