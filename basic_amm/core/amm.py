"""
Pool facade: the externally visible AMM.

This is the imperative shell around the functional core:
- validates a request and computes a plan (`core.cpmm`, `core.liquidity`),
- moves assets through the host ledger,
- commits pool and share state only after every transfer succeeded,
- emits one structured event per successful operation.

The pool's mutation scope is held for the whole sequence, so concurrent calls
on the same pool are serialized and nothing observes a half-applied operation.
If a transfer fails, the transfers already made are reversed and the pool is
left untouched.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol, Tuple

from ..errors import (
    InsufficientShares,
    InvalidRecipient,
    InvariantViolation,
    TransferFailed,
)
from ..state.balances import Address, Amount, AssetId, is_zero_address
from ..state.lp import LOCK_SINK, ShareTable
from .config import AmmConfig
from .cpmm import apply_swap, calculate_slippage_percent, get_amount_out, plan_swap, quote
from .events import LiquidityAdded, LiquidityRemoved, PoolEvent, Swap
from .liquidity import (
    apply_add_liquidity,
    apply_remove_liquidity,
    create_pool,
    plan_add_liquidity,
    plan_remove_liquidity,
)

logger = logging.getLogger(__name__)


class Ledger(Protocol):
    """Host custody layer. `transfer` must fully succeed or raise."""

    def transfer(self, asset: AssetId, sender: Address, recipient: Address, amount: Amount) -> None:
        ...


EventListener = Callable[[PoolEvent], None]


class _TransferBatch:
    """Runs ledger transfers in order and reverses them if a later one fails."""

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger
        self._done: List[Tuple[AssetId, Address, Address, Amount]] = []

    def transfer(self, asset: AssetId, sender: Address, recipient: Address, amount: Amount) -> None:
        if amount == 0:
            return
        try:
            self._ledger.transfer(asset, sender, recipient, amount)
        except Exception as exc:
            self.rollback()
            raise TransferFailed(
                f"transfer of {amount} {asset} from {sender} to {recipient} failed: {exc}", cause=exc
            ) from exc
        self._done.append((asset, sender, recipient, amount))

    def rollback(self) -> None:
        while self._done:
            asset, sender, recipient, amount = self._done.pop()
            logger.warning("reversing transfer of %d %s from %s to %s", amount, asset, sender, recipient)
            try:
                self._ledger.transfer(asset, recipient, sender, amount)
            except Exception as exc:
                raise InvariantViolation(
                    [f"could not reverse transfer of {amount} {asset} from {sender} to {recipient}: {exc}"]
                ) from exc


class BasicAMM:
    """
    Two-asset constant-product pool bound to a host ledger.

    `address` is the pool's own account on the ledger (defaults to the pool id).
    Share balances are kept in `shares`; the minimum-shares lock sits with
    `LOCK_SINK` and can never be withdrawn.

    `events` is an in-memory audit log of committed operations, oldest first.
    It keeps everything unless `event_log_limit` is set, in which case only the
    newest `event_log_limit` events are retained. Listeners registered with
    `subscribe` see every event regardless of the limit.
    """

    def __init__(
        self,
        asset_a: AssetId,
        asset_b: AssetId,
        ledger: Ledger,
        *,
        config: Optional[AmmConfig] = None,
        address: Optional[Address] = None,
        event_log_limit: Optional[int] = None,
    ) -> None:
        if event_log_limit is not None and (
            not isinstance(event_log_limit, int) or isinstance(event_log_limit, bool) or event_log_limit < 0
        ):
            raise ValueError(f"event_log_limit must be a non-negative int or None: {event_log_limit!r}")
        self.config = config or AmmConfig()
        self.pool = create_pool(asset_a, asset_b, self.config)
        self.address = address or self.pool.pool_id
        self.ledger = ledger
        self.shares = ShareTable()
        self.events: List[PoolEvent] = []
        self.event_log_limit = event_log_limit
        self._listeners: List[EventListener] = []

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def asset_a(self) -> AssetId:
        return self.pool.asset_a

    @property
    def asset_b(self) -> AssetId:
        return self.pool.asset_b

    def get_reserves(self) -> Tuple[Amount, Amount]:
        with self.pool.guard():
            return self.pool.get_reserves()

    def total_supply(self) -> Amount:
        with self.pool.guard():
            return self.pool.total_shares

    def balance_of(self, holder: Address) -> Amount:
        with self.pool.guard():
            return self.shares.balance_of(holder)

    def get_amount_out(self, amount_in: Amount, asset_in: AssetId) -> Amount:
        """Output a swap of `amount_in` would receive right now."""
        with self.pool.guard():
            _asset_out, reserve_in, reserve_out = self.pool.resolve_direction(asset_in)
            return get_amount_out(
                amount_in, reserve_in, reserve_out, self.pool.fee_numerator, self.pool.fee_denominator
            )

    @staticmethod
    def quote(amount_a: Amount, reserve_a: Amount, reserve_b: Amount) -> Amount:
        return quote(amount_a, reserve_a, reserve_b)

    @staticmethod
    def calculate_slippage_percent(amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> int:
        return calculate_slippage_percent(amount_in, reserve_in, reserve_out)

    def check_invariants(self) -> List[str]:
        with self.pool.guard():
            violations = self.pool.check_invariants()
            supply = self.shares.total_supply()
            if supply != self.pool.total_shares:
                violations.append(f"share ledger supply {supply} != total_shares {self.pool.total_shares}")
            return violations

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def _notify(self, event: PoolEvent) -> None:
        # Runs after commit: listener failures are logged, never raised.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("event listener %r failed on %s", listener, event.kind.value)

    def _record(self, event: PoolEvent) -> None:
        self.events.append(event)
        if self.event_log_limit is not None and len(self.events) > self.event_log_limit:
            del self.events[: len(self.events) - self.event_log_limit]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def add_liquidity(
        self,
        amount_a_desired: Amount,
        amount_b_desired: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        recipient: Address,
        provider: Optional[Address] = None,
    ) -> Amount:
        """
        Deposit both assets from `provider` (defaults to `recipient`) and mint
        shares to `recipient`. Returns the shares minted.
        """
        provider = provider or recipient
        _require_recipient(recipient)

        with self.pool.guard():
            plan = plan_add_liquidity(self.pool, amount_a_desired, amount_b_desired, amount_a_min, amount_b_min)

            batch = _TransferBatch(self.ledger)
            batch.transfer(self.asset_a, provider, self.address, plan.amount_a)
            batch.transfer(self.asset_b, provider, self.address, plan.amount_b)

            try:
                apply_add_liquidity(self.pool, plan)
            except InvariantViolation:
                batch.rollback()
                raise
            self.shares.mint(recipient, plan.shares_minted)
            if plan.shares_locked:
                self.shares.mint(LOCK_SINK, plan.shares_locked)

            event = LiquidityAdded(
                pool_id=self.pool.pool_id,
                provider=provider,
                recipient=recipient,
                amount_a=plan.amount_a,
                amount_b=plan.amount_b,
                shares=plan.shares_minted,
            )
            self._record(event)

        logger.info(
            "liquidity added pool=%s provider=%s amounts=(%d, %d) shares=%d",
            self.pool.pool_id[:18], provider, plan.amount_a, plan.amount_b, plan.shares_minted,
        )
        self._notify(event)
        return plan.shares_minted

    def remove_liquidity(
        self,
        shares: Amount,
        amount_a_min: Amount,
        amount_b_min: Amount,
        recipient: Address,
        provider: Optional[Address] = None,
    ) -> Tuple[Amount, Amount]:
        """
        Burn `shares` owned by `provider` (defaults to `recipient`) and pay the
        underlying assets to `recipient`.
        """
        provider = provider or recipient
        _require_recipient(recipient)

        with self.pool.guard():
            plan = plan_remove_liquidity(self.pool, shares, amount_a_min, amount_b_min)
            if is_zero_address(provider):
                raise InsufficientShares("locked shares cannot be withdrawn")
            held = self.shares.balance_of(provider)
            if held < shares:
                raise InsufficientShares(f"{provider} holds {held} shares, tried to burn {shares}")

            batch = _TransferBatch(self.ledger)
            batch.transfer(self.asset_a, self.address, recipient, plan.amount_a)
            batch.transfer(self.asset_b, self.address, recipient, plan.amount_b)

            try:
                apply_remove_liquidity(self.pool, plan)
            except InvariantViolation:
                batch.rollback()
                raise
            self.shares.burn(provider, shares)

            event = LiquidityRemoved(
                pool_id=self.pool.pool_id,
                provider=provider,
                recipient=recipient,
                amount_a=plan.amount_a,
                amount_b=plan.amount_b,
                shares=shares,
            )
            self._record(event)

        logger.info(
            "liquidity removed pool=%s provider=%s shares=%d amounts=(%d, %d)",
            self.pool.pool_id[:18], provider, shares, plan.amount_a, plan.amount_b,
        )
        self._notify(event)
        return plan.amount_a, plan.amount_b

    def swap(
        self,
        asset_in: AssetId,
        amount_in: Amount,
        min_amount_out: Amount,
        recipient: Address,
        trader: Optional[Address] = None,
    ) -> Amount:
        """
        Exact-in swap: take `amount_in` of `asset_in` from `trader` (defaults to
        `recipient`) and pay the other asset to `recipient`.
        """
        trader = trader or recipient
        _require_recipient(recipient)

        with self.pool.guard():
            plan = plan_swap(self.pool, asset_in, amount_in, min_amount_out)

            batch = _TransferBatch(self.ledger)
            batch.transfer(plan.asset_in, trader, self.address, plan.amount_in)
            batch.transfer(plan.asset_out, self.address, recipient, plan.amount_out)

            try:
                apply_swap(self.pool, plan)
            except InvariantViolation:
                batch.rollback()
                raise

            event = Swap(
                pool_id=self.pool.pool_id,
                trader=trader,
                recipient=recipient,
                asset_in=plan.asset_in,
                asset_out=plan.asset_out,
                amount_in=plan.amount_in,
                amount_out=plan.amount_out,
            )
            self._record(event)

        logger.info(
            "swap pool=%s trader=%s %d %s -> %d %s",
            self.pool.pool_id[:18], trader, plan.amount_in, plan.asset_in, plan.amount_out, plan.asset_out,
        )
        self._notify(event)
        return plan.amount_out

    def __repr__(self) -> str:
        return f"BasicAMM({self.pool!r}, holders={len(self.shares.get_all_balances())})"


def _require_recipient(recipient: Address) -> None:
    if not isinstance(recipient, str) or is_zero_address(recipient):
        raise InvalidRecipient(f"recipient must be a non-zero address: {recipient!r}")
