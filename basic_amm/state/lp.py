"""
Liquidity-share balance tracking for a single pool.

Shares are an accounting unit, not an asset: they are minted on deposit and
burned on withdrawal. The minimum-shares lock is credited to `LOCK_SINK`, which
can never withdraw.
"""

from __future__ import annotations

from typing import Dict

from .balances import Address, Amount, ZERO_ADDRESS

LOCK_SINK = ZERO_ADDRESS


class ShareTable:
    """
    Share balance table mapping holder -> shares.

    Notes:
    - Balances are always non-negative.
    - Zero balances are omitted to keep the table sparse.
    - `total_supply()` includes the locked shares held by `LOCK_SINK`.
    """

    def __init__(self) -> None:
        self._balances: Dict[Address, Amount] = {}

    def balance_of(self, holder: Address) -> Amount:
        """Get share balance for holder. Returns 0 if not found."""
        return self._balances.get(holder, 0)

    def set(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Share balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop(holder, None)
        else:
            self._balances[holder] = amount

    def mint(self, holder: Address, amount: Amount) -> None:
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self.set(holder, self.balance_of(holder) + amount)

    def burn(self, holder: Address, amount: Amount) -> None:
        """Burn a non-negative amount from a holder's balance."""
        if amount < 0:
            raise ValueError(f"Burn amount must be non-negative: {amount}")
        current = self.balance_of(holder)
        if current < amount:
            raise ValueError(f"Insufficient share balance: {current} < {amount}")
        self.set(holder, current - amount)

    def total_supply(self) -> Amount:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Address, Amount]:
        """Return all share balances."""
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"ShareTable({len(self._balances)} holders, supply={self.total_supply()})"
