"""
Host-ledger balance tracking.

Implements BalanceTable[Address, AssetId] -> Amount, the custody side the AMM
core delegates transfers to. Any object exposing the same `transfer` signature
(all-or-nothing, raising on failure) can stand in for it.
"""

from typing import Dict, Tuple


# Type aliases
Address = str  # 20-byte hex string (0x...)
AssetId = str  # asset contract address (0x...)
Amount = int  # Non-negative integer (arbitrary precision)

ZERO_ADDRESS = "0x" + "00" * 20


def is_zero_address(address: str) -> bool:
    """True for the empty string and for any all-zero hex address."""
    if not address:
        return True
    body = address[2:] if address[:2].lower() == "0x" else address
    return body.strip("0") == ""


class BalanceTable:
    """
    Balance table mapping (holder, asset) -> amount.

    Note: this class stores balances in a plain dict. Callers that need a
    deterministic order must sort keys explicitly.
    """

    def __init__(self):
        """Initialize empty balance table."""
        self._balances: Dict[Tuple[Address, AssetId], Amount] = {}

    def get(self, holder: Address, asset: AssetId) -> Amount:
        """Get balance for (holder, asset). Returns 0 if not found."""
        return self._balances.get((holder, asset), 0)

    def set(self, holder: Address, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (holder, asset).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            # Remove zero balances to keep table sparse
            self._balances.pop((holder, asset), None)
        else:
            self._balances[(holder, asset)] = amount

    def mint(self, holder: Address, asset: AssetId, amount: Amount) -> None:
        """Credit `amount` out of thin air (test funding and demos)."""
        if amount < 0:
            raise ValueError(f"Mint amount must be non-negative: {amount}")
        self.set(holder, asset, self.get(holder, asset) + amount)

    def transfer(self, asset: AssetId, sender: Address, recipient: Address, amount: Amount) -> None:
        """
        Move `amount` of `asset` from sender to recipient.

        All-or-nothing: the sender's balance is checked before either side is
        touched.

        Raises:
            ValueError: If amount is negative or the sender's balance is insufficient
        """
        if amount < 0:
            raise ValueError(f"Transfer amount must be non-negative: {amount}")
        current = self.get(sender, asset)
        if current < amount:
            raise ValueError(
                f"Insufficient balance: {sender} holds {current} of {asset}, needs {amount}"
            )
        if amount == 0 or sender == recipient:
            return
        self.set(sender, asset, current - amount)
        self.set(recipient, asset, self.get(recipient, asset) + amount)

    def get_all_balances(self) -> Dict[Tuple[Address, AssetId], Amount]:
        """
        Get all balances as a dictionary.

        Returns:
            Dictionary mapping (holder, asset) -> amount
        """
        return dict(self._balances)

    def get_balances_for_asset(self, asset: AssetId) -> Dict[Address, Amount]:
        result = {}
        for (holder, a), amount in self._balances.items():
            if a == asset:
                result[holder] = amount
        return result

    def total_supply(self, asset: AssetId) -> Amount:
        """Sum of every holder's balance of `asset`."""
        return sum(self.get_balances_for_asset(asset).values())

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
