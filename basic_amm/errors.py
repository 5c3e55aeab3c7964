"""Exception types for the AMM core.

Every precondition failure has its own class so callers can branch on the kind
without parsing messages. All of them derive from ``AmmError`` (a ``ValueError``),
except ``InvariantViolation`` which signals a bug rather than bad input.
"""

from __future__ import annotations


class AmmError(ValueError):
    """Base class for rejected AMM operations."""


class InsufficientInput(AmmError):
    """Swap input amount is zero."""


class InsufficientLiquidity(AmmError):
    """Pool reserves are empty, or the share amount to burn is zero/unbacked."""


class InsufficientAmount(AmmError):
    """Quote amount is zero."""


class InsufficientOutputAmount(AmmError):
    """Swap output rounds down to zero."""


class InvalidAsset(AmmError):
    """Asset is not one of the two pool assets."""


class IdenticalAssets(AmmError):
    """Both pool assets are the same."""


class ZeroAddressAsset(AmmError):
    """A pool asset is the zero address."""


class InvalidRecipient(AmmError):
    """Recipient is empty or the lock sink."""


class SlippageExceeded(AmmError):
    """Swap output is below the caller's minimum."""


class InsufficientAmountA(AmmError):
    """Ratio-adjusted deposit of asset A is below the caller's minimum."""


class InsufficientAmountB(AmmError):
    """Ratio-adjusted deposit of asset B is below the caller's minimum."""


class InsufficientLiquidityMinted(AmmError):
    """Deposit would mint zero (or negative) shares."""


class InsufficientShares(AmmError):
    """Holder does not own the shares they try to burn."""


class BelowMinimumA(AmmError):
    """Withdrawal of asset A is below the caller's minimum."""


class BelowMinimumB(AmmError):
    """Withdrawal of asset B is below the caller's minimum."""


class ReentrantCall(AmmError):
    """The pool's mutation scope is already held by the calling thread."""


class TransferFailed(AmmError):
    """The host ledger rejected a transfer; nothing was committed."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class InvariantViolation(AssertionError):
    """Raised when pool state would break one of its invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
