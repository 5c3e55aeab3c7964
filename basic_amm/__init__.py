"""
basic_amm: accounting core of a two-asset constant-product AMM.

Layers, leaves first:
- `basic_amm.kernels.python`: pure integer kernels (precision math, swap pricing, share math)
- `basic_amm.state`: pool state, share ledger and an in-memory host ledger
- `basic_amm.core`: pool-bound swap/liquidity engines and the `BasicAMM` facade
"""

from .core import AmmConfig, BasicAMM
from .errors import AmmError, InvariantViolation

__version__ = "0.1.0"

__all__ = [
    "AmmConfig",
    "AmmError",
    "BasicAMM",
    "InvariantViolation",
]
