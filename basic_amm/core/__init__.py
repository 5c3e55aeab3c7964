"""
Core AMM engines
"""

from .config import AmmConfig
from .cpmm import (
    calculate_effective_slippage_percent,
    calculate_slippage_percent,
    get_amount_out,
    quote,
    swap,
)
from .liquidity import (
    create_pool,
    add_liquidity,
    remove_liquidity,
)
from .events import EventKind, LiquidityAdded, LiquidityRemoved, Swap
from .amm import BasicAMM, Ledger

__all__ = [
    "AmmConfig",
    "calculate_effective_slippage_percent",
    "calculate_slippage_percent",
    "get_amount_out",
    "quote",
    "swap",
    "create_pool",
    "add_liquidity",
    "remove_liquidity",
    "EventKind",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swap",
    "BasicAMM",
    "Ledger",
]
