"""
State management for basic_amm pools
"""

from .balances import BalanceTable, ZERO_ADDRESS
from .lp import LOCK_SINK, ShareTable
from .pools import PoolState, compute_pool_id

__all__ = [
    "BalanceTable",
    "ZERO_ADDRESS",
    "LOCK_SINK",
    "ShareTable",
    "PoolState",
    "compute_pool_id",
]
