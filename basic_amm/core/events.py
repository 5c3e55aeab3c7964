"""Structured notifications emitted by a pool after a successful operation.

All events are frozen dataclasses; `to_dict()` gives a flat, JSON-friendly view
with the event name under `"event"`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum, unique
from typing import Any, Dict, Union


@unique
class EventKind(Enum):
    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    SWAP = "Swap"


@dataclass(frozen=True)
class LiquidityAdded:
    pool_id: str
    provider: str
    recipient: str
    amount_a: int
    amount_b: int
    shares: int

    kind = EventKind.LIQUIDITY_ADDED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.kind.value, **asdict(self)}


@dataclass(frozen=True)
class LiquidityRemoved:
    pool_id: str
    provider: str
    recipient: str
    amount_a: int
    amount_b: int
    shares: int

    kind = EventKind.LIQUIDITY_REMOVED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.kind.value, **asdict(self)}


@dataclass(frozen=True)
class Swap:
    pool_id: str
    trader: str
    recipient: str
    asset_in: str
    asset_out: str
    amount_in: int
    amount_out: int

    kind = EventKind.SWAP

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.kind.value, **asdict(self)}


PoolEvent = Union[LiquidityAdded, LiquidityRemoved, Swap]
