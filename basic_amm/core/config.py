"""
Pool configuration.

Defaults match the deployed BasicAMM: a 0.3% input fee (997/1000) and 1000
locked shares.

Sources, in the order callers usually layer them:
- `AmmConfig()` defaults,
- `AmmConfig.from_yaml(path)` / `AmmConfig.from_mapping(obj)`,
- `AmmConfig.from_env()` (`BASIC_AMM_*` variables, falling back to a base config).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml


ENV_PREFIX = "BASIC_AMM_"

_FIELDS = ("fee_numerator", "fee_denominator", "minimum_shares_lock")


def _env_int(name: str, default: int, *, lo: int, hi: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if v < lo or v > hi:
        raise ValueError(f"{name} must be in [{lo}, {hi}]: {v}")
    return v


@dataclass(frozen=True)
class AmmConfig:
    fee_numerator: int = 997
    fee_denominator: int = 1000
    minimum_shares_lock: int = 1000

    def __post_init__(self) -> None:
        for name in _FIELDS:
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive: {self.fee_denominator}")
        if not (0 < self.fee_numerator <= self.fee_denominator):
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}]: {self.fee_numerator}"
            )
        if self.minimum_shares_lock < 0:
            raise ValueError(f"minimum_shares_lock must be non-negative: {self.minimum_shares_lock}")

    @property
    def fee_bps(self) -> int:
        """Fee in basis points, rounded down (997/1000 -> 30)."""
        return ((self.fee_denominator - self.fee_numerator) * 10_000) // self.fee_denominator

    @classmethod
    def from_mapping(cls, obj: Mapping[str, Any], *, base: Optional["AmmConfig"] = None) -> "AmmConfig":
        if not isinstance(obj, Mapping):
            raise TypeError("config must be a mapping")
        unknown = sorted(set(obj) - set(_FIELDS))
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return replace(base or cls(), **{k: obj[k] for k in _FIELDS if k in obj})

    @classmethod
    def from_yaml(cls, path: str | Path, *, base: Optional["AmmConfig"] = None) -> "AmmConfig":
        """
        Load from a YAML file. Keys may sit at the top level or under `amm:`.
        """
        obj = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
        if obj is None:
            return base or cls()
        if not isinstance(obj, Mapping):
            raise TypeError("config YAML must be a mapping")
        if "amm" in obj:
            obj = obj["amm"] or {}
        return cls.from_mapping(obj, base=base)

    @classmethod
    def from_env(cls, *, base: Optional["AmmConfig"] = None) -> "AmmConfig":
        base = base or cls()
        hi = 10**36
        return cls(
            fee_numerator=_env_int(f"{ENV_PREFIX}FEE_NUMERATOR", base.fee_numerator, lo=1, hi=hi),
            fee_denominator=_env_int(f"{ENV_PREFIX}FEE_DENOMINATOR", base.fee_denominator, lo=1, hi=hi),
            minimum_shares_lock=_env_int(
                f"{ENV_PREFIX}MINIMUM_SHARES_LOCK", base.minimum_shares_lock, lo=0, hi=hi
            ),
        )
