#!/usr/bin/env python3
"""
Offline walkthrough of a BasicAMM pool against an in-memory ledger.

Runs the same sequence as the deployment smoke script:
add liquidity, quote, swap A->B, slippage, swap B->A, remove 25% of shares.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from basic_amm.core import AmmConfig, BasicAMM
from basic_amm.state import BalanceTable

ONE = 10**18

TOKEN_A = "0x" + "a3" * 20
TOKEN_B = "0x" + "37" * 20
DEPLOYER = "0x" + "de" * 20


def _fmt(amount: int) -> str:
    whole, frac = divmod(amount, ONE)
    return f"{whole}.{frac:018d}".rstrip("0").rstrip(".")


def run(config: AmmConfig, *, liquidity: int, swap_amount: int, swap_back_amount: int) -> int:
    ledger = BalanceTable()
    ledger.mint(DEPLOYER, TOKEN_A, 1_000_000 * ONE)
    ledger.mint(DEPLOYER, TOKEN_B, 1_000_000 * ONE)
    amm = BasicAMM(TOKEN_A, TOKEN_B, ledger, config=config)
    print(f"[offline-demo] pool_id={amm.pool.pool_id} fee={config.fee_numerator}/{config.fee_denominator}")

    shares = amm.add_liquidity(liquidity, liquidity, 0, 0, DEPLOYER)
    reserve_a, reserve_b = amm.get_reserves()
    print(f"[offline-demo] add liquidity: shares={_fmt(shares)} reserves={_fmt(reserve_a)} / {_fmt(reserve_b)}")

    quoted = amm.quote(swap_amount, reserve_a, reserve_b)
    print(f"[offline-demo] quote {_fmt(swap_amount)} A -> {_fmt(quoted)} B")

    out = amm.swap(TOKEN_A, swap_amount, 0, DEPLOYER)
    reserve_a, reserve_b = amm.get_reserves()
    print(f"[offline-demo] swap A->B: in={_fmt(swap_amount)} out={_fmt(out)} reserves={_fmt(reserve_a)} / {_fmt(reserve_b)}")

    slippage = amm.calculate_slippage_percent(2 * swap_amount, reserve_a, reserve_b)
    print(f"[offline-demo] slippage for {_fmt(2 * swap_amount)} A: {slippage / 100:.2f}% (raw {slippage})")

    back = amm.swap(TOKEN_B, swap_back_amount, 0, DEPLOYER)
    reserve_a, reserve_b = amm.get_reserves()
    print(f"[offline-demo] swap B->A: in={_fmt(swap_back_amount)} out={_fmt(back)} reserves={_fmt(reserve_a)} / {_fmt(reserve_b)}")

    to_burn = amm.balance_of(DEPLOYER) // 4
    amount_a, amount_b = amm.remove_liquidity(to_burn, 0, 0, DEPLOYER)
    reserve_a, reserve_b = amm.get_reserves()
    print(f"[offline-demo] remove liquidity: shares={_fmt(to_burn)} out=({_fmt(amount_a)}, {_fmt(amount_b)})")
    print(f"[offline-demo] final reserves={_fmt(reserve_a)} / {_fmt(reserve_b)} total_supply={_fmt(amm.total_supply())}")

    violations = amm.check_invariants()
    if violations:
        print(f"[offline-demo] FAIL: {violations}")
        return 1
    print(f"[offline-demo] OK: {len(amm.events)} events")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument("--config", type=Path, default=None, help="YAML config (fee_numerator, fee_denominator, minimum_shares_lock)")
    ap.add_argument("--liquidity", type=int, default=100, help="initial deposit of each token (whole tokens)")
    ap.add_argument("--swap", type=int, default=50, help="A->B swap size (whole tokens)")
    ap.add_argument("--swap-back", type=int, default=30, help="B->A swap size (whole tokens)")
    ap.add_argument("-v", "--verbose", action="store_true", help="log engine decisions")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = AmmConfig.from_yaml(args.config) if args.config else AmmConfig()
    config = AmmConfig.from_env(base=config)
    return run(
        config,
        liquidity=args.liquidity * ONE,
        swap_amount=args.swap * ONE,
        swap_back_amount=args.swap_back * ONE,
    )


if __name__ == "__main__":
    raise SystemExit(main())
