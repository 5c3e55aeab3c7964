# [TESTER] v1

from __future__ import annotations

import threading

from basic_amm import BasicAMM
from basic_amm.core.events import Swap
from basic_amm.state.balances import BalanceTable

TOKEN_A = "0x" + "aa" * 20
TOKEN_B = "0x" + "bb" * 20
LP = "0x" + "11" * 20
TRADERS = ["0x" + f"{i:02x}" * 20 for i in range(0x20, 0x28)]


def test_concurrent_swaps_are_serialized() -> None:
    ledger = BalanceTable()
    ledger.mint(LP, TOKEN_A, 10**24)
    ledger.mint(LP, TOKEN_B, 10**24)
    for trader in TRADERS:
        ledger.mint(trader, TOKEN_A, 10**20)
        ledger.mint(trader, TOKEN_B, 10**20)
    amm = BasicAMM(TOKEN_A, TOKEN_B, ledger)
    amm.add_liquidity(10**22, 10**22, 0, 0, LP)

    barrier = threading.Barrier(len(TRADERS))
    errors = []

    def trade(idx: int, trader: str) -> None:
        barrier.wait()
        try:
            for n in range(25):
                asset_in = TOKEN_A if (idx + n) % 2 == 0 else TOKEN_B
                amm.swap(asset_in, 10**18 + n, 0, trader)
        except Exception as exc:  # surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=trade, args=(i, t)) for i, t in enumerate(TRADERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert errors == []
    swaps = [e for e in amm.events if isinstance(e, Swap)]
    assert len(swaps) == len(TRADERS) * 25

    # Replaying the recorded order against a fresh pool reproduces the final state.
    replay_ledger = BalanceTable()
    replay_ledger.mint(LP, TOKEN_A, 10**24)
    replay_ledger.mint(LP, TOKEN_B, 10**24)
    for trader in TRADERS:
        replay_ledger.mint(trader, TOKEN_A, 10**20)
        replay_ledger.mint(trader, TOKEN_B, 10**20)
    replay = BasicAMM(TOKEN_A, TOKEN_B, replay_ledger)
    replay.add_liquidity(10**22, 10**22, 0, 0, LP)
    for ev in swaps:
        assert replay.swap(ev.asset_in, ev.amount_in, 0, ev.recipient) == ev.amount_out

    assert replay.get_reserves() == amm.get_reserves()
    assert replay_ledger.get_all_balances() == ledger.get_all_balances()
    assert amm.check_invariants() == []


def test_concurrent_liquidity_and_swaps_keep_share_supply_consistent() -> None:
    ledger = BalanceTable()
    providers = TRADERS[:4]
    for holder in providers + [LP]:
        ledger.mint(holder, TOKEN_A, 10**24)
        ledger.mint(holder, TOKEN_B, 10**24)
    amm = BasicAMM(TOKEN_A, TOKEN_B, ledger)
    amm.add_liquidity(10**21, 10**21, 0, 0, LP)

    errors = []

    def provide(holder: str) -> None:
        try:
            for _ in range(10):
                amm.add_liquidity(10**19, 10**19, 0, 0, holder)
                amm.swap(TOKEN_A, 10**18, 0, holder)
                amm.remove_liquidity(amm.balance_of(holder) // 2, 0, 0, holder)
        except Exception as exc:  # surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=provide, args=(h,)) for h in providers]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert errors == []
    assert amm.check_invariants() == []
    assert amm.shares.total_supply() == amm.total_supply()
    reserve_a, reserve_b = amm.get_reserves()
    assert ledger.get(amm.address, TOKEN_A) == reserve_a
    assert ledger.get(amm.address, TOKEN_B) == reserve_b
