# [TESTER] v1

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import assume, given, settings

from basic_amm import BasicAMM
from basic_amm.core.liquidity import add_liquidity, create_pool, remove_liquidity
from basic_amm.kernels.python.cpmm_swap import calculate_slippage_percent, get_amount_out, swap_exact_in
from basic_amm.state.balances import BalanceTable

TOKEN_A = "0x" + "aa" * 20
TOKEN_B = "0x" + "bb" * 20
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20

_reserve = st.integers(min_value=1, max_value=10**24)
_amount = st.integers(min_value=1, max_value=10**24)


@st.composite
def _fee(draw):
    den = draw(st.integers(min_value=1, max_value=10_000))
    num = draw(st.integers(min_value=1, max_value=den))
    return num, den


@given(_amount, _reserve, _reserve, _fee())
def test_swap_never_decreases_constant_product(amount_in: int, reserve_in: int, reserve_out: int, fee) -> None:
    num, den = fee
    out = get_amount_out(amount_in, reserve_in, reserve_out, num, den)
    assert 0 <= out < reserve_out
    assume(out > 0)
    res = swap_exact_in(
        reserve_in=reserve_in, reserve_out=reserve_out, amount_in=amount_in, fee_numerator=num, fee_denominator=den
    )
    assert res.k_after >= res.k_before
    if num < den:
        assert res.k_after > res.k_before


@given(_amount, _reserve, _reserve, _fee())
def test_output_is_monotone_in_input(amount_in: int, reserve_in: int, reserve_out: int, fee) -> None:
    num, den = fee
    a = get_amount_out(amount_in, reserve_in, reserve_out, num, den)
    b = get_amount_out(amount_in + 1, reserve_in, reserve_out, num, den)
    assert b >= a


@given(_amount, _reserve, _reserve)
def test_slippage_bounded_and_monotone(amount_in: int, reserve_in: int, reserve_out: int) -> None:
    s = calculate_slippage_percent(amount_in, reserve_in, reserve_out)
    assert 0 <= s < 10_000
    assert calculate_slippage_percent(amount_in * 2, reserve_in, reserve_out) >= s


@settings(max_examples=200)
@given(
    st.integers(min_value=1_001, max_value=10**20),
    st.integers(min_value=1_001, max_value=10**20),
    st.integers(min_value=1, max_value=1_000),
    st.integers(min_value=1, max_value=1_000),
)
def test_deposit_then_withdraw_never_profits(a0: int, b0: int, pct_a: int, pct_b: int) -> None:
    pool = create_pool(TOKEN_A, TOKEN_B)
    add_liquidity(pool, a0, b0)
    # Second deposit is at least 1% of the pool on each side, so it mints shares.
    used_a, used_b, shares = add_liquidity(pool, a0 * pct_a // 100, b0 * pct_b // 100)
    out_a, out_b = remove_liquidity(pool, shares)
    assert out_a <= used_a
    assert out_b <= used_b
    assert pool.check_invariants() == []


@settings(max_examples=100)
@given(
    st.integers(min_value=10**6, max_value=10**18),
    st.integers(min_value=10**6, max_value=10**18),
    st.lists(
        st.tuples(st.booleans(), st.integers(min_value=1, max_value=10**17)),
        min_size=1,
        max_size=12,
    ),
)
def test_facade_ledger_tracks_reserves(a0: int, b0: int, trades) -> None:
    ledger = BalanceTable()
    for holder in (ALICE, BOB):
        ledger.mint(holder, TOKEN_A, 10**19)
        ledger.mint(holder, TOKEN_B, 10**19)
    amm = BasicAMM(TOKEN_A, TOKEN_B, ledger)
    amm.add_liquidity(a0, b0, 0, 0, ALICE)

    k = amm.pool.get_constant_product()
    for a_to_b, amount in trades:
        try:
            amm.swap(TOKEN_A if a_to_b else TOKEN_B, amount, 0, BOB)
        except ValueError:
            continue
        k_next = amm.pool.get_constant_product()
        assert k_next >= k
        k = k_next

    reserve_a, reserve_b = amm.get_reserves()
    assert ledger.get(amm.address, TOKEN_A) == reserve_a
    assert ledger.get(amm.address, TOKEN_B) == reserve_b
    assert ledger.total_supply(TOKEN_A) == 2 * 10**19
    assert amm.check_invariants() == []

    # The sole provider can always exit and gets the whole pool back.
    assert amm.remove_liquidity(amm.balance_of(ALICE), 0, 0, ALICE) == (reserve_a, reserve_b)
    assert amm.get_reserves() == (0, 0)
