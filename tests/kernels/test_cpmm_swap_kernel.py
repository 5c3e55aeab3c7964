# [TESTER] v1

from __future__ import annotations

import pytest

from basic_amm.errors import (
    InsufficientAmount,
    InsufficientInput,
    InsufficientLiquidity,
    InsufficientOutputAmount,
)
from basic_amm.kernels.python.cpmm_swap import (
    calculate_effective_slippage_percent,
    calculate_slippage_percent,
    get_amount_out,
    quote,
    swap_exact_in,
)


def test_get_amount_out_exact_integer() -> None:
    # floor(1000 * 997 * 10000 / (10000 * 1000 + 1000 * 997)) = floor(906.61...)
    assert get_amount_out(1000, 10_000, 10_000, 997, 1000) == 906


def test_get_amount_out_zero_fee() -> None:
    assert get_amount_out(1000, 10_000, 10_000, 1, 1) == 909


def test_get_amount_out_is_below_reserve_out() -> None:
    assert get_amount_out(10**30, 1, 5, 997, 1000) == 4


def test_get_amount_out_preconditions() -> None:
    with pytest.raises(InsufficientInput):
        get_amount_out(0, 10_000, 10_000, 997, 1000)
    with pytest.raises(InsufficientInput):
        get_amount_out(-5, 10_000, 10_000, 997, 1000)
    with pytest.raises(InsufficientLiquidity):
        get_amount_out(1, 0, 10_000, 997, 1000)
    with pytest.raises(InsufficientLiquidity):
        get_amount_out(1, 10_000, 0, 997, 1000)
    with pytest.raises(ValueError, match="fee_numerator"):
        get_amount_out(1, 10_000, 10_000, 1001, 1000)


def test_swap_exact_in_post_state_and_k() -> None:
    res = swap_exact_in(reserve_in=10_000, reserve_out=10_000, amount_in=1000, fee_numerator=997, fee_denominator=1000)
    assert res.amount_out == 906
    assert (res.new_reserve_in, res.new_reserve_out) == (11_000, 9_094)
    assert res.k_after > res.k_before


def test_swap_exact_in_rejects_zero_output() -> None:
    with pytest.raises(InsufficientOutputAmount, match="trade too small"):
        swap_exact_in(reserve_in=10**9, reserve_out=1, amount_in=1, fee_numerator=997, fee_denominator=1000)


def test_quote_is_fee_less_floor_ratio() -> None:
    assert quote(50, 100, 200) == 100
    assert quote(10, 3, 2) == 6  # 20 / 3
    with pytest.raises(InsufficientAmount):
        quote(0, 100, 200)
    with pytest.raises(InsufficientLiquidity):
        quote(1, 0, 200)


def test_slippage_zero_for_tiny_trade() -> None:
    assert calculate_slippage_percent(1, 10_000, 10_000) == 0


def test_slippage_is_price_impact_in_hundredths_of_percent() -> None:
    # impact = 100 / (10_000 + 100) = 0.990...%
    assert calculate_slippage_percent(100, 10_000, 10_000) == 99
    # impact = 10_000 / 20_000 = 50%
    assert calculate_slippage_percent(10_000, 10_000, 10_000) == 5_000


def test_slippage_grows_monotonically() -> None:
    values = [calculate_slippage_percent(a, 10_000, 10_000) for a in range(1, 10_001, 97)]
    assert values == sorted(values)
    assert values[-1] > 0


def test_slippage_does_not_depend_on_reserve_out_scale() -> None:
    assert calculate_slippage_percent(500, 10_000, 1) == calculate_slippage_percent(500, 10_000, 10**24)


def test_effective_slippage_includes_fee() -> None:
    assert calculate_effective_slippage_percent(100, 10_000, 10_000, 997, 1000) == 128
    # With no fee both definitions agree.
    assert calculate_effective_slippage_percent(100, 10_000, 10_000, 1, 1) == 99


def test_slippage_preconditions() -> None:
    with pytest.raises(InsufficientInput):
        calculate_slippage_percent(0, 10_000, 10_000)
    with pytest.raises(InsufficientLiquidity):
        calculate_slippage_percent(1, 0, 10_000)
