# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.liquidity import deposit_liquidity
from pairswap.core.pools import create_pool, pool_reserves
from pairswap.core.registry import create_amm
from pairswap.core.swap import quote_swap, swap_exact_tokens_for_tokens
from pairswap.errors import InsufficientBalance, InsufficientLiquidity, InvalidAmount, SlippageExceeded
from pairswap.state.accounts import PoolState
from pairswap.state.ledger import LedgerState
from pairswap.state.snapshot import compute_state_root

AMM_ID = "0x" + "aa" * 32
ASSET_A = "0x" + "11" * 32
ASSET_B = "0x" + "22" * 32


def _pool(fee_bps: int = 500) -> tuple[LedgerState, PoolState]:
    state = LedgerState()
    create_amm(state, AMM_ID, fee_bps, "admin")
    pool = create_pool(state, AMM_ID, ASSET_A, ASSET_B)
    state.balances.set("lp", ASSET_A, 1000)
    state.balances.set("lp", ASSET_B, 2000)
    deposit_liquidity(state, pool.address, 1000, 2000, "lp")
    state.balances.set("trader", ASSET_A, 1_000)
    state.balances.set("trader", ASSET_B, 1_000)
    return state, pool


def test_reference_swap_a_to_b() -> None:
    state, pool = _pool()
    out = swap_exact_tokens_for_tokens(state, pool.address, True, 100, 173, "trader")

    assert out == 173
    assert pool_reserves(state, pool) == (1100, 1827)
    assert state.balances.balance_of(ASSET_A, "trader") == 900
    assert state.balances.balance_of(ASSET_B, "trader") == 1173


def test_swap_b_to_a_uses_reversed_reserves() -> None:
    state, pool = _pool(fee_bps=0)
    out = swap_exact_tokens_for_tokens(state, pool.address, False, 200, 0, "trader")
    # floor(200 * 1000 / 2200)
    assert out == 90
    assert pool_reserves(state, pool) == (910, 2200)


def test_slippage_exceeded_changes_nothing() -> None:
    state, pool = _pool()
    root = compute_state_root(state)
    with pytest.raises(SlippageExceeded, match="173 < minimum_output 200"):
        swap_exact_tokens_for_tokens(state, pool.address, True, 100, 200, "trader")
    assert compute_state_root(state) == root


def test_swap_clamps_input_to_balance() -> None:
    state, pool = _pool()
    state.balances.set("trader", ASSET_A, 50)
    out = swap_exact_tokens_for_tokens(state, pool.address, True, 100, 0, "trader")

    # taxed = floor(50 * 0.95) = 47; out = floor(47 * 2000 / 1047)
    assert out == 89
    assert state.balances.balance_of(ASSET_A, "trader") == 0
    assert pool_reserves(state, pool) == (1050, 1911)


def test_swap_strict_mode_fails_fast() -> None:
    state, pool = _pool()
    state.balances.set("trader", ASSET_A, 50)
    with pytest.raises(InsufficientBalance):
        swap_exact_tokens_for_tokens(state, pool.address, True, 100, 0, "trader", clamp_to_balance=False)


def test_swap_with_no_balance() -> None:
    state, pool = _pool()
    with pytest.raises(InsufficientBalance, match="holds no"):
        swap_exact_tokens_for_tokens(state, pool.address, True, 100, 0, "nobody")


def test_swap_zero_input() -> None:
    state, pool = _pool()
    with pytest.raises(InvalidAmount):
        swap_exact_tokens_for_tokens(state, pool.address, True, 0, 0, "trader")


def test_swap_against_empty_pool() -> None:
    state = LedgerState()
    create_amm(state, AMM_ID, 500, "admin")
    pool = create_pool(state, AMM_ID, ASSET_A, ASSET_B)
    state.balances.set("trader", ASSET_A, 100)
    with pytest.raises(InsufficientLiquidity, match="empty reserve"):
        swap_exact_tokens_for_tokens(state, pool.address, True, 100, 0, "trader")


def test_direction_must_be_bool() -> None:
    state, pool = _pool()
    with pytest.raises(TypeError):
        swap_exact_tokens_for_tokens(state, pool.address, 1, 100, 0, "trader")  # type: ignore[arg-type]


def test_quote_matches_execution_and_is_read_only() -> None:
    state, pool = _pool()
    root = compute_state_root(state)
    quote = quote_swap(state, pool.address, True, 100)
    assert compute_state_root(state) == root
    assert (quote.asset_in, quote.asset_out) == (ASSET_A, ASSET_B)
    assert (quote.taxed_in, quote.amount_out, quote.fee_bps) == (95, 173, 500)
    assert swap_exact_tokens_for_tokens(state, pool.address, True, 100, quote.amount_out, "trader") == 173
