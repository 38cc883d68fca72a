# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.liquidity import deposit_liquidity, withdraw_liquidity
from pairswap.core.pools import create_pool, pool_reserves
from pairswap.core.registry import create_amm
from pairswap.errors import DepositTooSmall, InsufficientBalance, InsufficientLiquidity, InvalidAmount
from pairswap.state.accounts import PoolState
from pairswap.state.ledger import LedgerState
from pairswap.state.snapshot import compute_state_root

AMM_ID = "0x" + "aa" * 32
ASSET_A = "0x" + "11" * 32
ASSET_B = "0x" + "22" * 32


def _setup(balance_a: int = 10_000, balance_b: int = 10_000) -> tuple[LedgerState, PoolState]:
    state = LedgerState()
    create_amm(state, AMM_ID, 500, "admin")
    pool = create_pool(state, AMM_ID, ASSET_A, ASSET_B)
    state.balances.set("alice", ASSET_A, balance_a)
    state.balances.set("alice", ASSET_B, balance_b)
    return state, pool


def test_first_deposit_mints_sqrt_minus_lock() -> None:
    state, pool = _setup()
    res = deposit_liquidity(state, pool.address, 1000, 2000, "alice")

    assert res.shares_minted == 1314
    assert (res.amount_a, res.amount_b) == (1000, 2000)
    assert pool_reserves(state, pool) == (1000, 2000)
    assert state.shares.supply(pool.liquidity_mint) == 1314
    assert state.shares.balance_of(pool.liquidity_mint, "alice") == 1314
    assert state.balances.balance_of(ASSET_A, "alice") == 9000
    assert state.balances.balance_of(ASSET_B, "alice") == 8000


def test_first_deposit_too_small_changes_nothing() -> None:
    state, pool = _setup()
    root = compute_state_root(state)
    with pytest.raises(DepositTooSmall):
        deposit_liquidity(state, pool.address, 1, 1, "alice")
    assert compute_state_root(state) == root


def test_subsequent_deposit_preserves_ratio() -> None:
    state, pool = _setup()
    deposit_liquidity(state, pool.address, 1000, 2000, "alice")
    state.balances.set("bob", ASSET_A, 500)
    state.balances.set("bob", ASSET_B, 500)

    res = deposit_liquidity(state, pool.address, 500, 500, "bob")

    assert (res.amount_a, res.amount_b, res.shares_minted) == (250, 500, 328)
    assert pool_reserves(state, pool) == (1250, 2500)
    assert state.shares.supply(pool.liquidity_mint) == 1642
    # Unused desired amount stays with the depositor.
    assert state.balances.balance_of(ASSET_A, "bob") == 250
    assert state.balances.balance_of(ASSET_B, "bob") == 0


def test_deposit_minting_zero_shares_is_rejected() -> None:
    state, pool = _setup()
    deposit_liquidity(state, pool.address, 1000, 2000, "alice")
    with pytest.raises(DepositTooSmall, match="zero shares"):
        deposit_liquidity(state, pool.address, 1, 1, "alice")
    assert pool_reserves(state, pool) == (1000, 2000)


def test_deposit_clamps_to_balance_and_consumes_it() -> None:
    state, pool = _setup(balance_a=500, balance_b=5_000)
    res = deposit_liquidity(state, pool.address, 10_000, 1_000, "alice")

    assert (res.amount_a, res.amount_b) == (500, 1_000)
    assert res.shares_minted == 707 - 100
    assert state.balances.balance_of(ASSET_A, "alice") == 0


def test_deposit_strict_mode_fails_fast() -> None:
    state, pool = _setup(balance_a=500, balance_b=5_000)
    with pytest.raises(InsufficientBalance, match="exceeds balance"):
        deposit_liquidity(state, pool.address, 10_000, 1_000, "alice", clamp_to_balance=False)
    assert pool_reserves(state, pool) == (0, 0)


def test_withdraw_pays_out_proportional_share() -> None:
    state, pool = _setup()
    deposit_liquidity(state, pool.address, 1000, 2000, "alice")

    res = withdraw_liquidity(state, pool.address, 1314, "alice")

    assert (res.amount_a, res.amount_b) == (929, 1858)
    assert pool_reserves(state, pool) == (71, 142)
    assert state.shares.supply(pool.liquidity_mint) == 0
    assert state.balances.balance_of(ASSET_A, "alice") == 9000 + 929


def test_pool_accepts_a_new_first_deposit_after_full_withdrawal() -> None:
    state, pool = _setup()
    deposit_liquidity(state, pool.address, 1000, 2000, "alice")
    withdraw_liquidity(state, pool.address, 1314, "alice")

    res = deposit_liquidity(state, pool.address, 400, 400, "alice")

    assert res.shares_minted == 300
    assert pool_reserves(state, pool) == (471, 542)


def test_withdraw_more_than_owned_changes_nothing() -> None:
    state, pool = _setup()
    deposit_liquidity(state, pool.address, 1000, 2000, "alice")
    root = compute_state_root(state)

    with pytest.raises(InsufficientLiquidity, match="cannot withdraw"):
        withdraw_liquidity(state, pool.address, 1315, "alice")
    with pytest.raises(InsufficientLiquidity):
        withdraw_liquidity(state, pool.address, 1, "bob")

    assert compute_state_root(state) == root


def test_withdraw_zero_shares() -> None:
    state, pool = _setup()
    deposit_liquidity(state, pool.address, 1000, 2000, "alice")
    with pytest.raises(InvalidAmount):
        withdraw_liquidity(state, pool.address, 0, "alice")
