# [TESTER] v1

from __future__ import annotations

import pytest

from pairswap.core.pools import create_pool, get_pool, pool_reserves
from pairswap.core.registry import create_amm
from pairswap.errors import AccountNotFound, AddressMismatch, AlreadyExists, IdenticalAssets, InvalidMints
from pairswap.state.addressing import derive_liquidity_mint, derive_pool_address, derive_pool_authority
from pairswap.state.ledger import LedgerState

AMM_ID = "0x" + "aa" * 32
ASSET_A = "0x" + "11" * 32
ASSET_B = "0x" + "22" * 32


def _state() -> LedgerState:
    state = LedgerState()
    create_amm(state, AMM_ID, 500, "admin")
    return state


def test_create_pool_initializes_empty_vaults_and_mint() -> None:
    state = _state()
    pool = create_pool(state, AMM_ID, ASSET_A, ASSET_B)

    assert pool.address == derive_pool_address(AMM_ID, ASSET_A, ASSET_B)
    assert pool.pool_authority == derive_pool_authority(AMM_ID, ASSET_A, ASSET_B)
    assert pool.liquidity_mint == derive_liquidity_mint(AMM_ID, ASSET_A, ASSET_B)
    assert get_pool(state, pool.address) == pool
    assert pool_reserves(state, pool) == (0, 0)
    assert state.shares.supply(pool.liquidity_mint) == 0
    assert state.shares.authority(pool.liquidity_mint) == pool.pool_authority


def test_create_pool_accepts_matching_caller_address() -> None:
    state = _state()
    address = derive_pool_address(AMM_ID, ASSET_A, ASSET_B)
    assert create_pool(state, AMM_ID, ASSET_A, ASSET_B, pool_address=address).address == address


def test_identical_assets() -> None:
    state = _state()
    with pytest.raises(IdenticalAssets):
        create_pool(state, AMM_ID, ASSET_A, ASSET_A)
    # IdenticalAssets is a kind of InvalidMints.
    with pytest.raises(InvalidMints):
        create_pool(state, AMM_ID, ASSET_B, ASSET_B)


def test_reversed_pair_is_rejected_not_normalized() -> None:
    state = _state()
    with pytest.raises(InvalidMints, match="canonical order"):
        create_pool(state, AMM_ID, ASSET_B, ASSET_A)
    assert state.pools == {}


def test_reversed_pair_with_canonical_address_is_a_mismatch() -> None:
    state = _state()
    address = derive_pool_address(AMM_ID, ASSET_A, ASSET_B)
    with pytest.raises(AddressMismatch):
        create_pool(state, AMM_ID, ASSET_B, ASSET_A, pool_address=address)


def test_duplicate_pool() -> None:
    state = _state()
    create_pool(state, AMM_ID, ASSET_A, ASSET_B)
    with pytest.raises(AlreadyExists, match="pool already exists"):
        create_pool(state, AMM_ID, ASSET_A, ASSET_B)


def test_pool_requires_existing_amm() -> None:
    with pytest.raises(AccountNotFound, match="AMM not found"):
        create_pool(LedgerState(), AMM_ID, ASSET_A, ASSET_B)


def test_same_pair_under_two_amms() -> None:
    state = _state()
    other = "0x" + "bb" * 32
    create_amm(state, other, 30, "admin")
    p1 = create_pool(state, AMM_ID, ASSET_A, ASSET_B)
    p2 = create_pool(state, other, ASSET_A, ASSET_B)
    assert p1.address != p2.address
    assert p1.pool_authority != p2.pool_authority
