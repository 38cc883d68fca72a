"""
Pool creation and lookup.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..errors import AccountNotFound, AddressMismatch, AlreadyExists, IdenticalAssets, InvalidMints
from ..state.accounts import PoolState
from ..state.addressing import derive_liquidity_mint, derive_pool_address, derive_pool_authority
from ..state.balances import Amount
from ..state.canonical import canonical_id
from ..state.ledger import LedgerState
from .registry import get_amm

logger = logging.getLogger(__name__)


def create_pool(
    state: LedgerState,
    amm_id: str,
    asset_a: str,
    asset_b: str,
    *,
    pool_address: Optional[str] = None,
) -> PoolState:
    """
    Create the pool for `(amm, asset_a, asset_b)` with an empty share mint and
    two empty vaults owned by the derived pool authority.

    The pair must already be in canonical order (asset_a < asset_b). It is
    never reordered: a reversed pair derives a different slot address, so a
    caller-supplied `pool_address` computed from the canonical order fails
    with AddressMismatch, and without one the order check fails with
    InvalidMints.

    Raises:
        IdenticalAssets: asset_a == asset_b
        AddressMismatch: pool_address does not match the derived slot
        InvalidMints: asset_a > asset_b
        AccountNotFound: the AMM does not exist
        AlreadyExists: the pool slot is taken
    """
    asset_a = canonical_id(asset_a, name="asset_a")
    asset_b = canonical_id(asset_b, name="asset_b")
    if asset_a == asset_b:
        raise IdenticalAssets(f"pool assets must differ: {asset_a}")

    amm = get_amm(state, amm_id)
    derived = derive_pool_address(amm.id, asset_a, asset_b)
    if pool_address is not None and canonical_id(pool_address, name="pool_address") != derived:
        raise AddressMismatch(f"pool address {pool_address} does not match derived {derived}")
    if asset_a > asset_b:
        raise InvalidMints(f"assets must be in canonical order: {asset_a} < {asset_b}")
    if derived in state.pools:
        raise AlreadyExists(f"pool already exists: {derived}")

    pool = PoolState(
        address=derived,
        amm=amm.address,
        amm_id=amm.id,
        asset_a=asset_a,
        asset_b=asset_b,
        pool_authority=derive_pool_authority(amm.id, asset_a, asset_b),
        liquidity_mint=derive_liquidity_mint(amm.id, asset_a, asset_b),
    )
    state.shares.create_mint(pool.liquidity_mint, pool.pool_authority)
    state.pools[derived] = pool
    logger.info("Pool %s created: %s/%s amm=%s fee_bps=%d", derived, asset_a, asset_b, amm.id, amm.fee_bps)
    return pool


def get_pool(state: LedgerState, pool_address: str) -> PoolState:
    address = canonical_id(pool_address, name="pool_address")
    pool = state.pools.get(address)
    if pool is None:
        raise AccountNotFound(f"pool not found: {pool_address}")
    return pool


def pool_reserves(state: LedgerState, pool: PoolState) -> Tuple[Amount, Amount]:
    """(reserve_a, reserve_b): the vault balances held by the pool authority."""
    return (
        state.balances.balance_of(pool.asset_a, pool.pool_authority),
        state.balances.balance_of(pool.asset_b, pool.pool_authority),
    )


def pool_fee_bps(state: LedgerState, pool: PoolState) -> int:
    amm = state.amms.get(pool.amm)
    if amm is None:
        raise AccountNotFound(f"AMM not found for pool {pool.address}")
    return amm.fee_bps
