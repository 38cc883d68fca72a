# [TESTER] v1

from __future__ import annotations

import copy

import pytest

from pairswap.core.liquidity import deposit_liquidity
from pairswap.core.pools import create_pool
from pairswap.core.registry import create_amm
from pairswap.state.addressing import derive_pool_authority
from pairswap.state.ledger import LedgerState
from pairswap.state.snapshot import compute_state_root, snapshot_from_state, state_from_snapshot

AMM_ID = "0x" + "aa" * 32
ASSET_A = "0x" + "11" * 32
ASSET_B = "0x" + "22" * 32


def _populated_state() -> LedgerState:
    state = LedgerState()
    create_amm(state, AMM_ID, 30, "admin")
    pool = create_pool(state, AMM_ID, ASSET_A, ASSET_B)
    state.balances.set("alice", ASSET_A, 5_000)
    state.balances.set("alice", ASSET_B, 5_000)
    deposit_liquidity(state, pool.address, 1_000, 2_000, "alice")
    return state


def test_snapshot_roundtrip_is_deterministic() -> None:
    state = _populated_state()
    snap1 = snapshot_from_state(state)
    state2 = state_from_snapshot(snap1.data)
    snap2 = snapshot_from_state(state2)

    assert snap1.canonical_bytes() == snap2.canonical_bytes()
    assert snap1.commitment_hex() == snap2.commitment_hex()
    assert state2.shares.verify_supply()
    assert state2.pools.keys() == state.pools.keys()


def test_state_root_ignores_insertion_order() -> None:
    s1 = LedgerState()
    s1.balances.set("alice", ASSET_A, 1)
    s1.balances.set("bob", ASSET_B, 2)

    s2 = LedgerState()
    s2.balances.set("bob", ASSET_B, 2)
    s2.balances.set("alice", ASSET_A, 1)

    assert compute_state_root(s1) == compute_state_root(s2)


def test_state_root_changes_with_content() -> None:
    state = _populated_state()
    root = compute_state_root(state)
    state.balances.credit("alice", ASSET_A, 1)
    assert compute_state_root(state) != root


def test_snapshot_rejects_supply_mismatch() -> None:
    data = snapshot_from_state(_populated_state()).data
    data["share_mints"][0]["supply"] += 1
    with pytest.raises(ValueError, match="share supply mismatch"):
        state_from_snapshot(data)


def test_snapshot_rejects_unknown_version_and_duplicates() -> None:
    data = snapshot_from_state(_populated_state()).data
    with pytest.raises(ValueError, match="unsupported snapshot version"):
        state_from_snapshot({**data, "version": 2})

    dup = dict(data)
    dup["balances"] = data["balances"] + data["balances"][:1]
    with pytest.raises(ValueError, match="duplicate balance entry"):
        state_from_snapshot(dup)


def test_state_root_is_the_commitment_digest() -> None:
    snap = snapshot_from_state(_populated_state())
    assert snap.commitment_hex() == "0x" + snap.commitment_bytes().hex()
    assert compute_state_root(_populated_state()) == snap.commitment_hex()


def test_snapshot_roundtrips_nonces() -> None:
    state = _populated_state()
    state.nonces.set_last("alice", 3)
    data = snapshot_from_state(state).data
    assert data["nonces"] == [{"actor": "alice", "last_nonce": 3}]

    restored = state_from_snapshot(data)
    assert restored.nonces.get_last("alice") == 3
    assert restored.nonces.get_last("bob") == 0
    assert compute_state_root(restored) == compute_state_root(state)

    dup = copy.deepcopy(data)
    dup["nonces"] = dup["nonces"] * 2
    with pytest.raises(ValueError, match="duplicate nonce entry"):
        state_from_snapshot(dup)


def test_nonces_change_the_state_root() -> None:
    state = _populated_state()
    root = compute_state_root(state)
    state.nonces.set_last("alice", 1)
    assert compute_state_root(state) != root


@pytest.mark.parametrize("field_name", ["address", "pool_authority", "liquidity_mint"])
def test_snapshot_rejects_pool_addresses_that_do_not_rederive(field_name: str) -> None:
    data = copy.deepcopy(snapshot_from_state(_populated_state()).data)
    # A well-formed id that belongs to a different pair.
    data["pools"][0][field_name] = derive_pool_authority(AMM_ID, ASSET_A, "0x" + "33" * 32)
    with pytest.raises(ValueError, match=f"{field_name} does not match its derivation"):
        state_from_snapshot(data)


def test_snapshot_rejects_pool_with_swapped_amm_id() -> None:
    other_amm = "0x" + "bb" * 32
    state = _populated_state()
    create_amm(state, other_amm, 30, "admin")
    data = copy.deepcopy(snapshot_from_state(state).data)
    data["pools"][0]["amm_id"] = other_amm
    with pytest.raises(ValueError, match="amm does not match amm_id"):
        state_from_snapshot(data)
