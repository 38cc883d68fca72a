"""
Ledger state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / snapshot distribution.
- Round-trippable into `LedgerState`.
- Explicit versioning.

The state root is the domain-separated SHA-256 of the snapshot's canonical
bytes, so two states with the same logical content hash the same regardless
of insertion order.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .accounts import AmmState, PoolState
from .addressing import derive_amm_address, derive_liquidity_mint, derive_pool_address, derive_pool_authority
from .canonical import canonical_json_bytes, domain_sep_bytes
from .ledger import LedgerState


LEDGER_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str, max_len: int = 512) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_list(snapshot: Mapping[str, Any], key: str, *, max_len: int) -> list:
    entries = snapshot.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise TypeError(f"snapshot.{key} must be a list")
    if len(entries) > max_len:
        raise ValueError(f"too many {key} entries: {len(entries)} > {max_len}")
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise TypeError(f"snapshot.{key} entries must be objects")
    return entries


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Deterministic, versioned snapshot of `LedgerState`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        payload = domain_sep_bytes("ledger_snapshot", version=self.version) + self.canonical_bytes()
        return hashlib.sha256(payload).digest()

    def commitment_hex(self) -> str:
        return "0x" + self.commitment_bytes().hex()


def snapshot_from_state(state: LedgerState) -> LedgerSnapshot:
    amm_entries = [
        {"id": amm.id, "address": address, "fee_bps": int(amm.fee_bps), "admin": amm.admin}
        for address, amm in state.amms.items()
    ]
    amm_entries.sort(key=lambda e: e["address"])

    pool_entries = [
        {
            "address": address,
            "amm": pool.amm,
            "amm_id": pool.amm_id,
            "asset_a": pool.asset_a,
            "asset_b": pool.asset_b,
            "pool_authority": pool.pool_authority,
            "liquidity_mint": pool.liquidity_mint,
        }
        for address, pool in state.pools.items()
    ]
    pool_entries.sort(key=lambda e: e["address"])

    balance_entries = [
        {"owner": owner, "asset": asset, "amount": int(amount)}
        for (owner, asset), amount in state.balances.get_all_balances().items()
    ]
    balance_entries.sort(key=lambda e: (e["owner"], e["asset"]))

    mint_entries = [
        {"mint": mint, "authority": record.authority, "supply": int(record.supply)}
        for mint, record in state.shares.get_all_mints().items()
    ]
    mint_entries.sort(key=lambda e: e["mint"])

    share_entries = [
        {"holder": holder, "mint": mint, "amount": int(amount)}
        for (holder, mint), amount in state.shares.get_all_balances().items()
    ]
    share_entries.sort(key=lambda e: (e["holder"], e["mint"]))

    nonce_entries = [{"actor": actor, "last_nonce": int(last)} for actor, last in state.nonces.get_all().items()]
    nonce_entries.sort(key=lambda e: e["actor"])

    data: Dict[str, Any] = {
        "version": LEDGER_SNAPSHOT_VERSION,
        "amms": amm_entries,
        "pools": pool_entries,
        "balances": balance_entries,
        "share_mints": mint_entries,
        "share_balances": share_entries,
        "nonces": nonce_entries,
    }
    return LedgerSnapshot(version=LEDGER_SNAPSHOT_VERSION, data=data)


def state_from_snapshot(snapshot: Mapping[str, Any], *, max_entries: int = 200_000) -> LedgerState:
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")

    version = snapshot.get("version", LEDGER_SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != LEDGER_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    state = LedgerState()

    for entry in _require_list(snapshot, "amms", max_len=max_entries):
        amm = AmmState(
            id=_require_str(entry.get("id"), name="amm.id"),
            address=_require_str(entry.get("address"), name="amm.address"),
            fee_bps=_require_int(entry.get("fee_bps"), name="amm.fee_bps"),
            admin=_require_str(entry.get("admin"), name="amm.admin"),
        )
        if amm.address != derive_amm_address(amm.id):
            raise ValueError(f"amm {amm.address} does not match the address derived from its id")
        if amm.address in state.amms:
            raise ValueError("duplicate amm entry")
        state.amms[amm.address] = amm

    for entry in _require_list(snapshot, "pools", max_len=max_entries):
        pool = PoolState(
            **{
                name: _require_str(entry.get(name), name=f"pool.{name}")
                for name in ("address", "amm", "amm_id", "asset_a", "asset_b", "pool_authority", "liquidity_mint")
            }
        )
        if pool.address in state.pools:
            raise ValueError("duplicate pool entry")
        if pool.amm not in state.amms:
            raise ValueError(f"pool {pool.address} references unknown amm {pool.amm}")
        if not pool.asset_a < pool.asset_b:
            raise ValueError(f"pool {pool.address}: assets not in canonical order")
        if pool.amm != derive_amm_address(pool.amm_id):
            raise ValueError(f"pool {pool.address}: amm does not match amm_id")
        seeds = (pool.amm_id, pool.asset_a, pool.asset_b)
        derived = {
            "address": derive_pool_address(*seeds),
            "pool_authority": derive_pool_authority(*seeds),
            "liquidity_mint": derive_liquidity_mint(*seeds),
        }
        for name, expected in derived.items():
            if getattr(pool, name) != expected:
                raise ValueError(f"pool {pool.address}: {name} does not match its derivation")
        state.pools[pool.address] = pool

    seen_balances: set[tuple[str, str]] = set()
    for entry in _require_list(snapshot, "balances", max_len=max_entries):
        owner = _require_str(entry.get("owner"), name="balance.owner")
        asset = _require_str(entry.get("asset"), name="balance.asset")
        if (owner, asset) in seen_balances:
            raise ValueError("duplicate balance entry (owner, asset)")
        seen_balances.add((owner, asset))
        state.balances.set(owner, asset, _require_int(entry.get("amount"), name="balance.amount"))

    recorded_supply: Dict[str, int] = {}
    for entry in _require_list(snapshot, "share_mints", max_len=max_entries):
        mint = _require_str(entry.get("mint"), name="share_mint.mint")
        state.shares.create_mint(mint, _require_str(entry.get("authority"), name="share_mint.authority"))
        recorded_supply[mint] = _require_int(entry.get("supply"), name="share_mint.supply")

    seen_shares: set[tuple[str, str]] = set()
    for entry in _require_list(snapshot, "share_balances", max_len=max_entries):
        holder = _require_str(entry.get("holder"), name="share_balance.holder")
        mint = _require_str(entry.get("mint"), name="share_balance.mint")
        if (holder, mint) in seen_shares:
            raise ValueError("duplicate share balance entry (holder, mint)")
        seen_shares.add((holder, mint))
        amount = _require_int(entry.get("amount"), name="share_balance.amount")
        state.shares.mint_to(mint, holder, amount, authority=state.shares.authority(mint))

    for mint, supply in recorded_supply.items():
        if state.shares.supply(mint) != supply:
            raise ValueError(f"share supply mismatch for {mint}: recorded {supply}")

    seen_actors: set[str] = set()
    for entry in _require_list(snapshot, "nonces", max_len=max_entries):
        actor = _require_str(entry.get("actor"), name="nonce.actor")
        if actor in seen_actors:
            raise ValueError("duplicate nonce entry (actor)")
        seen_actors.add(actor)
        last_nonce = _require_int(entry.get("last_nonce"), name="nonce.last_nonce")
        if last_nonce == 0:
            raise ValueError("nonce entries must have last_nonce > 0")
        state.nonces.set_last(actor, last_nonce)

    return state


def compute_state_root(state: LedgerState) -> str:
    return snapshot_from_state(state).commitment_hex()
