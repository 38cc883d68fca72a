"""
Deterministic address derivation for AMM, pool, authority and share-mint records.

    address = sha256(domain_sep("address") || uvarint(len(kind)) || kind || (uvarint(len(seed)) || seed)*)

Every seed is length-prefixed, so distinct seed tuples never share an encoding.
Seeds are the raw 32-byte values of canonical ids, so `0xAB..` and `ab..` derive
the same address.
"""

from __future__ import annotations

import hashlib

from .canonical import canonical_id, domain_sep_bytes, encode_bytes, id_bytes


KIND_AMM = b"amm"
KIND_POOL = b"pool"
KIND_AUTHORITY = b"authority"
KIND_LIQUIDITY = b"liquidity"


def derive_address(kind: bytes, *seeds: bytes) -> str:
    if not isinstance(kind, bytes) or not kind:
        raise TypeError("kind must be non-empty bytes")
    data = domain_sep_bytes("address", version=1) + encode_bytes(kind)
    for seed in seeds:
        data += encode_bytes(seed)
    return "0x" + hashlib.sha256(data).hexdigest()


def derive_amm_address(amm_id: str) -> str:
    return derive_address(KIND_AMM, id_bytes(amm_id, name="amm_id"))


def _pair_seeds(amm_id: str, asset_a: str, asset_b: str) -> tuple[bytes, bytes, bytes]:
    amm_address = derive_amm_address(amm_id)
    return (
        id_bytes(amm_address, name="amm_address"),
        id_bytes(asset_a, name="asset_a"),
        id_bytes(asset_b, name="asset_b"),
    )


def derive_pool_address(amm_id: str, asset_a: str, asset_b: str) -> str:
    """
    Pool slot address for `(amm, asset_a, asset_b)`.

    Order-sensitive on purpose: callers must pass the pair in canonical
    (ascending) order, exactly as the pool will store it.
    """
    return derive_address(KIND_POOL, *_pair_seeds(amm_id, asset_a, asset_b))


def derive_pool_authority(amm_id: str, asset_a: str, asset_b: str) -> str:
    return derive_address(KIND_AUTHORITY, *_pair_seeds(amm_id, asset_a, asset_b))


def derive_liquidity_mint(amm_id: str, asset_a: str, asset_b: str) -> str:
    return derive_address(KIND_LIQUIDITY, *_pair_seeds(amm_id, asset_a, asset_b))


def canonical_pair(asset_x: str, asset_y: str) -> tuple[str, str]:
    """Return the pair in canonical order (client-side helper; the engine never reorders)."""
    x = canonical_id(asset_x, name="asset_x")
    y = canonical_id(asset_y, name="asset_y")
    return (x, y) if x <= y else (y, x)
