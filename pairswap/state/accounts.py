"""
AMM and pool records.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import IdenticalAssets, InvalidFee, InvalidMints
from ..kernels.cpmm_swap import BPS_DENOM
from .balances import AssetId, Owner
from .canonical import canonical_id, require_identity


@dataclass(frozen=True)
class AmmState:
    """
    Trading venue record.

    Attributes:
        id: 32-byte AMM identifier (hex string)
        address: Derived record address
        fee_bps: Swap fee in basis points, [0, 10000)
        admin: Identity allowed to run admin-gated extensions (none yet)
    """

    id: str
    address: str
    fee_bps: int
    admin: Owner

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", canonical_id(self.id, name="id"))
        object.__setattr__(self, "address", canonical_id(self.address, name="address"))
        if not isinstance(self.fee_bps, int) or isinstance(self.fee_bps, bool):
            raise TypeError("fee_bps must be an int")
        if not (0 <= self.fee_bps < BPS_DENOM):
            raise InvalidFee(f"fee_bps must be in [0, {BPS_DENOM}): {self.fee_bps}")
        require_identity(self.admin, name="admin")


@dataclass(frozen=True)
class PoolState:
    """
    Reserve/share record for one asset pair under one AMM.

    Reserves are not stored here: they are the custody balances of
    `pool_authority` in `asset_a` / `asset_b`. Share supply lives in the share
    ledger under `liquidity_mint`.

    Attributes:
        address: Pool slot address (derived from amm, asset_a, asset_b)
        amm: AMM record address
        amm_id: AMM identifier (kept for fee lookups and address re-derivation)
        asset_a: First asset (must be < asset_b byte-lexicographically)
        asset_b: Second asset
        pool_authority: Derived owner of both vaults and of the share mint
        liquidity_mint: Derived share mint id
    """

    address: str
    amm: str
    amm_id: str
    asset_a: AssetId
    asset_b: AssetId
    pool_authority: Owner
    liquidity_mint: str

    def __post_init__(self) -> None:
        for name in ("address", "amm", "amm_id", "asset_a", "asset_b", "pool_authority", "liquidity_mint"):
            object.__setattr__(self, name, canonical_id(getattr(self, name), name=name))
        if self.asset_a == self.asset_b:
            raise IdenticalAssets(f"pool assets must differ: {self.asset_a}")
        if self.asset_a > self.asset_b:
            raise InvalidMints(f"assets must be in canonical order: {self.asset_a} < {self.asset_b}")

    def reserve_assets(self, direction_a_to_b: bool) -> tuple[AssetId, AssetId]:
        """(asset_in, asset_out) for a swap direction."""
        if direction_a_to_b:
            return self.asset_a, self.asset_b
        return self.asset_b, self.asset_a

    def __repr__(self) -> str:
        return (
            f"PoolState(address={self.address[:18]}..., "
            f"assets=({self.asset_a[:10]}..., {self.asset_b[:10]}...))"
        )
