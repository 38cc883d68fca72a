"""
pairswap: constant-product AMM pool accounting and pricing engine.

Quick start:

    from pairswap import Ledger

    ledger = Ledger()
    ledger.create_amm(amm_id, 500, admin="alice", signer="alice")
    pool = ledger.create_pool(amm_id, asset_a, asset_b, signer="alice")
    ledger.fund("alice", asset_a, 10_000)
    ledger.fund("alice", asset_b, 10_000)
    shares = ledger.deposit_liquidity(pool.address, 1_000, 2_000, depositor="alice")
"""

from .errors import AmmError
from .integration.config import EngineConfig, load_engine_config
from .integration.engine import Ledger, TxResult, apply_request
from .kernels.lp_math import MINIMUM_LIQUIDITY
from .state.addressing import canonical_pair, derive_pool_address

__version__ = "0.1.0"

__all__ = [
    "AmmError",
    "EngineConfig",
    "load_engine_config",
    "Ledger",
    "TxResult",
    "apply_request",
    "MINIMUM_LIQUIDITY",
    "canonical_pair",
    "derive_pool_address",
]
