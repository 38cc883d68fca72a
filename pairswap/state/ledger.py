"""
Ledger state: every record the engine reads or writes.

Records are content-addressed: AMMs are keyed by their derived address and
pools by their derived slot address. There is no process-wide singleton; a
`LedgerState` is a plain value the engine copies, mutates and commits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .accounts import AmmState, PoolState
from .balances import BalanceTable
from .nonces import NonceTable
from .shares import ShareLedger


@dataclass
class LedgerState:
    balances: BalanceTable = field(default_factory=BalanceTable)
    shares: ShareLedger = field(default_factory=ShareLedger)
    amms: Dict[str, AmmState] = field(default_factory=dict)
    pools: Dict[str, PoolState] = field(default_factory=dict)
    nonces: NonceTable = field(default_factory=NonceTable)

    def copy(self) -> "LedgerState":
        # Records are frozen dataclasses, so copying the dicts is enough.
        return LedgerState(
            balances=self.balances.copy(),
            shares=self.shares.copy(),
            amms=dict(self.amms),
            pools=dict(self.pools),
            nonces=self.nonces.copy(),
        )

    def is_pool_authority(self, owner: str) -> bool:
        return any(pool.pool_authority == owner for pool in self.pools.values())
