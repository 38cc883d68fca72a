"""
State management for the pairswap AMM
"""

from .accounts import AmmState, PoolState
from .balances import BalanceTable
from .ledger import LedgerState
from .shares import MintRecord, ShareLedger

__all__ = [
    "AmmState",
    "PoolState",
    "BalanceTable",
    "LedgerState",
    "MintRecord",
    "ShareLedger",
]
