"""
Core AMM operations: registry, pools, liquidity and swaps.

Every function here mutates the `LedgerState` it is given; atomicity comes
from running it against a scratch copy (see `pairswap.integration.engine`).
"""

from .liquidity import DepositResult, WithdrawResult, deposit_liquidity, withdraw_liquidity
from .pools import create_pool, get_pool, pool_reserves
from .registry import create_amm, get_amm
from .swap import SwapQuote, quote_swap, swap_exact_tokens_for_tokens

__all__ = [
    "DepositResult",
    "WithdrawResult",
    "SwapQuote",
    "create_amm",
    "get_amm",
    "create_pool",
    "get_pool",
    "pool_reserves",
    "deposit_liquidity",
    "withdraw_liquidity",
    "quote_swap",
    "swap_exact_tokens_for_tokens",
]
