"""
Swap engine: exact-input constant-product swaps against a single pool.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import InsufficientBalance, InsufficientLiquidity, InvalidAmount, InvariantViolated, SlippageExceeded
from ..kernels.cpmm_swap import SwapExactInResult, swap_exact_in
from ..kernels.safe_math import checked_mul, require_amount
from ..state.accounts import PoolState
from ..state.balances import Amount
from ..state.canonical import require_identity
from ..state.ledger import LedgerState
from .liquidity import clamp_to_available
from .pools import get_pool, pool_fee_bps, pool_reserves

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapQuote:
    asset_in: str
    asset_out: str
    amount_in: int
    taxed_in: int
    amount_out: int
    fee_bps: int


def _require_direction(direction_a_to_b: bool) -> bool:
    if not isinstance(direction_a_to_b, bool):
        raise TypeError("direction_a_to_b must be a bool")
    return direction_a_to_b


def _price(state: LedgerState, pool: PoolState, direction_a_to_b: bool, amount_in: Amount) -> SwapExactInResult:
    reserve_a, reserve_b = pool_reserves(state, pool)
    if reserve_a == 0 or reserve_b == 0:
        raise InsufficientLiquidity(f"pool {pool.address} has an empty reserve ({reserve_a}, {reserve_b})")
    reserve_in, reserve_out = (reserve_a, reserve_b) if direction_a_to_b else (reserve_b, reserve_a)
    return swap_exact_in(
        reserve_in=reserve_in,
        reserve_out=reserve_out,
        amount_in=amount_in,
        fee_bps=pool_fee_bps(state, pool),
    )


def quote_swap(state: LedgerState, pool_address: str, direction_a_to_b: bool, exact_input: Amount) -> SwapQuote:
    """Price an exact-input swap without touching balances (no clamping)."""
    pool = get_pool(state, pool_address)
    direction_a_to_b = _require_direction(direction_a_to_b)
    exact_input = require_amount("exact_input", exact_input)
    if exact_input == 0:
        raise InvalidAmount("exact_input must be positive")

    res = _price(state, pool, direction_a_to_b, exact_input)
    asset_in, asset_out = pool.reserve_assets(direction_a_to_b)
    return SwapQuote(
        asset_in=asset_in,
        asset_out=asset_out,
        amount_in=res.gross_in,
        taxed_in=res.taxed_in,
        amount_out=res.amount_out,
        fee_bps=pool_fee_bps(state, pool),
    )


def swap_exact_tokens_for_tokens(
    state: LedgerState,
    pool_address: str,
    direction_a_to_b: bool,
    exact_input: Amount,
    minimum_output: Amount,
    trader: str,
    *,
    clamp_to_balance: bool = True,
) -> int:
    """
    Swap `exact_input` of the input asset for as much of the output asset as
    the curve gives, failing if that is below `minimum_output`.

    The whole input (fee included) is moved into the input vault; only the
    output leaves the pool.

    Returns:
        amount_out

    Raises:
        InvalidAmount: exact_input is zero
        InsufficientBalance: the trader holds none of the input asset (or, in
            strict mode, less than exact_input)
        InsufficientLiquidity: either reserve is empty
        SlippageExceeded: amount_out < minimum_output
    """
    pool = get_pool(state, pool_address)
    direction_a_to_b = _require_direction(direction_a_to_b)
    trader = require_identity(trader, name="trader")
    exact_input = require_amount("exact_input", exact_input)
    minimum_output = require_amount("minimum_output", minimum_output)
    if exact_input == 0:
        raise InvalidAmount("exact_input must be positive")

    asset_in, asset_out = pool.reserve_assets(direction_a_to_b)
    available = state.balances.balance_of(asset_in, trader)
    amount_in = clamp_to_available(exact_input, available, clamp=clamp_to_balance, what="exact_input")
    if amount_in == 0:
        raise InsufficientBalance(f"{trader} holds no {asset_in}")

    k_before = checked_mul(*pool_reserves(state, pool))
    res = _price(state, pool, direction_a_to_b, amount_in)
    if res.amount_out < minimum_output:
        raise SlippageExceeded(f"amount_out {res.amount_out} < minimum_output {minimum_output}")

    state.balances.transfer(asset_in, trader, pool.pool_authority, amount_in)
    state.balances.transfer(asset_out, pool.pool_authority, trader, res.amount_out)

    k_after = checked_mul(*pool_reserves(state, pool))
    if k_after < k_before:
        raise InvariantViolated([f"k_after ({k_after}) < k_before ({k_before})"])

    logger.debug(
        "swap pool=%s trader=%s a_to_b=%s in=%d taxed=%d out=%d",
        pool.address,
        trader,
        direction_a_to_b,
        amount_in,
        res.taxed_in,
        res.amount_out,
    )
    return res.amount_out
