"""
Liquidity engine: deposit and withdraw.

Both operations compute their full delta with the `lp_math` kernel before
touching state, then apply transfers/mints/burns and re-check the post-state.
Callers wanting atomicity run them against a scratch copy of the ledger
(see `pairswap.integration.engine`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import InsufficientBalance, InsufficientLiquidity, InvalidAmount, InvariantViolated
from ..kernels.lp_math import burn_shares, mint_shares
from ..kernels.safe_math import require_amount
from ..state.balances import Amount
from ..state.canonical import require_identity
from ..state.ledger import LedgerState
from .pools import get_pool, pool_reserves

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DepositResult:
    shares_minted: int
    amount_a: int
    amount_b: int


@dataclass(frozen=True)
class WithdrawResult:
    amount_a: int
    amount_b: int
    shares_burned: int


def clamp_to_available(requested: Amount, available: Amount, *, clamp: bool, what: str) -> Amount:
    """
    Reduce `requested` to `available` when clamping is enabled; otherwise an
    over-balance request fails fast with InsufficientBalance.
    """
    if requested <= available:
        return requested
    if clamp:
        return available
    raise InsufficientBalance(f"{what}: requested {requested} exceeds balance {available}")


def deposit_liquidity(
    state: LedgerState,
    pool_address: str,
    amount_a_desired: Amount,
    amount_b_desired: Amount,
    depositor: str,
    *,
    clamp_to_balance: bool = True,
) -> DepositResult:
    """
    Deposit a ratio-preserving amount of both assets and mint shares.

    Desired amounts above the depositor's balance are clamped down to the
    balance (or rejected when `clamp_to_balance` is False). The first deposit
    into an empty share supply uses both amounts as-is and mints
    `isqrt(a*b) - MINIMUM_LIQUIDITY`; later deposits use the allocation that
    moves the most tokens at the current reserve ratio.

    Returns:
        DepositResult with the shares minted and the amounts actually taken

    Raises:
        DepositTooSmall: the deposit would mint nothing (or not clear the lock)
        InsufficientBalance: the depositor cannot cover the chosen amounts
    """
    pool = get_pool(state, pool_address)
    depositor = require_identity(depositor, name="depositor")
    amount_a_desired = require_amount("amount_a_desired", amount_a_desired)
    amount_b_desired = require_amount("amount_b_desired", amount_b_desired)

    balance_a = state.balances.balance_of(pool.asset_a, depositor)
    balance_b = state.balances.balance_of(pool.asset_b, depositor)
    amount_a_desired = clamp_to_available(amount_a_desired, balance_a, clamp=clamp_to_balance, what="asset_a")
    amount_b_desired = clamp_to_available(amount_b_desired, balance_b, clamp=clamp_to_balance, what="asset_b")

    reserve_a, reserve_b = pool_reserves(state, pool)
    supply = state.shares.supply(pool.liquidity_mint)

    res = mint_shares(
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_supply=supply,
        amount_a_desired=amount_a_desired,
        amount_b_desired=amount_b_desired,
    )
    if res.amount_a > balance_a or res.amount_b > balance_b:
        raise InsufficientBalance(
            f"depositor cannot cover ({res.amount_a}, {res.amount_b}) with ({balance_a}, {balance_b})"
        )

    state.balances.transfer(pool.asset_a, depositor, pool.pool_authority, res.amount_a)
    state.balances.transfer(pool.asset_b, depositor, pool.pool_authority, res.amount_b)
    state.shares.mint_to(pool.liquidity_mint, depositor, res.shares_minted, authority=pool.pool_authority)

    violations = []
    if pool_reserves(state, pool) != (res.new_reserve_a, res.new_reserve_b):
        violations.append("reserves after deposit")
    if state.shares.supply(pool.liquidity_mint) != res.new_total_supply:
        violations.append("share supply after deposit")
    if violations:
        raise InvariantViolated(violations)

    logger.debug(
        "deposit pool=%s depositor=%s amounts=(%d, %d) shares=%d initial=%s",
        pool.address,
        depositor,
        res.amount_a,
        res.amount_b,
        res.shares_minted,
        res.initial,
    )
    return DepositResult(shares_minted=res.shares_minted, amount_a=res.amount_a, amount_b=res.amount_b)


def withdraw_liquidity(
    state: LedgerState,
    pool_address: str,
    shares_amount: Amount,
    depositor: str,
) -> WithdrawResult:
    """
    Burn shares and pay out the proportional part of both reserves:

        amount_x = floor(shares_amount * reserve_x / (total_supply + MINIMUM_LIQUIDITY))

    Raises:
        InvalidAmount: shares_amount is zero
        InsufficientLiquidity: shares_amount exceeds the depositor's share balance
    """
    pool = get_pool(state, pool_address)
    depositor = require_identity(depositor, name="depositor")
    shares_amount = require_amount("shares_amount", shares_amount)
    if shares_amount == 0:
        raise InvalidAmount("shares_amount must be positive")

    held = state.shares.balance_of(pool.liquidity_mint, depositor)
    if shares_amount > held:
        raise InsufficientLiquidity(f"{depositor} holds {held} shares, cannot withdraw {shares_amount}")

    reserve_a, reserve_b = pool_reserves(state, pool)
    res = burn_shares(
        shares_amount=shares_amount,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        total_supply=state.shares.supply(pool.liquidity_mint),
    )

    state.shares.burn(pool.liquidity_mint, depositor, shares_amount, authority=pool.pool_authority)
    state.balances.transfer(pool.asset_a, pool.pool_authority, depositor, res.amount_a)
    state.balances.transfer(pool.asset_b, pool.pool_authority, depositor, res.amount_b)

    if pool_reserves(state, pool) != (res.new_reserve_a, res.new_reserve_b):
        raise InvariantViolated(["reserves after withdraw"])

    logger.debug(
        "withdraw pool=%s depositor=%s shares=%d amounts=(%d, %d)",
        pool.address,
        depositor,
        shares_amount,
        res.amount_a,
        res.amount_b,
    )
    return WithdrawResult(amount_a=res.amount_a, amount_b=res.amount_b, shares_burned=shares_amount)
