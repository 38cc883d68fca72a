"""
Liquidity share math kernel.

Small set of pure functions with explicit rounding rules (floor everywhere):
- ratio-preserving deposit allocation,
- share issuance for the first and subsequent deposits,
- proportional redemption against the locked MINIMUM_LIQUIDITY floor.

`total_supply` is always the *minted* supply. The MINIMUM_LIQUIDITY lock is
never minted to anyone; it only shows up as the `+ MINIMUM_LIQUIDITY` term of
the redemption divisor.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import DepositTooSmall, InsufficientLiquidity, InvalidAmount, InvariantViolated
from .safe_math import checked_add, checked_sub, isqrt, mul_div_floor, require_amount, to_u64


MINIMUM_LIQUIDITY = 100


@dataclass(frozen=True)
class DepositAllocation:
    amount_a: int
    amount_b: int
    refund_a: int
    refund_b: int


@dataclass(frozen=True)
class MintResult:
    shares_minted: int
    amount_a: int
    amount_b: int
    new_reserve_a: int
    new_reserve_b: int
    new_total_supply: int
    initial: bool


@dataclass(frozen=True)
class BurnResult:
    amount_a: int
    amount_b: int
    new_reserve_a: int
    new_reserve_b: int
    new_total_supply: int


def ratio_preserving_allocation(
    *,
    reserve_a: int,
    reserve_b: int,
    amount_a_desired: int,
    amount_b_desired: int,
) -> DepositAllocation:
    """
    Pick the ratio-preserving deposit that moves the most tokens without
    exceeding either desired amount.

    Candidates:
        (i)  (amount_a_desired, floor(amount_a_desired * reserve_b / reserve_a))
        (ii) (floor(amount_b_desired * reserve_a / reserve_b), amount_b_desired)

    A candidate is affordable when its scaled leg does not exceed the other
    desired amount. When both are affordable the larger total wins; a tie keeps
    candidate (i). Both reserves must be positive.
    """
    reserve_a = require_amount("reserve_a", reserve_a)
    reserve_b = require_amount("reserve_b", reserve_b)
    amount_a_desired = require_amount("amount_a_desired", amount_a_desired)
    amount_b_desired = require_amount("amount_b_desired", amount_b_desired)

    scaled_b = mul_div_floor(amount_a_desired, reserve_b, reserve_a)
    scaled_a = mul_div_floor(amount_b_desired, reserve_a, reserve_b)

    candidates = []
    if scaled_b <= amount_b_desired:
        candidates.append((amount_a_desired, scaled_b))
    if scaled_a <= amount_a_desired:
        candidates.append((scaled_a, amount_b_desired))
    if not candidates:
        # Unreachable with floor rounding: if (i) overshoots b then (ii) fits under a.
        raise InvariantViolated(["no affordable ratio-preserving allocation"])

    amount_a, amount_b = candidates[0]
    for cand_a, cand_b in candidates[1:]:
        if cand_a + cand_b > amount_a + amount_b:
            amount_a, amount_b = cand_a, cand_b

    return DepositAllocation(
        amount_a=amount_a,
        amount_b=amount_b,
        refund_a=amount_a_desired - amount_a,
        refund_b=amount_b_desired - amount_b,
    )


def mint_initial(*, amount_a: int, amount_b: int, min_liquidity: int = MINIMUM_LIQUIDITY) -> int:
    """
    Shares for the first deposit: floor(sqrt(amount_a * amount_b)) - MINIMUM_LIQUIDITY.

    Raises DepositTooSmall when the square root does not clear the lock.
    """
    amount_a = require_amount("amount_a", amount_a)
    amount_b = require_amount("amount_b", amount_b)
    root = isqrt(amount_a * amount_b)
    if root <= min_liquidity:
        raise DepositTooSmall(
            f"initial deposit too small: sqrt({amount_a}*{amount_b}) = {root} <= {min_liquidity}"
        )
    return root - min_liquidity


def mint_shares(
    *,
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
    amount_a_desired: int,
    amount_b_desired: int,
) -> MintResult:
    """
    Share issuance for a deposit.

    total_supply == 0 (genesis, or a pool whose every share was redeemed):
        the desired amounts are used as-is and priced with `mint_initial`.
    total_supply > 0:
        amounts come from `ratio_preserving_allocation` and
        shares = min(floor(a * S / reserve_a), floor(b * S / reserve_b)).
    """
    reserve_a = require_amount("reserve_a", reserve_a)
    reserve_b = require_amount("reserve_b", reserve_b)
    total_supply = require_amount("total_supply", total_supply)
    amount_a_desired = require_amount("amount_a_desired", amount_a_desired)
    amount_b_desired = require_amount("amount_b_desired", amount_b_desired)

    if total_supply == 0:
        minted = mint_initial(amount_a=amount_a_desired, amount_b=amount_b_desired)
        return MintResult(
            shares_minted=minted,
            amount_a=amount_a_desired,
            amount_b=amount_b_desired,
            new_reserve_a=to_u64(checked_add(reserve_a, amount_a_desired), name="new_reserve_a"),
            new_reserve_b=to_u64(checked_add(reserve_b, amount_b_desired), name="new_reserve_b"),
            new_total_supply=to_u64(minted, name="new_total_supply"),
            initial=True,
        )

    alloc = ratio_preserving_allocation(
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        amount_a_desired=amount_a_desired,
        amount_b_desired=amount_b_desired,
    )
    shares_a = mul_div_floor(alloc.amount_a, total_supply, reserve_a)
    shares_b = mul_div_floor(alloc.amount_b, total_supply, reserve_b)
    minted = min(shares_a, shares_b)
    if minted <= 0:
        raise DepositTooSmall(
            f"deposit of ({alloc.amount_a}, {alloc.amount_b}) would mint zero shares"
        )

    return MintResult(
        shares_minted=minted,
        amount_a=alloc.amount_a,
        amount_b=alloc.amount_b,
        new_reserve_a=to_u64(checked_add(reserve_a, alloc.amount_a), name="new_reserve_a"),
        new_reserve_b=to_u64(checked_add(reserve_b, alloc.amount_b), name="new_reserve_b"),
        new_total_supply=to_u64(checked_add(total_supply, minted), name="new_total_supply"),
        initial=False,
    )


def burn_shares(
    *,
    shares_amount: int,
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
    min_liquidity: int = MINIMUM_LIQUIDITY,
) -> BurnResult:
    """
    Redeem shares for underlying reserves (floor rounding):

        amount_x = floor(shares_amount * reserve_x / (total_supply + MINIMUM_LIQUIDITY))
    """
    shares_amount = require_amount("shares_amount", shares_amount)
    reserve_a = require_amount("reserve_a", reserve_a)
    reserve_b = require_amount("reserve_b", reserve_b)
    total_supply = require_amount("total_supply", total_supply)

    if shares_amount == 0:
        raise InvalidAmount("shares_amount must be positive")
    if shares_amount > total_supply:
        raise InsufficientLiquidity(f"cannot burn {shares_amount} shares out of supply {total_supply}")

    divisor = checked_add(total_supply, min_liquidity)
    amount_a = mul_div_floor(shares_amount, reserve_a, divisor)
    amount_b = mul_div_floor(shares_amount, reserve_b, divisor)

    return BurnResult(
        amount_a=amount_a,
        amount_b=amount_b,
        new_reserve_a=checked_sub(reserve_a, amount_a),
        new_reserve_b=checked_sub(reserve_b, amount_b),
        new_total_supply=checked_sub(total_supply, shares_amount),
    )
