"""
Constant-product swap kernel.

- The fee is taken from the gross input with floor rounding on the taxed part:
  `taxed_in = floor(gross_in * (10_000 - fee_bps) / 10_000)`.
- Pricing uses the taxed input only:
  `amount_out = floor(taxed_in * reserve_out / (reserve_in + taxed_in))`.
- The full gross input enters the pool, so the untaxed remainder stays behind
  as LP fee revenue and shows up as growth of `reserve_in * reserve_out`.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidFee, InvariantViolated
from .safe_math import checked_add, checked_mul, checked_sub, mul_div_floor, require_amount, to_u64


BPS_DENOM = 10_000


@dataclass(frozen=True)
class SwapExactInResult:
    amount_out: int
    gross_in: int
    taxed_in: int
    fee_retained: int
    new_reserve_in: int
    new_reserve_out: int
    k_before: int
    k_after: int


def require_fee_bps(fee_bps: int) -> int:
    """fee_bps must be an int in [0, 10_000); 100% or more would price every trade at zero."""
    if not isinstance(fee_bps, int) or isinstance(fee_bps, bool):
        raise TypeError("fee_bps must be an int")
    if not (0 <= fee_bps < BPS_DENOM):
        raise InvalidFee(f"fee_bps must be in [0, {BPS_DENOM}): {fee_bps}")
    return int(fee_bps)


def compute_taxed_input(*, gross_in: int, fee_bps: int) -> int:
    gross_in = require_amount("gross_in", gross_in)
    fee_bps = require_fee_bps(fee_bps)
    return mul_div_floor(gross_in, BPS_DENOM - fee_bps, BPS_DENOM)


def swap_exact_in(
    *,
    reserve_in: int,
    reserve_out: int,
    amount_in: int,
    fee_bps: int,
) -> SwapExactInResult:
    """
    Exact-in swap quote + post-state.

    Raises InvariantViolated if the post-trade product would fall below the
    pre-trade product; with the formula above that never happens.
    """
    reserve_in = require_amount("reserve_in", reserve_in)
    reserve_out = require_amount("reserve_out", reserve_out)
    amount_in = require_amount("amount_in", amount_in)

    taxed_in = compute_taxed_input(gross_in=amount_in, fee_bps=fee_bps)
    amount_out = mul_div_floor(taxed_in, reserve_out, checked_add(reserve_in, taxed_in))

    new_reserve_in = to_u64(checked_add(reserve_in, amount_in), name="new_reserve_in")
    new_reserve_out = checked_sub(reserve_out, amount_out)

    k_before = checked_mul(reserve_in, reserve_out)
    k_after = checked_mul(new_reserve_in, new_reserve_out)
    if k_after < k_before:
        raise InvariantViolated([f"k_after ({k_after}) < k_before ({k_before})"])

    return SwapExactInResult(
        amount_out=amount_out,
        gross_in=amount_in,
        taxed_in=taxed_in,
        fee_retained=amount_in - taxed_in,
        new_reserve_in=new_reserve_in,
        new_reserve_out=new_reserve_out,
        k_before=k_before,
        k_after=k_after,
    )
