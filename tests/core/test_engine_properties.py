# [TESTER] v1

"""Property tests: random deposit/withdraw/swap sequences against one pool.

Checks, after every accepted step:
- swaps never decrease reserve_a * reserve_b (strictly increase with a fee),
- subsequent deposits keep the reserve ratio within one unit of rounding,
- token totals are conserved and share supply equals the sum of balances.
"""

from __future__ import annotations

import hypothesis.strategies as st
from hypothesis import given, settings

from pairswap.core.liquidity import deposit_liquidity, withdraw_liquidity
from pairswap.core.pools import create_pool, pool_reserves
from pairswap.core.registry import create_amm
from pairswap.core.swap import swap_exact_tokens_for_tokens
from pairswap.errors import AmmError
from pairswap.state.ledger import LedgerState

AMM_ID = "0x" + "aa" * 32
ASSET_A = "0x" + "11" * 32
ASSET_B = "0x" + "22" * 32
ACTORS = ("alice", "bob", "carol")
FUNDING = 10**12

_amount = st.integers(min_value=0, max_value=10**9)
_step = st.one_of(
    st.tuples(st.just("deposit"), st.sampled_from(ACTORS), _amount, _amount),
    st.tuples(st.just("withdraw"), st.sampled_from(ACTORS), _amount, st.just(0)),
    st.tuples(st.just("swap"), st.sampled_from(ACTORS), _amount, st.booleans()),
)


@settings(max_examples=100, deadline=None)
@given(fee_bps=st.integers(min_value=0, max_value=9_999), steps=st.lists(_step, min_size=1, max_size=25))
def test_random_sequences_preserve_pool_invariants(fee_bps: int, steps: list) -> None:
    state = LedgerState()
    create_amm(state, AMM_ID, fee_bps, "admin")
    pool = create_pool(state, AMM_ID, ASSET_A, ASSET_B)
    for actor in ACTORS:
        state.balances.set(actor, ASSET_A, FUNDING)
        state.balances.set(actor, ASSET_B, FUNDING)
    total_a = state.balances.total_of(ASSET_A)
    total_b = state.balances.total_of(ASSET_B)

    for kind, actor, amount, extra in steps:
        ra, rb = pool_reserves(state, pool)
        supply = state.shares.supply(pool.liquidity_mint)
        scratch = state.copy()
        try:
            if kind == "deposit":
                deposit_liquidity(scratch, pool.address, amount, extra, actor)
            elif kind == "withdraw":
                held = scratch.shares.balance_of(pool.liquidity_mint, actor)
                withdraw_liquidity(scratch, pool.address, min(amount, held), actor)
            else:
                swap_exact_tokens_for_tokens(scratch, pool.address, extra, amount, 0, actor)
        except AmmError:
            continue
        state = scratch

        new_ra, new_rb = pool_reserves(state, pool)
        new_supply = state.shares.supply(pool.liquidity_mint)
        if kind == "swap":
            assert new_ra * new_rb >= ra * rb
            if fee_bps > 0:
                assert new_ra * new_rb > ra * rb
        elif kind == "deposit":
            assert new_supply > supply
            if supply > 0:
                assert abs(new_rb * ra - new_ra * rb) < max(ra, rb)
        else:
            assert new_supply < supply

        assert state.balances.total_of(ASSET_A) == total_a
        assert state.balances.total_of(ASSET_B) == total_b
        assert state.shares.verify_supply()
