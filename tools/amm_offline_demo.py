#!/usr/bin/env python3

from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pairswap.integration.config import load_engine_config
from pairswap.integration.engine import Ledger
from pairswap.state.addressing import derive_pool_address


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    trader = "alice"
    amm_id = "0x" + "aa" * 32
    asset_a = "0x" + "11" * 32
    asset_b = "0x" + "22" * 32

    ledger = Ledger(load_engine_config())
    ledger.fund(trader, asset_a, 10_000)
    ledger.fund(trader, asset_b, 10_000)

    steps = [
        {"kind": "create_amm", "amm_id": amm_id, "fee_bps": 500, "admin": trader, "payer": trader},
        {
            "kind": "create_pool",
            "amm_id": amm_id,
            "asset_a": asset_a,
            "asset_b": asset_b,
            "payer": trader,
            "pool_address": derive_pool_address(amm_id, asset_a, asset_b),
        },
    ]
    for req in steps:
        res = ledger.submit({**req, "nonce": ledger.nonce_of(trader) + 1}, tx_sender=trader)
        if not res.ok:
            print(f"[offline-demo] FAIL ({req['kind']}): {res.error_code}: {res.error}")
            return 1

    pool = derive_pool_address(amm_id, asset_a, asset_b)
    print(f"[offline-demo] pool={pool}")

    res = ledger.submit(
        {
            "kind": "deposit",
            "pool": pool,
            "amount_a_desired": 1000,
            "amount_b_desired": 2000,
            "depositor": trader,
            "nonce": ledger.nonce_of(trader) + 1,
        },
        tx_sender=trader,
    )
    if not res.ok:
        print(f"[offline-demo] FAIL (deposit): {res.error_code}: {res.error}")
        return 1
    reserve_a, reserve_b = ledger.reserves(pool)
    print(f"[offline-demo] shares minted={res.output} reserves: a={reserve_a} b={reserve_b}")

    quote = ledger.quote_swap(pool, True, 100)
    print(f"[offline-demo] quote: in={quote.amount_in} taxed={quote.taxed_in} out={quote.amount_out}")

    before_in = ledger.balance_of(asset_a, trader)
    before_out = ledger.balance_of(asset_b, trader)
    res = ledger.submit(
        {
            "kind": "swap",
            "pool": pool,
            "direction_a_to_b": True,
            "exact_input": 100,
            "minimum_output": quote.amount_out,
            "trader": trader,
            "nonce": ledger.nonce_of(trader) + 1,
        },
        tx_sender=trader,
    )
    if not res.ok:
        print(f"[offline-demo] FAIL (swap): {res.error_code}: {res.error}")
        return 1

    reserve_a, reserve_b = ledger.reserves(pool)
    print(f"[offline-demo] reserves after swap: a={reserve_a} b={reserve_b}")
    after_in = ledger.balance_of(asset_a, trader)
    after_out = ledger.balance_of(asset_b, trader)
    print(f"[offline-demo] deltas: d_in={after_in - before_in} d_out={after_out - before_out}")

    rejected = ledger.submit(
        {
            "kind": "swap",
            "pool": pool,
            "direction_a_to_b": True,
            "exact_input": 100,
            "minimum_output": 200,
            "trader": trader,
            "nonce": ledger.nonce_of(trader) + 1,
        },
        tx_sender=trader,
    )
    print(f"[offline-demo] slippage guard: ok={rejected.ok} code={rejected.error_code}")
    print(f"[offline-demo] state_root={ledger.state_root()}")
    print("[offline-demo] OK: swap executed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
