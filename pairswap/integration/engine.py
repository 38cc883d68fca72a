"""
Atomic transaction shell.

`apply_request` is the functional core: it takes a state and a request and
returns a new state (or an error) without mutating its input. `Ledger` is the
imperative shell around it: it owns the current state, serializes commits
with a lock and raises on failure.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple, Union

from ..core.liquidity import deposit_liquidity, withdraw_liquidity
from ..core.pools import create_pool, get_pool, pool_reserves
from ..core.registry import create_amm, get_amm
from ..core.swap import SwapQuote, quote_swap, swap_exact_tokens_for_tokens
from ..errors import AmmError
from ..state.accounts import AmmState, PoolState
from ..state.canonical import canonical_id, require_identity
from ..state.ledger import LedgerState
from ..state.snapshot import compute_state_root, snapshot_from_state
from .auth import Authorizer
from .config import EngineConfig
from .requests import (
    CreateAmmRequest,
    CreatePoolRequest,
    DepositRequest,
    Request,
    SwapRequest,
    WithdrawRequest,
    parse_request,
)

logger = logging.getLogger(__name__)

INVALID_REQUEST = "InvalidRequest"
INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class TxResult:
    ok: bool
    state: Optional[LedgerState] = None
    output: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None


def _clean_error(s: Any, *, max_len: int = 200) -> str:
    out = " ".join(str(s).strip().split())
    return out if len(out) <= max_len else out[:max_len]


def _dispatch(config: EngineConfig, state: LedgerState, request: Request) -> Any:
    if isinstance(request, CreateAmmRequest):
        return create_amm(state, request.amm_id, request.fee_bps, request.admin)
    if isinstance(request, CreatePoolRequest):
        return create_pool(
            state,
            request.amm_id,
            request.asset_a,
            request.asset_b,
            pool_address=request.pool_address,
        )
    if isinstance(request, DepositRequest):
        return deposit_liquidity(
            state,
            request.pool,
            request.amount_a_desired,
            request.amount_b_desired,
            request.depositor,
            clamp_to_balance=config.clamp_to_balance,
        ).shares_minted
    if isinstance(request, WithdrawRequest):
        res = withdraw_liquidity(state, request.pool, request.shares_amount, request.depositor)
        return (res.amount_a, res.amount_b)
    if isinstance(request, SwapRequest):
        return swap_exact_tokens_for_tokens(
            state,
            request.pool,
            request.direction_a_to_b,
            request.exact_input,
            request.minimum_output,
            request.trader,
            clamp_to_balance=config.clamp_to_balance,
        )
    raise TypeError(f"unsupported request type: {type(request).__name__}")


def apply_request(
    config: EngineConfig,
    state: LedgerState,
    request: Union[Request, Mapping[str, Any]],
    *,
    tx_sender: Optional[str] = None,
) -> TxResult:
    """
    Run one request against a scratch copy of `state`.

    `tx_sender` is the outer transaction sender (already verified by the
    environment); it authorizes unsigned requests whose acting party it is.

    On success the result carries the new state and the operation's output
    (AmmState, PoolState, shares minted, (amount_a, amount_b) or amount_out).
    On failure `state` is None and the input state is untouched.
    """
    if isinstance(request, Mapping):
        try:
            request = parse_request(request)
        except ValueError as exc:
            return TxResult(ok=False, error=f"invalid request: {_clean_error(exc)}", error_code=INVALID_REQUEST)

    kind = getattr(request, "kind", type(request).__name__)
    scratch = state.copy()
    try:
        Authorizer(config).authorize(scratch, request, tx_sender=tx_sender)
        output = _dispatch(config, scratch, request)
    except AmmError as exc:
        logger.warning("%s rejected: %s: %s", kind, exc.code, exc)
        return TxResult(ok=False, error=_clean_error(exc), error_code=exc.code)
    except (TypeError, ValueError) as exc:
        logger.warning("%s rejected: invalid request: %s", kind, exc)
        return TxResult(ok=False, error=f"invalid request: {_clean_error(exc)}", error_code=INVALID_REQUEST)
    except Exception:
        logger.exception("%s failed with an unexpected error", kind)
        return TxResult(ok=False, error="internal error", error_code=INTERNAL_ERROR)

    return TxResult(ok=True, state=scratch, output=output)


class Ledger:
    """
    In-memory ledger environment.

    Each mutating call builds a request, runs `apply_request` on a copy of
    the current state and swaps the copy in only on success. Failures raise
    the underlying `AmmError` (or TypeError/ValueError for malformed input).

    A `nonce` left as None is filled with the acting party's next nonce under
    the lock. Signed requests must pass the nonce they were signed with.
    """

    def __init__(self, config: Optional[EngineConfig] = None, state: Optional[LedgerState] = None) -> None:
        self.config = config or EngineConfig()
        self._state = state if state is not None else LedgerState()
        self._lock = threading.Lock()

    @property
    def state(self) -> LedgerState:
        return self._state

    def _execute(self, request: Request, *, tx_sender: Optional[str]) -> Any:
        with self._lock:
            if request.nonce is None:
                request = replace(request, nonce=self._state.nonces.next_nonce(request.actor))
            scratch = self._state.copy()
            try:
                Authorizer(self.config).authorize(scratch, request, tx_sender=tx_sender)
                output = _dispatch(self.config, scratch, request)
            except AmmError as exc:
                logger.warning("%s rejected: %s: %s", request.kind, exc.code, exc)
                raise
            self._state = scratch
            return output

    # Environment operations

    def fund(self, owner: str, asset: str, amount: int) -> None:
        """Airdrop `amount` of `asset` to `owner` (test actors, demos)."""
        asset = canonical_id(asset, name="asset")
        owner = require_identity(owner, name="owner")
        with self._lock:
            if self._state.is_pool_authority(owner):
                raise ValueError("cannot fund a pool authority directly")
            self._state.balances.credit(owner, asset, amount)

    # The five operations

    def create_amm(
        self,
        amm_id: str,
        fee_bps: int,
        *,
        admin: str,
        signer: str,
        nonce: Optional[int] = None,
        signature: Optional[str] = None,
    ) -> AmmState:
        req = CreateAmmRequest(
            amm_id=amm_id, fee_bps=fee_bps, admin=admin, payer=signer, nonce=nonce, signature=signature
        )
        return self._execute(req, tx_sender=signer)

    def create_pool(
        self,
        amm_id: str,
        asset_a: str,
        asset_b: str,
        *,
        signer: str,
        pool_address: Optional[str] = None,
        nonce: Optional[int] = None,
        signature: Optional[str] = None,
    ) -> PoolState:
        req = CreatePoolRequest(
            amm_id=amm_id,
            asset_a=asset_a,
            asset_b=asset_b,
            payer=signer,
            nonce=nonce,
            pool_address=pool_address,
            signature=signature,
        )
        return self._execute(req, tx_sender=signer)

    def deposit_liquidity(
        self,
        pool: str,
        amount_a_desired: int,
        amount_b_desired: int,
        *,
        depositor: str,
        signer: Optional[str] = None,
        nonce: Optional[int] = None,
        signature: Optional[str] = None,
    ) -> int:
        req = DepositRequest(
            pool=pool,
            amount_a_desired=amount_a_desired,
            amount_b_desired=amount_b_desired,
            depositor=depositor,
            nonce=nonce,
            signature=signature,
        )
        return self._execute(req, tx_sender=depositor if signer is None else signer)

    def withdraw_liquidity(
        self,
        pool: str,
        shares_amount: int,
        *,
        depositor: str,
        signer: Optional[str] = None,
        nonce: Optional[int] = None,
        signature: Optional[str] = None,
    ) -> Tuple[int, int]:
        req = WithdrawRequest(
            pool=pool, shares_amount=shares_amount, depositor=depositor, nonce=nonce, signature=signature
        )
        return self._execute(req, tx_sender=depositor if signer is None else signer)

    def swap_exact_tokens_for_tokens(
        self,
        pool: str,
        direction_a_to_b: bool,
        exact_input: int,
        minimum_output: int,
        *,
        trader: str,
        signer: Optional[str] = None,
        nonce: Optional[int] = None,
        signature: Optional[str] = None,
    ) -> int:
        req = SwapRequest(
            pool=pool,
            direction_a_to_b=direction_a_to_b,
            exact_input=exact_input,
            minimum_output=minimum_output,
            trader=trader,
            nonce=nonce,
            signature=signature,
        )
        return self._execute(req, tx_sender=trader if signer is None else signer)

    def submit(self, request: Union[Request, Mapping[str, Any]], *, tx_sender: Optional[str]) -> TxResult:
        """Apply a request (struct or plain dict) and commit it on success; never raises."""
        with self._lock:
            result = apply_request(self.config, self._state, request, tx_sender=tx_sender)
            if result.ok and result.state is not None:
                self._state = result.state
            return result

    # Reads

    def balance_of(self, asset: str, owner: str) -> int:
        return self._state.balances.balance_of(canonical_id(asset, name="asset"), owner)

    def nonce_of(self, actor: str) -> int:
        """Last nonce consumed by `actor` (0 before its first request)."""
        return self._state.nonces.get_last(actor)

    def share_balance_of(self, pool: str, holder: str) -> int:
        p = get_pool(self._state, pool)
        return self._state.shares.balance_of(p.liquidity_mint, holder)

    def reserves(self, pool: str) -> Tuple[int, int]:
        return pool_reserves(self._state, get_pool(self._state, pool))

    def share_supply(self, pool: str) -> int:
        return self._state.shares.supply(get_pool(self._state, pool).liquidity_mint)

    def get_amm(self, amm_id: str) -> AmmState:
        return get_amm(self._state, amm_id)

    def get_pool(self, pool: str) -> PoolState:
        return get_pool(self._state, pool)

    def quote_swap(self, pool: str, direction_a_to_b: bool, exact_input: int) -> SwapQuote:
        return quote_swap(self._state, pool, direction_a_to_b, exact_input)

    def snapshot(self) -> Dict[str, Any]:
        return snapshot_from_state(self._state).data

    def state_root(self) -> str:
        return compute_state_root(self._state)
