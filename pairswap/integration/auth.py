"""
Request authorization.

An acting party (payer, depositor or trader) is authorized either by being
the verified transaction sender, or by a BLS (G2Basic) signature over the
request's signing payload. The signed message is

    sha256(domain_sep("request_sig:<chain_id>") || canonical_json(request - signature))

so a signature for one chain id never verifies on another.

Every request also carries the actor's next sequential nonce. Authorization
consumes it on the state it is given, so a replayed or skipped nonce is
rejected and the bump persists only if the caller commits that state.
"""

from __future__ import annotations

import hashlib
from typing import Optional

from py_ecc.bls import G2Basic

from ..errors import InvalidNonce, Unauthorized
from ..state.canonical import canonical_hex_fixed_allow_0x, domain_sep_bytes
from ..state.ledger import LedgerState
from .config import EngineConfig
from .requests import Request

BLS_PUBKEY_NBYTES = 48
BLS_SIGNATURE_NBYTES = 96


def _hex_bytes(value: str, *, name: str, nbytes: int) -> bytes:
    return bytes.fromhex(canonical_hex_fixed_allow_0x(value, nbytes=nbytes, name=name)[2:])


def request_message_hash(request: Request, *, chain_id: str) -> bytes:
    msg = domain_sep_bytes(f"request_sig:{chain_id}", version=1) + request.signing_payload()
    return hashlib.sha256(msg).digest()


def sign_request(request: Request, secret_key: int, *, chain_id: str) -> str:
    """Client-side helper: 0x-hex G2Basic signature for `request`."""
    sig = G2Basic.Sign(secret_key, request_message_hash(request, chain_id=chain_id))
    return "0x" + bytes(sig).hex()


def public_key_hex(secret_key: int) -> str:
    return "0x" + bytes(G2Basic.SkToPk(secret_key)).hex()


def verify_request_signature(request: Request, *, chain_id: str) -> None:
    """Raise Unauthorized unless `request.signature` is a valid signature by `request.actor`."""
    if request.signature is None:
        raise Unauthorized(f"missing request signature for {request.actor}")
    try:
        pubkey = _hex_bytes(request.actor, name="actor pubkey", nbytes=BLS_PUBKEY_NBYTES)
        sig = _hex_bytes(request.signature, name="signature", nbytes=BLS_SIGNATURE_NBYTES)
        ok = bool(G2Basic.Verify(pubkey, request_message_hash(request, chain_id=chain_id), sig))
    except Exception as exc:
        raise Unauthorized(f"request signature verification error: {exc}") from exc
    if not ok:
        raise Unauthorized(f"invalid request signature for {request.actor}")


def consume_nonce(state: LedgerState, actor: str, nonce: int) -> None:
    """Advance `actor`'s nonce to `nonce`, which must be exactly last + 1."""
    if not isinstance(nonce, int) or isinstance(nonce, bool):
        raise InvalidNonce("nonce must be an int")
    expected = state.nonces.next_nonce(actor)
    if nonce != expected:
        raise InvalidNonce(f"nonce sequence invalid for {actor}: got {nonce}, expected {expected}")
    state.nonces.set_last(actor, nonce)


class Authorizer:
    """
    Checks that the caller controls the account a request acts on behalf of,
    then consumes the request's nonce on `state`.
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    def authorize(self, state: LedgerState, request: Request, *, tx_sender: Optional[str]) -> None:
        actor = request.actor
        if state.is_pool_authority(actor):
            # Derived authorities have no key; only the engine moves their funds.
            raise Unauthorized(f"{actor} is a pool authority")

        sender_matches = tx_sender is not None and tx_sender == actor
        if not self.config.require_signatures:
            if not sender_matches:
                raise Unauthorized(f"{actor} is not the transaction sender")
        elif not (self.config.allow_tx_sender_match and sender_matches and request.signature is None):
            verify_request_signature(request, chain_id=self.config.chain_id)

        consume_nonce(state, actor, request.nonce)
