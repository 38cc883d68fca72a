"""
Typed request structs for the five engine operations, plus parsing from
plain JSON-like dicts.

Wire shape (one object per request):

    {"kind": "swap", "pool": "0x..", "direction_a_to_b": true,
     "exact_input": 100, "minimum_output": 170, "trader": "alice",
     "nonce": 1, "signature": "0x.."}  # signature optional

The signing payload is the canonical JSON of the object without its
`signature` field. `nonce` is the actor's next sequential nonce and is
part of the signed payload, so a signed request can be applied at most once.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Union

from ..state.canonical import canonical_json_bytes


def _require_str(value: Any, *, name: str, non_empty: bool = True, max_len: int = 512) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    if non_empty and not value:
        raise ValueError(f"{name} must be non-empty")
    if max_len > 0 and len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _optional_str(value: Any, *, name: str, max_len: int = 512) -> Optional[str]:
    if value is None:
        return None
    return _require_str(value, name=name, max_len=max_len)


def _require_int(value: Any, *, name: str, non_negative: bool = True) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an int")
    if non_negative and value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be a bool")
    return value


class _RequestBase:
    kind: ClassVar[str]
    signature: Optional[str]

    @property
    def actor(self) -> str:
        """The party whose authority the request spends."""
        raise NotImplementedError

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind}
        for name, value in self.__dict__.items():
            if value is not None:
                out[name] = value
        return out

    def signing_payload(self) -> bytes:
        body = self.to_dict()
        body.pop("signature", None)
        return canonical_json_bytes(body)


@dataclass(frozen=True)
class CreateAmmRequest(_RequestBase):
    kind: ClassVar[str] = "create_amm"

    amm_id: str
    fee_bps: int
    admin: str
    payer: str
    nonce: int
    signature: Optional[str] = None

    @property
    def actor(self) -> str:
        return self.payer


@dataclass(frozen=True)
class CreatePoolRequest(_RequestBase):
    kind: ClassVar[str] = "create_pool"

    amm_id: str
    asset_a: str
    asset_b: str
    payer: str
    nonce: int
    pool_address: Optional[str] = None
    signature: Optional[str] = None

    @property
    def actor(self) -> str:
        return self.payer


@dataclass(frozen=True)
class DepositRequest(_RequestBase):
    kind: ClassVar[str] = "deposit"

    pool: str
    amount_a_desired: int
    amount_b_desired: int
    depositor: str
    nonce: int
    signature: Optional[str] = None

    @property
    def actor(self) -> str:
        return self.depositor


@dataclass(frozen=True)
class WithdrawRequest(_RequestBase):
    kind: ClassVar[str] = "withdraw"

    pool: str
    shares_amount: int
    depositor: str
    nonce: int
    signature: Optional[str] = None

    @property
    def actor(self) -> str:
        return self.depositor


@dataclass(frozen=True)
class SwapRequest(_RequestBase):
    kind: ClassVar[str] = "swap"

    pool: str
    direction_a_to_b: bool
    exact_input: int
    minimum_output: int
    trader: str
    nonce: int
    signature: Optional[str] = None

    @property
    def actor(self) -> str:
        return self.trader


Request = Union[CreateAmmRequest, CreatePoolRequest, DepositRequest, WithdrawRequest, SwapRequest]


_FIELDS: Dict[str, frozenset[str]] = {
    "create_amm": frozenset({"amm_id", "fee_bps", "admin", "payer", "nonce", "signature"}),
    "create_pool": frozenset({"amm_id", "asset_a", "asset_b", "payer", "nonce", "pool_address", "signature"}),
    "deposit": frozenset({"pool", "amount_a_desired", "amount_b_desired", "depositor", "nonce", "signature"}),
    "withdraw": frozenset({"pool", "shares_amount", "depositor", "nonce", "signature"}),
    "swap": frozenset({"pool", "direction_a_to_b", "exact_input", "minimum_output", "trader", "nonce", "signature"}),
}


def parse_request(obj: Any) -> Request:
    """
    Parse one request object.

    Raises:
        ValueError: If the structure is invalid (unknown kind, unknown or
            missing fields, wrong field types)
    """
    if not isinstance(obj, Mapping):
        raise ValueError("request must be an object")
    for k in obj.keys():
        if not isinstance(k, str):
            raise ValueError("request keys must be strings")

    kind = _require_str(obj.get("kind"), name="kind", max_len=32)
    allowed = _FIELDS.get(kind)
    if allowed is None:
        raise ValueError(f"unknown request kind: {kind}")
    extra = sorted(set(obj.keys()) - allowed - {"kind"})
    if extra:
        raise ValueError(f"unknown {kind} fields: {', '.join(extra)}")

    signature = _optional_str(obj.get("signature"), name="signature")
    nonce = _require_int(obj.get("nonce"), name="nonce")

    if kind == "create_amm":
        return CreateAmmRequest(
            amm_id=_require_str(obj.get("amm_id"), name="amm_id"),
            fee_bps=_require_int(obj.get("fee_bps"), name="fee_bps", non_negative=False),
            admin=_require_str(obj.get("admin"), name="admin"),
            payer=_require_str(obj.get("payer"), name="payer"),
            nonce=nonce,
            signature=signature,
        )
    if kind == "create_pool":
        return CreatePoolRequest(
            amm_id=_require_str(obj.get("amm_id"), name="amm_id"),
            asset_a=_require_str(obj.get("asset_a"), name="asset_a"),
            asset_b=_require_str(obj.get("asset_b"), name="asset_b"),
            payer=_require_str(obj.get("payer"), name="payer"),
            nonce=nonce,
            pool_address=_optional_str(obj.get("pool_address"), name="pool_address"),
            signature=signature,
        )
    if kind == "deposit":
        return DepositRequest(
            pool=_require_str(obj.get("pool"), name="pool"),
            amount_a_desired=_require_int(obj.get("amount_a_desired"), name="amount_a_desired"),
            amount_b_desired=_require_int(obj.get("amount_b_desired"), name="amount_b_desired"),
            depositor=_require_str(obj.get("depositor"), name="depositor"),
            nonce=nonce,
            signature=signature,
        )
    if kind == "withdraw":
        return WithdrawRequest(
            pool=_require_str(obj.get("pool"), name="pool"),
            shares_amount=_require_int(obj.get("shares_amount"), name="shares_amount"),
            depositor=_require_str(obj.get("depositor"), name="depositor"),
            nonce=nonce,
            signature=signature,
        )
    return SwapRequest(
        pool=_require_str(obj.get("pool"), name="pool"),
        direction_a_to_b=_require_bool(obj.get("direction_a_to_b"), name="direction_a_to_b"),
        exact_input=_require_int(obj.get("exact_input"), name="exact_input"),
        minimum_output=_require_int(obj.get("minimum_output"), name="minimum_output"),
        trader=_require_str(obj.get("trader"), name="trader"),
        nonce=nonce,
        signature=signature,
    )
