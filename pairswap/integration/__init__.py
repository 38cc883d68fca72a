"""
Integration layer: configuration, request parsing, authorization and the
atomic transaction shell.
"""

from .auth import Authorizer
from .config import EngineConfig, load_engine_config
from .engine import Ledger, TxResult, apply_request
from .requests import (
    CreateAmmRequest,
    CreatePoolRequest,
    DepositRequest,
    SwapRequest,
    WithdrawRequest,
    parse_request,
)

__all__ = [
    "Authorizer",
    "EngineConfig",
    "load_engine_config",
    "Ledger",
    "TxResult",
    "apply_request",
    "CreateAmmRequest",
    "CreatePoolRequest",
    "DepositRequest",
    "WithdrawRequest",
    "SwapRequest",
    "parse_request",
]
