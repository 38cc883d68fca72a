"""
Engine configuration.

Defaults live on the frozen `EngineConfig`. `load_engine_config` layers an
optional YAML file and then `PAIRSWAP_*` environment variables on top.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "PAIRSWAP_"


@dataclass(frozen=True)
class EngineConfig:
    # Deposit/swap amounts above the caller's balance are reduced to the
    # balance. False fails fast with InsufficientBalance instead.
    clamp_to_balance: bool = True

    # Request signature policy:
    # - If `require_signatures` is True, each request must carry a BLS
    #   signature by the acting party, unless `allow_tx_sender_match` is True
    #   and the transaction sender is the acting party.
    # - If `require_signatures` is False, signatures are ignored and the
    #   transaction sender must be the acting party.
    require_signatures: bool = False
    allow_tx_sender_match: bool = True

    # Signature domain separation.
    chain_id: str = "pairswap-local"

    def __post_init__(self) -> None:
        for name in ("clamp_to_balance", "require_signatures", "allow_tx_sender_match"):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be a bool")
        if not self.require_signatures and not self.allow_tx_sender_match:
            raise ValueError("no authorization path enabled (require_signatures or allow_tx_sender_match)")
        if not isinstance(self.chain_id, str) or not self.chain_id:
            raise ValueError("chain_id must be a non-empty string")
        if len(self.chain_id) > 128:
            raise ValueError("chain_id too large")


def _parse_bool(raw: str, *, name: str) -> bool:
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _bool_env(env: Mapping[str, str], name: str, *, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return bool(default)
    return _parse_bool(raw, name=name)


def _read_yaml(path: Path) -> dict[str, Any]:
    obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    if obj is None:
        return {}
    if not isinstance(obj, Mapping):
        raise TypeError("engine config YAML must be a mapping")
    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(str(k) for k in obj.keys() if k not in known)
    if unknown:
        raise ValueError(f"unknown engine config keys: {', '.join(unknown)}")
    return dict(obj)


def load_engine_config(
    path: Optional[Union[str, Path]] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> EngineConfig:
    """
    Build an `EngineConfig` from defaults, an optional YAML file and the
    environment (in that order of precedence, last wins).

    Recognised variables: PAIRSWAP_CLAMP_TO_BALANCE, PAIRSWAP_REQUIRE_SIGNATURES,
    PAIRSWAP_ALLOW_TX_SENDER_MATCH, PAIRSWAP_CHAIN_ID.
    """
    if env is None:
        env = os.environ

    cfg = EngineConfig()
    if path is not None:
        cfg = replace(cfg, **_read_yaml(Path(path)))
        logger.debug("engine config loaded from %s", path)

    overrides: dict[str, Any] = {}
    for name in ("clamp_to_balance", "require_signatures", "allow_tx_sender_match"):
        var = ENV_PREFIX + name.upper()
        if var in env:
            overrides[name] = _bool_env(env, var, default=getattr(cfg, name))
    chain_id = env.get(ENV_PREFIX + "CHAIN_ID")
    if chain_id is not None:
        overrides["chain_id"] = chain_id.strip()
    if overrides:
        logger.debug("engine config env overrides: %s", sorted(overrides))
        cfg = replace(cfg, **overrides)
    return cfg
