# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from pairswap.integration.config import EngineConfig, load_engine_config


def test_defaults() -> None:
    cfg = load_engine_config(env={})
    assert cfg == EngineConfig()
    assert cfg.clamp_to_balance is True
    assert cfg.require_signatures is False
    assert cfg.allow_tx_sender_match is True
    assert cfg.chain_id == "pairswap-local"


def test_yaml_file_then_env_overrides(tmp_path: Path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("clamp_to_balance: false\nchain_id: testnet\n", encoding="utf-8")

    cfg = load_engine_config(path, env={})
    assert cfg.clamp_to_balance is False
    assert cfg.chain_id == "testnet"

    cfg = load_engine_config(
        path,
        env={"PAIRSWAP_CLAMP_TO_BALANCE": "yes", "PAIRSWAP_CHAIN_ID": " mainnet ", "PAIRSWAP_REQUIRE_SIGNATURES": "1"},
    )
    assert cfg.clamp_to_balance is True
    assert cfg.require_signatures is True
    assert cfg.chain_id == "mainnet"


def test_empty_yaml_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("", encoding="utf-8")
    assert load_engine_config(path, env={}) == EngineConfig()


def test_unknown_yaml_keys_rejected(tmp_path: Path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("clamp_to_balance: true\nfee_bps: 30\n", encoding="utf-8")
    with pytest.raises(ValueError, match="unknown engine config keys: fee_bps"):
        load_engine_config(path, env={})


def test_non_mapping_yaml_rejected(tmp_path: Path) -> None:
    path = tmp_path / "engine.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(TypeError, match="mapping"):
        load_engine_config(path, env={})


def test_bad_env_flag_rejected() -> None:
    with pytest.raises(ValueError, match="PAIRSWAP_CLAMP_TO_BALANCE"):
        load_engine_config(env={"PAIRSWAP_CLAMP_TO_BALANCE": "maybe"})


def test_config_validation() -> None:
    with pytest.raises(TypeError):
        EngineConfig(clamp_to_balance="no")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="no authorization path"):
        EngineConfig(require_signatures=False, allow_tx_sender_match=False)
    with pytest.raises(ValueError, match="chain_id"):
        EngineConfig(chain_id="")


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAIRSWAP_ALLOW_TX_SENDER_MATCH", "off")
    monkeypatch.setenv("PAIRSWAP_REQUIRE_SIGNATURES", "on")
    cfg = load_engine_config()
    assert cfg.allow_tx_sender_match is False
    assert cfg.require_signatures is True
