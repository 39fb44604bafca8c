"""Unit tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from multisig_minter.config import (
    DEFAULT_RPC_URL,
    MinterConfig,
    default_cli_config_path,
    read_cli_config,
)
from multisig_minter.errors import ConfigError


def test_defaults_describe_two_of_two_on_localhost() -> None:
    config = MinterConfig()

    assert config.rpc_url == DEFAULT_RPC_URL == "http://127.0.0.1:8899"
    assert config.commitment == "confirmed"
    assert config.amount == 100
    assert config.member_count == 2
    assert config.effective_threshold == 2
    assert config.cli_config_path == default_cli_config_path()
    assert default_cli_config_path().parts[-4:] == (".config", "solana", "cli", "config.yml")


def test_explicit_threshold_overrides_all_members() -> None:
    config = MinterConfig(co_signers=2, threshold=2)

    assert config.member_count == 3
    assert config.effective_threshold == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"co_signers": -1},
        {"amount": 0},
        {"amount": -5},
        {"poll_interval": -0.1},
        {"commitment": "max"},
        {"commitment": "Confirmed"},
    ],
)
def test_invalid_settings_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        MinterConfig(**kwargs)


def test_read_cli_config_parses_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("keypair_path: /tmp/id.json\ncommitment: confirmed\n", encoding="utf-8")

    assert read_cli_config(path) == {"keypair_path": "/tmp/id.json", "commitment": "confirmed"}


def test_read_cli_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read"):
        read_cli_config(tmp_path / "nope.yml")


def test_read_cli_config_empty_file_is_not_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text("", encoding="utf-8")

    with pytest.raises(ConfigError, match="not a mapping"):
        read_cli_config(path)


@pytest.mark.parametrize("level", ["processed", "confirmed", "finalized"])
def test_known_commitment_levels_are_accepted(level: str) -> None:
    assert MinterConfig(commitment=level).commitment == level


def test_read_cli_config_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_bytes(b"\xff\xfe keypair_path: id.json\n")

    with pytest.raises(ConfigError, match="Cannot read"):
        read_cli_config(path)
