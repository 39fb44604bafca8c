"""Test configuration and fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from solders.keypair import Keypair

from local_ledger import LAMPORTS_PER_SOL, LocalLedger
from multisig_minter.config import MinterConfig
from multisig_minter.core.ledger import LedgerContext


@pytest.fixture
def local_ledger() -> LocalLedger:
    """Provide an empty in-memory ledger."""
    return LocalLedger()


@pytest.fixture
def ledger(local_ledger: LocalLedger) -> LedgerContext:
    """Provide a ledger context that polls without sleeping."""
    return LedgerContext(client=local_ledger, poll_interval=0)


@pytest.fixture
def operator(local_ledger: LocalLedger) -> Keypair:
    """Provide a keypair funded with 10 SOL."""
    keypair = Keypair()
    local_ledger.fund(keypair.pubkey(), 10 * LAMPORTS_PER_SOL)
    return keypair


def write_keypair(path: Path, keypair: Keypair) -> Path:
    path.write_text(json.dumps(list(bytes(keypair))), encoding="utf-8")
    return path


@pytest.fixture
def cli_config(tmp_path: Path, operator: Keypair) -> Path:
    """Provide a Solana CLI config pointing at the operator's keypair file."""
    keypair_path = write_keypair(tmp_path / "id.json", operator)
    config_path = tmp_path / "config.yml"
    config_path.write_text(
        f"json_rpc_url: http://127.0.0.1:8899\nkeypair_path: {keypair_path}\ncommitment: confirmed\n",
        encoding="utf-8",
    )
    return config_path


@pytest.fixture
def minter_config(cli_config: Path) -> MinterConfig:
    """Provide a test configuration for a 2-of-2 multisig."""
    return MinterConfig(cli_config_path=cli_config, poll_interval=0)
