#!/usr/bin/env python3
"""
Multisig Minter CLI

Runs the full workflow against a Solana cluster:
create an M-of-N multisig, create a mint whose authority is that multisig,
then mint tokens to the operator with a quorum of member signatures.

Usage:
    multisig-minter                                # 2-of-2 multisig, mint 100 to the operator
    multisig-minter --co-signers 2 --threshold 2  # 2-of-3 multisig
    multisig-minter --url http://127.0.0.1:8899 --amount 5000
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MINT_AMOUNT,
    DEFAULT_RPC_URL,
    MinterConfig,
    default_cli_config_path,
)
from .core.ledger import LedgerContext
from .errors import WorkflowAborted
from .workflow import MintWorkflow, WorkflowState


def print_progress(step: str, state: WorkflowState) -> None:
    """Operator-facing progress output after each workflow step."""
    if step == "resolve-identity":
        identity = state.identity
        if identity.is_ephemeral:
            print(f"⚠️  Using ephemeral keypair {identity.pubkey} ({identity.fallback_reason})")
        else:
            print(f"🔑 Using keypair {identity.pubkey} from {identity.keypair_path}")
        for keypair in state.co_signers:
            print(f"🆕 Generated co-signer {keypair.pubkey()}")

    elif step == "create-multisig":
        print(f"✅ create multisig tx hash {state.multisig_signature}")
        print(f"   Multisig data: {state.multisig}")
        for signer in state.multisig.signers:
            print(f"     member {signer}")

    elif step == "create-mint":
        print(f"✅ create token mint tx hash {state.mint_signature}")
        print(f"   Token mint data: {state.mint}")

    elif step == "mint-to":
        print(f"✅ mint to tx hash {state.mint_to_signature}")
        account = state.recipient_account
        print(f"💰 Balance of {account.address}: {account.amount}")


def build_config(args: argparse.Namespace) -> MinterConfig:
    return MinterConfig(
        rpc_url=args.url,
        cli_config_path=args.config,
        amount=args.amount,
        co_signers=args.co_signers,
        threshold=args.threshold,
        log_level=args.log_level,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a multisig-controlled SPL token mint and mint to it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--url', default=DEFAULT_RPC_URL, help='RPC endpoint')
    parser.add_argument('--config', type=Path, default=default_cli_config_path(),
                        help='Solana CLI config naming the operator keypair')
    parser.add_argument('--amount', type=int, default=DEFAULT_MINT_AMOUNT, help='Base units to mint')
    parser.add_argument('--co-signers', type=int, default=1,
                        help='Multisig members generated besides the operator')
    parser.add_argument('--threshold', type=int, default=None,
                        help='Signatures required (default: all members)')
    parser.add_argument('--log-level', default=DEFAULT_LOG_LEVEL, help='Logging level')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}")
        return 2

    config.setup_logging()
    ledger = LedgerContext.connect(config)

    print(f"🚀 Minting with a {config.effective_threshold}-of-{config.member_count} multisig via {config.rpc_url}")
    print("=" * 50)

    try:
        MintWorkflow(ledger, config, reporter=print_progress).run()
    except WorkflowAborted as e:
        print(f"❌ {e}")
        print("   Transactions confirmed before this step are permanent; re-running creates new accounts.")
        return 1
    except KeyboardInterrupt:
        print("\n👋 Interrupted")
        return 130

    print("🎉 Done")
    return 0


if __name__ == '__main__':
    sys.exit(main())
