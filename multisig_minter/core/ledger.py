"""
Ledger Connection and Transaction Submission

A LedgerContext bundles the RPC client with the commitment level we wait
for. It is an immutable value passed explicitly to every operation, so tests
can hand in any object that answers the same RPC calls.

Submission is a single attempt: sign, send, then poll the signature status
until the ledger reports the target commitment or the blockhash validity
window runs out. There is no retry and no resubmission with a fresh blockhash.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from ..config import COMMITMENT_LEVELS, MinterConfig
from ..errors import ConfirmationTimeoutError, LedgerRejectedError, LedgerTransportError
from .transactions import build_transaction, sign_transaction

logger = logging.getLogger(__name__)

_STATUS_ORDER = [
    TransactionConfirmationStatus.Processed,
    TransactionConfirmationStatus.Confirmed,
    TransactionConfirmationStatus.Finalized,
]


@dataclass(frozen=True)
class BlockhashWindow:
    """A recent blockhash and the last block height at which it is valid."""
    blockhash: Hash
    last_valid_block_height: int


@contextmanager
def rpc_errors(action: str) -> Iterator[None]:
    """Translate solana-py exceptions into the package's error taxonomy."""
    try:
        yield
    except SolanaRpcException as e:
        # SolanaRpcException keeps its text in error_msg, not in args
        raise LedgerTransportError(f"RPC endpoint unreachable while trying to {action}: {e.error_msg}") from e
    except RPCException as e:
        raise LedgerRejectedError(f"Ledger rejected request to {action}: {e}") from e


@dataclass(frozen=True)
class LedgerContext:
    """Read-only connection settings shared by every step of the workflow."""
    client: Any                          # solana.rpc.api.Client or a stand-in
    commitment: Commitment = Commitment("confirmed")
    poll_interval: float = 0.5

    def __post_init__(self):
        if str(self.commitment) not in COMMITMENT_LEVELS:
            raise ValueError(f"Unknown commitment level {self.commitment!r}")

    @classmethod
    def connect(cls, config: MinterConfig) -> 'LedgerContext':
        """Create a context for the endpoint named in config."""
        commitment = Commitment(config.commitment)
        return cls(
            client=Client(config.rpc_url, commitment=commitment),
            commitment=commitment,
            poll_interval=config.poll_interval,
        )

    def latest_blockhash(self) -> BlockhashWindow:
        with rpc_errors("fetch the latest blockhash"):
            value = self.client.get_latest_blockhash(self.commitment).value
        return BlockhashWindow(value.blockhash, value.last_valid_block_height)

    def minimum_balance_for_rent_exemption(self, space: int) -> int:
        """Lamports an account of `space` bytes must hold to be rent-exempt."""
        with rpc_errors("fetch the rent-exemption minimum"):
            return self.client.get_minimum_balance_for_rent_exemption(space, self.commitment).value

    def get_account(self, address: Pubkey) -> Optional[Any]:
        """Account info for address, or None if it does not exist."""
        with rpc_errors(f"read account {address}"):
            return self.client.get_account_info(address, self.commitment).value

    def block_height(self) -> int:
        with rpc_errors("fetch the block height"):
            return self.client.get_block_height(self.commitment).value


def _reached(status: TransactionConfirmationStatus, commitment: Commitment) -> bool:
    return _STATUS_ORDER.index(status) >= COMMITMENT_LEVELS.index(str(commitment))


def wait_for_confirmation(ledger: LedgerContext, signature: Signature,
                          last_valid_block_height: int) -> None:
    """
    Block until signature reaches the ledger's commitment level.

    Raises:
        LedgerRejectedError: if the transaction executed with an error
        ConfirmationTimeoutError: if the block height passes the validity window
    """
    while True:
        with rpc_errors(f"fetch status of {signature}"):
            status = ledger.client.get_signature_statuses([signature]).value[0]

        if status is not None:
            if status.err is not None:
                raise LedgerRejectedError(f"Transaction {signature} failed: {status.err}")
            if status.confirmation_status is not None and _reached(status.confirmation_status, ledger.commitment):
                return

        if ledger.block_height() > last_valid_block_height:
            raise ConfirmationTimeoutError(signature, last_valid_block_height)

        time.sleep(ledger.poll_interval)


def submit_transaction(ledger: LedgerContext, message: MessageV0,
                       signers: Sequence[Keypair]) -> Signature:
    """
    Sign, send and confirm a compiled transaction.

    Returns:
        The transaction signature, once confirmed
    """
    transaction = sign_transaction(message, signers)

    opts = TxOpts(skip_confirmation=True, preflight_commitment=ledger.commitment)
    with rpc_errors("send transaction"):
        signature = ledger.client.send_transaction(transaction, opts=opts).value
    logger.debug("Sent transaction %s", signature)

    window = ledger.latest_blockhash()
    wait_for_confirmation(ledger, signature, window.last_valid_block_height)
    logger.info("Transaction %s reached %s", signature, ledger.commitment)
    return signature


def submit_instructions(ledger: LedgerContext, payer: Keypair,
                        instructions: Sequence[Instruction],
                        signers: Sequence[Keypair]) -> Signature:
    """Compile instructions against a fresh blockhash, with payer as fee payer, and submit them."""
    window = ledger.latest_blockhash()
    message = build_transaction(payer.pubkey(), window.blockhash, instructions)
    return submit_transaction(ledger, message, signers)
