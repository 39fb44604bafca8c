"""
SPL Token Program: multisig and mint provisioning

Both provisioners follow the same two-instruction pattern inside one atomic
transaction:
1. System CreateAccount, sized for the token program layout and funded at
   the rent-exemption minimum, owned by the token program
2. The token program's initialize instruction for that account

The new account must sign its own creation, so each transaction is signed by
the payer and the new account's keypair.

Based on: https://spl.solana.com/token#multisig-usage
"""

import logging
from typing import Any, Callable, Sequence, TypeVar

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import (
    InitializeMintParams,
    InitializeMultisigParams,
    initialize_mint,
    initialize_multisig,
)

from ..core.accounts import (
    MAX_SIGNERS,
    MINT_SIZE,
    MULTISIG_SIZE,
    MintState,
    MultisigState,
    TokenAccountState,
)
from ..core.ledger import LedgerContext, submit_instructions
from ..errors import AccountStateError, InvalidMultisigError
from .system import rent_exempt_allocation

logger = logging.getLogger(__name__)

# Mints created by this workflow count whole tokens only
MINT_DECIMALS = 0

State = TypeVar("State")


def validate_multisig(members: Sequence[Pubkey], threshold: int) -> None:
    """
    Check a signer set before anything is sent to the ledger.

    The token program enforces the same rules; failing early avoids paying
    for a transaction that cannot succeed.
    """
    if not 1 <= len(members) <= MAX_SIGNERS:
        raise InvalidMultisigError(f"A multisig needs between 1 and {MAX_SIGNERS} members, got {len(members)}")
    if len(set(members)) != len(members):
        raise InvalidMultisigError("Multisig members must be distinct")
    if not 1 <= threshold <= len(members):
        raise InvalidMultisigError(f"Threshold {threshold} must be between 1 and {len(members)}")


def create_multisig(ledger: LedgerContext, payer: Keypair, members: Sequence[Pubkey],
                    threshold: int, multisig_account: Keypair) -> Signature:
    """
    Create a threshold-of-len(members) multisig account.

    Returns:
        Signature of the confirmed transaction
    """
    validate_multisig(members, threshold)
    multisig = multisig_account.pubkey()

    allocation = rent_exempt_allocation(ledger, payer.pubkey(), multisig, MULTISIG_SIZE, TOKEN_PROGRAM_ID)
    instructions = [
        allocation.instruction(),
        initialize_multisig(InitializeMultisigParams(
            program_id=TOKEN_PROGRAM_ID,
            multisig=multisig,
            m=threshold,
            signers=list(members),
        )),
    ]

    logger.info("Creating %d-of-%d multisig %s", threshold, len(members), multisig)
    return submit_instructions(ledger, payer, instructions, [payer, multisig_account])


def create_mint(ledger: LedgerContext, payer: Keypair, mint_account: Keypair,
                mint_authority: Pubkey) -> Signature:
    """
    Create a zero-decimal mint controlled by mint_authority, with no freeze authority.

    Returns:
        Signature of the confirmed transaction
    """
    mint = mint_account.pubkey()

    allocation = rent_exempt_allocation(ledger, payer.pubkey(), mint, MINT_SIZE, TOKEN_PROGRAM_ID)
    instructions = [
        allocation.instruction(),
        initialize_mint(InitializeMintParams(
            decimals=MINT_DECIMALS,
            program_id=TOKEN_PROGRAM_ID,
            mint=mint,
            mint_authority=mint_authority,
            freeze_authority=None,
        )),
    ]

    logger.info("Creating mint %s with authority %s", mint, mint_authority)
    return submit_instructions(ledger, payer, instructions, [payer, mint_account])


# Account readers

def _read_token_account(ledger: LedgerContext, address: Pubkey, kind: str,
                        decode: Callable[[Pubkey, bytes], State]) -> State:
    account: Any = ledger.get_account(address)
    if account is None:
        raise AccountStateError(f"{kind} account {address} does not exist")
    if account.owner != TOKEN_PROGRAM_ID:
        raise AccountStateError(f"{kind} account {address} is owned by {account.owner}, not the token program")
    return decode(address, bytes(account.data))


def get_multisig(ledger: LedgerContext, address: Pubkey) -> MultisigState:
    return _read_token_account(ledger, address, "Multisig", MultisigState.decode)


def get_mint(ledger: LedgerContext, address: Pubkey) -> MintState:
    return _read_token_account(ledger, address, "Mint", MintState.decode)


def get_token_account(ledger: LedgerContext, address: Pubkey) -> TokenAccountState:
    return _read_token_account(ledger, address, "Token", TokenAccountState.decode)
