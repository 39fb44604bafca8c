"""
Multisig-authorized minting

When a mint's authority is a multisig account, MintTo lists the multisig as
a read-only authority and each participating member as a signer. The token
program counts member signatures against the multisig threshold; this module
passes through whatever signer list it is given.
"""

import logging
from typing import Sequence

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import MintToParams, mint_to

from ..core.ledger import LedgerContext, submit_instructions
from .associated_token import get_or_create_associated_token_account

logger = logging.getLogger(__name__)


def multisig_mint_to_instruction(mint: Pubkey, destination: Pubkey, mint_authority: Pubkey,
                                 amount: int, signers: Sequence[Pubkey]) -> Instruction:
    return mint_to(MintToParams(
        program_id=TOKEN_PROGRAM_ID,
        mint=mint,
        dest=destination,
        mint_authority=mint_authority,
        amount=amount,
        signers=list(signers),
    ))


def mint_to_with_multisig(ledger: LedgerContext, mint: Pubkey, recipient: Pubkey, amount: int,
                          mint_authority: Pubkey, signers: Sequence[Keypair]) -> Signature:
    """
    Mint `amount` base units to recipient's associated token account.

    Args:
        mint: Token mint
        recipient: Wallet that should receive the tokens
        amount: Base units to mint (positive)
        mint_authority: The multisig account set as the mint's authority
        signers: Multisig members approving the mint; signers[0] pays fees

    Returns:
        Signature of the confirmed mint transaction
    """
    if amount <= 0:
        raise ValueError(f"Mint amount must be positive, got {amount}")
    if not signers:
        raise ValueError("At least one signer is required")

    payer = signers[0]
    token_account = get_or_create_associated_token_account(ledger, payer, mint, recipient)

    instruction = multisig_mint_to_instruction(
        mint, token_account.address, mint_authority, amount, [kp.pubkey() for kp in signers]
    )

    logger.info("Minting %d of %s to %s with %d signers", amount, mint, token_account.address, len(signers))
    return submit_instructions(ledger, payer, [instruction], signers)
