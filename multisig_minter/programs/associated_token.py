"""
Associated Token Accounts

Each (owner, mint) pair has one canonical token account at an address
derived from both keys. It is created on demand by the associated token
program; whoever creates it pays its rent.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.instructions import create_associated_token_account, get_associated_token_address

from ..core.ledger import LedgerContext, submit_instructions
from ..errors import AccountStateError
from .token import get_token_account

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssociatedTokenAccount:
    address: Pubkey
    owner: Pubkey
    mint: Pubkey
    creation_signature: Optional[Signature] = None   # Set when this call created it

    @property
    def created(self) -> bool:
        return self.creation_signature is not None


def get_or_create_associated_token_account(ledger: LedgerContext, payer: Keypair,
                                           mint: Pubkey, owner: Pubkey) -> AssociatedTokenAccount:
    """
    Find owner's token account for mint, creating it if absent.

    Creation is its own confirmed transaction, paid by payer. It is not
    undone if a later transaction fails.
    """
    address = get_associated_token_address(owner, mint)

    if ledger.get_account(address) is not None:
        existing = get_token_account(ledger, address)
        if existing.mint != mint or existing.owner != owner:
            raise AccountStateError(f"Token account {address} does not belong to ({owner}, {mint})")
        return AssociatedTokenAccount(address, owner, mint)

    logger.info("Creating associated token account %s for %s", address, owner)
    signature = submit_instructions(
        ledger,
        payer,
        [create_associated_token_account(payer.pubkey(), owner, mint)],
        [payer],
    )
    return AssociatedTokenAccount(address, owner, mint, creation_signature=signature)
