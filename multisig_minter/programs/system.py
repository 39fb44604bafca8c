"""
System Program: account allocation

Every program-owned account starts life as a system CreateAccount
instruction that moves lamports from a payer, reserves `space` bytes and
hands ownership to a program. The lamports must cover the rent-exemption
minimum for that size, or the owning program refuses to initialize it.
"""

from dataclasses import dataclass

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account

from ..core.ledger import LedgerContext


@dataclass(frozen=True)
class AccountAllocation:
    """A funded, sized account creation request."""
    payer: Pubkey
    new_account: Pubkey
    space: int
    owner: Pubkey
    lamports: int

    def instruction(self) -> Instruction:
        return create_account(CreateAccountParams(
            from_pubkey=self.payer,
            to_pubkey=self.new_account,
            lamports=self.lamports,
            space=self.space,
            owner=self.owner,
        ))


def rent_exempt_allocation(ledger: LedgerContext, payer: Pubkey, new_account: Pubkey,
                           space: int, owner: Pubkey) -> AccountAllocation:
    """Allocation of `space` bytes funded at the ledger's rent-exemption minimum."""
    lamports = ledger.minimum_balance_for_rent_exemption(space)
    return AccountAllocation(payer, new_account, space, owner, lamports)
