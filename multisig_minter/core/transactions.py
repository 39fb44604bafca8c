"""
Transaction Assembly and Signing

Solana transactions carry an ordered list of instructions that execute
atomically: either every instruction applies or none does. The message
declares all accounts upfront, with the required signers first and the fee
payer at index 0, and is pinned to a recent blockhash for replay protection.

Based on: https://solana.com/docs/core/transactions
"""

from typing import Dict, List, Sequence

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from ..errors import SigningError


class TransactionBuilder:
    """
    Builder for v0 transaction messages.

    Instructions are kept in the order they are added; account ordering and
    index compilation are left to MessageV0.try_compile. The result is unsigned.
    """

    def __init__(self, fee_payer: Pubkey, recent_blockhash: Hash):
        """
        Initialize transaction builder.

        Args:
            fee_payer: Account that pays transaction fees (must be signer)
            recent_blockhash: Recent blockhash for replay protection
        """
        self.fee_payer = fee_payer
        self.recent_blockhash = recent_blockhash
        self.instructions: List[Instruction] = []

    def add_instruction(self, instruction: Instruction) -> 'TransactionBuilder':
        """Add an instruction to the transaction (fluent interface)."""
        self.instructions.append(instruction)
        return self

    def add_instructions(self, instructions: Sequence[Instruction]) -> 'TransactionBuilder':
        """Add multiple instructions at once."""
        self.instructions.extend(instructions)
        return self

    def build(self) -> MessageV0:
        """Compile the instructions into a v0 message without lookup tables."""
        return MessageV0.try_compile(
            self.fee_payer,
            self.instructions,
            [],
            self.recent_blockhash,
        )


def build_transaction(fee_payer: Pubkey, recent_blockhash: Hash,
                      instructions: Sequence[Instruction]) -> MessageV0:
    """Compile instructions into one message, preserving their order."""
    return TransactionBuilder(fee_payer, recent_blockhash).add_instructions(instructions).build()


def required_signers(message: MessageV0) -> List[Pubkey]:
    """Accounts that must sign the message, in signature order."""
    return list(message.account_keys[:message.header.num_required_signatures])


def sign_transaction(message: MessageV0, signers: Sequence[Keypair]) -> VersionedTransaction:
    """
    Sign a message with the keypairs it requires.

    Keypairs are matched to the message's signer slots by public key, so the
    order of signers does not matter and duplicates are harmless.

    Raises:
        SigningError: if a required signer has no keypair, or signing fails
    """
    by_pubkey: Dict[Pubkey, Keypair] = {kp.pubkey(): kp for kp in signers}
    needed = required_signers(message)

    missing = [key for key in needed if key not in by_pubkey]
    if missing:
        raise SigningError(f"Missing keypairs for required signers: {', '.join(map(str, missing))}")

    try:
        return VersionedTransaction(message, [by_pubkey[key] for key in needed])
    except Exception as e:
        raise SigningError(f"Failed to sign transaction: {e}") from e


def generate_keypair() -> Keypair:
    """Generate a new Ed25519 keypair."""
    return Keypair()
