"""
SPL Token Account Layouts

The token program stores its state in fixed-size accounts:
- Multisig accounts hold an M-of-N signer set (up to 11 signers)
- Mint accounts hold supply, decimals and the mint/freeze authorities
- Token accounts hold one owner's balance of one mint

An account must be allocated with exactly the layout size before the
token program will initialize it, so these sizes are protocol constants.

Based on: https://github.com/solana-labs/solana-program-library/blob/master/token/program/src/state.rs
"""

from dataclasses import dataclass
from typing import List, Optional

from construct import Array, Bytes, Flag, Int8ul, Int32ul, Int64ul, Struct
from construct import ConstructError
from solders.pubkey import Pubkey

from ..errors import AccountStateError

MAX_SIGNERS = 11

MULTISIG_LAYOUT = Struct(
    "m" / Int8ul,                          # Signatures required
    "n" / Int8ul,                          # Valid signers
    "is_initialized" / Flag,
    "signers" / Array(MAX_SIGNERS, Bytes(32)),
)

MINT_LAYOUT = Struct(
    "mint_authority_option" / Int32ul,     # COption tag: 0 = None, 1 = Some
    "mint_authority" / Bytes(32),
    "supply" / Int64ul,
    "decimals" / Int8ul,
    "is_initialized" / Flag,
    "freeze_authority_option" / Int32ul,
    "freeze_authority" / Bytes(32),
)

ACCOUNT_LAYOUT = Struct(
    "mint" / Bytes(32),
    "owner" / Bytes(32),
    "amount" / Int64ul,
    "delegate_option" / Int32ul,
    "delegate" / Bytes(32),
    "state" / Int8ul,
    "is_native_option" / Int32ul,
    "is_native" / Int64ul,
    "delegated_amount" / Int64ul,
    "close_authority_option" / Int32ul,
    "close_authority" / Bytes(32),
)

MULTISIG_SIZE = MULTISIG_LAYOUT.sizeof()   # 355
MINT_SIZE = MINT_LAYOUT.sizeof()           # 82
ACCOUNT_SIZE = ACCOUNT_LAYOUT.sizeof()     # 165


def _parse(layout: Struct, size: int, address: Pubkey, data: bytes, kind: str):
    if len(data) != size:
        raise AccountStateError(f"{kind} account {address} has {len(data)} bytes, expected {size}")
    try:
        return layout.parse(data)
    except ConstructError as e:
        raise AccountStateError(f"Cannot decode {kind} account {address}: {e}") from e


def _optional_key(tag: int, raw: bytes) -> Optional[Pubkey]:
    return Pubkey.from_bytes(raw) if tag else None


@dataclass(frozen=True)
class MultisigState:
    """Decoded multisig account."""
    address: Pubkey
    threshold: int          # m
    signer_count: int       # n
    is_initialized: bool
    signers: List[Pubkey]   # Only the first n slots are meaningful

    @classmethod
    def decode(cls, address: Pubkey, data: bytes) -> 'MultisigState':
        parsed = _parse(MULTISIG_LAYOUT, MULTISIG_SIZE, address, data, "Multisig")
        return cls(
            address=address,
            threshold=parsed.m,
            signer_count=parsed.n,
            is_initialized=parsed.is_initialized,
            signers=[Pubkey.from_bytes(raw) for raw in parsed.signers[:parsed.n]],
        )

    def __str__(self) -> str:
        return f"Multisig({self.address}, {self.threshold}-of-{self.signer_count})"


@dataclass(frozen=True)
class MintState:
    """Decoded mint account."""
    address: Pubkey
    mint_authority: Optional[Pubkey]
    supply: int
    decimals: int
    is_initialized: bool
    freeze_authority: Optional[Pubkey]

    @classmethod
    def decode(cls, address: Pubkey, data: bytes) -> 'MintState':
        parsed = _parse(MINT_LAYOUT, MINT_SIZE, address, data, "Mint")
        return cls(
            address=address,
            mint_authority=_optional_key(parsed.mint_authority_option, parsed.mint_authority),
            supply=parsed.supply,
            decimals=parsed.decimals,
            is_initialized=parsed.is_initialized,
            freeze_authority=_optional_key(parsed.freeze_authority_option, parsed.freeze_authority),
        )

    def __str__(self) -> str:
        return (f"Mint({self.address}, supply={self.supply}, decimals={self.decimals}, "
                f"authority={self.mint_authority})")


@dataclass(frozen=True)
class TokenAccountState:
    """Decoded token account (only the fields this workflow reads)."""
    address: Pubkey
    mint: Pubkey
    owner: Pubkey
    amount: int

    @classmethod
    def decode(cls, address: Pubkey, data: bytes) -> 'TokenAccountState':
        parsed = _parse(ACCOUNT_LAYOUT, ACCOUNT_SIZE, address, data, "Token")
        return cls(
            address=address,
            mint=Pubkey.from_bytes(parsed.mint),
            owner=Pubkey.from_bytes(parsed.owner),
            amount=parsed.amount,
        )
