"""
On-chain program clients used by the workflow:
- System Program: rent-exempt account allocation
- SPL Token Program: multisig and mint provisioning, multisig mint-to
- Associated Token Program: deterministic per-owner token accounts
"""

from .associated_token import AssociatedTokenAccount, get_or_create_associated_token_account
from .mint_to import mint_to_with_multisig
from .system import AccountAllocation, rent_exempt_allocation
from .token import create_mint, create_multisig, get_mint, get_multisig, get_token_account

__all__ = [
    'AssociatedTokenAccount',
    'get_or_create_associated_token_account',
    'mint_to_with_multisig',
    'AccountAllocation',
    'rent_exempt_allocation',
    'create_mint',
    'create_multisig',
    'get_mint',
    'get_multisig',
    'get_token_account',
]
