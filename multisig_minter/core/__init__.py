"""
Core transaction orchestration: identity, account layouts, transaction
assembly, and submission against a ledger context.
"""

from .accounts import MintState, MultisigState, TokenAccountState
from .identity import IdentitySource, ResolvedIdentity, resolve_identity
from .ledger import LedgerContext, submit_transaction
from .transactions import TransactionBuilder, build_transaction, sign_transaction

__all__ = [
    'MintState', 'MultisigState', 'TokenAccountState',
    'IdentitySource', 'ResolvedIdentity', 'resolve_identity',
    'LedgerContext', 'submit_transaction',
    'TransactionBuilder', 'build_transaction', 'sign_transaction',
]
