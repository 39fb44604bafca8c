"""
Multisig Minter

Provision an M-of-N multisig on a Solana cluster, create an SPL token mint
whose authority is that multisig, and mint tokens with a quorum of member
signatures.

Key pieces:
- Transaction builder and a single-attempt send-and-confirm submitter
- Multisig and mint provisioning (rent-exempt allocation + initialize)
- Multisig-authorized mint-to with on-demand associated token accounts
- A sequential workflow driver that aborts on the first failure
"""

__version__ = "1.0.0"

from .config import MinterConfig
from .core import *
from .errors import MinterError, WorkflowAborted
from .workflow import MintWorkflow, WorkflowState

__all__ = [
    'MinterConfig',
    'MinterError',
    'WorkflowAborted',
    'MintWorkflow',
    'WorkflowState',

    # Core components
    'LedgerContext',
    'TransactionBuilder',
    'ResolvedIdentity',
    'IdentitySource',
    'resolve_identity',
    'submit_transaction',
    'MultisigState',
    'MintState',
    'TokenAccountState',
]
