"""
Multisig Minting Workflow

The workflow is an ordered pipeline of named steps. Each step takes the
current WorkflowState and returns a new one; the driver runs them strictly
in sequence and stops at the first failure. Confirmed transactions from
earlier steps are permanent, so an aborted run is not rolled back, and a
re-run creates brand new accounts.

    resolve-identity -> create-multisig -> create-mint -> mint-to
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.instructions import get_associated_token_address

from .config import MinterConfig
from .core.accounts import MintState, MultisigState, TokenAccountState
from .core.identity import ResolvedIdentity, resolve_identity
from .core.ledger import LedgerContext
from .core.transactions import generate_keypair
from .errors import MinterError, WorkflowAborted
from .programs.mint_to import mint_to_with_multisig
from .programs.token import (
    create_mint,
    create_multisig,
    get_mint,
    get_multisig,
    get_token_account,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowState:
    """Everything the steps have produced so far."""
    identity: Optional[ResolvedIdentity] = None
    co_signers: Tuple[Keypair, ...] = ()
    multisig_account: Keypair = field(default_factory=generate_keypair)
    mint_account: Keypair = field(default_factory=generate_keypair)

    multisig_signature: Optional[Signature] = None
    multisig: Optional[MultisigState] = None
    mint_signature: Optional[Signature] = None
    mint: Optional[MintState] = None
    mint_to_signature: Optional[Signature] = None
    recipient_account: Optional[TokenAccountState] = None

    @property
    def operator(self) -> Keypair:
        if self.identity is None:
            raise MinterError("Operator identity has not been resolved")
        return self.identity.keypair

    @property
    def signers(self) -> List[Keypair]:
        """Multisig members, operator first so it pays the fees."""
        return [self.operator, *self.co_signers]

    @property
    def members(self) -> List[Pubkey]:
        return [kp.pubkey() for kp in self.signers]


Step = Callable[[WorkflowState], WorkflowState]
Reporter = Callable[[str, WorkflowState], None]


@dataclass(frozen=True)
class WorkflowStep:
    name: str
    run: Step


def log_reporter(step: str, state: WorkflowState) -> None:
    logger.info("Step %s complete", step)


class MintWorkflow:
    """
    Driver for the full provisioning and minting sequence.

    The identity resolver and reporter are injectable so the operator
    surface (and tests) decide where the identity comes from and how
    progress is shown.
    """

    def __init__(self, ledger: LedgerContext, config: MinterConfig,
                 resolver: Optional[Callable[[], ResolvedIdentity]] = None,
                 reporter: Reporter = log_reporter):
        self.ledger = ledger
        self.config = config
        self.resolver = resolver or (lambda: resolve_identity(config.cli_config_path))
        self.reporter = reporter

    def steps(self) -> List[WorkflowStep]:
        return [
            WorkflowStep("resolve-identity", self.resolve_identity),
            WorkflowStep("create-multisig", self.create_multisig),
            WorkflowStep("create-mint", self.create_mint),
            WorkflowStep("mint-to", self.mint_to),
        ]

    def run(self, state: Optional[WorkflowState] = None) -> WorkflowState:
        """
        Run every step in order.

        Raises:
            WorkflowAborted: wrapping the first error any step raised
        """
        state = state or WorkflowState()
        for step in self.steps():
            logger.debug("Starting step %s", step.name)
            try:
                state = step.run(state)
            except MinterError as e:
                logger.error("Step %s failed: %s", step.name, e)
                raise WorkflowAborted(step.name, e) from e
            self.reporter(step.name, state)
        return state

    # Steps

    def resolve_identity(self, state: WorkflowState) -> WorkflowState:
        identity = self.resolver()
        if identity.is_ephemeral:
            logger.warning(
                "Operator %s is an ephemeral keypair with no lamports; fee payments will fail",
                identity.pubkey,
            )
        co_signers = tuple(generate_keypair() for _ in range(self.config.co_signers))
        return replace(state, identity=identity, co_signers=co_signers)

    def create_multisig(self, state: WorkflowState) -> WorkflowState:
        threshold = self.config.effective_threshold
        signature = create_multisig(
            self.ledger, state.operator, state.members, threshold, state.multisig_account
        )
        multisig = get_multisig(self.ledger, state.multisig_account.pubkey())
        return replace(state, multisig_signature=signature, multisig=multisig)

    def create_mint(self, state: WorkflowState) -> WorkflowState:
        signature = create_mint(
            self.ledger, state.operator, state.mint_account, state.multisig_account.pubkey()
        )
        mint = get_mint(self.ledger, state.mint_account.pubkey())
        return replace(state, mint_signature=signature, mint=mint)

    def mint_to(self, state: WorkflowState) -> WorkflowState:
        """Mint to the operator, approved by the first `threshold` members."""
        mint = state.mint_account.pubkey()
        approvers = state.signers[:self.config.effective_threshold]
        signature = mint_to_with_multisig(
            self.ledger,
            mint,
            state.operator.pubkey(),
            self.config.amount,
            state.multisig_account.pubkey(),
            approvers,
        )
        token_account = get_associated_token_address(state.operator.pubkey(), mint)
        balance = get_token_account(self.ledger, token_account)
        return replace(state, mint_to_signature=signature, recipient_account=balance)
