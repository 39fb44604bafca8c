"""Unit tests for the workflow driver."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest
from solders.keypair import Keypair

from local_ledger import LocalLedger
from multisig_minter.config import MinterConfig
from multisig_minter.core.identity import IdentitySource, ResolvedIdentity
from multisig_minter.core.ledger import LedgerContext
from multisig_minter.errors import InvalidMultisigError, LedgerRejectedError, WorkflowAborted
from multisig_minter.workflow import MintWorkflow, WorkflowState


class RecordingReporter:
    def __init__(self) -> None:
        self.steps: list[str] = []
        self.states: list[WorkflowState] = []

    def __call__(self, step: str, state: WorkflowState) -> None:
        self.steps.append(step)
        self.states.append(state)


def test_end_to_end_two_of_two_mints_100(ledger: LedgerContext, minter_config: MinterConfig,
                                         operator: Keypair) -> None:
    reporter = RecordingReporter()

    state = MintWorkflow(ledger, minter_config, reporter=reporter).run()

    assert reporter.steps == ["resolve-identity", "create-multisig", "create-mint", "mint-to"]
    assert state.identity.source is IdentitySource.CONFIGURED
    assert state.operator.pubkey() == operator.pubkey()
    assert len(state.co_signers) == 1

    assert state.multisig.threshold == 2
    assert state.multisig.signers == [operator.pubkey(), state.co_signers[0].pubkey()]
    assert state.mint.mint_authority == state.multisig_account.pubkey()
    assert state.mint.decimals == 0
    assert state.mint.freeze_authority is None

    assert state.recipient_account.owner == operator.pubkey()
    assert state.recipient_account.amount == 100
    assert len({state.multisig_signature, state.mint_signature, state.mint_to_signature}) == 3


def test_each_step_surfaces_its_signature_before_the_next(ledger: LedgerContext,
                                                          minter_config: MinterConfig) -> None:
    reporter = RecordingReporter()

    MintWorkflow(ledger, minter_config, reporter=reporter).run()

    after_multisig, after_mint = reporter.states[1], reporter.states[2]
    assert after_multisig.multisig_signature is not None
    assert after_multisig.mint_signature is None
    assert after_mint.mint_signature is not None
    assert after_mint.mint_to_signature is None


def test_two_of_three_uses_threshold_approvers(ledger: LedgerContext, minter_config: MinterConfig) -> None:
    config = replace(minter_config, co_signers=2, threshold=2, amount=5)

    state = MintWorkflow(ledger, config).run()

    assert (state.multisig.threshold, state.multisig.signer_count) == (2, 3)
    assert state.recipient_account.amount == 5


def test_ephemeral_identity_aborts_at_first_fee_payment(ledger: LedgerContext, local_ledger: LocalLedger,
                                                        tmp_path: Path) -> None:
    config = MinterConfig(cli_config_path=tmp_path / "absent.yml", poll_interval=0)
    reporter = RecordingReporter()

    with pytest.raises(WorkflowAborted) as excinfo:
        MintWorkflow(ledger, config, reporter=reporter).run()

    assert excinfo.value.step == "create-multisig"
    assert isinstance(excinfo.value.cause, LedgerRejectedError)
    assert reporter.steps == ["resolve-identity"]
    assert reporter.states[0].identity.is_ephemeral
    assert local_ledger.statuses == {}


def test_abort_leaves_earlier_transactions_in_place(ledger: LedgerContext, local_ledger: LocalLedger,
                                                    minter_config: MinterConfig) -> None:
    workflow = MintWorkflow(ledger, minter_config)

    def failing_mint_to(state: WorkflowState) -> WorkflowState:
        raise LedgerRejectedError("boom")

    workflow.mint_to = failing_mint_to

    with pytest.raises(WorkflowAborted) as excinfo:
        workflow.run()

    assert excinfo.value.step == "mint-to"
    assert len(local_ledger.statuses) == 2


def test_invalid_threshold_aborts_before_sending(ledger: LedgerContext, local_ledger: LocalLedger,
                                                 minter_config: MinterConfig) -> None:
    config = replace(minter_config, threshold=3)

    with pytest.raises(WorkflowAborted) as excinfo:
        MintWorkflow(ledger, config).run()

    assert isinstance(excinfo.value.cause, InvalidMultisigError)
    assert local_ledger.sent == []


def test_injected_resolver_is_used(ledger: LedgerContext, operator: Keypair, tmp_path: Path) -> None:
    identity = ResolvedIdentity(operator, IdentitySource.CONFIGURED)
    config = MinterConfig(cli_config_path=tmp_path / "absent.yml", poll_interval=0)

    state = MintWorkflow(ledger, config, resolver=lambda: identity).run()

    assert state.identity is identity
    assert state.recipient_account.amount == 100


def test_rerun_creates_new_accounts(ledger: LedgerContext, minter_config: MinterConfig) -> None:
    first = MintWorkflow(ledger, minter_config).run()
    second = MintWorkflow(ledger, minter_config).run()

    assert first.multisig_account.pubkey() != second.multisig_account.pubkey()
    assert first.mint_account.pubkey() != second.mint_account.pubkey()
    assert second.recipient_account.amount == 100
