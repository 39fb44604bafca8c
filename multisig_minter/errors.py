"""
Exception taxonomy for the minting workflow.

Configuration failures are recovered locally by the identity resolver.
Everything else is fatal: it propagates to the workflow driver, which
aborts the run. Confirmed transactions from earlier steps stay on the
ledger; nothing is compensated.
"""


class MinterError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(MinterError):
    """The CLI config or keypair file is missing or malformed."""


class InvalidMultisigError(MinterError, ValueError):
    """Multisig members/threshold violate 1 <= N <= M <= MAX_SIGNERS."""


class SigningError(MinterError):
    """A required signer of a transaction has no matching keypair."""


class LedgerTransportError(MinterError):
    """The RPC endpoint could not be reached."""


class LedgerRejectedError(MinterError):
    """The ledger refused the transaction, or executed it with an error."""


class ConfirmationTimeoutError(MinterError):
    """The blockhash validity window expired before confirmation."""

    def __init__(self, signature, last_valid_block_height: int):
        super().__init__(
            f"Transaction {signature} not confirmed before block height "
            f"{last_valid_block_height}"
        )
        self.signature = signature
        self.last_valid_block_height = last_valid_block_height


class AccountStateError(MinterError):
    """An on-chain account is missing or does not match the expected layout."""


class WorkflowAborted(MinterError):
    """A workflow step failed; the remaining steps were not run."""

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"Step '{step}' failed: {cause}")
        self.step = step
        self.cause = cause
