"""
Operator Identity Resolution

The operator's signing identity normally comes from the keypair the Solana
CLI is configured with. When that cannot be read the workflow still gets a
usable identity: a freshly generated keypair. The result says which of the
two happened, because an ephemeral keypair holds no lamports and cannot pay
transaction fees.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..config import default_cli_config_path, read_cli_config
from ..errors import ConfigError

logger = logging.getLogger(__name__)


class IdentitySource(Enum):
    CONFIGURED = "configured"
    EPHEMERAL = "ephemeral"


@dataclass(frozen=True)
class ResolvedIdentity:
    """A signing keypair plus where it came from."""
    keypair: Keypair
    source: IdentitySource
    keypair_path: Optional[Path] = None
    fallback_reason: Optional[str] = None

    @property
    def pubkey(self) -> Pubkey:
        return self.keypair.pubkey()

    @property
    def is_ephemeral(self) -> bool:
        return self.source is IdentitySource.EPHEMERAL


def read_keypair_file(path: Path) -> Keypair:
    """
    Load a keypair from a Solana CLI keypair file.

    The file is a JSON array of the 64 secret-key bytes.

    Raises:
        ConfigError: if the file is missing or does not hold a valid keypair
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Keypair file {path} is not valid JSON: {e}") from e
    except (OSError, ValueError) as e:
        # ValueError covers undecodable bytes and NUL in the path
        raise ConfigError(f"Cannot read keypair file {path}: {e}") from e

    if not isinstance(raw, list) or len(raw) != 64:
        raise ConfigError(f"Keypair file {path} must hold a list of 64 bytes")

    try:
        return Keypair.from_bytes(bytes(raw))
    except (ValueError, TypeError) as e:
        raise ConfigError(f"Keypair file {path} holds an invalid keypair: {e}") from e


def load_configured_identity(config_path: Path) -> ResolvedIdentity:
    """Read the keypair named by the CLI config at config_path."""
    config = read_cli_config(config_path)
    keypair_path = config.get("keypair_path")
    if not keypair_path:
        raise ConfigError(f"CLI config {config_path} has no keypair_path")

    try:
        keypair_path = Path(str(keypair_path)).expanduser()
    except RuntimeError as e:
        raise ConfigError(f"Cannot expand keypair_path {keypair_path}: {e}") from e
    keypair = read_keypair_file(keypair_path)
    return ResolvedIdentity(keypair, IdentitySource.CONFIGURED, keypair_path=keypair_path)


def resolve_identity(config_path: Optional[Path] = None) -> ResolvedIdentity:
    """
    Resolve the operator identity, falling back to a fresh keypair.

    Never raises for configuration problems; the fallback is reported
    through the returned ResolvedIdentity instead.
    """
    config_path = Path(config_path) if config_path else default_cli_config_path()
    try:
        identity = load_configured_identity(config_path)
    except ConfigError as e:
        logger.warning(
            "Failed to read keypair from CLI config file, falling back to new random keypair: %s", e
        )
        return ResolvedIdentity(Keypair(), IdentitySource.EPHEMERAL, fallback_reason=str(e))

    logger.info("Using keypair %s from %s", identity.pubkey, identity.keypair_path)
    return identity
