"""
Runtime configuration.

The workflow takes all of its settings from an explicit MinterConfig value.
The only file read here is the Solana CLI config, which tells us where the
operator's keypair lives.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

DEFAULT_RPC_URL = "http://127.0.0.1:8899"
DEFAULT_COMMITMENT = "confirmed"
DEFAULT_MINT_AMOUNT = 100
DEFAULT_LOG_LEVEL = "INFO"

# Weakest to strongest
COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")


def default_cli_config_path() -> Path:
    """Location the Solana CLI writes its config to."""
    return Path.home() / ".config" / "solana" / "cli" / "config.yml"


@dataclass(frozen=True)
class MinterConfig:
    """Settings for one workflow run."""
    rpc_url: str = DEFAULT_RPC_URL
    commitment: str = DEFAULT_COMMITMENT
    cli_config_path: Path = field(default_factory=default_cli_config_path)
    poll_interval: float = 0.5           # Seconds between signature status polls
    amount: int = DEFAULT_MINT_AMOUNT    # Base units minted to the operator
    co_signers: int = 1                  # Generated multisig members besides the operator
    threshold: Optional[int] = None      # None means every member must sign
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if self.co_signers < 0:
            raise ValueError("co_signers cannot be negative")
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if self.poll_interval < 0:
            raise ValueError("poll_interval cannot be negative")
        if self.commitment not in COMMITMENT_LEVELS:
            raise ValueError(f"commitment must be one of {', '.join(COMMITMENT_LEVELS)}, got {self.commitment!r}")

    @property
    def member_count(self) -> int:
        return self.co_signers + 1

    @property
    def effective_threshold(self) -> int:
        return self.member_count if self.threshold is None else self.threshold

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        # solana-py and httpx log every request at INFO
        logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def read_cli_config(path: Path) -> Dict[str, Any]:
    """
    Read the Solana CLI config file.

    Returns:
        The parsed YAML mapping

    Raises:
        ConfigError: if the file is missing, unreadable or not a mapping
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read CLI config {path}: {e}") from e

    try:
        config = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed CLI config {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"CLI config {path} is not a mapping")
    return config
