"""Deployment configuration for linktum-deployments library."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values
from eth_utils import is_hex

from .constants import (
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RPC_URL,
    ENV_ARTIFACTS_DIR,
    ENV_CONFIRMATION_TIMEOUT,
    ENV_DEPLOYMENTS_DIR,
    ENV_GAS_LIMIT,
    ENV_LOG_LEVEL,
    ENV_POLL_INTERVAL,
    ENV_PRIVATE_KEY,
    ENV_RPC_URL,
)
from .exceptions import ConfigurationError
from .paths import get_default_artifacts_dir, resolve_dir


@dataclass
class DeployConfig:
    """Everything a deployment run needs from its environment."""

    rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = field(default=None, repr=False)  # None: use node account
    artifacts_dir: Path = field(default_factory=get_default_artifacts_dir)
    deployments_dir: Optional[Path] = None  # None: no records written
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    gas_limit: Optional[int] = None  # None: estimate
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ConfigurationError("RPC URL must not be empty")
        if self.private_key is not None:
            self.private_key = normalize_private_key(self.private_key)
        self.artifacts_dir = Path(self.artifacts_dir)
        if self.confirmation_timeout <= 0:
            raise ConfigurationError("Confirmation timeout must be positive")
        if self.poll_interval <= 0:
            raise ConfigurationError("Poll interval must be positive")
        if self.gas_limit is not None and self.gas_limit <= 0:
            raise ConfigurationError("Gas limit must be positive")
        self.log_level = self.log_level.strip().upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Union[Path, str]] = None,
    ) -> "DeployConfig":
        """
        Build configuration from environment variables.

        Values from a .env file are used only where the environment does not
        set the same variable.

        Args:
            environ: Environment mapping (defaults to os.environ)
            dotenv_path: Path to a .env file (defaults to ./.env)

        Returns:
            DeployConfig instance

        Raises:
            ConfigurationError: If a value is malformed
        """
        if environ is None:
            environ = os.environ
        if dotenv_path is None:
            dotenv_path = Path.cwd() / ".env"

        values: dict = {}
        if Path(dotenv_path).is_file():
            values.update(
                {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
            )
        values.update(environ)

        return cls(
            rpc_url=values.get(ENV_RPC_URL) or DEFAULT_RPC_URL,
            private_key=values.get(ENV_PRIVATE_KEY) or None,
            artifacts_dir=resolve_dir(values.get(ENV_ARTIFACTS_DIR))
            or get_default_artifacts_dir(),
            deployments_dir=resolve_dir(values.get(ENV_DEPLOYMENTS_DIR)),
            confirmation_timeout=_parse_number(
                values, ENV_CONFIRMATION_TIMEOUT, float, DEFAULT_CONFIRMATION_TIMEOUT
            ),
            poll_interval=_parse_number(
                values, ENV_POLL_INTERVAL, float, DEFAULT_POLL_INTERVAL
            ),
            gas_limit=_parse_number(values, ENV_GAS_LIMIT, int, None),
            log_level=values.get(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL,
        )


def normalize_private_key(key: str) -> str:
    """
    Normalize a hex private key to 0x-prefixed lowercase form.

    Raises:
        ConfigurationError: If key is not 32 bytes of hex
    """
    key = key.strip().lower()
    if not key.startswith("0x"):
        key = "0x" + key
    if len(key) != 66 or not is_hex(key):
        # Never echo the key itself
        raise ConfigurationError(f"{ENV_PRIVATE_KEY} must be 32 bytes of hex")
    return key


def _parse_number(values: Mapping[str, str], name: str, kind: type, default):
    raw = values.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e
