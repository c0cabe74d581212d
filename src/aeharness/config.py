"""Configuration utilities for aeharness.

This module centralizes the constants and loaders for the two JSON
configuration files the harness reads:

- ``network.json``: named environments, each mapping to a node URL, a
  compiler URL and optional network id, timeout and polling settings;
- ``wallets.json``: the ordered list of default keypairs used as test actors.

The configuration directory defaults to ``config/`` at the repository root
and can be moved with the ``AEHARNESS_CONFIG_DIR`` environment variable.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from aeharness.domain.errors import HarnessError
from aeharness.domain.value_objects import Keypair
from aeharness.interfaces.node import TransactionDefaults

ROOT = Path(__file__).resolve().parents[2]

CONFIG_DIR_ENV = "AEHARNESS_CONFIG_DIR"  # pragma: no mutate
NETWORK_ENV = "AEHARNESS_NETWORK"  # pragma: no mutate
DEFAULT_NETWORK = "local"
NETWORK_FILE = "network.json"
WALLETS_FILE = "wallets.json"
MEMORY_SCHEME = "memory://"


class NetworkNotConfiguredError(HarnessError):
    """Raised when a network name is not present in the network configuration."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            f"Network '{name}' is not configured. "
            f"Available: {', '.join(sorted(available)) or '<none>'}"
        )
        self.name = name


class ConfigFileError(HarnessError):
    """Raised when a configuration file is missing or malformed."""


class WalletConfigError(ConfigFileError):
    """Raised when the wallet configuration is missing or invalid."""


@dataclass(frozen=True)
class NetworkConfig:  # pylint: disable=too-many-instance-attributes
    """Connection settings of one named environment.

    Attributes:
        name: Logical name, e.g. ``"local"``.
        node_url: Node endpoint. ``memory://`` selects the in-process devnet.
        compiler_url: Compiler endpoint. ``memory://`` selects the devnet compiler.
        network_id: Network identifier; asked from the node when None.
        timeout: Per-request timeout in seconds.
        poll_interval: Seconds between transaction-info polls.
        poll_attempts: Polls before a pending transaction is a TransportError.
        transaction_defaults: Fee and VM parameters for built transactions.
    """

    name: str
    node_url: str
    compiler_url: str
    network_id: str | None = None
    timeout: float = 10.0
    poll_interval: float = 0.5
    poll_attempts: int = 20
    transaction_defaults: TransactionDefaults = field(default_factory=TransactionDefaults)

    @property
    def node_in_memory(self) -> bool:
        """True if the node is the in-process devnet."""
        return self.node_url.startswith(MEMORY_SCHEME)

    @property
    def compiler_in_memory(self) -> bool:
        """True if the compiler is the in-process devnet compiler."""
        return self.compiler_url.startswith(MEMORY_SCHEME)

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "NetworkConfig":
        """Build a config from one ``network.json`` entry.

        Raises:
            ConfigFileError: If a required URL is missing.
        """
        try:
            node_url, compiler_url = data["nodeUrl"], data["compilerUrl"]
        except KeyError as e:
            raise ConfigFileError(f"Network '{name}' is missing '{e.args[0]}'") from e
        return cls(
            name=name,
            node_url=node_url,
            compiler_url=compiler_url,
            network_id=data.get("networkId"),
            timeout=float(data.get("timeout", 10.0)),
            poll_interval=float(data.get("pollInterval", 0.5)),
            poll_attempts=int(data.get("pollAttempts", 20)),
        )


def get_config_dir() -> Path:
    """Return the configuration directory.

    Returns:
        The value of ``AEHARNESS_CONFIG_DIR`` if set, else ``<repo>/config``.
    """
    if env := os.environ.get(CONFIG_DIR_ENV):
        return Path(env)
    return ROOT / "config"


def get_network_name() -> str:
    """Return the default network name (``AEHARNESS_NETWORK`` or ``local``)."""
    return os.environ.get(NETWORK_ENV) or DEFAULT_NETWORK


def _read_json(path: Path, error: type[HarnessError]) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise error(f"Configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise error(f"Invalid JSON in {path}: {e}") from e


def load_networks(config_dir: Path | None = None) -> dict[str, NetworkConfig]:
    """Load every network from ``network.json``.

    Raises:
        ConfigFileError: If the file is missing, is not valid JSON, or an
            entry lacks a URL.
    """
    path = (config_dir or get_config_dir()) / NETWORK_FILE
    data = _read_json(path, ConfigFileError)
    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ConfigFileError(f"{path} must map network names to objects")
    return {name: NetworkConfig.from_dict(name, entry) for name, entry in data.items()}


def get_network(name: str | None = None, config_dir: Path | None = None) -> NetworkConfig:
    """Return the network called ``name`` (default: `get_network_name`).

    Raises:
        NetworkNotConfiguredError: If no such network is configured.
    """
    name = name or get_network_name()
    networks = load_networks(config_dir)
    if name not in networks:
        raise NetworkNotConfiguredError(name, list(networks))
    return networks[name]


def load_wallets(config_dir: Path | None = None) -> list[Keypair]:
    """Load the default wallets from ``wallets.json`` in order.

    Each entry needs a hex ``secretKey``; an optional ``publicKey`` must match
    the one derived from it.

    Raises:
        WalletConfigError: If the file is missing, malformed, or a key is invalid.
    """
    path = (config_dir or get_config_dir()) / WALLETS_FILE
    data = _read_json(path, WalletConfigError)
    entries = data.get("defaultWallets") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise WalletConfigError(f"{path} has no 'defaultWallets' list")

    wallets = []
    for i, entry in enumerate(entries):
        try:
            keypair = Keypair.from_secret_key(entry["secretKey"])
        except (KeyError, TypeError, ValueError) as e:
            raise WalletConfigError(f"Wallet #{i} in {path} is invalid: {e}") from e
        if (public_key := entry.get("publicKey")) and public_key != keypair.public_key:
            raise WalletConfigError(
                f"Wallet #{i} in {path}: publicKey does not match the secret key"
            )
        wallets.append(keypair)
    return wallets
