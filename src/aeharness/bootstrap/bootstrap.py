"""Build node/compiler adapters and client sessions from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from aeharness import config
from aeharness.adapters.compiler.http import HttpCompiler
from aeharness.adapters.devnet import DevnetCompiler, DevnetNode
from aeharness.adapters.devnet.node import DEVNET_NETWORK_ID
from aeharness.adapters.node.http import HttpNode
from aeharness.adapters.redactor import Redactor
from aeharness.client.session import ClientSession
from aeharness.config import NetworkConfig
from aeharness.domain.value_objects import Keypair
from aeharness.interfaces.compiler import Compiler
from aeharness.interfaces.node import Node
from aeharness.interfaces.redactor import Redactor as RedactorPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """The adapters of one network plus the configured wallets.

    Every session built from the container shares its node and compiler, so
    all actors see the same chain.
    """

    network: NetworkConfig
    node: Node
    compiler: Compiler
    wallets: list[Keypair] = field(default_factory=list)

    def session(self, actor: int | Keypair = 0) -> ClientSession:
        """Return a session for a configured wallet (by index) or a keypair."""
        keypair = self.wallets[actor] if isinstance(actor, int) else actor
        return build_session(keypair, self.node, self.compiler)

    def close(self) -> None:
        """Close the node and compiler adapters."""
        self.node.close()
        self.compiler.close()


def build_node(network: NetworkConfig, redactor: RedactorPort | None = None) -> Node:
    """Build the node adapter for ``network``."""
    if network.node_in_memory:
        return DevnetNode(network_id=network.network_id or DEVNET_NETWORK_ID)
    return HttpNode(
        network.node_url,
        network.network_id,
        timeout=network.timeout,
        poll_interval=network.poll_interval,
        poll_attempts=network.poll_attempts,
        defaults=network.transaction_defaults,
        redactor=redactor,
    )


def build_compiler(network: NetworkConfig, redactor: RedactorPort | None = None) -> Compiler:
    """Build the compiler adapter for ``network``."""
    if network.compiler_in_memory:
        return DevnetCompiler()
    return HttpCompiler(network.compiler_url, timeout=network.timeout, redactor=redactor)


def build_session(keypair: Keypair, node: Node, compiler: Compiler) -> ClientSession:
    """Build a client session signing with ``keypair``."""
    return ClientSession(keypair, node, compiler)


def bootstrap(
    network_name: str | None = None,
    config_dir: Path | None = None,
    redactor: RedactorPort | None = None,
) -> AppContainer:
    """Load configuration and wire the adapters of the selected network.

    Args:
        network_name: Network to use; defaults to `config.get_network_name`.
        config_dir: Configuration directory; defaults to `config.get_config_dir`.
        redactor: Redactor for endpoints in error messages.

    Raises:
        NetworkNotConfiguredError: If the network is not configured.
        WalletConfigError: If the wallet configuration is invalid.
    """
    network = config.get_network(network_name, config_dir)
    wallets = config.load_wallets(config_dir)
    redactor = redactor or Redactor()
    logger.info(
        "Using network '%s' (node %s, compiler %s)",
        network.name,
        redactor.sanitize_url(network.node_url),
        redactor.sanitize_url(network.compiler_url),
    )
    return AppContainer(
        network=network,
        node=build_node(network, redactor),
        compiler=build_compiler(network, redactor),
        wallets=wallets,
    )
