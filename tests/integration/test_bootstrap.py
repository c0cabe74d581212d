"""Wiring adapters and sessions from configuration files."""

from __future__ import annotations

import pytest

from aeharness.adapters.compiler.http import HttpCompiler
from aeharness.adapters.devnet import DevnetCompiler, DevnetNode
from aeharness.adapters.node.http import HttpNode
from aeharness.bootstrap import AppContainer, bootstrap
from aeharness.config import NetworkNotConfiguredError, WalletConfigError


def test_devnet_container(devnet_config_dir, owner_keypair, other_keypair, nft_artifact):
    """memory:// endpoints select the devnet; sessions share one chain."""
    container = bootstrap("devnet", devnet_config_dir)
    try:
        assert isinstance(container, AppContainer)
        assert isinstance(container.node, DevnetNode)
        assert isinstance(container.compiler, DevnetCompiler)
        assert container.node.network_id == "ae_devnet"
        assert container.wallets == [owner_keypair, other_keypair]

        owner, other = container.session(0), container.session(1)
        assert owner.address == owner_keypair.address
        nft = owner.deploy(nft_artifact, "Test NFT", "TST")
        same = other.bind(nft_artifact, nft.address)
        assert same.methods.name().decoded_result == "Test NFT"
    finally:
        container.close()


def test_session_for_explicit_keypair(devnet_config_dir, stranger_keypair):
    """Actors outside wallets.json can be used too."""
    container = bootstrap("devnet", devnet_config_dir)
    assert container.session(stranger_keypair).address == stranger_keypair.address
    container.close()


def test_http_container(devnet_config_dir):
    """Other endpoints get the HTTP adapters; nothing is contacted."""
    container = bootstrap("remote", devnet_config_dir)
    try:
        assert isinstance(container.node, HttpNode)
        assert isinstance(container.compiler, HttpCompiler)
        assert container.node.network_id == "ae_uat"
    finally:
        container.close()


def test_network_from_environment(monkeypatch, devnet_config_dir):
    """Without a name, AEHARNESS_NETWORK picks the network."""
    monkeypatch.setenv("AEHARNESS_NETWORK", "devnet")
    container = bootstrap(config_dir=devnet_config_dir)
    assert container.network.name == "devnet"
    container.close()


def test_unknown_network(devnet_config_dir):
    """The error lists the configured networks."""
    with pytest.raises(NetworkNotConfiguredError, match="Available: devnet, remote"):
        bootstrap("mainnet", devnet_config_dir)


def test_missing_wallets(devnet_config_dir):
    """wallets.json is required."""
    (devnet_config_dir / "wallets.json").unlink()
    with pytest.raises(WalletConfigError, match="not found"):
        bootstrap("devnet", devnet_config_dir)
