"""Unit tests for aeharness.config."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from aeharness import config
from aeharness.config import (
    ConfigFileError,
    NetworkConfig,
    NetworkNotConfiguredError,
    WalletConfigError,
)
from aeharness.domain.value_objects import Keypair

SEED = bytes(range(32))


def _write_json(directory: Path, name: str, data) -> None:
    (directory / name).write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """A configuration directory with two networks and one wallet."""
    _write_json(
        tmp_path,
        config.NETWORK_FILE,
        {
            "local": {"nodeUrl": "http://localhost:3001", "compilerUrl": "http://localhost:3080"},
            "devnet": {
                "nodeUrl": "memory://devnet",
                "compilerUrl": "memory://devnet",
                "networkId": "ae_devnet",
                "timeout": 3,
                "pollInterval": 0.1,
                "pollAttempts": 5,
            },
        },
    )
    _write_json(tmp_path, config.WALLETS_FILE, {"defaultWallets": [{"secretKey": SEED.hex()}]})
    return tmp_path


class TestLocations:
    """Where configuration is looked up."""

    def test_default_config_dir_is_repo_config(self, monkeypatch):
        """Without the env var, ``<repo>/config`` is used."""
        monkeypatch.delenv(config.CONFIG_DIR_ENV, raising=False)
        assert config.get_config_dir() == config.ROOT / "config"

    def test_config_dir_env_override(self, monkeypatch, tmp_path):
        """AEHARNESS_CONFIG_DIR moves the directory."""
        monkeypatch.setenv(config.CONFIG_DIR_ENV, str(tmp_path))
        assert config.get_config_dir() == tmp_path

    def test_network_name(self, monkeypatch):
        """AEHARNESS_NETWORK selects the default network."""
        monkeypatch.delenv(config.NETWORK_ENV, raising=False)
        assert config.get_network_name() == "local"
        monkeypatch.setenv(config.NETWORK_ENV, "devnet")
        assert config.get_network_name() == "devnet"


class TestNetworks:
    """network.json parsing."""

    def test_load_networks(self, config_dir):
        """Every entry becomes a NetworkConfig with defaults filled in."""
        networks = config.load_networks(config_dir)
        local, devnet = networks["local"], networks["devnet"]
        assert local.network_id is None
        assert (local.timeout, local.poll_interval, local.poll_attempts) == (10.0, 0.5, 20)
        assert not local.node_in_memory
        assert devnet.node_in_memory and devnet.compiler_in_memory
        assert (devnet.timeout, devnet.poll_interval, devnet.poll_attempts) == (3.0, 0.1, 5)

    def test_get_network_by_env(self, config_dir, monkeypatch):
        """The env var picks the network when no name is passed."""
        monkeypatch.setenv(config.NETWORK_ENV, "devnet")
        assert config.get_network(config_dir=config_dir).network_id == "ae_devnet"

    def test_unknown_network_lists_available(self, config_dir):
        """Unknown names raise NetworkNotConfiguredError with the choices."""
        with pytest.raises(NetworkNotConfiguredError, match="Available: devnet, local"):
            config.get_network("mainnet", config_dir)

    def test_missing_url(self):
        """Entries need both URLs."""
        with pytest.raises(ConfigFileError, match="compilerUrl"):
            NetworkConfig.from_dict("broken", {"nodeUrl": "http://x"})

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"local": "http://x"}'])
    def test_malformed_file(self, tmp_path, content):
        """Unparseable or wrongly shaped files raise ConfigFileError."""
        (tmp_path / config.NETWORK_FILE).write_text(content, encoding="utf-8")
        with pytest.raises(ConfigFileError):
            config.load_networks(tmp_path)

    def test_missing_file(self, tmp_path):
        """A missing network.json is reported with its path."""
        with pytest.raises(ConfigFileError, match="not found"):
            config.load_networks(tmp_path)

    def test_bundled_configuration(self):
        """The repository ships the three documented networks."""
        assert set(config.load_networks(config.ROOT / "config")) == {"local", "devnet", "testnet"}


class TestWallets:
    """wallets.json parsing."""

    def test_load_wallets(self, config_dir):
        """Wallets are returned as keypairs in file order."""
        assert config.load_wallets(config_dir) == [Keypair.from_seed(SEED)]

    def test_matching_public_key_is_accepted(self, tmp_path):
        """An explicit publicKey equal to the derived one is fine."""
        keypair = Keypair.from_seed(SEED)
        _write_json(
            tmp_path,
            config.WALLETS_FILE,
            {"defaultWallets": [{"secretKey": keypair.secret_key, "publicKey": keypair.public_key}]},
        )
        assert config.load_wallets(tmp_path) == [keypair]

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"defaultWallets": {}},
            {"defaultWallets": [{}]},
            {"defaultWallets": [{"secretKey": "nothex"}]},
            {"defaultWallets": [{"secretKey": SEED.hex(), "publicKey": "ak_someoneelse"}]},
        ],
    )
    def test_invalid_wallets(self, tmp_path, data):
        """Malformed wallet files raise WalletConfigError."""
        _write_json(tmp_path, config.WALLETS_FILE, data)
        with pytest.raises(WalletConfigError):
            config.load_wallets(tmp_path)

    def test_bundled_wallets(self):
        """The repository ships three distinct actors."""
        wallets = config.load_wallets(config.ROOT / "config")
        assert len({w.address for w in wallets}) == 3
