"""Default marks and fixtures for tests under `tests/functional/`."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from tests.helpers.markers import add_default_marker

# pylint: disable=unused-argument,redefined-outer-name

FUNCTIONAL_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Add default `functional` marks to items in `tests/functional/`."""
    add_default_marker(items, FUNCTIONAL_ROOT, "functional")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def devnet_args(devnet_config_dir):
    """Root options selecting the devnet config without a flight recorder."""
    return ["--no-flight-recorder", "--config-dir", str(devnet_config_dir), "--network", "devnet"]
