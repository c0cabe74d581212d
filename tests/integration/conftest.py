"""Default marks for tests under `tests/integration/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import add_default_marker

# pylint: disable=unused-argument

INTEGRATION_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Add default `integration` marks to items in `tests/integration/`."""
    add_default_marker(items, INTEGRATION_ROOT, "integration")
