"""Global pytest fixtures for AEHARNESS."""

from __future__ import annotations

import pytest

pytest_plugins = [
    "tests.fixtures.wallets",
    "tests.fixtures.artifacts",
    "tests.fixtures.devnet",
    "tests.fixtures.http",
    "tests.fixtures.config",
]


# Helper to route to an existing backend fixture by name
@pytest.fixture
def backend(request: pytest.FixtureRequest):
    """Indirection fixture to parametrize over backend-providing fixtures.

    Example:
        ```py
        @pytest.mark.parametrize("backend", ["devnet_backend", "http_backend"], indirect=True)
        def test_something(backend): ...
        ```
    """
    return request.getfixturevalue(request.param)
