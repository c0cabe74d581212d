"""Fixtures for a live node and compiler reached over HTTP.

Provided fixtures
-----------------
- **http_backend**: `Backend` wired to ``AEHARNESS_NODE_URL`` and
  ``AEHARNESS_COMPILER_URL``, signing with ``AEHARNESS_OWNER_SECRET`` and
  ``AEHARNESS_OTHER_SECRET``. Skipped unless all four are set; both accounts
  must be funded on that network.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from aeharness.adapters.compiler.http import HttpCompiler
from aeharness.adapters.node.http import HttpNode
from aeharness.client.session import ClientSession
from aeharness.domain.value_objects import Keypair
from tests.fixtures.devnet import Backend

REQUIRED_ENV = (
    "AEHARNESS_NODE_URL",
    "AEHARNESS_COMPILER_URL",
    "AEHARNESS_OWNER_SECRET",
    "AEHARNESS_OTHER_SECRET",
)


@pytest.fixture
def http_backend() -> Iterator[Backend]:
    """Live HTTP node and compiler, or a skip when not configured."""
    missing = [name for name in REQUIRED_ENV if not os.environ.get(name)]
    if missing:
        pytest.skip(f"HTTP backend not configured: {', '.join(missing)} unset")

    node = HttpNode(
        os.environ["AEHARNESS_NODE_URL"],
        os.environ.get("AEHARNESS_NETWORK_ID") or None,
        timeout=30.0,
        poll_attempts=60,
    )
    compiler = HttpCompiler(os.environ["AEHARNESS_COMPILER_URL"], timeout=30.0)
    owner = Keypair.from_secret_key(os.environ["AEHARNESS_OWNER_SECRET"])
    other = Keypair.from_secret_key(os.environ["AEHARNESS_OTHER_SECRET"])

    yield Backend(
        "http",
        node,
        compiler,
        ClientSession(owner, node, compiler),
        ClientSession(other, node, compiler),
    )
    node.close()
    compiler.close()
