"""Bootstrap (composition root) for aeharness.

Assembles the harness at runtime: reads the network and wallet configuration,
picks the node and compiler adapters for the selected network (HTTP, or the
in-process devnet for ``memory://`` URLs) and builds client sessions on top
of them.

Import rules:
- Entry points and test fixtures import *this* package to get sessions.
- This package may import: `aeharness.adapters`, `aeharness.client`,
  `aeharness.interfaces`, `aeharness.domain`, and `aeharness.config`.
- Inner layers must not import `aeharness.bootstrap`.

No business rules live here; this is assembly and lifecycle only.
"""

from aeharness.bootstrap.bootstrap import (
    AppContainer,
    bootstrap,
    build_compiler,
    build_node,
    build_session,
)

__all__ = ["AppContainer", "bootstrap", "build_compiler", "build_node", "build_session"]
