"""In-process devnet: node and compiler adapters that need no external service.

Importing this package registers the bundled NFT and receiver programs with
`default_registry`.
"""

from aeharness.adapters.devnet import nft  # noqa: F401  # pylint: disable=unused-import
from aeharness.adapters.devnet.compiler import DevnetCompiler
from aeharness.adapters.devnet.node import DEVNET_NETWORK_ID, DevnetNode
from aeharness.adapters.devnet.programs import (
    ExecutionContext,
    Program,
    ProgramRegistry,
    Revert,
    default_registry,
    require,
)

__all__ = [
    "DEVNET_NETWORK_ID",
    "DevnetCompiler",
    "DevnetNode",
    "ExecutionContext",
    "Program",
    "ProgramRegistry",
    "Revert",
    "default_registry",
    "require",
]
