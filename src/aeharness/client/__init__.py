"""Client layer: sessions and contract instances.

`ClientSession` signs and submits on behalf of one actor; `ContractInstance`
is the handle tests call entry points through.
"""

from aeharness.client.instance import BoundEntrypoint, ContractInstance, EntrypointTable
from aeharness.client.session import ClientSession

__all__ = ["BoundEntrypoint", "ClientSession", "ContractInstance", "EntrypointTable"]
