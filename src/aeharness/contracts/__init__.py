"""Typed facades over contract instances.

Each facade declares the entry points it needs and is checked against the
contract interface when it wraps an instance.
"""

from aeharness.contracts.base import ContractFacade
from aeharness.contracts.nft import NftContract
from aeharness.contracts.receiver import ReceiverContract

__all__ = ["ContractFacade", "NftContract", "ReceiverContract"]
