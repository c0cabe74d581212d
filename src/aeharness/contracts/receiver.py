"""Typed facade for contracts that accept NFTs through ``on_nft_received``."""

from __future__ import annotations

from typing import ClassVar

from aeharness.contracts.base import ContractFacade


class ReceiverContract(ContractFacade):
    """A contract that can be the recipient of `NftContract.safe_transfer_from`."""

    REQUIRED_ENTRYPOINTS: ClassVar[tuple[str, ...]] = ("on_nft_received",)

    def on_nft_received(self, operator: str, from_: str, token_id: int) -> bool:
        """Ask the receiver whether it accepts ``token_id``."""
        return self._value("on_nft_received", operator, from_, token_id)

    def received(self) -> list[int]:
        """Token ids recorded by receivers that expose a ``received`` query."""
        return self._value("received")
