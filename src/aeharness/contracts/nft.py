"""Typed facade for the NFT contract."""

from __future__ import annotations

from typing import ClassVar

from aeharness.contracts.base import ContractFacade


class NftContract(ContractFacade):
    """Ownership, approval and transfer operations of the NFT contract.

    Queries return decoded values; transitions return nothing and raise
    `CallError` with the contract's revert message when rejected.
    """

    REQUIRED_ENTRYPOINTS: ClassVar[tuple[str, ...]] = (
        "name",
        "symbol",
        "mint",
        "owner_of",
        "balance_of",
        "get_approved",
        "is_approved_for_all",
        "approve",
        "set_approval_for_all",
        "transfer_from",
        "safe_transfer_from",
        "burn",
    )

    # --- Metadata ---

    def name(self) -> str:
        return self._value("name")

    def symbol(self) -> str:
        return self._value("symbol")

    # --- Queries ---

    def owner_of(self, token_id: int) -> str:
        """Current owner of ``token_id``; reverts if it does not exist."""
        return self._value("owner_of", token_id)

    def balance_of(self, owner: str) -> int:
        return self._value("balance_of", owner)

    def get_approved(self, token_id: int) -> str | None:
        """Single-token delegate of ``token_id``, if any."""
        return self._value("get_approved", token_id)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return self._value("is_approved_for_all", owner, operator)

    # --- Transitions ---

    def mint(self, to: str, token_id: int) -> None:
        self.instance.call("mint", to, token_id)

    def approve(self, approved: str, token_id: int) -> None:
        self.instance.call("approve", approved, token_id)

    def set_approval_for_all(self, operator: str, approved: bool) -> None:
        self.instance.call("set_approval_for_all", operator, approved)

    def transfer_from(self, from_: str, to: str, token_id: int) -> None:
        self.instance.call("transfer_from", from_, to, token_id)

    def safe_transfer_from(self, from_: str, to: str, token_id: int) -> None:
        """Transfer and, if ``to`` is a contract, require it to accept the token.

        ``to`` must be in ``ak_`` form; use `ContractFacade.account_address`
        for contract recipients.
        """
        self.instance.call("safe_transfer_from", from_, to, token_id)

    def burn(self, token_id: int) -> None:
        self.instance.call("burn", token_id)
