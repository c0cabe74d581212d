"""Devnet programs for the NFT contract and its example token receiver.

They follow ``contracts/NFT.aes`` and ``contracts/ExampleContract.aes``
entry point by entry point, including the revert messages.
"""

from __future__ import annotations

from aeharness.adapters.devnet.programs import (
    ExecutionContext,
    Program,
    Revert,
    default_registry,
    require,
)

ALREADY_MINTED = "Already minted"
ONLY_OWNER_CAN_MINT = "Only owner can mint"
TOKEN_DOES_NOT_EXIST = "Token does not exist"
NOT_AUTHORIZED = "Not authorized"
FROM_IS_NOT_OWNER = "From is not the owner"
RECEIVER_REJECTED = "Receiver rejected token"
EMPTY_NAME = "Name must not be empty"


@default_registry.register("NFT")
class NftProgram(Program):
    """Ownership, approvals and operators for non-fungible tokens."""

    # pylint: disable=attribute-defined-outside-init

    def init(self, ctx: ExecutionContext, name: str, symbol: str) -> None:  # pylint: disable=arguments-differ
        require(len(name) > 0, EMPTY_NAME)
        self.name_ = name
        self.symbol_ = symbol
        self.contract_owner = ctx.caller
        self.owners: dict[int, str] = {}
        self.balances: dict[str, int] = {}
        self.approvals: dict[int, str] = {}
        self.operators: dict[str, dict[str, bool]] = {}

    # --- Metadata ---

    def name(self, ctx: ExecutionContext) -> str:  # pylint: disable=unused-argument
        return self.name_

    def symbol(self, ctx: ExecutionContext) -> str:  # pylint: disable=unused-argument
        return self.symbol_

    # --- Queries ---

    def balance_of(self, ctx: ExecutionContext, owner: str) -> int:  # pylint: disable=unused-argument
        return self.balances.get(owner, 0)

    def owner_of(self, ctx: ExecutionContext, token_id: int) -> str:  # pylint: disable=unused-argument
        if token_id not in self.owners:
            raise Revert(TOKEN_DOES_NOT_EXIST)
        return self.owners[token_id]

    def get_approved(self, ctx: ExecutionContext, token_id: int) -> str | None:  # pylint: disable=unused-argument
        require(token_id in self.owners, TOKEN_DOES_NOT_EXIST)
        return self.approvals.get(token_id)

    def is_approved_for_all(self, ctx: ExecutionContext, owner: str, operator: str) -> bool:  # pylint: disable=unused-argument
        return self.operators.get(owner, {}).get(operator, False)

    # --- Transitions ---

    def mint(self, ctx: ExecutionContext, to: str, token_id: int) -> None:
        require(ctx.caller == self.contract_owner, ONLY_OWNER_CAN_MINT)
        require(token_id not in self.owners, ALREADY_MINTED)
        self.owners[token_id] = to
        self.balances[to] = self.balances.get(to, 0) + 1
        ctx.emit("Transfer", ctx.address, to, token_id)

    def approve(self, ctx: ExecutionContext, approved: str, token_id: int) -> None:
        owner = self.owner_of(ctx, token_id)
        require(
            ctx.caller == owner or self.is_approved_for_all(ctx, owner, ctx.caller),
            NOT_AUTHORIZED,
        )
        self.approvals[token_id] = approved
        ctx.emit("Approval", owner, approved, token_id)

    def set_approval_for_all(self, ctx: ExecutionContext, operator: str, approved: bool) -> None:
        self.operators.setdefault(ctx.caller, {})[operator] = approved
        ctx.emit("ApprovalForAll", ctx.caller, operator, approved)

    def transfer_from(self, ctx: ExecutionContext, from_: str, to: str, token_id: int) -> None:
        self._require_authorized(ctx, token_id)
        require(self.owner_of(ctx, token_id) == from_, FROM_IS_NOT_OWNER)
        self._transfer(ctx, from_, to, token_id)

    def safe_transfer_from(self, ctx: ExecutionContext, from_: str, to: str, token_id: int) -> None:
        self.transfer_from(ctx, from_, to, token_id)
        if ctx.is_contract(to):
            accepted = ctx.call(to, "on_nft_received", ctx.caller, from_, token_id)
            require(accepted, RECEIVER_REJECTED)

    def burn(self, ctx: ExecutionContext, token_id: int) -> None:
        self._require_authorized(ctx, token_id)
        owner = self.owner_of(ctx, token_id)
        del self.owners[token_id]
        self.approvals.pop(token_id, None)
        self.balances[owner] -= 1
        ctx.emit("Transfer", owner, ctx.address, token_id)

    # --- Internals ---

    def _require_authorized(self, ctx: ExecutionContext, token_id: int) -> None:
        owner = self.owner_of(ctx, token_id)
        require(
            ctx.caller == owner
            or self.approvals.get(token_id) == ctx.caller
            or self.is_approved_for_all(ctx, owner, ctx.caller),
            NOT_AUTHORIZED,
        )

    def _transfer(self, ctx: ExecutionContext, from_: str, to: str, token_id: int) -> None:
        self.owners[token_id] = to
        self.approvals.pop(token_id, None)
        self.balances[from_] -= 1
        self.balances[to] = self.balances.get(to, 0) + 1
        ctx.emit("Transfer", from_, to, token_id)


@default_registry.register("ExampleContract")
class ExampleReceiverProgram(Program):
    """Accepts every token and remembers the ids it received."""

    # pylint: disable=attribute-defined-outside-init

    def init(self, ctx: ExecutionContext) -> None:  # pylint: disable=arguments-differ
        self.received_: list[int] = []

    def on_nft_received(  # pylint: disable=unused-argument
        self, ctx: ExecutionContext, operator: str, from_: str, token_id: int
    ) -> bool:
        self.received_.insert(0, token_id)
        return True

    def received(self, ctx: ExecutionContext) -> list[int]:  # pylint: disable=unused-argument
        return list(self.received_)
