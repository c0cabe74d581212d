"""Shared expectations for NFT scenario tests."""

from __future__ import annotations

from aeharness.adapters.devnet import ExecutionContext, require
from aeharness.adapters.devnet.nft import ONLY_OWNER_CAN_MINT, NftProgram

EXPECTED_STEPS = [
    "deploy NFT contract",
    "mint token 0 only once",
    "owner_of(0) is the owner",
    "balance_of(owner) is 1",
    "only the owner can mint",
    "transfer token 0 to other",
    "unapproved caller cannot transfer",
    "transfer token 0 back by approval",
    "transfer token 0 by operator",
    "revoked operator loses transfer rights",
    "burn token 0",
    "deploy example receiver contract",
    "safe transfer token 1 to the receiver contract",
    "safe transfer to a non-receiver contract fails atomically",
]


class RemintingNftProgram(NftProgram):
    """NFT program that forgets to refuse a second mint."""

    def mint(self, ctx: ExecutionContext, to: str, token_id: int) -> None:
        require(ctx.caller == self.contract_owner, ONLY_OWNER_CAN_MINT)
        if token_id not in self.owners:
            self.balances[to] = self.balances.get(to, 0) + 1
        self.owners[token_id] = to


class StickyOperatorNftProgram(NftProgram):
    """NFT program whose revoked operators keep their transfer rights."""

    def _require_authorized(self, ctx: ExecutionContext, token_id: int) -> None:
        owner = self.owner_of(ctx, token_id)
        if ctx.caller in self.operators.get(owner, {}):
            return
        super()._require_authorized(ctx, token_id)
