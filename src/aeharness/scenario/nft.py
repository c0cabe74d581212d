"""The NFT ownership scenario.

Two actors share one NFT contract. The owner deploys and mints; the other
actor reaches the same contract through its own session, so every step is
signed by the actor the step names.

Token 0 goes through mint, transfer, approval, operator approval and burn;
token 1 stays with the owner once the operator is revoked and is then
safe-transferred to the example receiver contract; token 2 shows
that a safe transfer to a contract without ``on_nft_received`` fails without
changing ownership.
"""

from __future__ import annotations

from dataclasses import dataclass

from aeharness.client.session import ClientSession
from aeharness.contracts.nft import NftContract
from aeharness.contracts.receiver import ReceiverContract
from aeharness.domain.value_objects import ContractArtifact
from aeharness.scenario.runner import Scenario, ScenarioAssertionError, check, expect_revert

DEFAULT_NAME = "Test NFT"
DEFAULT_SYMBOL = "TST"


@dataclass
class NftScenarioState:
    """Handles created while the scenario runs."""

    nft: NftContract | None = None
    other_nft: NftContract | None = None
    receiver: ReceiverContract | None = None


def build_nft_scenario(  # pylint: disable=too-many-arguments,too-many-locals,too-many-statements
    owner: ClientSession,
    other: ClientSession,
    nft_artifact: ContractArtifact,
    receiver_artifact: ContractArtifact,
    *,
    name: str = DEFAULT_NAME,
    symbol: str = DEFAULT_SYMBOL,
    state: NftScenarioState | None = None,
) -> Scenario:
    """Build the NFT scenario for the ``owner`` and ``other`` sessions.

    Args:
        owner: Session of the deployer, which is the only account allowed to mint.
        other: Session of the second actor.
        nft_artifact: Loaded NFT contract source.
        receiver_artifact: Loaded example receiver contract source.
        name: Token collection name passed to the constructor.
        symbol: Token symbol passed to the constructor.
        state: Receives the contract handles; a fresh one is used when None.

    Returns:
        Scenario: Steps ready for `ScenarioRunner`.
    """
    s = state if state is not None else NftScenarioState()
    scenario = Scenario("NFT contract")
    owner_address, other_address = owner.address, other.address

    def nft() -> NftContract:
        if s.nft is None:
            raise ScenarioAssertionError("NFT contract is not deployed")
        return s.nft

    def receiver() -> ReceiverContract:
        if s.receiver is None:
            raise ScenarioAssertionError("receiver contract is not deployed")
        return s.receiver

    def other_nft() -> NftContract:
        if s.other_nft is None:
            s.other_nft = nft().connect(other)
        return s.other_nft

    def expect_balances(owner_balance: int, other_balance: int) -> None:
        got_owner, got_other = nft().balance_of(owner_address), nft().balance_of(other_address)
        check(got_owner == owner_balance, f"owner balance is {got_owner}, expected {owner_balance}")
        check(got_other == other_balance, f"other balance is {got_other}, expected {other_balance}")

    @scenario.step("deploy NFT contract")
    def _deploy() -> NftContract:
        s.nft = NftContract.deploy(owner, nft_artifact, name, symbol)
        check(s.nft.name() == name, f"name is {s.nft.name()!r}, expected {name!r}")
        check(s.nft.symbol() == symbol, f"symbol is {s.nft.symbol()!r}, expected {symbol!r}")
        return s.nft

    @scenario.step("mint token 0 only once")
    def _mint_once() -> None:
        nft().mint(owner_address, 0)
        with expect_revert("Already minted"):
            nft().mint(owner_address, 0)

    @scenario.step("owner_of(0) is the owner")
    def _owner_of() -> None:
        check(nft().owner_of(0) == owner_address, "invalid owner")

    @scenario.step("balance_of(owner) is 1")
    def _balance() -> None:
        check(nft().balance_of(owner_address) == 1, "incorrect balance")

    @scenario.step("only the owner can mint")
    def _mint_guard() -> None:
        with expect_revert("Only owner can mint"):
            other_nft().mint(other_address, 42)

    @scenario.step("transfer token 0 to other")
    def _transfer() -> None:
        nft().transfer_from(owner_address, other_address, 0)
        expect_balances(0, 1)
        check(nft().owner_of(0) == other_address, "transfer did not change the owner")

    @scenario.step("unapproved caller cannot transfer")
    def _unauthorized() -> None:
        with expect_revert("Not authorized"):
            nft().transfer_from(other_address, owner_address, 0)

    @scenario.step("transfer token 0 back by approval")
    def _transfer_by_approval() -> None:
        other_nft().approve(owner_address, 0)
        check(nft().get_approved(0) == owner_address, "approve failed")
        nft().transfer_from(other_address, owner_address, 0)
        expect_balances(1, 0)
        check(nft().get_approved(0) is None, "approval was not cleared by the transfer")

    @scenario.step("transfer token 0 by operator")
    def _transfer_by_operator() -> None:
        nft().set_approval_for_all(other_address, True)
        check(nft().is_approved_for_all(owner_address, other_address), "set_approval_for_all failed")
        other_nft().transfer_from(owner_address, other_address, 0)
        expect_balances(0, 1)

    @scenario.step("revoked operator loses transfer rights")
    def _revoke_operator() -> None:
        nft().set_approval_for_all(other_address, False)
        check(
            not nft().is_approved_for_all(owner_address, other_address),
            "revocation failed",
        )
        nft().mint(owner_address, 1)
        with expect_revert("Not authorized"):
            other_nft().transfer_from(owner_address, other_address, 1)
        check(nft().owner_of(1) == owner_address, "revoked operator moved token 1")

    @scenario.step("burn token 0")
    def _burn() -> None:
        other_nft().burn(0)
        check(other_nft().balance_of(other_address) == 0, "incorrect balance after burn")
        with expect_revert("Token does not exist"):
            nft().owner_of(0)
        with expect_revert("Token does not exist"):
            other_nft().transfer_from(other_address, owner_address, 0)

    @scenario.step("deploy example receiver contract")
    def _deploy_receiver() -> ReceiverContract:
        s.receiver = ReceiverContract.deploy(owner, receiver_artifact)
        return s.receiver

    @scenario.step("safe transfer token 1 to the receiver contract")
    def _safe_transfer() -> None:
        # entry points typed `address` only accept the ak_ form
        recipient = receiver().account_address
        nft().safe_transfer_from(owner_address, recipient, 1)
        check(nft().owner_of(1) == recipient, "receiver does not own token 1")
        check(1 in receiver().received(), "receiver did not record token 1")

    @scenario.step("safe transfer to a non-receiver contract fails atomically")
    def _safe_transfer_rejected() -> None:
        nft().mint(owner_address, 2)
        with expect_revert("Entrypoint not found"):
            nft().safe_transfer_from(owner_address, nft().account_address, 2)
        check(nft().owner_of(2) == owner_address, "failed safe transfer changed the owner")
        check(nft().balance_of(owner_address) == 1, "failed safe transfer changed the balance")

    return scenario
