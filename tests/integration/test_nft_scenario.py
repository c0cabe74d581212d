"""The bundled NFT scenario end to end on the devnet."""

from __future__ import annotations

import pytest

from aeharness.adapters.devnet import DevnetNode
from aeharness.client.session import ClientSession
from aeharness.scenario import (
    NftScenarioState,
    ScenarioAssertionError,
    ScenarioFailedError,
    ScenarioRunner,
    build_nft_scenario,
)
from tests.helpers.nft import (
    EXPECTED_STEPS,
    RemintingNftProgram,
    StickyOperatorNftProgram,
)


def test_scenario_passes(owner_session, other_session, nft_artifact, receiver_artifact):
    """Every step passes, in order."""
    state = NftScenarioState()
    scenario = build_nft_scenario(
        owner_session, other_session, nft_artifact, receiver_artifact, state=state
    )
    outcomes = ScenarioRunner(scenario).run()

    assert [o.name for o in outcomes] == EXPECTED_STEPS
    assert all(o.ok for o in outcomes)
    assert outcomes[0].result is state.nft
    assert state.receiver.received() == [1]
    assert state.nft.owner_of(1) == state.receiver.account_address
    assert state.nft.owner_of(2) == owner_session.address


def test_scenario_steps_are_signed_by_their_actor(
    owner_session, other_session, nft_artifact, receiver_artifact, devnet_node
):
    """The other actor's transactions advance its own nonce."""
    ScenarioRunner(
        build_nft_scenario(owner_session, other_session, nft_artifact, receiver_artifact)
    ).run()
    # refused mint, approve, operator transfer, refused transfer after revocation,
    # burn, transfer of the burned token
    assert devnet_node.next_nonce(other_session.address) == 7


def test_scenario_name_and_symbol(owner_session, other_session, nft_artifact, receiver_artifact):
    """Collection metadata can be chosen."""
    state = NftScenarioState()
    ScenarioRunner(
        build_nft_scenario(
            owner_session,
            other_session,
            nft_artifact,
            receiver_artifact,
            name="Badges",
            symbol="BDG",
            state=state,
        )
    ).run()
    assert (state.nft.name(), state.nft.symbol()) == ("Badges", "BDG")


def test_scenario_detects_faulty_contract(
    owner_keypair, other_keypair, devnet_compiler, program_registry, nft_artifact, receiver_artifact
):
    """A contract that mints twice fails the second step and stops the run."""
    program_registry.add("NFT", RemintingNftProgram)
    node = DevnetNode(registry=program_registry)
    owner = ClientSession(owner_keypair, node, devnet_compiler)
    other = ClientSession(other_keypair, node, devnet_compiler)
    runner = ScenarioRunner(build_nft_scenario(owner, other, nft_artifact, receiver_artifact))

    with pytest.raises(ScenarioFailedError) as excinfo:
        runner.run()

    assert excinfo.value.index == 2
    assert excinfo.value.step == "mint token 0 only once"
    assert isinstance(excinfo.value.cause, ScenarioAssertionError)
    assert "call succeeded" in str(excinfo.value.cause)
    assert len(runner.outcomes) == 2


def test_scenario_detects_operator_kept_after_revocation(
    owner_keypair, other_keypair, devnet_compiler, program_registry, nft_artifact, receiver_artifact
):
    """A contract that still honours a revoked operator fails the revocation step."""
    program_registry.add("NFT", StickyOperatorNftProgram)
    node = DevnetNode(registry=program_registry)
    owner = ClientSession(owner_keypair, node, devnet_compiler)
    other = ClientSession(other_keypair, node, devnet_compiler)
    runner = ScenarioRunner(build_nft_scenario(owner, other, nft_artifact, receiver_artifact))

    with pytest.raises(ScenarioFailedError) as excinfo:
        runner.run()

    assert excinfo.value.step == "revoked operator loses transfer rights"
    assert excinfo.value.index == 10
    assert "call succeeded" in str(excinfo.value.cause)
