"""Scenario runner and the bundled NFT scenario."""

from aeharness.scenario.nft import NftScenarioState, build_nft_scenario
from aeharness.scenario.runner import (
    Scenario,
    ScenarioAssertionError,
    ScenarioFailedError,
    ScenarioRunner,
    Step,
    StepOutcome,
    check,
    expect_revert,
)

__all__ = [
    "NftScenarioState",
    "Scenario",
    "ScenarioAssertionError",
    "ScenarioFailedError",
    "ScenarioRunner",
    "Step",
    "StepOutcome",
    "build_nft_scenario",
    "check",
    "expect_revert",
]
