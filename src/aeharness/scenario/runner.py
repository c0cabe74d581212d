"""Sequential scenario runner.

A `Scenario` is an ordered list of named steps. `ScenarioRunner.run` executes
them one at a time, each blocking until its round-trip completes, records a
`StepOutcome` per step and stops at the first failure by raising
`ScenarioFailedError`. Nothing is retried and no step is skipped.

Steps assert with `check` and `expect_revert`::

    scenario = Scenario("mint once")

    @scenario.step("mint token 0")
    def _():
        nft.mint(owner.address, 0)

    @scenario.step("second mint is rejected")
    def _():
        with expect_revert("Already minted"):
            nft.mint(owner.address, 0)

    ScenarioRunner(scenario).run()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from aeharness.domain.errors import CallError, HarnessError

logger = logging.getLogger(__name__)


# ============================================================================
#                               Errors
# ============================================================================


class ScenarioAssertionError(HarnessError, AssertionError):
    """Raised when a scenario expectation does not hold."""


class ScenarioFailedError(HarnessError):
    """Raised when a scenario step fails; the step's error is kept on ``cause``."""

    def __init__(self, scenario: str, step: str, index: int, cause: BaseException) -> None:
        super().__init__(f"{scenario}: step {index} '{step}' failed: {cause}")
        self.scenario = scenario
        self.step = step
        self.index = index
        self.cause = cause


# ============================================================================
#                               Assertions
# ============================================================================


def check(condition: object, message: str) -> None:
    """Raise `ScenarioAssertionError` with ``message`` unless ``condition`` holds."""
    if not condition:
        raise ScenarioAssertionError(message)


@dataclass
class RevertCapture:
    """Holds the `CallError` caught by `expect_revert`."""

    error: CallError | None = None


@contextmanager
def expect_revert(substring: str) -> Iterator[RevertCapture]:
    """Require the body to raise `CallError` whose message contains ``substring``.

    Raises:
        ScenarioAssertionError: If the body completes, or reverts with a
            different message.
    """
    capture = RevertCapture()
    try:
        yield capture
    except CallError as e:
        if substring not in e.message:
            raise ScenarioAssertionError(
                f"expected a revert containing {substring!r}, got {e.message!r}"
            ) from e
        capture.error = e
        return
    raise ScenarioAssertionError(
        f"expected a revert containing {substring!r}, but the call succeeded"
    )


# ============================================================================
#                               Scenarios
# ============================================================================


@dataclass(frozen=True)
class Step:
    """A named action; the return value is kept on its outcome."""

    name: str
    action: Callable[[], Any]


@dataclass(frozen=True)
class StepOutcome:
    """What happened when a step ran."""

    index: int
    name: str
    ok: bool
    duration: float
    result: Any = None
    error: BaseException | None = None


@dataclass
class Scenario:
    """An ordered list of steps."""

    name: str
    steps: list[Step] = field(default_factory=list)

    def add(self, name: str, action: Callable[[], Any]) -> Scenario:
        """Append a step and return the scenario for chaining."""
        self.steps.append(Step(name, action))
        return self

    def step(self, name: str) -> Callable[[Callable[[], Any]], Callable[[], Any]]:
        """Decorator form of `add`."""

        def decorator(action: Callable[[], Any]) -> Callable[[], Any]:
            self.add(name, action)
            return action

        return decorator

    def __len__(self) -> int:
        return len(self.steps)


class ScenarioRunner:
    """Runs a scenario's steps in order and stops at the first failure.

    Args:
        scenario: The scenario to run.
        on_step: Optional callback receiving each `StepOutcome` as it is recorded.
    """

    def __init__(
        self,
        scenario: Scenario,
        on_step: Callable[[StepOutcome], None] | None = None,
    ) -> None:
        self.scenario = scenario
        self.outcomes: list[StepOutcome] = []
        self._on_step = on_step

    def run(self) -> list[StepOutcome]:
        """Run every step.

        Returns:
            list[StepOutcome]: One outcome per step, all successful.

        Raises:
            ScenarioFailedError: At the first step that raises.
        """
        self.outcomes = []
        total = len(self.scenario.steps)
        logger.info("Running scenario '%s' (%d steps)", self.scenario.name, total)

        for index, step in enumerate(self.scenario.steps, start=1):
            logger.info("[%d/%d] %s", index, total, step.name)
            started = time.perf_counter()
            try:
                result = step.action()
            except Exception as e:  # pylint: disable=broad-exception-caught
                outcome = StepOutcome(
                    index, step.name, ok=False, duration=time.perf_counter() - started, error=e
                )
                self._record(outcome)
                logger.error("[%d/%d] %s failed: %s", index, total, step.name, e)
                raise ScenarioFailedError(self.scenario.name, step.name, index, e) from e
            self._record(
                StepOutcome(
                    index, step.name, ok=True, duration=time.perf_counter() - started, result=result
                )
            )

        logger.info("Scenario '%s' passed", self.scenario.name)
        return list(self.outcomes)

    def _record(self, outcome: StepOutcome) -> None:
        self.outcomes.append(outcome)
        if self._on_step is not None:
            self._on_step(outcome)
