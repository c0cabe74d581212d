"""Devnet programs: Python stand-ins for deployed contracts.

A program is a class registered under a contract name. When the devnet node
deploys bytecode for that contract it instantiates the class, runs `init`
with the decoded constructor arguments and keeps the instance as the
contract's state. Entry-point calls invoke the method of the same name;
only names listed in the contract's ACI are reachable.

Programs signal contract-level failure with `Revert` (usually through
`require`). The node restores the state of every contract touched by a
transaction when it reverts, so programs can mutate freely.

Example:
    ```py
    @default_registry.register("Counter")
    class Counter(Program):
        def init(self, ctx, start):
            self.owner = ctx.caller
            self.value = start

        def bump(self, ctx):
            require(ctx.caller == self.owner, "Not authorized")
            self.value += 1
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from aeharness.adapters.devnet.node import DevnetNode

# pylint: disable=too-few-public-methods


class Revert(Exception):
    """Abort the current transaction with ``message``."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def require(condition: object, message: str) -> None:
    """Revert with ``message`` unless ``condition`` holds."""
    if not condition:
        raise Revert(message)


@dataclass
class Event:
    """An event emitted by a program during a call."""

    contract: str
    name: str
    args: tuple[Any, ...]


@dataclass
class ExecutionContext:
    """What a program can see and do while handling one call.

    Attributes:
        node: The devnet executing the transaction.
        caller: Account-form address of the immediate caller (an account, or
            the calling contract for nested calls).
        origin: Account that signed the transaction.
        contract: ``ct_`` address of the executing contract.
        height: Block height the transaction is executed at.
        events: Events emitted so far, shared across nested calls.
    """

    node: DevnetNode
    caller: str
    origin: str
    contract: str
    height: int
    events: list[Event] = field(default_factory=list)

    @property
    def address(self) -> str:
        """Account-form address of the executing contract."""
        return "ak_" + self.contract.split("_", 1)[1]

    def is_contract(self, address: str) -> bool:
        """Return True if a contract is deployed at ``address`` (either prefix)."""
        return self.node.has_contract(address)

    def call(self, address: str, entrypoint: str, *args: Any) -> Any:
        """Call another contract from within this one."""
        return self.node.execute_nested(self, address, entrypoint, args)

    def emit(self, name: str, *args: Any) -> None:
        """Record an event emitted by the executing contract."""
        self.events.append(Event(contract=self.contract, name=name, args=args))


class Program:
    """Base class for devnet programs."""

    def init(self, ctx: ExecutionContext, *args: Any) -> None:
        """Constructor; runs once when the contract is deployed."""


class ProgramRegistry:
    """Maps contract names to program classes."""

    def __init__(self) -> None:
        self._programs: dict[str, type[Program]] = {}

    def register(self, contract_name: str) -> Callable[[type[Program]], type[Program]]:
        """Class decorator registering a program for ``contract_name``."""

        def decorator(cls: type[Program]) -> type[Program]:
            self._programs[contract_name] = cls
            return cls

        return decorator

    def add(self, contract_name: str, cls: type[Program]) -> None:
        """Register ``cls`` for ``contract_name``, replacing any previous entry."""
        self._programs[contract_name] = cls

    def get(self, contract_name: str) -> type[Program] | None:
        """Return the program registered for ``contract_name``, if any."""
        return self._programs.get(contract_name)

    def copy(self) -> ProgramRegistry:
        """Return an independent registry with the same entries."""
        clone = ProgramRegistry()
        clone._programs.update(self._programs)  # pylint: disable=protected-access
        return clone

    def __contains__(self, contract_name: object) -> bool:
        return contract_name in self._programs


default_registry = ProgramRegistry()
