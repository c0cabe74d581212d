"""Contract instances and their entry-point tables.

A `ContractInstance` is a handle on one contract: before deployment it only
knows the compiled artifact; after `deploy` (or when created through
`ClientSession.bind`) it is bound to an address for good. Its `methods`
table exposes one callable per entry point of the contract interface, fixed
when the instance is created::

    nft.methods.mint(owner.address, 0)
    nft.methods.owner_of(0).decoded_result      # 'ak_...'
    nft.methods.balance_of                      # <BoundEntrypoint balance_of(owner: address) : int>

Calls on one instance never overlap; the instance serializes them.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from aeharness.domain.errors import DeployError, NotDeployedError, UnknownEntrypointError
from aeharness.domain.types import ContractInterface, Entrypoint
from aeharness.domain.value_objects import (
    CallResult,
    CompiledContract,
    ContractArtifact,
    DeployInfo,
)

if TYPE_CHECKING:
    from aeharness.client.session import ClientSession


class BoundEntrypoint:
    """One entry point of one instance, callable like a function."""

    def __init__(self, instance: ContractInstance, entrypoint: Entrypoint) -> None:
        self.instance = instance
        self.entrypoint = entrypoint

    def __call__(self, *args: Any, read_only: bool | None = None, **kwargs: Any) -> CallResult:
        return self.instance.call(self.entrypoint.name, *args, read_only=read_only, **kwargs)

    def __repr__(self) -> str:
        return f"<BoundEntrypoint {self.entrypoint.signature}>"


class EntrypointTable:
    """Attribute and item access to the callable entry points of an instance.

    Raises `UnknownEntrypointError` (an `AttributeError`) for names the
    contract interface does not declare.
    """

    def __init__(self, instance: ContractInstance) -> None:
        self._instance = instance
        self._names = tuple(instance.interface.callable_names)

    def __getattr__(self, name: str) -> BoundEntrypoint:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name: str) -> BoundEntrypoint:
        interface = self._instance.interface
        if name not in self._names:
            raise UnknownEntrypointError(interface.name, name, self._names)
        return BoundEntrypoint(self._instance, interface.entrypoint(name))

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __dir__(self) -> list[str]:
        return list(self._names)


class ContractInstance:
    """A typed handle on a contract, deployed or not.

    Args:
        session: The session whose keypair signs every call made through
            this handle.
        artifact: The contract source the handle was created from.
        compiled: The compiled form of ``artifact``.
        deploy_info: Set when the handle is created for an existing address.
    """

    def __init__(
        self,
        session: ClientSession,
        artifact: ContractArtifact,
        compiled: CompiledContract,
        deploy_info: DeployInfo | None = None,
    ) -> None:
        self.session = session
        self.artifact = artifact
        self.compiled = compiled
        self._deploy_info = deploy_info
        self._lock = threading.Lock()
        self.methods = EntrypointTable(self)

    def __repr__(self) -> str:
        return f"ContractInstance({self.name}, address={self.address!r})"

    @property
    def name(self) -> str:
        """Contract name from the interface."""
        return self.compiled.name

    @property
    def interface(self) -> ContractInterface:
        """The contract interface (ACI) the entry-point table is built from."""
        return self.compiled.aci

    @property
    def deploy_info(self) -> DeployInfo | None:
        """Deployment details, or None before deployment."""
        return self._deploy_info

    @property
    def address(self) -> str | None:
        """The ``ct_`` address, or None before deployment."""
        return self._deploy_info.address if self._deploy_info else None

    @property
    def is_deployed(self) -> bool:
        """True once the instance is bound to an address."""
        return self._deploy_info is not None

    def deploy(self, *args: Any, **kwargs: Any) -> DeployInfo:
        """Deploy the contract with constructor arguments and bind this instance.

        Raises:
            DeployError: If the instance is already deployed, the constructor
                reverts or the node refuses the transaction.
            ArgumentTypeError: If the arguments do not match ``init``.
        """
        with self._lock:
            if self._deploy_info is not None:
                raise DeployError(self.name, f"already deployed at {self.address}")
            self._deploy_info = self.session.execute_deploy(self.compiled, args, kwargs)
            return self._deploy_info

    def call(
        self, name: str, *args: Any, read_only: bool | None = None, **kwargs: Any
    ) -> CallResult:
        """Call entry point ``name`` with positional and/or keyword arguments.

        Args:
            name: Entry point name.
            *args: Positional arguments in declaration order.
            read_only: Force a dry-run (True) or a transaction (False). By
                default non-stateful entry points are dry-runs.
            **kwargs: Arguments by name.

        Returns:
            CallResult: The decoded result and the raw call metadata.

        Raises:
            UnknownEntrypointError: If the contract has no entry point ``name``.
            NotDeployedError: If the instance is not deployed.
            ArgumentTypeError: If the arguments do not match the signature.
            CallError: If the contract reverts the call.
        """
        entry = self.methods[name].entrypoint
        with self._lock:
            if self._deploy_info is None:
                raise NotDeployedError(self.name)
            bound = entry.bind_arguments(args, kwargs)
            return self.session.execute_call(
                self.compiled, self._deploy_info.address, entry, bound, read_only=read_only
            )
