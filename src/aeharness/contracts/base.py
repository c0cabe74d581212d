"""Base class for typed contract facades."""

from __future__ import annotations

from typing import Any, ClassVar

from aeharness.client.instance import ContractInstance
from aeharness.client.session import ClientSession
from aeharness.domain import addresses
from aeharness.domain.errors import BindError, NotDeployedError
from aeharness.domain.value_objects import ContractArtifact


class ContractFacade:
    """A fixed, explicit set of operations over a `ContractInstance`.

    Subclasses list the entry points they rely on in ``REQUIRED_ENTRYPOINTS``;
    wrapping an instance whose interface lacks any of them raises
    `BindError`.
    """

    REQUIRED_ENTRYPOINTS: ClassVar[tuple[str, ...]] = ()

    def __init__(self, instance: ContractInstance) -> None:
        missing = [n for n in self.REQUIRED_ENTRYPOINTS if n not in instance.methods]
        if missing:
            raise BindError(
                instance.address or instance.name,
                f"{instance.name} does not implement {', '.join(missing)}",
            )
        self.instance = instance

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address!r})"

    @classmethod
    def deploy(cls, session: ClientSession, artifact: ContractArtifact, *args: Any) -> ContractFacade:
        """Check the interface, deploy ``artifact`` and wrap the new instance."""
        instance = session.contract(artifact)
        facade = cls(instance)
        instance.deploy(*args)
        return facade

    @classmethod
    def bind(cls, session: ClientSession, artifact: ContractArtifact, address: str) -> ContractFacade:
        """Wrap the contract already deployed at ``address``."""
        return cls(session.bind(artifact, address))

    def connect(self, session: ClientSession) -> ContractFacade:
        """Return the same contract seen (and signed for) by ``session``."""
        return type(self).bind(session, self.instance.artifact, self.address)

    @property
    def address(self) -> str | None:
        """``ct_`` address of the contract."""
        return self.instance.address

    @property
    def account_address(self) -> str:
        """``ak_`` form of the address, as entry points typed ``address`` expect it."""
        if self.address is None:
            raise NotDeployedError(self.instance.name)
        return addresses.to_account_address(self.address)

    def _value(self, name: str, *args: Any) -> Any:
        return self.instance.call(name, *args).decoded_result
