"""Client session: one actor's authenticated view of a node and a compiler.

A session owns a signing keypair and the two collaborators every contract
operation needs. It compiles artifacts (cached by content digest), deploys
them, binds to contracts that already exist, and executes entry-point calls
on behalf of the `ContractInstance` handles it creates. Every transaction it
submits is signed with its keypair.

Typical usage::

    owner = ClientSession(owner_keypair, node, compiler)
    nft = owner.deploy(load_contract("contracts/NFT.aes"), "Test NFT", "TST")

    other = ClientSession(other_keypair, node, compiler)
    same_nft = other.bind(nft.artifact, nft.address)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from aeharness.client.instance import ContractInstance
from aeharness.domain import addresses
from aeharness.domain.errors import BindError, CallError, DeployError
from aeharness.domain.types import Entrypoint
from aeharness.domain.value_objects import (
    CallResult,
    CompiledContract,
    ContractArtifact,
    DeployInfo,
    Keypair,
)
from aeharness.interfaces.compiler import Compiler
from aeharness.interfaces.node import (
    ContractNotFoundError,
    Node,
    TransactionRejectedError,
)

logger = logging.getLogger(__name__)


class ClientSession:
    """Signing context tying a keypair to a node and a compiler.

    Args:
        keypair: The actor's signing identity.
        node: Node adapter transactions are submitted to.
        compiler: Compiler adapter used to compile and for the calldata codec.
    """

    def __init__(self, keypair: Keypair, node: Node, compiler: Compiler) -> None:
        self.keypair = keypair
        self.node = node
        self.compiler = compiler
        self._compiled: dict[str, CompiledContract] = {}

    def __repr__(self) -> str:
        return f"ClientSession(address={self.address!r})"

    @property
    def address(self) -> str:
        """Account address of the session's signer."""
        return self.keypair.address

    # --- Compilation ---

    def compile(self, artifact: ContractArtifact) -> CompiledContract:
        """Compile ``artifact``, reusing an earlier result for identical content.

        Raises:
            CompileError: If the compiler rejects the source.
            TransportError: On network failures or timeouts.
        """
        if (compiled := self._compiled.get(artifact.digest)) is None:
            compiled = self.compiler.compile(artifact)
            self._compiled[artifact.digest] = compiled
            logger.info(
                "Compiled %s (%s, %d entrypoints)",
                artifact.label,
                compiled.name,
                len(compiled.aci.callable_names),
            )
        return compiled

    # --- Instances ---

    def contract(self, artifact: ContractArtifact) -> ContractInstance:
        """Compile ``artifact`` and return an undeployed instance for it."""
        return ContractInstance(self, artifact, self.compile(artifact))

    def deploy(self, artifact: ContractArtifact, *args: Any, **kwargs: Any) -> ContractInstance:
        """Compile ``artifact``, deploy it with constructor arguments and return the bound instance.

        Raises:
            ArgumentTypeError: If the arguments do not match ``init``.
            DeployError: If the constructor reverts or the node refuses the transaction.
        """
        instance = self.contract(artifact)
        instance.deploy(*args, **kwargs)
        return instance

    def bind(self, artifact: ContractArtifact, address: str) -> ContractInstance:
        """Return an instance bound to a contract deployed at ``address``.

        Nothing is deployed. The bytecode stored at ``address`` must be the
        bytecode of ``artifact``.

        Raises:
            BindError: If ``address`` is malformed, holds no contract, or holds
                a different contract.
        """
        if not addresses.is_address(address):
            raise BindError(str(address), "not a contract address")
        address = addresses.to_contract_address(address)
        compiled = self.compile(artifact)
        try:
            bytecode = self.node.get_contract_code(address)
        except ContractNotFoundError as e:
            raise BindError(address, "no contract deployed at this address") from e
        if not self.compiler.validate_bytecode(compiled, bytecode):
            raise BindError(address, f"deployed bytecode does not match {compiled.name}")

        logger.info("Bound %s at %s as %s", compiled.name, address, self.address)
        return ContractInstance(
            self, artifact, compiled, deploy_info=DeployInfo(address=address)
        )

    # --- Execution (used by ContractInstance) ---

    def execute_deploy(
        self,
        compiled: CompiledContract,
        args: Sequence[Any],
        kwargs: Mapping[str, Any] | None = None,
    ) -> DeployInfo:
        """Validate constructor arguments, deploy ``compiled`` and return where it lives.

        Raises:
            ArgumentTypeError: If the arguments do not match ``init``.
            DeployError: If the constructor reverts or the node refuses the transaction.
        """
        bound = compiled.aci.init.bind_arguments(args, kwargs)
        calldata = self.compiler.encode_calldata(compiled, "init", bound)
        try:
            info = self.node.create_contract(compiled.bytecode, calldata, self.keypair)
        except TransactionRejectedError as e:
            raise DeployError(compiled.name, e.reason) from e

        if not info.ok:
            message = self.compiler.decode_call_result(compiled, "init", info)
            logger.info("Deployment of %s failed: %s", compiled.name, message)
            raise DeployError(compiled.name, message)

        logger.info("Deployed %s at %s (tx %s)", compiled.name, info.contract, info.tx_hash)
        return DeployInfo(
            address=info.contract,
            owner=self.address,
            tx_hash=info.tx_hash,
            height=info.height,
        )

    def execute_call(
        self,
        compiled: CompiledContract,
        address: str,
        entry: Entrypoint,
        args: tuple[Any, ...],
        *,
        read_only: bool | None = None,
    ) -> CallResult:
        """Call ``entry`` of the contract at ``address`` with validated ``args``.

        Non-stateful entry points run as dry-runs unless ``read_only`` says
        otherwise.

        Raises:
            CallError: If the contract reverts or the node refuses the transaction.
        """
        if read_only is None:
            read_only = not entry.stateful
        calldata = self.compiler.encode_calldata(compiled, entry.name, args)
        try:
            info = self.node.call_contract(address, calldata, self.keypair, read_only=read_only)
        except TransactionRejectedError as e:
            raise CallError(entry.name, e.reason) from e

        decoded = self.compiler.decode_call_result(compiled, entry.name, info)
        if not info.ok:
            logger.debug("%s.%s reverted: %s", compiled.name, entry.name, decoded)
            raise CallError(entry.name, decoded)

        logger.debug(
            "%s.%s%s -> %r (%s, gas %d)",
            compiled.name,
            entry.name,
            args,
            decoded,
            "dry-run" if read_only else info.tx_hash,
            info.gas_used,
        )
        return CallResult(entrypoint=entry.name, decoded_result=decoded, info=info)

    def close(self) -> None:
        """Close the node and compiler adapters."""
        self.node.close()
        self.compiler.close()
