"""Compiler port.

The compiler turns a `ContractArtifact` into bytecode plus its interface
description (ACI), and owns the calldata codec: it encodes entry-point
arguments and decodes the values a node returns. Keeping the codec here
mirrors how the external compiler service works and lets each node adapter
stay agnostic of the value encoding.

Error contract:
- Sources the compiler rejects raise `CompileError`.
- Transport failures and timeouts raise `TransportError`.
"""

import abc
from collections.abc import Sequence
from typing import Any

from aeharness.domain.value_objects import CallInfo, CompiledContract, ContractArtifact


class Compiler(abc.ABC):
    """Abstract base class for contract compilation and the calldata codec."""

    @abc.abstractmethod
    def compile(self, artifact: ContractArtifact) -> CompiledContract:
        """Compile ``artifact`` into bytecode and ACI.

        Raises:
            CompileError: If the source does not compile.
            TransportError: On network failures or timeouts.
        """

    @abc.abstractmethod
    def validate_bytecode(self, contract: CompiledContract, bytecode: str) -> bool:
        """Return True if ``bytecode`` (read from a node) was compiled from ``contract``'s source.

        Raises:
            TransportError: On network failures or timeouts.
        """

    @abc.abstractmethod
    def encode_calldata(
        self, contract: CompiledContract, entrypoint: str, args: Sequence[Any]
    ) -> str:
        """Encode a call of ``entrypoint`` with already-validated ``args``.

        Returns:
            str: ``cb_`` encoded calldata.
        """

    @abc.abstractmethod
    def decode_call_result(
        self, contract: CompiledContract, entrypoint: str, info: CallInfo
    ) -> Any:
        """Decode the return value carried by ``info``.

        For ``"ok"`` results this is the entry point's typed return value. For
        ``"revert"`` results it is the revert message as a string.
        """

    def close(self) -> None:
        """Release transport resources. Safe to call more than once."""

    def __enter__(self) -> "Compiler":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
