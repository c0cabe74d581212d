"""In-process compiler adapter for the devnet.

Produces devnet bytecode (the contract name, source digest and ACI wrapped in
a ``cb_`` byte array) and implements the calldata codec with the compiler's
JSON value shape. No code generation happens; `DevnetNode` looks the contract
up in its program registry instead.
"""

import logging
from collections.abc import Sequence
from typing import Any

from aeharness.adapters.devnet import codec
from aeharness.adapters.devnet.sophia import SophiaSyntaxError, build_aci
from aeharness.domain.errors import CompileError
from aeharness.domain.types import ContractInterface, TypeMismatch
from aeharness.domain.value_objects import CallInfo, CompiledContract, ContractArtifact
from aeharness.interfaces import compiler

logger = logging.getLogger(__name__)


class DevnetCompiler(compiler.Compiler):
    """Compiler port implementation backed by the source scanner."""

    def compile(self, artifact: ContractArtifact) -> CompiledContract:
        try:
            aci = build_aci(artifact.source, artifact.filesystem)
        except SophiaSyntaxError as e:
            raise CompileError(artifact.label, [str(e)]) from e

        interface = ContractInterface.from_aci(aci)
        bytecode = codec.encode_bytecode(interface.name, artifact.digest, aci)
        logger.debug(
            "Devnet-compiled %s (%d entrypoints)", interface.name, len(interface.entrypoints)
        )
        return CompiledContract(bytecode=bytecode, aci=interface)

    def validate_bytecode(self, contract: CompiledContract, bytecode: str) -> bool:
        try:
            deployed = codec.decode_bytecode(bytecode)
            compiled = codec.decode_bytecode(contract.bytecode)
        except codec.MalformedBlobError:
            return False
        return (deployed["contract"], deployed["digest"]) == (
            compiled["contract"],
            compiled["digest"],
        )

    def encode_calldata(
        self, contract: CompiledContract, entrypoint: str, args: Sequence[Any]
    ) -> str:
        entry = contract.aci.entrypoint(entrypoint)
        arguments = [a.type.to_json(v) for a, v in zip(entry.arguments, args)]
        return codec.encode_calldata(entrypoint, arguments)

    def decode_call_result(
        self, contract: CompiledContract, entrypoint: str, info: CallInfo
    ) -> Any:
        value = codec.decode_blob(info.return_value)
        if not info.ok:
            return str(value)
        returns = contract.aci.entrypoint(entrypoint).returns
        try:
            return returns.from_json(value)
        except TypeMismatch as e:
            raise CompileError(
                contract.name, [f"cannot decode result of '{entrypoint}': {e}"]
            ) from e
