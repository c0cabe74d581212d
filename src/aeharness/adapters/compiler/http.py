"""Compiler adapter for the compiler HTTP service.

Calls the service's ``/compile``, ``/aci``, ``/validate-byte-code``,
``/encode-calldata`` and ``/decode-call-result`` endpoints. Every request
carries the artifact's include filesystem in ``options.file_system``.

Calldata encoding needs the contract source, so the adapter remembers the
artifact of everything it compiled, keyed by bytecode. Arguments are sent as
source-language literals rendered by `TypeSpec.to_literal`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from aeharness.adapters.redactor import Redactor
from aeharness.domain.errors import CompileError, TransportError
from aeharness.domain.types import ContractInterface, TypeMismatch
from aeharness.domain.value_objects import CallInfo, CompiledContract, ContractArtifact
from aeharness.interfaces import compiler
from aeharness.interfaces.redactor import Redactor as RedactorPort

logger = logging.getLogger(__name__)


class HttpCompiler(compiler.Compiler):
    """Compiler port implementation talking to the compiler service over HTTP.

    Args:
        base_url: Compiler URL, e.g. ``http://localhost:3080``.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use `httpx.MockTransport`).
        redactor: Used to mask credentials in endpoints reported in errors.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        redactor: RedactorPort | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )
        self._redactor = redactor or Redactor()
        self._artifacts: dict[str, ContractArtifact] = {}

    def compile(self, artifact: ContractArtifact) -> CompiledContract:
        body = {"code": artifact.source, "options": _options(artifact)}
        response = self._send("/compile", body)
        if response.status_code == 400:
            raise CompileError(artifact.label, _compiler_messages(response))
        compiled = self._checked(response)

        aci = compiled.get("aci")
        if aci is None:
            aci = self._checked(self._send("/aci", body)).get("aci")
        try:
            interface = ContractInterface.from_aci(aci)
        except (KeyError, TypeError, ValueError) as e:
            raise CompileError(artifact.label, [f"unreadable ACI: {e}"]) from e

        for warning in compiled.get("warnings", []):
            logger.warning("%s: %s", artifact.label, _message(warning))
        self._artifacts[compiled["bytecode"]] = artifact
        return CompiledContract(bytecode=compiled["bytecode"], aci=interface)

    def validate_bytecode(self, contract: CompiledContract, bytecode: str) -> bool:
        if bytecode == contract.bytecode:
            return True
        artifact = self._artifact_for(contract)
        body = {"bytecode": bytecode, "source": artifact.source, "options": _options(artifact)}
        response = self._send("/validate-byte-code", body)
        if response.status_code == 400:
            logger.debug("Bytecode mismatch: %s", _compiler_messages(response))
            return False
        self._checked(response)
        return True

    def encode_calldata(
        self, contract: CompiledContract, entrypoint: str, args: Sequence[Any]
    ) -> str:
        artifact = self._artifact_for(contract)
        entry = contract.aci.entrypoint(entrypoint)
        body = {
            "source": artifact.source,
            "function": entrypoint,
            "arguments": [a.type.to_literal(v) for a, v in zip(entry.arguments, args)],
            "options": _options(artifact),
        }
        response = self._send("/encode-calldata", body)
        if response.status_code == 400:
            raise CompileError(contract.name, _compiler_messages(response))
        return self._checked(response)["calldata"]

    def decode_call_result(
        self, contract: CompiledContract, entrypoint: str, info: CallInfo
    ) -> Any:
        artifact = self._artifact_for(contract)
        body = {
            "source": artifact.source,
            "function": entrypoint,
            "call-result": info.return_type,
            "call-value": info.return_value,
            "options": _options(artifact),
        }
        response = self._send("/decode-call-result", body)
        if response.status_code == 400:
            raise CompileError(contract.name, _compiler_messages(response))
        value = self._checked(response)

        if not info.ok:
            return _revert_message(value)
        returns = contract.aci.entrypoint(entrypoint).returns
        try:
            return returns.from_json(value)
        except TypeMismatch as e:
            raise CompileError(
                contract.name, [f"cannot decode result of '{entrypoint}': {e}"]
            ) from e

    def close(self) -> None:
        self._client.close()

    # --- Internals ---

    def _artifact_for(self, contract: CompiledContract) -> ContractArtifact:
        try:
            return self._artifacts[contract.bytecode]
        except KeyError:
            raise CompileError(
                contract.name, ["contract was not compiled by this compiler session"]
            ) from None

    def _send(self, path: str, body: dict[str, Any]) -> httpx.Response:
        try:
            return self._client.post(path, json=body)
        except httpx.TimeoutException as e:
            raise TransportError(self._endpoint(path), "timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(self._endpoint(path), str(e)) from e

    def _checked(self, response: httpx.Response) -> Any:
        path = response.request.url.path
        if response.is_error:
            raise TransportError(
                self._endpoint(path),
                self._redactor.sanitize_text(response.text),
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(self._endpoint(path), "response is not JSON") from e

    def _endpoint(self, path: str) -> str:
        return self._redactor.sanitize_url(f"{self._client.base_url}".rstrip("/") + path)


def _options(artifact: ContractArtifact) -> dict[str, Any]:
    return {"file_system": dict(artifact.filesystem)}


def _message(item: Any) -> str:
    if not isinstance(item, dict):
        return str(item)
    text = str(item.get("message", item)).strip()
    pos = item.get("pos") or {}
    if "line" in pos:
        return f"{text} (line {pos['line']}, col {pos.get('col', '?')})"
    return text


def _compiler_messages(response: httpx.Response) -> list[str]:
    try:
        payload = response.json()
    except ValueError:
        return [response.text]
    if isinstance(payload, list):
        return [_message(item) for item in payload]
    if isinstance(payload, dict) and "reason" in payload:
        return [str(payload["reason"])]
    return [_message(payload)]


def _revert_message(value: Any) -> str:
    # Either {"abort": ["message"]} or the bare message, depending on the service version.
    if isinstance(value, dict) and "abort" in value:
        (message,) = value["abort"] or [""]
        return str(message)
    return str(value)
