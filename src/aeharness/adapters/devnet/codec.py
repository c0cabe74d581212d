"""Byte-array encoding shared by the devnet compiler and node.

Devnet bytecode, calldata and return values are JSON documents wrapped in a
``cb_`` identifier. That keeps them opaque to the client layer, exactly like
real FATE byte arrays, while letting the devnet read them back.
"""

import json
from typing import Any

from aeharness.domain import addresses

DEVNET_COMPILER = "devnet"


class MalformedBlobError(ValueError):
    """Raised when a ``cb_`` value is not a devnet JSON blob."""


def encode_blob(document: Any) -> str:
    """Wrap a JSON-serializable ``document`` as a ``cb_`` byte array."""
    payload = json.dumps(document, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return addresses.encode(addresses.BYTEARRAY_PREFIX, payload)


def decode_blob(blob: str) -> Any:
    """Unwrap a ``cb_`` byte array produced by `encode_blob`.

    Raises:
        MalformedBlobError: If ``blob`` is not a well-formed devnet blob.
    """
    try:
        payload = addresses.decode(blob, addresses.BYTEARRAY_PREFIX)
        return json.loads(payload.decode("utf-8"))
    except (addresses.InvalidIdentifierError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedBlobError(f"Not a devnet byte array: {blob[:24]!r}...") from e


def encode_bytecode(contract: str, digest: str, aci: Any) -> str:
    """Build devnet bytecode for ``contract`` carrying its ACI."""
    return encode_blob(
        {"compiler": DEVNET_COMPILER, "contract": contract, "digest": digest, "aci": aci}
    )


def decode_bytecode(bytecode: str) -> dict[str, Any]:
    """Return the ``{"contract", "digest", "aci"}`` document of devnet bytecode.

    Raises:
        MalformedBlobError: If ``bytecode`` was not produced by the devnet compiler.
    """
    document = decode_blob(bytecode)
    if not isinstance(document, dict) or document.get("compiler") != DEVNET_COMPILER:
        raise MalformedBlobError("Bytecode was not produced by the devnet compiler")
    return document


def encode_calldata(function: str, arguments: list[Any]) -> str:
    """Encode a call of ``function`` with JSON-shaped ``arguments``."""
    return encode_blob({"function": function, "arguments": arguments})


def decode_calldata(calldata: str) -> tuple[str, list[Any]]:
    """Return the function name and JSON arguments carried by ``calldata``.

    Raises:
        MalformedBlobError: If ``calldata`` is not devnet calldata.
    """
    document = decode_blob(calldata)
    if not isinstance(document, dict) or not isinstance(document.get("function"), str):
        raise MalformedBlobError("Calldata does not name a function")
    return document["function"], list(document.get("arguments", []))
