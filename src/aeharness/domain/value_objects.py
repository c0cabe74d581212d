"""Module including value objects used across the harness."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from aeharness.domain import addresses

if TYPE_CHECKING:
    from collections.abc import Mapping

    from aeharness.domain.types import ContractInterface

SEED_SIZE = 32
SIGNATURE_SIZE = 64


# ============================================================================
#                               Keypair
# ============================================================================


@dataclass(frozen=True)
class Keypair:
    """Ed25519 signing identity.

    Attributes:
        public_key: The ``ak_`` address derived from the public key.
        seed: The 32-byte private seed. Never rendered by ``repr``.
    """

    public_key: str
    seed: bytes = field(repr=False)

    def __post_init__(self) -> None:
        if len(self.seed) != SEED_SIZE:
            raise ValueError(f"Ed25519 seed must be {SEED_SIZE} bytes")
        derived = addresses.encode(
            addresses.ACCOUNT_PREFIX, _public_bytes(self._private_key())
        )
        if derived != self.public_key:
            raise ValueError(
                f"Public key {self.public_key} does not match the secret key"
            )

    @classmethod
    def generate(cls) -> Keypair:
        """Create a fresh random keypair."""
        private_key = Ed25519PrivateKey.generate()
        seed = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cls.from_seed(seed)

    @classmethod
    def from_seed(cls, seed: bytes) -> Keypair:
        """Build a keypair from a raw 32-byte seed."""
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        public_key = addresses.encode(
            addresses.ACCOUNT_PREFIX, _public_bytes(private_key)
        )
        return cls(public_key=public_key, seed=seed)

    @classmethod
    def from_secret_key(cls, secret_key: str) -> Keypair:
        """Build a keypair from a hex-encoded secret key.

        Both the 32-byte seed and the 64-byte ``seed || public key`` form are
        accepted. In the long form the trailing public key must match the one
        derived from the seed.

        Raises:
            ValueError: If the value is not hex, has the wrong length, or the
                embedded public key does not match.
        """
        raw = bytes.fromhex(secret_key.strip())
        if len(raw) == SEED_SIZE:
            return cls.from_seed(raw)
        if len(raw) == SEED_SIZE * 2:
            keypair = cls.from_seed(raw[:SEED_SIZE])
            if addresses.decode(keypair.public_key) != raw[SEED_SIZE:]:
                raise ValueError("Embedded public key does not match the seed")
            return keypair
        raise ValueError(
            f"Secret key must be {SEED_SIZE} or {SEED_SIZE * 2} bytes, got {len(raw)}"
        )

    @property
    def address(self) -> str:
        """Alias for `public_key`; the account address of this signer."""
        return self.public_key

    @property
    def secret_key(self) -> str:
        """Return the 64-byte ``seed || public key`` secret in hex."""
        return (self.seed + addresses.decode(self.public_key)).hex()

    def sign(self, message: bytes) -> bytes:
        """Sign ``message`` and return the raw 64-byte signature."""
        return self._private_key().sign(message)

    def _private_key(self) -> Ed25519PrivateKey:
        return Ed25519PrivateKey.from_private_bytes(self.seed)


def _public_bytes(private_key: Ed25519PrivateKey) -> bytes:
    return private_key.public_key().public_bytes(
        encoding=serialization.Encoding.Raw, format=serialization.PublicFormat.Raw
    )


def verify_signature(address: str, signature: bytes, message: bytes) -> bool:
    """Return True if ``signature`` over ``message`` was made by ``address``.

    Contract-form addresses are accepted; only the key payload matters.
    """
    try:
        public_key = Ed25519PublicKey.from_public_bytes(addresses.decode(address))
        public_key.verify(signature, message)
    except (InvalidSignature, ValueError):
        return False
    return True


# ============================================================================
#                       Contract artifacts and results
# ============================================================================


@dataclass(frozen=True)
class ContractArtifact:
    """Contract source text plus the include files the compiler needs.

    Attributes:
        source: Raw source text of the main contract file.
        filesystem: Mapping of include names to their contents.
        path: Where the source was read from, if it came from disk.
    """

    source: str
    filesystem: Mapping[str, str] = field(default_factory=dict)
    path: Path | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "filesystem", MappingProxyType(dict(self.filesystem)))

    @property
    def digest(self) -> str:
        """Content digest over the source and every include, in name order."""
        h = hashlib.sha256(self.source.encode("utf-8"))
        for name in sorted(self.filesystem):
            h.update(b"\x00" + name.encode("utf-8") + b"\x00")
            h.update(self.filesystem[name].encode("utf-8"))
        return f"sha256:{h.hexdigest()}"

    @property
    def label(self) -> str:
        """Short human-readable name for logs and error messages."""
        return self.path.name if self.path is not None else "<inline source>"


@dataclass(frozen=True)
class CompiledContract:
    """Compiler output: bytecode plus the contract interface (ACI)."""

    bytecode: str
    aci: ContractInterface

    @property
    def name(self) -> str:
        """Name of the compiled contract."""
        return self.aci.name


@dataclass(frozen=True)
class CallInfo:
    """Raw outcome of a contract create or call as reported by a node.

    ``return_type`` is one of ``"ok"``, ``"revert"`` or ``"error"``.
    ``return_value`` stays encoded; the compiler decodes it.
    """

    # pylint: disable=too-many-instance-attributes

    return_type: str
    return_value: str
    caller: str
    contract: str
    gas_used: int = 0
    height: int | None = None
    tx_hash: str | None = None
    raw: Mapping[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True if the call completed without revert or error."""
        return self.return_type == "ok"


@dataclass(frozen=True)
class CallResult:
    """Decoded result of an entry-point call plus its raw node metadata."""

    entrypoint: str
    decoded_result: Any
    info: CallInfo

    @property
    def tx_hash(self) -> str | None:
        """Transaction hash, or None for read-only dry-runs."""
        return self.info.tx_hash


@dataclass(frozen=True)
class DeployInfo:
    """Where and by whom a contract was deployed.

    ``owner`` and ``tx_hash`` are None for instances bound to an existing
    address.
    """

    address: str
    owner: str | None = None
    tx_hash: str | None = None
    height: int | None = None
