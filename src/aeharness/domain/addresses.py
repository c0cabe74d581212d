"""Prefixed identifier encoding.

Identifiers have the form ``<prefix>_<payload>``. Keys and hashes use a
base58check payload (``ak_`` accounts, ``ct_`` contracts, ``th_`` transaction
hashes); binary blobs use base64check (``cb_`` contract bytearrays, ``tx_``
transactions). Both checks append the first four bytes of a double SHA-256.

An account address and a contract address that share the same payload denote
the same on-chain identity; `to_account_address` swaps the prefix.
"""

import base64
import hashlib
import re

import base58

ACCOUNT_PREFIX = "ak"
CONTRACT_PREFIX = "ct"
TX_HASH_PREFIX = "th"
BYTEARRAY_PREFIX = "cb"
TRANSACTION_PREFIX = "tx"

BASE58_PREFIXES = frozenset({ACCOUNT_PREFIX, CONTRACT_PREFIX, TX_HASH_PREFIX})
BASE64_PREFIXES = frozenset({BYTEARRAY_PREFIX, TRANSACTION_PREFIX})

KEY_SIZE = 32
_CHECK_SIZE = 4

_IDENTIFIER_RE = re.compile(r"^(?P<prefix>[a-z]{2})_(?P<payload>[0-9A-Za-z+/=]+)$")


class InvalidIdentifierError(ValueError):
    """Raised when a prefixed identifier is malformed or fails its checksum."""


def _checksum(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()[:_CHECK_SIZE]


def encode(prefix: str, data: bytes) -> str:
    """Encode ``data`` as a prefixed identifier.

    Args:
        prefix: Two-letter identifier prefix (e.g. ``"ak"``).
        data: Raw payload bytes.

    Returns:
        str: The ``<prefix>_<payload>`` string.

    Raises:
        InvalidIdentifierError: If the prefix is unknown.
    """
    if prefix in BASE58_PREFIXES:
        return f"{prefix}_{base58.b58encode_check(data).decode('ascii')}"
    if prefix in BASE64_PREFIXES:
        payload = base64.b64encode(data + _checksum(data)).decode("ascii")
        return f"{prefix}_{payload}"
    raise InvalidIdentifierError(f"Unknown identifier prefix: {prefix!r}")


def decode(identifier: str, expected_prefix: str | None = None) -> bytes:
    """Decode a prefixed identifier into its raw payload.

    Args:
        identifier: The ``<prefix>_<payload>`` string.
        expected_prefix: When given, the identifier must carry this prefix.

    Returns:
        bytes: The payload with the checksum removed.

    Raises:
        InvalidIdentifierError: On a malformed identifier, an unexpected or
            unknown prefix, or a checksum mismatch.
    """
    if not (match := _IDENTIFIER_RE.match(identifier or "")):
        raise InvalidIdentifierError(f"Malformed identifier: {identifier!r}")
    prefix, payload = match["prefix"], match["payload"]
    if expected_prefix is not None and prefix != expected_prefix:
        raise InvalidIdentifierError(
            f"Expected a '{expected_prefix}_' identifier, got {identifier!r}"
        )

    if prefix in BASE58_PREFIXES:
        try:
            return base58.b58decode_check(payload)
        except ValueError as e:
            raise InvalidIdentifierError(f"Bad checksum in {identifier!r}") from e

    if prefix in BASE64_PREFIXES:
        try:
            raw = base64.b64decode(payload, validate=True)
        except ValueError as e:
            raise InvalidIdentifierError(f"Bad base64 in {identifier!r}") from e
        data, check = raw[:-_CHECK_SIZE], raw[-_CHECK_SIZE:]
        if len(raw) < _CHECK_SIZE or _checksum(data) != check:
            raise InvalidIdentifierError(f"Bad checksum in {identifier!r}")
        return data

    raise InvalidIdentifierError(f"Unknown identifier prefix in {identifier!r}")


def prefix_of(identifier: str) -> str:
    """Return the two-letter prefix of ``identifier``."""
    if not (match := _IDENTIFIER_RE.match(identifier or "")):
        raise InvalidIdentifierError(f"Malformed identifier: {identifier!r}")
    return match["prefix"]


def is_address(value: object) -> bool:
    """Return True if ``value`` is a well-formed ``ak_`` or ``ct_`` address."""
    if not isinstance(value, str):
        return False
    try:
        prefix = prefix_of(value)
        if prefix not in (ACCOUNT_PREFIX, CONTRACT_PREFIX):
            return False
        return len(decode(value)) == KEY_SIZE
    except InvalidIdentifierError:
        return False


def to_account_address(address: str) -> str:
    """Return the ``ak_`` form of an account or contract address.

    Entry points typed ``address`` only accept the account form, so a contract
    address has to be converted before it is passed as an argument.
    """
    decode(address)  # validates
    return f"{ACCOUNT_PREFIX}_{address.split('_', 1)[1]}"


def to_contract_address(address: str) -> str:
    """Return the ``ct_`` form of an account or contract address."""
    decode(address)  # validates
    return f"{CONTRACT_PREFIX}_{address.split('_', 1)[1]}"


def same_identity(left: str, right: str) -> bool:
    """Return True if two addresses share the same key, ignoring the prefix."""
    return left.split("_", 1)[-1] == right.split("_", 1)[-1]
