"""In-process node adapter for the devnet.

`DevnetNode` keeps chain state in memory and executes devnet bytecode with
the programs registered in a `ProgramRegistry`. It reproduces the parts of a
real node the harness depends on:

- every transaction carries the signer's account, a nonce and an Ed25519
  signature over ``network_id || blake2b-256(tx)``; transactions whose
  signature does not verify, or whose nonce is stale, are rejected;
- each transaction is atomic: the state of every contract is snapshotted
  before execution and restored when the call reverts, nested calls
  included;
- read-only calls run as dry-runs against a snapshot and never change state;
- contract addresses and transaction hashes are derived deterministically, so
  the same sequence of transactions always produces the same identifiers.

Reverts are reported as `CallInfo` with ``return_type == "revert"``; missing
programs, unknown entry points and malformed arguments as ``"error"``.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any

from aeharness.adapters.devnet import codec
from aeharness.adapters.devnet.programs import (
    ExecutionContext,
    Program,
    ProgramRegistry,
    Revert,
    default_registry,
)
from aeharness.domain import addresses
from aeharness.domain.types import ContractInterface, TypeMismatch
from aeharness.domain.value_objects import CallInfo, Keypair, verify_signature
from aeharness.interfaces import node
from aeharness.interfaces.node import ContractNotFoundError, TransactionRejectedError

logger = logging.getLogger(__name__)

DEVNET_NETWORK_ID = "ae_devnet"
GAS_BASE = 1_000
GAS_PER_ARGUMENT = 50
GAS_PER_EVENT = 200
GAS_PER_NESTED_CALL = 500
CREATE_TX = "create"
CALL_TX = "call"


@dataclass
class DeployedContract:
    """A contract stored on the devnet."""

    address: str
    owner: str
    bytecode: str
    interface: ContractInterface
    program: Program


class _Outcome(Exception):
    """Short-circuits execution with a non-ok result."""

    def __init__(self, return_type: str, message: str) -> None:
        super().__init__(message)
        self.return_type = return_type
        self.message = message


class DevnetNode(node.Node):
    """Node port implementation holding chain state in memory.

    Args:
        network_id: Network identifier signed into every transaction.
        registry: Programs available for deployment. Defaults to the
            registry the bundled NFT programs register with.
    """

    def __init__(
        self,
        network_id: str = DEVNET_NETWORK_ID,
        registry: ProgramRegistry | None = None,
    ) -> None:
        self._network_id = network_id
        self._registry = registry if registry is not None else default_registry
        self._contracts: dict[bytes, DeployedContract] = {}
        self._nonces: dict[str, int] = {}
        self._transactions: dict[str, CallInfo] = {}
        self._height = 0
        self._gas = 0
        self._lock = threading.RLock()

    # --- Port ---

    @property
    def network_id(self) -> str:
        return self._network_id

    def create_contract(self, bytecode: str, calldata: str, signer: Keypair) -> CallInfo:
        tx = self.build_transaction(CREATE_TX, signer.address, bytecode=bytecode, calldata=calldata)
        return self.submit(tx, signer.sign(self.signing_payload(tx)))

    def call_contract(
        self,
        address: str,
        calldata: str,
        signer: Keypair,
        *,
        read_only: bool = False,
    ) -> CallInfo:
        if read_only:
            return self.dry_run(address, calldata, signer.address)
        self._require_contract(address)
        tx = self.build_transaction(CALL_TX, signer.address, contract=address, calldata=calldata)
        return self.submit(tx, signer.sign(self.signing_payload(tx)))

    def get_contract_code(self, address: str) -> str:
        return self._require_contract(address).bytecode

    # --- Transactions ---

    @property
    def height(self) -> int:
        """Height of the last block; one block per accepted transaction."""
        return self._height

    def next_nonce(self, account: str) -> int:
        """Nonce the next transaction of ``account`` must carry."""
        return self._nonces.get(account, 0) + 1

    def build_transaction(self, tx_type: str, caller: str, **fields: str) -> dict[str, Any]:
        """Return an unsigned transaction body for ``caller`` with the next nonce."""
        return {"type": tx_type, "caller": caller, "nonce": self.next_nonce(caller), **fields}

    def signing_payload(self, tx: dict[str, Any]) -> bytes:
        """Bytes a signer must sign for ``tx`` on this network."""
        return self._network_id.encode("utf-8") + hashlib.blake2b(
            _serialize(tx), digest_size=32
        ).digest()

    def submit(self, tx: dict[str, Any], signature: bytes) -> CallInfo:
        """Verify and execute a signed transaction.

        Raises:
            TransactionRejectedError: On a bad signature, a stale nonce, an
                unknown transaction type or undecodable bytecode/calldata.
            ContractNotFoundError: If a call targets an address without a contract.
        """
        with self._lock:
            caller = tx.get("caller", "")
            if not verify_signature(caller, signature, self.signing_payload(tx)):
                raise TransactionRejectedError(f"invalid signature for {caller}")
            if tx.get("nonce") != self.next_nonce(caller):
                raise TransactionRejectedError(
                    f"nonce {tx.get('nonce')} for {caller}, expected {self.next_nonce(caller)}"
                )

            tx_hash = addresses.encode(
                addresses.TX_HASH_PREFIX,
                hashlib.blake2b(_serialize(tx) + signature, digest_size=32).digest(),
            )
            match tx.get("type"):
                case "create":
                    info = self._create(tx, tx_hash)
                case "call":
                    info = self._call(tx, tx_hash)
                case other:
                    raise TransactionRejectedError(f"unknown transaction type {other!r}")

            self._nonces[caller] = tx["nonce"]
            self._height += 1
            self._transactions[tx_hash] = info
            logger.debug(
                "Devnet tx %s at height %d: %s %s",
                tx_hash,
                self._height,
                tx["type"],
                info.return_type,
            )
            return info

    def get_transaction_info(self, tx_hash: str) -> CallInfo:
        """Return the outcome of an accepted transaction.

        Raises:
            KeyError: If no transaction with ``tx_hash`` was accepted.
        """
        return self._transactions[tx_hash]

    def dry_run(self, address: str, calldata: str, caller: str) -> CallInfo:
        """Execute a call against current state and discard every change."""
        with self._lock:
            target = self._require_contract(address)
            snapshot = self._snapshot()
            try:
                return self._execute(target, calldata, caller, height=self._height, tx_hash=None)
            finally:
                self._restore(snapshot)

    # --- Contract lookups used by programs ---

    def has_contract(self, address: str) -> bool:
        """Return True if a contract is stored at ``address`` (``ak_`` or ``ct_``)."""
        try:
            return addresses.decode(address) in self._contracts
        except addresses.InvalidIdentifierError:
            return False

    def execute_nested(
        self, ctx: ExecutionContext, address: str, entrypoint: str, args: tuple[Any, ...]
    ) -> Any:
        """Run ``entrypoint`` of another contract on behalf of ``ctx``.

        Reverts propagate to the calling program and abort the transaction.
        """
        if not self.has_contract(address):
            raise Revert(f"No contract at {address}")
        target = self._contracts[addresses.decode(address)]
        entry = target.interface.entrypoints.get(entrypoint)
        if entry is None or entrypoint == "init":
            raise Revert(f"Entrypoint not found: {entrypoint}")
        try:
            values = [a.type.validate(v) for a, v in zip(entry.arguments, args, strict=True)]
        except (TypeMismatch, ValueError) as e:
            raise Revert(f"Bad arguments for {entrypoint}: {e}") from e

        self._gas += GAS_PER_NESTED_CALL
        nested = ExecutionContext(
            node=self,
            caller=ctx.address,
            origin=ctx.origin,
            contract=target.address,
            height=ctx.height,
            events=ctx.events,
        )
        return getattr(target.program, entrypoint)(nested, *values)

    # --- Internals ---

    def _require_contract(self, address: str) -> DeployedContract:
        try:
            key = addresses.decode(address)
        except addresses.InvalidIdentifierError as e:
            raise ContractNotFoundError(address) from e
        if key not in self._contracts:
            raise ContractNotFoundError(address)
        return self._contracts[key]

    def _create(self, tx: dict[str, Any], tx_hash: str) -> CallInfo:
        caller = tx["caller"]
        try:
            document = codec.decode_bytecode(tx.get("bytecode", ""))
        except codec.MalformedBlobError as e:
            raise TransactionRejectedError(str(e)) from e

        key = hashlib.blake2b(
            addresses.decode(caller) + tx["nonce"].to_bytes(8, "big"), digest_size=32
        ).digest()
        address = addresses.encode(addresses.CONTRACT_PREFIX, key)
        interface = ContractInterface.from_aci(document["aci"])
        program_cls = self._registry.get(document["contract"])
        if program_cls is None:
            return self._result(
                "error",
                f"No devnet program registered for contract {document['contract']}",
                caller,
                address,
                tx_hash,
            )

        deployed = DeployedContract(
            address=address,
            owner=caller,
            bytecode=tx["bytecode"],
            interface=interface,
            program=program_cls(),
        )
        snapshot = self._snapshot()
        self._contracts[key] = deployed
        return self._run_atomically(snapshot, deployed, tx["calldata"], caller, tx_hash, init=True)

    def _call(self, tx: dict[str, Any], tx_hash: str) -> CallInfo:
        target = self._require_contract(tx.get("contract", ""))
        return self._run_atomically(self._snapshot(), target, tx["calldata"], tx["caller"], tx_hash)

    def _run_atomically(  # pylint: disable=too-many-arguments
        self,
        snapshot: dict[bytes, Program],
        target: DeployedContract,
        calldata: str,
        caller: str,
        tx_hash: str,
        *,
        init: bool = False,
    ) -> CallInfo:
        try:
            info = self._execute(
                target, calldata, caller, height=self._height + 1, tx_hash=tx_hash, init=init
            )
        except Exception:
            self._restore(snapshot)
            raise
        if not info.ok:
            self._restore(snapshot)
        return info

    def _execute(  # pylint: disable=too-many-arguments
        self,
        target: DeployedContract,
        calldata: str,
        caller: str,
        *,
        height: int,
        tx_hash: str | None,
        init: bool = False,
    ) -> CallInfo:
        ctx = ExecutionContext(
            node=self, caller=caller, origin=caller, contract=target.address, height=height
        )
        self._gas = GAS_BASE
        try:
            function, values, returns = self._decode_call(target, calldata, init=init)
            self._gas += GAS_PER_ARGUMENT * len(values)
            result = getattr(target.program, function)(ctx, *values)
            encoded = codec.encode_blob(returns.to_json(result))
            return_type = "ok"
        except Revert as e:
            return_type, encoded = "revert", codec.encode_blob(e.message)
        except _Outcome as e:
            return_type, encoded = e.return_type, codec.encode_blob(e.message)

        self._gas += GAS_PER_EVENT * len(ctx.events)
        return CallInfo(
            return_type=return_type,
            return_value=encoded,
            caller=caller,
            contract=target.address,
            gas_used=self._gas,
            height=height,
            tx_hash=tx_hash,
            raw={
                "events": [
                    {"contract": e.contract, "name": e.name, "args": list(e.args)}
                    for e in ctx.events
                ]
                if return_type == "ok"
                else [],
            },
        )

    def _decode_call(
        self, target: DeployedContract, calldata: str, *, init: bool
    ) -> tuple[str, list[Any], Any]:
        try:
            function, arguments = codec.decode_calldata(calldata)
        except codec.MalformedBlobError as e:
            raise _Outcome("error", str(e)) from e
        if (function == "init") != init:
            raise _Outcome("error", f"Entrypoint not found: {function}")

        entry = target.interface.entrypoints.get(function)
        if entry is None:
            raise _Outcome("error", f"Entrypoint not found: {function}")
        if not hasattr(target.program, function):
            raise _Outcome(
                "error", f"Program {type(target.program).__name__} does not implement {function}"
            )
        if len(arguments) != len(entry.arguments):
            raise _Outcome(
                "error",
                f"{function} takes {len(entry.arguments)} arguments, got {len(arguments)}",
            )
        try:
            values = [a.type.from_json(v) for a, v in zip(entry.arguments, arguments)]
        except (TypeMismatch, ValueError) as e:
            raise _Outcome("error", f"Bad arguments for {function}: {e}") from e
        return function, values, entry.returns

    def _snapshot(self) -> dict[bytes, Program]:
        return {key: copy.deepcopy(c.program) for key, c in self._contracts.items()}

    def _restore(self, snapshot: dict[bytes, Program]) -> None:
        self._contracts = {k: c for k, c in self._contracts.items() if k in snapshot}
        for key, program in snapshot.items():
            self._contracts[key].program = program

    def _result(
        self, return_type: str, message: str, caller: str, address: str, tx_hash: str
    ) -> CallInfo:
        return CallInfo(
            return_type=return_type,
            return_value=codec.encode_blob(message),
            caller=caller,
            contract=address,
            gas_used=GAS_BASE,
            height=self._height + 1,
            tx_hash=tx_hash,
        )


def _serialize(tx: dict[str, Any]) -> bytes:
    return json.dumps(tx, sort_keys=True, separators=(",", ":")).encode("utf-8")
