"""Node adapter for the node's HTTP API (v3).

Transactions are built by the node's debug endpoints, signed locally and
posted back:

1. ``POST /v3/debug/contracts/create`` or ``/call`` returns an unsigned
   ``tx_`` transaction for the given owner/caller and nonce;
2. the adapter signs ``network_id || blake2b-256(tx)`` with the session's
   keypair and wraps the result as RLP ``[11, 1, [signature], tx]``;
3. ``POST /v3/transactions`` submits it and the adapter polls
   ``GET /v3/transactions/{hash}/info`` until the call object appears.

Read-only calls go through ``POST /v3/dry-run`` with the unsigned
transaction; nothing is submitted.
"""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import httpx
import rlp

from aeharness.adapters.redactor import Redactor
from aeharness.domain import addresses
from aeharness.domain.errors import TransportError
from aeharness.domain.value_objects import CallInfo, Keypair
from aeharness.interfaces import node
from aeharness.interfaces.node import (
    ContractNotFoundError,
    TransactionDefaults,
    TransactionRejectedError,
)
from aeharness.interfaces.redactor import Redactor as RedactorPort

logger = logging.getLogger(__name__)

SIGNED_TX_TAG = 11
SIGNED_TX_VERSION = 1
DRY_RUN_AMOUNT = 100_000_000_000_000_000_000


class HttpNode(node.Node):  # pylint: disable=too-many-instance-attributes
    """Node port implementation talking to a node over HTTP.

    Args:
        base_url: Node URL, e.g. ``http://localhost:3001``.
        network_id: Network identifier; fetched from ``/v3/status`` when None.
        timeout: Per-request timeout in seconds.
        poll_interval: Seconds between transaction-info polls.
        poll_attempts: Polls before giving up on a pending transaction.
        defaults: Fee and VM parameters for built transactions.
        transport: Optional httpx transport (tests use `httpx.MockTransport`).
        redactor: Used to mask credentials in endpoints reported in errors.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        base_url: str,
        network_id: str | None = None,
        *,
        timeout: float = 10.0,
        poll_interval: float = 0.5,
        poll_attempts: int = 20,
        defaults: TransactionDefaults | None = None,
        transport: httpx.BaseTransport | None = None,
        redactor: RedactorPort | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )
        self._network_id = network_id
        self._poll_interval = poll_interval
        self._poll_attempts = poll_attempts
        self._defaults = defaults or TransactionDefaults()
        self._redactor = redactor or Redactor()

    # --- Port ---

    @property
    def network_id(self) -> str:
        if self._network_id is None:
            self._network_id = self._get("/v3/status")["network_id"]
        return self._network_id

    def create_contract(self, bytecode: str, calldata: str, signer: Keypair) -> CallInfo:
        d = self._defaults
        body = {
            "owner_id": signer.address,
            "nonce": self._next_nonce(signer.address),
            "code": bytecode,
            "vm_version": d.vm_version,
            "abi_version": d.abi_version,
            "deposit": d.deposit,
            "amount": d.amount,
            "gas": d.gas,
            "gas_price": d.gas_price,
            "fee": d.fee,
            "ttl": d.ttl,
            "call_data": calldata,
        }
        built = self._post("/v3/debug/contracts/create", body)
        info = self._submit(built["tx"], signer)
        logger.debug("Contract %s created by %s", built.get("contract_id"), signer.address)
        return info

    def call_contract(
        self,
        address: str,
        calldata: str,
        signer: Keypair,
        *,
        read_only: bool = False,
    ) -> CallInfo:
        self.get_contract_code(address)
        d = self._defaults
        body = {
            "caller_id": signer.address,
            "nonce": self._next_nonce(signer.address),
            "contract_id": address,
            "abi_version": d.abi_version,
            "amount": d.amount,
            "gas": d.gas,
            "gas_price": d.gas_price,
            "fee": d.fee,
            "ttl": d.ttl,
            "call_data": calldata,
        }
        built = self._post("/v3/debug/contracts/call", body)
        if read_only:
            return self._dry_run(built["tx"], signer.address)
        return self._submit(built["tx"], signer)

    def get_contract_code(self, address: str) -> str:
        try:
            return self._get(f"/v3/contracts/{address}/code")["bytecode"]
        except TransportError as e:
            if e.status_code in (400, 404):
                raise ContractNotFoundError(address) from e
            raise

    def close(self) -> None:
        self._client.close()

    # --- Signing ---

    def sign_transaction(self, tx: str, signer: Keypair) -> str:
        """Sign an unsigned ``tx_`` transaction and return the signed ``tx_``."""
        tx_bytes = addresses.decode(tx, addresses.TRANSACTION_PREFIX)
        message = self.network_id.encode("utf-8") + hashlib.blake2b(
            tx_bytes, digest_size=32
        ).digest()
        signature = signer.sign(message)
        signed = rlp.encode([SIGNED_TX_TAG, SIGNED_TX_VERSION, [signature], tx_bytes])
        return addresses.encode(addresses.TRANSACTION_PREFIX, signed)

    # --- Internals ---

    def _next_nonce(self, account: str) -> int:
        try:
            return int(self._get(f"/v3/accounts/{account}")["nonce"]) + 1
        except TransportError as e:
            if e.status_code == 404:
                raise TransactionRejectedError(f"account {account} not found") from e
            raise

    def _submit(self, tx: str, signer: Keypair) -> CallInfo:
        signed = self.sign_transaction(tx, signer)
        try:
            tx_hash = self._post("/v3/transactions", {"tx": signed})["tx_hash"]
        except TransportError as e:
            if e.status_code == 400:
                raise TransactionRejectedError(e.reason) from e
            raise
        logger.debug("Posted transaction %s", tx_hash)
        return self._wait_for(tx_hash)

    def _wait_for(self, tx_hash: str) -> CallInfo:
        path = f"/v3/transactions/{tx_hash}/info"
        for attempt in range(1, self._poll_attempts + 1):
            response = self._send("GET", path)
            if response.status_code == 200:
                call = response.json()["call_info"]
                return _call_info(call, tx_hash)
            if response.status_code not in (400, 404):
                raise self._error(response)
            logger.debug(
                "Transaction %s pending (attempt %d/%d)", tx_hash, attempt, self._poll_attempts
            )
            time.sleep(self._poll_interval)
        raise TransportError(
            self._endpoint(path),
            f"transaction {tx_hash} not mined after {self._poll_attempts} attempts",
        )

    def _dry_run(self, tx: str, caller: str) -> CallInfo:
        body = {
            "txs": [{"tx": tx}],
            "accounts": [{"pub_key": caller, "amount": DRY_RUN_AMOUNT}],
        }
        (result,) = self._post("/v3/dry-run", body)["results"]
        if result.get("result") != "ok":
            raise TransactionRejectedError(result.get("reason", "dry-run failed"))
        return _call_info(result["call_obj"], None)

    def _get(self, path: str) -> Any:
        return self._checked(self._send("GET", path))

    def _post(self, path: str, body: dict[str, Any]) -> Any:
        return self._checked(self._send("POST", path, json=body))

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(self._endpoint(path), "timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(self._endpoint(path), str(e)) from e

    def _checked(self, response: httpx.Response) -> Any:
        if response.is_error:
            raise self._error(response)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                self._endpoint(response.request.url.path), "response is not JSON"
            ) from e

    def _error(self, response: httpx.Response) -> TransportError:
        try:
            body = response.json()
        except ValueError:
            body = None
        reason = body.get("reason", response.text) if isinstance(body, dict) else response.text
        return TransportError(
            self._endpoint(response.request.url.path),
            self._redactor.sanitize_text(str(reason)),
            status_code=response.status_code,
        )

    def _endpoint(self, path: str) -> str:
        return self._redactor.sanitize_url(f"{self._client.base_url}".rstrip("/") + path)


def _call_info(call: dict[str, Any], tx_hash: str | None) -> CallInfo:
    return CallInfo(
        return_type=call["return_type"],
        return_value=call["return_value"],
        caller=call.get("caller_id", ""),
        contract=call.get("contract_id", ""),
        gas_used=int(call.get("gas_used", 0)),
        height=call.get("height"),
        tx_hash=tx_hash,
        raw=call,
    )
