"""Node port.

A node holds chain state and executes transactions. The harness needs very
little of it: create a contract, call an entry point (as a signed transaction
or as a read-only dry-run), and read the bytecode stored at an address.

Signing happens inside the adapter, over the exact bytes it transmits, with
the keypair handed in by the session. The signature is the only authorization
mechanism; there is no separate access-control layer.

Error contract:
- Transport failures and timeouts raise `TransportError`.
- A transaction the node refuses before execution (bad signature, unknown
  account, malformed calldata) raises `TransactionRejectedError`.
- Contract-level reverts are NOT raised here; they come back as a `CallInfo`
  with ``return_type == "revert"`` so the session can decode the message.
"""

import abc
from dataclasses import dataclass

from aeharness.domain.errors import HarnessError
from aeharness.domain.value_objects import CallInfo, Keypair


class TransactionRejectedError(HarnessError):
    """Raised when the node refuses a transaction before executing it."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Transaction rejected: {reason}")
        self.reason = reason


class ContractNotFoundError(HarnessError):
    """Raised when no contract is stored at an address."""

    def __init__(self, address: str) -> None:
        super().__init__(f"No contract at {address}")
        self.address = address


class Node(abc.ABC):
    """Abstract base class for blockchain node access."""

    @property
    @abc.abstractmethod
    def network_id(self) -> str:
        """Identifier of the network this node belongs to (signed into every tx)."""

    @abc.abstractmethod
    def create_contract(
        self, bytecode: str, calldata: str, signer: Keypair
    ) -> CallInfo:
        """Deploy ``bytecode`` and run its constructor with ``calldata``.

        Args:
            bytecode: Compiled contract bytecode (``cb_...``).
            calldata: Encoded constructor call (``cb_...``).
            signer: Keypair that owns the contract and signs the transaction.

        Returns:
            CallInfo: Outcome of the constructor call; ``contract`` holds the
            new ``ct_`` address.

        Raises:
            TransactionRejectedError: If the node refuses the transaction.
            TransportError: On network failures or timeouts.
        """

    @abc.abstractmethod
    def call_contract(
        self,
        address: str,
        calldata: str,
        signer: Keypair,
        *,
        read_only: bool = False,
    ) -> CallInfo:
        """Call an entry point of the contract at ``address``.

        Args:
            address: ``ct_`` address of the contract.
            calldata: Encoded entry-point call (``cb_...``).
            signer: Keypair of the caller.
            read_only: If True, execute as a dry-run; state is never changed.

        Returns:
            CallInfo: Outcome of the call, including reverts.

        Raises:
            ContractNotFoundError: If there is no contract at ``address``.
            TransactionRejectedError: If the node refuses the transaction.
            TransportError: On network failures or timeouts.
        """

    @abc.abstractmethod
    def get_contract_code(self, address: str) -> str:
        """Return the bytecode stored at ``address``.

        Raises:
            ContractNotFoundError: If there is no contract at ``address``.
            TransportError: On network failures or timeouts.
        """

    def close(self) -> None:
        """Release transport resources. Safe to call more than once."""

    def __enter__(self) -> "Node":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(frozen=True)
class TransactionDefaults:
    """Fee and VM parameters attached to every transaction a node adapter builds."""

    gas: int = 25_000
    gas_price: int = 1_000_000_000
    fee: int = 200_000_000_000_000
    amount: int = 0
    deposit: int = 0
    ttl: int = 0
    vm_version: int = 7
    abi_version: int = 3
