"""Harness error definitions.

None of these errors are recovered from inside the harness. They propagate to
the calling test step, which fails with the message attached.
"""

from collections.abc import Iterable

# ============================================================================
#                           General harness errors
# ============================================================================


class HarnessError(Exception):
    """Base class for all harness errors."""


class LoadError(HarnessError):
    """Raised when a contract source file or one of its includes is missing."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        message = f"Cannot load contract source '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class CompileError(HarnessError):
    """Raised when the compiler rejects a contract source."""

    def __init__(self, contract: str, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        details = "; ".join(self.errors) or "unknown error"
        super().__init__(f"Compilation of {contract} failed: {details}")
        self.contract = contract


class TransportError(HarnessError):
    """Raised on network failures, timeouts and unexpected service responses."""

    def __init__(
        self, endpoint: str, reason: str, status_code: int | None = None
    ) -> None:
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Request to {endpoint} failed{status}: {reason}")
        self.endpoint = endpoint
        self.reason = reason
        self.status_code = status_code


# ============================================================================
#                       Contract lifecycle errors
# ============================================================================


class DeployError(HarnessError):
    """Raised when a deployment fails, e.g. because the constructor reverted."""

    def __init__(self, contract: str, message: str) -> None:
        super().__init__(f"Deployment of {contract} failed: {message}")
        self.contract = contract
        self.message = message


class BindError(HarnessError):
    """Raised when an address has no contract or its bytecode does not match."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"Cannot bind to {address}: {reason}")
        self.address = address
        self.reason = reason


class NotDeployedError(HarnessError):
    """Raised when an entry point is called on an instance without an address."""

    def __init__(self, contract: str) -> None:
        super().__init__(f"Contract {contract} has not been deployed yet.")
        self.contract = contract


# ============================================================================
#                           Call errors
# ============================================================================


class CallError(HarnessError):
    """Raised when the contract logic rejects a call.

    The revert message is kept verbatim on `message` so callers can assert on
    substrings of it.
    """

    def __init__(self, entrypoint: str, message: str) -> None:
        super().__init__(f"Call to '{entrypoint}' failed: {message}")
        self.entrypoint = entrypoint
        self.message = message


class UnknownEntrypointError(HarnessError, AttributeError):
    """Raised when an entry point name is not part of the contract interface."""

    def __init__(self, contract: str, name: str, available: Iterable[str]) -> None:
        self.available = sorted(available)
        super().__init__(
            f"Contract {contract} has no entrypoint '{name}'. "
            f"Available: {', '.join(self.available) or '<none>'}"
        )
        self.contract = contract
        self.name = name


class ArgumentTypeError(HarnessError, TypeError):
    """Raised when call arguments do not match the entry point signature."""

    def __init__(self, entrypoint: str, reason: str) -> None:
        super().__init__(f"Invalid arguments for '{entrypoint}': {reason}")
        self.entrypoint = entrypoint
        self.reason = reason
