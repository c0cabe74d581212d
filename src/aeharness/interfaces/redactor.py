"""Interfaces for redacting sensitive values.

This module defines the Redactor interface and the RedactorMode enumeration
used by adapters to sanitize secrets (signing keys, passwords, tokens, API
keys) from strings such as node/compiler endpoint URLs, HTTP authorization
headers and free-form log messages.
"""

import abc
from enum import Enum

# pylint: disable=too-few-public-methods


class RedactorMode(Enum):
    """Enumeration for redactor modes.

    Modes:
    - LENIENT: redact secret keys, passwords and tokens but keep usernames and
      account addresses visible.
    - STRICT: additionally redact usernames and account addresses.
    """

    LENIENT = "lenient"
    STRICT = "strict"


class Redactor(abc.ABC):
    """Interface for sanitizing sensitive information from strings."""

    _mode: RedactorMode

    @abc.abstractmethod
    def sanitize_url(self, raw_url: str) -> str:
        """Return a display-safe endpoint URL.

        Args:
            raw_url: Raw node or compiler URL.

        Returns:
            The URL with credentials and secret query parameters redacted.
        """

    @abc.abstractmethod
    def sanitize_text(self, text: str) -> str:
        """Return ``text`` with embedded secret keys and tokens redacted."""

    @property
    def mode(self) -> RedactorMode:
        """Return the redaction mode."""
        return self._mode
