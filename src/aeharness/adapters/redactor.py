"""Regex-based redactor for sanitizing secrets from strings.

This module provides a Redactor implementation that masks sensitive values
(signing keys, passwords, tokens, API keys) found in endpoint URLs, HTTP
Authorization headers and free-form "key: value" fragments. It supports
lenient and strict modes (strict also redacts usernames and account
addresses).
"""

import re

from aeharness.interfaces import redactor
from aeharness.interfaces.redactor import RedactorMode

# pylint: disable=too-few-public-methods

PLACEHOLDER = "***"
SECRET_KEYWORDS = [
    "password",
    "passwd",
    "secret",
    "secret_key",
    "private_key",
    "token",
    "api_key",
    "apikey",
    "access_token",
    "authorization",
    "sig",
    "signature",
]
STRICT_MODE_ADDITIONAL_KEYWORDS = ["user", "username", "account"]
STRICT_MODE_SECRET_KEYWORDS = SECRET_KEYWORDS + STRICT_MODE_ADDITIONAL_KEYWORDS
SECRET_KEYWORDS_PATTERN = "|".join(kw.replace("_", "[-_]?") for kw in SECRET_KEYWORDS)
STRICT_MODE_SECRET_KEYWORDS_PATTERN = "|".join(
    kw.replace("_", "[-_]?") for kw in STRICT_MODE_SECRET_KEYWORDS
)
QUERY_STRING_PATTERN = re.compile(
    rf"([?&](?:{SECRET_KEYWORDS_PATTERN})=)[^&#\s;]*", re.IGNORECASE
)
STRICT_MODE_QUERY_STRING_PATTERN = re.compile(
    rf"([?&](?:{STRICT_MODE_SECRET_KEYWORDS_PATTERN})=)[^&#\s;]*", re.IGNORECASE
)
KEY_VALUE_SECRET_PATTERN = re.compile(
    rf"((?<!://)\b(?:{SECRET_KEYWORDS_PATTERN})\"?\s*[:=]\s*\"?)[^\s\",}}]+", re.IGNORECASE
)
STRICT_MODE_KEY_VALUE_SECRET_PATTERN = re.compile(
    rf"((?<!://)\b(?:{STRICT_MODE_SECRET_KEYWORDS_PATTERN})\"?\s*[:=]\s*\"?)[^\s\",}}]+",
    re.IGNORECASE,
)
BEARER_PATTERN = re.compile(r"Bearer\s[0-9a-zA-Z\.\-_]*", re.IGNORECASE)
# Ed25519 secrets: 32-byte seed or 64-byte seed+public key, hex encoded.
# Labelled digests such as "sha256:<hex>" are not secrets.
HEX_SECRET_PATTERN = re.compile(r"(?<!\w:)\b(?:[0-9a-fA-F]{128}|[0-9a-fA-F]{64})\b")
ACCOUNT_ADDRESS_PATTERN = re.compile(r"\bak_[1-9A-HJ-NP-Za-km-z]{30,}\b")
URL_PASSWORD_PATTERN = re.compile(r"(?<=://)([^:@/]+):([^@/]+)@")
URL_USER_PATTERN = re.compile(r"(?<=://)([^:@/]+)(?=:(?:\*\*\*|[^@/]*)@)")


class Redactor(redactor.Redactor):
    """Redactor implementation using regex-based sanitization."""

    def __init__(self, mode: RedactorMode = RedactorMode.LENIENT) -> None:
        self._mode = mode

    def sanitize_url(self, raw_url: str) -> str:
        sanitized = str(raw_url)

        # 1) user:pass@  → user:***@
        sanitized = re.sub(URL_PASSWORD_PATTERN, r"\1:***@", sanitized)

        # 2) Strict: redact visible username before '@' (but only if one exists)
        if self._mode == RedactorMode.STRICT:
            sanitized = re.sub(URL_USER_PATTERN, PLACEHOLDER, sanitized)

        # 3) Query-string secrets
        query_pattern = (
            STRICT_MODE_QUERY_STRING_PATTERN
            if self._mode == RedactorMode.STRICT
            else QUERY_STRING_PATTERN
        )
        sanitized = re.sub(query_pattern, rf"\1{PLACEHOLDER}", sanitized)

        return sanitized

    def sanitize_text(self, text: str) -> str:
        # 1) URLs first, so credentials in them are seen whole
        sanitized = self.sanitize_url(str(text))

        # 2) Bearer tokens: Bearer <token>
        sanitized = BEARER_PATTERN.sub(PLACEHOLDER, sanitized)

        # 3) Key:Value / key=value secrets
        key_value_pattern = (
            STRICT_MODE_KEY_VALUE_SECRET_PATTERN
            if self._mode == RedactorMode.STRICT
            else KEY_VALUE_SECRET_PATTERN
        )
        sanitized = re.sub(key_value_pattern, rf"\1{PLACEHOLDER}", sanitized)

        # 4) Bare hex-encoded signing keys
        sanitized = HEX_SECRET_PATTERN.sub(PLACEHOLDER, sanitized)

        # 5) Strict: account addresses
        if self._mode == RedactorMode.STRICT:
            sanitized = ACCOUNT_ADDRESS_PATTERN.sub(f"ak_{PLACEHOLDER}", sanitized)

        return sanitized
