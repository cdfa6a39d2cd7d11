"""Credential header validation.

The client presents its key in X-Provider-Api-Key. A missing or empty header
and a wrong key are both rejected with a 401 error envelope; the wrong key is
echoed back only in redacted form.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping

API_KEY_HEADER = "X-Provider-Api-Key"

_REDACT_VISIBLE = 4
_REDACT_MASK = "****"


def redact_key(key: str) -> str:
    """Keep the first and last 4 characters, or mask entirely for short keys."""
    if len(key) <= 2 * _REDACT_VISIBLE:
        return _REDACT_MASK
    return f"{key[:_REDACT_VISIBLE]}...{key[-_REDACT_VISIBLE:]}"


def _as_bytes(value: str) -> bytes:
    return value.encode("utf-8", "surrogateescape")


class AuthError(Exception):
    status = 401
    type = "authentication_error"
    code = ""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {
            "error": {
                "message": self.message,
                "type": self.type,
                "code": self.code,
            }
        }


class MissingKeyError(AuthError):
    code = "missing_api_key"

    def __init__(self) -> None:
        super().__init__(f"Missing API key. Set {API_KEY_HEADER} header.")


class InvalidKeyError(AuthError):
    code = "invalid_api_key"

    def __init__(self, presented: str) -> None:
        self.redacted = redact_key(presented)
        super().__init__(f"Invalid API key provided: {self.redacted}")


def check_key(headers: Mapping[str, str], expected_key: str) -> AuthError | None:
    """Validate the credential header. Returns the error, or None on success.

    aiohttp request headers are case-insensitive; plain dicts are looked up
    under the canonical and lowercase spellings.
    """
    key = headers.get(API_KEY_HEADER) or headers.get(API_KEY_HEADER.lower())
    if not key:
        return MissingKeyError()
    if not hmac.compare_digest(_as_bytes(key), _as_bytes(expected_key)):
        return InvalidKeyError(key)
    return None
