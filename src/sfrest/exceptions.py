"""
Exception hierarchy for all Salesforce client errors.
"""

from __future__ import annotations

from typing import Any, Optional


class SalesforceError(RuntimeError):
    """Base exception for all sfrest operations."""


class MissingCredentialsError(SalesforceError):
    """Raised when required Salesforce settings are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required Salesforce settings: " + ", ".join(missing))


class TransportError(SalesforceError):
    """Raised when the request never produced an HTTP response.

    Covers connection refused, DNS and TLS failures and timeouts. The
    underlying ``requests`` exception is chained as ``__cause__``.
    """


class AuthenticationError(SalesforceError):
    """Raised when the token endpoint does not hand out a token.

    ``str(err)`` is the ``error`` field returned by Salesforce, e.g.
    ``"invalid_client"``.
    """

    def __init__(
        self,
        error: str,
        *,
        description: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.error = error
        self.description = description
        self.status_code = status_code
        super().__init__(error)


class DecodeError(SalesforceError):
    """Raised when a response body is not the JSON we expected."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ApiError(SalesforceError):
    """Raised for non-2xx responses and Salesforce error payloads."""

    def __init__(self, status_code: Optional[int], errors: Any, *, url: str = ""):
        self.status_code = status_code
        self.errors = errors
        self.url = url
        super().__init__(f"Salesforce API error ({status_code}): {_describe(errors)}")


def _describe(errors: Any) -> str:
    # Salesforce REST errors come back as [{"message": ..., "errorCode": ...}, ...]
    if isinstance(errors, list):
        parts = []
        for e in errors:
            if isinstance(e, dict):
                code = e.get("errorCode") or e.get("statusCode")
                msg = e.get("message", "")
                parts.append(f"{code}: {msg}" if code else str(msg))
            else:
                parts.append(str(e))
        return "; ".join(parts)
    return str(errors)
