"""Minimal Salesforce REST API client: OAuth client-credentials, SOQL query, record create."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sfrest")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"
finally:
    del version, PackageNotFoundError

from .api import API_VERSION, SalesforceAPI, SFConfig  # noqa: E402
from .exceptions import (  # noqa: E402
    ApiError,
    AuthenticationError,
    DecodeError,
    MissingCredentialsError,
    SalesforceError,
    TransportError,
)

__all__ = [
    "API_VERSION",
    "ApiError",
    "AuthenticationError",
    "DecodeError",
    "MissingCredentialsError",
    "SalesforceAPI",
    "SalesforceError",
    "SFConfig",
    "TransportError",
]
