from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from .env_loader import load_env_files
from .exceptions import (
    ApiError,
    AuthenticationError,
    DecodeError,
    MissingCredentialsError,
    TransportError,
)
from .models import CreateResponse, TokenResponse

_logger = logging.getLogger(__name__)

# Ensure .env is loaded for library use as well (e.g. scripts importing SalesforceAPI)
load_env_files(quiet=True)

API_VERSION = "v61.0"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json; charset=UTF-8"


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class SFConfig:
    """Connection settings for one Salesforce org."""

    # Subdomain of the org: https://{my_domain}.my.salesforce.com
    my_domain: Optional[str] = None

    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    # Full Authorization value, scheme included ("Bearer 00D...")
    access_token: Optional[str] = None

    api_version: str = API_VERSION

    # Seconds; None sends requests without an explicit timeout
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> SFConfig:
        """Load configuration from environment variables."""
        timeout = os.getenv("SF_TIMEOUT")
        return cls(
            my_domain=os.getenv("SF_MY_DOMAIN"),
            client_id=os.getenv("SF_CLIENT_ID"),
            client_secret=os.getenv("SF_CLIENT_SECRET"),
            access_token=os.getenv("SF_ACCESS_TOKEN"),
            api_version=os.getenv("SF_API_VERSION") or API_VERSION,
            timeout=float(timeout) if timeout else None,
        )

    @property
    def base_url(self) -> str:
        if not self.my_domain:
            raise MissingCredentialsError(["SF_MY_DOMAIN"])
        return f"https://{self.my_domain}.my.salesforce.com"


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class SalesforceAPI:
    """Minimal Salesforce REST API client.

    Each instance owns its configuration, credential and HTTP session, so
    clients for different orgs (or different users of the same org) can be
    used side by side without sharing state.
    """

    def __init__(
        self,
        cfg: Optional[SFConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.cfg = cfg or SFConfig.from_env()
        self.session = session or requests.Session()
        self.access_token: Optional[str] = self.cfg.access_token

    def __enter__(self) -> SalesforceAPI:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    # --------------------------- Public methods -----------------------

    def connect(self, *, timeout: Optional[float] = None) -> str:
        """Make sure the client holds a credential and return it.

        A configured access token is used as is; otherwise a new one is
        requested with the client-credentials flow and stored on the client.
        """
        if self.access_token:
            _logger.debug("Using existing access token from configuration.")
            return self.access_token

        _logger.info("Performing OAuth client-credentials login for %s", self.cfg.my_domain)
        self.access_token = self.get_access_token(timeout=timeout)
        return self.access_token

    def get_access_token(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
    ) -> str:
        """Request a token and return it as an ``Authorization`` value.

        The result is ``"<token_type> <access_token>"``. The client's own
        credential is left untouched; use :meth:`connect` to store one.

        Raises:
            MissingCredentialsError: client id/secret or domain not set.
            AuthenticationError: Salesforce refused to issue a token.
            TransportError: the token endpoint could not be reached.
            DecodeError: the token endpoint answered with malformed JSON.
        """
        client_id = client_id or self.cfg.client_id
        client_secret = client_secret or self.cfg.client_secret
        missing = [
            k
            for k, v in {
                "SF_MY_DOMAIN": self.cfg.my_domain,
                "SF_CLIENT_ID": client_id,
                "SF_CLIENT_SECRET": client_secret,
            }.items()
            if not v
        ]
        if missing:
            raise MissingCredentialsError(missing)

        token_url = self._url("/services/oauth2/token")
        data = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
        }

        _logger.debug("Requesting access token from %s", token_url)
        r = self._request(
            "POST",
            token_url,
            headers={"Content-Type": FORM_CONTENT_TYPE},
            data=data,
            timeout=timeout,
        )
        payload = self._decode(r, token_url)
        if not isinstance(payload, dict):
            if not _is_success(r):
                raise self._api_error(r, token_url)
            raise DecodeError(
                f"Unexpected token response from {token_url}",
                status_code=r.status_code,
                body=r.text,
            )

        token = TokenResponse.from_dict(payload)
        if not token.token_type:
            _logger.error("Token request rejected (%s): %s", r.status_code, token.error)
            raise AuthenticationError(
                token.error or f"token response without token_type (HTTP {r.status_code})",
                description=token.error_description or None,
                status_code=r.status_code,
            )
        if not _is_success(r):
            raise self._api_error(r, token_url)

        _logger.info("Obtained %s token for %s", token.token_type, token.instance_url or token_url)
        return token.credential

    def query(self, soql: str, *, timeout: Optional[float] = None) -> bytes:
        """Run a SOQL query and return the raw JSON body.

        The body is Salesforce's query envelope (``totalSize``, ``done``,
        ``records``, ``nextRecordsUrl``); further pages are not fetched.
        """
        url = self._url(f"/services/data/{self.cfg.api_version}/query/")
        url = f"{url}?{urlencode({'q': soql})}"
        headers = {
            "Accept": "application/json",
            "Content-Type": JSON_CONTENT_TYPE,
            **self._auth_headers(),
        }

        _logger.debug("Running SOQL query: %s", soql)
        r = self._request("GET", url, headers=headers, timeout=timeout)
        if not _is_success(r):
            raise self._api_error(r, url)
        return r.content

    def create(
        self,
        object_name: str,
        data: Dict[str, Any],
        *,
        timeout: Optional[float] = None,
    ) -> str:
        """Create one ``object_name`` record from ``data`` and return its Id."""
        url = self._url(f"/services/data/{self.cfg.api_version}/sobjects/{object_name}/")
        headers = {
            "Content-Type": JSON_CONTENT_TYPE,
            **self._auth_headers(),
        }
        body = json.dumps(data)

        _logger.debug("Creating %s record with fields %s", object_name, sorted(data))
        r = self._request("POST", url, headers=headers, data=body, timeout=timeout)
        if not _is_success(r):
            raise self._api_error(r, url)

        payload = self._decode(r, url)
        if not isinstance(payload, dict):
            raise DecodeError(
                f"Unexpected create response from {url}",
                status_code=r.status_code,
                body=r.text,
            )

        created = CreateResponse.from_dict(payload)
        if not created.success or not created.id:
            _logger.error("Create %s reported failure: %s", object_name, payload)
            raise ApiError(r.status_code, created.errors or payload, url=url)

        _logger.info("Created %s %s", object_name, created.id)
        return created.id

    # --------------------------- Internal helpers --------------------

    def _url(self, path: str) -> str:
        return f"{self.cfg.base_url}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        if not self.access_token:
            raise MissingCredentialsError(["SF_ACCESS_TOKEN"])
        return {"Authorization": self.access_token}

    def _request(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        data: Any = None,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Send one request; the response body is fully read and closed."""
        if timeout is None:
            timeout = self.cfg.timeout
        try:
            r = self.session.request(
                method,
                url,
                headers=headers,
                data=data,
                timeout=timeout,
            )
        except requests.RequestException as e:
            _logger.error("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

        _logger.debug("%s %s -> HTTP %s", method, url, r.status_code)
        r.close()
        return r

    @staticmethod
    def _decode(r: requests.Response, url: str) -> Any:
        try:
            return r.json()
        except ValueError as e:
            if not _is_success(r):
                raise ApiError(r.status_code, r.text, url=url) from e
            raise DecodeError(
                f"Malformed JSON from {url}: {e}",
                status_code=r.status_code,
                body=r.text,
            ) from e

    @staticmethod
    def _api_error(r: requests.Response, url: str) -> ApiError:
        try:
            detail = r.json()
        except ValueError:
            detail = r.text
        _logger.error("HTTP %s error for %s: %s", r.status_code, url, detail)
        return ApiError(r.status_code, detail, url=url)


def _is_success(r: requests.Response) -> bool:
    return 200 <= r.status_code < 300
