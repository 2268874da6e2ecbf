"""Typed views of the JSON bodies returned by Salesforce."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List


@dataclass
class TokenResponse:
    """Body of ``/services/oauth2/token``.

    A successful response fills the token fields; a failed one only
    carries ``error`` (and usually ``error_description``).
    """

    access_token: str = ""
    token_type: str = ""
    instance_url: str = ""
    id: str = ""
    scope: str = ""
    issued_at: str = ""
    signature: str = ""

    error: str = ""
    error_description: str = ""

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> TokenResponse:
        known = {f.name for f in fields(cls)}
        return cls(**{k: str(v) for k, v in payload.items() if k in known and v is not None})

    @property
    def credential(self) -> str:
        """Value for the ``Authorization`` header, e.g. ``"Bearer 00D..."``."""
        return f"{self.token_type} {self.access_token}"


@dataclass
class CreateResponse:
    """Body of ``POST /sobjects/{object}/``."""

    id: str = ""
    success: bool = False
    errors: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> CreateResponse:
        return cls(
            id=payload.get("id") or "",
            success=bool(payload.get("success", False)),
            errors=list(payload.get("errors") or []),
        )
