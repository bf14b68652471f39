"""Outbound request and signed envelope types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .signing import canonical_json, generate_signature


def sparse_fields(**fields: Any) -> dict[str, Any]:
    """Keep only arguments that were actually given.

    ``None`` and empty strings are dropped so they never reach the wire.
    """
    return {k: v for k, v in fields.items() if v is not None and v != ""}


def build_url(base_url: str, *segments: str) -> str:
    return "/".join([base_url.rstrip("/"), *segments])


@dataclass(frozen=True, slots=True)
class Request:
    """A single API call before dispatch."""

    method: str
    segments: tuple[str, ...]
    fields: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def public(cls, *path: str) -> "Request":
        return cls("GET", ("pubapi", *path))

    @classmethod
    def private(cls, *path: str, fields: Mapping[str, Any] | None = None) -> "Request":
        return cls("POST", ("api", *path), dict(fields or {}))

    def url(self, base_url: str) -> str:
        return build_url(base_url, *self.segments)

    def sign(self, secret: str, nonce: int) -> "SignedEnvelope":
        """Add the nonce, serialize and sign the body."""
        body = canonical_json({**self.fields, "nonce": nonce})
        return SignedEnvelope(
            request=self,
            nonce=nonce,
            body=body,
            signature=generate_signature(secret, body),
        )


@dataclass(frozen=True, slots=True)
class SignedEnvelope:
    """A private request with its nonce, exact body and signature."""

    request: Request
    nonce: int
    body: str
    signature: str = field(repr=False)

    def headers(self, auth_key: str) -> dict[str, str]:
        return {
            "key": auth_key,
            "sign": self.signature,
            "Content-Type": "application/json",
        }
