"""Bearer-token verification for the API routes.

Identity is owned by an external provider; the service only needs a uid for
each request.  Anything that implements :class:`TokenVerifier` can be plugged
into the app factory.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Mapping
from typing import Protocol

from fastapi import Request

from ...core.config import Settings

__all__ = [
    "AllowAllVerifier",
    "AuthError",
    "StaticTokenVerifier",
    "TokenVerifier",
    "bearer_token",
    "verifier_from_settings",
]

logger = logging.getLogger(__name__)

ANONYMOUS_UID = "anonymous"


class AuthError(Exception):
    """Raised when a request cannot be tied to a user."""


class TokenVerifier(Protocol):
    def verify(self, token: str | None) -> str: ...


class StaticTokenVerifier:
    """Accept a fixed set of tokens, each mapped to a uid."""

    def __init__(self, tokens: Mapping[str, str]) -> None:
        self._tokens = dict(tokens)

    def verify(self, token: str | None) -> str:
        if not token:
            raise AuthError("Missing Authorization Bearer token")
        for known, uid in self._tokens.items():
            if secrets.compare_digest(known, token):
                return uid
        raise AuthError("Invalid token")


class AllowAllVerifier:
    def verify(self, token: str | None) -> str:
        return ANONYMOUS_UID


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer ") :].strip() or None
    return None


def verifier_from_settings(settings: Settings) -> TokenVerifier:
    if settings.auth_disabled:
        logger.warning("Authentication disabled; all requests run as %r", ANONYMOUS_UID)
        return AllowAllVerifier()
    if not settings.api_tokens:
        logger.warning("No API tokens configured; every authenticated request will be rejected")
    return StaticTokenVerifier(settings.api_tokens)
