from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Any

from fastapi import Request


@dataclass(frozen=True)
class AuthResult:
    ok: bool
    principal: str | None = None
    bypass: bool = False
    reason: str | None = None
    status_code: int = 401


class AuthAdapter:
    async def authenticate(self, *, request: Request) -> AuthResult:
        raise NotImplementedError


class StaticKeyAuthAdapter(AuthAdapter):
    """Admits requests presenting the configured admin key."""

    def __init__(self, *, api_key: str) -> None:
        if not api_key:
            raise ValueError("api_key must be non-empty")
        self._api_key = api_key.encode("utf-8")

    async def authenticate(self, *, request: Request) -> AuthResult:
        presented = _extract_bearer_token(request) or _extract_admin_key(request)
        if not presented:
            return AuthResult(ok=False, reason="missing_credentials", status_code=401)
        if not hmac.compare_digest(presented.encode("utf-8"), self._api_key):
            return AuthResult(ok=False, reason="invalid_credentials", status_code=401)
        return AuthResult(ok=True, principal="admin")


class BypassAuthAdapter(AuthAdapter):
    async def authenticate(self, *, request: Request) -> AuthResult:
        _ = request
        return AuthResult(ok=True, principal="dev", bypass=True)


class UnconfiguredAuthAdapter(AuthAdapter):
    async def authenticate(self, *, request: Request) -> AuthResult:
        _ = request
        return AuthResult(ok=False, reason="auth_not_configured", status_code=401)


def build_auth_adapter(settings: Any) -> AuthAdapter:
    if settings.admin_api_key:
        return StaticKeyAuthAdapter(api_key=str(settings.admin_api_key))
    if settings.admin_auth_bypass:
        return BypassAuthAdapter()
    return UnconfiguredAuthAdapter()


def _extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def _extract_admin_key(request: Request) -> str | None:
    value = request.headers.get("x-admin-key")
    if not value:
        return None
    return value.strip() or None
