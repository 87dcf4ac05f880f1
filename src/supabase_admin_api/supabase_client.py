"""
Supabase admin REST client.

Talks to the auth-admin (GoTrue) and PostgREST RPC endpoints with the
service-role key. Sessions are never persisted or refreshed: every request
carries the key as both `apikey` and bearer token.
"""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

import aiohttp

from .errors import (
    InvalidResponseError,
    ServiceTimeoutError,
    ServiceUnavailableError,
    error_from_status,
)

_LINK_RE = re.compile(r'<[^>]*[?&]page=(\d+)[^>]*>;\s*rel="(\w+)"')


@dataclass(frozen=True)
class UserPage:
    users: list[dict[str, Any]] = field(default_factory=list)
    total: int = 0
    next_page: int | None = None
    last_page: int | None = None


def _parse_links(header: str | None) -> dict[str, int]:
    if not header:
        return {}
    return {rel: int(page) for page, rel in _LINK_RE.findall(header)}


def _error_message(body: Any, fallback: str) -> tuple[str, str | None]:
    if not isinstance(body, dict):
        return (str(body) if body else fallback), None
    message = (
        body.get("msg")
        or body.get("message")
        or body.get("error_description")
        or body.get("error")
        or fallback
    )
    code = body.get("error_code") or body.get("code")
    return str(message), (str(code) if code is not None else None)


class SupabaseAdmin:
    def __init__(
        self,
        *,
        url: str,
        service_role_key: str,
        timeout: float = 30.0,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = url.rstrip("/")
        self._key = service_role_key
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> SupabaseAdmin:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._key,
            "Authorization": f"Bearer {self._key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
            self._owns_session = True
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
    ) -> tuple[Any, Mapping[str, str]]:
        url = f"{self.base_url}{path}"
        data = json.dumps(body) if body is not None else None
        try:
            async with self._get_session().request(
                method,
                url,
                params=dict(params) if params else None,
                data=data,
                headers=self._headers(),
            ) as r:
                text = await r.text()
                headers = r.headers
                status = r.status
        except asyncio.TimeoutError as exc:
            raise ServiceTimeoutError(timeout=self.timeout, cause=exc) from exc
        except aiohttp.ClientError as exc:
            raise ServiceUnavailableError(f"Cannot reach Supabase at {self.base_url}: {exc}", cause=exc) from exc

        try:
            payload = json.loads(text) if text else None
        except json.JSONDecodeError as exc:
            if status >= 400:
                payload = text
            else:
                raise InvalidResponseError(
                    f"Undecodable response from {path}", http_status=status, body=text, cause=exc
                ) from exc

        if status >= 400:
            message, code = _error_message(payload, fallback=f"HTTP {status}")
            raise error_from_status(status, message, error_code=code, body=payload)
        return payload, headers

    async def list_users(self, *, page: int | None = None, per_page: int | None = None) -> UserPage:
        params: dict[str, str] = {}
        if page is not None:
            params["page"] = str(page)
        if per_page is not None:
            params["per_page"] = str(per_page)

        payload, headers = await self._request("GET", "/auth/v1/admin/users", params=params)
        if not isinstance(payload, dict) or not isinstance(payload.get("users"), list):
            raise InvalidResponseError("admin/users response has no users list", body=payload)

        users = payload["users"]
        try:
            total = int(headers.get("X-Total-Count", len(users)))
        except (TypeError, ValueError):
            total = len(users)
        links = _parse_links(headers.get("Link"))
        return UserPage(
            users=users,
            total=total,
            next_page=links.get("next"),
            last_page=links.get("last"),
        )

    async def create_user(
        self,
        *,
        email: Any,
        password: Any,
        user_metadata: Any = None,
        email_confirm: bool = True,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"email_confirm": email_confirm}
        if email is not None:
            body["email"] = email
        if password is not None:
            body["password"] = password
        if user_metadata is not None:
            body["user_metadata"] = user_metadata

        payload, _ = await self._request("POST", "/auth/v1/admin/users", body=body)
        if not isinstance(payload, dict):
            raise InvalidResponseError("admin/users create returned non-object", body=payload)
        # Older GoTrue releases wrap the record as {"user": {...}}
        if isinstance(payload.get("user"), dict) and "id" not in payload:
            return payload["user"]
        return payload

    async def rpc(self, fn: str, params: dict[str, Any] | None = None) -> Any:
        payload, _ = await self._request("POST", f"/rest/v1/rpc/{fn}", body=params or {})
        return payload
