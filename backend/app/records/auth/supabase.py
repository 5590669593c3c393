from __future__ import annotations

import logging
from typing import Any, Dict

import httpx

from app.records.auth.base import AuthClient
from app.records.models import AuthSession, AuthUser, SignInResult

logger = logging.getLogger("ems_viewer.auth.supabase")


def _error_message(resp: httpx.Response) -> str:
    # GoTrue has used several error shapes over time.
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for k in ("error_description", "msg", "message", "error"):
            v = data.get(k)
            if isinstance(v, str) and v:
                return v
    return f"Auth error {resp.status_code}"


def _user_from(data: Dict[str, Any]) -> AuthUser | None:
    uid = data.get("id")
    if not isinstance(uid, str) or not uid:
        return None
    email = data.get("email")
    return AuthUser(id=uid, email=email if isinstance(email, str) else None)


class SupabaseAuth(AuthClient):
    def __init__(
        self,
        *,
        url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.transport = transport

    def _headers(self, access_token: str | None = None) -> Dict[str, str]:
        headers = {"apikey": self.anon_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def sign_in(self, email: str, password: str) -> SignInResult:
        url = f"{self.url}/auth/v1/token"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(
                    url,
                    params={"grant_type": "password"},
                    headers=self._headers(),
                    json={"email": email, "password": password},
                )
        except httpx.HTTPError as e:
            logger.warning("sign-in request failed: %s", e)
            return SignInResult(error=str(e) or e.__class__.__name__)

        if resp.status_code != 200:
            return SignInResult(error=_error_message(resp))

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            return SignInResult(error="Malformed auth response")

        user = _user_from(data.get("user") or {})
        token = data.get("access_token")
        session = None
        if isinstance(token, str) and token:
            session = AuthSession(
                access_token=token,
                refresh_token=data.get("refresh_token"),
                expires_in=data.get("expires_in"),
            )
        return SignInResult(user=user, session=session)

    async def get_user(self, access_token: str | None) -> AuthUser | None:
        if not access_token:
            return None
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.get(f"{self.url}/auth/v1/user", headers=self._headers(access_token))
            if resp.status_code != 200:
                return None
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("user lookup failed: %s", e)
            return None
        return _user_from(data) if isinstance(data, dict) else None

    async def sign_out(self, access_token: str | None) -> str | None:
        if not access_token:
            return None
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(f"{self.url}/auth/v1/logout", headers=self._headers(access_token))
        except httpx.HTTPError as e:
            logger.warning("sign-out request failed: %s", e)
            return str(e) or e.__class__.__name__
        if resp.status_code >= 400:
            return _error_message(resp)
        return None
