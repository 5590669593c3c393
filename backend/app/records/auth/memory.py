from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict
from uuid import uuid4

from app.records.auth.base import AuthClient
from app.records.models import AuthSession, AuthUser, SignInResult


@dataclass
class MemoryAuth(AuthClient):
    """Password accounts kept in memory. Backs the demo backend and the API tests."""

    accounts: Dict[str, str] = field(default_factory=dict)
    tokens: Dict[str, AuthUser] = field(default_factory=dict)

    def add_account(self, email: str, password: str) -> None:
        self.accounts[email.strip().lower()] = password

    async def sign_in(self, email: str, password: str) -> SignInResult:
        key = email.strip().lower()
        if self.accounts.get(key) != password:
            return SignInResult(error="Invalid login credentials")
        user = AuthUser(id=str(uuid4()), email=key)
        token = uuid4().hex
        self.tokens[token] = user
        return SignInResult(user=user, session=AuthSession(access_token=token, expires_in=3600))

    async def get_user(self, access_token: str | None) -> AuthUser | None:
        if not access_token:
            return None
        return self.tokens.get(access_token)

    async def sign_out(self, access_token: str | None) -> str | None:
        if access_token:
            self.tokens.pop(access_token, None)
        return None
