from __future__ import annotations

from app.records.models import AuthUser, SignInResult


class AuthClient:
    async def sign_in(self, email: str, password: str) -> SignInResult:  # pragma: no cover
        raise NotImplementedError

    async def get_user(self, access_token: str | None) -> AuthUser | None:  # pragma: no cover
        raise NotImplementedError

    async def sign_out(self, access_token: str | None) -> str | None:  # pragma: no cover
        """Returns an error message, or None on success."""
        raise NotImplementedError
