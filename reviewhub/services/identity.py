"""Identity provider client.

Resolves a bearer access token to the provider's user record via
`GET {auth_url}/auth/v1/user`. The provider owns sign-up, passwords and OTP;
this service only needs the user id behind a token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from reviewhub.settings import get_settings

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class IdentityUser:
    """Parsed user returned by the identity provider."""

    id: str
    email: str | None = None
    email_confirmed: bool = False


class IdentityError(RuntimeError):
    pass


def parse_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def _parse_user(data: dict[str, Any]) -> IdentityUser:
    user_id = data.get("id")
    if not user_id or not isinstance(user_id, str):
        raise IdentityError("Identity response missing user id")
    return IdentityUser(
        id=user_id,
        email=data.get("email"),
        email_confirmed=bool(data.get("email_confirmed_at") or data.get("confirmed_at")),
    )


class IdentityClient:
    """Client for the hosted identity provider's user endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.auth_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.auth_anon_key
        self.timeout = timeout or settings.auth_timeout_seconds
        self._http_client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def get_user(self, token: str) -> IdentityUser | None:
        """Look up the user behind an access token.

        Returns:
            IdentityUser, or None when the provider rejects the token.

        Raises:
            IdentityError: Provider unreachable or returned an unexpected response.
        """
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key

        try:
            response = await client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            raise IdentityError(f"Identity provider unreachable: {e}") from e

        if response.status_code in (401, 403):
            return None
        if response.status_code >= 400:
            raise IdentityError(f"Identity provider returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise IdentityError("Identity provider returned invalid JSON") from e
        if not isinstance(data, dict):
            raise IdentityError("Identity provider returned unexpected payload")
        return _parse_user(data)


# Shared client (initialized on startup)
_identity_client: IdentityClient | None = None


def init_identity_client() -> IdentityClient:
    global _identity_client
    _identity_client = IdentityClient()
    return _identity_client


def get_identity_client() -> IdentityClient:
    """Get the shared client, creating it lazily outside the app lifespan."""
    global _identity_client
    if _identity_client is None:
        _identity_client = IdentityClient()
    return _identity_client


async def close_identity_client() -> None:
    global _identity_client
    if _identity_client:
        await _identity_client.close()
        _identity_client = None
