# src/auth/supabase_provider.py

"""Supabase (GoTrue) auth adapter used to bootstrap the client session."""

import logging
from dataclasses import dataclass
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings

logger = logging.getLogger("campuskart.auth")


@dataclass(frozen=True)
class AuthSession:
    """What the auth provider hands back for a signed-in user."""

    access_token: str
    user_id: str


class AuthProviderError(Exception):
    """The auth provider could not be reached or rejected the request."""


class SupabaseAuthProvider:
    """Resolve and create sessions against a GoTrue-compatible endpoint."""

    def __init__(
        self,
        supabase_url: str | None = None,
        anon_key: str | None = None,
        access_token: str | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (
            supabase_url or self.settings.SUPABASE_URL
        ).rstrip("/")
        self.anon_key = (
            anon_key if anon_key is not None
            else self.settings.SUPABASE_ANON_KEY
        )
        self.access_token = (
            access_token if access_token is not None
            else self.settings.ACCESS_TOKEN
        )
        self.session = curl_requests.AsyncSession(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _headers(self, token: str | None = None) -> dict[str, str]:
        headers = {
            **self.settings.DEFAULT_HEADERS,
            "apikey": self.anon_key,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def get_session(self) -> AuthSession | None:
        """Return the stored session if its token is still valid.

        Returns ``None`` when no token is configured or the provider
        rejects it.

        Raises:
            AuthProviderError: on transport failure or an unexpected
                response.
        """
        if not self.access_token:
            logger.info("No stored access token; session absent")
            return None

        try:
            resp = await self.session.get(
                f"{self.base_url}/auth/v1/user",
                headers=self._headers(self.access_token),
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            raise AuthProviderError(str(exc)) from exc

        if resp.status_code in (401, 403):
            logger.info(
                "Stored access token rejected (HTTP %d)", resp.status_code
            )
            return None
        if resp.status_code != 200:
            raise AuthProviderError(
                f"auth provider returned HTTP {resp.status_code}"
            )

        user: dict[str, Any] = resp.json()
        if not user.get("id"):
            raise AuthProviderError("auth provider returned no user id")
        return AuthSession(
            access_token=self.access_token, user_id=str(user["id"])
        )

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange email and password for a fresh session."""
        try:
            resp = await self.session.post(
                f"{self.base_url}/auth/v1/token?grant_type=password",
                headers=self._headers(),
                json={"email": email, "password": password},
                timeout=self.settings.REQUEST_TIMEOUT,
            )
        except Exception as exc:
            raise AuthProviderError(str(exc)) from exc

        if resp.status_code != 200:
            raise AuthProviderError(
                f"sign-in failed (HTTP {resp.status_code})"
            )
        body: dict[str, Any] = resp.json()
        user = body.get("user") or {}
        if not body.get("access_token") or not user.get("id"):
            raise AuthProviderError("sign-in response missing session")

        self.access_token = str(body["access_token"])
        logger.info("Signed in as user %s", user["id"])
        return AuthSession(
            access_token=self.access_token, user_id=str(user["id"])
        )

    async def close(self) -> None:
        await self.session.close()
