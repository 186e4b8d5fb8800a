# src/api/client.py

"""Async client for the marketplace REST API."""

import asyncio
import logging
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.session import SessionStore
from src.services.errors import Unauthenticated


class ApiError(Exception):
    """Non-2xx response or transport failure from the remote API.

    ``status_code`` is ``None`` when no response was received at all.
    """

    def __init__(self, status_code: int | None, detail: str) -> None:
        super().__init__(
            f"HTTP {status_code}: {detail}" if status_code else detail
        )
        self.status_code = status_code
        self.detail = detail


def _error_detail(resp: Any) -> str:
    """Pull a readable message out of an error response."""
    try:
        body = resp.json()
    except Exception:
        return str(resp.text)[:200]
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if body.get(key):
                return str(body[key])
    return str(body)[:200]


class MarketplaceClient:
    """Thin JSON wrapper over the marketplace endpoints.

    Every call is authorised with the bearer token held in the shared
    :class:`SessionStore`. Only idempotent GETs are retried; mutations
    are sent exactly once and their failures are surfaced unchanged.
    """

    def __init__(
        self,
        session_store: SessionStore,
        base_url: str | None = None,
    ) -> None:
        self.logger = logging.getLogger("campuskart.api")
        self.settings = Settings()
        self.session_store = session_store
        self.base_url = (base_url or self.settings.API_BASE_URL).rstrip("/")
        self.session = curl_requests.AsyncSession(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT
        self._retry_backoff: float = 0.5

    def _headers(self) -> dict[str, str]:
        session = self.session_store.current
        if session is None:
            raise Unauthenticated()
        return {
            **self.settings.DEFAULT_HEADERS,
            "Authorization": f"Bearer {session.token}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        retry: bool = False,
    ) -> Any:
        """Send one request (several for retried GETs) and decode JSON."""
        url = f"{self.base_url}{path}"
        headers = self._headers()
        attempts = self.settings.MAX_RETRIES if retry else 1
        last_error = ApiError(None, "no attempt made")

        for attempt in range(attempts):
            try:
                resp = await self.session.request(
                    method,
                    url,
                    headers=headers,
                    json=payload,
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                self.logger.warning(
                    "%s %s failed on attempt %d: %s",
                    method,
                    path,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                last_error = ApiError(None, str(exc))
                if attempt + 1 < attempts:
                    await asyncio.sleep(self._retry_backoff * (attempt + 1))
                continue

            if 200 <= resp.status_code < 300:
                self.logger.debug(
                    "%s %s -> %d", method, path, resp.status_code
                )
                if not resp.content:
                    return None
                try:
                    return resp.json()
                except ValueError as exc:
                    # Gateways sometimes answer 2xx with an HTML page
                    self.logger.error(
                        "%s %s -> %d with non-JSON body: %s",
                        method,
                        path,
                        resp.status_code,
                        exc,
                    )
                    raise ApiError(
                        resp.status_code, "invalid JSON body"
                    ) from exc

            last_error = ApiError(resp.status_code, _error_detail(resp))
            self.logger.warning(
                "%s %s -> HTTP %d on attempt %d",
                method,
                path,
                resp.status_code,
                attempt + 1,
            )
            if resp.status_code < 500 or attempt + 1 == attempts:
                break
            await asyncio.sleep(self._retry_backoff * (attempt + 1))

        raise last_error

    # ── Products ─────────────────────────────────────────

    async def list_products(self) -> list[dict[str, Any]]:
        """GET /products."""
        body = await self._request("GET", "/products", retry=True)
        if isinstance(body, dict):
            body = body.get("products", [])
        return list(body or [])

    async def get_product(self, product_id: str) -> dict[str, Any]:
        """GET /products/{id}."""
        body: dict[str, Any] = await self._request(
            "GET", f"/products/{product_id}", retry=True
        )
        return body

    async def create_product(
        self, fields: dict[str, Any],
    ) -> dict[str, Any]:
        """POST /products."""
        body: dict[str, Any] = await self._request(
            "POST", "/products", payload=fields
        )
        return body

    async def update_status(
        self, product_id: str, status: str,
    ) -> dict[str, Any]:
        """PATCH /products/{id}/status with only the status field."""
        body: dict[str, Any] = await self._request(
            "PATCH",
            f"/products/{product_id}/status",
            payload={"status": status},
        )
        return body

    # ── Messages & profile ───────────────────────────────

    async def send_message(
        self, product_id: str, receiver_id: str, message: str,
    ) -> None:
        """POST /messages/send. The response body is ignored."""
        await self._request(
            "POST",
            "/messages/send",
            payload={
                "productId": product_id,
                "receiverId": receiver_id,
                "message": message,
            },
        )

    async def list_messages(self) -> list[dict[str, Any]]:
        """GET /messages."""
        body = await self._request("GET", "/messages", retry=True)
        if isinstance(body, dict):
            body = body.get("messages", [])
        return list(body or [])

    async def get_profile(self) -> dict[str, Any]:
        """GET /profile."""
        body: dict[str, Any] = await self._request(
            "GET", "/profile", retry=True
        )
        return body or {}

    async def close(self) -> None:
        await self.session.close()
