# src/services/marketplace.py

"""Wires the session guard, API client and view controller together."""

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from src.api.client import ApiError, MarketplaceClient
from src.auth.session_guard import SessionGuard
from src.auth.supabase_provider import SupabaseAuthProvider
from src.models.product import Product
from src.models.session import Session, SessionStore
from src.services.contact_flow import ContactInitiationFlow
from src.services.errors import (
    InvalidListing,
    InvalidPayload,
    RemoteError,
    VerificationRequired,
)
from src.services.status_transition import StatusTransitionService
from src.services.view_sync import ActiveView, ViewSyncController
from src.storage.listing_cache import ListingCache

logger = logging.getLogger("campuskart.marketplace")


@dataclass
class ListingResult:
    """Rows for one render of the listing view."""

    refresh_token: int
    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    from_cache: bool = False
    invalid_count: int = 0


def hydrate_products(
    payloads: list[dict[str, Any]],
) -> tuple[list[Product], int]:
    """Convert API payloads to products, dropping malformed ones.

    Returns the valid products and the number dropped.
    """
    products: list[Product] = []
    invalid = 0
    for payload in payloads:
        try:
            products.append(Product.from_payload(payload))
        except InvalidPayload as exc:
            invalid += 1
            logger.warning("Dropping malformed listing: %s", exc)
    return products, invalid


class MarketplaceOrchestrator:
    """Entry point used by both the TUI and the headless CLI."""

    def __init__(
        self,
        provider: Any | None = None,
        client: MarketplaceClient | None = None,
        session_store: SessionStore | None = None,
    ) -> None:
        self.session_store = session_store or SessionStore()
        self.provider = provider or SupabaseAuthProvider()
        self.guard = SessionGuard(self.provider, self.session_store)
        self.client = client or MarketplaceClient(self.session_store)
        self.controller = ViewSyncController()
        self.transitions = StatusTransitionService(self.client)
        self.contact = ContactInitiationFlow(
            self.client, self.controller, self.guard
        )
        self.listing_cache = ListingCache()

    # ── Session ──────────────────────────────────────────

    async def start(self) -> Session | None:
        """Resolve the session once at startup."""
        return await self.guard.resolve_session()

    async def sign_in(self, email: str, password: str) -> Session:
        """Run the explicit sign-in flow and land on the listing view."""
        auth = await self.provider.sign_in(email, password)
        session = self.guard.accept(auth)
        self.controller.reset()
        return session

    def logout(self) -> None:
        self.guard.logout()
        self.listing_cache.clear()
        self.controller.reset()

    # ── Listing & detail ─────────────────────────────────

    async def load_listings(self) -> ListingResult:
        """Rows for the listing view, refetched whenever the token moved."""
        self.guard.require()
        token = self.controller.refresh_token
        cached = self.listing_cache.get(token)
        if cached is not None:
            return ListingResult(
                refresh_token=token, products=cached, from_cache=True
            )

        try:
            payloads = await self.client.list_products()
        except ApiError as exc:
            logger.error("Listing fetch failed: %s", exc)
            raise RemoteError(str(exc)) from exc

        products, invalid = hydrate_products(payloads)
        # A mutation may have landed while the fetch was in flight
        if not self.controller.is_stale(token):
            self.listing_cache.store(token, products)
        logger.info(
            "Fetched %d listings (token %d, %d invalid)",
            len(products),
            token,
            invalid,
        )
        return ListingResult(
            refresh_token=token, products=products, invalid_count=invalid
        )

    def select_product(self, product: Product) -> None:
        self.controller.select_product(product)

    def close_product(self) -> None:
        self.controller.clear_selection()

    async def open_product(self, product_id: str) -> Product:
        """Fetch the current copy of a listing and focus it.

        Used for links that may point at an outdated local copy.
        """
        self.guard.require()
        try:
            payload = await self.client.get_product(product_id)
        except ApiError as exc:
            raise RemoteError(str(exc)) from exc
        try:
            product = Product.from_payload(payload)
        except InvalidPayload as exc:
            raise RemoteError(str(exc)) from exc
        self.controller.select_product(product)
        return product

    # ── Mutations ────────────────────────────────────────

    async def mark_sold(self, product: Product) -> Product:
        """Mark *product* sold as the signed-in user.

        On success the focused copy is patched and listings are
        invalidated. On any failure nothing local changes.
        """
        session = self.guard.require()
        updated = await self.transitions.mark_sold(product, session.user_id)
        self.controller.apply_updated_product(updated)
        return updated

    def contact_seller(self, product: Product) -> asyncio.Task[bool]:
        return self.contact.initiate_contact(product)

    async def create_product(self, fields: dict[str, Any]) -> Product:
        """List a new item, then send the user back to a fresh listing."""
        self.guard.require()
        if not self.controller.state.user_verified:
            raise VerificationRequired()

        payload = _listing_payload(fields)
        try:
            body = await self.client.create_product(payload)
        except ApiError as exc:
            logger.error("Create listing failed: %s", exc)
            raise RemoteError(str(exc)) from exc
        try:
            product = Product.from_payload(body)
        except InvalidPayload as exc:
            raise RemoteError(str(exc)) from exc

        logger.info("Listed product %s '%s'", product.id, product.title)
        self.controller.bump_refresh()
        self.controller.set_view(ActiveView.PRODUCTS)
        return product

    # ── Profile & messages ───────────────────────────────

    async def load_profile(self) -> dict[str, Any]:
        """Fetch the profile and record its verification flag."""
        self.guard.require()
        try:
            profile = await self.client.get_profile()
        except ApiError as exc:
            raise RemoteError(str(exc)) from exc
        self.controller.set_user_verified(bool(profile.get("verified")))
        return profile

    async def load_messages(self) -> list[dict[str, Any]]:
        self.guard.require()
        try:
            return await self.client.list_messages()
        except ApiError as exc:
            raise RemoteError(str(exc)) from exc

    async def close(self) -> None:
        await self.client.close()
        close = getattr(self.provider, "close", None)
        if close is not None:
            await close()


def _listing_payload(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate upload form fields and build the POST body."""
    title = str(fields.get("title") or "").strip()
    condition = str(fields.get("condition") or "").strip()
    if not title or not condition:
        raise InvalidListing()
    try:
        price = Decimal(str(fields.get("price", "")).strip())
    except InvalidOperation as exc:
        raise InvalidListing(
            f"Invalid price: {fields.get('price')!r}"
        ) from exc
    if not price.is_finite() or price < 0:
        raise InvalidListing(f"Invalid price: {fields.get('price')!r}")

    payload: dict[str, Any] = {
        "title": title,
        "price": float(price),
        "condition": condition,
    }
    description = str(fields.get("description") or "").strip()
    if description:
        payload["description"] = description
    image_url = str(fields.get("image_url") or "").strip()
    if image_url:
        payload["imageUrl"] = image_url
    return payload
