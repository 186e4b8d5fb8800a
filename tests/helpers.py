# tests/helpers.py

"""Factories and fakes shared by the test modules."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from src.auth.supabase_provider import AuthSession
from src.models.product import Product
from src.services.marketplace import MarketplaceOrchestrator

SELLER_ID = "seller-1"
BUYER_ID = "buyer-1"


def product_payload(**overrides: Any) -> dict[str, Any]:
    """Camel-case product body as the API returns it."""
    payload: dict[str, Any] = {
        "id": "p1",
        "title": "Bike",
        "description": "Blue road bike",
        "price": 120,
        "condition": "Used",
        "imageUrl": None,
        "sellerId": SELLER_ID,
        "sellerName": "Sam",
        "sellerEmail": "sam@campus.edu",
        "createdAt": "2026-10-01T12:00:00+00:00",
        "status": "available",
    }
    payload.update(overrides)
    return payload


def make_product(**overrides: Any) -> Product:
    return Product.from_payload(product_payload(**overrides))


def make_client(
    products: list[dict[str, Any]] | None = None,
) -> MagicMock:
    """Stand-in for MarketplaceClient with awaitable endpoints."""
    client = MagicMock()
    client.list_products = AsyncMock(return_value=list(products or []))
    client.get_product = AsyncMock(return_value=product_payload())
    client.create_product = AsyncMock(return_value=product_payload())
    client.update_status = AsyncMock(
        return_value=product_payload(status="sold")
    )
    client.send_message = AsyncMock(return_value=None)
    client.list_messages = AsyncMock(return_value=[])
    client.get_profile = AsyncMock(return_value={"verified": True})
    client.close = AsyncMock(return_value=None)
    return client


def make_provider(user_id: str | None = SELLER_ID) -> MagicMock:
    """Auth provider resolving to *user_id* (or no session)."""
    provider = MagicMock()
    session = (
        AuthSession(access_token="token-abc", user_id=user_id)
        if user_id is not None
        else None
    )
    provider.get_session = AsyncMock(return_value=session)
    provider.sign_in = AsyncMock(
        return_value=AuthSession(
            access_token="token-new", user_id=user_id or BUYER_ID
        )
    )
    provider.close = AsyncMock(return_value=None)
    return provider


def make_orchestrator(
    user_id: str | None = SELLER_ID,
    products: list[dict[str, Any]] | None = None,
) -> MarketplaceOrchestrator:
    return MarketplaceOrchestrator(
        provider=make_provider(user_id),
        client=make_client(products),
    )
