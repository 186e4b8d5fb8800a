# src/services/status_transition.py

"""Seller-only ``available -> sold`` transition for a single listing."""

import logging

from src.api.client import ApiError, MarketplaceClient
from src.models.product import Product, ProductStatus
from src.services.errors import (
    AlreadyTerminal,
    InvalidPayload,
    RemoteError,
    TransitionPending,
    Unauthorized,
)

logger = logging.getLogger("campuskart.transitions")


class StatusTransitionService:
    """Marks listings sold through the remote API.

    The seller and status checks are a fast path for the UI only; the
    server re-checks both. At most one transition per product id may be
    in flight; a second request is rejected before any I/O.
    """

    def __init__(self, client: MarketplaceClient) -> None:
        self.client = client
        self._in_flight: set[str] = set()

    def is_pending(self, product_id: str) -> bool:
        return product_id in self._in_flight

    async def mark_sold(
        self, product: Product, acting_user_id: str,
    ) -> Product:
        """Mark *product* sold on behalf of *acting_user_id*.

        Returns the server's updated entity.

        Raises:
            Unauthorized: the actor is not the seller (local or remote).
            AlreadyTerminal: the listing is already sold (local or 409).
            TransitionPending: a transition for this id is outstanding.
            RemoteError: transport, server or payload failure.
        """
        if product.status.is_terminal:
            raise AlreadyTerminal()
        if not product.is_seller(acting_user_id):
            logger.info(
                "User %s may not mark product %s sold (seller %s)",
                acting_user_id,
                product.id,
                product.seller_id,
            )
            raise Unauthorized()
        if product.id in self._in_flight:
            logger.info(
                "Rejected duplicate transition for product %s", product.id
            )
            raise TransitionPending()

        self._in_flight.add(product.id)
        try:
            payload = await self.client.update_status(
                product.id, ProductStatus.SOLD.value
            )
        except ApiError as exc:
            raise self._map_api_error(product.id, exc) from exc
        finally:
            self._in_flight.discard(product.id)

        try:
            updated = Product.from_payload(payload)
        except InvalidPayload as exc:
            logger.error(
                "Bad status response for product %s: %s", product.id, exc
            )
            raise RemoteError(str(exc)) from exc

        logger.info(
            "Product %s marked %s", updated.id, updated.status.value
        )
        return updated

    @staticmethod
    def _map_api_error(product_id: str, exc: ApiError) -> Exception:
        if exc.status_code in (401, 403):
            logger.warning(
                "Server refused transition for product %s: %s",
                product_id,
                exc.detail,
            )
            return Unauthorized(exc.detail)
        if exc.status_code == 409:
            return AlreadyTerminal(exc.detail)
        logger.error(
            "Transition for product %s failed: %s", product_id, exc
        )
        return RemoteError(str(exc))
