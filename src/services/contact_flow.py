# src/services/contact_flow.py

"""Opens a buyer-to-seller conversation from the detail view."""

import asyncio
import logging
from collections.abc import Callable

from src.api.client import MarketplaceClient
from src.auth.session_guard import SessionGuard
from src.config.settings import Settings
from src.models.product import Product
from src.services.view_sync import ActiveView, ViewSyncController

logger = logging.getLogger("campuskart.contact")


def default_message(product: Product) -> str:
    """Deterministic opening line referencing the listing title."""
    return Settings.CONTACT_MESSAGE_TEMPLATE.format(title=product.title)


class ContactInitiationFlow:
    """Switch to the messages view, then send one opening message.

    The view switch happens before any I/O and is never reverted. A
    failed send is logged and reported once through ``on_failure``;
    the user retries manually from the messages view.
    """

    def __init__(
        self,
        client: MarketplaceClient,
        controller: ViewSyncController,
        guard: SessionGuard,
        on_failure: Callable[[Exception], None] | None = None,
    ) -> None:
        self.client = client
        self.controller = controller
        self.guard = guard
        self.on_failure = on_failure
        self._tasks: set[asyncio.Task[bool]] = set()

    def initiate_contact(
        self,
        product: Product,
        compose_message: Callable[[Product], str] = default_message,
    ) -> asyncio.Task[bool]:
        """Start contacting *product*'s seller.

        Must be called from a running event loop. Returns the send task,
        which resolves to ``True`` once the message was accepted.
        """
        self.guard.require()
        self.controller.set_view(ActiveView.MESSAGES)

        body = compose_message(product)
        task = asyncio.get_running_loop().create_task(
            self._send(product, body)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send(self, product: Product, body: str) -> bool:
        try:
            await self.client.send_message(
                product_id=product.id,
                receiver_id=product.seller_id,
                message=body,
            )
        except Exception as exc:
            logger.error(
                "Failed to contact seller %s about product %s: %s",
                product.seller_id,
                product.id,
                exc,
                exc_info=True,
            )
            if self.on_failure is not None:
                self.on_failure(exc)
            return False

        logger.info(
            "Opened conversation with seller %s about product %s",
            product.seller_id,
            product.id,
        )
        return True
