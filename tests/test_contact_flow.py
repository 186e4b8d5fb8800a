# tests/test_contact_flow.py

"""Tests for ContactInitiationFlow."""

import unittest
from unittest.mock import AsyncMock, MagicMock

from src.api.client import ApiError
from src.auth.session_guard import SessionGuard
from src.models.session import Session, SessionStore
from src.services.contact_flow import ContactInitiationFlow, default_message
from src.services.errors import Unauthenticated
from src.services.view_sync import ActiveView, ViewSyncController
from tests.helpers import BUYER_ID, SELLER_ID, make_client, make_product


def _signed_in_guard() -> SessionGuard:
    store = SessionStore()
    store.set(Session(user_id=BUYER_ID, token="t"))
    return SessionGuard(MagicMock(), store)


class TestDefaultMessage(unittest.TestCase):
    """Template-generated opening line."""

    def test_references_title(self) -> None:
        self.assertEqual(
            default_message(make_product(title="Bike")),
            "Hi! I'm interested in your Bike",
        )

    def test_is_deterministic(self) -> None:
        product = make_product()
        self.assertEqual(default_message(product), default_message(product))


class TestInitiateContact(unittest.IsolatedAsyncioTestCase):
    """View switch first, then one fire-and-forget send."""

    async def test_switches_view_before_sending(self) -> None:
        client = make_client()
        controller = ViewSyncController()
        flow = ContactInitiationFlow(client, controller, _signed_in_guard())

        task = flow.initiate_contact(make_product())

        self.assertIs(controller.state.active_view, ActiveView.MESSAGES)
        client.send_message.assert_not_awaited()
        self.assertTrue(await task)

    async def test_sends_one_message_to_seller(self) -> None:
        client = make_client()
        flow = ContactInitiationFlow(
            client, ViewSyncController(), _signed_in_guard()
        )
        await flow.initiate_contact(make_product())

        client.send_message.assert_awaited_once_with(
            product_id="p1",
            receiver_id=SELLER_ID,
            message="Hi! I'm interested in your Bike",
        )

    async def test_custom_composer(self) -> None:
        client = make_client()
        flow = ContactInitiationFlow(
            client, ViewSyncController(), _signed_in_guard()
        )
        await flow.initiate_contact(
            make_product(), lambda p: f"Is {p.title} still around?"
        )
        self.assertEqual(
            client.send_message.await_args.kwargs["message"],
            "Is Bike still around?",
        )

    async def test_failure_keeps_view_and_reports_once(self) -> None:
        client = make_client()
        client.send_message = AsyncMock(side_effect=ApiError(500, "down"))
        controller = ViewSyncController()
        failures: list[Exception] = []
        flow = ContactInitiationFlow(
            client, controller, _signed_in_guard(), on_failure=failures.append
        )

        with self.assertLogs("campuskart.contact", level="ERROR"):
            sent = await flow.initiate_contact(make_product())

        self.assertFalse(sent)
        self.assertEqual(len(failures), 1)
        self.assertIs(controller.state.active_view, ActiveView.MESSAGES)
        client.send_message.assert_awaited_once()

    async def test_does_not_touch_status_or_token(self) -> None:
        controller = ViewSyncController()
        product = make_product()
        controller.select_product(product)
        flow = ContactInitiationFlow(
            make_client(), controller, _signed_in_guard()
        )
        await flow.initiate_contact(product)
        self.assertEqual(controller.refresh_token, 0)
        self.assertIs(controller.state.selected_product, product)
        self.assertTrue(product.is_available)

    async def test_requires_session(self) -> None:
        client = make_client()
        controller = ViewSyncController()
        guard = SessionGuard(MagicMock(), SessionStore())
        flow = ContactInitiationFlow(client, controller, guard)

        with self.assertRaises(Unauthenticated):
            flow.initiate_contact(make_product())
        self.assertIs(controller.state.active_view, ActiveView.PRODUCTS)
        client.send_message.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
