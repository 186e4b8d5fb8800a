# src/ui/screens.py

"""Modal screens: product detail and sign-in."""

import logging

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from src.auth.supabase_provider import AuthProviderError
from src.models.product import Product
from src.services.marketplace import MarketplaceOrchestrator

logger = logging.getLogger("campuskart.ui")


def format_price(product: Product) -> str:
    return f"${product.price:,.2f}"


class ProductDetailScreen(ModalScreen[None]):
    """Detail view for the focused product.

    The seller of an available item sees "Mark as Sold"; everyone else
    sees "Contact Seller", disabled once the item is sold.
    """

    BINDINGS = [Binding("escape", "close", "Close")]

    class MarkSoldRequested(Message):
        def __init__(self, product: Product) -> None:
            super().__init__()
            self.product = product

    class ContactRequested(Message):
        def __init__(self, product: Product) -> None:
            super().__init__()
            self.product = product

    def __init__(self, product: Product, user_id: str | None) -> None:
        super().__init__()
        self.product = product
        self.user_id = user_id

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(id="detail_title"),
            Static(id="detail_price"),
            Static(id="detail_status"),
            Static(id="detail_description"),
            Static(id="detail_meta"),
            Button("✅ Mark as Sold", variant="success", id="mark_sold_btn"),
            Button("✉️ Contact Seller", variant="primary", id="contact_btn"),
            Button("Close", id="close_btn"),
            id="detail_dialog",
        )

    def on_mount(self) -> None:
        self.show_product(self.product)

    def show_product(self, product: Product) -> None:
        """Render *product*, e.g. after a status change was applied."""
        self.product = product
        sold = not product.is_available

        self.query_one("#detail_title", Static).update(product.title)
        self.query_one("#detail_price", Static).update(format_price(product))
        self.query_one("#detail_status", Static).update(
            "[b white on red] SOLD [/]" if sold
            else "[b white on green] AVAILABLE [/]"
        )
        self.query_one("#detail_description", Static).update(
            product.description or "No description provided."
        )
        listed = product.created_at.astimezone().strftime("%x")
        self.query_one("#detail_meta", Static).update(
            f"Condition: {product.condition}\n"
            f"Listed on: {listed}\n"
            f"Seller: {product.seller_name}"
        )

        mark_sold = self.query_one("#mark_sold_btn", Button)
        contact = self.query_one("#contact_btn", Button)
        seller_view = product.is_seller(self.user_id) and not sold
        mark_sold.display = seller_view
        mark_sold.disabled = False
        contact.display = not seller_view
        contact.disabled = sold
        contact.label = "SOLD" if sold else "✉️ Contact Seller"

    def release_mark_sold(self) -> None:
        """Re-enable the button after a failed attempt."""
        self.query_one("#mark_sold_btn", Button).disabled = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "mark_sold_btn":
            event.button.disabled = True
            self.post_message(self.MarkSoldRequested(self.product))
        elif event.button.id == "contact_btn":
            self.post_message(self.ContactRequested(self.product))
        elif event.button.id == "close_btn":
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)


class SignInScreen(ModalScreen[bool]):
    """Shown when no session could be resolved at startup."""

    BINDINGS = [Binding("escape", "app.quit", "Quit")]

    def __init__(self, orchestrator: MarketplaceOrchestrator) -> None:
        super().__init__()
        self.orchestrator = orchestrator

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("🛒 Sign in to CampusKart", id="sign_in_title"),
            Input(placeholder="Email", id="email_input"),
            Input(placeholder="Password", password=True, id="password_input"),
            Button("Sign in", variant="primary", id="sign_in_btn"),
            id="sign_in_dialog",
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "sign_in_btn":
            await self._sign_in()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "password_input":
            await self._sign_in()

    async def _sign_in(self) -> None:
        email = self.query_one("#email_input", Input).value.strip()
        password = self.query_one("#password_input", Input).value
        if not email or not password:
            self.notify("Enter your email and password", severity="warning")
            return
        try:
            await self.orchestrator.sign_in(email, password)
        except AuthProviderError as exc:
            logger.warning("Sign-in failed: %s", exc)
            self.notify(f"Sign-in failed: {exc}", severity="error")
            return
        self.dismiss(True)
