# src/ui/app.py

"""Terminal UI for the CampusKart marketplace client."""

import logging
from typing import Any, cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import (
    Button,
    ContentSwitcher,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.config.settings import Settings
from src.models.product import Product
from src.services.errors import MarketplaceError, VerificationRequired
from src.services.marketplace import MarketplaceOrchestrator
from src.services.view_sync import ActiveView, StateChange
from src.ui.screens import ProductDetailScreen, SignInScreen, format_price

logger = logging.getLogger("campuskart.ui")


class CampusKartApp(App[object]):
    """Terminal UI for the CampusKart marketplace client."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("b", "show_view('products')", "Browse"),
        Binding("m", "show_view('messages')", "Messages"),
        Binding("p", "show_view('profile')", "Profile"),
        Binding("u", "show_view('upload')", "Sell"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(
        self, orchestrator: MarketplaceOrchestrator | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.orchestrator = orchestrator or MarketplaceOrchestrator()
        self.products: list[Product] = []
        self.messages: list[dict[str, Any]] = []
        self.rendered_token: int | None = None

    def _main(self, selector: str, expect_type: type[Any]) -> Any:
        """Query the base screen, even while a modal is on top."""
        return self.screen_stack[0].query_one(selector, expect_type)

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        nav_buttons = [
            Button(view["label"], id=f"nav_{view['id']}")
            for view in self.settings.VIEWS
        ]

        yield Header()
        yield Container(
            Static("🛒 CampusKart", id="title"),
            Horizontal(*nav_buttons, id="nav_bar"),
            ContentSwitcher(
                Vertical(
                    Static("Loading listings...", id="status"),
                    cast(
                        DataTable[str | Text],
                        DataTable(
                            id="products_table",
                            zebra_stripes=True,
                            cursor_type="row",
                        ),
                    ),
                    id="products",
                ),
                Vertical(
                    cast(
                        DataTable[str | Text],
                        DataTable(id="messages_table", zebra_stripes=True),
                    ),
                    id="messages",
                ),
                Vertical(
                    Static("", id="profile_info"),
                    Button("Log out", variant="error", id="logout_btn"),
                    id="profile",
                ),
                Vertical(
                    Input(placeholder="Title", id="title_input"),
                    Input(placeholder="Price", id="price_input"),
                    Input(placeholder="Condition", id="condition_input"),
                    Input(placeholder="Description", id="description_input"),
                    Input(placeholder="Image URL", id="image_input"),
                    Button("List item", variant="primary", id="upload_btn"),
                    id="upload",
                ),
                initial=ActiveView.PRODUCTS.value,
                id="views",
            ),
            id="main_container",
        )
        yield Footer()

    async def on_mount(self) -> None:
        """Wire the controller, resolve the session, load listings."""
        products_table = cast(
            DataTable[str | Text],
            self._main("#products_table", DataTable),
        )
        products_table.add_columns(
            "Title", "Price", "Condition", "Seller", "Status"
        )
        messages_table = cast(
            DataTable[str | Text],
            self._main("#messages_table", DataTable),
        )
        messages_table.add_columns("From", "Product", "Message", "Sent")

        self.orchestrator.controller.subscribe(self._on_state_change)
        self.orchestrator.contact.on_failure = self._on_contact_failed

        session = await self.orchestrator.start()
        if session is None:
            self.push_screen(
                SignInScreen(self.orchestrator), callback=self._on_signed_in
            )
        else:
            self.run_worker(self.refresh_listings(), group="listings")

    # ── Controller → views ───────────────────────────────

    def _on_state_change(self, change: StateChange) -> None:
        state = change.state
        view = state.active_view
        self._main("#views", ContentSwitcher).current = view.value

        if change.kind == "select" and state.selected_product is not None:
            session = self.orchestrator.session_store.current
            self.push_screen(
                ProductDetailScreen(
                    state.selected_product,
                    session.user_id if session else None,
                ),
                callback=self._on_detail_closed,
            )
        elif change.kind == "product_updated":
            screen = self.screen
            if (
                isinstance(screen, ProductDetailScreen)
                and state.selected_product is not None
                and screen.product.id == state.selected_product.id
            ):
                screen.show_product(state.selected_product)

        if not self.orchestrator.guard.is_authenticated:
            # Signed out: the sign-in screen reloads on success
            return
        if view is ActiveView.PRODUCTS and self.orchestrator.controller.is_stale(
            self.rendered_token
        ):
            self.run_worker(
                self.refresh_listings(), group="listings", exclusive=True
            )
        elif change.kind == "view" and view is ActiveView.MESSAGES:
            self.run_worker(self.refresh_messages(), group="messages")
        elif change.kind == "view" and view is ActiveView.PROFILE:
            self.run_worker(self.refresh_profile(), group="profile")

    def _on_detail_closed(self, _result: None) -> None:
        self.orchestrator.close_product()

    def _on_signed_in(self, signed_in: bool | None) -> None:
        if signed_in:
            self.run_worker(self.refresh_listings(), group="listings")

    def _on_contact_failed(self, exc: Exception) -> None:
        self.notify(
            "Could not start the conversation. Try again from Messages.",
            severity="error",
        )

    # ── Listing view ─────────────────────────────────────

    async def refresh_listings(self) -> None:
        """Refetch listings if the refresh token moved since last render."""
        status = self._main("#status", Static)
        try:
            result = await self.orchestrator.load_listings()
        except MarketplaceError as exc:
            logger.error("Listing refresh failed: %s", exc)
            status.update("❌ Could not load listings")
            self.notify(str(exc), severity="error")
            return

        self.products = result.products
        self.rendered_token = result.refresh_token
        self.populate_table()
        if not self.products:
            status.update("No items listed yet")
        else:
            available = sum(1 for p in self.products if p.is_available)
            status.update(
                f"✅ {len(self.products)} listings ({available} available)"
            )

    def populate_table(self) -> None:
        """Fill the listing table; sold rows are dimmed."""
        table = cast(
            DataTable[str | Text],
            self._main("#products_table", DataTable),
        )
        table.clear()
        for p in self.products:
            style = "" if p.is_available else "dim"
            table.add_row(
                Text(p.title[:60], style=style),
                Text(format_price(p), style=style),
                Text(p.condition, style=style),
                Text(p.seller_name, style=style),
                Text("AVAILABLE", style="green")
                if p.is_available
                else Text("SOLD", style="bold red"),
                key=p.id,
            )

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the selected listing in the detail view."""
        if event.data_table.id != "products_table":
            return
        if 0 <= event.cursor_row < len(self.products):
            self.orchestrator.select_product(
                self.products[event.cursor_row]
            )

    # ── Detail view actions ──────────────────────────────

    def on_product_detail_screen_mark_sold_requested(
        self, message: ProductDetailScreen.MarkSoldRequested
    ) -> None:
        self.run_worker(self._mark_sold(message.product))

    async def _mark_sold(self, product: Product) -> None:
        try:
            updated = await self.orchestrator.mark_sold(product)
        except MarketplaceError as exc:
            self.notify(str(exc), severity="error")
            screen = self.screen
            if isinstance(screen, ProductDetailScreen):
                screen.release_mark_sold()
            return
        self.notify(f'Product "{updated.title}" marked as SOLD!')

    def on_product_detail_screen_contact_requested(
        self, message: ProductDetailScreen.ContactRequested
    ) -> None:
        if isinstance(self.screen, ProductDetailScreen):
            self.screen.dismiss(None)
        try:
            task = self.orchestrator.contact_seller(message.product)
        except MarketplaceError as exc:
            self.notify(str(exc), severity="error")
            return
        self.run_worker(self._after_contact(task), group="messages")

    async def _after_contact(self, task: Any) -> None:
        if await task:
            await self.refresh_messages()

    # ── Messages & profile ───────────────────────────────

    async def refresh_messages(self) -> None:
        try:
            self.messages = await self.orchestrator.load_messages()
        except MarketplaceError as exc:
            self.notify(str(exc), severity="error")
            return
        table = cast(
            DataTable[str | Text],
            self._main("#messages_table", DataTable),
        )
        table.clear()
        for msg in self.messages:
            table.add_row(
                str(msg.get("senderName") or msg.get("senderId") or ""),
                str(msg.get("productTitle") or msg.get("productId") or ""),
                str(msg.get("message") or "")[:80],
                str(msg.get("createdAt") or ""),
            )

    async def refresh_profile(self) -> None:
        info = self._main("#profile_info", Static)
        try:
            profile = await self.orchestrator.load_profile()
        except MarketplaceError as exc:
            self.notify(str(exc), severity="error")
            return
        verified = "✅ verified" if profile.get("verified") else "not verified"
        info.update(
            f"{profile.get('name') or profile.get('email') or 'You'}\n"
            f"Status: {verified}"
        )

    # ── Buttons & actions ────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("nav_"):
            self.action_show_view(button_id.removeprefix("nav_"))
        elif button_id == "upload_btn":
            await self.submit_listing()
        elif button_id == "logout_btn":
            self.action_logout()

    async def submit_listing(self) -> None:
        fields = {
            "title": self._main("#title_input", Input).value,
            "price": self._main("#price_input", Input).value,
            "condition": self._main("#condition_input", Input).value,
            "description": self._main("#description_input", Input).value,
            "image_url": self._main("#image_input", Input).value,
        }
        try:
            product = await self.orchestrator.create_product(fields)
        except VerificationRequired as exc:
            self.notify(str(exc), severity="warning")
            return
        except MarketplaceError as exc:
            self.notify(str(exc), severity="error")
            return
        for input_id in (
            "#title_input",
            "#price_input",
            "#condition_input",
            "#description_input",
            "#image_input",
        ):
            self._main(input_id, Input).value = ""
        self.notify(f'Listed "{product.title}"')

    def action_show_view(self, view_id: str) -> None:
        self.orchestrator.controller.set_view(ActiveView(view_id))

    def action_refresh(self) -> None:
        """Force a refetch of the listing view."""
        self.orchestrator.controller.bump_refresh()

    def action_logout(self) -> None:
        self.orchestrator.logout()
        self.products = []
        self.rendered_token = None
        self.populate_table()
        self.push_screen(
            SignInScreen(self.orchestrator), callback=self._on_signed_in
        )
