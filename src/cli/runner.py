# src/cli/runner.py

"""Headless CLI commands that reuse the marketplace orchestrator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.models.product import Product
from src.services.errors import MarketplaceError
from src.services.marketplace import MarketplaceOrchestrator

logger = logging.getLogger("campuskart.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of listings to stdout."""
    table = Table(
        title="CampusKart Listings",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("ID", style="dim")
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Condition")
    table.add_column("Seller", style="magenta")
    table.add_column("Status", justify="center")

    for idx, p in enumerate(products, 1):
        status = (
            "[green]AVAILABLE[/green]" if p.is_available
            else "[red]SOLD[/red]"
        )
        table.add_row(
            str(idx),
            p.id,
            p.title[:50],
            f"${p.price:,.2f}",
            p.condition,
            p.seller_name,
            status,
        )

    Console().print(table)


def _emit(products: list[Product], output_format: str) -> None:
    if output_format == "table":
        _print_table(products)
        return
    json.dump(
        [p.to_dict() for p in products],
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    sys.stdout.write("\n")


async def _authenticated(orchestrator: MarketplaceOrchestrator) -> bool:
    session = await orchestrator.start()
    if session is None:
        _err.print(
            "[red]Not signed in.[/red] "
            "[dim]Set CAMPUSKART_ACCESS_TOKEN or sign in from the TUI.[/dim]"
        )
        return False
    return True


async def cli_list(
    output_format: str,
    include_sold: bool = True,
    orchestrator: MarketplaceOrchestrator | None = None,
) -> int:
    """List products and return an exit code (0=ok, 1=fail)."""
    orchestrator = orchestrator or MarketplaceOrchestrator()
    try:
        if not await _authenticated(orchestrator):
            return 1
        result = await orchestrator.load_listings()
    except MarketplaceError as exc:
        logger.error("List failed: %s", exc)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    finally:
        await orchestrator.close()

    products = result.products
    if not include_sold:
        products = [p for p in products if p.is_available]
    if result.invalid_count:
        _err.print(
            f"[yellow]{result.invalid_count} malformed listings skipped[/yellow]"
        )
    _err.print(f"[green]✓ {len(products)} listings[/green]")
    _emit(products, output_format)
    return 0


async def cli_show(
    product_id: str,
    output_format: str,
    orchestrator: MarketplaceOrchestrator | None = None,
) -> int:
    """Fetch one listing by id."""
    orchestrator = orchestrator or MarketplaceOrchestrator()
    try:
        if not await _authenticated(orchestrator):
            return 1
        product = await orchestrator.open_product(product_id)
    except MarketplaceError as exc:
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    finally:
        await orchestrator.close()

    _emit([product], output_format)
    return 0


async def cli_mark_sold(
    product_id: str,
    orchestrator: MarketplaceOrchestrator | None = None,
) -> int:
    """Mark one of the signed-in user's listings as sold."""
    orchestrator = orchestrator or MarketplaceOrchestrator()
    try:
        if not await _authenticated(orchestrator):
            return 1
        product = await orchestrator.open_product(product_id)
        updated = await orchestrator.mark_sold(product)
    except MarketplaceError as exc:
        logger.warning("mark-sold %s failed: %s", product_id, exc)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    finally:
        await orchestrator.close()

    _err.print(
        f'[green]✓ Product "{updated.title}" marked as SOLD![/green]'
    )
    return 0


async def cli_contact(
    product_id: str,
    orchestrator: MarketplaceOrchestrator | None = None,
) -> int:
    """Send the opening message for a listing to its seller."""
    orchestrator = orchestrator or MarketplaceOrchestrator()
    try:
        if not await _authenticated(orchestrator):
            return 1
        product = await orchestrator.open_product(product_id)
        if not product.is_available:
            _err.print("[yellow]This item has already been sold.[/yellow]")
            return 1
        sent = await orchestrator.contact_seller(product)
    except MarketplaceError as exc:
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    finally:
        await orchestrator.close()

    if not sent:
        _err.print("[red]Could not send the message.[/red]")
        return 1
    _err.print(
        f"[green]✓ Message sent to {product.seller_name}[/green]"
    )
    return 0
