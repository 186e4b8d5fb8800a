# main.py

"""Entry point for the campuskart client (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging

logger = logging.getLogger("campuskart.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="campuskart",
        description="Campus peer-to-peer marketplace client.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO logs to stderr.",
    )
    sub = parser.add_subparsers(dest="command")

    list_cmd = sub.add_parser("list", help="List marketplace items.")
    list_cmd.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    list_cmd.add_argument(
        "--available",
        action="store_true",
        default=False,
        help="Hide sold items.",
    )

    show_cmd = sub.add_parser("show", help="Show one item.")
    show_cmd.add_argument("product_id")
    show_cmd.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
    )

    sold_cmd = sub.add_parser(
        "mark-sold", help="Mark one of your items as sold."
    )
    sold_cmd.add_argument("product_id")

    contact_cmd = sub.add_parser(
        "contact", help="Message the seller of an item."
    )
    contact_cmd.add_argument("product_id")
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import CampusKartApp

    try:
        app = CampusKartApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("campuskart TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run one headless command and exit."""
    from src.cli import runner

    if args.command == "list":
        coro = runner.cli_list(
            args.output_format, include_sold=not args.available
        )
    elif args.command == "show":
        coro = runner.cli_show(args.product_id, args.output_format)
    elif args.command == "mark-sold":
        coro = runner.cli_mark_sold(args.product_id)
    else:
        coro = runner.cli_contact(args.product_id)

    sys.exit(asyncio.run(coro))


def main() -> None:
    """Route to TUI (no command) or a headless command."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(
        logging.INFO if args.verbose else logging.WARNING
    )
    logger.info("campuskart starting, log file: %s", log_file)

    if args.command is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
