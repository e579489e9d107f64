# main.py

"""Entry point for SIMS (TUI or headless CLI)."""

import argparse
import logging
import sys

from src.config.locales import SUPPORTED_LOCALES
from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("sims.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="sims",
        description="Simple Inventory Management System.",
        epilog="Run without a command to launch the interactive TUI.",
    )
    parser.add_argument(
        "--db",
        default=None,
        dest="db_path",
        help=f"SQLite database path (default: {Settings.DB_PATH}).",
    )
    parser.add_argument(
        "-u", "--user", default=None,
        help="Username (default: $SIMS_USER).",
    )
    parser.add_argument(
        "-p", "--password", default=None,
        help="Password (default: $SIMS_PASSWORD).",
    )

    sub = parser.add_subparsers(dest="command")

    signup = sub.add_parser("signup", help="Register a new account.")
    signup.add_argument("username")
    signup.add_argument("new_password", metavar="password")

    listing = sub.add_parser("list", help="List products.")
    listing.add_argument(
        "-s", "--search", default="", help="Filter by name or category.",
    )
    listing.add_argument(
        "-f", "--format",
        choices=["table", "json"],
        default="table",
        dest="output_format",
    )

    sub.add_parser("stats", help="Show totals and category breakdown.")

    add = sub.add_parser("add", help="Add a product.")
    add.add_argument("--name", required=True)
    add.add_argument("--category", required=True)
    add.add_argument("--quantity", required=True)
    add.add_argument("--price", required=True)
    add.add_argument(
        "--threshold",
        default=str(Settings.DEFAULT_LOW_STOCK_THRESHOLD),
        dest="low_stock_threshold",
    )

    edit = sub.add_parser("edit", help="Edit a product.")
    edit.add_argument("product_id")
    edit.add_argument("--name")
    edit.add_argument("--category")
    edit.add_argument("--quantity")
    edit.add_argument("--price")
    edit.add_argument("--threshold", dest="low_stock_threshold")

    delete = sub.add_parser("delete", help="Delete a product.")
    delete.add_argument("product_id")
    delete.add_argument(
        "-y", "--yes", action="store_true", help="Confirm the deletion.",
    )

    export = sub.add_parser("export", help="Export a CSV/XLSX report.")
    export.add_argument(
        "-r", "--report", choices=["full", "low-stock"], default="full",
    )
    export.add_argument(
        "-l", "--locale",
        choices=list(SUPPORTED_LOCALES),
        default=Settings.DEFAULT_LOCALE,
    )
    export.add_argument(
        "-f", "--format",
        choices=["csv", "xlsx"],
        default="csv",
        dest="output_format",
    )
    export.add_argument(
        "-o", "--output", default=None, dest="output_dir",
        help="Custom output directory (default: exports/).",
    )

    charts = sub.add_parser("charts", help="Write the HTML chart dashboard.")
    charts.add_argument(
        "-l", "--locale",
        choices=list(SUPPORTED_LOCALES),
        default=Settings.DEFAULT_LOCALE,
    )
    charts.add_argument(
        "--open", action="store_true", dest="open_browser",
        help="Open the dashboard in a browser.",
    )

    audit = sub.add_parser("audit", help="Show the change log (admin).")
    audit.add_argument(
        "-n", "--limit", type=int, default=Settings.AUDIT_LOG_LIMIT,
    )

    set_role = sub.add_parser("set-role", help="Change a user's role (admin).")
    set_role.add_argument("username")
    set_role.add_argument("role", choices=["admin", "user", "viewer"])

    return parser


def _run_tui(db_path: str | None) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import InventoryApp

    try:
        app = InventoryApp(db_path=db_path)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("SIMS TUI shutting down")


def _product_fields(args: argparse.Namespace) -> dict[str, object]:
    """Collect product flags from a parsed ``add``/``edit`` command."""
    return {
        "name": args.name,
        "category": args.category,
        "quantity": args.quantity,
        "price": args.price,
        "low_stock_threshold": args.low_stock_threshold,
    }


def _run_cli(args: argparse.Namespace) -> int:
    """Dispatch a headless command and return its exit code."""
    from src.cli import runner

    if args.command == "signup":
        return runner.cmd_signup(args.db_path, args.username, args.new_password)

    commands = {
        "list": lambda s: runner.cmd_list(s, args.search, args.output_format),
        "stats": runner.cmd_stats,
        "add": lambda s: runner.cmd_add(s, _product_fields(args)),
        "edit": lambda s: runner.cmd_edit(
            s, args.product_id, _product_fields(args),
        ),
        "delete": lambda s: runner.cmd_delete(s, args.product_id, args.yes),
        "export": lambda s: runner.cmd_export(
            s, args.report, args.locale, args.output_format, args.output_dir,
        ),
        "charts": lambda s: runner.cmd_charts(
            s, args.locale, args.open_browser,
        ),
        "audit": lambda s: runner.cmd_audit(s, args.limit),
        "set-role": lambda s: runner.cmd_set_role(s, args.username, args.role),
    }
    return runner.run_command(
        commands[args.command], args.db_path, args.user, args.password,
    )


def main() -> None:
    """Route to TUI (no command) or a headless CLI command."""
    parser = _build_parser()
    args = parser.parse_args()

    # The TUI owns the terminal: file logging only
    log_file = setup_logging(console=args.command is not None)
    logger.info("SIMS starting, log file: %s", log_file)

    if args.command is None:
        _run_tui(args.db_path)
    else:
        sys.exit(_run_cli(args))


if __name__ == "__main__":
    main()
