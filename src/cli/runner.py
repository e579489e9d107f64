# src/cli/runner.py

"""Headless CLI commands built on the same inventory service as the TUI."""

import json
import logging
import os
import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.account import Role
from src.models.errors import InventoryError, PermissionDeniedError
from src.models.product import Product, StockStatus
from src.services.audit import action_counts, change_summary
from src.services.inventory_service import InventoryService
from src.services.metrics import stock_status
from src.services.session import SessionManager
from src.storage.account_store import AccountStore
from src.storage.chart_exporter import export_dashboard
from src.storage.export_formatter import ExportFormat, ReportType
from src.storage.file_manager import FileManager
from src.storage.inventory_db import InventoryDB

logger = logging.getLogger("sims.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

_STATUS_STYLES: dict[StockStatus, str] = {
    StockStatus.IN_STOCK: "[green]In Stock[/green]",
    StockStatus.LOW_STOCK: "[yellow]Low Stock[/yellow]",
    StockStatus.OUT_OF_STOCK: "[red]Out of Stock[/red]",
}

_REPORT_TYPES: dict[str, ReportType] = {
    "full": ReportType.FULL,
    "low-stock": ReportType.LOW_STOCK_ONLY,
}


@contextmanager
def open_service(
    db_path: str | None = None,
) -> Iterator[InventoryService]:
    """Open the stores and yield a service; closes everything afterwards."""
    path = Path(db_path) if db_path else Settings.DB_PATH
    accounts = AccountStore(path)
    store = InventoryDB(path)
    service = InventoryService(store, SessionManager(accounts))
    try:
        yield service
    finally:
        service.close()
        store.close()
        accounts.close()


def resolve_credentials(
    user: str | None, password: str | None,
) -> tuple[str, str]:
    """Credentials from flags, falling back to SIMS_USER / SIMS_PASSWORD."""
    return (
        user or os.getenv("SIMS_USER", ""),
        password or os.getenv("SIMS_PASSWORD", ""),
    )


def run_command(
    action: Callable[[InventoryService], int],
    db_path: str | None,
    user: str | None,
    password: str | None,
    sign_in: bool = True,
) -> int:
    """Run *action* inside a signed-in service, reporting errors on stderr."""
    try:
        with open_service(db_path) as service:
            if sign_in:
                username, secret = resolve_credentials(user, password)
                service.sessions.sign_in(username, secret)
                service.refresh()
            return action(service)
    except InventoryError as exc:
        logger.warning("Command failed: %s", exc)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1


# ── Rendering ────────────────────────────────────────────


def _print_products(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Product Inventory",
        show_lines=False,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", overflow="fold")
    table.add_column("Name", max_width=40)
    table.add_column("Category", style="magenta")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Threshold", justify="right")
    table.add_column("Status", justify="center")

    for p in products:
        table.add_row(
            p.id[:8],
            p.name,
            p.category,
            str(p.quantity),
            f"${p.price:,.2f}",
            str(p.low_stock_threshold),
            _STATUS_STYLES[stock_status(p)],
        )

    Console().print(table)


# ── Commands ─────────────────────────────────────────────


def cmd_signup(db_path: str | None, user: str, password: str) -> int:
    """Register an account; the first one becomes an administrator."""

    def action(service: InventoryService) -> int:
        account = service.sessions.sign_up(user, password)
        _err.print(
            f"[green]✓ Account {account.username} created "
            f"(role: {account.role})[/green]"
        )
        return 0

    return run_command(action, db_path, None, None, sign_in=False)


def cmd_list(
    service: InventoryService, query: str, output_format: str,
) -> int:
    """Print (optionally filtered) products as a table or JSON."""
    products = service.search(query)
    if output_format == "json":
        json.dump(
            [p.to_dict() for p in products],
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
        return 0

    if not products:
        message = (
            f'No products found for "{query}"' if query else "No products yet"
        )
        _err.print(f"[yellow]{message}[/yellow]")
        return 0
    _print_products(products)
    return 0


def cmd_stats(service: InventoryService) -> int:
    """Print dashboard totals, category breakdown and low stock alerts."""
    m = service.metrics
    summary = Table(title="Inventory Summary", title_style="bold cyan")
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("Total products", str(m.total_products))
    summary.add_row("Total units", str(m.total_units))
    summary.add_row("Total value", f"${m.total_value_display:,}")
    summary.add_row("Low stock", str(len(m.low_stock_items)))
    summary.add_row("Out of stock", str(len(m.out_of_stock_items)))
    Console().print(summary)

    if m.category_counts:
        breakdown = Table(title="Categories", title_style="bold cyan")
        breakdown.add_column("Category")
        breakdown.add_column("Items", justify="right")
        breakdown.add_column("Units", justify="right")
        breakdown.add_column("Value", justify="right", style="green")
        for category, count in m.category_counts.items():
            breakdown.add_row(
                category,
                str(count),
                str(m.category_quantity[category]),
                f"${m.category_value[category]:,}",
            )
        Console().print(breakdown)

    alerts = m.attention_items[: Settings.LOW_STOCK_ALERT_LIMIT]
    if alerts:
        _err.print(
            f"[yellow]⚠ {len(m.attention_items)} products running low[/yellow]"
        )
        for p in alerts:
            _err.print(f"  {p.name} ({p.category}): {p.quantity}")
    return 0


def cmd_add(service: InventoryService, raw: dict[str, object]) -> int:
    """Add one product from CLI fields."""
    product = service.add_product(raw)
    _err.print(f"[green]✓ Added {product.name} ({product.id})[/green]")
    return 0


def _resolve_id(service: InventoryService, prefix: str) -> str:
    """Accept a full id or an unambiguous prefix as shown by ``list``."""
    matches = [p.id for p in service.products if p.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    return prefix


def cmd_edit(
    service: InventoryService, product_id: str, raw: dict[str, object],
) -> int:
    """Replace a product's fields; unspecified fields keep their value."""
    full_id = _resolve_id(service, product_id)
    current = service.find(full_id)
    merged: dict[str, object] = asdict(current.fields()) if current else {}
    merged.update({k: v for k, v in raw.items() if v is not None})
    service.edit_product(full_id, merged)
    _err.print(f"[green]✓ Updated {full_id}[/green]")
    return 0


def cmd_delete(
    service: InventoryService, product_id: str, confirmed: bool,
) -> int:
    """Delete a product; refuses without explicit confirmation."""
    if not confirmed:
        _err.print("[yellow]Pass --yes to confirm deletion.[/yellow]")
        return 1
    full_id = _resolve_id(service, product_id)
    service.delete_product(full_id)
    _err.print(f"[green]✓ Deleted {full_id}[/green]")
    return 0


def cmd_export(
    service: InventoryService,
    report: str,
    locale: str,
    output_format: str,
    output_dir: str | None,
) -> int:
    """Write a CSV or XLSX report into the exports directory."""
    payload = service.export(
        _REPORT_TYPES[report], locale, ExportFormat(output_format),
    )
    manager = FileManager(Path(output_dir) if output_dir else None)
    path = manager.save_export(payload)
    _err.print(
        f"[green]✓ {payload.row_count} products exported → {path}[/green]"
    )
    return 0


def cmd_charts(service: InventoryService, locale: str, open_browser: bool) -> int:
    """Write the Plotly dashboard HTML."""
    path = export_dashboard(
        service.metrics, locale, open_browser=open_browser,
    )
    if path is None:
        _err.print("[yellow]No products to chart.[/yellow]")
        return 1
    _err.print(f"[green]✓ Dashboard saved → {path}[/green]")
    return 0


def cmd_audit(service: InventoryService, limit: int) -> int:
    """Print the most recent audit entries."""
    entries = service.audit_log(limit)
    counts = action_counts(entries)
    _err.print(
        f"[bold]{len(entries)} entries[/bold]  "
        f"[green]{counts['create']} created[/green]  "
        f"[yellow]{counts['update']} updated[/yellow]  "
        f"[red]{counts['delete']} deleted[/red]"
    )
    table = Table(title="Change Log", title_style="bold cyan")
    table.add_column("Date", no_wrap=True)
    table.add_column("Action")
    table.add_column("User", style="dim")
    table.add_column("Changes", overflow="fold")
    for entry in entries:
        table.add_row(
            entry.created_at.strftime("%d %b %Y, %H:%M"),
            entry.action,
            entry.user_email or "-",
            change_summary(entry),
        )
    Console().print(table)
    return 0


def cmd_set_role(
    service: InventoryService, username: str, role: str,
) -> int:
    """Change another account's role (administrators only)."""
    session = service.sessions.require()
    if session.role is not Role.ADMIN:
        raise PermissionDeniedError("Only administrators can change roles")
    account = service.sessions.accounts.set_role(username, Role(role))
    _err.print(f"[green]✓ {account.username} is now {account.role}[/green]")
    return 0
