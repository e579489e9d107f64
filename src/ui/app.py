# src/ui/app.py

"""Terminal UI for the SIMS inventory manager."""

import asyncio
import logging
from pathlib import Path
from typing import Any, cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Static,
)

from src.config.locales import status_label, ui_text
from src.config.settings import Settings
from src.models.audit_entry import AuditEntry
from src.models.errors import InventoryError
from src.models.product import Product, StockStatus
from src.services.audit import action_counts, action_label, change_summary
from src.services.inventory_service import InventoryService
from src.services.metrics import stock_status
from src.services.session import Session, SessionManager
from src.storage.account_store import AccountStore
from src.storage.chart_exporter import export_dashboard
from src.storage.export_formatter import ExportFormat, ReportType
from src.storage.file_manager import FileManager
from src.storage.inventory_db import InventoryDB

logger = logging.getLogger("sims.ui")

_STATUS_STYLES: dict[StockStatus, str] = {
    StockStatus.IN_STOCK: "green",
    StockStatus.LOW_STOCK: "yellow",
    StockStatus.OUT_OF_STOCK: "bold red",
}

_FORM_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "Product name"),
    ("category", "Category"),
    ("quantity", "Quantity"),
    ("price", "Price ($)"),
    ("low_stock_threshold", "Low stock threshold"),
)

# Actions gated by a session capability
_GATED_ACTIONS: dict[str, str] = {
    "add_product": "can_modify",
    "edit_product": "can_modify",
    "delete_product": "can_modify",
    "export": "can_export",
    "audit": "can_view_audit",
}


class LoginScreen(Screen[None]):
    """Sign-in / sign-up form shown whenever no session is active."""

    def __init__(self, sessions: SessionManager) -> None:
        super().__init__()
        self.sessions = sessions

    def compose(self) -> ComposeResult:
        yield Header()
        yield Vertical(
            Static("📦 SIMS: sign in", id="login_title"),
            Input(placeholder="Username", id="username"),
            Input(placeholder="Password", password=True, id="password"),
            Horizontal(
                Button("Sign in", variant="primary", id="signin_btn"),
                Button("Sign up", id="signup_btn"),
                id="login_buttons",
            ),
            id="login_box",
        )
        yield Footer()

    def _credentials(self) -> tuple[str, str]:
        return (
            self.query_one("#username", Input).value,
            self.query_one("#password", Input).value,
        )

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in either field signs in."""
        await self._sign_in()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle sign-in / sign-up clicks."""
        if event.button.id == "signup_btn":
            await self._sign_up()
        elif event.button.id == "signin_btn":
            await self._sign_in()

    async def _sign_up(self) -> None:
        username, password = self._credentials()
        try:
            account = await asyncio.to_thread(
                self.sessions.sign_up, username, password
            )
        except InventoryError as exc:
            self.notify(str(exc), title="Signup failed", severity="error")
            return
        self.notify(
            f"Account {account.username} created ({account.role}). "
            "You can sign in now.",
        )

    async def _sign_in(self) -> None:
        username, password = self._credentials()
        try:
            account = await asyncio.to_thread(
                self.sessions.authenticate, username, password
            )
        except InventoryError as exc:
            self.notify(str(exc), title="Login failed", severity="error")
            return
        # Listeners touch widgets, so the session starts on the app thread
        session = self.sessions.start_session(account)
        self.notify(f"Welcome back, {session.username}!")
        self.dismiss(None)


class ProductFormScreen(ModalScreen[dict[str, str] | None]):
    """Add / edit dialog; returns the raw field values or ``None``."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(
        self, title: str, initial: dict[str, object] | None = None,
    ) -> None:
        super().__init__()
        self.form_title = title
        self.initial = initial or {
            "low_stock_threshold": Settings.DEFAULT_LOW_STOCK_THRESHOLD,
        }

    def compose(self) -> ComposeResult:
        inputs: list[Any] = []
        for key, label in _FORM_FIELDS:
            value = self.initial.get(key)
            inputs.append(Label(f"{label} *"))
            inputs.append(
                Input(
                    value="" if value is None else str(value),
                    id=f"field_{key}",
                )
            )
        yield Vertical(
            Static(self.form_title, id="form_title"),
            *inputs,
            Horizontal(
                Button("Cancel", id="cancel_btn"),
                Button("Save", variant="primary", id="save_btn"),
                id="form_buttons",
            ),
            id="form_box",
        )

    def values(self) -> dict[str, str]:
        """Current raw input values, keyed by product field."""
        return {
            key: self.query_one(f"#field_{key}", Input).value
            for key, _ in _FORM_FIELDS
        }

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save_btn":
            self.dismiss(self.values())
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no confirmation dialog."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(self.message, id="confirm_message"),
            Horizontal(
                Button("Cancel", id="no_btn"),
                Button("Delete", variant="error", id="yes_btn"),
                id="confirm_buttons",
            ),
            id="confirm_box",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes_btn")

    def action_cancel(self) -> None:
        self.dismiss(False)


class AuditScreen(Screen[None]):
    """Read-only change log for administrators."""

    BINDINGS = [Binding("escape,b", "back", "Back")]

    def __init__(self, entries: list[AuditEntry], locale: str) -> None:
        super().__init__()
        self.entries = entries
        self.locale = locale

    def compose(self) -> ComposeResult:
        counts = action_counts(self.entries)
        yield Header()
        yield Container(
            Static(ui_text("audit_title", self.locale), id="audit_title"),
            Static(
                f"Total: {len(self.entries)}   "
                f"{action_label('create', self.locale)}: {counts['create']}   "
                f"{action_label('update', self.locale)}: {counts['update']}   "
                f"{action_label('delete', self.locale)}: {counts['delete']}",
                id="audit_counts",
            ),
            cast(
                DataTable[str | Text],
                DataTable(id="audit_table", zebra_stripes=True),
            ),
            id="audit_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = cast(
            DataTable[str | Text],
            self.query_one("#audit_table", DataTable),
        )
        table.add_columns("Date", "Action", "User", "Changes")
        for entry in self.entries:
            table.add_row(
                entry.created_at.strftime("%d %b %Y, %H:%M"),
                action_label(entry.action, self.locale),
                entry.user_email or "-",
                change_summary(entry),
            )

    def action_back(self) -> None:
        self.app.pop_screen()


class InventoryApp(App[None]):
    """Terminal UI for the SIMS inventory manager."""

    CSS_PATH = "styles.css"
    TITLE = "SIMS"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("a", "add_product", "Add"),
        Binding("e", "edit_product", "Edit"),
        Binding("d", "delete_product", "Delete"),
        Binding("x", "export('full', 'csv')", "Export CSV"),
        Binding("l", "export('low_stock_only', 'csv')", "Low Stock CSV"),
        Binding("w", "export('full', 'xlsx')", "Export XLSX"),
        Binding("c", "charts", "Charts"),
        Binding("h", "audit", "History"),
        Binding("t", "toggle_locale", "EN/RU"),
        Binding("o", "sign_out", "Logout"),
    ]

    def __init__(self, db_path: str | None = None) -> None:
        super().__init__()
        path = Path(db_path) if db_path else Settings.DB_PATH
        self.accounts = AccountStore(path)
        self.store = InventoryDB(path)
        self.sessions = SessionManager(self.accounts)
        self.service = InventoryService(self.store, self.sessions)
        self.locale: str = Settings.DEFAULT_LOCALE
        self.search_query: str = ""
        self.visible_products: list[Product] = []
        self.sessions.subscribe(self._on_session_changed)

    # ── Layout ───────────────────────────────────────────

    def compose(self) -> ComposeResult:
        """Build the dashboard widget tree."""
        yield Header()
        yield Container(
            Static(ui_text("title", self.locale), id="title"),
            Horizontal(
                Static("", id="stat_total", classes="stat"),
                Static("", id="stat_value", classes="stat"),
                Static("", id="stat_low", classes="stat"),
                Static("", id="stat_out", classes="stat"),
                id="stats",
            ),
            Static("", id="alerts"),
            Input(
                placeholder=ui_text("search", self.locale),
                id="search_input",
            ),
            Static("", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="products_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure the product table and ask for credentials."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        table.add_columns(
            "Name", "Category", "Qty", "Price", "Threshold", "Status",
        )
        self._show_login()

    def on_unmount(self) -> None:
        self.service.close()
        self.store.close()
        self.accounts.close()

    # ── Session handling ─────────────────────────────────

    def _show_login(self) -> None:
        self.push_screen(LoginScreen(self.sessions), self._after_login)

    async def _after_login(self, _result: None) -> None:
        await self.reload()

    def _on_session_changed(self, session: Session | None) -> None:
        """Re-resolve what the footer offers whenever the session changes."""
        if session is None:
            self.sub_title = ""
            self.visible_products = []
        else:
            self.sub_title = f"{session.username} · {session.role_label}"
        self.refresh_bindings()

    def check_action(
        self, action: str, parameters: tuple[object, ...],
    ) -> bool | None:
        """Hide actions the current session may not perform."""
        on_dashboard = len(self.screen_stack) == 1
        capability = _GATED_ACTIONS.get(action)
        if capability is not None:
            if not on_dashboard:
                return False
            return bool(getattr(self.sessions.capabilities, capability))
        if action in ("charts", "sign_out", "toggle_locale"):
            return on_dashboard and self.sessions.current is not None
        return True

    def action_sign_out(self) -> None:
        """Drop the session and return to the login form."""
        self.sessions.sign_out()
        while len(self.screen_stack) > 1:
            self.pop_screen()
        self.render_view()
        self._show_login()

    # ── Data ─────────────────────────────────────────────

    async def reload(self) -> None:
        """Fetch products from the store and redraw everything."""
        status = self.query_one("#status", Static)
        status.update("⏳ Loading...")
        try:
            await asyncio.to_thread(self.service.refresh)
        except InventoryError as exc:
            logger.error("Failed to load products: %s", exc, exc_info=True)
            self.notify(
                f"Failed to load products: {exc}", severity="error",
            )
            status.update("❌ Failed to load products")
            return
        self.render_view()

    def render_view(self) -> None:
        """Redraw stats, alerts and the (filtered) product table."""
        metrics = self.service.metrics
        loc = self.locale

        self.query_one("#title", Static).update(ui_text("title", loc))
        self.query_one("#stat_total", Static).update(
            f"{ui_text('total_products', loc)}\n{metrics.total_products}"
        )
        self.query_one("#stat_value", Static).update(
            f"{ui_text('total_value', loc)}\n"
            f"${metrics.total_value_display:,}"
        )
        self.query_one("#stat_low", Static).update(
            f"{ui_text('low_stock', loc)}\n{len(metrics.low_stock_items)}"
        )
        self.query_one("#stat_out", Static).update(
            f"{ui_text('out_of_stock', loc)}\n"
            f"{len(metrics.out_of_stock_items)}"
        )

        alerts = metrics.attention_items
        alert_box = self.query_one("#alerts", Static)
        if alerts:
            lines = [
                f"⚠ {ui_text('low_stock_alert', loc)}: {len(alerts)}"
            ] + [
                f"  {p.name} ({p.category}): {p.quantity} "
                f"{ui_text('units', loc)}"
                for p in alerts[: Settings.LOW_STOCK_ALERT_LIMIT]
            ]
            alert_box.update("\n".join(lines))
        else:
            alert_box.update("")

        self.query_one("#search_input", Input).placeholder = ui_text(
            "search", loc,
        )
        self.populate_table()

    def populate_table(self) -> None:
        """Fill the DataTable with products matching the search box."""
        table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        status = self.query_one("#status", Static)
        table.clear()

        if self.sessions.current is None:
            self.visible_products = []
            status.update("")
            return

        self.visible_products = self.service.search(self.search_query)
        for p in self.visible_products:
            product_status = stock_status(p)
            table.add_row(
                p.name[:60],
                p.category,
                str(p.quantity),
                f"${p.price:,.2f}",
                str(p.low_stock_threshold),
                Text(
                    status_label(product_status.value, self.locale),
                    style=_STATUS_STYLES[product_status],
                ),
                key=p.id,
            )

        if self.visible_products:
            status.update(f"✅ {len(self.visible_products)} products")
        elif self.search_query:
            status.update(
                f'{ui_text("no_match", self.locale)} "{self.search_query}"'
            )
        else:
            status.update(ui_text("no_products", self.locale))

    def on_input_changed(self, event: Input.Changed) -> None:
        """Live search as the user types."""
        if event.input.id == "search_input":
            self.search_query = event.value.strip()
            self.populate_table()

    def _selected_product(self) -> Product | None:
        table = cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )
        row = table.cursor_row
        if 0 <= row < len(self.visible_products):
            return self.visible_products[row]
        return None

    # ── Product actions ──────────────────────────────────

    def action_add_product(
        self, initial: dict[str, object] | None = None,
    ) -> None:
        """Open the add-product dialog."""
        self.push_screen(
            ProductFormScreen("Add new product", initial),
            self._submit_add,
        )

    async def _submit_add(self, values: dict[str, str] | None) -> None:
        if values is None:
            return
        try:
            product = await asyncio.to_thread(
                self.service.add_product, values,
            )
        except InventoryError as exc:
            logger.warning("Add product failed: %s", exc)
            self.notify(str(exc), title="Add failed", severity="error")
            self.action_add_product(dict(values))
            return
        self.notify(f"Product {product.name} added")
        self.render_view()

    def action_edit_product(
        self, initial: dict[str, object] | None = None,
    ) -> None:
        """Open the edit dialog for the highlighted product."""
        product = self._selected_product()
        if product is None:
            self.notify("Select a product first", severity="warning")
            return
        fields = initial or {
            "name": product.name,
            "category": product.category,
            "quantity": product.quantity,
            "price": product.price,
            "low_stock_threshold": product.low_stock_threshold,
        }

        async def submit(values: dict[str, str] | None) -> None:
            if values is None:
                return
            try:
                await asyncio.to_thread(
                    self.service.edit_product, product.id, values,
                )
            except InventoryError as exc:
                logger.warning("Edit of %s failed: %s", product.id, exc)
                self.notify(str(exc), title="Update failed", severity="error")
                self.push_screen(
                    ProductFormScreen("Edit product", dict(values)), submit,
                )
                return
            self.notify("Product updated")
            self.render_view()

        self.push_screen(ProductFormScreen("Edit product", fields), submit)

    def action_delete_product(self) -> None:
        """Ask for confirmation, then delete the highlighted product."""
        product = self._selected_product()
        if product is None:
            self.notify("Select a product first", severity="warning")
            return

        async def confirmed(answer: bool | None) -> None:
            if not answer:
                return
            try:
                await asyncio.to_thread(
                    self.service.delete_product, product.id,
                )
            except InventoryError as exc:
                logger.error("Delete of %s failed", product.id, exc_info=True)
                self.notify(str(exc), title="Delete failed", severity="error")
                return
            self.notify(f"Product {product.name} deleted")
            self.render_view()

        self.push_screen(
            ConfirmScreen(
                f'Delete "{product.name}"? This cannot be undone.'
            ),
            confirmed,
        )

    # ── Reports ──────────────────────────────────────────

    def action_export(self, report: str, fmt: str) -> None:
        """Export the loaded products to the exports directory."""
        try:
            payload = self.service.export(
                ReportType(report), self.locale, ExportFormat(fmt),
            )
            path = FileManager().save_export(payload)
        except InventoryError as exc:
            self.notify(str(exc), title="Export failed", severity="error")
            return
        except OSError as exc:
            logger.error("Failed to write export", exc_info=True)
            self.notify(f"Export failed: {exc}", severity="error")
            return
        self.notify(f"{payload.row_count} products exported to {path}")

    def action_charts(self) -> None:
        """Write the chart dashboard and open it in a browser."""
        try:
            path = export_dashboard(
                self.service.metrics, self.locale, open_browser=True,
            )
        except OSError as exc:
            logger.error("Failed to write chart", exc_info=True)
            self.notify(f"Chart export failed: {exc}", severity="error")
            return
        if path is None:
            self.notify("No products to chart", severity="warning")
        else:
            self.notify(f"Dashboard saved to {path}")

    async def action_audit(self) -> None:
        """Open the change log."""
        try:
            entries = await asyncio.to_thread(self.service.audit_log)
        except InventoryError as exc:
            self.notify(str(exc), severity="error")
            return
        self.push_screen(AuditScreen(entries, self.locale))

    def action_toggle_locale(self) -> None:
        """Switch between English and Russian labels."""
        self.locale = "ru" if self.locale == "en" else "en"
        self.render_view()
