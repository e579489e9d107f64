# src/services/inventory_service.py

"""Coordinates validation, permissions, the store, metrics and export."""

import logging
from collections.abc import Mapping
from datetime import date

from src.config.settings import Settings
from src.filters.product_filter import ProductFilter
from src.filters.product_validator import ProductValidator
from src.models.audit_entry import AuditEntry
from src.models.errors import EmptyExportError
from src.models.product import Product
from src.services.access_policy import Capabilities
from src.services.metrics import InventoryMetrics, compute_metrics
from src.services.session import Session, SessionManager
from src.storage.export_formatter import (
    ExportFormat,
    ExportPayload,
    ReportType,
    format_export,
    select_rows,
)
from src.storage.inventory_db import InventoryDB

logger = logging.getLogger("sims.inventory")


class InventoryService:
    """The product collection as the views see it.

    ``products`` and ``metrics`` are replaced together by :meth:`refresh`
    after every successful change; a failed action leaves both untouched.
    """

    def __init__(
        self, store: InventoryDB, sessions: SessionManager,
    ) -> None:
        self.store = store
        self.sessions = sessions
        self.products: list[Product] = []
        self.metrics: InventoryMetrics = compute_metrics([])
        self._unsubscribe = sessions.subscribe(self._on_session_changed)

    def close(self) -> None:
        """Stop listening for session changes."""
        self._unsubscribe()

    def _on_session_changed(self, session: Session | None) -> None:
        if session is None:
            self.products = []
            self.metrics = compute_metrics([])
            logger.debug("Session ended, product view cleared")

    @property
    def capabilities(self) -> Capabilities:
        return self.sessions.capabilities

    # ── Reading ──────────────────────────────────────────

    def refresh(self) -> InventoryMetrics:
        """Reload products from the store and recompute every metric."""
        self.sessions.require()
        products = self.store.list_products()
        self.products = products
        self.metrics = compute_metrics(products)
        return self.metrics

    def search(self, query: str) -> list[Product]:
        """Products whose name or category contains *query*."""
        return ProductFilter.filter_by_query(self.products, query)

    def find(self, product_id: str) -> Product | None:
        """Product from the loaded collection, by id."""
        return next((p for p in self.products if p.id == product_id), None)

    # ── Mutations ────────────────────────────────────────

    def add_product(self, raw: Mapping[str, object]) -> Product:
        """Validate and insert a new product."""
        session = self.sessions.require_capability("can_modify")
        fields = ProductValidator.validate(raw)
        product = self.store.insert(fields, actor=session.account)
        self.refresh()
        return product

    def edit_product(
        self, product_id: str, raw: Mapping[str, object],
    ) -> None:
        """Validate and replace all editable fields of a product."""
        session = self.sessions.require_capability("can_modify")
        fields = ProductValidator.validate(raw)
        self.store.update(product_id, fields, actor=session.account)
        self.refresh()

    def delete_product(self, product_id: str) -> None:
        """Delete a product; the caller has already asked for confirmation."""
        session = self.sessions.require_capability("can_modify")
        self.store.delete(product_id, actor=session.account)
        self.refresh()

    # ── Reports ──────────────────────────────────────────

    def export(
        self,
        report_type: ReportType = ReportType.FULL,
        locale: str = Settings.DEFAULT_LOCALE,
        fmt: ExportFormat = ExportFormat.CSV,
        on: date | None = None,
    ) -> ExportPayload:
        """Build a report of the loaded products.

        Raises :class:`EmptyExportError` before formatting when the
        report would have no rows.
        """
        self.sessions.require_capability("can_export")
        if not select_rows(self.products, report_type):
            raise EmptyExportError("No data to export")
        return format_export(self.products, report_type, locale, fmt, on)

    def audit_log(
        self, limit: int = Settings.AUDIT_LOG_LIMIT,
    ) -> list[AuditEntry]:
        """Latest audit entries; administrators only."""
        self.sessions.require_capability("can_view_audit")
        return self.store.list_audit(limit)
