# src/storage/inventory_db.py

"""SQLite-backed product store with an audit trail of every change."""

import json
import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.models.account import Account
from src.models.audit_entry import AuditEntry
from src.models.errors import DuplicateError, StoreError, ValidationError
from src.models.product import Product, ProductFields

logger = logging.getLogger("sims.store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS products (
    id                  TEXT    PRIMARY KEY,
    name                TEXT    NOT NULL CHECK (length(name) BETWEEN 1 AND 200),
    category            TEXT    NOT NULL CHECK (length(category) BETWEEN 1 AND 100),
    quantity            INTEGER NOT NULL CHECK (quantity >= 0),
    price               TEXT    NOT NULL CHECK (CAST(price AS REAL) > 0),
    low_stock_threshold INTEGER NOT NULL DEFAULT 10
                        CHECK (low_stock_threshold >= 0),
    created_at          TEXT    NOT NULL,
    UNIQUE (name, category)
);

CREATE TABLE IF NOT EXISTS audit_log (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id    TEXT,
    user_email TEXT,
    action     TEXT    NOT NULL,
    table_name TEXT    NOT NULL,
    record_id  TEXT,
    old_data   TEXT,
    new_data   TEXT,
    created_at TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_products_created
    ON products(created_at);
CREATE INDEX IF NOT EXISTS idx_audit_created
    ON audit_log(created_at);
"""

_PRODUCT_COLUMNS = (
    "id, name, category, quantity, price, low_stock_threshold, created_at"
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_product(row: tuple[Any, ...]) -> Product:
    return Product(
        id=row[0],
        name=row[1],
        category=row[2],
        quantity=int(row[3]),
        price=Decimal(row[4]),
        low_stock_threshold=int(row[5]),
        created_at=datetime.fromisoformat(row[6]),
    )


def _snapshot(product: Product) -> dict[str, Any]:
    """JSON-safe copy of a product for the audit log."""
    return {
        "id": product.id,
        "name": product.name,
        "category": product.category,
        "quantity": product.quantity,
        "price": str(product.price),
        "low_stock_threshold": product.low_stock_threshold,
        "created_at": product.created_at.isoformat(),
    }


def translate_sqlite_error(exc: sqlite3.Error, action: str) -> Exception:
    """Map a sqlite3 exception onto the inventory error taxonomy."""
    message = str(exc)
    if isinstance(exc, sqlite3.IntegrityError):
        if "UNIQUE" in message:
            return DuplicateError(
                "A product with this name already exists in this category"
            )
        if "CHECK" in message or "NOT NULL" in message:
            return ValidationError(f"Rejected by the store: {message}")
    return StoreError(f"Failed to {action}: {message}")


class InventoryDB:
    """SQLite-backed record store for products.

    ``list_products``/``insert``/``update``/``delete`` are the whole contract the
    rest of the application relies on. Every mutation writes an audit
    entry in the same transaction.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(
                str(path), check_same_thread=False,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreError(
                f"Cannot open inventory database at {path}: {exc}"
            ) from exc
        logger.debug("InventoryDB opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Reading ──────────────────────────────────────────

    def list_products(self) -> list[Product]:
        """All products, newest first."""
        try:
            rows = self._conn.execute(
                f"SELECT {_PRODUCT_COLUMNS} FROM products "
                "ORDER BY created_at DESC, rowid DESC",
            ).fetchall()
        except sqlite3.Error as exc:
            logger.error("Failed to list products", exc_info=True)
            raise translate_sqlite_error(exc, "load products") from exc
        return [_row_to_product(r) for r in rows]

    def get(self, product_id: str) -> Product:
        """Fetch one product; ``StoreError`` when it does not exist."""
        try:
            row = self._conn.execute(
                f"SELECT {_PRODUCT_COLUMNS} FROM products WHERE id = ?",
                (product_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, "load product") from exc
        if row is None:
            raise StoreError(f"Product {product_id} not found")
        return _row_to_product(row)

    # ── Mutations ────────────────────────────────────────

    def insert(
        self,
        fields: ProductFields,
        actor: Account | None = None,
    ) -> Product:
        """Create a product and return it with its id and timestamp."""
        product = Product(
            id=str(uuid.uuid4()),
            name=fields.name,
            category=fields.category,
            quantity=fields.quantity,
            price=fields.price,
            low_stock_threshold=fields.low_stock_threshold,
            created_at=datetime.now(timezone.utc),
        )
        try:
            with self._conn:
                self._conn.execute(
                    f"INSERT INTO products ({_PRODUCT_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        product.id,
                        product.name,
                        product.category,
                        product.quantity,
                        str(product.price),
                        product.low_stock_threshold,
                        product.created_at.isoformat(),
                    ),
                )
                self._write_audit(
                    actor, "create", product.id, None, _snapshot(product),
                )
        except sqlite3.Error as exc:
            logger.warning(
                "Insert rejected for %s / %s: %s",
                fields.name,
                fields.category,
                exc,
            )
            raise translate_sqlite_error(exc, "add product") from exc

        logger.info(
            "Added product %s (%s / %s)",
            product.id,
            product.name,
            product.category,
        )
        return product

    def update(
        self,
        product_id: str,
        fields: ProductFields,
        actor: Account | None = None,
    ) -> None:
        """Replace every editable field of an existing product."""
        old = self.get(product_id)
        new = Product(
            id=old.id,
            name=fields.name,
            category=fields.category,
            quantity=fields.quantity,
            price=fields.price,
            low_stock_threshold=fields.low_stock_threshold,
            created_at=old.created_at,
        )
        try:
            with self._conn:
                cur = self._conn.execute(
                    "UPDATE products SET name = ?, category = ?, "
                    "quantity = ?, price = ?, low_stock_threshold = ? "
                    "WHERE id = ?",
                    (
                        new.name,
                        new.category,
                        new.quantity,
                        str(new.price),
                        new.low_stock_threshold,
                        product_id,
                    ),
                )
                if cur.rowcount == 0:
                    raise StoreError(f"Product {product_id} not found")
                self._write_audit(
                    actor, "update", product_id,
                    _snapshot(old), _snapshot(new),
                )
        except sqlite3.Error as exc:
            logger.warning("Update rejected for %s: %s", product_id, exc)
            raise translate_sqlite_error(exc, "update product") from exc

        logger.info("Updated product %s", product_id)

    def delete(
        self,
        product_id: str,
        actor: Account | None = None,
    ) -> None:
        """Remove a product permanently."""
        old = self.get(product_id)
        try:
            with self._conn:
                cur = self._conn.execute(
                    "DELETE FROM products WHERE id = ?", (product_id,),
                )
                if cur.rowcount == 0:
                    raise StoreError(f"Product {product_id} not found")
                self._write_audit(
                    actor, "delete", product_id, _snapshot(old), None,
                )
        except sqlite3.Error as exc:
            logger.error("Delete failed for %s", product_id, exc_info=True)
            raise translate_sqlite_error(exc, "delete product") from exc

        logger.info("Deleted product %s (%s)", product_id, old.name)

    # ── Audit trail ──────────────────────────────────────

    def _write_audit(
        self,
        actor: Account | None,
        action: str,
        record_id: str,
        old_data: dict[str, Any] | None,
        new_data: dict[str, Any] | None,
    ) -> None:
        self._conn.execute(
            "INSERT INTO audit_log (user_id, user_email, action, "
            "table_name, record_id, old_data, new_data, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                actor.id if actor else None,
                actor.email if actor else None,
                action,
                "products",
                record_id,
                json.dumps(old_data, ensure_ascii=False)
                if old_data is not None else None,
                json.dumps(new_data, ensure_ascii=False)
                if new_data is not None else None,
                _now(),
            ),
        )

    def list_audit(
        self, limit: int = Settings.AUDIT_LOG_LIMIT,
    ) -> list[AuditEntry]:
        """Most recent audit entries, newest first."""
        try:
            rows = self._conn.execute(
                "SELECT id, user_id, user_email, action, table_name, "
                "       record_id, old_data, new_data, created_at "
                "FROM audit_log ORDER BY created_at DESC, id DESC "
                "LIMIT ?",
                (limit,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise translate_sqlite_error(exc, "load audit log") from exc
        return [
            AuditEntry(
                id=r[0],
                user_id=r[1],
                user_email=r[2],
                action=r[3],
                table_name=r[4],
                record_id=r[5],
                old_data=json.loads(r[6]) if r[6] else None,
                new_data=json.loads(r[7]) if r[7] else None,
                created_at=datetime.fromisoformat(r[8]),
            )
            for r in rows
        ]
