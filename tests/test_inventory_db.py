# tests/test_inventory_db.py

"""Tests for the SQLite-backed product store."""

import unittest
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from src.models.account import Account
from src.models.errors import DuplicateError, StoreError
from src.models.product import ProductFields
from src.storage.inventory_db import InventoryDB


def _fields(
    name: str = "Laptop",
    category: str = "Electronics",
    quantity: int = 5,
    price: str = "999.99",
    threshold: int = 3,
) -> ProductFields:
    """Validated fields with defaults."""
    return ProductFields(
        name=name,
        category=category,
        quantity=quantity,
        price=Decimal(price),
        low_stock_threshold=threshold,
    )


_ACTOR = Account(
    id="acct-1",
    username="alice",
    email="alice@sims.local",
    role="admin",
    created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
)


class TestInventoryDB(unittest.TestCase):
    """CRUD against an in-memory database."""

    def setUp(self) -> None:
        """Fresh in-memory store per test."""
        self.db = InventoryDB(Path(":memory:"))

    def tearDown(self) -> None:
        """Close the connection."""
        self.db.close()

    def test_empty_store(self) -> None:
        """A new store has no products."""
        self.assertEqual(self.db.list_products(), [])

    def test_insert_assigns_id_and_timestamp(self) -> None:
        """insert returns the stored product."""
        product = self.db.insert(_fields())
        self.assertTrue(product.id)
        self.assertIsNotNone(product.created_at.tzinfo)
        self.assertEqual(self.db.get(product.id), product)

    def test_price_round_trips_exactly(self) -> None:
        """Decimal prices survive storage unchanged."""
        product = self.db.insert(_fields(price="0.10"))
        self.assertEqual(self.db.get(product.id).price, Decimal("0.10"))

    def test_list_newest_first(self) -> None:
        """Most recently created products come first."""
        first = self.db.insert(_fields(name="First"))
        second = self.db.insert(_fields(name="Second"))
        ids = [p.id for p in self.db.list_products()]
        self.assertEqual(ids, [second.id, first.id])

    def test_duplicate_name_and_category_rejected(self) -> None:
        """Same name in the same category fails and changes nothing."""
        self.db.insert(_fields())
        before = self.db.list_products()
        with self.assertRaises(DuplicateError) as ctx:
            self.db.insert(_fields(quantity=99))
        self.assertEqual(
            str(ctx.exception),
            "A product with this name already exists in this category",
        )
        self.assertEqual(self.db.list_products(), before)

    def test_same_name_other_category_allowed(self) -> None:
        """Uniqueness is per category."""
        self.db.insert(_fields(category="Electronics"))
        self.db.insert(_fields(category="Office"))
        self.assertEqual(len(self.db.list_products()), 2)

    def test_update_replaces_fields(self) -> None:
        """update keeps id and created_at, replaces the rest."""
        product = self.db.insert(_fields())
        self.db.update(product.id, _fields(quantity=0, price="899.00"))
        updated = self.db.get(product.id)
        self.assertEqual(updated.quantity, 0)
        self.assertEqual(updated.price, Decimal("899.00"))
        self.assertEqual(updated.created_at, product.created_at)

    def test_update_into_duplicate_rejected(self) -> None:
        """Renaming onto an existing name/category pair fails."""
        self.db.insert(_fields(name="Mouse"))
        laptop = self.db.insert(_fields(name="Laptop"))
        with self.assertRaises(DuplicateError):
            self.db.update(laptop.id, _fields(name="Mouse"))
        self.assertEqual(self.db.get(laptop.id).name, "Laptop")

    def test_update_missing_raises(self) -> None:
        """Unknown ids are a store error."""
        with self.assertRaises(StoreError):
            self.db.update("nope", _fields())

    def test_delete_removes_product(self) -> None:
        """Deleted products disappear from the listing."""
        product = self.db.insert(_fields())
        self.db.delete(product.id)
        self.assertEqual(self.db.list_products(), [])
        with self.assertRaises(StoreError):
            self.db.get(product.id)

    def test_delete_missing_raises(self) -> None:
        """Deleting an unknown id fails."""
        with self.assertRaises(StoreError):
            self.db.delete("nope")


class TestAuditTrail(unittest.TestCase):
    """Every mutation writes one audit row."""

    def setUp(self) -> None:
        """Fresh in-memory store per test."""
        self.db = InventoryDB(Path(":memory:"))

    def tearDown(self) -> None:
        """Close the connection."""
        self.db.close()

    def test_lifecycle_is_recorded(self) -> None:
        """create, update and delete appear newest first."""
        product = self.db.insert(_fields(), actor=_ACTOR)
        self.db.update(product.id, _fields(quantity=1), actor=_ACTOR)
        self.db.delete(product.id, actor=_ACTOR)

        entries = self.db.list_audit()
        self.assertEqual(
            [e.action for e in entries], ["delete", "update", "create"]
        )
        for entry in entries:
            self.assertEqual(entry.record_id, product.id)
            self.assertEqual(entry.table_name, "products")
            self.assertEqual(entry.user_email, "alice@sims.local")

    def test_snapshots(self) -> None:
        """Old and new data hold JSON snapshots of the product."""
        product = self.db.insert(_fields(), actor=_ACTOR)
        self.db.update(product.id, _fields(quantity=1), actor=_ACTOR)
        update = self.db.list_audit()[0]
        self.assertEqual(update.old_data["quantity"], 5)
        self.assertEqual(update.new_data["quantity"], 1)
        self.assertEqual(update.new_data["price"], "999.99")

        create = self.db.list_audit()[1]
        self.assertIsNone(create.old_data)
        self.assertEqual(create.new_data["name"], "Laptop")

    def test_failed_insert_writes_no_audit(self) -> None:
        """A rejected duplicate leaves the audit log untouched."""
        self.db.insert(_fields())
        with self.assertRaises(DuplicateError):
            self.db.insert(_fields())
        self.assertEqual(len(self.db.list_audit()), 1)

    def test_anonymous_actor(self) -> None:
        """Mutations without an actor record no user."""
        self.db.insert(_fields())
        entry = self.db.list_audit()[0]
        self.assertIsNone(entry.user_id)
        self.assertIsNone(entry.user_email)

    def test_limit(self) -> None:
        """Only the newest *limit* entries are returned."""
        for i in range(5):
            self.db.insert(_fields(name=f"P{i}"))
        entries = self.db.list_audit(limit=3)
        self.assertEqual(len(entries), 3)
        self.assertEqual(entries[0].new_data["name"], "P4")


if __name__ == "__main__":
    unittest.main()
