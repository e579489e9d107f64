# tests/test_product_model.py

"""Tests for the Product data model."""

import unittest
from datetime import datetime, timezone
from decimal import Decimal

from src.models.product import Product, ProductFields


def _product(quantity: int = 3, price: str = "0.10") -> Product:
    """Create a Product with an exact decimal price."""
    return Product(
        id="p-1",
        name="Pen",
        category="Office",
        quantity=quantity,
        price=Decimal(price),
        low_stock_threshold=10,
        created_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
    )


class TestProduct(unittest.TestCase):
    """Value, field extraction and serialisation."""

    def test_value_is_exact(self) -> None:
        """3 x 0.10 is exactly 0.30."""
        self.assertEqual(_product().value, Decimal("0.30"))

    def test_fields_round_trip(self) -> None:
        """fields() returns the editable part of the product."""
        self.assertEqual(
            _product().fields(),
            ProductFields(
                name="Pen",
                category="Office",
                quantity=3,
                price=Decimal("0.10"),
                low_stock_threshold=10,
            ),
        )

    def test_to_dict(self) -> None:
        """Prices are rendered with two decimals."""
        data = _product(price="5").to_dict()
        self.assertEqual(data["price"], "5.00")
        self.assertEqual(data["created_at"], "2026-10-19T12:00:00+00:00")

    def test_default_threshold(self) -> None:
        """ProductFields defaults the threshold to 10."""
        fields = ProductFields(
            name="Pen", category="Office", quantity=1, price=Decimal("1"),
        )
        self.assertEqual(fields.low_stock_threshold, 10)

    def test_frozen(self) -> None:
        """Products are immutable."""
        with self.assertRaises(AttributeError):
            _product().quantity = 5  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
