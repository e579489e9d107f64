# tests/test_product_filter.py

"""Tests for ProductFilter search."""

import unittest
from datetime import datetime, timezone
from decimal import Decimal

from src.filters.product_filter import ProductFilter
from src.models.product import Product


def _p(name: str, category: str) -> Product:
    """Create a minimal Product."""
    return Product(
        id=name,
        name=name,
        category=category,
        quantity=1,
        price=Decimal("1.00"),
        low_stock_threshold=10,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


class TestProductFilter(unittest.TestCase):
    """Substring search over name and category."""

    def setUp(self) -> None:
        """A small mixed catalogue."""
        self.products = [
            _p("Laptop", "Electronics"),
            _p("Desk Lamp", "Furniture"),
            _p("USB Cable", "Electronics"),
        ]

    def test_empty_query_keeps_everything(self) -> None:
        """No query means no filtering, as a new list."""
        result = ProductFilter.filter_by_query(self.products, "")
        self.assertEqual(result, self.products)
        self.assertIsNot(result, self.products)

    def test_case_insensitive_name_match(self) -> None:
        """'LAMP' finds 'Desk Lamp'."""
        result = ProductFilter.filter_by_query(self.products, "LAMP")
        self.assertEqual([p.name for p in result], ["Desk Lamp"])

    def test_category_match(self) -> None:
        """Category text matches too, order preserved."""
        result = ProductFilter.filter_by_query(self.products, "electr")
        self.assertEqual(
            [p.name for p in result], ["Laptop", "USB Cable"]
        )

    def test_no_match(self) -> None:
        """Unknown text returns an empty list."""
        self.assertEqual(
            ProductFilter.filter_by_query(self.products, "zzz"), []
        )

    def test_filter_is_case_insensitive_and_idempotent(self) -> None:
        """Upper-casing the query or filtering twice changes nothing."""
        for query in ("lap", "Electronics", "e", "zzz"):
            with self.subTest(query=query):
                once = ProductFilter.filter_by_query(self.products, query)
                self.assertEqual(
                    once,
                    ProductFilter.filter_by_query(
                        self.products, query.upper()
                    ),
                )
                self.assertEqual(
                    ProductFilter.filter_by_query(once, query), once
                )

    def test_matches_single_product(self) -> None:
        """matches() checks one product."""
        self.assertTrue(ProductFilter.matches(self.products[0], "top"))
        self.assertFalse(ProductFilter.matches(self.products[0], "desk"))


if __name__ == "__main__":
    unittest.main()
