# tests/test_product_validator.py

"""Tests for ProductValidator."""

import unittest
from decimal import Decimal

from src.filters.product_validator import ProductValidator
from src.models.errors import ValidationError


def _raw(**overrides: object) -> dict[str, object]:
    """Valid raw form input with optional overrides."""
    raw: dict[str, object] = {
        "name": "Laptop",
        "category": "Electronics",
        "quantity": "5",
        "price": "999.99",
        "low_stock_threshold": "3",
    }
    raw.update(overrides)
    return raw


class TestProductValidator(unittest.TestCase):
    """ProductValidator.validate unit tests."""

    def test_valid_input_is_parsed(self) -> None:
        """String form values become typed fields."""
        fields = ProductValidator.validate(_raw())
        self.assertEqual(fields.name, "Laptop")
        self.assertEqual(fields.quantity, 5)
        self.assertEqual(fields.price, Decimal("999.99"))
        self.assertEqual(fields.low_stock_threshold, 3)

    def test_name_and_category_are_trimmed(self) -> None:
        """Surrounding whitespace is removed."""
        fields = ProductValidator.validate(
            _raw(name="  Laptop ", category=" Electronics  ")
        )
        self.assertEqual(fields.name, "Laptop")
        self.assertEqual(fields.category, "Electronics")

    def test_blank_name_rejected(self) -> None:
        """A whitespace-only name is missing."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate(_raw(name="   "))
        self.assertEqual(ctx.exception.field, "name")
        self.assertEqual(str(ctx.exception), "Product name is required")

    def test_name_too_long_rejected(self) -> None:
        """201 characters is over the limit, 200 is fine."""
        ProductValidator.validate(_raw(name="x" * 200))
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate(_raw(name="x" * 201))
        self.assertEqual(str(ctx.exception), "Name too long")

    def test_missing_category_rejected(self) -> None:
        """Category is required."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate(_raw(category=""))
        self.assertEqual(ctx.exception.field, "category")

    def test_category_too_long_rejected(self) -> None:
        """101 characters is over the category limit."""
        with self.assertRaises(ValidationError):
            ProductValidator.validate(_raw(category="c" * 101))

    def test_negative_quantity_rejected(self) -> None:
        """Quantity must be zero or more."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate(_raw(quantity=-1))
        self.assertEqual(ctx.exception.field, "quantity")

    def test_zero_quantity_allowed(self) -> None:
        """Zero quantity is a valid out-of-stock product."""
        self.assertEqual(
            ProductValidator.validate(_raw(quantity=0)).quantity, 0
        )

    def test_fractional_quantity_rejected(self) -> None:
        """Quantities are whole numbers."""
        for bad in ("2.5", 2.5, "abc", True, None):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError):
                    ProductValidator.validate(_raw(quantity=bad))

    def test_zero_price_rejected(self) -> None:
        """Price must be strictly positive."""
        for bad in ("0", "-1.50", 0):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError) as ctx:
                    ProductValidator.validate(_raw(price=bad))
                self.assertEqual(
                    str(ctx.exception), "Price must be greater than 0"
                )

    def test_non_numeric_price_rejected(self) -> None:
        """Unparseable and non-finite prices fail."""
        for bad in ("abc", "", None, "NaN", "Infinity"):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError):
                    ProductValidator.validate(_raw(price=bad))

    def test_price_keeps_decimal_precision(self) -> None:
        """Prices are not routed through float."""
        fields = ProductValidator.validate(_raw(price="0.10"))
        self.assertEqual(fields.price, Decimal("0.10"))

    def test_blank_threshold_uses_default(self) -> None:
        """Missing or blank threshold falls back to 10."""
        raw = _raw()
        del raw["low_stock_threshold"]
        self.assertEqual(
            ProductValidator.validate(raw).low_stock_threshold, 10
        )
        self.assertEqual(
            ProductValidator.validate(
                _raw(low_stock_threshold=" ")
            ).low_stock_threshold,
            10,
        )

    def test_negative_threshold_rejected(self) -> None:
        """Threshold must be zero or more."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate(_raw(low_stock_threshold="-2"))
        self.assertEqual(ctx.exception.field, "low_stock_threshold")

    def test_huge_price_rejected(self) -> None:
        """Prices above the configured maximum are refused."""
        ProductValidator.validate(_raw(price="1000000000"))
        for bad in ("1e30", "1000000000.01"):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError) as ctx:
                    ProductValidator.validate(_raw(price=bad))
                self.assertEqual(ctx.exception.field, "price")

    def test_huge_quantity_rejected(self) -> None:
        """Quantities beyond the maximum never reach the store."""
        ProductValidator.validate(_raw(quantity=1_000_000_000))
        for bad in (1_000_000_001, str(10**20)):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError) as ctx:
                    ProductValidator.validate(_raw(quantity=bad))
                self.assertEqual(ctx.exception.field, "quantity")

    def test_huge_threshold_rejected(self) -> None:
        """The threshold shares the quantity maximum."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate(
                _raw(low_stock_threshold=str(10**20))
            )
        self.assertEqual(ctx.exception.field, "low_stock_threshold")


class TestCredentialValidation(unittest.TestCase):
    """ProductValidator.validate_credentials unit tests."""

    def test_valid_credentials_return_trimmed_username(self) -> None:
        """Whitespace around the username is dropped."""
        self.assertEqual(
            ProductValidator.validate_credentials(" alice_1 ", "secret1"),
            "alice_1",
        )

    def test_short_username_rejected(self) -> None:
        """One character is too short."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate_credentials("a", "secret1")
        self.assertEqual(ctx.exception.field, "username")

    def test_long_username_rejected(self) -> None:
        """51 characters is too long."""
        with self.assertRaises(ValidationError):
            ProductValidator.validate_credentials("a" * 51, "secret1")

    def test_username_characters_restricted(self) -> None:
        """Only letters, digits and underscores are allowed."""
        for bad in ("al ice", "bob@home", "x-y"):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError):
                    ProductValidator.validate_credentials(bad, "secret1")

    def test_short_password_rejected(self) -> None:
        """Five characters is too short."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate_credentials("alice", "12345")
        self.assertEqual(ctx.exception.field, "password")

    def test_long_password_rejected(self) -> None:
        """73 characters is too long; 72 is accepted."""
        ProductValidator.validate_credentials("alice", "p" * 72)
        with self.assertRaises(ValidationError):
            ProductValidator.validate_credentials("alice", "p" * 73)

    def test_password_limit_counts_utf8_bytes(self) -> None:
        """40 Cyrillic letters are 80 bytes, over the 72-byte limit."""
        with self.assertRaises(ValidationError) as ctx:
            ProductValidator.validate_credentials("alice", "ж" * 40)
        self.assertEqual(ctx.exception.field, "password")


if __name__ == "__main__":
    unittest.main()
