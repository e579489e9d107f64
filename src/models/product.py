# src/models/product.py

"""Product data model shared by the store, metrics and export layers."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from src.config.settings import Settings


class StockStatus(str, Enum):
    """Derived stock classification of a product; never stored."""

    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


@dataclass(frozen=True)
class ProductFields:
    """Validated, user-editable product fields.

    Used for inserts and as the full-field replacement on update.
    """

    name: str
    category: str
    quantity: int
    price: Decimal
    low_stock_threshold: int = Settings.DEFAULT_LOW_STOCK_THRESHOLD


@dataclass(frozen=True)
class Product:
    """A single inventory record as returned by the store."""

    id: str
    name: str
    category: str
    quantity: int
    price: Decimal
    low_stock_threshold: int
    created_at: datetime

    @property
    def value(self) -> Decimal:
        """Stock value of this product (quantity times unit price)."""
        return self.quantity * self.price

    def fields(self) -> ProductFields:
        """Return the editable fields of this product."""
        return ProductFields(
            name=self.name,
            category=self.category,
            quantity=self.quantity,
            price=self.price,
            low_stock_threshold=self.low_stock_threshold,
        )

    def to_dict(self) -> dict[str, object]:
        """Plain-JSON representation (prices as 2-dp strings)."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "price": f"{self.price:.2f}",
            "low_stock_threshold": self.low_stock_threshold,
            "created_at": self.created_at.isoformat(),
        }
