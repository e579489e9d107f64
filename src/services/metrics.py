# src/services/metrics.py

"""Derived inventory metrics: stock status, totals and category breakdowns.

Everything here is a pure function of the product list. The inventory
service calls :func:`compute_metrics` again after every change to the
collection; nothing is cached or updated incrementally.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext

from src.config.settings import Settings
from src.models.product import Product, StockStatus

logger = logging.getLogger("sims.metrics")

_CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round a currency amount half-up to two decimal places.

    The working precision grows with the amount so quantizing very large
    totals never overflows the default 28-digit context.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def stock_status(product: Product) -> StockStatus:
    """Classify one product. Zero quantity always wins."""
    if product.quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if product.quantity <= product.low_stock_threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def needs_attention(product: Product) -> bool:
    """True for low-stock and out-of-stock products."""
    return stock_status(product) is not StockStatus.IN_STOCK


def items_with_status(
    products: Iterable[Product], status: StockStatus,
) -> list[Product]:
    """Products whose derived status equals *status*."""
    return [p for p in products if stock_status(p) is status]


@dataclass
class InventoryMetrics:
    """Snapshot of every aggregate the dashboard and reports show.

    The category mappings keep first-seen insertion order; the ``top_*``
    helpers sort them for presentation.
    """

    total_products: int = 0
    total_units: int = 0
    total_value: Decimal = Decimal("0")
    low_stock_items: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    out_of_stock_items: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    in_stock_items: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    # Low + out of stock, in collection order (alerts, low-stock report)
    attention_items: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    category_quantity: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )
    category_value: dict[str, Decimal] = field(
        default_factory=lambda: dict[str, Decimal]()
    )
    category_counts: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )
    stock_status_counts: dict[StockStatus, int] = field(
        default_factory=lambda: {s: 0 for s in StockStatus}
    )

    @property
    def total_value_display(self) -> Decimal:
        """Total value rounded for display."""
        return round_money(self.total_value)

    def top_categories_by_quantity(
        self, limit: int = Settings.TOP_CATEGORIES_BY_QUANTITY,
    ) -> list[tuple[str, int]]:
        """Categories by total quantity, descending, first-seen on ties."""
        # sorted() is stable: equal totals keep first-seen order
        ranked = sorted(
            self.category_quantity.items(),
            key=lambda item: item[1],
            reverse=True,
        )
        return ranked[:limit]

    def top_categories_by_value(
        self, limit: int = Settings.TOP_CATEGORIES_BY_VALUE,
    ) -> list[tuple[str, Decimal]]:
        """Categories by stock value (2 dp), descending, first-seen on ties."""
        ranked = sorted(
            self.category_value.items(),
            key=lambda item: item[1],
            reverse=True,
        )
        return ranked[:limit]

    def visible_status_counts(self) -> dict[StockStatus, int]:
        """Status buckets with a non-zero count, for charts."""
        return {
            status: count
            for status, count in self.stock_status_counts.items()
            if count > 0
        }


def compute_metrics(products: Sequence[Product]) -> InventoryMetrics:
    """Build a fresh :class:`InventoryMetrics` from *products*."""
    metrics = InventoryMetrics()
    raw_category_value: dict[str, Decimal] = {}

    for product in products:
        status = stock_status(product)
        metrics.stock_status_counts[status] += 1
        if status is StockStatus.OUT_OF_STOCK:
            metrics.out_of_stock_items.append(product)
        elif status is StockStatus.LOW_STOCK:
            metrics.low_stock_items.append(product)
        else:
            metrics.in_stock_items.append(product)
        if status is not StockStatus.IN_STOCK:
            metrics.attention_items.append(product)

        value = product.value
        metrics.total_products += 1
        metrics.total_units += product.quantity
        metrics.total_value += value

        category = product.category
        metrics.category_quantity[category] = (
            metrics.category_quantity.get(category, 0) + product.quantity
        )
        raw_category_value[category] = (
            raw_category_value.get(category, Decimal("0")) + value
        )
        metrics.category_counts[category] = (
            metrics.category_counts.get(category, 0) + 1
        )

    # Rounded once per category, after summing at full precision
    metrics.category_value = {
        category: round_money(total)
        for category, total in raw_category_value.items()
    }

    logger.debug(
        "Computed metrics: %d products, value=%s, low=%d, out=%d",
        metrics.total_products,
        metrics.total_value_display,
        len(metrics.low_stock_items),
        len(metrics.out_of_stock_items),
    )
    return metrics
