# src/filters/product_filter.py

"""Free-text product search over name and category."""

import logging

from src.models.product import Product

logger = logging.getLogger("sims.filters")


class ProductFilter:
    """Case-insensitive substring search for the product table."""

    @staticmethod
    def matches(product: Product, query: str) -> bool:
        """True when *query* occurs in the product's name or category."""
        needle = query.lower()
        return (
            needle in product.name.lower()
            or needle in product.category.lower()
        )

    @staticmethod
    def filter_by_query(
        products: list[Product],
        query: str,
    ) -> list[Product]:
        """Keep products matching *query*, preserving order.

        An empty query keeps everything. No tokenising or fuzzy matching.
        """
        if not query:
            return list(products)

        kept = [p for p in products if ProductFilter.matches(p, query)]
        logger.debug(
            "Search %r matched %d of %d products",
            query,
            len(kept),
            len(products),
        )
        return kept
