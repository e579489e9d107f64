# src/filters/product_validator.py

"""Product and credential validation, run before any store call."""

import logging
import math
import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation

from src.config.settings import Settings
from src.models.errors import ValidationError
from src.models.product import ProductFields

logger = logging.getLogger("sims.filters")

_USERNAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def _parse_int(raw: object, field: str, label: str) -> int:
    """Parse a whole number from user input (int or numeric string)."""
    if isinstance(raw, bool):
        raise ValidationError(f"{label} must be a whole number", field)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, Decimal | float):
        if not math.isfinite(raw) or raw != int(raw):
            raise ValidationError(f"{label} must be a whole number", field)
        return int(raw)
    text = str(raw if raw is not None else "").strip()
    try:
        return int(text)
    except ValueError:
        raise ValidationError(
            f"{label} must be a whole number", field
        ) from None


def _parse_price(raw: object) -> Decimal:
    """Parse a price into a Decimal without going through float."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError("Price must be a number", "price")
    try:
        price = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError("Price must be a number", "price") from None
    if not price.is_finite():
        raise ValidationError("Price must be a number", "price")
    return price


class ProductValidator:
    """Validate raw product input into :class:`ProductFields`."""

    @staticmethod
    def validate(raw: Mapping[str, object]) -> ProductFields:
        """Trim and check every field, raising on the first violation.

        ``low_stock_threshold`` falls back to the configured default when
        missing or blank.
        """
        name = str(raw.get("name") or "").strip()
        if not name:
            raise ValidationError("Product name is required", "name")
        if len(name) > Settings.NAME_MAX_LENGTH:
            raise ValidationError("Name too long", "name")

        category = str(raw.get("category") or "").strip()
        if not category:
            raise ValidationError("Category is required", "category")
        if len(category) > Settings.CATEGORY_MAX_LENGTH:
            raise ValidationError("Category too long", "category")

        quantity = _parse_int(raw.get("quantity"), "quantity", "Quantity")
        if quantity < 0:
            raise ValidationError(
                "Quantity must be 0 or greater", "quantity"
            )
        if quantity > Settings.QUANTITY_MAX:
            raise ValidationError("Quantity too large", "quantity")

        price = _parse_price(raw.get("price"))
        if price <= 0:
            raise ValidationError("Price must be greater than 0", "price")
        if price > Settings.PRICE_MAX:
            raise ValidationError("Price too large", "price")

        raw_threshold = raw.get("low_stock_threshold")
        if raw_threshold is None or str(raw_threshold).strip() == "":
            threshold = Settings.DEFAULT_LOW_STOCK_THRESHOLD
        else:
            threshold = _parse_int(
                raw_threshold, "low_stock_threshold", "Threshold"
            )
        if threshold < 0:
            raise ValidationError(
                "Threshold must be 0 or greater", "low_stock_threshold"
            )
        if threshold > Settings.QUANTITY_MAX:
            raise ValidationError(
                "Threshold too large", "low_stock_threshold"
            )

        logger.debug(
            "Validated product fields (name=%s, category=%s)",
            name,
            category,
        )
        return ProductFields(
            name=name,
            category=category,
            quantity=quantity,
            price=price,
            low_stock_threshold=threshold,
        )

    @staticmethod
    def validate_credentials(username: str, password: str) -> str:
        """Check sign-in / sign-up input; returns the trimmed username."""
        name = (username or "").strip()
        if len(name) < Settings.USERNAME_MIN_LENGTH:
            raise ValidationError(
                "Username must be at least "
                f"{Settings.USERNAME_MIN_LENGTH} characters",
                "username",
            )
        if len(name) > Settings.USERNAME_MAX_LENGTH:
            raise ValidationError("Username too long", "username")
        if not _USERNAME_RE.match(name):
            raise ValidationError(
                "Username can only contain letters, numbers, "
                "and underscores",
                "username",
            )
        if len(password or "") < Settings.PASSWORD_MIN_LENGTH:
            raise ValidationError(
                "Password must be at least "
                f"{Settings.PASSWORD_MIN_LENGTH} characters",
                "password",
            )
        if len(password.encode("utf-8")) > Settings.PASSWORD_MAX_LENGTH:
            raise ValidationError("Password too long", "password")
        return name
