# src/config/locales.py

"""Label tables for the two supported locales (``en`` and ``ru``)."""

import logging

logger = logging.getLogger("sims.locales")

SUPPORTED_LOCALES: tuple[str, ...] = ("en", "ru")

# Column keys in export order
EXPORT_COLUMNS: tuple[str, ...] = (
    "name",
    "category",
    "quantity",
    "price",
    "threshold",
    "status",
    "value",
)

_EXPORT_HEADERS: dict[str, dict[str, str]] = {
    "en": {
        "name": "Product Name",
        "category": "Category",
        "quantity": "Quantity",
        "price": "Price (USD)",
        "threshold": "Low Stock Threshold",
        "status": "Status",
        "value": "Value (USD)",
    },
    "ru": {
        "name": "Название",
        "category": "Категория",
        "quantity": "Количество",
        "price": "Цена (USD)",
        "threshold": "Порог низкого запаса",
        "status": "Статус",
        "value": "Стоимость (USD)",
    },
}

_STATUS_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "out_of_stock": "Out of Stock",
        "low_stock": "Low Stock",
        "in_stock": "In Stock",
    },
    "ru": {
        "out_of_stock": "Нет в наличии",
        "low_stock": "Мало на складе",
        "in_stock": "В наличии",
    },
}

_FILENAME_PARTS: dict[str, dict[str, str]] = {
    "en": {
        "prefix": "inventory",
        "full": "full",
        "low_stock_only": "low-stock",
        "sheet": "Inventory",
    },
    "ru": {
        "prefix": "инвентарь",
        "full": "полный",
        "low_stock_only": "низкий-запас",
        "sheet": "Инвентарь",
    },
}

_UI_STRINGS: dict[str, dict[str, str]] = {
    "en": {
        "title": "SIMS Dashboard",
        "total_products": "Total Products",
        "total_value": "Total Value",
        "low_stock": "Low Stock",
        "out_of_stock": "Out of Stock",
        "low_stock_alert": "Low Stock Alert",
        "search": "Search products...",
        "no_products": "No products yet",
        "no_match": "No products found for",
        "audit_title": "Audit Log",
        "create": "Create",
        "update": "Update",
        "delete": "Delete",
        "units": "units",
    },
    "ru": {
        "title": "Панель SIMS",
        "total_products": "Всего товаров",
        "total_value": "Общая стоимость",
        "low_stock": "Мало на складе",
        "out_of_stock": "Нет в наличии",
        "low_stock_alert": "Низкий запас",
        "search": "Поиск товаров...",
        "no_products": "Товаров пока нет",
        "no_match": "Не найдено товаров по запросу",
        "audit_title": "История изменений",
        "create": "Создание",
        "update": "Изменение",
        "delete": "Удаление",
        "units": "шт.",
    },
}


def normalize_locale(locale: str | None) -> str:
    """Return a supported locale code, falling back to ``en``."""
    code = (locale or "").strip().lower()
    if code in SUPPORTED_LOCALES:
        return code
    if code:
        logger.debug("Unsupported locale %r, using 'en'", locale)
    return "en"


def export_headers(locale: str) -> list[str]:
    """Localized export header row, in :data:`EXPORT_COLUMNS` order."""
    table = _EXPORT_HEADERS[normalize_locale(locale)]
    return [table[key] for key in EXPORT_COLUMNS]


def status_label(status_key: str, locale: str) -> str:
    """Localized label for a stock status key."""
    return _STATUS_LABELS[normalize_locale(locale)][status_key]


def filename_part(key: str, locale: str) -> str:
    """Localized fragment used in export filenames and sheet names."""
    return _FILENAME_PARTS[normalize_locale(locale)][key]


def ui_text(key: str, locale: str) -> str:
    """Localized UI string; unknown keys are returned unchanged."""
    return _UI_STRINGS[normalize_locale(locale)].get(key, key)
