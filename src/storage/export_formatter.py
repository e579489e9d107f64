# src/storage/export_formatter.py

"""Turn a product list into a CSV or XLSX report."""

import csv
import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from src.config.locales import (
    export_headers,
    filename_part,
    normalize_locale,
    status_label,
)
from src.config.settings import Settings
from src.models.product import Product
from src.services.metrics import needs_attention, round_money, stock_status

logger = logging.getLogger("sims.export")

CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
XLSX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)


class ReportType(str, Enum):
    """Which products a report contains."""

    FULL = "full"
    LOW_STOCK_ONLY = "low_stock_only"


class ExportFormat(str, Enum):
    """Output file format."""

    CSV = "csv"
    XLSX = "xlsx"


@dataclass
class ExportPayload:
    """A finished report ready to be written to disk."""

    filename: str
    content: bytes
    media_type: str
    row_count: int


def select_rows(
    products: Sequence[Product], report_type: ReportType,
) -> list[Product]:
    """Apply the report filter; low-stock reports keep everything not in stock."""
    if report_type is ReportType.LOW_STOCK_ONLY:
        return [p for p in products if needs_attention(p)]
    return list(products)


def build_filename(
    report_type: ReportType,
    locale: str,
    extension: str,
    on: date | None = None,
) -> str:
    """``{prefix}-{report}-{YYYY-MM-DD}.{ext}`` with localized parts."""
    day = (on or date.today()).isoformat()
    prefix = filename_part("prefix", locale)
    label = filename_part(report_type.value, locale)
    return f"{prefix}-{label}-{day}.{extension}"


def _row_values(product: Product, locale: str) -> list[object]:
    """Typed cell values for one product, in export column order."""
    return [
        product.name,
        product.category,
        product.quantity,
        round_money(product.price),
        product.low_stock_threshold,
        status_label(stock_status(product).value, locale),
        round_money(product.value),
    ]


def format_csv(products: Sequence[Product], locale: str) -> bytes:
    """Delimited text with a header row, UTF-8 with a byte-order mark.

    The delimiter follows the locale so spreadsheet applications split
    the columns correctly; fields holding the delimiter, quotes or line
    breaks are quoted.
    """
    locale = normalize_locale(locale)
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=Settings.CSV_DELIMITERS[locale],
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writerow(export_headers(locale))
    for product in products:
        # Money cells are Decimals quantized to cents, so str() keeps 2 dp
        writer.writerow(_row_values(product, locale))
    return buffer.getvalue().encode("utf-8-sig")


def format_xlsx(products: Sequence[Product], locale: str) -> bytes:
    """Single-sheet workbook with fixed column widths."""
    locale = normalize_locale(locale)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = filename_part("sheet", locale)

    sheet.append(export_headers(locale))
    for product in products:
        sheet.append(_row_values(product, locale))

    for row in sheet.iter_rows(min_row=2):
        row[3].number_format = "0.00"
        row[6].number_format = "0.00"

    for idx, width in enumerate(Settings.XLSX_COLUMN_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(idx)].width = width

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def format_export(
    products: Sequence[Product],
    report_type: ReportType = ReportType.FULL,
    locale: str = Settings.DEFAULT_LOCALE,
    fmt: ExportFormat = ExportFormat.CSV,
    on: date | None = None,
) -> ExportPayload:
    """Filter *products* for the report and encode them as *fmt*."""
    locale = normalize_locale(locale)
    rows = select_rows(products, report_type)

    if fmt is ExportFormat.XLSX:
        content = format_xlsx(rows, locale)
        media_type = XLSX_MEDIA_TYPE
    else:
        content = format_csv(rows, locale)
        media_type = CSV_MEDIA_TYPE

    payload = ExportPayload(
        filename=build_filename(report_type, locale, fmt.value, on),
        content=content,
        media_type=media_type,
        row_count=len(rows),
    )
    logger.info(
        "Formatted %s %s report (%s): %d rows, %d bytes",
        report_type.value,
        fmt.value,
        locale,
        payload.row_count,
        len(payload.content),
    )
    return payload
