# tests/test_locales.py

"""Tests for the en/ru label tables."""

import unittest

from src.config.locales import (
    EXPORT_COLUMNS,
    export_headers,
    filename_part,
    normalize_locale,
    status_label,
    ui_text,
)


class TestLocales(unittest.TestCase):
    """Lookup helpers."""

    def test_normalize_locale(self) -> None:
        """Known codes pass, anything else falls back to en."""
        self.assertEqual(normalize_locale("RU"), "ru")
        self.assertEqual(normalize_locale("fr"), "en")
        self.assertEqual(normalize_locale(None), "en")

    def test_headers_match_columns(self) -> None:
        """One header per export column in both locales."""
        for locale in ("en", "ru"):
            with self.subTest(locale=locale):
                self.assertEqual(
                    len(export_headers(locale)), len(EXPORT_COLUMNS)
                )

    def test_status_labels(self) -> None:
        """Status keys translate per locale."""
        self.assertEqual(status_label("low_stock", "en"), "Low Stock")
        self.assertEqual(status_label("in_stock", "ru"), "В наличии")

    def test_filename_parts(self) -> None:
        """Report labels used in filenames."""
        self.assertEqual(filename_part("low_stock_only", "en"), "low-stock")
        self.assertEqual(filename_part("full", "ru"), "полный")

    def test_unknown_ui_key_returned_unchanged(self) -> None:
        """Missing UI strings do not raise."""
        self.assertEqual(ui_text("no_such_key", "en"), "no_such_key")


if __name__ == "__main__":
    unittest.main()
