# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and paths."""

    def test_default_threshold_is_ten(self) -> None:
        """New products default to a low-stock threshold of 10."""
        self.assertEqual(Settings.DEFAULT_LOW_STOCK_THRESHOLD, 10)

    def test_field_length_limits(self) -> None:
        """Name and category limits match the stored constraints."""
        self.assertEqual(Settings.NAME_MAX_LENGTH, 200)
        self.assertEqual(Settings.CATEGORY_MAX_LENGTH, 100)

    def test_account_limits_are_ordered(self) -> None:
        """Minimum lengths never exceed maximum lengths."""
        self.assertLess(
            Settings.USERNAME_MIN_LENGTH, Settings.USERNAME_MAX_LENGTH
        )
        self.assertLess(
            Settings.PASSWORD_MIN_LENGTH, Settings.PASSWORD_MAX_LENGTH
        )

    def test_numeric_bounds_fit_sqlite_integers(self) -> None:
        """Quantity and threshold caps stay inside a signed 64-bit int."""
        self.assertLess(Settings.QUANTITY_MAX, 2**63 - 1)
        self.assertGreater(Settings.PRICE_MAX, 0)

    def test_dashboard_limits(self) -> None:
        """Chart breakdowns keep 8 and 6 categories."""
        self.assertEqual(Settings.TOP_CATEGORIES_BY_QUANTITY, 8)
        self.assertEqual(Settings.TOP_CATEGORIES_BY_VALUE, 6)
        self.assertEqual(Settings.AUDIT_LOG_LIMIT, 100)

    def test_csv_delimiters_cover_locales(self) -> None:
        """Every locale has a CSV delimiter."""
        self.assertEqual(Settings.CSV_DELIMITERS["en"], ",")
        self.assertEqual(Settings.CSV_DELIMITERS["ru"], ";")

    def test_xlsx_widths_match_column_count(self) -> None:
        """One width per export column."""
        self.assertEqual(len(Settings.XLSX_COLUMN_WIDTHS), 7)

    def test_paths_are_path_objects(self) -> None:
        """All directory settings are Path instances."""
        for name in (
            "BASE_DIR", "DATA_DIR", "DB_PATH",
            "EXPORTS_DIR", "CHARTS_DIR", "LOGS_DIR",
        ):
            with self.subTest(name=name):
                self.assertIsInstance(getattr(Settings, name), Path)

    def test_charts_dir_under_data_dir(self) -> None:
        """Chart HTML files live inside the data directory."""
        self.assertEqual(Settings.CHARTS_DIR.parent, Settings.DATA_DIR)


if __name__ == "__main__":
    unittest.main()
