# src/config/settings.py

"""Central configuration for the SIMS inventory manager."""

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the SIMS inventory manager."""

    # --- Products ---
    DEFAULT_LOW_STOCK_THRESHOLD: int = 10   # Applied on creation
    NAME_MAX_LENGTH: int = 200
    CATEGORY_MAX_LENGTH: int = 100
    QUANTITY_MAX: int = 1_000_000_000      # Also bounds the threshold
    PRICE_MAX: Decimal = Decimal("1000000000")

    # --- Accounts ---
    USERNAME_MIN_LENGTH: int = 2
    USERNAME_MAX_LENGTH: int = 50
    PASSWORD_MIN_LENGTH: int = 6
    PASSWORD_MAX_LENGTH: int = 72          # bcrypt reads 72 bytes at most
    EMAIL_DOMAIN: str = "sims.local"
    BCRYPT_ROUNDS: int = 12

    # --- Dashboard / reports ---
    TOP_CATEGORIES_BY_QUANTITY: int = 8
    TOP_CATEGORIES_BY_VALUE: int = 6
    CHART_LABEL_MAX_LENGTH: int = 12
    LOW_STOCK_ALERT_LIMIT: int = 5
    AUDIT_LOG_LIMIT: int = 100

    # --- Export ---
    DEFAULT_LOCALE: str = os.getenv("SIMS_LOCALE", "en")
    CSV_DELIMITERS: dict[str, str] = {
        "en": ",",
        "ru": ";",
    }
    XLSX_COLUMN_WIDTHS: list[int] = [30, 20, 12, 15, 20, 15, 15]

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    DB_PATH: Path = Path(
        os.getenv("SIMS_DB_PATH", str(DATA_DIR / "inventory.db"))
    )
    EXPORTS_DIR: Path = Path(
        os.getenv("SIMS_EXPORTS_DIR", str(BASE_DIR / "exports"))
    )
    CHARTS_DIR: Path = DATA_DIR / "charts"
    LOGS_DIR: Path = BASE_DIR / "logs"
    LOG_RETENTION: int = 20                 # Run logs kept on disk
