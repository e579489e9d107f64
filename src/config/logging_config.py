# src/config/logging_config.py

"""Per-run logging for SIMS.

Every launch writes ``logs/run_<timestamp>.log`` and all ``sims.*``
loggers feed it. CLI runs also echo warnings to stderr. The TUI owns the
terminal, so it gets the file handler only and reports problems through
notifications instead.

Old run logs beyond ``Settings.LOG_RETENTION`` are removed on start-up.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "sims"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _prune_old_logs(logs_dir: Path, keep: int) -> None:
    """Delete all but the newest *keep* run logs."""
    runs = sorted(logs_dir.glob("run_*.log"))
    for stale in runs[: max(len(runs) - keep, 0)]:
        try:
            stale.unlink()
        except OSError:
            # Still open elsewhere; retried on the next run
            continue


def setup_logging(console: bool = True) -> Path:
    """Attach the run's handlers to the ``sims`` logger.

    Args:
        console: Also log WARNING and above to stderr. Pass ``False``
            for the TUI.

    Returns:
        Path of this run's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    _prune_old_logs(logs_dir, Settings.LOG_RETENTION)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{stamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    root_logger.info("Logging to %s (console=%s)", log_file, console)
    return log_file
