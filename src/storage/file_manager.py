# src/storage/file_manager.py

"""Writes finished export reports to disk."""

import logging
from pathlib import Path

from src.config.settings import Settings
from src.storage.export_formatter import ExportPayload

logger = logging.getLogger("sims.storage")


class FileManager:
    """Saves export payloads into the exports directory."""

    def __init__(self, exports_dir: Path | None = None) -> None:
        self.exports_dir: Path = exports_dir or Settings.EXPORTS_DIR
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "FileManager initialised, exports_dir=%s", self.exports_dir
        )

    def _free_path(self, filename: str) -> Path:
        """Pick ``name.ext``, then ``name (1).ext``, ``name (2).ext``..."""
        candidate = self.exports_dir / filename
        stem, suffix = candidate.stem, candidate.suffix
        counter = 1
        while candidate.exists():
            candidate = self.exports_dir / f"{stem} ({counter}){suffix}"
            counter += 1
        return candidate

    def save_export(self, payload: ExportPayload) -> Path:
        """Write *payload* under its suggested filename and return the path."""
        filepath = self._free_path(payload.filename)
        filepath.write_bytes(payload.content)
        logger.info(
            "Exported %d products to %s", payload.row_count, filepath,
        )
        return filepath
