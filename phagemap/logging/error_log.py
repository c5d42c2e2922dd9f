from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from phagemap.models.error_record import ErrorRecord

"""Rejected-workbook log.

An import run collects one ErrorRecord per rejected workbook and writes
them as JSON Lines to `logs/errors-YYYYMMDD-HHMMSS.log` (UTC). The file
name is fixed on first flush, so later flushes in the same run append to
it. A run without rejections writes no file.
"""

__all__ = [
    "ErrorLogBuffer",
    "LOGS_DIR",
]

LOGS_DIR = Path("./logs")
_STAMP = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects rejected-file records for one import run."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self.logs_dir = LOGS_DIR if logs_dir is None else logs_dir
        self._pending: list[ErrorRecord] = []
        self._path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._path is None:
            self._path = self.logs_dir / f"errors-{datetime.now(UTC).strftime(_STAMP)}.log"
        return self._path

    @property
    def records(self) -> list[ErrorRecord]:
        """Records not yet flushed (copy)."""
        return self._pending[:]

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def flush(self) -> Path | None:
        """Write pending records; returns the log path, or None if nothing was pending.

        Raises:
            OSError: the logs directory or file cannot be written
        """
        if not self._pending:
            return None
        path = self.file_path
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = "".join(f"{rec.to_json_line()}\n" for rec in self._pending)
        with path.open("a", encoding="utf-8") as out:
            out.write(lines)
        self._pending = []
        return path
