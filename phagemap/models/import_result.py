from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

"""Batch import result models.

FileStatus / FileStat describe one workbook; ImportResult aggregates a run
and feeds the SUMMARY line.
"""

__all__ = [
    "FileStatus",
    "FileStat",
    "ImportResult",
]


class FileStatus(Enum):
    """Outcome of importing one workbook.

    - SUCCESS: parsed and stored
    - FAILED: rejected by the upload policy, the parser or the store
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    file_name: str
    status: FileStatus
    bacteria: int = 0           # matrix rows stored
    phages: int = 0             # matrix columns stored
    positives: int = 0          # 1-entries stored
    elapsed_seconds: float = 0.0
    error: str | None = None    # failure reason (user-facing message)
    record_id: int | None = None


@dataclass(frozen=True)
class ImportResult:
    """Aggregated results for one import run."""
    success_files: int
    failed_files: int
    total_bacteria: int
    total_positives: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
