from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..db.excel_data_store import ExcelDataStore
from ..logging.error_log import ErrorLogBuffer
from ..models.error_record import ErrorRecord, error_type_for
from ..models.import_result import FileStat, FileStatus, ImportResult
from .parser import parse_interaction_workbook
from .progress import ProgressTracker
from .upload import UploadPolicy, check_upload, classify_error

"""Batch import of host-range workbooks.

Each workbook is checked, parsed and stored on its own. In live mode every
file runs in its own transaction (BEGIN ... COMMIT, ROLLBACK on failure),
so one bad file never leaves a partial record or blocks the others.
"""

__all__ = [
    "ImportProcessError",
    "scan_workbooks",
    "import_files",
]

logger = logging.getLogger(__name__)


class ImportProcessError(Exception):
    """Fatal error that stops an import run before any file is processed."""


def scan_workbooks(directory: Path, extensions: Sequence[str] = (".xlsx", ".xls")) -> list[Path]:
    """List workbook files in `directory` (non-recursive, sorted by name).

    Raises:
        ImportProcessError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise ImportProcessError(f"directory not found: {directory}")
    if not directory.is_dir():
        raise ImportProcessError(f"path is not a directory: {directory}")
    wanted = {e.lower() for e in extensions}
    try:
        return sorted(
            p for p in directory.iterdir()
            # skip Excel lock files (~$book.xlsx)
            if p.is_file() and p.suffix.lower() in wanted and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ImportProcessError(f"error reading directory {directory}: {e}") from e


def _transaction(store: ExcelDataStore, statement: str) -> None:
    if not store.is_mock:
        store.cursor.execute(statement)


def _import_one(path: Path, store: ExcelDataStore, policy: UploadPolicy) -> FileStat:
    start = datetime.now(UTC)
    buffer = path.read_bytes()
    check_upload(path.name, len(buffer), policy)
    parsed = parse_interaction_workbook(buffer)
    _transaction(store, "BEGIN")
    try:
        record = store.save(parsed, path.name)
        _transaction(store, "COMMIT")
    except Exception:
        try:
            _transaction(store, "ROLLBACK")
        except Exception as rollback_e:  # pragma: no cover
            logger.warning(f"rollback failed for {path.name}: {rollback_e}")
        raise
    return FileStat(
        file_name=path.name,
        status=FileStatus.SUCCESS,
        bacteria=len(parsed.bacteria_names),
        phages=len(parsed.phage_names),
        positives=parsed.positive_count,
        elapsed_seconds=(datetime.now(UTC) - start).total_seconds(),
        record_id=record.id,
    )


def import_files(
    paths: Iterable[Path],
    store: ExcelDataStore,
    policy: UploadPolicy | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult:
    """Import workbooks one by one and aggregate the results.

    Args:
        paths: Workbook files, processed in the given order
        store: Destination store (mock or live)
        policy: Size/type policy; defaults to UploadPolicy()
        error_log: Receives one ErrorRecord per failed file; flushed at the end

    Returns:
        ImportResult with per-file FileStat entries
    """
    policy = policy or UploadPolicy()
    file_paths = list(paths)
    start_time = datetime.now(UTC)

    stats: list[FileStat] = []
    success = failed = total_bacteria = total_positives = 0

    with ProgressTracker(len(file_paths)) as progress:
        for path in file_paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            try:
                stat = _import_one(path, store, policy)
            except Exception as e:
                # OSError from read_bytes lands here too and reports as a 500-class failure
                _, message = classify_error(e)
                logger.warning(f"{path.name}: {message}")
                if message != str(e):
                    logger.debug(f"{path.name}: {type(e).__name__}: {e}")
                if error_log is not None:
                    error_log.append(
                        ErrorRecord.create(file=path.name, error_type=error_type_for(e), message=str(e))
                    )
                stat = FileStat(
                    file_name=path.name,
                    status=FileStatus.FAILED,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                    error=message,
                )
                failed += 1
            else:
                logger.info(
                    f"{path.name}: stored id={stat.record_id} bacteria={stat.bacteria} "
                    f"phages={stat.phages} positives={stat.positives}"
                )
                success += 1
                total_bacteria += stat.bacteria
                total_positives += stat.positives
            stats.append(stat)
            progress.finish_file(success=stat.status is FileStatus.SUCCESS)

    if error_log is not None:
        try:
            written = error_log.flush()
        except OSError as e:
            logger.warning(f"could not write error log: {e}")
        else:
            if written is not None:
                logger.info(f"error log written: {written}")

    end_time = datetime.now(UTC)
    return ImportResult(
        success_files=success,
        failed_files=failed,
        total_bacteria=total_bacteria,
        total_positives=total_positives,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=stats,
    )
