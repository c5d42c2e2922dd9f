from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering for import runs."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for an import run.

    Format:
    SUMMARY files={total} success={success} failed={failed} bacteria={rows}
    positives={ones} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = ImportResult(
        ...     success_files=2, failed_files=1, total_bacteria=40,
        ...     total_positives=123, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=3 success=2 failed=1 bacteria=40 positives=123 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={result.total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"bacteria={result.total_bacteria} "
        f"positives={result.total_positives} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
