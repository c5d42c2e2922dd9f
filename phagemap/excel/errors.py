from __future__ import annotations

"""Workbook parsing errors.

Both kinds are terminal for a parse: the caller gets either a complete
ParsedInteractionData or one of these, never partial output.
"""

__all__ = [
    "WorkbookError",
    "DecodeError",
    "StructureError",
    "INSUFFICIENT_ROWS",
    "INSUFFICIENT_HEADER_COLUMNS",
    "NO_PHAGE_NAMES",
    "NO_BACTERIA_ROWS",
    "UNREADABLE_WORKBOOK",
    "NO_SHEETS",
]

# Rule phrases. Messages always start with one of these so the upload
# boundary can recognise a bad-input failure by text alone.
INSUFFICIENT_ROWS = "insufficient rows"
INSUFFICIENT_HEADER_COLUMNS = "insufficient header columns"
NO_PHAGE_NAMES = "no phage names"
NO_BACTERIA_ROWS = "no bacteria rows"
UNREADABLE_WORKBOOK = "unreadable workbook"
NO_SHEETS = "no sheets"


class WorkbookError(Exception):
    """Base class for failures caused by the uploaded workbook itself."""

    def __init__(self, rule: str, detail: str | None = None) -> None:
        self.rule = rule
        self.detail = detail
        message = rule if not detail else f"{rule}: {detail}"
        super().__init__(message)


class DecodeError(WorkbookError):
    """Raised when the buffer is not a readable workbook or has no sheets."""


class StructureError(WorkbookError):
    """Raised when the first sheet does not follow the metadata/header/data layout."""
