from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .cells import CellValue
from .errors import (
    INSUFFICIENT_HEADER_COLUMNS,
    INSUFFICIENT_ROWS,
    NO_BACTERIA_ROWS,
    NO_PHAGE_NAMES,
    StructureError,
)
from .reader import RawSheet

"""Structural validator for host-range sheets.

Sheet convention:
- row 1 (index 0): metadata, ignored
- row 2 (index 1): header, phage names from column C (index 2) on
- row 3+ (index >= 2): one bacterium per row, name in column A, values from column C
- column B (index 1) is reserved and never read

Checks run in a fixed order and the first failing one is reported.
"""

__all__ = [
    "ValidatedSheet",
    "HEADER_ROW_INDEX",
    "FIRST_DATA_ROW_INDEX",
    "FIRST_VALUE_COLUMN_INDEX",
    "extract_phage_names",
    "select_bacteria_rows",
    "find_structure_violation",
    "validate_structure",
]

HEADER_ROW_INDEX = 1
FIRST_DATA_ROW_INDEX = 2
NAME_COLUMN_INDEX = 0
FIRST_VALUE_COLUMN_INDEX = 2

MIN_ROWS = 3
MIN_HEADER_COLUMNS = 3

Rows = Sequence[Sequence[CellValue]]


@dataclass(frozen=True)
class ValidatedSheet:
    phage_names: tuple[str, ...]
    data_rows: tuple[Sequence[CellValue], ...]  # bacteria rows in sheet order


def _cell_name(cell: CellValue) -> str:
    return cell.text().strip()


def extract_phage_names(header: Sequence[CellValue]) -> list[str]:
    """Trimmed, non-blank phage names from the header row, in column order."""
    names = [_cell_name(c) for c in header[FIRST_VALUE_COLUMN_INDEX:]]
    return [n for n in names if n]


def select_bacteria_rows(rows: Rows) -> list[Sequence[CellValue]]:
    """Data rows whose first column holds a non-blank name."""
    selected = []
    for row in rows[FIRST_DATA_ROW_INDEX:]:
        if not row:
            continue
        if _cell_name(row[NAME_COLUMN_INDEX]):
            selected.append(row)
    return selected


def _too_few_rows(rows: Rows) -> bool:
    return len(rows) < MIN_ROWS


def _header_too_narrow(rows: Rows) -> bool:
    return len(rows[HEADER_ROW_INDEX]) < MIN_HEADER_COLUMNS


def _no_phage_names(rows: Rows) -> bool:
    return not extract_phage_names(rows[HEADER_ROW_INDEX])


def _no_bacteria_rows(rows: Rows) -> bool:
    return not select_bacteria_rows(rows)


_DETAILS = {
    INSUFFICIENT_ROWS: "sheet must have at least 3 rows (metadata, header, data)",
    INSUFFICIENT_HEADER_COLUMNS: "header row (row 2) must have at least 3 columns",
    NO_PHAGE_NAMES: "no phage names found in header row (row 2, columns 3+)",
    NO_BACTERIA_ROWS: "no bacteria names found in column 1 from row 3 on",
}

# Order matters: later predicates assume the earlier ones passed.
STRUCTURE_CHECKS: tuple[tuple[str, Callable[[Rows], bool]], ...] = (
    (INSUFFICIENT_ROWS, _too_few_rows),
    (INSUFFICIENT_HEADER_COLUMNS, _header_too_narrow),
    (NO_PHAGE_NAMES, _no_phage_names),
    (NO_BACTERIA_ROWS, _no_bacteria_rows),
)


def find_structure_violation(rows: Rows) -> str | None:
    """Return the first violated rule phrase, or None if the layout is valid."""
    for rule, violated in STRUCTURE_CHECKS:
        if violated(rows):
            return rule
    return None


def validate_structure(sheet: RawSheet) -> ValidatedSheet:
    """Check the sheet layout and extract the phage header and bacteria rows.

    Raises:
        StructureError: with `rule` set to the first violated rule
    """
    rule = find_structure_violation(sheet.rows)
    if rule is not None:
        raise StructureError(rule, _DETAILS[rule])
    return ValidatedSheet(
        phage_names=tuple(extract_phage_names(sheet.rows[HEADER_ROW_INDEX])),
        data_rows=tuple(select_bacteria_rows(sheet.rows)),
    )
