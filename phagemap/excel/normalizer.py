from __future__ import annotations

from collections.abc import Sequence

from ..models.interaction_data import ParsedInteractionData
from .cells import CellValue
from .validator import FIRST_VALUE_COLUMN_INDEX, NAME_COLUMN_INDEX, ValidatedSheet

"""Matrix normalizer: validated rows -> binary interaction matrix.

Binarization:
- empty cell                       -> 0
- numeric reading equal to zero    -> 0
- numeric reading not equal to 0   -> 1
- no numeric reading (e.g. "yes")  -> 0

Malformed cells never raise; they read as "no interaction".
"""

__all__ = [
    "binarize",
    "normalize_row",
    "normalize_matrix",
    "normalize_validated",
]


def binarize(cell: CellValue) -> int:
    if cell.is_empty:
        return 0
    value = cell.as_number()
    if value is None or value == 0:
        return 0
    return 1


def normalize_row(row: Sequence[CellValue], width: int) -> list[int]:
    """Binarize the value columns of one data row, padded/truncated to `width`."""
    span = row[FIRST_VALUE_COLUMN_INDEX:FIRST_VALUE_COLUMN_INDEX + width]
    values = [binarize(c) for c in span]
    # short (jagged) rows
    values.extend([0] * (width - len(values)))
    return values


def normalize_matrix(
    phage_names: Sequence[str], data_rows: Sequence[Sequence[CellValue]]
) -> ParsedInteractionData:
    """Build ParsedInteractionData from the phage header and bacteria rows.

    Row order is kept as given; bacteria_names[i] and interactions[i] always
    come from the same source row.
    """
    width = len(phage_names)
    bacteria_names: list[str] = []
    interactions: list[tuple[int, ...]] = []
    for row in data_rows:
        bacteria_names.append(row[NAME_COLUMN_INDEX].text().strip())
        interactions.append(tuple(normalize_row(row, width)))
    return ParsedInteractionData(
        bacteria_names=tuple(bacteria_names),
        phage_names=tuple(phage_names),
        interactions=tuple(interactions),
    )


def normalize_validated(sheet: ValidatedSheet) -> ParsedInteractionData:
    return normalize_matrix(sheet.phage_names, sheet.data_rows)
