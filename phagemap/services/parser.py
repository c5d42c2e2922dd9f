from __future__ import annotations

import logging

from ..excel.normalizer import normalize_validated
from ..excel.reader import read_workbook_bytes
from ..excel.validator import validate_structure
from ..models.interaction_data import ParsedInteractionData

"""Host-range workbook parsing pipeline.

Sheet loader -> structural validator -> matrix normalizer, run in sequence.
Each stage raises on failure (DecodeError / StructureError) and nothing
after it runs. The function holds no state between calls.
"""

__all__ = [
    "parse_interaction_workbook",
]

logger = logging.getLogger(__name__)


def parse_interaction_workbook(buffer: bytes) -> ParsedInteractionData:
    """Parse a phage host-range workbook into a binary interaction matrix.

    Args:
        buffer: Raw xlsx/xls bytes

    Returns:
        ParsedInteractionData for the first sheet

    Raises:
        DecodeError: buffer is not a workbook, or has no sheets
        StructureError: first sheet does not follow the expected layout
    """
    sheet = read_workbook_bytes(buffer)
    logger.debug(f"loaded sheet '{sheet.sheet_name}' rows={sheet.row_count}")

    validated = validate_structure(sheet)
    logger.debug(
        f"validated sheet '{sheet.sheet_name}' phages={len(validated.phage_names)} "
        f"bacteria_rows={len(validated.data_rows)}"
    )

    parsed = normalize_validated(validated)
    logger.debug(f"normalized matrix shape={parsed.shape} positives={parsed.positive_count}")
    return parsed
