from __future__ import annotations

import io
import struct
import zipfile
from dataclasses import dataclass, field

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException
from xlrd import XLRDError
from xlrd.compdoc import CompDocError

from .cells import CellValue
from .errors import NO_SHEETS, UNREADABLE_WORKBOOK, DecodeError

"""Sheet loader: workbook bytes -> RawSheet.

Only the first sheet of the workbook is read. The sheet is read without a
header (the metadata/header/data convention is applied later by the
validator) and without pandas' default NA string conversion, so a cell
holding the text "NA" stays text instead of turning into a missing value.

Only malformed input becomes DecodeError. Anything else raised by the engines
(missing engine, MemoryError, ...) propagates as an internal failure.
"""

__all__ = [
    "RawSheet",
    "read_workbook_bytes",
]

# Errors pandas and its engines raise for bytes that are not a usable workbook:
# format sniffing (ValueError), corrupt zip containers (BadZipFile, KeyError for
# missing parts), openpyxl (InvalidFileException), xlrd (XLRDError, CompDocError,
# struct.error on truncated BIFF records).
_MALFORMED_WORKBOOK_ERRORS = (
    ValueError,
    KeyError,
    zipfile.BadZipFile,
    InvalidFileException,
    XLRDError,
    CompDocError,
    struct.error,
    EOFError,
)


@dataclass
class RawSheet:
    sheet_name: str
    rows: list[list[CellValue]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)


def _frame_to_rows(df: pd.DataFrame) -> list[list[CellValue]]:
    rows: list[list[CellValue]] = []
    for raw in df.itertuples(index=False, name=None):
        cells = [CellValue.from_raw(v) for v in raw]
        # pandas pads short rows out to the sheet width; drop that padding so
        # a jagged row stays jagged
        while cells and cells[-1].is_empty:
            cells.pop()
        rows.append(cells)
    return rows


def read_workbook_bytes(buffer: bytes) -> RawSheet:
    """Decode a workbook buffer and return its first sheet as a RawSheet.

    Parameters
    ----------
    buffer: xlsx / xls file contents

    Raises
    ------
    DecodeError: the buffer is not a workbook pandas can open, or the
        workbook has no sheets.
    """
    if not buffer:
        raise DecodeError(UNREADABLE_WORKBOOK, "empty buffer")
    try:
        xls = pd.ExcelFile(io.BytesIO(buffer))
    except _MALFORMED_WORKBOOK_ERRORS as e:
        raise DecodeError(UNREADABLE_WORKBOOK, str(e) or type(e).__name__) from e

    with xls:
        if not xls.sheet_names:
            raise DecodeError(NO_SHEETS, "workbook contains no sheets")
        first = xls.sheet_names[0]
        try:
            df = xls.parse(first, header=None, keep_default_na=False, na_values=None)
        except _MALFORMED_WORKBOOK_ERRORS as e:
            raise DecodeError(UNREADABLE_WORKBOOK, str(e) or type(e).__name__) from e

    return RawSheet(sheet_name=str(first), rows=_frame_to_rows(df))
