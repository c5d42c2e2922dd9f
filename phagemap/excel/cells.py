from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

"""Tagged cell values for raw sheet data.

pandas hands back heterogeneous objects (str, int, float, numpy scalars,
NaN, bool, Timestamp). They are folded into CellValue once at load time so
the validator and normalizer only ever deal with TEXT / NUMBER / EMPTY.
"""

__all__ = [
    "CellKind",
    "CellValue",
    "EMPTY_CELL",
]

_DECIMAL_RE = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)
_PREFIXED_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)", re.ASCII)


class CellKind(Enum):
    TEXT = "text"
    NUMBER = "number"
    EMPTY = "empty"


@dataclass(frozen=True)
class CellValue:
    """A single worksheet cell.

    `text_value` is set for TEXT cells (untrimmed, as stored in the workbook) and
    `number` for NUMBER cells. EMPTY cells carry neither.
    """
    kind: CellKind
    text_value: str | None = None
    number: float | None = None

    @staticmethod
    def from_raw(value: Any) -> CellValue:
        """Map a value produced by the pandas Excel readers to a CellValue."""
        if value is None:
            return EMPTY_CELL
        if isinstance(value, str):
            if value == "":
                return EMPTY_CELL
            return CellValue(CellKind.TEXT, text_value=value)
        # bool before the numeric check: bool is an int subclass
        if isinstance(value, (bool, np.bool_)):
            return CellValue(CellKind.NUMBER, number=1.0 if value else 0.0)
        if isinstance(value, numbers.Number):
            if pd.isna(value):
                return EMPTY_CELL
            return CellValue(CellKind.NUMBER, number=float(value))
        if value is pd.NaT:
            return EMPTY_CELL
        if isinstance(value, (datetime, date, time)):
            return CellValue(CellKind.TEXT, text_value=value.isoformat())
        return CellValue(CellKind.TEXT, text_value=str(value))

    @property
    def is_empty(self) -> bool:
        return self.kind is CellKind.EMPTY

    def text(self) -> str:
        """Render the cell as text for use as a name.

        Integral numbers drop the fractional part so a strain typed as 42
        comes back as "42", not "42.0".
        """
        if self.kind is CellKind.TEXT:
            return self.text_value or ""
        if self.kind is CellKind.NUMBER and self.number is not None:
            if math.isfinite(self.number) and self.number.is_integer():
                return str(int(self.number))
            return str(self.number)
        return ""

    def as_number(self) -> float | None:
        """Coerce the cell to a float, or None when it has no numeric reading.

        Text is trimmed and read as a numeric literal: decimal or exponent
        form, "Infinity" with optional sign, or an unsigned 0x / 0o / 0b
        integer. Whitespace-only text reads as 0.0. Anything else, including
        "nan", "inf" and digit groups ("1_000", "1,5"), has no reading.
        """
        if self.kind is CellKind.NUMBER:
            if self.number is None or math.isnan(self.number):
                return None
            return self.number
        if self.kind is CellKind.TEXT:
            stripped = (self.text_value or "").strip()
            if stripped == "":
                return 0.0
            if _PREFIXED_RE.fullmatch(stripped):
                return float(int(stripped, 0))
            if _DECIMAL_RE.fullmatch(stripped):
                return float(stripped)
            return None
        return None


EMPTY_CELL = CellValue(CellKind.EMPTY)
