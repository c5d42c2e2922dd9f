from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .interaction_data import ParsedInteractionData

"""ExcelDataRecord: a stored host-range matrix.

One record per uploaded workbook. The id and created_at come from the
store (database defaults in live mode, the in-memory counter in mock mode).
"""

__all__ = [
    "ExcelDataRecord",
]


@dataclass(frozen=True)
class ExcelDataRecord:
    """Persisted interaction matrix plus its upload label."""
    id: int                              # server-assigned
    file_name: str                       # original upload name, unique per store
    bacteria: list[str]                  # row labels
    phages: list[str]                    # column labels
    interactions: list[list[int]]        # bacteria x phages, 0/1
    created_at: datetime                 # server-assigned (UTC)

    @staticmethod
    def from_parsed(
        record_id: int, file_name: str, parsed: ParsedInteractionData, created_at: datetime
    ) -> ExcelDataRecord:
        return ExcelDataRecord(
            id=record_id,
            file_name=file_name,
            bacteria=list(parsed.bacteria_names),
            phages=list(parsed.phage_names),
            interactions=[list(r) for r in parsed.interactions],
            created_at=created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "bacteria": self.bacteria,
            "phages": self.phages,
            "interactions": self.interactions,
            "createdAt": self.created_at.isoformat().replace("+00:00", "Z"),
        }
