from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the rejected-file log.

Each record describes one workbook that could not be imported. Serialized
as one JSON object per line with a fixed key set:
timestamp, file, error_type, message.
"""

__all__ = [
    "ErrorRecord",
    "error_type_for",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp, whole seconds, 'Z' suffix
        file: Workbook file name
        error_type: UPPER_SNAKE_CASE classification (DECODE_ERROR, STRUCTURE_ERROR, ...)
        message: Human-readable reason, as surfaced to the uploader
    """
    timestamp: str  # ISO8601 UTC
    file: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")
        return ErrorRecord(timestamp=ts, file=file, error_type=error_type, message=message)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


def error_type_for(exc: BaseException) -> str:
    """UPPER_SNAKE_CASE name derived from the exception class.

    DecodeError -> DECODE_ERROR, UploadRejectedError -> UPLOAD_REJECTED_ERROR.
    Exceptions outside the package map to PROCESSING_ERROR.
    """
    if not type(exc).__module__.startswith("phagemap."):
        return "PROCESSING_ERROR"
    name = type(exc).__name__
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0:
            out.append("_")
        out.append(ch.upper())
    return "".join(out)
