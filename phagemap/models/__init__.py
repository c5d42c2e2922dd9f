"""Domain models for the phage host-range importer.

ParsedInteractionData is the parser output; ExcelDataRecord is what the
store keeps; ErrorRecord / ImportResult describe batch import runs.
"""

from .error_record import ErrorRecord
from .excel_record import ExcelDataRecord
from .import_result import FileStat, FileStatus, ImportResult
from .interaction_data import ParsedInteractionData

__all__ = [
    # Parser output
    "ParsedInteractionData",
    # Storage
    "ExcelDataRecord",
    # Import run bookkeeping
    "ErrorRecord",
    "FileStat",
    "FileStatus",
    "ImportResult",
]
