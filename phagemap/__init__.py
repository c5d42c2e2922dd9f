"""phagemap: phage host-range workbook -> binary interaction matrix."""

from .excel.errors import DecodeError, StructureError, WorkbookError
from .models.interaction_data import ParsedInteractionData
from .services.parser import parse_interaction_workbook

__version__ = "0.1.0"

__all__ = [
    "parse_interaction_workbook",
    "ParsedInteractionData",
    "WorkbookError",
    "DecodeError",
    "StructureError",
]
