"""Workbook parsing stages: loader, structural validator, matrix normalizer."""

from .errors import DecodeError, StructureError, WorkbookError

__all__ = [
    "WorkbookError",
    "DecodeError",
    "StructureError",
]
