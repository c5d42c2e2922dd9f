from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from ..config.loader import DEFAULT_MAX_FILE_SIZE, UploadConfig
from ..db.excel_data_store import ExcelDataStore, StoreError
from ..excel.errors import (
    INSUFFICIENT_HEADER_COLUMNS,
    INSUFFICIENT_ROWS,
    NO_BACTERIA_ROWS,
    NO_PHAGE_NAMES,
    NO_SHEETS,
    UNREADABLE_WORKBOOK,
    WorkbookError,
)
from .parser import parse_interaction_workbook

"""Upload boundary: size/type policy, error -> status mapping, handlers.

The HTTP layer itself lives elsewhere; these functions return plain
UploadResponse values ({data, message, ok} plus a status code) that any
transport can serialize.
"""

__all__ = [
    "UploadRejectedError",
    "UploadPolicy",
    "UploadResponse",
    "CLIENT_ERROR_PHRASES",
    "INTERNAL_ERROR_MESSAGE",
    "check_upload",
    "classify_error",
    "handle_upload",
    "rename_upload",
    "list_uploads",
]

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME = "application/vnd.ms-excel"

INTERNAL_ERROR_MESSAGE = "Internal server error while processing the Excel file."

# WorkbookError messages containing one of these are the uploader's fault
CLIENT_ERROR_PHRASES = (
    INSUFFICIENT_ROWS,
    INSUFFICIENT_HEADER_COLUMNS,
    NO_PHAGE_NAMES,
    NO_BACTERIA_ROWS,
    UNREADABLE_WORKBOOK,
    NO_SHEETS,
)


class UploadRejectedError(Exception):
    """Raised when an upload fails the size/type policy before parsing."""


@dataclass(frozen=True)
class UploadPolicy:
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    allowed_extensions: tuple[str, ...] = (".xlsx", ".xls")
    allowed_mime_types: tuple[str, ...] = (XLSX_MIME, XLS_MIME)

    @staticmethod
    def from_config(cfg: UploadConfig) -> UploadPolicy:
        return UploadPolicy(
            max_file_size=cfg.max_file_size,
            allowed_extensions=tuple(e.lower() for e in cfg.allowed_extensions),
        )

    @property
    def max_size_mb(self) -> int:
        return round(self.max_file_size / (1024 * 1024))


@dataclass(frozen=True)
class UploadResponse:
    status: int
    ok: bool
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "message": self.message, "ok": self.ok}


def check_upload(
    file_name: str | None, size: int, policy: UploadPolicy, mimetype: str | None = None
) -> None:
    """Apply the upload policy to a file before it is parsed.

    Raises:
        UploadRejectedError: missing file, wrong type, empty or too large
    """
    if not file_name or not file_name.strip():
        raise UploadRejectedError("No file uploaded")
    ext = PurePath(file_name).suffix.lower()
    type_ok = ext in policy.allowed_extensions
    if mimetype is not None:
        type_ok = type_ok and mimetype in policy.allowed_mime_types
    if not type_ok:
        raise UploadRejectedError(f"Only {', '.join(policy.allowed_extensions)} files are allowed!")
    if size <= 0:
        raise UploadRejectedError("File size must be positive")
    if size > policy.max_file_size:
        raise UploadRejectedError(
            f"File size too large. Maximum allowed size is {policy.max_size_mb}MB."
        )


def classify_error(exc: BaseException) -> tuple[int, str]:
    """Map a failure to (HTTP status, user-facing message).

    Bad input -> 400 with the specific message; anything else -> 500 with a
    generic message so internals are not leaked.
    """
    if isinstance(exc, UploadRejectedError):
        return 400, str(exc)
    if isinstance(exc, WorkbookError):
        message = str(exc)
        if any(phrase in message for phrase in CLIENT_ERROR_PHRASES):
            return 400, message
    return 500, INTERNAL_ERROR_MESSAGE


def handle_upload(
    buffer: bytes | None,
    file_name: str | None,
    store: ExcelDataStore,
    policy: UploadPolicy | None = None,
    mimetype: str | None = None,
) -> UploadResponse:
    """Check, parse and store one uploaded workbook."""
    policy = policy or UploadPolicy()
    try:
        if buffer is None:
            raise UploadRejectedError("No file uploaded")
        check_upload(file_name, len(buffer), policy, mimetype)
        parsed = parse_interaction_workbook(buffer)
        store.save(parsed, file_name)
    except Exception as e:
        # everything surfaces as a response; classify_error decides 400 vs 500
        status, message = classify_error(e)
        if status >= 500:
            logger.error(f"upload '{file_name}' failed: {e}")
        else:
            logger.info(f"upload '{file_name}' rejected: {message}")
        return UploadResponse(status=status, ok=False, message=message)

    logger.info(
        f"upload '{file_name}' stored bacteria={len(parsed.bacteria_names)} "
        f"phages={len(parsed.phage_names)}"
    )
    return UploadResponse(
        status=200, ok=True, message="Excel file processed successfully", data=f"filename: {file_name}"
    )


def rename_upload(store: ExcelDataStore, old_name: str | None, new_name: str | None) -> UploadResponse:
    if not old_name or not old_name.strip():
        return UploadResponse(status=400, ok=False, message="Invalid file name provided.")
    if not new_name or not new_name.strip():
        return UploadResponse(status=400, ok=False, message="Invalid new file name provided.")
    try:
        updated = store.update_file_name(old_name, new_name.strip())
    except StoreError as e:
        logger.error(f"rename '{old_name}' failed: {e}")
        return UploadResponse(
            status=500, ok=False, message="Internal server error while updating file name."
        )
    if not updated:
        return UploadResponse(status=404, ok=False, message="File not found.")
    return UploadResponse(status=200, ok=True, message="File name updated successfully.")


def list_uploads(store: ExcelDataStore) -> UploadResponse:
    try:
        files = [r.to_dict() for r in store.list_all()]
    except StoreError as e:
        logger.error(f"listing files failed: {e}")
        return UploadResponse(
            status=500, ok=False, message="Internal server error while fetching Excel files."
        )
    return UploadResponse(
        status=200, ok=True, message="All files fetched successfully", data={"files": files}
    )
