from __future__ import annotations

import itertools
import re
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

import psycopg2
from psycopg2.extras import Json

from phagemap.models.excel_record import ExcelDataRecord
from phagemap.models.interaction_data import ParsedInteractionData

"""Storage for parsed host-range matrices.

Live mode runs plain SQL through a psycopg2 cursor; the caller owns the
connection and the transaction boundary (see cli._db_connection).
Mock mode (cursor=None) keeps records on the instance, for dry runs and tests.

Table layout:
    id           SERIAL PRIMARY KEY
    file_name    TEXT UNIQUE NOT NULL
    bacteria     JSONB  (list[str])
    phages       JSONB  (list[str])
    interactions JSONB  (list[list[int]])
    created_at   TIMESTAMPTZ DEFAULT now()
"""

__all__ = [
    "StoreError",
    "ExcelDataStore",
]

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_COLUMNS = "id, file_name, bacteria, phages, interactions, created_at"


class StoreError(Exception):
    pass


class ExcelDataStore:
    """Create / list / rename / delete stored interaction matrices."""

    def __init__(self, cursor: Any = None, table: str = "excel_data") -> None:
        if not _TABLE_NAME_RE.match(table):
            raise StoreError(f"invalid table name: {table!r}")
        self.cursor = cursor
        self.table = table
        self._records: list[ExcelDataRecord] = []
        self._ids = itertools.count(1)

    @property
    def is_mock(self) -> bool:
        return self.cursor is None

    def _execute(self, sql: str, params: tuple[Any, ...] | None = None) -> None:
        try:
            self.cursor.execute(sql, params)
        except psycopg2.Error as e:
            raise StoreError(str(e).strip() or type(e).__name__) from e

    @staticmethod
    def _row_to_record(row: tuple[Any, ...]) -> ExcelDataRecord:
        rid, file_name, bacteria, phages, interactions, created_at = row
        return ExcelDataRecord(
            id=rid,
            file_name=file_name,
            bacteria=list(bacteria),
            phages=list(phages),
            interactions=[list(r) for r in interactions],
            created_at=created_at,
        )

    def ensure_table(self) -> None:
        if self.is_mock:
            return
        self._execute(
            f"CREATE TABLE IF NOT EXISTS {self.table} ("
            "id SERIAL PRIMARY KEY, "
            "file_name TEXT UNIQUE NOT NULL, "
            "bacteria JSONB NOT NULL, "
            "phages JSONB NOT NULL, "
            "interactions JSONB NOT NULL, "
            "created_at TIMESTAMPTZ NOT NULL DEFAULT now())"
        )

    def save(self, parsed: ParsedInteractionData, file_name: str) -> ExcelDataRecord:
        """Persist one parsed workbook under `file_name`.

        Raises:
            StoreError: duplicate file name or driver failure
        """
        if self.is_mock:
            if any(r.file_name == file_name for r in self._records):
                raise StoreError(f"duplicate file name: {file_name}")
            record = ExcelDataRecord.from_parsed(next(self._ids), file_name, parsed, datetime.now(UTC))
            self._records.append(record)
            return record

        self._execute(
            f"INSERT INTO {self.table} (file_name, bacteria, phages, interactions) "
            f"VALUES (%s, %s, %s, %s) RETURNING id, created_at",
            (
                file_name,
                Json(list(parsed.bacteria_names)),
                Json(list(parsed.phage_names)),
                Json([list(r) for r in parsed.interactions]),
            ),
        )
        row = self.cursor.fetchone()
        if row is None:
            raise StoreError(f"insert returned no row for {file_name}")
        return ExcelDataRecord.from_parsed(row[0], file_name, parsed, row[1])

    def list_all(self) -> list[ExcelDataRecord]:
        """All records, newest first."""
        if self.is_mock:
            # ids break ties between records created within the same clock tick
            return sorted(self._records, key=lambda r: (r.created_at, r.id), reverse=True)
        self._execute(f"SELECT {_COLUMNS} FROM {self.table} ORDER BY created_at DESC, id DESC")
        return [self._row_to_record(r) for r in self.cursor.fetchall()]

    def get_by_file_name(self, file_name: str) -> ExcelDataRecord | None:
        if self.is_mock:
            return next((r for r in self._records if r.file_name == file_name), None)
        self._execute(f"SELECT {_COLUMNS} FROM {self.table} WHERE file_name = %s", (file_name,))
        row = self.cursor.fetchone()
        return self._row_to_record(row) if row is not None else None

    def update_file_name(self, old_name: str, new_name: str) -> bool:
        """Rename a record. Returns False when no record has `old_name`."""
        if self.is_mock:
            for i, r in enumerate(self._records):
                if r.file_name == old_name:
                    if old_name != new_name and any(o.file_name == new_name for o in self._records):
                        raise StoreError(f"duplicate file name: {new_name}")
                    self._records[i] = replace(r, file_name=new_name)
                    return True
            return False
        self._execute(
            f"UPDATE {self.table} SET file_name = %s WHERE file_name = %s", (new_name, old_name)
        )
        return self.cursor.rowcount > 0

    def delete(self, record_id: int) -> bool:
        if self.is_mock:
            before = len(self._records)
            self._records = [r for r in self._records if r.id != record_id]
            return len(self._records) < before
        self._execute(f"DELETE FROM {self.table} WHERE id = %s", (record_id,))
        return self.cursor.rowcount > 0
