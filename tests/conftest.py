# Shared pytest fixtures
from __future__ import annotations

import io
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from phagemap.logging.init import LOGGER_NAME, reset_logging


def build_workbook(sheets: dict[str, list[list[object]]]) -> bytes:
    """Write rows (no header, no index) to an in-memory xlsx, one sheet per key."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return buf.getvalue()


@pytest.fixture(autouse=True)
def _clean_logging(monkeypatch):
    monkeypatch.delenv("MAX_FILE_SIZE", raising=False)
    monkeypatch.delenv("DISABLE_DB_CONNECT", raising=False)
    reset_logging()
    yield
    app_logger = logging.getLogger(LOGGER_NAME)
    for h in app_logger.handlers[:]:
        app_logger.removeHandler(h)
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def make_workbook() -> Callable[..., bytes]:
    """Factory: make_workbook(rows) -> xlsx bytes with a single sheet."""
    def _make(rows: list[list[object]], sheet_name: str = "HostRange") -> bytes:
        return build_workbook({sheet_name: rows})
    return _make


@pytest.fixture()
def make_multi_workbook() -> Callable[[dict[str, list[list[object]]]], bytes]:
    return build_workbook


@pytest.fixture()
def host_range_rows() -> list[list[object]]:
    return [
        ["Host range assay 2024-03", None, None, None, None],
        ["Strain", "Cluster", "phiA1", "phiB2", "T4-like"],
        ["E. coli K12", "A", 1, 0, 1],
        ["E. coli B", "A", 0, 0, 1],
        ["S. enterica LT2", "B", 1, 1, 0],
    ]


@pytest.fixture()
def host_range_bytes(make_workbook, host_range_rows) -> bytes:
    return make_workbook(host_range_rows)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
upload:
  max_file_size: 1048576
  allowed_extensions: [".xlsx", ".xls"]
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: phages
  table: excel_data
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "phagemap.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def data_workbooks(temp_workdir: Path, host_range_rows) -> list[Path]:
    """Two valid workbooks and one broken one in ./data."""
    files = []
    for name in ["plate1.xlsx", "plate2.xlsx"]:
        f = temp_workdir / "data" / name
        f.write_bytes(build_workbook({"HostRange": host_range_rows}))
        files.append(f)
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"this is not a workbook")
    files.append(bad)
    return files
