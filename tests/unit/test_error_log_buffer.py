from __future__ import annotations

import json
from pathlib import Path

from phagemap.logging.error_log import ErrorLogBuffer
from phagemap.models.error_record import ErrorRecord


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(ErrorRecord.create(file="a.xlsx", error_type="DECODE_ERROR", message="unreadable workbook"))
    buf.append(ErrorRecord.create(file="b.xlsx", error_type="STRUCTURE_ERROR", message="no phage names"))
    assert len(buf.records) == 2

    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent == tmp_path / "logs"
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [line["file"] for line in lines] == ["a.xlsx", "b.xlsx"]
    assert buf.records == []


def test_flush_empty_buffer_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_second_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path)
    buf.append(ErrorRecord.create(file="a.xlsx", error_type="X", message="1"))
    first = buf.flush()
    buf.append(ErrorRecord.create(file="b.xlsx", error_type="X", message="2"))
    second = buf.flush()
    assert first == second
    assert len(second.read_text(encoding="utf-8").splitlines()) == 2


def test_default_dir_is_relative_logs(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create(file="a.xlsx", error_type="X", message="1"))
    path = buf.flush()
    assert path.resolve().parent == (temp_workdir / "logs").resolve()
