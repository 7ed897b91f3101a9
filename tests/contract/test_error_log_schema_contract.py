from __future__ import annotations

import json
import re
from pathlib import Path

from networking_sync.logging.error_log import ErrorLogBuffer
from networking_sync.models.error_record import ErrorRecord

EXPECTED_KEYS = {"timestamp", "spreadsheet", "sheet", "row", "error_type", "message"}
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}")


def test_error_log_lines_have_fixed_keys(tmp_path: Path):
    buf = ErrorLogBuffer(directory=tmp_path)
    buf.append(ErrorRecord.create("sheet-1", "Dashboard", -1, "WRITE_ERROR", "quota exceeded"))
    buf.append(ErrorRecord.create("sheet-2", "<RUN_LEVEL>", -1, "FETCH_ERROR", "forbidden"))
    path = buf.flush()

    assert path is not None
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    for line in lines:
        entry = json.loads(line)
        assert set(entry) == EXPECTED_KEYS
        assert TIMESTAMP_RE.match(entry["timestamp"])
        assert isinstance(entry["row"], int)


def test_error_log_keeps_non_ascii_message(tmp_path: Path):
    buf = ErrorLogBuffer(directory=tmp_path)
    buf.append(ErrorRecord.create("s", "シート1", -1, "SCHEMA_ERROR", "email 列がありません"))
    path = buf.flush()
    entry = json.loads(path.read_text(encoding="utf-8"))
    assert entry["sheet"] == "シート1"
    assert entry["message"] == "email 列がありません"
