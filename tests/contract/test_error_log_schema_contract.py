from __future__ import annotations

import json
import re
from pathlib import Path

from stripplot.cli import main as cli_main

"""Error log (JSON Lines) contract: one object per line, fixed key set."""

REQUIRED_KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}
TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")
ERROR_TYPE = re.compile(r"^[A-Z]+(_[A-Z]+)*$")


def _run_and_read_log(temp_workdir: Path) -> list[dict]:
    cli_main([])
    [log_file] = list((temp_workdir / "logs").glob("errors-*.log"))
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", log_file.name)
    return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]


def test_error_log_records_follow_schema(write_config, temp_workdir: Path, make_workbook, as_sheet, qnta_records):
    records = qnta_records + [
        {"Chemical Name": "Bad", "Ionization Mode": "ESI-", "Retention Time": 1.0, "RF s1_": -2.0}
    ]
    make_workbook(temp_workdir / "data" / "a.xlsx", {"Sheet1": as_sheet(records)})
    (temp_workdir / "data" / "b.xlsx").write_bytes(b"garbage")

    entries = _run_and_read_log(temp_workdir)

    assert len(entries) == 2
    for entry in entries:
        assert set(entry) == REQUIRED_KEYS
        assert TIMESTAMP.match(entry["timestamp"])
        assert ERROR_TYPE.match(entry["error_type"])
        assert isinstance(entry["row"], int)
        assert entry["sheet"] == "Sheet1"


def test_file_level_errors_use_unknown_row(write_config, temp_workdir: Path):
    (temp_workdir / "data" / "b.xlsx").write_bytes(b"garbage")
    [entry] = _run_and_read_log(temp_workdir)
    assert entry["row"] == -1
    assert entry["error_type"] == "READ_ERROR"


def test_row_level_errors_use_spreadsheet_row(write_config, temp_workdir: Path, make_workbook, as_sheet, qnta_records):
    records = qnta_records[:1] + [
        {"Chemical Name": "Bad", "Ionization Mode": "ESI+", "Retention Time": 1.0, "RF s1_": 0}
    ]
    make_workbook(temp_workdir / "data" / "a.xlsx", {"Sheet1": as_sheet(records)})
    [entry] = _run_and_read_log(temp_workdir)
    # header is row 1, first data row is 2
    assert entry["row"] == 3
    assert entry["error_type"] == "INVALID_VALUE"
