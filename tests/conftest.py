# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Callable

import pandas as pd
import pytest

from stripplot.logging.init import reset_logging
from stripplot.models.row_data import RowData


@pytest.fixture(autouse=True)
def _fresh_logging():
    # the handler binds sys.stdout at setup time; rebuild it for capsys
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("STRIPPLOT_INPUT", raising=False)
        monkeypatch.delenv("STRIPPLOT_OUTPUT_DIR", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input_path: ./data
output_directory: ./output
sheet_name: Sheet1
default_sort: ml
default_mode: "+"
include_plotlyjs: cdn
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "stripplot.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def sheet_rows(records: list[dict[str, Any]]) -> list[list[Any]]:
    """Header + data rows from dict records (column order of first appearance)."""
    columns: list[str] = []
    for rec in records:
        for key in rec:
            if key not in columns:
                columns.append(key)
    return [columns] + [[rec.get(c) for c in columns] for rec in records]


@pytest.fixture()
def as_sheet() -> Callable[[list[dict[str, Any]]], list[list[Any]]]:
    return sheet_rows


@pytest.fixture()
def make_workbook() -> Callable[..., Path]:
    def _make(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path
    return _make


@pytest.fixture()
def qnta_records() -> list[dict[str, Any]]:
    """Small qNTA-like sheet: two chemicals in both modes, one ESI- only."""
    return [
        {"Feature ID": 1, "Chemical Name": "Benzene", "Ionization Mode": "ESI+", "Retention Time": 5.0,
         "Formula": "C6H6", "RF s1_": 10.0, "RF s2": 20.0},
        {"Feature ID": 2, "Chemical Name": "Benzene", "Ionization Mode": "ESI-", "Retention Time": 3.0,
         "Formula": "C6H6", "RF s1_": 5.0, "RF s2": None},
        {"Feature ID": 3, "Chemical Name": "Toluene", "Ionization Mode": "ESI+", "Retention Time": 7.5,
         "Formula": "C7H8", "RF s1_": 1.0, "RF s2": 2.0},
        {"Feature ID": 4, "Chemical Name": "Phenol", "Ionization Mode": "ESI-", "Retention Time": 1.2,
         "Formula": "C6H6O", "RF s1_": 400.0, "RF s2": 800.0},
    ]


@pytest.fixture()
def qnta_workbook(temp_workdir: Path, make_workbook, qnta_records) -> Path:
    return make_workbook(temp_workdir / "data" / "qnta.xlsx", {"Sheet1": sheet_rows(qnta_records)})


@pytest.fixture()
def example_rows() -> list[RowData]:
    """The two-row example: one chemical measured in both modes."""
    return [
        RowData(2, {"Chemical Name": "A", "Ionization Mode": "ESI+", "RF s1": 10, "RF s2": 20, "Retention Time": 5}),
        RowData(3, {"Chemical Name": "A", "Ionization Mode": "ESI-", "RF s1": 5, "Retention Time": 3}),
    ]
