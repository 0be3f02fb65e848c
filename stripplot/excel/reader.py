from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from stripplot.models.row_data import IDENTITY_COLUMNS, RowData

"""Workbook reader.

Reading happens in two steps, as in the rest of the tool:
1. read_excel_file: raw, header-less DataFrames keyed by sheet name
2. normalize_sheet: apply the header row, drop empty rows/cells and build
   RowData records

load_rows combines both for the single sheet the strip plot needs.
"""

__all__ = [
    "SpreadsheetReadError",
    "FormatError",
    "MissingSheetError",
    "MissingColumnsError",
    "SheetHeaderError",
    "SheetData",
    "read_excel_file",
    "normalize_sheet",
    "load_rows",
]

REQUIRED_COLUMNS = set(IDENTITY_COLUMNS)


class SpreadsheetReadError(OSError):
    """Raised when the workbook is missing or cannot be opened."""


class FormatError(Exception):
    """Base class for workbooks that open but do not have the expected layout."""


class MissingSheetError(FormatError):
    """Raised when the requested sheet is not in the workbook."""


class MissingColumnsError(FormatError):
    """Raised when required columns are missing from the sheet header."""


class SheetHeaderError(FormatError):
    """Raised when the sheet has no row at the configured header position."""


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[RowData]


def read_excel_file(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, pd.DataFrame]:
    """Read a workbook returning raw (header-less) DataFrames keyed by sheet name.

    Parameters
    ----------
    path: workbook path
    target_sheets: restrict to these sheet names (None -> all sheets)
    """
    path = Path(path)
    if not path.is_file():
        raise SpreadsheetReadError(f"workbook not found: {path}")
    wanted = set(target_sheets) if target_sheets is not None else None

    dfs: dict[str, pd.DataFrame] = {}
    try:
        with pd.ExcelFile(path) as xls:
            for name in xls.sheet_names:
                if wanted is not None and str(name) not in wanted:
                    continue
                dfs[str(name)] = xls.parse(name, header=None)
    except Exception as e:  # openpyxl / zipfile raise their own types for corrupt files
        raise SpreadsheetReadError(f"cannot read workbook {path}: {e}") from e
    return dfs


def _clean_cell(val: Any) -> Any:
    """Normalize one cell. Returns None for cells that count as empty."""
    if val is None:
        return None
    if isinstance(val, str):
        stripped = val.strip()
        return stripped if stripped else None
    if pd.isna(val):
        return None
    return val


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    header_row: int = 1,
    expected_columns: set[str] | None = None,
) -> SheetData:
    """Normalize a raw DataFrame using `header_row` (1-based) as the header.

    Steps:
    1. Validate the header row exists
    2. Extract column names from it (blank header cells are dropped)
    3. Rows below become RowData; fully empty rows are skipped and empty
       cells are left out of the row mapping
    4. Validate expected columns subset
    """
    if header_row < 1:
        raise ValueError(f"header_row must be >= 1, got {header_row}")
    if df.shape[0] < header_row:
        raise SheetHeaderError(f"sheet '{sheet_name}' has no header at row {header_row}")

    header_series = df.iloc[header_row - 1]
    columns = [_clean_cell(c) for c in header_series.tolist()]
    columns = [str(c) if c is not None else None for c in columns]

    if expected_columns is not None:
        missing = expected_columns - {c for c in columns if c is not None}
        if missing:
            raise MissingColumnsError(f"sheet '{sheet_name}' missing columns: {sorted(missing)}")

    data_part = df.iloc[header_row:]
    rows: list[RowData] = []
    for offset, (_, raw) in enumerate(data_part.iterrows()):
        values: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist()):
            if col is None:
                continue
            cell = _clean_cell(val)
            if cell is None:
                continue
            values[col] = cell
        if not values:
            continue
        rows.append(RowData(row_number=header_row + 1 + offset, values=values))

    return SheetData(sheet_name=sheet_name, columns=[c for c in columns if c is not None], rows=rows)


def load_rows(path: Path, sheet_name: str = "Sheet1", *, header_row: int = 1) -> list[RowData]:
    """Load the data rows of one sheet, checking the required columns.

    Raises:
        SpreadsheetReadError: workbook missing or unreadable
        MissingSheetError: `sheet_name` not present
        MissingColumnsError / SheetHeaderError: sheet layout not usable
    """
    dfs = read_excel_file(path, target_sheets=[sheet_name])
    if sheet_name not in dfs:
        raise MissingSheetError(f"sheet '{sheet_name}' not found in {Path(path).name}")
    sheet = normalize_sheet(
        dfs[sheet_name], sheet_name, header_row=header_row, expected_columns=REQUIRED_COLUMNS
    )
    return sheet.rows
