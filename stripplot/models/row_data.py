from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Row models for the spreadsheet -> strip plot pipeline.

RowData is one spreadsheet row as loaded (column name -> cell value, empty
cells omitted). CleanedRow is the immutable record the cleaner produces from
it: identity columns, natural-log response factors and the per-chemical
median.
"""

__all__ = [
    "RowData",
    "CleanedRow",
    "FEATURE_ID",
    "CHEMICAL_NAME",
    "IONIZATION_MODE",
    "RETENTION_TIME",
    "IDENTITY_COLUMNS",
    "RF_PREFIX",
    "LOG_RF_PREFIX",
    "MEDIAN_LOG_RF",
]

FEATURE_ID = "Feature ID"
CHEMICAL_NAME = "Chemical Name"
IONIZATION_MODE = "Ionization Mode"
RETENTION_TIME = "Retention Time"
IDENTITY_COLUMNS = (FEATURE_ID, CHEMICAL_NAME, IONIZATION_MODE, RETENTION_TIME)

RF_PREFIX = "RF "
LOG_RF_PREFIX = "log RF "
MEDIAN_LOG_RF = "Median Log RF"


@dataclass(frozen=True)
class RowData:
    """A single spreadsheet row after sheet normalization.

    row_number is the spreadsheet row number as a user would see it in the
    workbook (header on row 1 -> first data row is 2).
    """
    row_number: int
    values: dict[str, Any]  # Column name -> cell value (empty cells omitted)


@dataclass(frozen=True)
class CleanedRow:
    """One chemical x ionization-mode row ready for point building."""
    row_number: int
    feature_id: Any
    chemical: str  # identity key, e.g. "Benzene (ESI+)"
    chemical_name: str
    ionization_mode: str
    retention_time: Any
    log_rf: dict[str, float] = field(default_factory=dict)  # "log RF <sample>" -> ln(RF), column order
    median_log_rf: float | None = None

    def as_record(self) -> dict[str, Any]:
        """Column-mapping view of the row, keyed like the source sheet."""
        record: dict[str, Any] = {
            FEATURE_ID: self.feature_id,
            CHEMICAL_NAME: self.chemical,
            IONIZATION_MODE: self.ionization_mode,
            RETENTION_TIME: self.retention_time,
        }
        record.update(self.log_rf)
        record[MEDIAN_LOG_RF] = self.median_log_rf
        return record
