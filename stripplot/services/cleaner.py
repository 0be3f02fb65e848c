from __future__ import annotations

import math
import statistics
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from ..models.config_models import InvalidValuePolicy
from ..models.row_data import (
    CHEMICAL_NAME,
    FEATURE_ID,
    IONIZATION_MODE,
    RETENTION_TIME,
    RF_PREFIX,
    CleanedRow,
    RowData,
)

"""Row cleaning: raw spreadsheet rows -> CleanedRow records.

For every row:
- columns other than the four identity columns and the "RF <sample>"
  columns are dropped
- the chemical-identity key "<Chemical Name> (<Ionization Mode>)" is built
- each "RF <sample>" value becomes "log RF <sample>" = ln(value)

A second pass attaches to every row the median of all log RF values sharing
its identity key. Input rows are never modified.
"""

__all__ = [
    "InvalidValueError",
    "RejectedRow",
    "CleanResult",
    "chemical_key",
    "clean",
]


class InvalidValueError(ValueError):
    """A cell that makes its row unusable.

    Either a response factor whose natural log is undefined or a missing
    chemical name / ionization mode.
    """

    def __init__(self, row_number: int, column: str, value: Any, reason: str) -> None:
        self.row_number = row_number
        self.column = column
        self.value = value
        self.reason = reason
        super().__init__(f"row {row_number} column '{column}': {reason} ({value!r})")


@dataclass(frozen=True)
class RejectedRow:
    row_number: int
    column: str
    value: Any
    reason: str


@dataclass(frozen=True)
class CleanResult:
    rows: list[CleanedRow]
    rejected: list[RejectedRow]


def chemical_key(name: Any, mode: Any) -> str:
    """Identity key used for grouping, medians and colors."""
    return f"{name} ({mode})"


def _natural_log(row_number: int, column: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidValueError(row_number, column, value, "not numeric")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidValueError(row_number, column, value, "not numeric") from None
    if math.isnan(number) or math.isinf(number):
        raise InvalidValueError(row_number, column, value, "not finite")
    if number == 0:
        raise InvalidValueError(row_number, column, value, "zero")
    if number < 0:
        raise InvalidValueError(row_number, column, value, "negative")
    return math.log(number)


def _unpack(row: RowData | Mapping[str, Any], index: int) -> tuple[int, Mapping[str, Any]]:
    if isinstance(row, RowData):
        return row.row_number, row.values
    # plain mappings are numbered by position (1-based)
    return index + 1, row


def _identity(row_number: int, values: Mapping[str, Any], column: str) -> Any:
    value = values.get(column)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidValueError(row_number, column, value, "missing")
    return value


def _build_row(row_number: int, values: Mapping[str, Any]) -> CleanedRow:
    # a row without name or mode has no identity key to group under
    name = _identity(row_number, values, CHEMICAL_NAME)
    mode = _identity(row_number, values, IONIZATION_MODE)

    log_rf: dict[str, float] = {}
    for col, val in values.items():
        if col.startswith(RF_PREFIX):
            log_rf[f"log {col}"] = _natural_log(row_number, col, val)

    return CleanedRow(
        row_number=row_number,
        feature_id=values.get(FEATURE_ID),
        chemical=chemical_key(name, mode),
        chemical_name=str(name),
        ionization_mode=str(mode),
        retention_time=values.get(RETENTION_TIME),
        log_rf=log_rf,
    )


def clean(
    rows: Iterable[RowData | Mapping[str, Any]],
    *,
    policy: InvalidValuePolicy = InvalidValuePolicy.REJECT,
) -> CleanResult:
    """Clean raw rows and attach per-chemical median log RF values.

    Args:
        rows: RowData records (or plain column->value mappings)
        policy: REJECT drops a row with an unusable RF cell and reports it in
            CleanResult.rejected; STRICT raises InvalidValueError instead.

    Returns:
        CleanResult with one CleanedRow per accepted input row, input order.
        Rejected rows do not contribute to any median.
    """
    staged: list[CleanedRow] = []
    rejected: list[RejectedRow] = []
    for index, row in enumerate(rows):
        row_number, values = _unpack(row, index)
        try:
            staged.append(_build_row(row_number, values))
        except InvalidValueError as e:
            if policy is InvalidValuePolicy.STRICT:
                raise
            rejected.append(RejectedRow(e.row_number, e.column, e.value, e.reason))

    log_values: dict[str, list[float]] = {}
    for cleaned in staged:
        log_values.setdefault(cleaned.chemical, []).extend(cleaned.log_rf.values())

    medians = {key: statistics.median(vals) for key, vals in log_values.items() if vals}

    result = [replace(r, median_log_rf=medians.get(r.chemical)) for r in staged]
    return CleanResult(rows=result, rejected=rejected)
