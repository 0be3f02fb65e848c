from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from ..models.row_data import CleanedRow
from ..models.view_state import SortKey

__all__ = [
    "sort_rows",
]


def _numeric(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def sort_rows(rows: Iterable[CleanedRow], sort_key: SortKey | str) -> list[CleanedRow]:
    """Return the rows sorted ascending by retention time or median log RF.

    The sort is stable and always starts from the order given, so rows with
    equal keys keep their load order. Rows without a usable key go last.
    """
    key = SortKey(sort_key)

    def sort_value(row: CleanedRow) -> tuple[int, float]:
        raw = row.retention_time if key is SortKey.RETENTION_TIME else row.median_log_rf
        number = _numeric(raw)
        return (1, 0.0) if number is None else (0, number)

    return sorted(rows, key=sort_value)
