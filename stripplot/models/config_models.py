from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .view_state import ColorStrategy, ModeFilter, SortKey

"""Configuration dataclasses.

The loader in stripplot/config/loader.py turns the validated YAML mapping
into a StripPlotConfig; everything downstream reads only this object.
"""

__all__ = [
    "InvalidValuePolicy",
    "StripPlotConfig",
    "DEFAULT_INPUT_PATH",
]

# Default qNTA export location when no config file is present
DEFAULT_INPUT_PATH = "./data/qNTA_Surrogate_Detection_Statistics_File_WW2DW.xlsx"


class InvalidValuePolicy(Enum):
    """What the cleaner does with a non-numeric / non-positive RF cell."""
    REJECT = "reject"  # drop the row, record it, keep going
    STRICT = "strict"  # raise InvalidValueError


@dataclass(frozen=True)
class StripPlotConfig:
    """Root configuration object for a rendering run."""
    input_path: str  # workbook, or directory scanned for .xlsx (non-recursive)
    output_directory: str = "./output"
    sheet_name: str = "Sheet1"
    header_row: int = 1  # 1-based row holding the column names
    default_sort: SortKey = SortKey.MEDIAN_LOG_RF
    default_mode: ModeFilter = ModeFilter.POSITIVE
    color_strategy: ColorStrategy = ColorStrategy.ORDINAL
    invalid_value_policy: InvalidValuePolicy = InvalidValuePolicy.REJECT
    include_plotlyjs: bool | str = True  # True / False / "cdn"
    title: str | None = None
