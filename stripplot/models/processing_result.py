from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models.

FileStat describes one workbook, ProcessingResult aggregates a whole run and
feeds the SUMMARY line.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-workbook processing statistics."""
    file_name: str
    status: str  # success / failed
    rows: int  # cleaned rows kept
    points: int  # plot points in the default view
    rejected_rows: int
    elapsed_seconds: float
    output_path: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a run."""
    success_files: int
    failed_files: int
    total_rows: int
    total_points: int
    rejected_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None
    error_log_path: str | None = None
