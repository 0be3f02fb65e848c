from __future__ import annotations

from enum import Enum

"""Per-workbook processing status.

A workbook either renders (success) or is skipped with an error (failed).
"""

__all__ = [
    "FileStatus",
]


class FileStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"
