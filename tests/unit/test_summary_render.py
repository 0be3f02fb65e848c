from __future__ import annotations

import doctest
from datetime import datetime, timezone

import pytest

import stripplot.services.summary as summary_mod
from stripplot.models.processing_result import ProcessingResult
from stripplot.services.summary import render_summary_line


def _result(elapsed: float, **kw) -> ProcessingResult:
    t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    base = dict(
        success_files=2, failed_files=1, total_rows=12, total_points=30,
        rejected_rows=1, start_time=t, end_time=t, elapsed_seconds=elapsed,
    )
    base.update(kw)
    return ProcessingResult(**base)


def test_summary_line_format():
    line = render_summary_line(3, _result(2.5))
    assert line == (
        "SUMMARY files=3/3 success=2 failed=1 rows=12 points=30 "
        "rejected_rows=1 elapsed_sec=2.5"
    )


@pytest.mark.parametrize(
    "elapsed,expected",
    [(0, "0"), (3.0, "3"), (1.5, "1.5"), (1.10, "1.1"), (0.004, "0.004")],
)
def test_elapsed_formatting(elapsed, expected):
    assert render_summary_line(0, _result(elapsed)).endswith(f"elapsed_sec={expected}")


def test_docstring_examples():
    failures, _ = doctest.testmod(summary_mod)
    assert failures == 0
