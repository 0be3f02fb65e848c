from __future__ import annotations

import pytest

from stripplot.models.row_data import CleanedRow
from stripplot.models.view_state import ColorStrategy, ModeFilter
from stripplot.services.cleaner import clean
from stripplot.services.palette import PALETTE, hash_color
from stripplot.services.points import build_points, filter_rows, sample_name

"""Unit tests for plot point building."""


def _row(chemical: str, mode: str, samples: dict[str, float], rt: float = 1.0) -> CleanedRow:
    return CleanedRow(
        row_number=0,
        feature_id=f"F-{chemical}",
        chemical=f"{chemical} ({mode})",
        chemical_name=chemical,
        ionization_mode=mode,
        retention_time=rt,
        log_rf={f"log RF {k}": v for k, v in samples.items()},
    )


def test_sample_name_strips_single_trailing_underscore():
    assert sample_name("log RF sample1_") == "sample1"
    assert sample_name("log RF sample2") == "sample2"
    assert sample_name("log RF s__") == "s_"


def test_point_fields_and_order():
    rows = [
        _row("A", "ESI+", {"s1_": 1.5, "s2": 2.5}, rt=4.2),
        _row("B", "ESI-", {"s1_": 0.5}, rt=9.0),
    ]
    points = build_points(rows, ModeFilter.BOTH)

    assert [(p.chemical, p.sample_name, p.log_rf) for p in points] == [
        ("A (ESI+)", "s1", 1.5),
        ("A (ESI+)", "s2", 2.5),
        ("B (ESI-)", "s1", 0.5),
    ]
    first = points[0]
    assert first.feature_id == "F-A"
    assert first.mode == "ESI+"
    assert first.retention_time == 4.2
    assert first.display_name == "A"


def test_point_count_equals_sum_of_rf_columns(example_rows):
    cleaned = clean(example_rows).rows
    points = build_points(cleaned, "both")
    assert len(points) == sum(len(r.log_rf) for r in cleaned) == 3


@pytest.mark.parametrize("mode, hidden", [("+", "(ESI-)"), ("-", "(ESI+)")])
def test_mode_filter_excludes_other_polarity(mode, hidden):
    rows = [
        _row("A", "ESI+", {"s": 1.0}),
        _row("A", "ESI-", {"s": 2.0}),
        _row("B", "ESI-", {"s": 3.0}),
        _row("C", "ESI+", {"s": 4.0}),
    ]
    points = build_points(rows, mode)
    assert points
    assert not any(hidden in p.chemical for p in points)


def test_filter_rows_both_keeps_everything():
    rows = [_row("A", "ESI+", {"s": 1.0}), _row("A", "ESI-", {"s": 2.0})]
    assert filter_rows(rows, ModeFilter.BOTH) == rows


def test_ordinal_colors_follow_distinct_chemicals():
    rows = [_row(f"C{i}", "ESI+", {"s": float(i)}) for i in range(9)]
    colors = [p.color for p in build_points(rows, "+")]
    assert colors[:7] == list(PALETTE)
    # ordinal 7 and 8 wrap around the 7-color palette
    assert colors[7] == PALETTE[0]
    assert colors[8] == PALETTE[1]


def test_consecutive_rows_with_same_key_share_color():
    rows = [
        _row("A", "ESI+", {"s1": 1.0}),
        _row("A", "ESI+", {"s2": 2.0}),
        _row("B", "ESI+", {"s1": 3.0}),
    ]
    colors = [p.color for p in build_points(rows, "+")]
    assert colors == [PALETTE[0], PALETTE[0], PALETTE[1]]


def test_ordinal_counts_only_retained_rows():
    rows = [
        _row("A", "ESI-", {"s": 1.0}),
        _row("B", "ESI+", {"s": 2.0}),
        _row("C", "ESI-", {"s": 3.0}),
        _row("D", "ESI+", {"s": 4.0}),
    ]
    points = build_points(rows, "+")
    assert [(p.chemical, p.color) for p in points] == [("B (ESI+)", PALETTE[0]), ("D (ESI+)", PALETTE[1])]


def test_rebuild_is_deterministic():
    rows = [_row(f"C{i}", "ESI+" if i % 2 else "ESI-", {"a": 1.0, "b": 2.0}) for i in range(12)]
    assert build_points(rows, "both") == build_points(rows, "both")


def test_hash_strategy_independent_of_order():
    rows = [_row("A", "ESI+", {"s": 1.0}), _row("B", "ESI+", {"s": 2.0})]
    forward = {p.chemical: p.color for p in build_points(rows, "+", color_strategy=ColorStrategy.HASH)}
    backward = {p.chemical: p.color for p in build_points(rows[::-1], "+", color_strategy=ColorStrategy.HASH)}
    assert forward == backward
    assert forward["A (ESI+)"] == hash_color("A (ESI+)")


def test_custom_palette_and_empty_palette():
    rows = [_row("A", "ESI+", {"s": 1.0}), _row("B", "ESI+", {"s": 2.0}), _row("C", "ESI+", {"s": 3.0})]
    colors = [p.color for p in build_points(rows, "+", palette=("red", "blue"))]
    assert colors == ["red", "blue", "red"]
    with pytest.raises(ValueError):
        build_points(rows, "+", palette=())


def test_invalid_mode_filter():
    with pytest.raises(ValueError):
        build_points([], "positive")
