from __future__ import annotations

from collections.abc import Iterable

from ..models.plot_point import PlotPoint
from ..models.row_data import LOG_RF_PREFIX, CleanedRow
from ..models.view_state import ColorStrategy, ModeFilter
from .palette import PALETTE, hash_color, ordinal_color

"""Point building: CleanedRow records -> one PlotPoint per (row, sample).

Colors follow the traversal order of the rows handed in: the counter moves
on each time the identity key changes from one retained row to the next, so
re-sorting the rows can change which color a chemical gets.
"""

__all__ = [
    "sample_name",
    "filter_rows",
    "build_points",
]


def sample_name(column: str) -> str:
    """'log RF sample1_' -> 'sample1'; one trailing underscore is stripped."""
    name = column[len(LOG_RF_PREFIX):] if column.startswith(LOG_RF_PREFIX) else column
    return name[:-1] if name.endswith("_") else name


def filter_rows(rows: Iterable[CleanedRow], mode_filter: ModeFilter | str) -> list[CleanedRow]:
    mode = ModeFilter(mode_filter)
    return [r for r in rows if not mode.excludes(r.chemical)]


def build_points(
    rows: Iterable[CleanedRow],
    mode_filter: ModeFilter | str = ModeFilter.BOTH,
    *,
    palette: tuple[str, ...] = PALETTE,
    color_strategy: ColorStrategy = ColorStrategy.ORDINAL,
) -> list[PlotPoint]:
    """Expand cleaned rows into plot points.

    Args:
        rows: cleaned rows, already in the display order
        mode_filter: "+" hides ESI- rows, "-" hides ESI+ rows, "both" hides none
        palette: colors cycled through by chemical
        color_strategy: ORDINAL (position among retained chemicals) or HASH

    Returns:
        Points in row order, then in each row's column order.
    """
    if not palette:
        raise ValueError("palette must contain at least one color")

    points: list[PlotPoint] = []
    ordinal = 0
    previous: str | None = None
    for row in filter_rows(rows, mode_filter):
        if previous is not None and row.chemical != previous:
            ordinal += 1
        previous = row.chemical

        if color_strategy is ColorStrategy.HASH:
            color = hash_color(row.chemical, palette)
        else:
            color = ordinal_color(ordinal, palette)

        for column, value in row.log_rf.items():
            points.append(
                PlotPoint(
                    chemical=row.chemical,
                    log_rf=value,
                    feature_id=row.feature_id,
                    sample_name=sample_name(column),
                    mode=row.ionization_mode,
                    retention_time=row.retention_time,
                    color=color,
                )
            )
    return points
