from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

"""View state for one render of the strip plot.

The sort order, ionization-mode filter and help-panel flag are carried as one
immutable value; each UI action produces a new ViewState which is handed to
the renderer.
"""

__all__ = [
    "SortKey",
    "ModeFilter",
    "ColorStrategy",
    "ViewState",
]


class SortKey(Enum):
    """Row orderings offered by the sort toggle."""
    RETENTION_TIME = "rt"
    MEDIAN_LOG_RF = "ml"

    @property
    def label(self) -> str:
        return "Retention time" if self is SortKey.RETENTION_TIME else "Median log RF"

    def toggled(self) -> SortKey:
        if self is SortKey.RETENTION_TIME:
            return SortKey.MEDIAN_LOG_RF
        return SortKey.RETENTION_TIME


class ModeFilter(Enum):
    """Ionization-mode filter. Values match the button labels."""
    POSITIVE = "+"
    NEGATIVE = "-"
    BOTH = "both"

    @property
    def label(self) -> str:
        return {
            ModeFilter.POSITIVE: "ESI+",
            ModeFilter.NEGATIVE: "ESI-",
            ModeFilter.BOTH: "ESI+/-",
        }[self]

    def excludes(self, chemical: str) -> bool:
        """True when a row with this identity key is hidden by the filter."""
        if self is ModeFilter.POSITIVE:
            return "(ESI-)" in chemical
        if self is ModeFilter.NEGATIVE:
            return "(ESI+)" in chemical
        return False


class ColorStrategy(Enum):
    """How a chemical's palette color is chosen."""
    ORDINAL = "ordinal"  # position among the filtered, sorted chemicals
    HASH = "hash"  # crc32 of the identity key; independent of sort and filter


@dataclass(frozen=True)
class ViewState:
    sort_key: SortKey = SortKey.MEDIAN_LOG_RF
    mode_filter: ModeFilter = ModeFilter.POSITIVE
    show_help: bool = False

    def with_sort_toggled(self) -> ViewState:
        return replace(self, sort_key=self.sort_key.toggled())

    def with_mode(self, mode_filter: ModeFilter | str) -> ViewState:
        return replace(self, mode_filter=ModeFilter(mode_filter))

    def with_help_toggled(self) -> ViewState:
        return replace(self, show_help=not self.show_help)
