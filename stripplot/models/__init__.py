"""Domain models for the response-factor strip plot pipeline."""

from .config_models import InvalidValuePolicy, StripPlotConfig
from .plot_point import PlotPoint
from .row_data import CleanedRow, RowData
from .view_state import ColorStrategy, ModeFilter, SortKey, ViewState

__all__ = [
    # Configuration models
    "InvalidValuePolicy",
    "StripPlotConfig",
    # Pipeline models
    "RowData",
    "CleanedRow",
    "PlotPoint",
    # View state
    "ColorStrategy",
    "ModeFilter",
    "SortKey",
    "ViewState",
]
