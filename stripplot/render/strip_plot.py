from __future__ import annotations

import math
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import plotly.graph_objects as go

from ..models.plot_point import PlotPoint
from ..models.row_data import CleanedRow
from ..models.view_state import ColorStrategy, ModeFilter, SortKey, ViewState
from ..services.palette import PALETTE
from ..services.points import build_points
from ..services.sorting import sort_rows

"""Strip plot rendering with plotly.

build_figure draws one view (one sort order, one mode filter). build_dashboard
pre-computes every sort x mode combination as its own trace and adds a
dropdown that switches between them, so the written HTML page keeps the
toggles of the interactive viewer without a server. Zoom, pan and hover come
from plotly.js; double-click resets the axes.
"""

__all__ = [
    "HOVER_TEMPLATE",
    "HELP_TEXT",
    "chemical_order",
    "x_range",
    "build_figure",
    "build_dashboard",
    "render",
    "write_dashboard",
    "write_figure",
    "active_point_count",
]

BAND_HEIGHT = 35  # px per chemical
MIN_PLOT_HEIGHT = 300
MARGIN = dict(l=250, r=20, t=110, b=20)
GRID_COLOR = "#ddd"

HOVER_TEMPLATE = (
    "<b>Chemical:</b> %{customdata[0]}<br>"
    "<b>Ionization Mode:</b> %{customdata[1]}<br>"
    "<b>Feature ID:</b> %{customdata[2]}<br>"
    "<b>Sample Name:</b> %{customdata[3]}<br>"
    "<b>Retention Time:</b> %{customdata[4]}min<br>"
    "<b>Log RF:</b> %{x:.2f}"
    "<extra></extra>"
)

HELP_TEXT = (
    "RF = abundance / concentration<br>"
    "Hover a point to show its details<br>"
    "Use the dropdown to switch sort order (retention time / median log RF)<br>"
    "and ionization mode (ESI+, ESI-, both)<br>"
    "Scroll to zoom, drag to pan, double-click to reset"
)


def chemical_order(points: Sequence[PlotPoint]) -> list[str]:
    """Distinct chemicals in first-seen order (top band first)."""
    return list(dict.fromkeys(p.chemical for p in points))


def x_range(points: Sequence[PlotPoint]) -> list[float]:
    """Axis range: from -0.5 (or below the smallest value) to the next whole number above the largest."""
    if not points:
        return [-0.5, 1.0]
    values = [p.log_rf for p in points]
    low = min(-0.5, math.floor(min(values)) - 0.5)
    high = math.floor(max(values)) + 1
    return [low, float(high)]


def _plot_height(n_chemicals: int) -> int:
    return max(MIN_PLOT_HEIGHT, n_chemicals * BAND_HEIGHT + MARGIN["t"] + MARGIN["b"])


def _view_title(view_state: ViewState, title: str | None) -> str:
    base = title or "Log response factors"
    return f"{base} ({view_state.mode_filter.label}, sorted by {view_state.sort_key.label.lower()})"


def _trace(points: Sequence[PlotPoint], *, name: str, visible: bool = True) -> go.Scatter:
    customdata: list[list[Any]] = [
        [p.display_name, p.mode, p.feature_id, p.sample_name, p.retention_time] for p in points
    ]
    return go.Scatter(
        x=[p.log_rf for p in points],
        y=[p.chemical for p in points],
        mode="markers",
        name=name,
        visible=visible,
        showlegend=False,
        customdata=customdata,
        hovertemplate=HOVER_TEMPLATE,
        marker=dict(
            size=12,
            color=[p.color for p in points],
            opacity=0.6,
            line=dict(color="black", width=1),
        ),
    )


def _view_layout(points: Sequence[PlotPoint], view_state: ViewState, title: str | None) -> dict[str, Any]:
    """Layout properties that differ between views, in plotly 'update' form."""
    order = chemical_order(points)
    return {
        "title.text": _view_title(view_state, title),
        "yaxis.categoryarray": order,
        "xaxis.range": x_range(points),
        "height": _plot_height(len(order)),
    }


def _apply_view_layout(fig: go.Figure, layout: dict[str, Any]) -> None:
    # dotted relayout keys -> plotly.py magic underscore names
    fig.update_layout(**{key.replace(".", "_"): value for key, value in layout.items()})


def _base_layout(fig: go.Figure) -> None:
    fig.update_layout(
        template="plotly_white",
        margin=MARGIN,
        width=1100,
        dragmode="pan",
        hovermode="closest",
        hoverlabel=dict(bgcolor="white", font_size=14),
        xaxis=dict(
            title=dict(text="Log RF", font=dict(size=16)),
            side="top",
            tickmode="linear",
            tick0=0,
            dtick=1,
            tickformat="d",
            showgrid=True,
            gridcolor=GRID_COLOR,
            zeroline=False,
            showline=True,
            linecolor="black",
            mirror=True,
        ),
        yaxis=dict(
            type="category",
            categoryorder="array",
            autorange="reversed",
            showgrid=True,
            gridcolor=GRID_COLOR,
            showline=True,
            linecolor="black",
            mirror=True,
            tickfont=dict(size=14),
        ),
    )


def _add_help(fig: go.Figure) -> None:
    fig.add_annotation(
        text=HELP_TEXT,
        xref="paper",
        yref="paper",
        x=1.0,
        y=1.0,
        yshift=MARGIN["t"] - 10,
        xanchor="right",
        yanchor="top",
        align="left",
        showarrow=False,
        bordercolor="black",
        borderwidth=1,
        bgcolor="white",
        font=dict(size=11),
    )


def build_figure(points: Sequence[PlotPoint], view_state: ViewState, *, title: str | None = None) -> go.Figure:
    """Build the strip plot for one view."""
    fig = go.Figure(_trace(points, name=_view_title(view_state, title)))
    _base_layout(fig)
    _apply_view_layout(fig, _view_layout(points, view_state, title))
    if view_state.show_help:
        _add_help(fig)
    return fig


def build_dashboard(
    rows: Sequence[CleanedRow],
    initial_view: ViewState,
    *,
    palette: tuple[str, ...] = PALETTE,
    color_strategy: ColorStrategy = ColorStrategy.ORDINAL,
    title: str | None = None,
) -> go.Figure:
    """Build a figure holding every sort x mode view with a dropdown to switch.

    Each view re-sorts `rows` from their given order and rebuilds its points,
    so colors match what build_points gives for that sort and filter.
    """
    views = [ViewState(sort_key=s, mode_filter=m, show_help=initial_view.show_help) for s in SortKey for m in ModeFilter]
    active = next(
        i for i, v in enumerate(views)
        if v.sort_key is initial_view.sort_key and v.mode_filter is initial_view.mode_filter
    )

    fig = go.Figure()
    layouts: list[dict[str, Any]] = []
    for i, view in enumerate(views):
        points = build_points(
            sort_rows(rows, view.sort_key),
            view.mode_filter,
            palette=palette,
            color_strategy=color_strategy,
        )
        fig.add_trace(_trace(points, name=_view_title(view, title), visible=(i == active)))
        layouts.append(_view_layout(points, view, title))

    _base_layout(fig)
    _apply_view_layout(fig, layouts[active])

    buttons = [
        dict(
            label=f"{view.mode_filter.label} | {view.sort_key.label}",
            method="update",
            args=[{"visible": [j == i for j in range(len(views))]}, layouts[i]],
        )
        for i, view in enumerate(views)
    ]
    fig.update_layout(
        updatemenus=[
            dict(
                type="dropdown",
                direction="down",
                active=active,
                showactive=True,
                x=0.0,
                y=1.0,
                xanchor="right",
                yanchor="bottom",
                pad=dict(r=10, b=40),
                buttons=buttons,
            )
        ]
    )
    if initial_view.show_help:
        _add_help(fig)
    return fig


def active_point_count(fig: go.Figure) -> int:
    """Number of points in the view a dashboard opens on."""
    menus = fig.layout.updatemenus
    trace = fig.data[menus[0].active] if menus else fig.data[0]
    return len(trace.x or ())


def write_figure(fig: go.Figure, output_path: Path, include_plotlyjs: bool | str = True) -> Path:
    """Write a figure as a standalone HTML page, replacing any previous file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(
        str(output_path),
        include_plotlyjs=include_plotlyjs,
        config={"scrollZoom": True, "displaylogo": False},
    )
    return output_path


def render(
    points: Sequence[PlotPoint],
    view_state: ViewState,
    output_path: Path,
    *,
    include_plotlyjs: bool | str = True,
    title: str | None = None,
) -> Path:
    """Write a single-view strip plot page, replacing any previous file."""
    return write_figure(build_figure(points, view_state, title=title), output_path, include_plotlyjs)


def write_dashboard(
    rows: Sequence[CleanedRow],
    initial_view: ViewState,
    output_path: Path,
    *,
    palette: tuple[str, ...] = PALETTE,
    color_strategy: ColorStrategy = ColorStrategy.ORDINAL,
    include_plotlyjs: bool | str = True,
    title: str | None = None,
) -> Path:
    """Write the multi-view page with the sort / mode dropdown."""
    fig = build_dashboard(rows, initial_view, palette=palette, color_strategy=color_strategy, title=title)
    return write_figure(fig, output_path, include_plotlyjs)
