"""Plotly rendering of a :class:`~herochart.chart_snapshot.ChartSnapshot`.

The builder is a pure function of the snapshot, the data and the series
catalogue, so the same code serves static figures (``build_figure``) and the
live ``FigureWidget`` inside :class:`~herochart.hero_chart.HeroChart`
(``apply_snapshot``).

Timestamps are handed to Plotly as naive UTC datetimes; Plotly echoes date
ranges back as naive strings, which ``TimestampConvert`` reads as UTC.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Optional, Union

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .chart_catalog import SERIES, SeriesConfig, SeriesStyle, series_by_id
from .chart_data import SeriesData
from .chart_metrics import AUTO_SCALE, series_change_pct
from .chart_snapshot import ChartSnapshot

AREA_FILL_ALPHA = 0.15
SELECTION_FILL = "rgba(100,116,139,0.15)"


def to_plotly_datetimes(timestamps_ms: Union[Sequence[int], np.ndarray]) -> pd.DatetimeIndex:
    """Return naive UTC datetimes for epoch milliseconds."""
    return pd.to_datetime(np.asarray(timestamps_ms, dtype=np.int64), unit="ms")


def _fill_color(color: str, alpha: float = AREA_FILL_ALPHA) -> str:
    """Return an ``rgba()`` fill for a ``#RRGGBB`` color; other formats pass through."""
    value = color.strip()
    if value.startswith("#") and len(value) == 7:
        r, g, b = (int(value[i:i + 2], 16) for i in (1, 3, 5))
        return f"rgba({r},{g},{b},{alpha})"
    return value


def series_trace(cfg: SeriesConfig, data: SeriesData) -> go.Scatter:
    """Return the Plotly trace for one catalogued series."""
    values = data.values(cfg.id)
    trace = go.Scatter(
        x=to_plotly_datetimes(data.timestamps),
        y=values,
        name=cfg.label,
        meta=cfg.id,
        mode="lines",
        line=dict(color=cfg.color, width=2.5 if cfg.style is SeriesStyle.AREA else 1.5),
        customdata=series_change_pct(values),
        hovertemplate=f"{cfg.label}: %{{customdata:+.1f}}%<extra></extra>",
        connectgaps=False,
    )
    if cfg.style is SeriesStyle.AREA:
        trace.update(fill="tozeroy", fillcolor=_fill_color(cfg.color))
    elif cfg.style is SeriesStyle.DASHED:
        trace.update(line_dash="dash")
    return trace


def build_traces(
    snapshot: ChartSnapshot,
    data: SeriesData,
    series: Iterable[SeriesConfig] = SERIES,
) -> list[go.Scatter]:
    """Return traces for visible series present in ``data``, catalogue order."""
    catalog = series_by_id(series)
    traces = []
    for series_id in snapshot.visible_series:
        cfg = catalog.get(series_id) or SeriesConfig(series_id, series_id, "#64748b")
        if series_id not in data:
            continue
        traces.append(series_trace(cfg, data))
    return traces


def layout_for(snapshot: ChartSnapshot, *, minimal: bool = False) -> dict:
    """Return the layout dictionary for ``snapshot``."""
    window = snapshot.window
    x_range = list(to_plotly_datetimes([window.left_ms, window.right_ms]))
    xaxis = dict(
        type="date",
        range=x_range,
        tickmode="array",
        tickvals=list(to_plotly_datetimes(snapshot.ticks)),
        ticktext=list(snapshot.tick_labels),
        showgrid=False,
        zeroline=False,
        visible=not minimal,
    )
    yaxis = dict(fixedrange=True, showgrid=True, zeroline=False, visible=not minimal)
    if snapshot.y_domain is AUTO_SCALE:
        yaxis.update(autorange=True)
    else:
        yaxis.update(autorange=False, range=list(snapshot.y_domain))

    shapes = []
    drag = snapshot.drag_selection
    if drag is not None and drag.end_ms is not None:
        x0, x1 = to_plotly_datetimes(drag.ordered())
        shapes.append(
            dict(type="rect", xref="x", yref="paper", x0=x0, x1=x1, y0=0, y1=1,
                 fillcolor=SELECTION_FILL, line_width=0)
        )

    return dict(
        xaxis=xaxis,
        yaxis=yaxis,
        shapes=shapes,
        dragmode=False if minimal else "zoom",
        showlegend=False,
        hovermode="x unified",
        margin=dict(l=0, r=0, t=0 if minimal else 20, b=0 if minimal else 30),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )


def build_figure(
    snapshot: ChartSnapshot,
    data: SeriesData,
    series: Iterable[SeriesConfig] = SERIES,
    *,
    minimal: bool = False,
) -> go.Figure:
    """Return a static Plotly figure for ``snapshot``."""
    fig = go.Figure(data=build_traces(snapshot, data, series))
    fig.update_layout(**layout_for(snapshot, minimal=minimal))
    return fig


def apply_snapshot(
    figure: go.Figure,
    snapshot: ChartSnapshot,
    data: SeriesData,
    series: Iterable[SeriesConfig] = SERIES,
    *,
    minimal: bool = False,
    rebuild_traces: Optional[bool] = None,
) -> None:
    """Update ``figure`` (usually a ``FigureWidget``) in place to show ``snapshot``.

    Traces are rebuilt only when the visible series set changed or
    ``rebuild_traces`` is ``True``; otherwise only the layout is touched.
    """
    wanted = [sid for sid in snapshot.visible_series if sid in data]
    current = [trace.meta for trace in figure.data]
    if rebuild_traces is None:
        rebuild_traces = current != wanted
    if rebuild_traces:
        figure.data = ()
        traces = build_traces(snapshot, data, series)
        if traces:
            figure.add_traces(traces)
    with figure.batch_update():
        figure.update_layout(**layout_for(snapshot, minimal=minimal))


__all__ = [
    "apply_snapshot",
    "build_figure",
    "build_traces",
    "layout_for",
    "series_trace",
    "to_plotly_datetimes",
]
