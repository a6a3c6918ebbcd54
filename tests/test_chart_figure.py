from __future__ import annotations

import plotly.graph_objects as go
import pytest

from herochart.chart_data import SeriesData
from herochart.chart_engine import ViewportEngine
from herochart.chart_figure import apply_snapshot, build_figure, layout_for, to_plotly_datetimes
from herochart.TimestampConvert import TimestampConvert


def test_traces_follow_visible_series_and_styles(daily_data: SeriesData) -> None:
    engine = ViewportEngine(SeriesData(daily_data.timestamps, {
        "portfolio": daily_data.values("portfolio"),
        "sp500": daily_data.values("sp500"),
        "nasdaq": daily_data.values("sp500"),
    }))
    engine.toggle_series("nasdaq")
    fig = build_figure(engine.snapshot(), engine.data)

    assert [trace.meta for trace in fig.data] == ["portfolio", "sp500", "nasdaq"]
    portfolio, sp500, nasdaq = fig.data
    assert portfolio.fill == "tozeroy"
    assert portfolio.fillcolor == "rgba(16,185,129,0.15)"
    assert sp500.fill is None
    assert sp500.line.dash is None
    assert nasdaq.line.dash == "dash"
    assert portfolio.customdata[0] == pytest.approx(0.0)
    assert portfolio.customdata[10] == pytest.approx(10.0)


def test_visible_series_missing_from_data_are_skipped(daily_data: SeriesData) -> None:
    engine = ViewportEngine(daily_data, visible_series=["portfolio", "nvda"])
    fig = build_figure(engine.snapshot(), engine.data)
    assert [trace.meta for trace in fig.data] == ["portfolio"]


def test_layout_uses_window_ticks_and_y_domain(daily_data: SeriesData) -> None:
    engine = ViewportEngine(daily_data)
    engine.zoom_to("2024-01-01", "2024-01-11")
    snap = engine.snapshot()
    fig = build_figure(snap, engine.data)

    x0, x1 = fig.layout.xaxis.range
    assert TimestampConvert(x0) == snap.window.left_ms
    assert TimestampConvert(x1) == snap.window.right_ms
    assert tuple(fig.layout.xaxis.ticktext) == snap.tick_labels
    assert fig.layout.yaxis.autorange is False
    assert tuple(fig.layout.yaxis.range) == snap.y_domain
    assert fig.layout.yaxis.fixedrange is True
    assert fig.layout.dragmode == "zoom"


def test_empty_data_autoscales_y_axis() -> None:
    engine = ViewportEngine(SeriesData.empty())
    layout = layout_for(engine.snapshot())
    assert layout["yaxis"]["autorange"] is True
    assert "range" not in layout["yaxis"]


def test_minimal_layout_hides_axes_and_disables_drag(daily_data: SeriesData) -> None:
    layout = layout_for(ViewportEngine(daily_data).snapshot(), minimal=True)
    assert layout["dragmode"] is False
    assert layout["xaxis"]["visible"] is False
    assert layout["yaxis"]["visible"] is False


def test_drag_in_progress_draws_selection_rectangle(daily_data: SeriesData) -> None:
    engine = ViewportEngine(daily_data)
    engine.begin_drag_selection("2024-05-10")
    assert layout_for(engine.snapshot())["shapes"] == []

    engine.update_drag_selection("2024-05-01")
    (shape,) = layout_for(engine.snapshot())["shapes"]
    assert shape["type"] == "rect"
    assert shape["x0"] == to_plotly_datetimes([TimestampConvert("2024-05-01")])[0]
    assert shape["yref"] == "paper"


def test_apply_snapshot_rebuilds_traces_only_when_series_change(daily_data: SeriesData) -> None:
    engine = ViewportEngine(daily_data)
    fig = go.Figure()

    apply_snapshot(fig, engine.snapshot(), engine.data)
    assert [trace.meta for trace in fig.data] == ["portfolio", "sp500"]
    first = fig.data[0]

    engine.select_named_range("1M")
    apply_snapshot(fig, engine.snapshot(), engine.data)
    assert fig.data[0] is first
    assert TimestampConvert(fig.layout.xaxis.range[0]) == engine.resolve_window().left_ms

    engine.toggle_series("sp500")
    apply_snapshot(fig, engine.snapshot(), engine.data)
    assert [trace.meta for trace in fig.data] == ["portfolio"]

    apply_snapshot(fig, engine.snapshot(), engine.data, rebuild_traces=True)
    assert fig.data[0] is not first


def test_apply_snapshot_keeps_figure_widget_traces_across_layout_updates(daily_data: SeriesData) -> None:
    pytest.importorskip("ipywidgets")
    engine = ViewportEngine(daily_data)
    fig = go.FigureWidget()

    apply_snapshot(fig, engine.snapshot(), engine.data)
    assert [trace.meta for trace in fig.data] == ["portfolio", "sp500"]
    assert fig.data[0].uid != "portfolio"
    first = fig.data[0]

    engine.select_named_range("3M")
    apply_snapshot(fig, engine.snapshot(), engine.data)
    assert fig.data[0] is first
