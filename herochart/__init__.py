"""Top-level public API for the ``herochart`` package.

This module re-exports the hero-chart surface so users can import from a
single namespace, for example:

>>> from herochart import HeroChart, ViewportEngine, NamedRange  # doctest: +SKIP

It exposes both the notebook widget and the lower-level building blocks (the
viewport engine, its pure state transitions, tick/domain derivations and data
helpers) for integrations that render elsewhere.
"""

from . import chart_state as transitions
from .chart_catalog import (
    BENCHMARK_TICKER,
    PORTFOLIOS,
    PORTFOLIO_TICKERS,
    SERIES,
    STOCK_TICKERS,
    PortfolioConfig,
    SeriesConfig,
    SeriesStyle,
)
from .chart_config import ChartConfig
from .chart_data import DataPoint, SeriesData
from .chart_engine import ChartChange, ViewportEngine
from .chart_figure import build_figure
from .chart_metrics import (
    AUTO_SCALE,
    compute_window_return,
    compute_y_domain,
    format_return,
)
from .chart_ranges import LONGEST_RANGE, TIME_RANGES, NamedRange
from .chart_snapshot import ChartSnapshot
from .chart_state import ChartState, PanDirection
from .chart_ticks import compute_axis_ticks, format_tick_label, iter_axis_ticks
from .chart_viewport import DragSelection, Fixed, Sentinel, Viewport, WindowRange, ZoomSnapshot
from .hero_chart import HeroChart, resolve_chart_data
from .market_data import build_market_series
from .synthetic import generate_all_portfolios, generate_benchmarks, generate_portfolio_series
from .TimestampConvert import TimestampConvert

__all__ = [
    "AUTO_SCALE",
    "BENCHMARK_TICKER",
    "ChartChange",
    "ChartConfig",
    "ChartSnapshot",
    "ChartState",
    "DataPoint",
    "DragSelection",
    "Fixed",
    "HeroChart",
    "LONGEST_RANGE",
    "NamedRange",
    "PORTFOLIOS",
    "PORTFOLIO_TICKERS",
    "PanDirection",
    "PortfolioConfig",
    "SERIES",
    "STOCK_TICKERS",
    "Sentinel",
    "SeriesConfig",
    "SeriesData",
    "SeriesStyle",
    "TIME_RANGES",
    "TimestampConvert",
    "Viewport",
    "ViewportEngine",
    "WindowRange",
    "ZoomSnapshot",
    "build_figure",
    "build_market_series",
    "compute_axis_ticks",
    "compute_window_return",
    "compute_y_domain",
    "format_return",
    "format_tick_label",
    "generate_all_portfolios",
    "generate_benchmarks",
    "generate_portfolio_series",
    "iter_axis_ticks",
    "resolve_chart_data",
    "transitions",
]
