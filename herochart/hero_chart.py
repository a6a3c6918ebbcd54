"""Interactive hero chart widget for notebooks.

Purpose
-------
``HeroChart`` composes the portfolio-performance chart out of ipywidgets and a
Plotly ``FigureWidget`` and drives it from a :class:`ViewportEngine`:

- header: headline window return and the active range label ("Zoomed" while
  custom-zoomed), with a Reset button shown only while zoomed,
- range buttons (``1M`` ... ``3Y``),
- pan arrows, enabled only when the window can move that way,
- the figure, where an x-only box zoom is a click-drag zoom gesture and a
  double-click (autorange) resets the zoom,
- a series toggle panel.

Architecture notes
------------------
- Every engine state change triggers :meth:`HeroChart.refresh`, which rebuilds
  controls and figure from one :class:`ChartSnapshot`.
- Figure relayout events are queued through :class:`QueuedDebouncer` and then
  applied as begin/update/commit drag selection. Relayouts caused by
  ``refresh`` itself are suppressed.

Important gotchas
-----------------
- Plotly ``FigureWidget`` needs a notebook frontend to render; the widget tree
  can still be built and driven headless (tests do).
- Data precedence: ``market_data`` (when any ticker maps), then ``data``, then
  synthetic data for ``portfolio_id``.
- Box-zoom relayouts are debounced on the kernel's asyncio loop. Without a
  running loop (plain scripts, threads) they apply immediately on the thread
  that delivered them; widgets are never touched from a timer thread.

Examples
--------
>>> from herochart import HeroChart
>>> chart = HeroChart(portfolio_id="berkshire", seed=7)  # doctest: +SKIP
>>> chart  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence

import ipywidgets as widgets
import plotly.graph_objects as go
from IPython.display import display

from .chart_catalog import PORTFOLIO_TICKERS, require_portfolio
from .chart_config import ChartConfig
from .chart_data import SeriesData
from .chart_engine import ChartChange, ViewportEngine
from .chart_figure import apply_snapshot
from .chart_legend import SeriesTogglePanel
from .chart_ranges import TIME_RANGES
from .chart_snapshot import ChartSnapshot
from .chart_state import PanDirection
from .debouncing import QueuedDebouncer
from .market_data import build_market_series
from .synthetic import SeedLike, generate_portfolio_series
from .TimestampConvert import TimestampConvert

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

MarketData = Mapping[str, Iterable[Any]]


def resolve_chart_data(
    *,
    data: Optional[SeriesData] = None,
    market_data: Optional[MarketData] = None,
    portfolio_id: str = "thesivest",
    seed: SeedLike = None,
    end_ms: Optional[int] = None,
) -> SeriesData:
    """Pick the rows a hero chart shows: market data, then ``data``, then synthetic."""
    if market_data:
        built = build_market_series(market_data, active_ticker=PORTFOLIO_TICKERS.get(portfolio_id))
        if built is not None:
            return built
        logger.debug("market data for %s did not map to any series; falling back", portfolio_id)
    if data is not None:
        return data
    return generate_portfolio_series(portfolio_id, seed=seed, end_ms=end_ms)


class HeroChart:
    """Portfolio performance chart with range buttons, drag zoom and panning.

    Parameters
    ----------
    data : SeriesData, optional
        Explicit rows.
    portfolio_id : str
        Showcased portfolio; picks the market ticker and synthetic profile.
    market_data : Mapping, optional
        Per-ticker closes; see :func:`~herochart.market_data.build_market_series`.
    config : ChartConfig, optional
        Engine and widget options.
    forced_series : Sequence[str], optional
        Pin the visible series and lock the toggle panel (mini charts).
    seed : int, optional
        Seed for synthetic data.

    Raises
    ------
    KeyError
        If ``portfolio_id`` is unknown.
    """

    def __init__(
        self,
        data: Optional[SeriesData] = None,
        *,
        portfolio_id: str = "thesivest",
        market_data: Optional[MarketData] = None,
        config: Optional[ChartConfig] = None,
        forced_series: Optional[Sequence[str]] = None,
        seed: SeedLike = None,
        end_ms: Optional[int] = None,
    ) -> None:
        self._portfolio = require_portfolio(portfolio_id)
        self._config = config if config is not None else ChartConfig()
        chart_data = resolve_chart_data(
            data=data, market_data=market_data, portfolio_id=portfolio_id, seed=seed, end_ms=end_ms,
        )
        self._engine = ViewportEngine(
            chart_data,
            config=self._config,
            visible_series=forced_series,
        )
        self._forced = forced_series is not None
        self._suspend_relayout = 0
        self._relayout_debouncer = QueuedDebouncer(
            self._apply_relayout,
            execute_every_ms=self._config.relayout_debounce_ms,
            drop_overflow=True,
            thread_fallback=False,
        )
        self._build_widgets()
        self._engine.add_change_hook(self._on_engine_change, hook_id="hero_chart")
        self.refresh()

    # --- Public surface ---

    @property
    def engine(self) -> ViewportEngine:
        return self._engine

    @property
    def figure_widget(self) -> go.FigureWidget:
        return self._figure

    @property
    def widget(self) -> widgets.Widget:
        """Return the root widget."""
        return self._root

    @property
    def range_buttons(self) -> Dict[str, widgets.Button]:
        return self._range_buttons

    @property
    def series_panel(self) -> SeriesTogglePanel:
        return self._series_panel

    def snapshot(self) -> ChartSnapshot:
        return self._engine.snapshot()

    def set_market_data(self, market_data: MarketData) -> bool:
        """Replace rows with freshly fetched market data.

        Returns ``False`` (rows unchanged) when no ticker maps to a series.
        """
        built = build_market_series(
            market_data,
            active_ticker=PORTFOLIO_TICKERS.get(self._portfolio.id),
            revision=self._engine.data.revision + 1,
        )
        if built is None:
            return False
        self._engine.replace_data(built)
        return True

    def refresh(self) -> None:
        """Re-render controls and figure from the engine's current snapshot."""
        snap = self._engine.snapshot()
        self._sync_header(snap)
        self._sync_controls(snap)
        self._series_panel.sync(snap.visible_series)
        with self._relayout_suspended():
            apply_snapshot(
                self._figure,
                snap,
                self._engine.data,
                self._config.series,
                minimal=self._config.minimal,
            )

    def _ipython_display_(self, **kwargs: Any) -> None:
        display(self._root)

    # --- Widget construction ---

    def _build_widgets(self) -> None:
        minimal = self._config.minimal
        self._title = widgets.HTML(value="<b>Portfolio Performance</b>")
        self._return_label = widgets.HTML(value="")
        self._range_label = widgets.HTML(value="")
        self._reset_button = widgets.Button(
            description="Reset",
            icon="search-minus",
            tooltip="Reset zoom",
            layout=widgets.Layout(width="auto", display="none"),
        )
        self._reset_button.on_click(lambda _btn: self._engine.reset_zoom())

        self._range_buttons: Dict[str, widgets.Button] = {}
        for named_range in TIME_RANGES:
            button = widgets.Button(
                description=named_range.label,
                layout=widgets.Layout(width="48px"),
            )
            button.on_click(lambda _btn, r=named_range: self._engine.select_named_range(r))
            self._range_buttons[named_range.label] = button

        self._pan_back = widgets.Button(icon="chevron-left", tooltip="Previous period", layout=widgets.Layout(width="36px"))
        self._pan_forward = widgets.Button(icon="chevron-right", tooltip="Next period", layout=widgets.Layout(width="36px"))
        self._pan_back.on_click(lambda _btn: self._engine.pan_period(PanDirection.BACK))
        self._pan_forward.on_click(lambda _btn: self._engine.pan_period(PanDirection.FORWARD))

        self._figure = go.FigureWidget()
        self._figure.layout.on_change(self._on_figure_xrange, "xaxis.range")
        self._figure.layout.on_change(self._on_figure_autorange, "xaxis.autorange")

        legend_box = widgets.VBox(layout=widgets.Layout(width="180px"))
        self._series_panel = SeriesTogglePanel(
            legend_box,
            on_toggle=self._engine.toggle_series,
            series=self._config.series,
        )
        self._series_panel.set_locked(self._forced)

        header = widgets.HBox(
            [
                widgets.VBox([self._title, widgets.HBox([self._return_label, self._range_label, self._reset_button])]),
                widgets.HBox(list(self._range_buttons.values())),
            ],
            layout=widgets.Layout(justify_content="space-between", align_items="center", width="100%"),
        )
        body = widgets.HBox(
            [self._pan_back, self._figure, self._pan_forward],
            layout=widgets.Layout(align_items="center", width="100%"),
        )
        if minimal:
            self._root = widgets.VBox([self._figure], layout=widgets.Layout(width="100%"))
        else:
            self._root = widgets.VBox(
                [header, widgets.HBox([body, legend_box], layout=widgets.Layout(width="100%"))],
                layout=widgets.Layout(width="100%"),
            )

    # --- Sync helpers ---

    def _sync_header(self, snap: ChartSnapshot) -> None:
        color = "#10b981" if snap.window_return >= 0 else "#ef4444"
        self._return_label.value = f"<span style='font-size:2em;font-weight:800;color:{color}'>{snap.return_label}</span>"
        self._range_label.value = f"<span style='opacity:0.6;margin-left:8px'>{snap.range_label}</span>"
        self._reset_button.layout.display = "" if snap.is_zoomed else "none"

    def _sync_controls(self, snap: ChartSnapshot) -> None:
        active = snap.named_range.label if snap.named_range is not None else None
        for label, button in self._range_buttons.items():
            button.button_style = "primary" if label == active else ""
        self._pan_back.disabled = not snap.can_pan_back
        self._pan_forward.disabled = not snap.can_pan_forward
        self._pan_back.layout.visibility = "visible" if snap.can_pan_back else "hidden"
        self._pan_forward.layout.visibility = "visible" if snap.can_pan_forward else "hidden"

    # --- Internal / Plumbing ---

    @contextmanager
    def _relayout_suspended(self) -> Iterator[None]:
        self._suspend_relayout += 1
        try:
            yield
        finally:
            self._suspend_relayout -= 1

    def _on_engine_change(self, change: ChartChange) -> None:
        logger.debug("refresh after %s", change.reason)
        self.refresh()

    def _on_figure_xrange(self, _layout: Any, x_range: Any) -> None:
        """Queue a user box-zoom range; programmatic updates are ignored."""
        if self._suspend_relayout or x_range is None:
            return
        self._relayout_debouncer(tuple(x_range))

    def _on_figure_autorange(self, _layout: Any, autorange: Any) -> None:
        if self._suspend_relayout or autorange is not True:
            return
        self._relayout_debouncer.cancel()
        self._engine.reset_zoom()
        # Restore the engine's window even when there was nothing to reset.
        self.refresh()

    def _apply_relayout(self, x_range: Sequence[Any]) -> None:
        """Apply a debounced box-zoom range as a complete drag gesture."""
        if len(x_range) != 2:
            logger.debug("ignoring relayout range of length %d", len(x_range))
            return
        start, end = (TimestampConvert(v) for v in x_range)
        window = self._engine.resolve_window()
        if (min(start, end), max(start, end)) == window.as_tuple():
            return
        self._engine.zoom_to(start, end)


__all__ = ["HeroChart", "resolve_chart_data"]
