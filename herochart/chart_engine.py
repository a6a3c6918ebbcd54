"""Stateful viewport engine for the hero chart.

Purpose
-------
``ViewportEngine`` owns one :class:`~herochart.chart_state.ChartState`, the
immutable :class:`~herochart.chart_data.SeriesData` it is viewed over, and a
:class:`~herochart.chart_config.ChartConfig`. User gestures (range buttons,
click-drag zoom, reset, pan arrows, legend toggles) become calls to the pure
transition functions in ``chart_state``; derived outputs (window, Y-domain,
ticks, headline return) are recomputed on demand and bundled by
:meth:`ViewportEngine.snapshot`.

Architecture notes
------------------
- The engine is framework-agnostic; ``HeroChart`` is one consumer.
- Change hooks run synchronously after every state change. A failing hook is
  reported with ``warnings.warn`` and does not block other hooks.
- Gestures never raise. Ignored gestures are logged at DEBUG with the reason.

Logging
-------
This module uses the standard Python ``logging`` framework and installs a
``NullHandler``; enable output with::

    import logging
    logging.getLogger("herochart.chart_engine").setLevel(logging.DEBUG)

Examples
--------
>>> from herochart import SeriesData, DataPoint, ViewportEngine
>>> data = SeriesData.from_points([
...     DataPoint(0, {"portfolio": 100.0, "sp500": 100.0}),
...     DataPoint(1, {"portfolio": 110.0, "sp500": 101.0}),
...     DataPoint(2, {"portfolio": 121.0, "sp500": 102.0}),
... ])
>>> engine = ViewportEngine(data)
>>> round(engine.compute_window_return(), 1)
21.0
"""

from __future__ import annotations

import itertools
import logging
import warnings
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Hashable, Optional

from . import chart_state as transitions
from .chart_catalog import series_by_id
from .chart_config import ChartConfig
from .chart_data import SeriesData
from .chart_metrics import YDomain, compute_window_return, compute_y_domain, format_return
from .chart_ranges import NamedRange
from .chart_snapshot import ChartSnapshot
from .chart_state import ChartState, PanDirection
from .chart_ticks import compute_axis_ticks, format_tick_label
from .chart_viewport import DragSelection, Viewport, WindowRange, ZoomSnapshot
from .TimestampConvert import TimestampConvert

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class ChartChange:
    """Payload passed to engine change hooks.

    Parameters
    ----------
    reason : str
        Operation that produced the change (``"select_named_range"``, ...).
    old : ChartState
        State before the change.
    new : ChartState
        State after the change.
    """

    reason: str
    old: ChartState
    new: ChartState


ChangeHook = Callable[[ChartChange], Any]


class ViewportEngine:
    """Interactive viewport over a fixed time series.

    Parameters
    ----------
    data : SeriesData, optional
        Pre-loaded rows. Defaults to an empty series.
    config : ChartConfig, optional
        Behavior options. Defaults to ``ChartConfig()``.
    visible_series : Iterable[str], optional
        Overrides ``config.initial_series``.

    Raises
    ------
    ValueError
        If ``visible_series`` is empty.
    KeyError
        If ``visible_series`` names a series outside the configured catalogue.
    """

    def __init__(
        self,
        data: Optional[SeriesData] = None,
        *,
        config: Optional[ChartConfig] = None,
        visible_series: Optional[Iterable[str]] = None,
    ) -> None:
        self._config = config if config is not None else ChartConfig()
        self._data = data if data is not None else SeriesData.empty()
        self._catalog = series_by_id(self._config.series)
        self._hooks: Dict[Hashable, ChangeHook] = {}
        self._hook_counter = itertools.count()

        initial = tuple(visible_series) if visible_series is not None else self._config.initial_series
        if not initial:
            raise ValueError("visible_series must name at least one series")
        for series_id in initial:
            self._require_series(series_id)

        self._state = transitions.initial_state(
            self._data,
            named_range=self._config.default_range,
            visible_series=initial,
        )
        logger.debug(
            "engine initialized: points=%d range=%s series=%s",
            len(self._data), self._config.default_range.label, sorted(initial),
        )

    # --- State accessors ---

    @property
    def state(self) -> ChartState:
        """Return the current immutable state."""
        return self._state

    @property
    def data(self) -> SeriesData:
        return self._data

    @property
    def config(self) -> ChartConfig:
        return self._config

    @property
    def viewport(self) -> Viewport:
        return self._state.viewport

    @property
    def named_range(self) -> Optional[NamedRange]:
        return self._state.named_range

    @property
    def zoom_history(self) -> Optional[ZoomSnapshot]:
        return self._state.zoom_history

    @property
    def drag_selection(self) -> Optional[DragSelection]:
        return self._state.drag_selection

    @property
    def visible_series(self) -> tuple[str, ...]:
        """Return visible series ids, catalogue order first, then by id."""
        visible = self._state.visible_series
        ordered = [sid for sid in self._catalog if sid in visible]
        ordered.extend(sorted(sid for sid in visible if sid not in self._catalog))
        return tuple(ordered)

    @property
    def is_zoomed(self) -> bool:
        return self._state.is_zoomed

    @property
    def can_pan_back(self) -> bool:
        return transitions.can_pan(self._state, self._data, PanDirection.BACK)

    @property
    def can_pan_forward(self) -> bool:
        return transitions.can_pan(self._state, self._data, PanDirection.FORWARD)

    # --- Gestures ---

    def select_named_range(self, named_range: NamedRange | str) -> bool:
        """Show a preset range ending at the latest data point.

        Returns ``True`` when the state changed.
        """
        named_range = NamedRange.coerce(named_range)
        return self._apply(
            transitions.select_named_range(self._state, self._data, named_range),
            reason="select_named_range",
        )

    def begin_drag_selection(self, timestamp: Any) -> bool:
        """Start a click-drag selection at ``timestamp`` (ms or date-like)."""
        return self._apply(
            transitions.begin_drag_selection(self._state, TimestampConvert(timestamp)),
            reason="begin_drag_selection",
        )

    def update_drag_selection(self, timestamp: Any) -> bool:
        """Move the end of the drag in progress; ignored without one."""
        return self._apply(
            transitions.update_drag_selection(self._state, TimestampConvert(timestamp)),
            reason="update_drag_selection",
        )

    def cancel_drag_selection(self) -> bool:
        return self._apply(transitions.cancel_drag_selection(self._state), reason="cancel_drag_selection")

    def commit_drag_selection(self) -> bool:
        """Zoom to the dragged span; zero-width drags are discarded."""
        drag = self._state.drag_selection
        changed = self._apply(transitions.commit_drag_selection(self._state), reason="commit_drag_selection")
        if drag is not None and drag.is_zero_width:
            logger.debug("drag selection discarded: zero width at %s", drag.start_ms)
        return changed

    def zoom_to(self, start: Any, end: Any) -> bool:
        """Apply a complete drag gesture from ``start`` to ``end`` in one call."""
        self.begin_drag_selection(start)
        self.update_drag_selection(end)
        return self.commit_drag_selection()

    def reset_zoom(self) -> bool:
        """Return to the view before custom zoom, or to the configured fallback."""
        return self._apply(
            transitions.reset_zoom(self._state, fallback_range=self._config.effective_reset_range),
            reason="reset_zoom",
        )

    def pan_period(self, direction: PanDirection | str) -> bool:
        """Shift the window one duration ``"back"`` or ``"forward"``."""
        direction = PanDirection.coerce(direction)
        return self._apply(
            transitions.pan_period(self._state, self._data, direction),
            reason=f"pan_{direction.value}",
        )

    def toggle_series(self, series_id: str) -> bool:
        """Show or hide ``series_id``; the last visible series cannot be hidden.

        Raises
        ------
        KeyError
            If a catalogue is configured and ``series_id`` is not in it.
        """
        series_id = self._require_series(series_id)
        return self._apply(transitions.toggle_series(self._state, series_id), reason="toggle_series")

    def set_visible_series(self, series_ids: Iterable[str]) -> bool:
        """Replace the visible set wholesale (forced-series mode).

        Raises
        ------
        ValueError
            If ``series_ids`` is empty.
        """
        ids = frozenset(self._require_series(sid) for sid in series_ids)
        if not ids:
            raise ValueError("set_visible_series requires at least one series")
        if ids == self._state.visible_series:
            return False
        return self._apply(replace(self._state, visible_series=ids), reason="set_visible_series")

    def replace_data(self, data: SeriesData) -> bool:
        """Swap in a new data revision and re-derive outputs against it.

        An overview (named-range) view is re-anchored to the new latest point,
        including a range that could not be applied to empty data; the reset
        fallback (full extent at the reset range) stays full. A custom zoom
        keeps its fixed bounds. Any drag in progress is dropped.
        """
        old_revision = self._data.revision
        self._data = data
        logger.debug(
            "data replaced: revision %s -> %s, points=%d", old_revision, data.revision, len(data),
        )
        new_state = transitions.cancel_drag_selection(self._state)
        named_range = new_state.named_range
        is_reset_fallback = (
            new_state.viewport.is_full_extent and named_range is self._config.effective_reset_range
        )
        if named_range is not None and not is_reset_fallback:
            new_state = transitions.select_named_range(new_state, data, named_range)
        self._apply(new_state, reason="replace_data", force_notify=True)
        return True

    # --- Derived values ---

    def resolve_window(self) -> WindowRange:
        """Return the viewport with sentinels resolved against the data extent."""
        return self._state.window(self._data)

    def compute_y_domain(self, visible_series: Optional[Iterable[str]] = None) -> YDomain:
        """Return the padded Y-axis range, or ``AUTO_SCALE``."""
        series = tuple(visible_series) if visible_series is not None else self.visible_series
        return compute_y_domain(
            self._data,
            self.resolve_window(),
            series,
            padding_fraction=self._config.y_padding_fraction,
        )

    def compute_axis_ticks(self, left_ms: Optional[int] = None, right_ms: Optional[int] = None) -> list[int]:
        """Return X-axis ticks for the given bounds (defaults: resolved window)."""
        window = self.resolve_window()
        left = window.left_ms if left_ms is None else TimestampConvert(left_ms)
        right = window.right_ms if right_ms is None else TimestampConvert(right_ms)
        return compute_axis_ticks(left, right)

    def compute_window_return(self, window: Optional[WindowRange] = None) -> float:
        """Return the primary series' percent return over ``window`` (default: visible)."""
        window = window if window is not None else self.resolve_window()
        return compute_window_return(self._data, window, self._config.primary_series)

    def snapshot(self) -> ChartSnapshot:
        """Return every derived output as one immutable record."""
        window = self.resolve_window()
        ticks = tuple(compute_axis_ticks(window.left_ms, window.right_ms))
        pct = self.compute_window_return(window)
        return ChartSnapshot(
            viewport=self._state.viewport,
            window=window,
            named_range=self._state.named_range,
            y_domain=self.compute_y_domain(),
            ticks=ticks,
            tick_labels=tuple(format_tick_label(t, window.duration_ms) for t in ticks),
            window_return=pct,
            return_label=format_return(pct),
            visible_series=self.visible_series,
            can_pan_back=self.can_pan_back,
            can_pan_forward=self.can_pan_forward,
            drag_selection=self._state.drag_selection,
            data_revision=self._data.revision,
        )

    # --- Hooks ---

    def add_change_hook(self, callback: ChangeHook, hook_id: Optional[Hashable] = None) -> Hashable:
        """Register ``callback(change)`` to run after every state change.

        Returns
        -------
        hashable
            The hook identifier used for registration.
        """
        if hook_id is None:
            hook_id = f"hook:{next(self._hook_counter)}"
        self._hooks[hook_id] = callback
        return hook_id

    def remove_change_hook(self, hook_id: Hashable) -> None:
        """Unregister ``hook_id`` or raise ``KeyError``."""
        if hook_id not in self._hooks:
            raise KeyError(f"Unknown hook: {hook_id}")
        del self._hooks[hook_id]

    # --- Internal / Plumbing ---

    def _require_series(self, series_id: str) -> str:
        key = str(series_id)
        if self._catalog and key not in self._catalog:
            raise KeyError(f"Unknown series: {key}")
        return key

    def _apply(self, new_state: ChartState, *, reason: str, force_notify: bool = False) -> bool:
        old_state = self._state
        if new_state == old_state and not force_notify:
            logger.debug("%s ignored: state unchanged", reason)
            return False
        self._state = new_state
        logger.debug(
            "%s: viewport=%r range=%s history=%s",
            reason,
            new_state.viewport,
            new_state.named_range.label if new_state.named_range is not None else None,
            new_state.zoom_history is not None,
        )
        change = ChartChange(reason=reason, old=old_state, new=new_state)
        for h_id, callback in list(self._hooks.items()):
            try:
                callback(change)
            except Exception as e:
                warnings.warn(f"Hook {h_id} failed: {e}")
        return new_state != old_state


__all__ = ["ChangeHook", "ChartChange", "ViewportEngine"]
