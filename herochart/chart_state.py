"""Viewport state and its pure transition functions.

Purpose
-------
``ChartState`` is the complete interactive state of the hero chart. Every
transition below takes a state (plus the data or config it needs) and returns
a new state; none of them mutate, raise on user gestures, or touch widgets.
``ViewportEngine`` wraps these functions for stateful callers.

Concepts and structure
----------------------
The chart is either in *overview* (``named_range`` is set) or *custom zoom*
(``named_range is None``). Entering custom zoom from overview stores a single
``ZoomSnapshot`` so ``reset_zoom`` can return to exactly that view; zooming
again while already zoomed keeps the original snapshot.

Important gotchas
-----------------
- ``pan_period`` moves the window but keeps ``named_range``.
- Gestures that cannot apply (zero-width drags, pans at an edge, hiding the
  last visible series) return the state unchanged rather than raising.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .chart_data import SeriesData
from .chart_ranges import LONGEST_RANGE, NamedRange
from .chart_viewport import DragSelection, Fixed, Sentinel, Viewport, WindowRange, ZoomSnapshot


class PanDirection(str, Enum):
    BACK = "back"
    FORWARD = "forward"

    @classmethod
    def coerce(cls, value: "PanDirection | str") -> "PanDirection":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown pan direction: {value!r}") from None


@dataclass(frozen=True)
class ChartState:
    """Interactive state of one hero chart.

    Parameters
    ----------
    viewport : Viewport
        Visible bounds.
    named_range : NamedRange or None
        Selected preset, or ``None`` while custom-zoomed.
    visible_series : frozenset[str]
        Series drawn on the chart; never empty.
    zoom_history : ZoomSnapshot or None
        Single-level undo slot for ``reset_zoom``.
    drag_selection : DragSelection or None
        Click-drag gesture in progress.
    """

    viewport: Viewport = field(default_factory=Viewport.full)
    named_range: Optional[NamedRange] = None
    visible_series: frozenset[str] = frozenset()
    zoom_history: Optional[ZoomSnapshot] = None
    drag_selection: Optional[DragSelection] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "visible_series", frozenset(self.visible_series))
        if not self.visible_series:
            raise ValueError("ChartState requires at least one visible series")

    @property
    def is_zoomed(self) -> bool:
        """Return ``True`` in custom zoom (no named range)."""
        return self.named_range is None

    def window(self, data: SeriesData) -> WindowRange:
        return self.viewport.resolve(data)


def initial_state(
    data: SeriesData,
    *,
    named_range: NamedRange,
    visible_series: Iterable[str],
) -> ChartState:
    """Return the overview state for ``named_range``."""
    state = ChartState(
        viewport=Viewport.full(),
        named_range=named_range,
        visible_series=frozenset(visible_series),
    )
    return select_named_range(state, data, named_range)


def select_named_range(state: ChartState, data: SeriesData, named_range: NamedRange) -> ChartState:
    """Show ``named_range`` ending at the latest data point.

    Clears drag selection and zoom history. No-op on empty data.
    """
    extent = data.extent
    if extent is None:
        return state
    left_ms = named_range.start_for(extent[1])
    return replace(
        state,
        viewport=Viewport(Fixed(left_ms), Sentinel.MAX),
        named_range=named_range,
        zoom_history=None,
        drag_selection=None,
    )


def begin_drag_selection(state: ChartState, timestamp_ms: int) -> ChartState:
    return replace(state, drag_selection=DragSelection(int(timestamp_ms)))


def update_drag_selection(state: ChartState, timestamp_ms: int) -> ChartState:
    """Move the drag end point; ignored unless a drag is in progress."""
    if state.drag_selection is None:
        return state
    return replace(state, drag_selection=replace(state.drag_selection, end_ms=int(timestamp_ms)))


def cancel_drag_selection(state: ChartState) -> ChartState:
    if state.drag_selection is None:
        return state
    return replace(state, drag_selection=None)


def commit_drag_selection(state: ChartState) -> ChartState:
    """Zoom to the dragged span.

    A missing or zero-width selection is discarded as a click. Leaving a named
    range overwrites the single zoom-history slot; zooming while already
    zoomed keeps the existing slot.
    """
    drag = state.drag_selection
    if drag is None or drag.is_zero_width:
        return cancel_drag_selection(state)

    left_ms, right_ms = drag.ordered()
    history = state.zoom_history
    if state.named_range is not None:
        history = ZoomSnapshot(previous_viewport=state.viewport, previous_named_range=state.named_range)
    return replace(
        state,
        viewport=Viewport.fixed(left_ms, right_ms),
        named_range=None,
        zoom_history=history,
        drag_selection=None,
    )


def reset_zoom(state: ChartState, *, fallback_range: NamedRange = LONGEST_RANGE) -> ChartState:
    """Undo the custom zoom, or fall back to the full extent at ``fallback_range``."""
    history = state.zoom_history
    if history is not None:
        return replace(
            state,
            viewport=history.previous_viewport,
            named_range=history.previous_named_range,
            zoom_history=None,
            drag_selection=None,
        )
    return replace(
        state,
        viewport=Viewport.full(),
        named_range=fallback_range,
        zoom_history=None,
        drag_selection=None,
    )


def can_pan(state: ChartState, data: SeriesData, direction: PanDirection | str) -> bool:
    """Return whether ``pan_period(direction)`` would move the window."""
    direction = PanDirection.coerce(direction)
    extent = data.extent
    if extent is None:
        return False
    if state.viewport.is_full_extent or state.named_range is LONGEST_RANGE:
        return False
    window = state.window(data)
    if window.duration_ms <= 0:
        return False
    data_min, data_max = extent
    if direction is PanDirection.BACK:
        return window.left_ms > data_min
    return window.right_ms < data_max


def pan_period(state: ChartState, data: SeriesData, direction: PanDirection | str) -> ChartState:
    """Shift the window by its own duration, clamped to the data extent.

    Duration is always preserved. The right edge is clamped first, then the
    left, so a window longer than the data span starts at the first point.
    """
    direction = PanDirection.coerce(direction)
    if not can_pan(state, data, direction):
        return state

    data_min, data_max = data.extent  # type: ignore[misc]
    window = state.window(data)
    duration = window.duration_ms

    shift = -duration if direction is PanDirection.BACK else duration
    new_left = window.left_ms + shift
    new_right = window.right_ms + shift
    if new_right > data_max:
        new_right = data_max
        new_left = data_max - duration
    if new_left < data_min:
        new_left = data_min
        new_right = data_min + duration

    return replace(state, viewport=Viewport.fixed(new_left, new_right), drag_selection=None)


def toggle_series(state: ChartState, series_id: str) -> ChartState:
    """Hide ``series_id`` if visible and not the last one, otherwise show it."""
    visible = state.visible_series
    if series_id in visible:
        if len(visible) <= 1:
            return state
        return replace(state, visible_series=visible - {series_id})
    return replace(state, visible_series=visible | {series_id})


__all__ = [
    "ChartState",
    "PanDirection",
    "begin_drag_selection",
    "can_pan",
    "cancel_drag_selection",
    "commit_drag_selection",
    "initial_state",
    "pan_period",
    "reset_zoom",
    "select_named_range",
    "toggle_series",
    "update_drag_selection",
]
