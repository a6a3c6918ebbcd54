"""Immutable snapshot of everything a renderer needs from the viewport engine.

A ``ChartSnapshot`` aggregates the current viewport, its resolved window, the
derived Y-domain, X-axis ticks, headline return and control affordances into
one frozen object that the Plotly figure builder and the widget read.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .chart_metrics import YDomain
from .chart_ranges import NamedRange
from .chart_viewport import DragSelection, Viewport, WindowRange

ZOOMED_LABEL = "Zoomed"


@dataclass(frozen=True)
class ChartSnapshot:
    """Immutable record of a hero chart's derived outputs.

    Parameters
    ----------
    viewport : Viewport
        Unresolved bounds (sentinels kept).
    window : WindowRange
        Bounds resolved against the data extent.
    named_range : NamedRange or None
        Selected preset, ``None`` while custom-zoomed.
    y_domain : tuple[int, int] or AUTO_SCALE
        Padded value range of visible series.
    ticks : tuple[int, ...]
        X-axis tick timestamps.
    tick_labels : tuple[str, ...]
        Display labels aligned with ``ticks``.
    window_return : float
        Primary-series percent return over ``window``.
    visible_series : tuple[str, ...]
        Visible series ids in catalogue order.
    can_pan_back, can_pan_forward : bool
        Whether the pan arrows should be enabled.
    drag_selection : DragSelection or None
        Gesture in progress, for drawing the selection rectangle.
    data_revision : int
        Revision of the data the outputs were derived from.
    """

    viewport: Viewport
    window: WindowRange
    named_range: Optional[NamedRange]
    y_domain: YDomain
    ticks: tuple[int, ...]
    tick_labels: tuple[str, ...]
    window_return: float
    return_label: str
    visible_series: tuple[str, ...]
    can_pan_back: bool
    can_pan_forward: bool
    drag_selection: Optional[DragSelection] = None
    data_revision: int = 0

    @property
    def is_zoomed(self) -> bool:
        return self.named_range is None

    @property
    def range_label(self) -> str:
        """Return the active range button label or ``"Zoomed"``."""
        return ZOOMED_LABEL if self.named_range is None else self.named_range.label

    def __repr__(self) -> str:
        return (
            f"ChartSnapshot(range={self.range_label!r}, "
            f"window={self.window.as_tuple()!r}, "
            f"return={self.return_label!r})"
        )


__all__ = ["ChartSnapshot", "ZOOMED_LABEL"]
