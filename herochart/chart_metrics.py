"""Pure derivations over a resolved window: Y-axis domain and window return.

Both functions are total: an empty series, an empty window or missing values
produce defined fallbacks (``AUTO_SCALE`` and ``0.0``) instead of raising.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import Enum
from typing import Literal, Union

import numpy as np

from .chart_data import SeriesData
from .chart_viewport import WindowRange


class AutoScale(Enum):
    """Marker telling the renderer to choose the Y-axis range itself."""

    AUTO = "auto"

    def __repr__(self) -> str:
        return "AUTO_SCALE"


AUTO_SCALE = AutoScale.AUTO

YDomain = Union[tuple[int, int], Literal[AutoScale.AUTO]]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def compute_y_domain(
    data: SeriesData,
    window: WindowRange,
    visible_series: Iterable[str],
    *,
    padding_fraction: float = 0.05,
) -> YDomain:
    """Return the padded ``(lo, hi)`` value range of visible series in ``window``.

    The range spans every finite value of every visible series on points with
    ``window.left_ms <= t <= window.right_ms``, widened on both ends by
    ``padding_fraction`` of the span and rounded half up. Series ids missing
    from ``data`` are ignored.

    Returns
    -------
    tuple[int, int] or AUTO_SCALE
        ``AUTO_SCALE`` when the window holds no points or no numeric values.
    """
    if data.is_empty:
        return AUTO_SCALE
    mask = data.window_mask(window.left_ms, window.right_ms)
    if not mask.any():
        return AUTO_SCALE

    lo = math.inf
    hi = -math.inf
    for series_id in visible_series:
        if series_id not in data:
            continue
        values = data.values(series_id)[mask]
        values = values[np.isfinite(values)]
        if values.size == 0:
            continue
        lo = min(lo, float(values.min()))
        hi = max(hi, float(values.max()))

    if lo == math.inf or hi == -math.inf:
        return AUTO_SCALE

    padding = (hi - lo) * padding_fraction
    return round_half_up(lo - padding), round_half_up(hi + padding)


def compute_window_return(data: SeriesData, window: WindowRange, primary_series: str) -> float:
    """Return the primary series' percent change across ``window``.

    The start is the first point at or after ``window.left_ms`` and the end is
    the last point at or before ``window.right_ms``; when no such point exists
    the first/last point of the whole series stands in.

    Returns ``0.0`` for empty data, a missing primary series, a zero start
    value or a missing (``NaN``) endpoint.
    """
    if data.is_empty or primary_series not in data:
        return 0.0

    ts = data.timestamps
    values = data.values(primary_series)

    start_idx = int(np.searchsorted(ts, window.left_ms, side="left"))
    if start_idx >= ts.size:
        start_idx = 0
    end_idx = int(np.searchsorted(ts, window.right_ms, side="right")) - 1
    if end_idx < 0:
        end_idx = ts.size - 1

    start_value = float(values[start_idx])
    end_value = float(values[end_idx])
    if not (math.isfinite(start_value) and math.isfinite(end_value)):
        return 0.0
    if start_value == 0:
        return 0.0
    return (end_value - start_value) / start_value * 100.0


def format_return(percent: float) -> str:
    """Format a headline return: ``"+21.0%"``, ``"-3.4%"``."""
    sign = "+" if percent >= 0 else ""
    return f"{sign}{percent:.1f}%"


def series_change_pct(value: float) -> float:
    """Return the change of a value (or array) rebased to 100, as shown in tooltips."""
    return value - 100.0


__all__ = [
    "AUTO_SCALE",
    "AutoScale",
    "YDomain",
    "compute_window_return",
    "compute_y_domain",
    "format_return",
    "round_half_up",
    "series_change_pct",
]
