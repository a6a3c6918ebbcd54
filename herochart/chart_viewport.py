"""Viewport model primitives for the hero chart.

Purpose
-------
This module defines the value types the viewport engine moves around:

- ``Sentinel`` / ``Fixed``: a tagged bound that either tracks the data extent
  (``Sentinel.MIN`` / ``Sentinel.MAX``) or pins a timestamp (``Fixed``),
- ``Viewport``: a left/right pair of bounds,
- ``WindowRange``: a viewport resolved to concrete epoch milliseconds,
- ``ZoomSnapshot``: the single undo slot written when entering custom zoom,
- ``DragSelection``: the transient click-drag gesture.

Notes
-----
Sentinels are only ever interpreted by :func:`resolve_bound`; call sites never
type-check bounds themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .chart_data import SeriesData
    from .chart_ranges import NamedRange


class Sentinel(Enum):
    """Bounds that follow the data's current extent."""

    MIN = "min"
    MAX = "max"

    def __repr__(self) -> str:
        return f"Sentinel.{self.name}"


@dataclass(frozen=True)
class Fixed:
    """A bound pinned to ``ms`` (epoch milliseconds)."""

    ms: int


Bound = Union[Sentinel, Fixed]

# Extent used when resolving sentinels against an empty series.
EMPTY_EXTENT: tuple[int, int] = (0, 0)


def resolve_bound(bound: Bound, extent: Optional[tuple[int, int]]) -> int:
    """Resolve ``bound`` against ``(data_min, data_max)``.

    ``extent=None`` (empty data) resolves both sentinels to ``0``.
    """
    if isinstance(bound, Fixed):
        return int(bound.ms)
    lo, hi = extent if extent is not None else EMPTY_EXTENT
    if bound is Sentinel.MIN:
        return lo
    if bound is Sentinel.MAX:
        return hi
    raise TypeError(f"Unsupported bound: {bound!r}")


@dataclass(frozen=True)
class WindowRange:
    """A resolved window in epoch milliseconds."""

    left_ms: int
    right_ms: int

    @property
    def duration_ms(self) -> int:
        return self.right_ms - self.left_ms

    def as_tuple(self) -> tuple[int, int]:
        return self.left_ms, self.right_ms


@dataclass(frozen=True)
class Viewport:
    """Visible left/right bounds of the chart.

    Parameters
    ----------
    left : Bound
        ``Sentinel.MIN`` or a ``Fixed`` timestamp.
    right : Bound
        ``Sentinel.MAX`` or a ``Fixed`` timestamp.
    """

    left: Bound = Sentinel.MIN
    right: Bound = Sentinel.MAX

    @classmethod
    def full(cls) -> "Viewport":
        """Return the viewport that tracks the full data extent."""
        return cls(Sentinel.MIN, Sentinel.MAX)

    @classmethod
    def fixed(cls, left_ms: int, right_ms: int) -> "Viewport":
        return cls(Fixed(int(left_ms)), Fixed(int(right_ms)))

    @property
    def is_full_extent(self) -> bool:
        return self.left is Sentinel.MIN and self.right is Sentinel.MAX

    def resolve(self, data: "SeriesData") -> WindowRange:
        """Resolve both bounds against ``data``'s extent."""
        extent = data.extent
        return WindowRange(resolve_bound(self.left, extent), resolve_bound(self.right, extent))


@dataclass(frozen=True)
class ZoomSnapshot:
    """One-level undo record captured when leaving a named-range view."""

    previous_viewport: Viewport
    previous_named_range: Optional["NamedRange"]


@dataclass(frozen=True)
class DragSelection:
    """In-progress click-drag selection in data space."""

    start_ms: int
    end_ms: Optional[int] = None

    @property
    def is_zero_width(self) -> bool:
        return self.end_ms is None or self.end_ms == self.start_ms

    def ordered(self) -> tuple[int, int]:
        """Return ``(min, max)`` of the endpoints; requires ``end_ms``."""
        if self.end_ms is None:
            raise ValueError("Drag selection has no end point")
        return min(self.start_ms, self.end_ms), max(self.start_ms, self.end_ms)


__all__ = [
    "Bound",
    "DragSelection",
    "EMPTY_EXTENT",
    "Fixed",
    "Sentinel",
    "Viewport",
    "WindowRange",
    "ZoomSnapshot",
    "resolve_bound",
]
