"""Configuration contract for the hero chart engine and widget."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .chart_catalog import PRIMARY_SERIES_ID, SERIES, SeriesConfig, series_by_id
from .chart_ranges import LONGEST_RANGE, NamedRange


@dataclass(frozen=True)
class ChartConfig:
    """Behavior options for :class:`~herochart.chart_engine.ViewportEngine`.

    Parameters
    ----------
    default_range : NamedRange
        Named range shown when the chart first loads.
    reset_range : NamedRange or None
        Named range restored by ``reset_zoom()`` when there is no zoom history.
        ``None`` means the longest preset.
    primary_series : str
        Series used for the headline return.
    initial_series : tuple[str, ...]
        Series visible at start; must be non-empty.
    y_padding_fraction : float
        Fraction of the value span added above and below the Y-domain.
    series : tuple[SeriesConfig, ...]
        Series catalogue. Empty disables id validation.
    relayout_debounce_ms : int
        Cadence at which widget relayout events reach the engine.
    minimal : bool
        Render without axes, header and controls (mini-chart mode).

    Raises
    ------
    ValueError
        If a value is out of range or names a series missing from ``series``.
    """

    default_range: NamedRange = NamedRange.ONE_YEAR
    reset_range: Optional[NamedRange] = None
    primary_series: str = PRIMARY_SERIES_ID
    initial_series: tuple[str, ...] = (PRIMARY_SERIES_ID, "sp500")
    y_padding_fraction: float = 0.05
    series: tuple[SeriesConfig, ...] = field(default=SERIES)
    relayout_debounce_ms: int = 250
    minimal: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "default_range", NamedRange.coerce(self.default_range))
        if self.reset_range is not None:
            object.__setattr__(self, "reset_range", NamedRange.coerce(self.reset_range))
        object.__setattr__(self, "initial_series", tuple(str(s) for s in self.initial_series))
        object.__setattr__(self, "series", tuple(self.series))

        if not self.initial_series:
            raise ValueError("initial_series must name at least one series")
        if self.y_padding_fraction < 0:
            raise ValueError("y_padding_fraction must be >= 0")
        if self.relayout_debounce_ms <= 0:
            raise ValueError("relayout_debounce_ms must be > 0")

        known = series_by_id(self.series)
        if known:
            missing = [sid for sid in (self.primary_series, *self.initial_series) if sid not in known]
            if missing:
                raise ValueError(f"Unknown series in config: {', '.join(missing)}")

    @property
    def effective_reset_range(self) -> NamedRange:
        """Return the fallback range for ``reset_zoom()``."""
        return self.reset_range if self.reset_range is not None else LONGEST_RANGE

    @property
    def series_ids(self) -> tuple[str, ...]:
        return tuple(cfg.id for cfg in self.series)


__all__ = ["ChartConfig"]
