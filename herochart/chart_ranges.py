"""Named range presets for the hero chart range buttons.

Each :class:`NamedRange` maps to a rule that computes the left bound of the
window from an anchor timestamp (the last data point). Calendar arithmetic is
done in UTC with ``pandas.DateOffset`` so month arithmetic clamps to the end
of shorter months (``Mar 31 - 1 month -> Feb 28/29``).
"""

from __future__ import annotations

from enum import Enum

import pandas as pd

from .TimestampConvert import TimestampConvert, timestamp_to_datetime


class NamedRange(str, Enum):
    """Preset spans selectable via range buttons."""

    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    SIX_MONTHS = "6M"
    YEAR_TO_DATE = "YTD"
    ONE_YEAR = "1Y"
    THREE_YEARS = "3Y"

    @property
    def label(self) -> str:
        """Return the button label (``"1M"``, ``"YTD"``, ...)."""
        return self.value

    def start_for(self, anchor_ms: int) -> int:
        """Return the left bound in epoch ms for a window ending at ``anchor_ms``."""
        anchor = timestamp_to_datetime(anchor_ms)
        if self is NamedRange.YEAR_TO_DATE:
            start = pd.Timestamp(year=anchor.year, month=1, day=1, tz="UTC")
        else:
            start = anchor - _OFFSETS[self]
        return TimestampConvert(start)

    @classmethod
    def coerce(cls, value: "NamedRange | str") -> "NamedRange":
        """Return ``value`` as a ``NamedRange``, accepting labels like ``"1Y"``.

        Raises
        ------
        ValueError
            If ``value`` is not a known range label.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper()
        for member in cls:
            if member.value == key or member.name == key:
                return member
        raise ValueError(f"Unknown named range: {value!r}")


_OFFSETS: dict[NamedRange, pd.DateOffset] = {
    NamedRange.ONE_MONTH: pd.DateOffset(months=1),
    NamedRange.THREE_MONTHS: pd.DateOffset(months=3),
    NamedRange.SIX_MONTHS: pd.DateOffset(months=6),
    NamedRange.ONE_YEAR: pd.DateOffset(years=1),
    NamedRange.THREE_YEARS: pd.DateOffset(years=3),
}

# Button order; the last entry is the longest preset.
TIME_RANGES: tuple[NamedRange, ...] = tuple(NamedRange)
LONGEST_RANGE: NamedRange = NamedRange.THREE_YEARS


__all__ = ["LONGEST_RANGE", "NamedRange", "TIME_RANGES"]
