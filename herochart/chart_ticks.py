"""X-axis tick generation for time windows of any zoom level.

Ticks are calendar-aligned in UTC and tiered by the window duration
``D = right - left`` (a year counts as 365 days):

- ``D > 5 years``: yearly, on January 1st,
- ``180 days < D <= 5 years``: quarterly, on Jan/Apr/Jul/Oct 1st,
- ``60 days < D <= 180 days``: monthly, on the 1st,
- ``D <= 60 days``: daily, at midnight.

The first tick is the first aligned instant ``>= left``; ticks advance by one
tier unit while ``<= right``. ``D <= 0`` yields ``[left]`` and a window with
no aligned instant yields ``[left, right]``.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator
from enum import Enum

import numpy as np

DAY_MS = 24 * 60 * 60 * 1000
YEAR_MS = 365 * DAY_MS


class TickTier(Enum):
    YEARLY = "yearly"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"
    DAILY = "daily"


# Calendar months per tick for the month-aligned tiers.
_MONTH_STEPS: dict[TickTier, int] = {
    TickTier.YEARLY: 12,
    TickTier.QUARTERLY: 3,
    TickTier.MONTHLY: 1,
}


def tick_tier(duration_ms: int) -> TickTier:
    """Return the tick tier for a window lasting ``duration_ms``."""
    if duration_ms > 5 * YEAR_MS:
        return TickTier.YEARLY
    if duration_ms > 180 * DAY_MS:
        return TickTier.QUARTERLY
    if duration_ms > 60 * DAY_MS:
        return TickTier.MONTHLY
    return TickTier.DAILY


def _day(ms: int) -> np.datetime64:
    return np.datetime64(ms // DAY_MS, "D")


def _month_index(ms: int) -> int:
    """Months from 1970-01 to the month containing ``ms``."""
    return int(_day(ms).astype("datetime64[M]").astype(np.int64))


def _month_start_ms(month_index: int) -> int:
    day = np.datetime64(month_index, "M").astype("datetime64[D]")
    return int(day.astype(np.int64)) * DAY_MS


def _iter_daily(left_ms: int, right_ms: int) -> Iterator[int]:
    ms = -(-left_ms // DAY_MS) * DAY_MS
    while ms <= right_ms:
        yield ms
        ms += DAY_MS


def _iter_monthly(left_ms: int, right_ms: int, months: int) -> Iterator[int]:
    month = (_month_index(left_ms) // months) * months
    ms = _month_start_ms(month)
    while ms < left_ms:
        month += months
        ms = _month_start_ms(month)
    while ms <= right_ms:
        yield ms
        month += months
        ms = _month_start_ms(month)


def iter_axis_ticks(left_ms: int, right_ms: int) -> Iterator[int]:
    """Lazily yield aligned tick timestamps in ``[left_ms, right_ms]``.

    Deterministic and restartable: each call starts a fresh sequence. Works on
    plain integers and calendar months, so any ``int`` window is accepted.
    """
    left_ms, right_ms = int(left_ms), int(right_ms)
    if right_ms <= left_ms:
        return iter(())
    tier = tick_tier(right_ms - left_ms)
    if tier is TickTier.DAILY:
        return _iter_daily(left_ms, right_ms)
    return _iter_monthly(left_ms, right_ms, _MONTH_STEPS[tier])


def compute_axis_ticks(left_ms: int, right_ms: int) -> list[int]:
    """Return gridline timestamps for the window ``[left_ms, right_ms]``.

    Examples
    --------
    >>> compute_axis_ticks(5, 5)
    [5]
    """
    left_ms, right_ms = int(left_ms), int(right_ms)
    if right_ms - left_ms <= 0:
        return [left_ms]
    ticks = list(iter_axis_ticks(left_ms, right_ms))
    if not ticks:
        return [left_ms, right_ms]
    return ticks


def format_tick_label(tick_ms: int, duration_ms: int) -> str:
    """Format a tick for display, coarser as the window widens.

    Under 5 days ``"Mon 3"``; under 90 days ``"Mar 3"``; otherwise ``"Mar 24"``
    (month and two-digit year).
    """
    day = _day(int(tick_ms))
    month_start = day.astype("datetime64[M]")
    month_index = int(month_start.astype(np.int64))
    day_of_month = int((day - month_start.astype("datetime64[D]")).astype(np.int64)) + 1
    month = calendar.month_abbr[month_index % 12 + 1]
    if duration_ms < 5 * DAY_MS:
        # 1970-01-01 was a Thursday
        weekday = (int(day.astype(np.int64)) + 3) % 7
        return f"{calendar.day_abbr[weekday]} {day_of_month}"
    if duration_ms < 90 * DAY_MS:
        return f"{month} {day_of_month}"
    year = 1970 + month_index // 12
    return f"{month} {year % 100:02d}"


__all__ = [
    "DAY_MS",
    "TickTier",
    "YEAR_MS",
    "compute_axis_ticks",
    "format_tick_label",
    "iter_axis_ticks",
    "tick_tier",
]
