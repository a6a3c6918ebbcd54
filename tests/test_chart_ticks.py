from __future__ import annotations

import numpy as np
import pytest

from herochart.chart_ticks import (
    DAY_MS,
    YEAR_MS,
    TickTier,
    compute_axis_ticks,
    format_tick_label,
    iter_axis_ticks,
    tick_tier,
)
from herochart.TimestampConvert import TimestampConvert


def _ms(text: str) -> int:
    return TimestampConvert(text)


def _dates(ticks: list[int]) -> list[str]:
    return [str(np.datetime64(t, "ms").astype("datetime64[D]")) for t in ticks]


def _np_ms(text: str) -> int:
    return int(np.datetime64(text, "ms").astype(np.int64))


def test_degenerate_window_returns_single_left_tick() -> None:
    assert compute_axis_ticks(5, 5) == [5]
    assert compute_axis_ticks(10, 5) == [10]


def test_window_without_aligned_instant_falls_back_to_edges() -> None:
    left = _ms("2024-03-05 10:00")
    right = _ms("2024-03-05 20:00")
    assert compute_axis_ticks(left, right) == [left, right]


@pytest.mark.parametrize(
    ("duration", "tier"),
    [
        (DAY_MS, TickTier.DAILY),
        (60 * DAY_MS, TickTier.DAILY),
        (60 * DAY_MS + 1, TickTier.MONTHLY),
        (180 * DAY_MS, TickTier.MONTHLY),
        (180 * DAY_MS + 1, TickTier.QUARTERLY),
        (5 * YEAR_MS, TickTier.QUARTERLY),
        (5 * YEAR_MS + 1, TickTier.YEARLY),
    ],
)
def test_tick_tier_thresholds(duration: int, tier: TickTier) -> None:
    assert tick_tier(duration) is tier


def test_daily_ticks_start_at_next_midnight_and_include_right_edge() -> None:
    ticks = compute_axis_ticks(_ms("2024-01-01 12:00"), _ms("2024-01-05"))
    assert _dates(ticks) == ["2024-01-02", "2024-01-03", "2024-01-04", "2024-01-05"]


def test_daily_ticks_include_left_edge_when_aligned() -> None:
    ticks = compute_axis_ticks(_ms("2024-01-01"), _ms("2024-01-03 06:00"))
    assert _dates(ticks) == ["2024-01-01", "2024-01-02", "2024-01-03"]


def test_monthly_ticks_fall_on_first_of_month() -> None:
    ticks = compute_axis_ticks(_ms("2024-01-15"), _ms("2024-05-15"))
    assert _dates(ticks) == ["2024-02-01", "2024-03-01", "2024-04-01", "2024-05-01"]


def test_quarterly_ticks_fall_on_quarter_starts() -> None:
    ticks = compute_axis_ticks(_ms("2023-02-10"), _ms("2024-02-10"))
    assert _dates(ticks) == ["2023-04-01", "2023-07-01", "2023-10-01", "2024-01-01"]


def test_yearly_ticks_fall_on_january_first() -> None:
    ticks = compute_axis_ticks(_ms("2018-06-01"), _ms("2024-06-01"))
    assert _dates(ticks) == [f"{year}-01-01" for year in range(2019, 2025)]


def test_iter_axis_ticks_is_lazy_and_restartable() -> None:
    left, right = _ms("2024-01-01"), _ms("2024-02-01")
    gen = iter_axis_ticks(left, right)
    assert next(gen) == left
    assert list(iter_axis_ticks(left, right)) == list(iter_axis_ticks(left, right))


def test_format_tick_label_coarsens_with_window() -> None:
    tick = _ms("2024-03-03")
    assert format_tick_label(tick, 2 * DAY_MS) == "Sun 3"
    assert format_tick_label(tick, 30 * DAY_MS) == "Mar 3"
    assert format_tick_label(tick, 365 * DAY_MS) == "Mar 24"


def test_ticks_cross_the_nanosecond_timestamp_limit() -> None:
    ticks = compute_axis_ticks(_ms("2261-06-01"), _ms("2262-04-01"))
    assert _dates(ticks) == ["2261-07-01", "2261-10-01", "2262-01-01", "2262-04-01"]

    ticks = compute_axis_ticks(_np_ms("2262-03-20"), _np_ms("2262-04-20"))
    assert _dates(ticks)[-3:] == ["2262-04-18", "2262-04-19", "2262-04-20"]


def test_very_wide_window_gets_yearly_ticks() -> None:
    ticks = compute_axis_ticks(0, 10**15)
    assert _dates(ticks[:2]) == ["1970-01-01", "1971-01-01"]
    assert all(a < b for a, b in zip(ticks, ticks[1:]))
    assert _np_ms("9999-01-01") in ticks
    assert ticks[-1] <= 10**15


def test_format_tick_label_outside_pandas_range() -> None:
    assert format_tick_label(_np_ms("3000-03-03"), 30 * DAY_MS) == "Mar 3"
    assert format_tick_label(_np_ms("3000-03-03"), 365 * DAY_MS) == "Mar 00"
    assert format_tick_label(-DAY_MS, DAY_MS) == "Wed 31"
    assert format_tick_label(_np_ms("1600-02-29"), 30 * DAY_MS) == "Feb 29"
