from __future__ import annotations

import math

import numpy as np
import pytest

from herochart.chart_data import DataPoint, SeriesData
from herochart.chart_metrics import (
    AUTO_SCALE,
    compute_window_return,
    compute_y_domain,
    format_return,
    round_half_up,
    series_change_pct,
)
from herochart.chart_viewport import WindowRange


def _three_points() -> SeriesData:
    return SeriesData.from_points(
        [
            DataPoint(0, {"portfolio": 100.0, "sp500": 100.0}),
            DataPoint(1, {"portfolio": 110.0, "sp500": 95.0}),
            DataPoint(2, {"portfolio": 121.0, "sp500": 104.0}),
        ]
    )


def test_y_domain_pads_five_percent_and_rounds_half_up() -> None:
    data = SeriesData([0, 1], {"portfolio": [10.0, 20.0]})
    # span 10 -> padding 0.5 -> [9.5, 20.5] -> round half up -> (10, 21)
    assert compute_y_domain(data, WindowRange(0, 1), ["portfolio"]) == (10, 21)


def test_round_half_up_moves_halves_toward_positive_infinity() -> None:
    assert round_half_up(9.5) == 10
    assert round_half_up(20.5) == 21
    assert round_half_up(-0.5) == 0
    assert round_half_up(-1.6) == -2


def test_y_domain_spans_all_visible_series_in_window_only() -> None:
    data = _three_points()
    assert compute_y_domain(data, WindowRange(0, 1), ["portfolio", "sp500"], padding_fraction=0.0) == (95, 110)
    assert compute_y_domain(data, WindowRange(1, 2), ["portfolio"], padding_fraction=0.0) == (110, 121)


def test_y_domain_ignores_missing_values_and_unknown_series() -> None:
    data = SeriesData([0, 1, 2], {"portfolio": [100.0, np.nan, 120.0]})
    assert compute_y_domain(data, WindowRange(0, 2), ["portfolio", "nvda"], padding_fraction=0.0) == (100, 120)


def test_y_domain_auto_scale_sentinels() -> None:
    empty = SeriesData.empty(["portfolio"])
    assert compute_y_domain(empty, WindowRange(0, 0), ["portfolio"]) is AUTO_SCALE

    data = _three_points()
    assert compute_y_domain(data, WindowRange(10, 20), ["portfolio"]) is AUTO_SCALE

    gaps = SeriesData([0, 1], {"portfolio": [np.nan, np.nan]})
    assert compute_y_domain(gaps, WindowRange(0, 1), ["portfolio"]) is AUTO_SCALE
    assert AUTO_SCALE != (0, 0)


def test_window_return_over_full_and_zoomed_windows() -> None:
    data = _three_points()
    assert compute_window_return(data, WindowRange(0, 2), "portfolio") == pytest.approx(21.0)
    assert compute_window_return(data, WindowRange(0, 1), "portfolio") == pytest.approx(10.0)


def test_window_return_falls_back_to_series_edges() -> None:
    data = _three_points()
    # Window entirely after the data: start falls back to the first point.
    assert compute_window_return(data, WindowRange(5, 9), "portfolio") == pytest.approx(21.0)
    # Window entirely before the data: end falls back to the last point.
    assert compute_window_return(data, WindowRange(-9, -5), "portfolio") == pytest.approx(21.0)


def test_window_return_zero_cases() -> None:
    assert compute_window_return(SeriesData.empty(), WindowRange(0, 0), "portfolio") == 0.0
    zero_start = SeriesData([0, 1], {"portfolio": [0.0, 50.0]})
    assert compute_window_return(zero_start, WindowRange(0, 1), "portfolio") == 0.0
    missing = SeriesData([0, 1], {"portfolio": [np.nan, 50.0]})
    assert compute_window_return(missing, WindowRange(0, 1), "portfolio") == 0.0
    assert compute_window_return(_three_points(), WindowRange(0, 2), "nvda") == 0.0


def test_format_helpers() -> None:
    assert format_return(21.0) == "+21.0%"
    assert format_return(0.0) == "+0.0%"
    assert format_return(-3.44) == "-3.4%"
    assert series_change_pct(112.5) == pytest.approx(12.5)
    np.testing.assert_allclose(series_change_pct(np.array([100.0, 90.0])), [0.0, -10.0])
    assert not math.isnan(series_change_pct(100.0))
