from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from herochart.chart_catalog import PORTFOLIOS
from herochart.synthetic import (
    BENCHMARK_WALKS,
    generate_all_portfolios,
    generate_benchmarks,
    generate_portfolio,
    generate_portfolio_series,
)
from herochart.TimestampConvert import TimestampConvert

END_MS = TimestampConvert("2024-06-30")
DAY_MS = 24 * 60 * 60 * 1000


def test_benchmarks_end_at_requested_instant_with_daily_spacing() -> None:
    frame = generate_benchmarks(30, end_ms=END_MS, seed=1)
    assert list(frame.columns) == list(BENCHMARK_WALKS)
    assert len(frame) == 30
    assert frame.index[-1] == pd.Timestamp("2024-06-30", tz="UTC")
    assert (frame.index[1] - frame.index[0]) == pd.Timedelta(days=1)
    assert np.allclose(frame.to_numpy(), np.round(frame.to_numpy(), 2))


def test_benchmark_interval_controls_spacing() -> None:
    frame = generate_benchmarks(4, 60, end_ms=END_MS, seed=1)
    assert (frame.index[-1] - frame.index[0]) == pd.Timedelta(hours=3)


@pytest.mark.parametrize(("points", "interval"), [(0, 1440), (10, 0)])
def test_benchmarks_reject_non_positive_sizes(points: int, interval: int) -> None:
    with pytest.raises(ValueError):
        generate_benchmarks(points, interval, end_ms=END_MS, seed=1)


def test_same_seed_and_end_reproduce_rows() -> None:
    a = generate_portfolio_series("ark", seed=7, end_ms=END_MS, points=50)
    b = generate_portfolio_series("ark", seed=7, end_ms=END_MS, points=50)
    c = generate_portfolio_series("ark", seed=8, end_ms=END_MS, points=50)
    np.testing.assert_array_equal(a.timestamps, b.timestamps)
    np.testing.assert_array_equal(a.values("portfolio"), b.values("portfolio"))
    assert not np.array_equal(a.values("sp500"), c.values("sp500"))


def test_portfolio_ohlc_columns_are_consistent() -> None:
    benchmarks = generate_benchmarks(40, end_ms=END_MS, seed=3)
    frame = generate_portfolio(benchmarks, bias=0.001, volatility=1.5, seed=3)
    assert {"open", "high", "low", "close", "portfolio"} <= set(frame.columns)
    assert frame["open"].iloc[0] == 100.0
    assert (frame["high"] >= frame[["open", "close"]].max(axis=1) - 0.01).all()
    assert (frame["low"] <= frame[["open", "close"]].min(axis=1) + 0.01).all()
    np.testing.assert_array_equal(frame["portfolio"], np.round(frame["portfolio"]))
    assert "portfolio" not in benchmarks.columns


def test_unknown_portfolio_raises_key_error() -> None:
    with pytest.raises(KeyError, match="Unknown portfolio"):
        generate_portfolio_series("madoff", seed=1, end_ms=END_MS, points=5)


def test_all_portfolios_share_one_timeline() -> None:
    result = generate_all_portfolios(seed=11, end_ms=END_MS, points=20)
    assert list(result) == [cfg.id for cfg in PORTFOLIOS]
    first = next(iter(result.values()))
    for data in result.values():
        np.testing.assert_array_equal(data.timestamps, first.timestamps)
        np.testing.assert_array_equal(data.values("sp500"), first.values("sp500"))
        assert data.extent[1] == END_MS
    assert not np.array_equal(result["ark"].values("portfolio"), result["berkshire"].values("portfolio"))
