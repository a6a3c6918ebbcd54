"""Deterministic synthetic performance data for demos and offline charts.

One master timeline of benchmark random walks is shared by every showcased
portfolio; each portfolio then layers its own OHLC random walk on top using
the drift (``bias``) and volatility multiplier from its
:class:`~herochart.chart_catalog.PortfolioConfig`.

All randomness flows through a seeded ``numpy.random.Generator``: the same
``seed`` and ``end_ms`` always produce the same rows.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np
import pandas as pd

from .chart_catalog import PORTFOLIOS, PRIMARY_SERIES_ID, PortfolioConfig, require_portfolio
from .chart_data import SeriesData
from .TimestampConvert import TimestampConvert

SeedLike = Union[int, np.random.Generator, None]

MINUTES_PER_DAY = 1440
THREE_YEARS_OF_DAYS = 1095

# (low offset, spread) of the uniform daily return per benchmark, before
# volatility scaling: ``r = U(0, spread) - offset``.
BENCHMARK_WALKS: dict[str, tuple[float, float]] = {
    "sp500": (0.0097, 0.02),
    "nasdaq": (0.011, 0.024),
    "russell": (0.014, 0.028),
    "nvda": (0.023, 0.05),
    "tsla": (0.029, 0.06),
    "pltr": (0.024, 0.05),
}


def _rng(seed: SeedLike) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def _default_end_ms() -> int:
    return TimestampConvert(pd.Timestamp.now(tz="UTC").normalize())


def generate_benchmarks(
    points: int = THREE_YEARS_OF_DAYS,
    interval_minutes: int = MINUTES_PER_DAY,
    *,
    end_ms: Optional[int] = None,
    seed: SeedLike = None,
) -> pd.DataFrame:
    """Return benchmark random walks starting near 100.

    Parameters
    ----------
    points : int
        Number of rows.
    interval_minutes : int
        Spacing between rows; volatility scales with ``sqrt(interval / 1 day)``.
    end_ms : int, optional
        Timestamp of the last row. Defaults to today's UTC midnight.
    seed : int or numpy.random.Generator, optional
        Randomness source.

    Returns
    -------
    pandas.DataFrame
        One column per benchmark, indexed by UTC datetimes, values rounded to
        two decimals.

    Raises
    ------
    ValueError
        If ``points`` or ``interval_minutes`` is not positive.
    """
    if points <= 0:
        raise ValueError("points must be > 0")
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be > 0")

    rng = _rng(seed)
    end = TimestampConvert(end_ms) if end_ms is not None else _default_end_ms()
    step_ms = interval_minutes * 60_000
    timestamps = end - step_ms * np.arange(points - 1, -1, -1, dtype=np.int64)
    vol_scale = np.sqrt(interval_minutes / MINUTES_PER_DAY)

    columns = {}
    for series_id, (offset, spread) in BENCHMARK_WALKS.items():
        returns = (rng.random(points) * spread - offset) * vol_scale
        columns[series_id] = np.round(100.0 * np.cumprod(1.0 + returns), 2)

    index = pd.to_datetime(timestamps, unit="ms", utc=True)
    return pd.DataFrame(columns, index=index)


def generate_portfolio(
    benchmarks: pd.DataFrame,
    *,
    bias: float = 0.0005,
    volatility: float = 1.0,
    seed: SeedLike = None,
) -> pd.DataFrame:
    """Layer a portfolio OHLC random walk onto ``benchmarks``.

    Each row opens at the previous close; ``close = open * (1 + drift + shock)``
    with ``drift = bias * volatility`` and a uniform shock of width
    ``0.035 * volatility``. Adds ``open``, ``high``, ``low``, ``close`` (two
    decimals) and ``portfolio`` (the close rounded to an integer).
    """
    rng = _rng(seed)
    n = len(benchmarks)
    drift = bias * volatility
    shocks = (rng.random(n) - 0.5) * 0.035 * volatility
    closes = 100.0 * np.cumprod(1.0 + drift + shocks)
    opens = np.concatenate(([100.0], closes[:-1]))[:n]
    highs = np.maximum(opens, closes) * (1.0 + rng.random(n) * 0.01 * volatility)
    lows = np.minimum(opens, closes) * (1.0 - rng.random(n) * 0.01 * volatility)

    out = benchmarks.copy()
    out["open"] = np.round(opens, 2)
    out["high"] = np.round(highs, 2)
    out["low"] = np.round(lows, 2)
    out["close"] = np.round(closes, 2)
    out[PRIMARY_SERIES_ID] = np.round(closes)
    return out


def generate_portfolio_series(
    portfolio: Union[str, PortfolioConfig],
    *,
    seed: SeedLike = None,
    end_ms: Optional[int] = None,
    points: int = THREE_YEARS_OF_DAYS,
    interval_minutes: int = MINUTES_PER_DAY,
    benchmarks: Optional[pd.DataFrame] = None,
) -> SeriesData:
    """Return chart rows for one showcased portfolio.

    Raises
    ------
    KeyError
        If ``portfolio`` names an unknown portfolio id.
    """
    cfg = portfolio if isinstance(portfolio, PortfolioConfig) else require_portfolio(portfolio)
    rng = _rng(seed)
    if benchmarks is None:
        benchmarks = generate_benchmarks(points, interval_minutes, end_ms=end_ms, seed=rng)
    frame = generate_portfolio(benchmarks, bias=cfg.bias, volatility=cfg.volatility, seed=rng)
    return SeriesData.from_frame(frame)


def generate_all_portfolios(
    *,
    seed: SeedLike = None,
    end_ms: Optional[int] = None,
    points: int = THREE_YEARS_OF_DAYS,
    portfolios: tuple[PortfolioConfig, ...] = PORTFOLIOS,
) -> dict[str, SeriesData]:
    """Return ``{portfolio_id: SeriesData}`` sharing one benchmark timeline."""
    rng = _rng(seed)
    benchmarks = generate_benchmarks(points, end_ms=end_ms, seed=rng)
    return {
        cfg.id: generate_portfolio_series(cfg, seed=rng, benchmarks=benchmarks)
        for cfg in portfolios
    }


__all__ = [
    "BENCHMARK_WALKS",
    "generate_all_portfolios",
    "generate_benchmarks",
    "generate_portfolio",
    "generate_portfolio_series",
]
