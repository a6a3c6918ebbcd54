"""Turn fetched market closes into hero chart rows.

Purpose
-------
The market-data fetch (outside this package) yields, per ticker, a list of
``(date, close)`` observations. :func:`build_market_series` maps tickers onto
chart series, rebases every series to start at 100, aligns observations to UTC
calendar days and fills weekend/holiday gaps from recent closes so lines do
not break.

Mapping rules
-------------
- A ticker in ``stock_tickers`` feeds its stock series (``NVDA -> nvda``).
- The ``active_ticker`` (the showcased portfolio's ticker) feeds ``portfolio``.
- The ``benchmark_ticker`` (``SPY``) feeds ``sp500``.

Days on which a series has no close take the latest close from at most
``max_fill_days`` calendar days earlier; days before a series starts stay
missing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

import numpy as np
import pandas as pd

from .chart_catalog import BENCHMARK_TICKER, PRIMARY_SERIES_ID, STOCK_TICKERS, ticker_to_series
from .chart_data import SeriesData
from .TimestampConvert import TimestampConvert

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

BENCHMARK_SERIES_ID = "sp500"


def _observation(row: Any) -> tuple[int, float]:
    """Return ``(timestamp_ms, close)`` from a tuple or a ``{"date", "close"}`` mapping."""
    if isinstance(row, Mapping):
        return TimestampConvert(row["date"]), float(row["close"])
    date, close = row
    return TimestampConvert(date), float(close)


def rebase_closes(rows: Iterable[Any]) -> Optional[pd.Series]:
    """Return closes indexed by UTC day and rebased so the first equals 100.

    Several observations on one day keep the last. Returns ``None`` when there
    are no rows or the first close is zero.
    """
    observations = [_observation(row) for row in rows]
    if not observations:
        return None
    ms, closes = zip(*observations)
    index = pd.to_datetime(np.asarray(ms, dtype=np.int64), unit="ms", utc=True).floor("D")
    series = pd.Series(np.asarray(closes, dtype=np.float64), index=index).sort_index(kind="stable")
    series = series[~series.index.duplicated(keep="last")]
    first = float(series.iloc[0])
    if first == 0:
        return None
    return series * 100.0 / first


def build_market_series(
    market_data: Mapping[str, Iterable[Any]],
    *,
    active_ticker: Optional[str] = None,
    stock_tickers: Mapping[str, str] = STOCK_TICKERS,
    benchmark_ticker: str = BENCHMARK_TICKER,
    max_fill_days: int = 5,
    revision: int = 0,
) -> Optional[SeriesData]:
    """Build chart rows from per-ticker closes.

    Parameters
    ----------
    market_data : Mapping[str, Iterable]
        Ticker to observations, each ``(date, close)`` or
        ``{"date": ..., "close": ...}``; dates are ms or date-like.
    active_ticker : str, optional
        Ticker standing in for the ``portfolio`` series.
    stock_tickers : Mapping[str, str]
        Series id to ticker for individual-stock overlays.
    benchmark_ticker : str
        Ticker feeding the ``sp500`` series.
    max_fill_days : int
        Calendar days a close may be carried forward.
    revision : int
        Revision stamped on the result.

    Returns
    -------
    SeriesData or None
        ``None`` when no ticker maps to a series; callers fall back to
        synthetic data.

    Raises
    ------
    ValueError
        If ``max_fill_days`` is negative.
    """
    if max_fill_days < 0:
        raise ValueError("max_fill_days must be >= 0")
    if not market_data:
        return None

    by_ticker = ticker_to_series(stock_tickers)
    active = active_ticker.upper() if active_ticker else None
    benchmark = benchmark_ticker.upper()

    processed: dict[str, pd.Series] = {}
    days: list[pd.DatetimeIndex] = []
    for ticker, rows in market_data.items():
        rebased = rebase_closes(rows)
        if rebased is None:
            logger.debug("skipping %s: no usable closes", ticker)
            continue
        days.append(rebased.index)

        key = str(ticker).upper()
        targets = []
        if key in by_ticker:
            targets.append(by_ticker[key])
        if active is not None and key == active:
            targets.append(PRIMARY_SERIES_ID)
        if key == benchmark:
            targets.append(BENCHMARK_SERIES_ID)
        for series_id in targets:
            processed[series_id] = rebased

    if not processed:
        logger.debug("no market tickers map to chart series: %s", sorted(market_data))
        return None

    timeline = days[0]
    for index in days[1:]:
        timeline = timeline.union(index)

    columns = {}
    for series_id, rebased in processed.items():
        calendar = rebased.reindex(pd.date_range(rebased.index[0], timeline[-1], freq="D"))
        if max_fill_days:
            calendar = calendar.ffill(limit=max_fill_days)
        columns[series_id] = calendar.reindex(timeline)

    frame = pd.DataFrame(columns, index=timeline)
    logger.debug("built market series: days=%d series=%s", len(frame), list(frame.columns))
    return SeriesData.from_frame(frame, revision=revision)


__all__ = ["BENCHMARK_SERIES_ID", "build_market_series", "rebase_closes"]
