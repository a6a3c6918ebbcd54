"""Series and portfolio display catalogue for the hero chart.

This module centralizes the display metadata (label, color, rendering style)
that the figure builder and the toggle panel read, plus the portfolio table
used by the synthetic data generator and the market-data ticker mapping.
Keeping these contracts outside the engine keeps the viewport logic free of
presentation concerns.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum


class SeriesStyle(str, Enum):
    """How a series is drawn."""

    AREA = "area"
    LINE = "line"
    DASHED = "dashed"


@dataclass(frozen=True)
class SeriesConfig:
    """Display metadata for one chart series.

    Parameters
    ----------
    id : str
        Stable series identifier; also the column name in ``SeriesData``.
    label : str
        Human-readable legend label.
    color : str
        CSS color string.
    style : SeriesStyle
        Rendering style.
    is_benchmark : bool
        Whether the series is a market benchmark rather than a holding.
    """

    id: str
    label: str
    color: str
    style: SeriesStyle = SeriesStyle.LINE
    is_benchmark: bool = False


@dataclass(frozen=True)
class PortfolioConfig:
    """A showcased portfolio and its synthetic-data drift/volatility profile."""

    id: str
    name: str
    color: str
    acronym: str
    bias: float = 0.0004
    volatility: float = 1.0


PRIMARY_SERIES_ID = "portfolio"

SERIES: tuple[SeriesConfig, ...] = (
    SeriesConfig("portfolio", "Thesivest", "#10b981", SeriesStyle.AREA),
    SeriesConfig("sp500", "S&P 500", "#0f172a", SeriesStyle.LINE, is_benchmark=True),
    SeriesConfig("nasdaq", "NASDAQ", "#a855f7", SeriesStyle.DASHED, is_benchmark=True),
    SeriesConfig("russell", "Russell 2000", "#eab308", SeriesStyle.DASHED, is_benchmark=True),
    SeriesConfig("nvda", "NVDA", "#22c55e", SeriesStyle.LINE),
    SeriesConfig("tsla", "TSLA", "#ef4444", SeriesStyle.LINE),
    SeriesConfig("pltr", "PLTR", "#3b82f6", SeriesStyle.LINE),
)

PORTFOLIOS: tuple[PortfolioConfig, ...] = (
    PortfolioConfig("thesivest", "Your Portfolio", "#10b981", "YP", bias=0.0006, volatility=0.9),
    PortfolioConfig("berkshire", "Berkshire Hathaway", "#3b82f6", "BRK", bias=0.00035, volatility=0.6),
    PortfolioConfig("pershing", "Pershing Square", "#64748b", "PS", bias=0.00045, volatility=0.8),
    PortfolioConfig("thirdpoint", "Third Point", "#14b8a6", "TP"),
    PortfolioConfig("ark", "ARK Invest", "#d946ef", "AR", bias=0.0001, volatility=2.2),
    PortfolioConfig("renaissance", "Renaissance", "#8b5cf6", "RT", bias=0.0007, volatility=1.1),
)

# Series id -> exchange ticker for the individual-stock overlays.
STOCK_TICKERS: dict[str, str] = {
    "nvda": "NVDA",
    "tsla": "TSLA",
    "pltr": "PLTR",
}

# Portfolio id -> ticker whose closes stand in for the portfolio line.
PORTFOLIO_TICKERS: dict[str, str] = {
    "berkshire": "BRK-B",
    "pershing": "PSHZF",
    "ark": "ARKK",
}

BENCHMARK_TICKER = "SPY"


def series_by_id(series: Iterable[SeriesConfig] = SERIES) -> dict[str, SeriesConfig]:
    """Return an insertion-ordered ``{id: SeriesConfig}`` mapping.

    Raises
    ------
    ValueError
        If two entries share an id.
    """
    out: dict[str, SeriesConfig] = {}
    for cfg in series:
        if cfg.id in out:
            raise ValueError(f"Duplicate series id: {cfg.id!r}")
        out[cfg.id] = cfg
    return out


def require_portfolio(portfolio_id: str, portfolios: Iterable[PortfolioConfig] = PORTFOLIOS) -> PortfolioConfig:
    """Return the portfolio named ``portfolio_id`` or raise ``KeyError``."""
    for cfg in portfolios:
        if cfg.id == portfolio_id:
            return cfg
    raise KeyError(f"Unknown portfolio: {portfolio_id}")


def ticker_to_series(stock_tickers: Mapping[str, str] = STOCK_TICKERS) -> dict[str, str]:
    """Invert a series->ticker mapping into an upper-cased ticker->series mapping."""
    return {ticker.upper(): series_id for series_id, ticker in stock_tickers.items()}


__all__ = [
    "BENCHMARK_TICKER",
    "PORTFOLIOS",
    "PORTFOLIO_TICKERS",
    "PRIMARY_SERIES_ID",
    "PortfolioConfig",
    "SERIES",
    "STOCK_TICKERS",
    "SeriesConfig",
    "SeriesStyle",
    "require_portfolio",
    "series_by_id",
    "ticker_to_series",
]
