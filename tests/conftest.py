from __future__ import annotations

import sys
from pathlib import Path

import pytest

_START = Path(__file__).resolve().parent
_project_root = _START
while _project_root != _project_root.parent and not (_project_root / "herochart" / "__init__.py").exists():
    _project_root = _project_root.parent

sys.path.insert(0, str(_project_root))

DAY_MS = 24 * 60 * 60 * 1000


@pytest.fixture
def daily_data():
    """One portfolio/sp500 row per UTC day through 2024 (366 days)."""
    import numpy as np

    from herochart.chart_data import SeriesData
    from herochart.TimestampConvert import TimestampConvert

    start = TimestampConvert("2024-01-01")
    n = 366
    timestamps = start + DAY_MS * np.arange(n, dtype=np.int64)
    portfolio = 100.0 + np.arange(n, dtype=np.float64)
    sp500 = 100.0 + 0.5 * np.arange(n, dtype=np.float64)
    return SeriesData(timestamps, {"portfolio": portfolio, "sp500": sp500})
