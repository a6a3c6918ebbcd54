"""Immutable columnar time-series store used by the viewport engine.

Purpose
-------
``SeriesData`` holds the pre-generated (or pre-fetched) chart rows: one
strictly increasing ``int64`` timestamp column in epoch milliseconds and one
``float64`` column per series id. Missing values are ``NaN``. All arrays are
read-only once constructed; replacing the data means building a new
``SeriesData`` with a higher ``revision``.

Examples
--------
>>> from herochart.chart_data import DataPoint, SeriesData
>>> data = SeriesData.from_points([
...     DataPoint(0, {"portfolio": 100.0}),
...     DataPoint(1, {"portfolio": 110.0}),
... ])
>>> data.extent
(0, 1)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd

from .TimestampConvert import TimestampConvert


@dataclass(frozen=True)
class DataPoint:
    """One chart row: a timestamp and the value of each series at that instant."""

    timestamp_ms: int
    values: Mapping[str, float] = field(default_factory=dict)


class SeriesData:
    """Read-only timestamp-aligned columns for every chart series.

    Parameters
    ----------
    timestamps : array-like of int
        Epoch milliseconds, strictly increasing.
    columns : Mapping[str, array-like of float]
        Series id to values aligned with ``timestamps``.
    revision : int, optional
        Data generation counter.

    Raises
    ------
    ValueError
        If timestamps are not strictly increasing or a column length differs.
    """

    __slots__ = ("_timestamps", "_columns", "_revision")

    def __init__(
        self,
        timestamps: Iterable[int] | np.ndarray,
        columns: Mapping[str, Iterable[float] | np.ndarray],
        *,
        revision: int = 0,
    ) -> None:
        ts = np.asarray(timestamps if isinstance(timestamps, np.ndarray) else list(timestamps), dtype=np.int64)
        if ts.ndim != 1:
            raise ValueError("timestamps must be one-dimensional")
        if ts.size > 1 and not bool(np.all(np.diff(ts) > 0)):
            raise ValueError("timestamps must be strictly increasing")
        ts = ts.copy()
        ts.flags.writeable = False

        cols: dict[str, np.ndarray] = {}
        for series_id, values in columns.items():
            arr = np.asarray(values, dtype=np.float64).copy()
            if arr.shape != ts.shape:
                raise ValueError(
                    f"Series {series_id!r} has {arr.size} values for {ts.size} timestamps"
                )
            arr.flags.writeable = False
            cols[str(series_id)] = arr

        self._timestamps = ts
        self._columns = cols
        self._revision = int(revision)

    # --- Construction helpers ---

    @classmethod
    def empty(cls, series_ids: Iterable[str] = (), *, revision: int = 0) -> "SeriesData":
        """Return a series with no rows."""
        return cls(np.empty(0, dtype=np.int64), {sid: np.empty(0) for sid in series_ids}, revision=revision)

    @classmethod
    def from_points(cls, points: Iterable[DataPoint], *, revision: int = 0) -> "SeriesData":
        """Build from ``DataPoint`` rows; a series absent from a row is ``NaN`` there."""
        rows = list(points)
        series_ids: list[str] = []
        for point in rows:
            for key in point.values:
                if key not in series_ids:
                    series_ids.append(key)
        timestamps = [TimestampConvert(p.timestamp_ms) for p in rows]
        columns = {
            sid: [float(p.values.get(sid, np.nan)) for p in rows]
            for sid in series_ids
        }
        return cls(timestamps, columns, revision=revision)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, *, revision: int = 0) -> "SeriesData":
        """Build from a DataFrame indexed by timestamp (ms ints or datetimes).

        Non-numeric columns are dropped.
        """
        index = frame.index
        if isinstance(index, pd.DatetimeIndex):
            if index.tz is None:
                index = index.tz_localize("UTC")
            elapsed = index - pd.Timestamp(0, tz="UTC")
            timestamps = np.asarray(elapsed // pd.Timedelta(milliseconds=1), dtype=np.int64)
        else:
            timestamps = np.asarray([TimestampConvert(v) for v in index], dtype=np.int64)
        numeric = frame.select_dtypes(include="number")
        columns = {str(col): numeric[col].to_numpy(dtype=np.float64) for col in numeric.columns}
        return cls(timestamps, columns, revision=revision)

    def to_frame(self) -> pd.DataFrame:
        """Return a DataFrame copy indexed by UTC datetimes."""
        index = pd.to_datetime(self._timestamps, unit="ms", utc=True)
        return pd.DataFrame({k: np.array(v) for k, v in self._columns.items()}, index=index)

    def with_revision(self, revision: int) -> "SeriesData":
        """Return the same rows tagged with another revision number."""
        return SeriesData(self._timestamps, self._columns, revision=revision)

    # --- Accessors ---

    @property
    def timestamps(self) -> np.ndarray:
        """Return the read-only timestamp column."""
        return self._timestamps

    @property
    def series_ids(self) -> tuple[str, ...]:
        """Return series ids in column order."""
        return tuple(self._columns)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def is_empty(self) -> bool:
        return self._timestamps.size == 0

    @property
    def extent(self) -> Optional[tuple[int, int]]:
        """Return ``(first_ms, last_ms)`` or ``None`` for an empty series."""
        if self.is_empty:
            return None
        return int(self._timestamps[0]), int(self._timestamps[-1])

    def __len__(self) -> int:
        return int(self._timestamps.size)

    def __contains__(self, series_id: object) -> bool:
        return series_id in self._columns

    def values(self, series_id: str) -> np.ndarray:
        """Return the read-only values of ``series_id`` or raise ``KeyError``."""
        if series_id not in self._columns:
            raise KeyError(f"Unknown series: {series_id}")
        return self._columns[series_id]

    def point(self, index: int) -> DataPoint:
        """Return row ``index`` as a ``DataPoint`` (missing values omitted)."""
        values = {
            sid: float(col[index])
            for sid, col in self._columns.items()
            if not np.isnan(col[index])
        }
        return DataPoint(int(self._timestamps[index]), values)

    def window_mask(self, left_ms: int, right_ms: int) -> np.ndarray:
        """Return a boolean mask of rows with ``left_ms <= t <= right_ms``."""
        return (self._timestamps >= left_ms) & (self._timestamps <= right_ms)

    def window(self, left_ms: int, right_ms: int) -> "SeriesData":
        """Return the inclusive sub-series between ``left_ms`` and ``right_ms``."""
        mask = self.window_mask(left_ms, right_ms)
        return SeriesData(
            self._timestamps[mask],
            {sid: col[mask] for sid, col in self._columns.items()},
            revision=self._revision,
        )

    def __repr__(self) -> str:
        return (
            f"SeriesData(points={len(self)}, series={list(self._columns)!r}, "
            f"revision={self._revision})"
        )


__all__ = ["DataPoint", "SeriesData"]
