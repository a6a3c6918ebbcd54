# === SECTION: TimestampConvert [id: TimestampConvert]===
from __future__ import annotations

import datetime as dt
from typing import Any

import numpy as np
import pandas as pd


def TimestampConvert(obj: Any, truncate: bool = True) -> int:
    """
    Convert `obj` to an integer timestamp in epoch milliseconds (UTC).

    Supported inputs:
    - int / float / numpy numbers: interpreted as epoch milliseconds.
    - str: a plain number is epoch milliseconds, anything else is parsed as a
      date/time string (Plotly sends date-axis ranges as
      ``"2024-03-01 12:00:00.123"``).
    - datetime.date, datetime.datetime, numpy.datetime64, pandas.Timestamp.

    Naive date/times are taken to be UTC.

    Truncation Rules (`truncate`):
    - When converting a fractional millisecond value:
        - If `truncate=True`: Drop the fractional part (e.g., 3.9 -> 3).
        - If `truncate=False`: Raise ValueError unless it is an exact integer.

    Raises
    ------
    TypeError
        If `obj` is a bool or None.
    ValueError
        If conversion fails or violates truncation rules.
    """
    if obj is None or isinstance(obj, bool):
        raise TypeError(f"Cannot convert {obj!r} to a timestamp.")

    def _coerce_ms(value: float) -> int:
        if not np.isfinite(value):
            raise ValueError(f"Could not convert {obj!r} to a timestamp: value is not finite.")
        if not float(value).is_integer() and not truncate:
            raise ValueError(
                f"Could not convert {obj!r} to a timestamp: value is not an exact millisecond."
            )
        return int(value)

    # Fast path: numbers are already epoch milliseconds
    if isinstance(obj, (int, np.integer)):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        return _coerce_ms(float(obj))

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError("Cannot convert empty string to a timestamp.")

        # 1) Plain numeric string
        try:
            return _coerce_ms(float(s))
        except ValueError:
            pass

        # 2) Date string path
        try:
            return _timestamp_to_ms(pd.Timestamp(s))
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to a timestamp (neither numeric nor a date string)."
            ) from e

    if isinstance(obj, (dt.date, np.datetime64, pd.Timestamp)):
        try:
            return _timestamp_to_ms(pd.Timestamp(obj))
        except Exception as e:
            raise ValueError(f"Could not convert {obj!r} to a timestamp.") from e

    raise TypeError(f"Unsupported timestamp input type: {type(obj).__name__}.")


def _timestamp_to_ms(ts: pd.Timestamp) -> int:
    if ts is pd.NaT:
        raise ValueError("NaT is not a valid timestamp.")
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return int(ts.value // 1_000_000)


def timestamp_to_datetime(ms: int) -> pd.Timestamp:
    """Return the UTC ``pandas.Timestamp`` for epoch milliseconds ``ms``."""
    return pd.Timestamp(int(ms), unit="ms", tz="UTC")

# === END OF SECTION: TimestampConvert [id: TimestampConvert]===
