from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import numpy as np
import pandas as pd

# Text export format: MM/DD/YYYY HH:MM:SS.ffff
EXPORT_FORMAT = "%m/%d/%Y %H:%M:%S"


def to_utc(value: Any) -> pd.Timestamp:
    """Return ``value`` as a tz-aware UTC :class:`pandas.Timestamp`.

    Naive inputs are assumed to already be in UTC. Raises ``ValueError`` when
    the value cannot be interpreted as an instant.
    """

    if value is None:
        raise ValueError("timestamp must not be None")
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"unable to parse timestamp {value!r}") from exc
    if ts is pd.NaT:
        raise ValueError(f"unable to parse timestamp {value!r}")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def to_utc_series(ts: pd.Series | Iterable[object]) -> pd.Series:
    """
    Convert a pandas Series of timestamps to tz-aware UTC datetimes.
    Accepts:
      - strings with or without trailing 'Z'
      - strings with 'T' or space separator
      - tz-aware datetimes (converted to UTC)
      - naive datetimes (assumed UTC)
    Any unparsable element becomes NaT.
    """

    if not isinstance(ts, pd.Series):
        ts = pd.Series(list(ts), dtype=object)

    if pd.api.types.is_datetime64_any_dtype(ts):
        if getattr(ts.dt, "tz", None) is None:
            return ts.dt.tz_localize("UTC")
        return ts.dt.tz_convert("UTC")

    def _one(x: object) -> pd.Timestamp:
        if x is None:
            return pd.NaT
        if isinstance(x, (float, np.floating)) and pd.isna(x):
            return pd.NaT
        try:
            return to_utc(x)
        except ValueError:
            return pd.NaT

    s = ts.map(_one)
    return pd.to_datetime(s, utc=True, errors="coerce")


def format_timestamp(ts: pd.Timestamp) -> str:
    """Render ``ts`` with four truncated fractional-second digits."""

    ts = to_utc(ts)
    return f"{ts.strftime(EXPORT_FORMAT)}.{ts.microsecond // 100:04d}"


def parse_timestamp(text: str) -> pd.Timestamp:
    """Parse an exported timestamp, falling back to pandas' general parser."""

    text = text.strip()
    try:
        parsed = pd.to_datetime(text, format=f"{EXPORT_FORMAT}.%f")
    except (TypeError, ValueError):
        parsed = pd.Timestamp(text)
    return to_utc(parsed)


__all__ = [
    "EXPORT_FORMAT",
    "format_timestamp",
    "parse_timestamp",
    "to_utc",
    "to_utc_series",
]
