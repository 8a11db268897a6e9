"""Time-indexed containers for univariate and multivariate series."""

from __future__ import annotations

import bisect
from collections import Counter
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Sequence

import numpy as np
import pandas as pd

from mvts.errors import DuplicateTimestampError, InvalidArgumentError
from mvts.utils.time import to_utc, to_utc_series

if TYPE_CHECKING:
    from mvts.data.analysis.acf import ACFResult


def _component_name(labels: Sequence[str | None], index: int) -> str:
    label = labels[index] if index < len(labels) else None
    return label if label is not None else f"Comp.#{index + 1}"


class TimeSeries:
    """Univariate series of ``(timestamp, value)`` points ordered by time.

    Timestamps are stored as tz-aware UTC :class:`pandas.Timestamp` objects and
    are strictly increasing by position. Lookups at arbitrary instants use a
    step function: the value of the last point at or before the instant is
    held, instants before the first point take the first value, and an empty
    series yields NaN.
    """

    def __init__(
        self,
        points: Iterable[tuple[Any, float]] | None = None,
        *,
        title: str | None = None,
        description: str = "",
    ) -> None:
        self.title = title
        self.description = description
        self._times: list[pd.Timestamp] = []
        self._values: list[float] = []
        if points is not None:
            for time, value in points:
                self.add(time, value)

    @classmethod
    def from_series(cls, series: pd.Series, *, title: str | None = None) -> "TimeSeries":
        """Build a series from a pandas ``Series`` indexed by timestamps."""

        index = to_utc_series(pd.Series(series.index))
        if index.isna().any():
            raise ValueError(f"{series.name}: unable to parse existing timestamps")
        values = pd.to_numeric(pd.Series(series.to_numpy()), errors="coerce")
        frame = pd.DataFrame({"timestamp": index, "value": values})
        frame = frame.sort_values("timestamp", kind="stable")
        if frame["timestamp"].duplicated().any():
            raise DuplicateTimestampError(f"{series.name}: duplicate timestamps")

        out = cls(title=title if title is not None else series.name)
        out._times = list(frame["timestamp"])
        out._values = [float(v) for v in frame["value"]]
        return out

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> float:
        return self._values[index]

    def __iter__(self) -> Iterator[tuple[pd.Timestamp, float]]:
        return iter(zip(self._times, self._values))

    def __repr__(self) -> str:
        return f"TimeSeries(title={self.title!r}, count={len(self)})"

    @property
    def count(self) -> int:
        return len(self._values)

    @property
    def timestamps(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(self._times, tz="UTC", name="timestamp")

    @property
    def values(self) -> np.ndarray:
        return np.asarray(self._values, dtype=float)

    @property
    def first_time(self) -> pd.Timestamp | None:
        return self._times[0] if self._times else None

    @property
    def last_time(self) -> pd.Timestamp | None:
        return self._times[-1] if self._times else None

    def value_at(self, index: int) -> float:
        return self._values[index]

    def timestamp_at(self, index: int) -> pd.Timestamp:
        return self._times[index]

    def add(self, time: Any, value: float, overwrite: bool = False) -> None:
        """Insert a point, appending when it comes after the last timestamp.

        An existing timestamp raises :class:`DuplicateTimestampError` unless
        ``overwrite`` is set, in which case its value is replaced.
        """

        ts = to_utc(time)
        value = float(value)
        if not self._times or ts > self._times[-1]:
            self._times.append(ts)
            self._values.append(value)
            return

        pos = bisect.bisect_left(self._times, ts)
        if pos < len(self._times) and self._times[pos] == ts:
            if not overwrite:
                raise DuplicateTimestampError(
                    f"{self.title or 'series'}: a point already exists at {ts.isoformat()}"
                )
            self._values[pos] = value
            return
        self._times.insert(pos, ts)
        self._values.insert(pos, value)

    def index_at_or_before(self, time: Any) -> tuple[int, bool]:
        """Return ``(index, exact)`` of the last point at or before ``time``.

        The index is ``-1`` when ``time`` precedes every point.
        """

        ts = to_utc(time)
        pos = bisect.bisect_right(self._times, ts) - 1
        exact = pos >= 0 and self._times[pos] == ts
        return pos, exact

    def value_at_time(self, time: Any, return_exact: bool = False) -> Any:
        """Look up the value at an arbitrary instant using a step-function hold."""

        if not self._values:
            return (float("nan"), False) if return_exact else float("nan")

        pos, exact = self.index_at_or_before(time)
        value = self._values[max(pos, 0)]
        if return_exact:
            return value, exact
        return value

    def subrange(self, start: Any, end: Any) -> "TimeSeries":
        """Return the points with timestamps in the closed interval ``[start, end]``."""

        lo = bisect.bisect_left(self._times, to_utc(start))
        hi = bisect.bisect_right(self._times, to_utc(end))
        out = TimeSeries(title=self.title, description=self.description)
        out._times = self._times[lo:hi]
        out._values = self._values[lo:hi]
        return out

    def delete_point(self, time: Any) -> None:
        pos, exact = self.index_at_or_before(time)
        if not exact:
            raise KeyError(f"no point at {to_utc(time).isoformat()}")
        del self._times[pos]
        del self._values[pos]

    def delete_before(self, time: Any, keep_one: bool = False) -> None:
        """Remove every point strictly before ``time``.

        With ``keep_one`` the last of those earlier points is retained.
        """

        cut = bisect.bisect_left(self._times, to_utc(time))
        if keep_one:
            cut -= 1
        if cut > 0:
            del self._times[:cut]
            del self._values[:cut]

    def common_sampling_interval(self) -> pd.Timedelta:
        """Most frequent spacing among the last 100 intervals (one day if unknown)."""

        recent = self._times[-100:]
        counts = Counter(b - a for a, b in zip(recent, recent[1:]))
        if not counts:
            return pd.Timedelta(days=1)
        return counts.most_common(1)[0][0]

    def nan_count(self) -> int:
        return int(np.isnan(self.values).sum())

    def drop_nans(self) -> None:
        keep = [i for i, v in enumerate(self._values) if not np.isnan(v)]
        self._times = [self._times[i] for i in keep]
        self._values = [self._values[i] for i in keep]

    def to_series(self) -> pd.Series:
        return pd.Series(self.values, index=self.timestamps, name=self.title)


class MultivariateTimeSeries:
    """Time-indexed sequence of fixed-dimension vectors.

    Each slot carries an explicit observed flag next to its value. Missing
    slots hold NaN in :attr:`values` so the NaN sentinel is preserved at
    every export boundary.
    """

    def __init__(
        self,
        dimension: int = 1,
        labels: Sequence[str | None] | None = None,
        *,
        title: str | None = None,
        description: str = "",
    ) -> None:
        if dimension < 1:
            raise InvalidArgumentError("dimension must be at least 1")
        if labels is None:
            labels = [None] * dimension
        if len(labels) != dimension:
            raise InvalidArgumentError(
                f"expected {dimension} labels, got {len(labels)}"
            )
        self._dimension = int(dimension)
        self._labels: tuple[str | None, ...] = tuple(labels)
        self.title = title
        self.description = description
        self._times: list[pd.Timestamp] = []
        self._rows: list[np.ndarray] = []
        self._masks: list[np.ndarray] = []

    @classmethod
    def from_components(
        cls,
        components: Sequence[TimeSeries],
        impute_missing: bool = False,
        *,
        title: str | None = None,
    ) -> "MultivariateTimeSeries":
        """Merge univariate components onto one timeline (see :func:`merge`)."""

        from mvts.data.fusion.aligner import merge

        return merge(components, impute_missing, title=title)

    def __len__(self) -> int:
        return len(self._times)

    def __repr__(self) -> str:
        return (
            f"MultivariateTimeSeries(dimension={self._dimension}, "
            f"labels={list(self._labels)!r}, count={len(self)})"
        )

    @property
    def count(self) -> int:
        return len(self._times)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def labels(self) -> tuple[str | None, ...]:
        return self._labels

    @property
    def component_names(self) -> list[str]:
        return [_component_name(self._labels, i) for i in range(self._dimension)]

    @property
    def timestamps(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(self._times, tz="UTC", name="timestamp")

    @property
    def values(self) -> np.ndarray:
        if not self._rows:
            return np.empty((0, self._dimension), dtype=float)
        return np.vstack(self._rows)

    @property
    def observed(self) -> np.ndarray:
        if not self._masks:
            return np.empty((0, self._dimension), dtype=bool)
        return np.vstack(self._masks)

    def timestamp_at(self, index: int) -> pd.Timestamp:
        return self._times[index]

    def row(self, index: int) -> np.ndarray:
        return self._rows[index].copy()

    def value_at(self, index: int) -> np.ndarray:
        return self.row(index)

    def add(
        self,
        time: Any,
        row: Sequence[float] | np.ndarray,
        observed: Sequence[bool] | np.ndarray | None = None,
    ) -> None:
        """Append a row. NaN entries, or entries flagged unobserved, are missing."""

        ts = to_utc(time)
        if self._times and ts <= self._times[-1]:
            if ts == self._times[-1]:
                raise DuplicateTimestampError(f"a row already exists at {ts.isoformat()}")
            raise InvalidArgumentError(
                f"rows must be appended in time order ({ts.isoformat()} precedes "
                f"{self._times[-1].isoformat()})"
            )

        values = np.array(row, dtype=float).reshape(-1)
        if values.size != self._dimension:
            raise InvalidArgumentError(
                f"row has {values.size} values, series dimension is {self._dimension}"
            )
        mask = ~np.isnan(values)
        if observed is not None:
            mask &= np.asarray(observed, dtype=bool).reshape(-1)
        values[~mask] = np.nan

        self._times.append(ts)
        self._rows.append(values)
        self._masks.append(mask)

    def nan_count(self) -> int:
        """Return the number of missing slots (at most ``count * dimension``)."""

        return int(sum((~mask).sum() for mask in self._masks))

    def extract_list(self) -> list[TimeSeries]:
        """Split into univariate series, dropping missing slots."""

        out = [TimeSeries(title=name) for name in self.component_names]
        for ts, values, mask in zip(self._times, self._rows, self._masks):
            for j in np.flatnonzero(mask):
                out[j].add(ts, values[j])
        return out

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self.values,
            index=self.timestamps,
            columns=self.component_names,
        )

    def describe(self) -> str:
        return f"MV Time Series (Length={len(self)})"

    def short_description(self) -> str:
        if self.title is None:
            return f"MVTS({len(self)})"
        return f"{self.title}\n({len(self)})"

    def sample_mean(self) -> np.ndarray:
        from mvts.data.analysis.acf import sample_mean

        return sample_mean(self)

    def compute_acf(self, max_lag: int, normalize: bool = False) -> "ACFResult | None":
        from mvts.data.analysis.acf import compute_acf

        return compute_acf(self, max_lag, normalize)


__all__ = ["MultivariateTimeSeries", "TimeSeries"]
