"""Tests for the time-indexed containers."""

from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from mvts.data.series import MultivariateTimeSeries, TimeSeries
from mvts.errors import DuplicateTimestampError, InvalidArgumentError

BASE = pd.Timestamp("2024-01-01T00:00:00Z")


def _at(seconds: float) -> pd.Timestamp:
    return BASE + pd.Timedelta(seconds=seconds)


def test_add_keeps_points_ordered() -> None:
    series = TimeSeries(title="speed")
    series.add(_at(2), 2.0)
    series.add(_at(0), 0.0)
    series.add(_at(1), 1.0)

    assert len(series) == 3
    assert [series.timestamp_at(i) for i in range(3)] == [_at(0), _at(1), _at(2)]
    assert series.values.tolist() == [0.0, 1.0, 2.0]


def test_add_rejects_duplicate_unless_overwriting() -> None:
    series = TimeSeries([(_at(0), 1.0), (_at(1), 2.0)])

    with pytest.raises(DuplicateTimestampError):
        series.add(_at(0), 5.0)

    series.add(_at(0), 5.0, overwrite=True)
    assert series[0] == 5.0
    assert len(series) == 2


def test_naive_timestamps_are_treated_as_utc() -> None:
    series = TimeSeries([("2024-01-01 00:00:01", 1.0)])

    assert series.timestamp_at(0) == _at(1)
    assert str(series.timestamps.tz) == "UTC"


def test_value_at_time_holds_previous_value() -> None:
    series = TimeSeries([(_at(1), 10.0), (_at(3), 30.0)])

    assert series.value_at_time(_at(0)) == 10.0
    assert series.value_at_time(_at(1)) == 10.0
    assert series.value_at_time(_at(2)) == 10.0
    assert series.value_at_time(_at(3.5)) == 30.0
    assert series.value_at_time(_at(3), return_exact=True) == (30.0, True)
    assert series.value_at_time(_at(2), return_exact=True) == (10.0, False)


def test_value_at_time_on_empty_series_is_nan() -> None:
    assert math.isnan(TimeSeries().value_at_time(BASE))


def test_index_at_or_before() -> None:
    series = TimeSeries([(_at(1), 1.0), (_at(2), 2.0)])

    assert series.index_at_or_before(_at(0)) == (-1, False)
    assert series.index_at_or_before(_at(1)) == (0, True)
    assert series.index_at_or_before(_at(1.5)) == (0, False)
    assert series.index_at_or_before(_at(9)) == (1, False)


def test_subrange_and_deletions() -> None:
    series = TimeSeries((_at(s), float(s)) for s in range(6))

    sub = series.subrange(_at(1.5), _at(4))
    assert sub.values.tolist() == [2.0, 3.0, 4.0]

    series.delete_point(_at(5))
    with pytest.raises(KeyError):
        series.delete_point(_at(5))

    series.delete_before(_at(3), keep_one=True)
    assert series.values.tolist() == [2.0, 3.0, 4.0]
    series.delete_before(_at(3.5))
    assert series.values.tolist() == [4.0]


def test_common_sampling_interval() -> None:
    series = TimeSeries([(_at(0), 0.0), (_at(1), 1.0), (_at(2), 2.0), (_at(4), 3.0)])

    assert series.common_sampling_interval() == pd.Timedelta(seconds=1)
    assert TimeSeries().common_sampling_interval() == pd.Timedelta(days=1)


def test_nan_helpers() -> None:
    series = TimeSeries([(_at(0), 1.0), (_at(1), math.nan), (_at(2), 3.0)])

    assert series.nan_count() == 1
    series.drop_nans()
    assert series.values.tolist() == [1.0, 3.0]


def test_pandas_round_trip() -> None:
    raw = pd.Series(
        [3.0, 1.0, 2.0],
        index=pd.to_datetime(
            ["2024-01-01T00:00:02Z", "2024-01-01T00:00:00Z", "2024-01-01T00:00:01Z"]
        ),
        name="nox",
    )

    series = TimeSeries.from_series(raw)

    assert series.title == "nox"
    assert series.values.tolist() == [1.0, 2.0, 3.0]
    out = series.to_series()
    assert out.name == "nox"
    assert out.index.name == "timestamp"
    assert out.tolist() == [1.0, 2.0, 3.0]
    assert list(out.index) == list(raw.sort_index().index)


def test_from_series_rejects_duplicates() -> None:
    raw = pd.Series([1.0, 2.0], index=pd.to_datetime(["2024-01-01", "2024-01-01"]))

    with pytest.raises(DuplicateTimestampError):
        TimeSeries.from_series(raw)


def test_multivariate_add_validates_rows() -> None:
    series = MultivariateTimeSeries(2, ["a", None])
    series.add(_at(0), [1.0, np.nan])

    with pytest.raises(InvalidArgumentError):
        series.add(_at(1), [1.0])
    with pytest.raises(DuplicateTimestampError):
        series.add(_at(0), [1.0, 2.0])
    with pytest.raises(InvalidArgumentError):
        series.add(_at(-1), [1.0, 2.0])

    assert len(series) == 1
    assert series.nan_count() == 1
    assert series.component_names == ["a", "Comp.#2"]


def test_multivariate_observed_flags() -> None:
    series = MultivariateTimeSeries(2)
    series.add(_at(0), [1.0, 2.0], observed=[True, False])

    assert series.observed.tolist() == [[True, False]]
    assert math.isnan(series.row(0)[1])


def test_multivariate_rejects_bad_shape() -> None:
    with pytest.raises(InvalidArgumentError):
        MultivariateTimeSeries(0)
    with pytest.raises(InvalidArgumentError):
        MultivariateTimeSeries(2, ["only-one"])


def test_extract_list_and_frame() -> None:
    series = MultivariateTimeSeries(2, ["a", None])
    series.add(_at(0), [1.0, np.nan])
    series.add(_at(1), [2.0, 5.0])

    parts = series.extract_list()
    assert [part.title for part in parts] == ["a", "Comp.#2"]
    assert parts[0].values.tolist() == [1.0, 2.0]
    assert parts[1].values.tolist() == [5.0]
    assert parts[1].timestamp_at(0) == _at(1)

    frame = series.to_frame()
    assert frame.columns.tolist() == ["a", "Comp.#2"]
    assert frame.index.name == "timestamp"
    assert frame["Comp.#2"].isna().tolist() == [True, False]


def test_descriptions() -> None:
    series = MultivariateTimeSeries(1)
    series.add(_at(0), [1.0])

    assert series.describe() == "MV Time Series (Length=1)"
    assert series.short_description() == "MVTS(1)"
    series.title = "trip"
    assert series.short_description() == "trip\n(1)"
