"""Tests for the tab-separated export/import format."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from mvts.data.fusion import merge
from mvts.data.ingestion import (
    UNDATED_ORIGIN,
    from_text,
    read_series_list,
    read_table,
    to_text,
    write_table,
)
from mvts.data.series import MultivariateTimeSeries, TimeSeries
from mvts.errors import DuplicateTimestampError

BASE = pd.Timestamp("2024-01-02T03:04:05Z")


def _at(seconds: float) -> pd.Timestamp:
    return BASE + pd.Timedelta(seconds=seconds)


def _merged() -> MultivariateTimeSeries:
    a = TimeSeries([(_at(1), 10.0), (_at(2), 20.0), (_at(3), 30.0)], title="A")
    b = TimeSeries([(_at(2), 100.0), (_at(3), 200.0), (_at(4), 300.0)], title="B")
    return merge([a, b])


def test_export_with_dates() -> None:
    series = MultivariateTimeSeries(2, ["A", None])
    series.add(BASE + pd.Timedelta(microseconds=123456), [1.5, np.nan])

    text = to_text(series)

    assert text == "Date\tA\t\n01/02/2024 03:04:05.1234\t1.500000\tNaN\n"


def test_export_detail_levels() -> None:
    series = _merged()

    values_only = to_text(series, detail_level=0)
    with_header = to_text(series, detail_level=1)

    assert values_only.splitlines()[0] == "10.000000\tNaN"
    assert with_header.splitlines()[0] == "A\tB"
    assert with_header.splitlines()[1:] == values_only.splitlines()


def test_round_trip_reruns_merge() -> None:
    original = _merged()

    restored = from_text(to_text(original))

    assert restored.labels == ("A", "B")
    assert list(restored.timestamps) == list(original.timestamps)
    np.testing.assert_array_equal(restored.observed, original.observed)
    np.testing.assert_allclose(restored.values, original.values)


def test_file_round_trip(tmp_path) -> None:
    path = write_table(_merged(), tmp_path / "series.tsv")

    restored = read_table(path)

    assert len(restored) == 4
    assert restored.nan_count() == 2


def test_import_without_header_or_dates() -> None:
    components = read_series_list("1\t2\n3\t4\n")

    assert [c.title for c in components] == ["TS#1", "TS#2"]
    assert components[0].values.tolist() == [1.0, 3.0]
    assert components[0].timestamp_at(0) == UNDATED_ORIGIN
    assert components[0].timestamp_at(1) == UNDATED_ORIGIN + pd.Timedelta(days=1)


def test_import_skips_blank_and_nan_fields() -> None:
    text = (
        "Date\tx\ty\n"
        "01/01/2024 00:00:00.0000\t1\t\n"
        "01/01/2024 00:00:01.0000\t2\t3\n"
        "01/01/2024 00:00:02.0000\tNaN\t4\n"
    )

    merged = from_text(text)

    assert merged.labels == ("x", "y")
    assert len(merged) == 3
    assert merged.observed.tolist() == [[True, False], [True, True], [False, True]]


def test_import_comma_separated_iso_dates() -> None:
    components = read_series_list("time,a\n2024-01-01T00:00:00Z,1.5\n2024-01-01T00:00:01Z,2.5\n")

    assert len(components) == 1
    assert components[0].title == "a"
    assert components[0].timestamp_at(1) == pd.Timestamp("2024-01-01T00:00:01Z")


def test_import_stops_at_unreadable_date() -> None:
    text = "Date\tx\n01/01/2024 00:00:00.0000\t1\nfooter\t2\n"

    components = read_series_list(text)

    assert components[0].values.tolist() == [1.0]


def test_import_duplicate_timestamps() -> None:
    text = "Date\tx\n01/01/2024 00:00:00.0000\t1\n01/01/2024 00:00:00.0000\t2\n"

    components = read_series_list(text)
    assert components[0].values.tolist() == [1.0]

    with pytest.raises(DuplicateTimestampError):
        read_series_list(text, ignore_duplicates=False)


def test_import_empty_text() -> None:
    assert read_series_list("") == []
    empty = from_text("")
    assert len(empty) == 0
    assert empty.dimension == 1


def test_single_labelled_column_round_trip_without_dates() -> None:
    single = merge([TimeSeries([(_at(0), 1.0), (_at(86400), 2.0)], title="a")])

    restored = from_text(to_text(single, detail_level=1))

    assert restored.labels == ("a",)
    assert len(restored) == 2
    assert restored.values[:, 0].tolist() == [1.0, 2.0]


def test_untitled_components_round_trip_as_none() -> None:
    series = MultivariateTimeSeries(2)
    series.add(_at(0), [1.0, 2.0])
    series.add(_at(1), [3.0, 4.0])

    assert from_text(to_text(series)).labels == (None, None)
    assert from_text(to_text(series, detail_level=1)).labels == (None, None)

    single = MultivariateTimeSeries(1)
    single.add(_at(0), [5.0])
    restored = from_text(to_text(single, detail_level=1))
    assert restored.labels == (None,)
    assert restored.values[:, 0].tolist() == [5.0]


@pytest.mark.parametrize("detail_level", [1, 2])
def test_header_only_text_keeps_dimension_and_labels(detail_level: int) -> None:
    empty = MultivariateTimeSeries(3, ["a", "b", None])

    restored = from_text(to_text(empty, detail_level=detail_level))

    assert len(restored) == 0
    assert restored.dimension == 3
    assert restored.labels == ("a", "b", None)


def test_rows_closer_than_export_resolution_collapse_with_warning(caplog) -> None:
    series = MultivariateTimeSeries(1, ["x"])
    series.add(BASE, [1.0])
    series.add(BASE + pd.Timedelta(microseconds=50), [2.0])

    with caplog.at_level("WARNING", logger="mvts.data.ingestion.tabular"):
        restored = from_text(to_text(series))

    assert len(restored) == 1
    assert restored.values[:, 0].tolist() == [1.0]
    assert any("dropping value" in record.getMessage() for record in caplog.records)
