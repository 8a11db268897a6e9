"""Tab-separated text export and comma or tab separated import of multivariate series."""

from __future__ import annotations

import csv
import io
import logging
import math
import pathlib

import pandas as pd

from mvts.data.fusion.aligner import merge
from mvts.data.series import MultivariateTimeSeries, TimeSeries
from mvts.errors import DuplicateTimestampError
from mvts.utils.time import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

# rows without a date column are stamped one day apart from this origin
UNDATED_ORIGIN = pd.Timestamp("2001-01-01", tz="UTC")


def _is_numeric(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def _parse_value(text: str) -> float:
    if text == "NaN":
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def to_text(series: MultivariateTimeSeries, detail_level: int = 2) -> str:
    """Render ``series`` as tab-separated text.

    ``detail_level`` 0 writes values only, 1 adds a header of component
    labels, 2 also adds a leading ``Date`` column with the row timestamps.
    Missing slots are written as ``NaN``.

    Timestamps are truncated to 100 microseconds, so rows closer together
    than that share a written timestamp; on import only the first of them is
    kept per component and the rest are logged and dropped.
    """

    out = io.StringIO()
    with_dates = detail_level > 1

    if detail_level > 0:
        header = [label or "" for label in series.labels]
        if with_dates:
            out.write("Date\t")
        out.write("\t".join(header))
        out.write("\n")

    values = series.values
    for t in range(len(series)):
        if with_dates:
            out.write(f"{format_timestamp(series.timestamp_at(t))}\t")
        out.write(
            "\t".join("NaN" if math.isnan(v) else f"{v:.6f}" for v in values[t])
        )
        out.write("\n")

    return out.getvalue()


def _delimiter(text: str) -> str:
    first = text.lstrip("\r\n").split("\n", 1)[0]
    return "\t" if "\t" in first or "," not in first else ","


def _detect_header(records: list[list[str]]) -> bool:
    first = records[0]
    if any(not _is_numeric(field) for field in first[1:]):
        return True
    if len(first) != 1 or _is_numeric(first[0]):
        return False
    # a lone label column: header unless the next line starts with a date
    return len(records) == 1 or _is_numeric(records[1][0])


def read_series_list(text: str, ignore_duplicates: bool = True) -> list[TimeSeries]:
    """Parse comma or tab separated columns into independent univariate series.

    The delimiter is a tab when the first line contains one, a comma
    otherwise. The first line is a header when any field after the first is
    non-numeric, or when it is a single non-numeric field followed by a
    numeric line. Empty header fields give untitled components. The first
    column holds timestamps when the first data line starts with a
    non-numeric field; otherwise rows are stamped one day apart starting at
    :data:`UNDATED_ORIGIN`. Empty fields and ``NaN`` are skipped. Parsing
    stops at the first row whose timestamp cannot be read.

    A header without data rows yields one empty series per column.
    """

    if not text or not text.strip():
        return []

    records = list(csv.reader(io.StringIO(text), delimiter=_delimiter(text)))
    # an untitled single-column header exports as an empty first line
    if records and not records[0] and len(records) > 1:
        after = records[1]
        if len(after) == 1 and _is_numeric(after[0]):
            records[0] = [""]
    records = [record for record in records if record]

    has_header = _detect_header(records)
    headers = records[0] if has_header else []
    rows = records[1:] if has_header else records

    if rows:
        has_dates = not _is_numeric(rows[0][0])
    else:
        has_dates = bool(headers) and headers[0] == "Date"
    offset = 1 if has_dates else 0
    width = (len(rows[0]) if rows else len(headers)) - offset

    def _title(i: int) -> str | None:
        if not has_header:
            return f"TS#{i + 1}"
        label = headers[i + offset] if i + offset < len(headers) else ""
        return label or None

    collection = [TimeSeries(title=_title(i)) for i in range(width)]

    stamp = UNDATED_ORIGIN
    for number, pieces in enumerate(rows, start=2 if has_header else 1):
        if has_dates:
            try:
                stamp = parse_timestamp(pieces[0])
            except ValueError:
                logger.warning("stopping import at line %d: unreadable date %r", number, pieces[0])
                break

        for i, piece in enumerate(pieces[offset : offset + width]):
            if not piece:
                continue
            value = _parse_value(piece)
            if math.isnan(value):
                continue
            target = collection[i]
            _, exact = target.index_at_or_before(stamp)
            if exact:
                if not ignore_duplicates:
                    raise DuplicateTimestampError(f"Duplicate timestamp at {stamp.isoformat()}")
                logger.warning(
                    "dropping value %r at line %d: %s already has a point at %s",
                    piece,
                    number,
                    target.title or f"column {i + 1}",
                    stamp.isoformat(),
                )
                continue
            target.add(stamp, value)

        if not has_dates:
            stamp = stamp + pd.Timedelta(days=1)

    logger.debug("read %d series from %d text rows", len(collection), len(rows))
    return collection


def from_text(text: str) -> MultivariateTimeSeries:
    """Parse exported text into a fresh series by re-running the merge.

    A header-only text keeps the dimension and labels of its header.
    """

    components = read_series_list(text)
    if not components:
        return MultivariateTimeSeries(1)
    return merge(components, impute_missing=False)


def write_table(
    series: MultivariateTimeSeries,
    path: str | pathlib.Path,
    detail_level: int = 2,
) -> pathlib.Path:
    target = pathlib.Path(path)
    target.write_text(to_text(series, detail_level=detail_level), encoding="utf-8")
    return target


def read_table(path: str | pathlib.Path) -> MultivariateTimeSeries:
    text = pathlib.Path(path).read_text(encoding="utf-8")
    return from_text(text)


__all__ = [
    "UNDATED_ORIGIN",
    "from_text",
    "read_series_list",
    "read_table",
    "to_text",
    "write_table",
]
