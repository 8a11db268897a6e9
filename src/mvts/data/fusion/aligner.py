"""Merge independently time-stamped univariate series onto one timeline."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from mvts.data.series import MultivariateTimeSeries, TimeSeries
from mvts.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def merge(
    sources: Sequence[TimeSeries],
    impute_missing: bool = False,
    *,
    title: str | None = None,
) -> MultivariateTimeSeries:
    """Align ``sources`` into a single multivariate series.

    Each distinct timestamp found across the sources produces exactly one
    output row; sources sharing a timestamp contribute to the same row.
    Components without a point at the row's timestamp are left missing, or,
    with ``impute_missing``, filled from ``source.value_at_time`` evaluated at
    that timestamp. The sources are not modified.

    Parameters
    ----------
    sources:
        Univariate series, each with strictly increasing timestamps. Component
        ``i`` of the result is labelled with ``sources[i].title``.
    impute_missing:
        Fill slots without an exact match using each source's held value.

    Returns
    -------
    MultivariateTimeSeries
        A new series of dimension ``len(sources)``.
    """

    if not sources:
        raise InvalidArgumentError("merge requires at least one source series")

    dimension = len(sources)
    merged = MultivariateTimeSeries(
        dimension,
        [source.title for source in sources],
        title=title,
    )

    # index of the last point consumed from each source; -1 before the first
    cursors = [-1] * dimension
    lengths = [len(source) for source in sources]

    while True:
        pending = [i for i in range(dimension) if cursors[i] < lengths[i] - 1]
        if not pending:
            break
        next_time = min(sources[i].timestamp_at(cursors[i] + 1) for i in pending)

        row = np.full(dimension, np.nan)
        for i in pending:
            if sources[i].timestamp_at(cursors[i] + 1) == next_time:
                cursors[i] += 1
                row[i] = sources[i].value_at(cursors[i])

        if impute_missing:
            for i in np.flatnonzero(np.isnan(row)):
                row[i] = sources[i].value_at_time(next_time)

        merged.add(next_time, row)

    logger.debug(
        "merged %d sources into %d rows (%d missing slots, impute=%s)",
        dimension,
        len(merged),
        merged.nan_count(),
        impute_missing,
    )
    return merged


__all__ = ["merge"]
