"""Alignment of irregular time series and their multivariate autocovariance."""

from .data import (
    ACFResult,
    MultivariateTimeSeries,
    TimeSeries,
    compute_acf,
    from_text,
    merge,
    read_table,
    sample_mean,
    to_text,
    write_table,
)
from .errors import DuplicateTimestampError, InvalidArgumentError

__version__ = "0.1.0"

__all__ = [
    "ACFResult",
    "DuplicateTimestampError",
    "InvalidArgumentError",
    "MultivariateTimeSeries",
    "TimeSeries",
    "compute_acf",
    "from_text",
    "merge",
    "read_table",
    "sample_mean",
    "to_text",
    "write_table",
]
