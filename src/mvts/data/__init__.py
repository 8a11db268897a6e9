"""Data layer: containers, alignment, statistics and text I/O."""

from .series import MultivariateTimeSeries, TimeSeries
from .fusion import merge
from .analysis import ACFResult, compute_acf, sample_mean
from .ingestion import from_text, read_series_list, read_table, to_text, write_table

__all__ = [
    "TimeSeries",
    "MultivariateTimeSeries",
    "merge",
    "ACFResult",
    "compute_acf",
    "sample_mean",
    "from_text",
    "read_series_list",
    "read_table",
    "to_text",
    "write_table",
]
