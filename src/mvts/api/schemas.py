"""Request and response models for the series API."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from mvts.data.series import MultivariateTimeSeries, TimeSeries


class SourcePayload(BaseModel):
    """One univariate input series; ``null`` values are treated as missing."""

    label: Optional[str] = None
    timestamps: list[datetime]
    values: list[Optional[float]]

    @model_validator(mode="after")
    def _same_length(self) -> "SourcePayload":
        if len(self.timestamps) != len(self.values):
            raise ValueError(
                f"{self.label or 'source'}: {len(self.timestamps)} timestamps "
                f"but {len(self.values)} values"
            )
        return self

    def to_series(self) -> TimeSeries:
        points = (
            (ts, math.nan if value is None else value)
            for ts, value in zip(self.timestamps, self.values)
        )
        return TimeSeries(points, title=self.label)


class MergeRequest(BaseModel):
    sources: list[SourcePayload] = Field(default_factory=list)
    impute_missing: Optional[bool] = None
    title: Optional[str] = None


class ACFRequest(MergeRequest):
    max_lag: Optional[int] = None
    normalize: Optional[bool] = None


class SeriesPayload(BaseModel):
    description: str
    short_description: str
    labels: list[Optional[str]]
    timestamps: list[str]
    rows: list[list[Optional[float]]]
    count: int
    nan_count: int

    @classmethod
    def from_series(cls, series: MultivariateTimeSeries) -> "SeriesPayload":
        observed = series.observed
        values = series.values
        rows = [
            [float(v) if ok else None for v, ok in zip(values[t], observed[t])]
            for t in range(len(series))
        ]
        return cls(
            description=series.describe(),
            short_description=series.short_description(),
            labels=list(series.labels),
            timestamps=[ts.isoformat() for ts in series.timestamps],
            rows=rows,
            count=len(series),
            nan_count=series.nan_count(),
        )


class ACFPayload(BaseModel):
    count: int
    normalized: bool
    mean: list[Optional[float]]
    matrices: Optional[list[list[list[Optional[float]]]]] = None


__all__ = [
    "ACFPayload",
    "ACFRequest",
    "MergeRequest",
    "SeriesPayload",
    "SourcePayload",
]
