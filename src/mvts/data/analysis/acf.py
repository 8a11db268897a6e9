"""Sample mean and lagged cross-covariance/correlation of aligned series."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

import numpy as np

from mvts.errors import InvalidArgumentError

if TYPE_CHECKING:
    from mvts.data.series import MultivariateTimeSeries

logger = logging.getLogger(__name__)


def _finite_or_none(value: float) -> float | None:
    return float(value) if math.isfinite(value) else None


@dataclass(frozen=True)
class ACFResult:
    """Lag ``0..max_lag`` cross-covariance (or correlation) matrices.

    ``matrices[h][k, l]`` relates component ``k`` at time ``t`` to component
    ``l`` at time ``t - h``.
    """

    matrices: np.ndarray
    mean: np.ndarray
    n: int
    normalized: bool

    def __len__(self) -> int:
        return int(self.matrices.shape[0])

    def __getitem__(self, lag: int) -> np.ndarray:
        return self.matrices[lag]

    @property
    def max_lag(self) -> int:
        return len(self) - 1

    def correlation_bounds_ok(self) -> bool:
        """True when every finite entry lies within ``[-1, 1]`` (up to rounding)."""

        finite = self.matrices[np.isfinite(self.matrices)]
        return bool(np.all(np.abs(finite) <= 1.0 + 1e-12))

    def as_payload(self) -> Mapping[str, Any]:
        """Return a JSON-serialisable mapping; NaN and inf become ``None``."""

        return {
            "count": self.n,
            "normalized": self.normalized,
            "mean": [_finite_or_none(v) for v in self.mean],
            "matrices": [
                [[_finite_or_none(v) for v in row] for row in matrix]
                for matrix in self.matrices
            ],
        }


def sample_mean(series: "MultivariateTimeSeries") -> np.ndarray:
    """Per-component mean over observed slots; 0 where nothing was observed."""

    observed = series.observed
    totals = np.where(observed, series.values, 0.0).sum(axis=0)
    counts = observed.sum(axis=0)
    mean = np.zeros(series.dimension, dtype=float)
    np.divide(totals, counts, out=mean, where=counts > 0)
    return mean


def compute_acf(
    series: "MultivariateTimeSeries",
    max_lag: int,
    normalize: bool = False,
) -> ACFResult | None:
    """Estimate the sample autocovariance function of ``series``.

    For each lag ``h`` the ``[k, l]`` entry sums
    ``(x[t, k] - mean[k]) * (x[t - h, l] - mean[l])`` over ``t = h .. n-1``,
    omitting every term where either slot is missing, and divides by the
    total row count ``n``. The divisor does not shrink with the number of
    usable pairs, so estimates are biased towards zero as missing data
    increases.

    With ``normalize`` each entry is further divided by
    ``sqrt(acf[0][k, k] * acf[0][l, l])``. Zero-variance components produce
    NaN or inf entries rather than an error.

    Returns ``None`` when the series has no rows.
    """

    if max_lag < 0:
        raise InvalidArgumentError(f"max_lag must be non-negative, got {max_lag}")

    n = len(series)
    if n == 0:
        logger.debug("compute_acf called on an empty series; no data")
        return None

    dimension = series.dimension
    mean = sample_mean(series)
    # missing slots contribute zero, which is the same as skipping the term
    centered = np.where(series.observed, series.values - mean, 0.0)

    matrices = np.zeros((max_lag + 1, dimension, dimension), dtype=float)
    for lag in range(min(max_lag, n - 1) + 1):
        matrices[lag] = centered[lag:].T @ centered[: n - lag]
    matrices /= n

    if normalize:
        diags = np.sqrt(np.diagonal(matrices[0]).copy())
        with np.errstate(divide="ignore", invalid="ignore"):
            matrices = matrices / np.outer(diags, diags)

    logger.debug(
        "computed ACF over %d rows, dimension %d, max_lag %d (normalized=%s)",
        n,
        dimension,
        max_lag,
        normalize,
    )
    return ACFResult(matrices=matrices, mean=mean, n=n, normalized=normalize)


__all__ = ["ACFResult", "compute_acf", "sample_mean"]
