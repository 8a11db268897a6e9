"""Summary statistics over aligned multivariate series."""

from .acf import ACFResult, compute_acf, sample_mean

__all__ = ["ACFResult", "compute_acf", "sample_mean"]
