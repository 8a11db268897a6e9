"""Generate irregularly sampled demo series, merge them and summarise their ACF."""
from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from mvts.data.analysis import compute_acf
from mvts.data.fusion import merge
from mvts.data.ingestion import write_table
from mvts.data.series import TimeSeries

N_SAMPLES = 600
MAX_LAG = 5
START_TIMESTAMP = "2024-01-01T08:00:00Z"

SAMPLES_DIR = Path(__file__).resolve().parents[1] / "data" / "samples"

rng = np.random.default_rng(seed=42)


def generate_latent(n: int) -> np.ndarray:
    """AR(1) driver shared by every demo source."""
    latent = np.empty(n)
    latent[0] = rng.normal()
    for t in range(1, n):
        latent[t] = 0.8 * latent[t - 1] + rng.normal(0, 0.5)
    return latent


def sample_source(
    title: str,
    latent: np.ndarray,
    keep_probability: float,
    gain: float,
    jitter_ms: int,
) -> TimeSeries:
    """Keep a random subset of the 1 Hz timeline, optionally jittered."""
    start = pd.Timestamp(START_TIMESTAMP)
    series = TimeSeries(title=title)
    for t in np.flatnonzero(rng.random(latent.size) < keep_probability):
        offset = pd.Timedelta(seconds=int(t), milliseconds=int(rng.integers(0, jitter_ms + 1)))
        series.add(start + offset, gain * latent[t] + rng.normal(0, 0.1))
    return series


def write_demo_data() -> None:
    SAMPLES_DIR.mkdir(parents=True, exist_ok=True)

    latent = generate_latent(N_SAMPLES)
    sources = [
        sample_source("speed", latent, keep_probability=0.9, gain=1.0, jitter_ms=0),
        sample_source("load", latent, keep_probability=0.6, gain=-2.0, jitter_ms=0),
        sample_source("temp", latent, keep_probability=0.3, gain=0.5, jitter_ms=250),
    ]

    merged = merge(sources, impute_missing=False, title="demo")
    target = write_table(merged, SAMPLES_DIR / "demo_series.tsv")

    report_statistics(merged)
    print("Wrote:")
    print(f"  {target}")


def report_statistics(merged) -> None:
    total = len(merged) * merged.dimension
    print(f"Merged {merged.dimension} sources into {len(merged)} rows")
    print(f"Missing slots: {merged.nan_count()} of {total}")

    result = compute_acf(merged, MAX_LAG, normalize=True)
    if result is None:
        print("No data.")
        return

    names = merged.component_names
    for lag in range(len(result)):
        cells = ", ".join(
            f"{names[k]}~{names[l]}={result[lag][k, l]:+.3f}"
            for k in range(merged.dimension)
            for l in range(merged.dimension)
        )
        print(f"lag {lag}: {cells}")


def main() -> None:
    write_demo_data()


if __name__ == "__main__":
    main()
