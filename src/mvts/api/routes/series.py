"""Endpoints merging posted sources and computing their autocovariance."""

from __future__ import annotations

import functools
import logging
import os

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from mvts.api.schemas import ACFPayload, ACFRequest, MergeRequest, SeriesPayload
from mvts.config import AlignmentSettings, load_settings
from mvts.data.analysis import compute_acf
from mvts.data.fusion import merge
from mvts.data.ingestion import to_text
from mvts.data.series import MultivariateTimeSeries

logger = logging.getLogger(__name__)

SETTINGS_ENV = "MVTS_SETTINGS"

router = APIRouter(prefix="/api/series", tags=["series"])


@functools.lru_cache(maxsize=1)
def get_settings() -> AlignmentSettings:
    """Load settings from the file named by ``MVTS_SETTINGS`` (defaults otherwise)."""

    return load_settings(os.environ.get(SETTINGS_ENV) or None)


def _merge_request(request: MergeRequest) -> MultivariateTimeSeries:
    settings = get_settings()
    impute = settings.impute_missing if request.impute_missing is None else request.impute_missing
    try:
        sources = [source.to_series() for source in request.sources]
        return merge(sources, impute, title=request.title)
    except ValueError as exc:
        logger.info("rejected merge request: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/merge", response_model=SeriesPayload)
def merge_sources(request: MergeRequest) -> SeriesPayload:
    """Align the posted sources onto one timeline."""

    return SeriesPayload.from_series(_merge_request(request))


@router.post("/acf", response_model=ACFPayload)
def autocovariance(request: ACFRequest) -> ACFPayload:
    """Return lag ``0..max_lag`` covariance (or correlation) matrices."""

    settings = get_settings()
    max_lag = settings.max_lag if request.max_lag is None else request.max_lag
    normalize = settings.normalize if request.normalize is None else request.normalize

    series = _merge_request(request)
    try:
        result = compute_acf(series, max_lag, normalize)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    if result is None:
        return ACFPayload(count=0, normalized=normalize, mean=[], matrices=None)
    return ACFPayload(**result.as_payload())


@router.post("/export", response_class=PlainTextResponse)
def export_sources(request: MergeRequest, detail_level: int | None = None) -> PlainTextResponse:
    """Render the merged sources in the tab-separated text format."""

    level = get_settings().detail_level if detail_level is None else detail_level
    series = _merge_request(request)
    return PlainTextResponse(to_text(series, detail_level=level))


__all__ = ["get_settings", "router"]
