"""FastAPI application wiring for the series alignment service."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response

from mvts.api.routes import series_router

app = FastAPI(title="MVTS Align")


@app.get("/health")
def health() -> JSONResponse:
    """Simple liveness endpoint used by deployment probes."""

    return JSONResponse({"status": "ok"})


@app.get("/favicon.ico")
def favicon() -> Response:
    """Return an empty favicon response to silence 404 noise."""

    return Response(status_code=204)


app.include_router(series_router)


__all__ = ["app", "health"]
