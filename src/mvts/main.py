"""FastAPI application entrypoint."""

from __future__ import annotations

from mvts.api.main import app, health

__all__ = ["app", "health"]
