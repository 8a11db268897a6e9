"""Routers exposed by the HTTP surface."""

from .series import router as series_router

__all__ = ["series_router"]
