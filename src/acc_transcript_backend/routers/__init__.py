"""API routers for the ACC transcript backend."""

from .api_router import api_router

__all__ = ["api_router"]
