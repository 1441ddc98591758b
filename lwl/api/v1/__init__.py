"""API v1 package."""

from lwl.api.v1.api import api_router

__all__ = ["api_router"]
