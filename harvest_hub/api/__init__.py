"""
HTTP layer: route aggregation, health check and middleware.
"""

from .router import api_router

__all__ = ["api_router"]
