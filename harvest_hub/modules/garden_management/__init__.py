"""
Garden Management Module

Owner-scoped CRUD for gardens, the named growing areas crops are planted in.
"""

from .api import garden_router
from .repository import GardenRepository

__all__ = ["garden_router", "GardenRepository"]
