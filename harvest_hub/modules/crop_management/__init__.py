"""
Crop Management Module

Owner-scoped CRUD for crops, including progress tracking and sharing flags.
"""

from .api import crop_router
from .repository import CropRepository

__all__ = ["crop_router", "CropRepository"]
