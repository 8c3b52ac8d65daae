"""
User management HTTP routers.
"""

from .auth import auth_router
from .profiles import profile_router

__all__ = ["auth_router", "profile_router"]
