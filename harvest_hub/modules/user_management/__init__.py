"""
User Management Module

Accounts, authentication and profiles:
- Registration and login with bcrypt-hashed passwords and JWT access tokens
- Profile reads with crop statistics and sharing impact
- Profile images and account deletion
"""

from .api import auth_router, profile_router
from .repository import UserRepository

__all__ = ["auth_router", "profile_router", "UserRepository"]
