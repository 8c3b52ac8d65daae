"""
Core cross-cutting components: error types, token and password security,
and the FastAPI dependencies shared by every router.
"""

from .exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateResourceError,
    HarvestHubException,
    InvalidAuthSchemeError,
    InvalidTokenError,
    MissingAuthHeaderError,
    MissingTokenError,
    NotFoundError,
    RateLimitError,
    StorageError,
    TokenExpiredError,
    ValidationError,
)
from .security import SecurityManager, TokenData

__all__ = [
    "AuthenticationError",
    "DatabaseError",
    "DuplicateResourceError",
    "HarvestHubException",
    "InvalidAuthSchemeError",
    "InvalidTokenError",
    "MissingAuthHeaderError",
    "MissingTokenError",
    "NotFoundError",
    "RateLimitError",
    "SecurityManager",
    "StorageError",
    "TokenData",
    "TokenExpiredError",
    "ValidationError",
]
