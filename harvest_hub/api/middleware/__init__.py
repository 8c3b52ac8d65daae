"""
HTTP middleware for the Harvest Hub API.
"""

from .error_handling import ErrorHandlingMiddleware
from .logging import RequestLoggingMiddleware

__all__ = ["ErrorHandlingMiddleware", "RequestLoggingMiddleware"]
