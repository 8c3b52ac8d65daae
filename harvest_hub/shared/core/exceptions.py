# 📄 File: harvest_hub/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines the special error types Harvest Hub uses to say what went wrong
# (bad input, expired login, missing garden...) instead of generic error messages.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# machine-readable error codes, and serialization into the API error envelope.
# 🔗 Dependencies:
# FastAPI status constants, typing
# 🔄 Connected Modules / Calls From:
# Security manager, auth dependency, repositories, route handlers, main.py exception handlers

from typing import Any, Dict, Optional

from fastapi import status


class HarvestHubException(Exception):
    """
    Base exception class for Harvest Hub.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the API error envelope."""
        body: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        return body


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(HarvestHubException):
    """
    Exception raised for authentication failures.
    Used when user credentials are invalid or missing.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "AUTHENTICATION_ERROR"
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code=error_code
        )


class MissingAuthHeaderError(AuthenticationError):
    """No Authorization header on the request."""

    def __init__(self, message: str = "Access token required"):
        super().__init__(message=message, error_code="AUTH_HEADER_MISSING")


class InvalidAuthSchemeError(AuthenticationError):
    """Authorization header present but not using the Bearer scheme."""

    def __init__(self, message: str = "Authorization header must use the Bearer scheme"):
        super().__init__(message=message, error_code="AUTH_SCHEME_INVALID")


class MissingTokenError(AuthenticationError):
    """Bearer scheme given without a token."""

    def __init__(self, message: str = "Bearer token missing"):
        super().__init__(message=message, error_code="TOKEN_MISSING")


class InvalidTokenError(AuthenticationError):
    """Token signature or claims could not be verified."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, error_code="TOKEN_INVALID")


class TokenExpiredError(AuthenticationError):
    """Token was valid but is past its expiry."""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message=message, error_code="TOKEN_EXPIRED")


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(HarvestHubException):
    """
    Exception raised for request validation failures.
    Used when a body is missing required fields or carries bad values.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if field:
            details["field"] = field

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(HarvestHubException):
    """
    Exception raised when requested resource is not found.
    Also used for resources owned by another user, which are reported
    exactly like missing ones.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


class DuplicateResourceError(HarvestHubException):
    """
    Exception raised when attempting to create duplicate resources.
    Reported as 400 to match the registration contract.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        resource_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if resource_type:
            details["resource_type"] = resource_type

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code="DUPLICATE_RESOURCE"
        )


class RateLimitError(HarvestHubException):
    """
    Exception raised when rate limits are exceeded.
    Used for API throttling and abuse prevention.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        limit: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if limit:
            details["limit"] = limit

        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details=details,
            error_code="RATE_LIMIT_EXCEEDED"
        )


# =============================================================================
# DATABASE & INFRASTRUCTURE EXCEPTIONS
# =============================================================================

class DatabaseError(HarvestHubException):
    """
    Exception raised for database operation failures.
    Carries the generic, route-specific message shown to the client.
    """

    def __init__(
        self,
        message: str = "Database error",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        db_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.operation = operation
        self.table = table
        self.db_code = db_code
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="DATABASE_ERROR"
        )


class StorageError(HarvestHubException):
    """
    Exception raised for media store failures (upload, delete).
    """

    def __init__(
        self,
        message: str = "Storage operation failed",
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.operation = operation
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="STORAGE_ERROR"
        )
