"""
Common FastAPI dependencies for Harvest Hub.
Provides access to the explicitly constructed clients held on app.state and
bearer-token authentication for protected routes.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from fastapi import Depends, Request

from ..config.settings import Settings
from ..infrastructure.database.client import DataClient
from ..infrastructure.storage.supabase_storage import MediaStore
from ..utils.logging import user_id_var
from .exceptions import (
    InvalidAuthSchemeError,
    MissingAuthHeaderError,
    MissingTokenError,
)
from .security import SecurityManager

logger = logging.getLogger(__name__)


@dataclass
class CurrentUser:
    """User identity extracted from a verified JWT token."""
    id: Union[int, str]
    email: str
    name: str
    token_payload: Dict[str, Any] = field(default_factory=dict)


# =========================================================================
# APPLICATION STATE
# =========================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_security_manager(request: Request) -> SecurityManager:
    return request.app.state.security


def get_data_client(request: Request) -> DataClient:
    """Data-access client constructed at application startup."""
    client = getattr(request.app.state, "data_client", None)
    if client is None:
        raise ConnectionError("Data client is not initialized")
    return client


def get_media_store(request: Request) -> MediaStore:
    """Media store constructed at application startup."""
    store = getattr(request.app.state, "media_store", None)
    if store is None:
        raise ConnectionError("Media store is not initialized")
    return store


# =========================================================================
# AUTHENTICATION
# =========================================================================

def extract_bearer_token(authorization: str) -> str:
    """
    Extract the token from an Authorization header value.

    Raises:
        MissingAuthHeaderError: Header absent or blank
        InvalidAuthSchemeError: Scheme other than Bearer
        MissingTokenError: "Bearer" with no token after it
    """
    if not authorization or not authorization.strip():
        raise MissingAuthHeaderError()

    parts = authorization.strip().split()
    if parts[0].lower() != "bearer":
        raise InvalidAuthSchemeError()
    if len(parts) < 2:
        raise MissingTokenError()
    if len(parts) > 2:
        raise InvalidAuthSchemeError()
    return parts[1]


async def get_current_user(
    request: Request,
    security: SecurityManager = Depends(get_security_manager),
) -> CurrentUser:
    """
    Authenticate the request from its bearer token.

    The decoded identity is attached to request.state.user for downstream
    handlers and log records.

    Raises:
        AuthenticationError subclasses, one per failure kind (401)
    """
    token = extract_bearer_token(request.headers.get("Authorization", ""))
    token_data = security.verify_token(token)

    current_user = CurrentUser(
        id=token_data.id,
        email=token_data.email,
        name=token_data.name,
        token_payload=token_data.model_dump(),
    )
    request.state.user = current_user
    user_id_var.set(str(current_user.id))

    logger.debug(f"Current user retrieved: {current_user.id}")
    return current_user
