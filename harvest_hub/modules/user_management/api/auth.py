# 📄 File: harvest_hub/modules/user_management/api/auth.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for creating an account, logging in, checking who is logged in,
# and logging out of Harvest Hub.
#
# 🧪 Purpose (Technical Summary):
# FastAPI authentication endpoints issuing 7-day JWT access tokens, with bcrypt password
# hashing and slowapi rate limiting on the public credential endpoints.
#
# 🔗 Dependencies:
# - FastAPI router, status codes
# - slowapi rate limiting (harvest_hub.shared.core.rate_limiter)
# - harvest_hub.shared.core.security (SecurityManager)
# - harvest_hub.modules.user_management.repository (UserRepository)
#
# 🔄 Connected Modules / Calls From:
# - harvest_hub.api.router (mounted under /api/auth)
# - Mobile and web clients (sign-up and sign-in screens)

"""
Authentication API Endpoints

Endpoints:
- POST /register: Create an account and return a token
- POST /login: Exchange email and password for a token
- GET  /me: Current user's account row
- POST /logout: Client-side logout acknowledgement

Security Features:
- Rate limiting on register and login
- Identical 401 for unknown email and wrong password
- Password hashes never leave the repository layer unstripped
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from harvest_hub.modules.user_management.repository import ME_COLUMNS, UserRepository, public_user
from harvest_hub.modules.user_management.schemas import LoginRequest, RegisterRequest
from harvest_hub.shared.core.dependencies import (
    CurrentUser,
    get_current_user,
    get_data_client,
    get_security_manager,
)
from harvest_hub.shared.core.exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateResourceError,
    HarvestHubException,
    NotFoundError,
    ValidationError,
)
from harvest_hub.shared.core.rate_limiter import enforce_auth_rate_limit
from harvest_hub.shared.core.security import SecurityManager
from harvest_hub.shared.infrastructure.database.client import DataClient
from harvest_hub.shared.utils.helpers import utc_now_iso

logger = logging.getLogger(__name__)

auth_router = APIRouter()


def get_user_repository(client: DataClient = Depends(get_data_client)) -> UserRepository:
    return UserRepository(client)


@auth_router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_auth_rate_limit)],
    summary="Register new user account",
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Missing fields or user already exists"},
        429: {"description": "Too many registration attempts"},
    },
)
async def register(
    registration_data: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
    security: SecurityManager = Depends(get_security_manager),
) -> Dict[str, Any]:
    """
    Register a new user account.

    Args:
        registration_data: Email, password, name and optional phone
        users: User repository
        security: Password hashing and token service

    Returns:
        Dict: Success message, the new user (without password hash) and a token

    Raises:
        ValidationError: Required field missing (400)
        DuplicateResourceError: Email already registered (400)
    """
    if not registration_data.email or not registration_data.password or not registration_data.name:
        raise ValidationError("Email, password, and name are required")

    try:
        existing = await users.get_by_email(registration_data.email)
        if existing:
            logger.warning(f"Registration attempt with existing email: {registration_data.email}")
            raise DuplicateResourceError("User already exists", resource_type="user")

        now = utc_now_iso()
        user = await users.create({
            "email": registration_data.email,
            "password_hash": security.get_password_hash(registration_data.password),
            "name": registration_data.name,
            "phone": registration_data.phone or None,
            "created_at": now,
            "updated_at": now,
        })
    except HarvestHubException:
        raise
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise DatabaseError("Internal server error") from e

    token = security.create_access_token(user)
    logger.info(f"✅ User registered successfully: {user.get('id')}")

    return {
        "success": True,
        "message": "User registered successfully",
        "user": public_user(user),
        "token": token,
    }


@auth_router.post(
    "/login",
    dependencies=[Depends(enforce_auth_rate_limit)],
    summary="User login",
    responses={
        200: {"description": "Login successful"},
        401: {"description": "Invalid credentials"},
        429: {"description": "Too many login attempts"},
    },
)
async def login(
    login_data: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
    security: SecurityManager = Depends(get_security_manager),
) -> Dict[str, Any]:
    """
    Authenticate with email and password.

    Unknown emails and wrong passwords produce the same 401 so the response
    does not reveal which accounts exist.
    """
    if not login_data.email or not login_data.password:
        raise ValidationError("Email and password are required")

    try:
        user = await users.get_by_email(login_data.email)
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise DatabaseError("Internal server error") from e

    if not user or not security.verify_password(login_data.password, user.get("password_hash")):
        logger.warning(f"Failed login attempt for: {login_data.email}")
        raise AuthenticationError("Invalid credentials", error_code="INVALID_CREDENTIALS")

    token = security.create_access_token(user)
    logger.info(f"✅ User logged in: {user.get('id')}")

    return {
        "success": True,
        "message": "Login successful",
        "user": public_user(user),
        "token": token,
    }


@auth_router.get("/me", summary="Get current user")
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> Dict[str, Any]:
    try:
        user = await users.get_by_id(current_user.id, columns=ME_COLUMNS)
    except Exception as e:
        logger.error(f"Get user error: {e}")
        raise DatabaseError("Internal server error") from e

    if user is None:
        raise NotFoundError("User not found", resource_type="user", resource_id=str(current_user.id))

    return {"success": True, "user": user}


@auth_router.post("/logout", summary="User logout")
async def logout() -> Dict[str, Any]:
    """
    Tokens are stateless; logging out means the client discards its token.
    """
    return {"success": True, "message": "Logged out successfully"}
