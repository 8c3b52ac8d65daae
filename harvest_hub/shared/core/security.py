"""
Security utilities for JWT issuance/validation and password hashing.
Provides the token service and password hashing service used by the auth routes.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Union

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..config.settings import Settings, get_settings
from .exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)


class TokenData(BaseModel):
    """Token payload data structure"""
    id: Union[int, str]
    email: str
    name: str
    exp: Optional[int] = None
    iat: Optional[int] = None


class SecurityManager:
    """
    Centralized security manager for authentication.
    Handles JWT tokens and bcrypt password hashing.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.algorithm = self.settings.JWT_ALGORITHM
        self.secret_key = self.settings.JWT_SECRET_KEY
        self.token_expire_days = self.settings.JWT_EXPIRE_DAYS
        # A random salt is generated per hash by the bcrypt scheme
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self.settings.BCRYPT_ROUNDS,
        )

    def create_access_token(
        self,
        user: Mapping[str, Any],
        expires_delta: Optional[timedelta] = None,
        issued_at: Optional[datetime] = None
    ) -> str:
        """
        Create JWT access token carrying the user's id, email and name.

        Args:
            user: User row (or any mapping) with id, email and name
            expires_delta: Custom lifetime, defaults to JWT_EXPIRE_DAYS
            issued_at: Issue time, defaults to now

        Returns:
            str: Encoded JWT token
        """
        issued = issued_at or datetime.now(timezone.utc)
        lifetime = expires_delta or timedelta(days=self.token_expire_days)

        to_encode = {
            "id": user["id"],
            "email": user["email"],
            "name": user["name"],
            "iat": int(issued.timestamp()),
            "exp": int((issued + lifetime).timestamp()),
        }

        encoded_jwt = jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Access token created for user: {user['id']}")
        return encoded_jwt

    def verify_token(self, token: str) -> TokenData:
        """
        Verify and decode JWT token.

        Args:
            token: JWT token to verify

        Returns:
            TokenData: Decoded identity claims

        Raises:
            TokenExpiredError: If the token is past its expiry
            InvalidTokenError: If the signature or claims are invalid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.warning("Token has expired")
            raise TokenExpiredError()
        except JWTError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise InvalidTokenError()

        try:
            token_data = TokenData(**payload)
        except PydanticValidationError:
            logger.warning("Token is missing identity claims")
            raise InvalidTokenError()

        logger.debug(f"Token verified successfully for user: {token_data.id}")
        return token_data

    def get_password_hash(self, password: str) -> str:
        """
        Hash password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            str: Hashed password
        """
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """
        Verify password against hash.

        Args:
            plain_password: Plain text password
            hashed_password: Stored hashed password

        Returns:
            bool: True if password matches
        """
        if not hashed_password:
            return False
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.error(f"Password verification error: {e}")
            return False
