# 📄 File: harvest_hub/modules/user_management/repository.py
# 🧭 Purpose (Layman Explanation):
# Handles all database work for user accounts: finding a user by email or id, creating
# new accounts, saving profile changes, and removing an account with everything it owns.
# 🧪 Purpose (Technical Summary):
# User repository over the generic DataClient, with column projections that never expose
# password hashes and an explicit crops -> gardens -> user cascade on account deletion.
# 🔗 Dependencies:
# harvest_hub.shared.infrastructure.database (DataClient, filters, QueryResult)
# 🔄 Connected Modules / Calls From:
# Auth routes (register, login, me), profile routes

"""
User Repository

Features:
- Email and id lookups
- Unique-email violations surfaced as DuplicateResourceError
- Conditional profile updates that report a missing user as None
- Account deletion that removes crops and gardens before the user row
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from harvest_hub.shared.core.exceptions import DuplicateResourceError
from harvest_hub.shared.infrastructure.database.client import DataClient, QueryFailure, Row, eq

logger = logging.getLogger(__name__)

UserId = Union[int, str]

USERS_TABLE = "users"
GARDENS_TABLE = "gardens"
CROPS_TABLE = "crops"

# Column projections
ME_COLUMNS = "id, email, name, phone, created_at, updated_at"
PROFILE_COLUMNS = (
    "id, email, name, phone, created_at, profile_image_url, "
    "bio, location, garden_name, garden_size"
)
IMAGE_COLUMNS = "id, email, name, profile_image_url"

PRIVATE_FIELDS = ("password_hash",)


def public_user(row: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    """Copy of a user row with password material removed."""
    if row is None:
        return None
    return {key: value for key, value in row.items() if key not in PRIVATE_FIELDS}


def project(row: Optional[Mapping[str, Any]], columns: str) -> Optional[Dict[str, Any]]:
    """Restrict a row to a comma separated column list."""
    if row is None:
        return None
    wanted = [column.strip() for column in columns.split(",")]
    return {column: row.get(column) for column in wanted}


class UserRepository:
    """
    Data access for the users table.

    Query failures are raised as DatabaseError by QueryResult.rows_or_raise;
    "no such user" is reported as None.
    """

    def __init__(self, client: DataClient):
        self._client = client

    async def get_by_email(self, email: str) -> Optional[Row]:
        """Full user row (including password hash) for the given email."""
        result = await self._client.select(USERS_TABLE, filters=[eq("email", email)], limit=1)
        rows = result.rows_or_raise("Failed to look up user")
        return rows[0] if rows else None

    async def get_by_id(self, user_id: UserId, columns: str = ME_COLUMNS) -> Optional[Row]:
        result = await self._client.select(USERS_TABLE, columns=columns, filters=[eq("id", user_id)], limit=1)
        rows = result.rows_or_raise("Failed to fetch user")
        return public_user(rows[0]) if rows else None

    async def create(self, values: Mapping[str, Any]) -> Row:
        """
        Insert a user row.

        Raises:
            DuplicateResourceError: Email already registered
            DatabaseError: Any other store failure
        """
        result = await self._client.insert(USERS_TABLE, values)
        if isinstance(result, QueryFailure) and result.is_unique_violation:
            logger.warning(f"User creation failed - email already exists: {values.get('email')}")
            raise DuplicateResourceError("User already exists", resource_type="user")

        rows = result.rows_or_raise("Error creating user")
        logger.info(f"Created user with ID: {rows[0].get('id')}")
        return rows[0]

    async def update(self, user_id: UserId, values: Mapping[str, Any]) -> Optional[Row]:
        """Apply values to the user; None when the user does not exist."""
        result = await self._client.update(USERS_TABLE, values, filters=[eq("id", user_id)])
        rows = result.rows_or_raise("Failed to update user")
        return public_user(rows[0]) if rows else None

    async def delete_account(self, user_id: UserId) -> bool:
        """
        Delete the user and everything it owns.

        Crops go first, then gardens, then the user row, so the cascade holds
        whether or not the store enforces it with foreign keys.
        """
        owner = [eq("user_id", user_id)]

        crops = await self._client.delete(CROPS_TABLE, filters=owner)
        crops.rows_or_raise("Failed to delete crops")

        gardens = await self._client.delete(GARDENS_TABLE, filters=owner)
        gardens.rows_or_raise("Failed to delete gardens")

        users = await self._client.delete(USERS_TABLE, filters=[eq("id", user_id)])
        deleted = users.rows_or_raise("Failed to delete user")

        logger.info(
            f"Deleted user {user_id} with {len(gardens.rows)} garden(s) and {len(crops.rows)} crop(s)"
        )
        return bool(deleted)
