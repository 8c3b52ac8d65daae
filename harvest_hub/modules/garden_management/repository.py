# 📄 File: harvest_hub/modules/garden_management/repository.py
# 🧭 Purpose (Layman Explanation):
# Handles the database work for gardens, always making sure people only ever see or
# change gardens that belong to them.
# 🧪 Purpose (Technical Summary):
# Garden repository over the generic DataClient. Ownership is part of every single-row
# query: updates and deletes are conditional on (id, user_id) so the ownership check and
# the write happen in one statement.
# 🔗 Dependencies:
# harvest_hub.shared.infrastructure.database (DataClient, eq)
# 🔄 Connected Modules / Calls From:
# Garden routes, crop routes (garden ownership), profile routes (garden summaries)

import logging
from typing import Any, List, Mapping, Optional, Union

from harvest_hub.shared.infrastructure.database.client import DataClient, Row, eq

logger = logging.getLogger(__name__)

Id = Union[int, str]

GARDENS_TABLE = "gardens"
CROPS_TABLE = "crops"

SUMMARY_COLUMNS = "id, name, type, size, location"

DEFAULT_GARDEN_TYPE = "outdoor"
DEFAULT_GARDEN_SIZE = "medium"


class GardenRepository:
    """Data access for the gardens table, scoped to an owning user."""

    def __init__(self, client: DataClient):
        self._client = client

    @staticmethod
    def _owned(garden_id: Id, user_id: Id):
        return [eq("id", garden_id), eq("user_id", user_id)]

    async def list_for_user(self, user_id: Id, columns: str = "*") -> List[Row]:
        """Gardens owned by the user, newest first."""
        result = await self._client.select(
            GARDENS_TABLE,
            columns=columns,
            filters=[eq("user_id", user_id)],
            order_by="created_at",
        )
        return result.rows_or_raise("Failed to fetch gardens")

    async def get_owned(self, garden_id: Id, user_id: Id, columns: str = "*") -> Optional[Row]:
        result = await self._client.select(
            GARDENS_TABLE,
            columns=columns,
            filters=self._owned(garden_id, user_id),
            limit=1,
        )
        rows = result.rows_or_raise("Failed to fetch garden")
        return rows[0] if rows else None

    async def create(self, values: Mapping[str, Any]) -> Row:
        result = await self._client.insert(GARDENS_TABLE, values)
        rows = result.rows_or_raise("Failed to create garden")
        logger.info(f"Created garden {rows[0].get('id')} for user {values.get('user_id')}")
        return rows[0]

    async def update_owned(self, garden_id: Id, user_id: Id, values: Mapping[str, Any]) -> Optional[Row]:
        """Update the garden if the user owns it; None when no row matched."""
        result = await self._client.update(GARDENS_TABLE, values, filters=self._owned(garden_id, user_id))
        rows = result.rows_or_raise("Failed to update garden")
        return rows[0] if rows else None

    async def delete_owned(self, garden_id: Id, user_id: Id) -> Optional[Row]:
        """
        Delete the garden and its crops if the user owns it.

        The crop delete is filtered by the same owner, so it matches nothing
        when the garden belongs to someone else.
        """
        crops = await self._client.delete(
            CROPS_TABLE,
            filters=[eq("garden_id", garden_id), eq("user_id", user_id)],
        )
        crops.rows_or_raise("Failed to delete garden crops")

        result = await self._client.delete(GARDENS_TABLE, filters=self._owned(garden_id, user_id))
        rows = result.rows_or_raise("Failed to delete garden")
        if rows:
            logger.info(f"Deleted garden {garden_id} and {len(crops.rows)} crop(s)")
        return rows[0] if rows else None
