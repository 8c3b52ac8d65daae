# 📄 File: harvest_hub/modules/crop_management/repository.py
# 🧭 Purpose (Layman Explanation):
# Handles the database work for crops: what is planted where, how it is growing, and
# what has been shared with neighbours.
# 🧪 Purpose (Technical Summary):
# Crop repository over the generic DataClient with owner-scoped reads and conditional
# (id, user_id) writes, plus the projections used by the profile pages.
# 🔗 Dependencies:
# harvest_hub.shared.infrastructure.database (DataClient, eq, neq)
# 🔄 Connected Modules / Calls From:
# Crop routes, profile routes

import logging
from typing import Any, List, Mapping, Optional, Union

from harvest_hub.shared.infrastructure.database.client import DataClient, Row, eq, neq

logger = logging.getLogger(__name__)

Id = Union[int, str]

CROPS_TABLE = "crops"

# Crop with its garden's name and location embedded under "gardens"
DETAIL_COLUMNS = "*, gardens(name, location)"
STATS_COLUMNS = "id, name, status, progress, is_shared, quantity, quantity_unit, created_at"
HISTORY_COLUMNS = "id, name, image_url, created_at"
ACTIVE_COLUMNS = "id, name, category, status, progress, image_url"

HARVEST_STATUS = "harvest"
RECENT_LIMIT = 5

DEFAULT_CATEGORY = "vegetable"
DEFAULT_STATUS = "seedling"
DEFAULT_PROGRESS = 0
DEFAULT_QUANTITY = 1


class CropRepository:
    """Data access for the crops table, scoped to an owning user."""

    def __init__(self, client: DataClient):
        self._client = client

    @staticmethod
    def _owned(crop_id: Id, user_id: Id):
        return [eq("id", crop_id), eq("user_id", user_id)]

    async def list_for_user(self, user_id: Id) -> List[Row]:
        result = await self._client.select(
            CROPS_TABLE, filters=[eq("user_id", user_id)], order_by="created_at"
        )
        return result.rows_or_raise("Failed to fetch crops")

    async def list_for_garden(self, garden_id: Id, user_id: Id) -> List[Row]:
        result = await self._client.select(
            CROPS_TABLE,
            filters=[eq("garden_id", garden_id), eq("user_id", user_id)],
            order_by="created_at",
        )
        return result.rows_or_raise("Failed to fetch garden crops")

    async def get_owned(self, crop_id: Id, user_id: Id, columns: str = DETAIL_COLUMNS) -> Optional[Row]:
        result = await self._client.select(
            CROPS_TABLE, columns=columns, filters=self._owned(crop_id, user_id), limit=1
        )
        rows = result.rows_or_raise("Failed to fetch crop")
        return rows[0] if rows else None

    async def create(self, values: Mapping[str, Any]) -> Row:
        result = await self._client.insert(CROPS_TABLE, values)
        rows = result.rows_or_raise("Failed to create crop")
        logger.info(f"Created crop {rows[0].get('id')} in garden {values.get('garden_id')}")
        return rows[0]

    async def update_owned(self, crop_id: Id, user_id: Id, values: Mapping[str, Any]) -> Optional[Row]:
        """Update the crop if the user owns it; None when no row matched."""
        result = await self._client.update(CROPS_TABLE, values, filters=self._owned(crop_id, user_id))
        rows = result.rows_or_raise("Failed to update crop")
        return rows[0] if rows else None

    async def delete_owned(self, crop_id: Id, user_id: Id) -> Optional[Row]:
        result = await self._client.delete(CROPS_TABLE, filters=self._owned(crop_id, user_id))
        rows = result.rows_or_raise("Failed to delete crop")
        return rows[0] if rows else None

    # =========================================================================
    # PROFILE PROJECTIONS
    # =========================================================================

    async def list_stats_rows(self, user_id: Id) -> List[Row]:
        """Every crop of the user, reduced to the columns statistics need."""
        result = await self._client.select(
            CROPS_TABLE, columns=STATS_COLUMNS, filters=[eq("user_id", user_id)]
        )
        return result.rows_or_raise("Failed to fetch crop statistics")

    async def list_shared_history(self, user_id: Id, limit: int = RECENT_LIMIT) -> List[Row]:
        result = await self._client.select(
            CROPS_TABLE,
            columns=HISTORY_COLUMNS,
            filters=[eq("user_id", user_id), eq("is_shared", True)],
            order_by="created_at",
            limit=limit,
        )
        return result.rows_or_raise("Failed to fetch sharing history")

    async def list_active(self, user_id: Id, limit: int = RECENT_LIMIT) -> List[Row]:
        """Newest crops that have not been harvested yet."""
        result = await self._client.select(
            CROPS_TABLE,
            columns=ACTIVE_COLUMNS,
            filters=[eq("user_id", user_id), neq("status", HARVEST_STATUS)],
            order_by="created_at",
            limit=limit,
        )
        return result.rows_or_raise("Failed to fetch active crops")
