# 📄 File: harvest_hub/modules/garden_management/api.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints people use to list, view, add, rename and remove their gardens.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router for garden CRUD. Every route requires a bearer token; all queries are
# scoped to the authenticated owner and another user's garden is reported as not found.
#
# 🔗 Dependencies:
# - FastAPI router, status codes, Depends
# - harvest_hub.modules.garden_management.repository (GardenRepository)
# - harvest_hub.shared.core.dependencies (get_current_user, get_data_client)
#
# 🔄 Connected Modules / Calls From:
# - harvest_hub.api.router (mounted under /api/gardens)

"""
Garden API Endpoints

Endpoints:
- GET    ""           List the owner's gardens, newest first
- GET    /{garden_id} Fetch one garden
- POST   ""           Create a garden
- PUT    /{garden_id} Update a garden (conditional on ownership)
- DELETE /{garden_id} Delete a garden and its crops (conditional on ownership)
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from harvest_hub.modules.garden_management.repository import (
    DEFAULT_GARDEN_SIZE,
    DEFAULT_GARDEN_TYPE,
    GardenRepository,
)
from harvest_hub.modules.garden_management.schemas import (
    KEEP_ON_EMPTY_FIELDS,
    GardenCreateRequest,
    GardenUpdateRequest,
)
from harvest_hub.shared.core.dependencies import CurrentUser, get_current_user, get_data_client
from harvest_hub.shared.core.exceptions import DatabaseError, NotFoundError, ValidationError
from harvest_hub.shared.infrastructure.database.client import DataClient
from harvest_hub.shared.utils.helpers import merge_update, utc_now_iso

logger = logging.getLogger(__name__)

garden_router = APIRouter()


def get_garden_repository(client: DataClient = Depends(get_data_client)) -> GardenRepository:
    return GardenRepository(client)


@garden_router.get("", summary="List gardens")
async def list_gardens(
    current_user: CurrentUser = Depends(get_current_user),
    gardens: GardenRepository = Depends(get_garden_repository),
) -> Dict[str, Any]:
    try:
        rows = await gardens.list_for_user(current_user.id)
    except Exception as e:
        logger.error(f"Get gardens error: {e}")
        raise DatabaseError("Failed to fetch gardens") from e

    return {"success": True, "count": len(rows), "gardens": rows}


@garden_router.get("/{garden_id}", summary="Get garden")
async def get_garden(
    garden_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    gardens: GardenRepository = Depends(get_garden_repository),
) -> Dict[str, Any]:
    try:
        garden = await gardens.get_owned(garden_id, current_user.id)
    except Exception as e:
        logger.error(f"Get garden error: {e}")
        raise DatabaseError("Failed to fetch garden") from e

    if garden is None:
        raise NotFoundError("Garden not found", resource_type="garden", resource_id=garden_id)

    return {"success": True, "garden": garden}


@garden_router.post("", status_code=status.HTTP_201_CREATED, summary="Create garden")
async def create_garden(
    payload: GardenCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    gardens: GardenRepository = Depends(get_garden_repository),
) -> Dict[str, Any]:
    """
    Create a garden for the current user.

    `type` and `size` default to "outdoor" and "medium" when not supplied.
    """
    if not payload.name:
        raise ValidationError("Garden name is required", field="name")

    now = utc_now_iso()
    values = {
        "user_id": current_user.id,
        "name": payload.name,
        "location": payload.location or None,
        "type": payload.type or DEFAULT_GARDEN_TYPE,
        "size": payload.size or DEFAULT_GARDEN_SIZE,
        "description": payload.description or None,
        "created_at": now,
        "updated_at": now,
    }

    try:
        garden = await gardens.create(values)
    except Exception as e:
        logger.error(f"Create garden error: {e}")
        raise DatabaseError("Failed to create garden") from e

    return {"success": True, "message": "Garden created successfully", "garden": garden}


@garden_router.put("/{garden_id}", summary="Update garden")
async def update_garden(
    garden_id: str,
    payload: GardenUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    gardens: GardenRepository = Depends(get_garden_repository),
) -> Dict[str, Any]:
    """
    Apply a partial update to an owned garden.

    Empty `name`, `type` or `size` keep the stored value; other supplied
    fields are written as given.
    """
    values = merge_update(payload, keep_on_falsy=KEEP_ON_EMPTY_FIELDS)
    values["updated_at"] = utc_now_iso()

    try:
        garden = await gardens.update_owned(garden_id, current_user.id, values)
    except Exception as e:
        logger.error(f"Update garden error: {e}")
        raise DatabaseError("Failed to update garden") from e

    if garden is None:
        raise NotFoundError("Garden not found or access denied", resource_type="garden", resource_id=garden_id)

    return {"success": True, "message": "Garden updated successfully", "garden": garden}


@garden_router.delete("/{garden_id}", summary="Delete garden")
async def delete_garden(
    garden_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    gardens: GardenRepository = Depends(get_garden_repository),
) -> Dict[str, Any]:
    try:
        garden = await gardens.delete_owned(garden_id, current_user.id)
    except Exception as e:
        logger.error(f"Delete garden error: {e}")
        raise DatabaseError("Failed to delete garden") from e

    if garden is None:
        raise NotFoundError("Garden not found or access denied", resource_type="garden", resource_id=garden_id)

    logger.info(f"🌱 Garden {garden_id} deleted by user {current_user.id}")
    return {"success": True, "message": "Garden deleted successfully"}
