# 📄 File: harvest_hub/modules/crop_management/api.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for keeping track of what is growing: planting new crops, checking
# on them, recording progress, marking them as shared, and removing them.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router for crop CRUD. Crops are created only in gardens the caller owns, and
# updates/deletes are single conditional statements on (id, user_id) so a crop owned by
# someone else is indistinguishable from a missing one.
#
# 🔗 Dependencies:
# - FastAPI router, status codes, Depends
# - harvest_hub.modules.crop_management.repository (CropRepository)
# - harvest_hub.modules.garden_management.repository (GardenRepository for ownership)
# - harvest_hub.shared.core.dependencies (get_current_user, get_data_client)
#
# 🔄 Connected Modules / Calls From:
# - harvest_hub.api.router (mounted under /api/crops)

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from harvest_hub.modules.crop_management.repository import (
    DEFAULT_CATEGORY,
    DEFAULT_PROGRESS,
    DEFAULT_QUANTITY,
    DEFAULT_STATUS,
    CropRepository,
)
from harvest_hub.modules.crop_management.schemas import (
    KEEP_ON_EMPTY_FIELDS,
    CropCreateRequest,
    CropUpdateRequest,
)
from harvest_hub.modules.garden_management.repository import GardenRepository
from harvest_hub.shared.core.dependencies import CurrentUser, get_current_user, get_data_client
from harvest_hub.shared.core.exceptions import DatabaseError, NotFoundError, ValidationError
from harvest_hub.shared.infrastructure.database.client import DataClient
from harvest_hub.shared.utils.helpers import merge_update, utc_now_iso

logger = logging.getLogger(__name__)

crop_router = APIRouter()

GARDEN_ACCESS_DENIED = "Garden not found or access denied"
CROP_ACCESS_DENIED = "Crop not found or access denied"


def get_crop_repository(client: DataClient = Depends(get_data_client)) -> CropRepository:
    return CropRepository(client)


def get_garden_repository(client: DataClient = Depends(get_data_client)) -> GardenRepository:
    return GardenRepository(client)


@crop_router.get("", summary="List crops")
async def list_crops(
    current_user: CurrentUser = Depends(get_current_user),
    crops: CropRepository = Depends(get_crop_repository),
) -> Dict[str, Any]:
    try:
        rows = await crops.list_for_user(current_user.id)
    except Exception as e:
        logger.error(f"Get crops error: {e}")
        raise DatabaseError("Failed to fetch crops") from e

    return {"success": True, "count": len(rows), "crops": rows}


@crop_router.get("/garden/{garden_id}", summary="List crops in a garden")
async def list_garden_crops(
    garden_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    crops: CropRepository = Depends(get_crop_repository),
    gardens: GardenRepository = Depends(get_garden_repository),
) -> Dict[str, Any]:
    """Crops of one garden, after checking that the caller owns the garden."""
    try:
        garden = await gardens.get_owned(garden_id, current_user.id, columns="id")
        rows = await crops.list_for_garden(garden_id, current_user.id) if garden else []
    except Exception as e:
        logger.error(f"Get garden crops error: {e}")
        raise DatabaseError("Failed to fetch garden crops") from e

    if garden is None:
        raise NotFoundError(GARDEN_ACCESS_DENIED, resource_type="garden", resource_id=garden_id)

    return {"success": True, "count": len(rows), "crops": rows}


@crop_router.get("/{crop_id}", summary="Get crop")
async def get_crop(
    crop_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    crops: CropRepository = Depends(get_crop_repository),
) -> Dict[str, Any]:
    try:
        crop = await crops.get_owned(crop_id, current_user.id)
    except Exception as e:
        logger.error(f"Get crop error: {e}")
        raise DatabaseError("Failed to fetch crop") from e

    if crop is None:
        raise NotFoundError("Crop not found", resource_type="crop", resource_id=crop_id)

    return {"success": True, "crop": crop}


@crop_router.post("", status_code=status.HTTP_201_CREATED, summary="Create crop")
async def create_crop(
    payload: CropCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    crops: CropRepository = Depends(get_crop_repository),
    gardens: GardenRepository = Depends(get_garden_repository),
) -> Dict[str, Any]:
    """
    Plant a crop in one of the caller's gardens.

    Raises:
        ValidationError: name or garden_id missing (400)
        NotFoundError: garden missing or owned by someone else (404)
    """
    if not payload.name or not payload.garden_id:
        raise ValidationError("Crop name and garden ID are required")

    try:
        garden = await gardens.get_owned(payload.garden_id, current_user.id, columns="id")
    except Exception as e:
        logger.error(f"Create crop error: {e}")
        raise DatabaseError("Failed to create crop") from e

    if garden is None:
        raise NotFoundError(GARDEN_ACCESS_DENIED, resource_type="garden", resource_id=str(payload.garden_id))

    data = payload.model_dump(mode="json")
    now = utc_now_iso()
    values = {
        "garden_id": payload.garden_id,
        "user_id": current_user.id,
        "name": payload.name,
        "category": payload.category or DEFAULT_CATEGORY,
        "variety": payload.variety or None,
        "planting_date": data["planting_date"],
        "expected_harvest": data["expected_harvest"],
        "status": payload.status or DEFAULT_STATUS,
        "progress": payload.progress or DEFAULT_PROGRESS,
        "notes": payload.notes or None,
        "image_url": payload.image_url or None,
        "is_shared": bool(payload.is_shared),
        "quantity": payload.quantity or DEFAULT_QUANTITY,
        "quantity_unit": payload.quantity_unit or None,
        "created_at": now,
        "updated_at": now,
    }

    try:
        crop = await crops.create(values)
    except Exception as e:
        logger.error(f"Create crop error: {e}")
        raise DatabaseError("Failed to create crop") from e

    return {"success": True, "message": "Crop created successfully", "crop": crop}


@crop_router.put("/{crop_id}", summary="Update crop")
async def update_crop(
    crop_id: str,
    payload: CropUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    crops: CropRepository = Depends(get_crop_repository),
) -> Dict[str, Any]:
    """
    Apply a partial update to an owned crop.

    Only fields present in the body are written. Empty `name`, `category`
    or `status` keep the stored value.
    """
    values = merge_update(payload, keep_on_falsy=KEEP_ON_EMPTY_FIELDS)
    values["updated_at"] = utc_now_iso()

    try:
        crop = await crops.update_owned(crop_id, current_user.id, values)
    except Exception as e:
        logger.error(f"Update crop error: {e}")
        raise DatabaseError("Failed to update crop") from e

    if crop is None:
        raise NotFoundError(CROP_ACCESS_DENIED, resource_type="crop", resource_id=crop_id)

    return {"success": True, "message": "Crop updated successfully", "crop": crop}


@crop_router.delete("/{crop_id}", summary="Delete crop")
async def delete_crop(
    crop_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    crops: CropRepository = Depends(get_crop_repository),
) -> Dict[str, Any]:
    try:
        crop = await crops.delete_owned(crop_id, current_user.id)
    except Exception as e:
        logger.error(f"Delete crop error: {e}")
        raise DatabaseError("Failed to delete crop") from e

    if crop is None:
        raise NotFoundError(CROP_ACCESS_DENIED, resource_type="crop", resource_id=crop_id)

    return {"success": True, "message": "Crop deleted successfully"}
