# 📄 File: harvest_hub/modules/user_management/api/profiles.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints behind the profile screen: seeing your own or another gardener's
# profile, editing your details, changing your picture, checking how much produce you
# have shared, and closing your account.
#
# 🧪 Purpose (Technical Summary):
# FastAPI profile endpoints combining user, garden and crop reads into profile
# documents, Pillow-processed image uploads to the media store, and account deletion
# with an explicit crops -> gardens -> user cascade.
#
# 🔗 Dependencies:
# - FastAPI router, UploadFile/File (python-multipart)
# - harvest_hub.shared.infrastructure.storage (MediaStore, prepare_image)
# - harvest_hub.modules.user_management.stats (profile statistics)
# - Garden and crop repositories for the profile sections
#
# 🔄 Connected Modules / Calls From:
# - harvest_hub.api.router (mounted under /api/profile)

"""
Profile API Endpoints

Endpoints:
- GET    /api/profile              Current user's profile with gardens, active crops and impact
- GET    /api/profile/{user_id}    Public profile with crop statistics
- PUT    /api/profile              Update profile fields
- POST   /api/profile/upload-image Upload a profile picture
- DELETE /api/profile/image        Remove the profile picture
- DELETE /api/profile              Delete the account and everything it owns
- GET    /api/profile/stats/impact Sharing impact with 30-day changes

Secondary sections (gardens, crops, sharing history) degrade to empty lists
when their query fails; the user row itself is required.
"""

import logging
from typing import Any, Awaitable, Dict, List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from harvest_hub.modules.crop_management.repository import CropRepository
from harvest_hub.modules.garden_management.repository import SUMMARY_COLUMNS, GardenRepository
from harvest_hub.modules.user_management.repository import (
    IMAGE_COLUMNS,
    PROFILE_COLUMNS,
    UserRepository,
    project,
)
from harvest_hub.modules.user_management.schemas import ProfileUpdateRequest
from harvest_hub.modules.user_management.stats import (
    crop_stats,
    sharing_impact,
    sharing_impact_with_changes,
)
from harvest_hub.shared.config.settings import Settings
from harvest_hub.shared.core.dependencies import (
    CurrentUser,
    get_app_settings,
    get_current_user,
    get_data_client,
    get_media_store,
)
from harvest_hub.shared.core.exceptions import (
    DatabaseError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from harvest_hub.shared.infrastructure.database.client import DataClient
from harvest_hub.shared.infrastructure.storage.supabase_storage import (
    MediaStore,
    prepare_image,
    public_id_from_url,
)
from harvest_hub.shared.utils.helpers import merge_update, utc_now_iso

logger = logging.getLogger(__name__)

profile_router = APIRouter()


def get_user_repository(client: DataClient = Depends(get_data_client)) -> UserRepository:
    return UserRepository(client)


def get_garden_repository(client: DataClient = Depends(get_data_client)) -> GardenRepository:
    return GardenRepository(client)


def get_crop_repository(client: DataClient = Depends(get_data_client)) -> CropRepository:
    return CropRepository(client)


async def _section(query: Awaitable[List[Dict[str, Any]]], label: str) -> List[Dict[str, Any]]:
    """Run a secondary profile query, logging failures as an empty section."""
    try:
        return await query
    except DatabaseError as e:
        logger.error(f"Error fetching {label}: {e.message}")
        return []


async def _load_profile_user(users: UserRepository, user_id) -> Dict[str, Any]:
    try:
        user = await users.get_by_id(user_id, columns=PROFILE_COLUMNS)
    except Exception as e:
        logger.error(f"Get profile error: {e}")
        raise DatabaseError("Failed to fetch profile") from e

    if user is None:
        raise NotFoundError("User not found", resource_type="user", resource_id=str(user_id))
    return user


async def _remove_stored_image(media: MediaStore, image_url: Optional[str], folder: str) -> None:
    """Best-effort removal of a stored image; failures are logged only."""
    public_id = public_id_from_url(image_url)
    if not public_id:
        return
    try:
        await media.destroy(public_id, folder)
    except StorageError as e:
        logger.error(f"Media delete error for {public_id}: {e.message}")


@profile_router.get("", summary="Get current user's profile")
async def get_current_profile(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    gardens: GardenRepository = Depends(get_garden_repository),
    crops: CropRepository = Depends(get_crop_repository),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Current user's profile with gardens, active crops, sharing history and
    sharing impact.
    """
    user = await _load_profile_user(users, current_user.id)

    garden_rows = await _section(gardens.list_for_user(current_user.id, columns=SUMMARY_COLUMNS), "gardens")
    active_crops = await _section(crops.list_active(current_user.id), "crops")
    history = await _section(crops.list_shared_history(current_user.id), "sharing history")
    stats_rows = await _section(crops.list_stats_rows(current_user.id), "crop statistics")

    return {
        "success": True,
        "profile": {
            **user,
            "impact": sharing_impact(stats_rows, settings.CO2_SAVED_PER_KG),
            "gardens": garden_rows,
            "activeCrops": active_crops,
            "sharingHistory": history,
        },
    }


@profile_router.get("/stats/impact", summary="Get sharing impact")
async def get_impact_stats(
    current_user: CurrentUser = Depends(get_current_user),
    crops: CropRepository = Depends(get_crop_repository),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Produce shared, neighbours helped and CO2 saved, with the amount each
    grew over the last 30 days.
    """
    try:
        rows = await crops.list_stats_rows(current_user.id)
    except Exception as e:
        logger.error(f"Get impact stats error: {e}")
        raise DatabaseError("Failed to fetch impact stats") from e

    return {"success": True, "impact": sharing_impact_with_changes(rows, settings.CO2_SAVED_PER_KG)}


@profile_router.get("/{user_id}", summary="Get a user's public profile")
async def get_profile(
    user_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    crops: CropRepository = Depends(get_crop_repository),
) -> Dict[str, Any]:
    user = await _load_profile_user(users, user_id)

    stats_rows = await _section(crops.list_stats_rows(user_id), "crops")
    history = await _section(crops.list_shared_history(user_id), "sharing history")

    return {
        "success": True,
        "profile": {
            **user,
            "stats": crop_stats(stats_rows),
            "sharingHistory": history,
        },
    }


@profile_router.put("", summary="Update profile")
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
) -> Dict[str, Any]:
    """
    Update the current user's profile.

    An empty `name` keeps the stored name; bio, location, garden_name and
    garden_size are written whenever present.
    """
    values = merge_update(payload, keep_on_falsy=("name",))
    values["updated_at"] = utc_now_iso()

    try:
        user = await users.update(current_user.id, values)
    except Exception as e:
        logger.error(f"Update profile error: {e}")
        raise DatabaseError("Failed to update profile") from e

    if user is None:
        raise NotFoundError("User not found", resource_type="user", resource_id=str(current_user.id))

    return {
        "success": True,
        "message": "Profile updated successfully",
        "user": project(user, PROFILE_COLUMNS),
    }


@profile_router.post("/upload-image", summary="Upload profile image")
async def upload_profile_image(
    image: Optional[UploadFile] = File(None),
    current_user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    media: MediaStore = Depends(get_media_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Upload a profile picture.

    The image is validated and shrunk to fit PROFILE_IMAGE_MAX_DIMENSION
    before upload; its public URL is stored on the user.

    Raises:
        ValidationError: No file, unreadable, oversized or disallowed format (400)
        StorageError: Media store rejected the upload (500)
    """
    if image is None:
        raise ValidationError("No image file provided", field="image")

    data = await image.read()
    prepared = prepare_image(
        data,
        allowed_formats=settings.allowed_image_formats,
        max_dimension=settings.PROFILE_IMAGE_MAX_DIMENSION,
        max_size=settings.MAX_IMAGE_SIZE,
    )

    try:
        image_url = await media.upload(prepared, settings.PROFILE_IMAGE_FOLDER)
    except StorageError as e:
        logger.error(f"Upload image error: {e.message}")
        raise

    try:
        user = await users.update(
            current_user.id,
            {"profile_image_url": image_url, "updated_at": utc_now_iso()},
        )
    except Exception as e:
        logger.error(f"Upload image error: {e}")
        await _remove_stored_image(media, image_url, settings.PROFILE_IMAGE_FOLDER)
        raise DatabaseError("Failed to upload image") from e

    if user is None:
        await _remove_stored_image(media, image_url, settings.PROFILE_IMAGE_FOLDER)
        raise NotFoundError("User not found", resource_type="user", resource_id=str(current_user.id))

    logger.info(f"📷 Profile image uploaded for user {current_user.id} ({prepared.width}x{prepared.height})")
    return {
        "success": True,
        "message": "Profile image uploaded successfully",
        "imageUrl": image_url,
        "user": project(user, IMAGE_COLUMNS),
    }


@profile_router.delete("/image", summary="Remove profile image")
async def delete_profile_image(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    media: MediaStore = Depends(get_media_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Remove the profile picture from the media store and clear it on the user.

    A failed remote delete is logged and the column is cleared regardless.
    """
    try:
        stored = await users.get_by_id(current_user.id, columns="profile_image_url")
    except DatabaseError as e:
        logger.error(f"Fetch user error: {e.message}")
        stored = None

    if stored and stored.get("profile_image_url"):
        await _remove_stored_image(media, stored["profile_image_url"], settings.PROFILE_IMAGE_FOLDER)

    try:
        user = await users.update(
            current_user.id,
            {"profile_image_url": None, "updated_at": utc_now_iso()},
        )
    except Exception as e:
        logger.error(f"Remove profile image error: {e}")
        raise DatabaseError("Failed to remove profile image") from e

    if user is None:
        raise NotFoundError("User not found", resource_type="user", resource_id=str(current_user.id))

    return {
        "success": True,
        "message": "Profile image removed successfully",
        "user": project(user, IMAGE_COLUMNS),
    }


@profile_router.delete("", summary="Delete account")
async def delete_account(
    current_user: CurrentUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    media: MediaStore = Depends(get_media_store),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    """
    Delete the current user's account.

    The profile image is removed best-effort, then the user's crops,
    gardens and finally the user row.
    """
    try:
        stored = await users.get_by_id(current_user.id, columns="profile_image_url")
    except DatabaseError as e:
        logger.error(f"Fetch user error: {e.message}")
        stored = None

    if stored and stored.get("profile_image_url"):
        await _remove_stored_image(media, stored["profile_image_url"], settings.PROFILE_IMAGE_FOLDER)

    try:
        deleted = await users.delete_account(current_user.id)
    except Exception as e:
        logger.error(f"Delete account error: {e}")
        raise DatabaseError("Failed to delete account") from e

    if not deleted:
        raise NotFoundError("User not found", resource_type="user", resource_id=str(current_user.id))

    logger.info(f"🗑️ Account deleted for user {current_user.id}")
    return {"success": True, "message": "Account deleted successfully"}
