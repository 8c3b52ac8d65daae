# 📄 File: harvest_hub/shared/infrastructure/storage/supabase_storage.py

# 🧭 Purpose (Layman Explanation):
# This file handles sending profile pictures to cloud storage, shrinking them first so they
# load quickly, and removing them again when a user changes or deletes their picture.

# 🧪 Purpose (Technical Summary):
# Media upload adapter over Supabase Storage with Pillow-based validation and resizing,
# deterministic public URL generation, and public-identifier parsing for deletions.

# 🔗 Dependencies:
# - supabase: Async storage client
# - PIL (Pillow): Image validation and resizing
# - uuid: Unique object names

# 🔄 Connected Modules / Calls From:
# Called by: profile upload/delete routes, account deletion
# Connects to: Supabase cloud storage bucket configured by SUPABASE_STORAGE_BUCKET

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import uuid4

from PIL import Image, ImageOps, UnidentifiedImageError
from supabase import AsyncClient

from harvest_hub.shared.config.settings import Settings
from harvest_hub.shared.core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)

# Pillow format name -> (file extension, MIME type)
IMAGE_FORMATS = {
    "JPEG": ("jpg", "image/jpeg"),
    "PNG": ("png", "image/png"),
    "WEBP": ("webp", "image/webp"),
    "GIF": ("gif", "image/gif"),
}

FORMAT_ALIASES = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
    "gif": "GIF",
}


@dataclass(frozen=True)
class PreparedImage:
    """Image bytes ready for upload."""
    content: bytes
    content_type: str
    extension: str
    width: int
    height: int


def prepare_image(
    data: bytes,
    allowed_formats: Iterable[str],
    max_dimension: int,
    max_size: int,
) -> PreparedImage:
    """
    Validate an uploaded image and shrink it to fit inside max_dimension.

    Images already within bounds are never enlarged. Animated GIFs are
    passed through untouched.

    Raises:
        ValidationError: Empty, oversized, unreadable or disallowed image
    """
    if not data:
        raise ValidationError("No image file provided", field="image")

    if len(data) > max_size:
        raise ValidationError(
            f"Image exceeds maximum size of {max_size} bytes",
            field="image",
            details={"size": len(data), "max_size": max_size},
        )

    allowed = {FORMAT_ALIASES[fmt] for fmt in allowed_formats if fmt in FORMAT_ALIASES}

    try:
        image = Image.open(io.BytesIO(data))
        image_format = image.format
    except UnidentifiedImageError:
        raise ValidationError("Uploaded file is not a valid image", field="image")

    if image_format not in allowed:
        raise ValidationError(
            f"Image format {image_format} is not allowed",
            field="image",
            details={"allowed_formats": sorted(allowed)},
        )

    extension, content_type = IMAGE_FORMATS[image_format]

    if image_format == "GIF" and getattr(image, "is_animated", False):
        return PreparedImage(data, content_type, extension, image.width, image.height)

    image = ImageOps.exif_transpose(image)
    image.thumbnail((max_dimension, max_dimension))

    if image_format == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    buffer = io.BytesIO()
    save_options = {"quality": 85} if image_format in ("JPEG", "WEBP") else {}
    image.save(buffer, format=image_format, **save_options)

    return PreparedImage(
        content=buffer.getvalue(),
        content_type=content_type,
        extension=extension,
        width=image.width,
        height=image.height,
    )


def public_id_from_url(url: Optional[str]) -> Optional[str]:
    """
    Extract the object's public identifier (its file name) from a public URL.

    >>> public_id_from_url("https://x.supabase.co/storage/v1/object/public/b/profiles/abc.jpg?t=1")
    'abc.jpg'
    """
    if not url:
        return None
    public_id = url.split("?")[0].rstrip("/").split("/")[-1]
    return public_id or None


class MediaStore(ABC):
    """Remote image store reachable over upload/destroy calls."""

    @abstractmethod
    async def upload(self, image: PreparedImage, folder: str) -> str:
        """Store the image and return its public URL."""

    @abstractmethod
    async def destroy(self, public_id: str, folder: str) -> None:
        """Remove a previously uploaded image."""


class SupabaseMediaStore(MediaStore):
    """MediaStore backed by a public Supabase Storage bucket."""

    def __init__(self, client: AsyncClient, settings: Settings):
        self._client = client
        self.bucket_name = settings.SUPABASE_STORAGE_BUCKET
        self.public_base_url = settings.supabase_storage_public_url

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{self.bucket_name}/{path}"

    async def upload(self, image: PreparedImage, folder: str) -> str:
        path = f"{folder}/{uuid4().hex}.{image.extension}"
        try:
            await self._client.storage.from_(self.bucket_name).upload(
                path=path,
                file=image.content,
                file_options={"content-type": image.content_type, "upsert": "true"},
            )
        except Exception as e:
            logger.error(f"Failed to upload file {path}: {e}")
            raise StorageError("Failed to upload image", operation="upload") from e

        logger.info(f"File uploaded successfully: {path}")
        return self.public_url(path)

    async def destroy(self, public_id: str, folder: str) -> None:
        path = f"{folder}/{public_id}"
        try:
            await self._client.storage.from_(self.bucket_name).remove([path])
        except Exception as e:
            logger.error(f"Failed to delete file {path}: {e}")
            raise StorageError("Failed to delete image", operation="destroy") from e

        logger.info(f"File deleted successfully: {path}")
